"""Block facade: hydration, validation, saving and user actions."""

from __future__ import annotations

import asyncio
import re

import pytest

from src.maker_media.domain.models import GalleryState, GalleryStyle, MediaEntry, MediaFile
from src.maker_media.exceptions import ConfigurationError, UploadTransportError
from src.maker_media.tool import UPLOAD_FAILED_MESSAGE, MakerMediaTool, PasteEvent
from src.maker_media.uploads.tracker import UploadOutcome
from tests.mocks.collaborators import ControlledUploader, ImmediateUploader, success_response

pytestmark = pytest.mark.unit


def make_tool(surface, notifier, *, data=None, config=None, uploader=None, **kwargs) -> MakerMediaTool:
    return MakerMediaTool(
        surface=surface,
        notifier=notifier,
        data=data,
        config=config,
        uploader=uploader or ImmediateUploader(),
        **kwargs,
    )


def file_urls(tool: MakerMediaTool) -> list[str]:
    return [entry.url for entry in tool.collection]


def test_hydrate_truncates_initial_files_at_max_count(surface, notifier) -> None:
    data = {"files": [{"url": f"https://cdn.test/{index}"} for index in range(5)]}

    tool = make_tool(surface, notifier, data=data, config={"maxElementCount": 3})

    assert file_urls(tool) == [f"https://cdn.test/{index}" for index in range(3)]
    assert len(surface.entry_views) == 3
    assert surface.affordance_visible is False
    assert surface.limit_counter == (3, 3)


def test_hydrate_skips_files_without_url_and_keeps_extra_fields(surface, notifier) -> None:
    data = {
        "files": [{"url": "https://cdn.test/a", "width": 10}, {"name": "broken"}, None],
        "caption": "Holiday",
        "style": "gallery",
    }

    tool = make_tool(surface, notifier, data=data)

    assert tool.data.files == [MediaEntry(url="https://cdn.test/a", extra={"width": 10})]
    assert tool.style.current is GalleryStyle.GALLERY
    assert surface.caption_text == "Holiday"


def test_hydrate_defaults_unknown_style_to_slider(surface, notifier) -> None:
    tool = make_tool(surface, notifier, data={"style": "mosaic"})

    assert tool.style.current is GalleryStyle.SLIDER
    assert tool.caption == ""


def test_hydrate_resets_previous_state(surface, notifier) -> None:
    tool = make_tool(surface, notifier, data={"files": [{"url": "a"}, {"url": "b"}]})

    tool.data = GalleryState(files=[MediaEntry(url="c")], caption="new")

    assert file_urls(tool) == ["c"]
    assert tool.caption == "new"


def test_rehydrating_to_empty_restores_add_button(surface, notifier) -> None:
    tool = make_tool(
        surface, notifier, data={"files": [{"url": "a"}]}, config={"maxElementCount": 1}
    )
    assert surface.affordance_visible is False

    tool.data = {"files": []}

    assert len(tool.collection) == 0
    assert surface.affordance_visible is True
    assert surface.limit_counter == (0, 1)


def test_validate_requires_files() -> None:
    assert MakerMediaTool.validate({"files": []}) is False
    assert MakerMediaTool.validate({}) is False
    assert MakerMediaTool.validate({"files": [{"url": "x"}]}) is True
    assert MakerMediaTool.validate(GalleryState(files=[MediaEntry(url="x")])) is True


def test_save_reads_caption_from_surface(surface, notifier) -> None:
    tool = make_tool(
        surface,
        notifier,
        data={"files": [{"url": "a", "alt": "first"}], "caption": "old", "style": "gallery"},
    )
    surface.caption_text = "edited <b>caption</b>"

    saved = tool.save()

    assert saved == {
        "files": [{"url": "a", "alt": "first"}],
        "caption": "edited <b>caption</b>",
        "style": "gallery",
    }
    assert tool.serialize().caption == "edited <b>caption</b>"


def test_render_passes_state_to_surface(surface, notifier) -> None:
    tool = make_tool(surface, notifier, data={"files": [{"url": "a"}]}, read_only=True)

    handle = tool.render()
    tool.rendered()

    assert handle == {"view": "gallery", "read_only": True}
    assert surface.rendered_states[0].files == [MediaEntry(url="a")]
    assert surface.rendered_calls == 1
    assert surface.affordance_visible is False


def test_invalid_config_raises_before_tool_exists(surface, notifier) -> None:
    with pytest.raises(ConfigurationError):
        make_tool(surface, notifier, config={"maxElementCount": "many"})


def test_affordance_tracks_capacity_after_every_mutation(surface, notifier) -> None:
    tool = make_tool(
        surface,
        notifier,
        data={"files": [{"url": "a"}, {"url": "b"}]},
        config={"maxElementCount": 2},
    )
    assert surface.affordance_visible is False

    tool.delete_file(0)
    assert surface.affordance_visible is True
    assert surface.limit_counter == (1, 2)

    tool.append_image(MediaEntry(url="c"))
    assert surface.affordance_visible is False

    tool.move_file(1, 0)
    assert file_urls(tool) == ["c", "b"]
    assert surface.affordance_visible is False


def test_stale_delete_is_silent(surface, notifier) -> None:
    tool = make_tool(surface, notifier, data={"files": [{"url": "a"}, {"url": "b"}]})

    tool.delete_file(1)
    tool.delete_file(1)

    assert file_urls(tool) == ["a"]
    assert notifier.messages == []


@pytest.mark.asyncio
async def test_three_concurrent_uploads_with_max_two(surface, notifier) -> None:
    uploader = ControlledUploader()
    tool = make_tool(surface, notifier, config={"maxElementCount": 2}, uploader=uploader)

    first = tool.tracker.start_batch([MediaFile("a", b"1"), MediaFile("b", b"2")])
    second = tool.tracker.start_batch([MediaFile("c", b"3")])
    await asyncio.sleep(0)

    for key in ("c", "a", "b"):
        uploader.succeed(key)
        await asyncio.sleep(0)
    outcomes = await asyncio.gather(*first, *second)

    assert len(tool.collection) == 2
    assert outcomes.count(UploadOutcome.DROPPED) == 1
    assert notifier.messages == []
    assert surface.affordance_visible is False
    assert surface.placeholders == {}


@pytest.mark.asyncio
async def test_failed_upload_notifies_once_and_keeps_count(surface, notifier) -> None:
    uploader = ImmediateUploader(responses={"a": {"success": False}})
    tool = make_tool(surface, notifier, config={"maxElementCount": 3}, uploader=uploader)
    surface.affordance_history.clear()

    outcomes = await tool.select_files([MediaFile("a", b"1")])

    assert outcomes == [UploadOutcome.FAILED]
    assert len(tool.collection) == 0
    assert notifier.messages == [{"message": UPLOAD_FAILED_MESSAGE, "style": "error"}]
    assert surface.affordance_history == [True]
    assert surface.placeholders == {}


@pytest.mark.asyncio
async def test_select_files_commits_and_renders_entries(surface, notifier) -> None:
    uploader = ImmediateUploader(
        responses={
            "a": success_response("https://cdn.test/a", name="a.png"),
            "b": UploadTransportError("timeout"),
        }
    )
    tool = make_tool(surface, notifier, uploader=uploader)

    await tool.select_files([MediaFile("a", b"1"), MediaFile("b", b"2")])

    assert tool.save()["files"] == [{"url": "https://cdn.test/a", "name": "a.png"}]
    assert surface.entry_views == [MediaEntry(url="https://cdn.test/a", extra={"name": "a.png"})]
    assert len(notifier.messages) == 1


@pytest.mark.asyncio
async def test_read_only_ignores_user_mutations(surface, notifier) -> None:
    uploader = ImmediateUploader(responses={"a": success_response("https://cdn.test/a")})
    tool = make_tool(
        surface,
        notifier,
        data={"files": [{"url": "x"}, {"url": "y"}]},
        uploader=uploader,
        read_only=True,
    )

    assert await tool.select_files([MediaFile("a", b"1")]) == []
    assert await tool.on_paste(PasteEvent(kind="pattern", data="https://img.test/a.png")) == []
    tool.move_file(0, 1)
    tool.delete_file(0)

    assert file_urls(tool) == ["x", "y"]
    assert tool.validate(tool.save()) is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("event", "expected_source"),
    [
        (PasteEvent(kind="tag", data={"src": "https://img.test/tag.png"}), "https://img.test/tag.png"),
        (PasteEvent(kind="pattern", data="https://img.test/p.jpg"), "https://img.test/p.jpg"),
        (PasteEvent(kind="file", data=MediaFile("f.png", b"1", "image/png")), "f.png"),
    ],
)
async def test_paste_routes_through_upload_path(surface, notifier, event, expected_source) -> None:
    uploader = ImmediateUploader(responses={expected_source: success_response("https://cdn.test/p")})
    tool = make_tool(surface, notifier, uploader=uploader)

    outcomes = await tool.on_paste(event)

    assert outcomes == [UploadOutcome.COMMITTED]
    assert file_urls(tool) == ["https://cdn.test/p"]


@pytest.mark.asyncio
async def test_paste_rejects_files_outside_accepted_types(surface, notifier) -> None:
    tool = make_tool(surface, notifier)

    outcomes = await tool.on_paste(PasteEvent(kind="file", data=MediaFile("a.pdf", b"1", "application/pdf")))

    assert outcomes == []
    assert surface.placeholders == {}


@pytest.mark.asyncio
async def test_paste_respects_capacity(surface, notifier) -> None:
    tool = make_tool(surface, notifier, data={"files": [{"url": "a"}]}, config={"maxElementCount": 1})

    outcomes = await tool.on_paste(PasteEvent(kind="pattern", data="https://img.test/p.jpg"))

    assert outcomes == []
    assert file_urls(tool) == ["a"]


@pytest.mark.asyncio
async def test_destroy_ignores_late_uploads(surface, notifier) -> None:
    uploader = ControlledUploader()
    tool = make_tool(surface, notifier, uploader=uploader)

    tasks = tool.tracker.start_batch([MediaFile("a", b"1")])
    await asyncio.sleep(0)
    tool.destroy()
    uploader.fail("a", UploadTransportError("late"))
    outcomes = await asyncio.gather(*tasks)

    assert outcomes == [UploadOutcome.IGNORED]
    assert notifier.messages == []


def test_tune_clicks_toggle_style(surface, notifier) -> None:
    tool = make_tool(surface, notifier, data={"style": "slider"})

    tool.tune_clicked("gallery")
    buttons = {button.name: button.active for button in tool.render_settings()}

    assert tool.save()["style"] == "gallery"
    assert buttons == {"slider": False, "gallery": True}


def test_toolbox_and_paste_config_metadata() -> None:
    assert MakerMediaTool.is_read_only_supported is True
    assert MakerMediaTool.toolbox["title"] == "Media"
    paste_config = MakerMediaTool.paste_config()
    assert paste_config["tags"] == ["img"]
    assert paste_config["files"]["mimeTypes"] == ["image/*"]


def test_exported_paste_pattern_matches_any_extension_case() -> None:
    pattern = re.compile(MakerMediaTool.paste_config()["patterns"]["image"])

    assert pattern.match("https://img.test/photo.PNG")
    assert pattern.match("http://img.test/photo.Jpeg?w=100")
    assert not pattern.match("https://img.test/document.pdf")
