"""Configuration for the Maker Media block.

Two layers are exposed:

* :class:`GalleryConfig` holds per-block options supplied by the host editor.
  It accepts the camelCase keys used in editor configuration files
  (``maxElementCount``, ``captionPlaceholder`` ...) as well as snake_case names.
* :class:`TransportSettings` carries process-wide transport defaults read from
  ``MAKER_MEDIA_*`` environment variables.
"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Endpoints(BaseModel):
    """Backend endpoints used by the default uploader."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    by_file: str | None = Field(default=None, alias="byFile")
    by_url: str | None = Field(default=None, alias="byUrl")


class TuneAction(BaseModel):
    """Custom block tune rendered next to the style tunes."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    title: str | None = None

    @property
    def label(self) -> str:
        return self.title or self.name


class GalleryConfig(BaseModel):
    """Options recognised by the tool; every option is optional."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    endpoints: Endpoints = Field(default_factory=Endpoints)
    field: str = Field(default="image", min_length=1)
    types: str = "image/*"
    caption_placeholder: str = Field(default="Gallery caption", alias="captionPlaceholder")
    additional_request_data: dict[str, Any] = Field(
        default_factory=dict, alias="additionalRequestData"
    )
    additional_request_headers: dict[str, str] = Field(
        default_factory=dict, alias="additionalRequestHeaders"
    )
    button_content: str = Field(default="", alias="buttonContent")
    uploader: Any = None
    actions: list[TuneAction] = Field(default_factory=list)
    max_element_count: int | None = Field(default=None, ge=1, alias="maxElementCount")

    @field_validator("endpoints", mode="before")
    @classmethod
    def _empty_endpoints(cls, value: Any) -> Any:
        return value or {}

    @field_validator("field", "types", "caption_placeholder", mode="before")
    @classmethod
    def _blank_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value in (None, ""):
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("actions", mode="before")
    @classmethod
    def _action_names(cls, value: Any) -> Any:
        if not value:
            return []
        return [{"name": item} if isinstance(item, str) else item for item in value]

    @field_validator("max_element_count", mode="before")
    @classmethod
    def _unset_max(cls, value: Any) -> Any:
        # 0 and empty values mean "no limit".
        return value or None

    def accepts(self, content_type: str | None) -> bool:
        """Return ``True`` when ``content_type`` matches one of ``types``."""

        if not content_type:
            return False
        patterns = [item.strip() for item in self.types.split(",") if item.strip()]
        return any(fnmatch(content_type, pattern) for pattern in patterns)


class TransportSettings(BaseSettings):
    """Environment driven defaults shared by every block instance."""

    model_config = SettingsConfigDict(env_prefix="MAKER_MEDIA_")

    request_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout applied to upload requests in seconds.",
    )
    dev_media_root: Path = Field(
        default=Path("./var/media"),
        description="Directory where the development upload server stores files.",
    )
    dev_public_base_url: str = Field(
        default="http://localhost:8008",
        description="Base URL the development server uses for returned file URLs.",
    )


def load_config(raw: Mapping[str, Any] | GalleryConfig | None = None) -> GalleryConfig:
    """Parse host supplied options, raising :class:`ConfigurationError` on bad input."""

    if isinstance(raw, GalleryConfig):
        return raw
    try:
        return GalleryConfig.model_validate(dict(raw or {}))
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


__all__ = [
    "Endpoints",
    "GalleryConfig",
    "TransportSettings",
    "TuneAction",
    "load_config",
]
