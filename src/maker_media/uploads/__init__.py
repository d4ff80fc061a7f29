"""Upload transport and concurrent upload orchestration."""

from .tracker import UploadOutcome, UploadSessionTracker
from .uploader import Uploader, parse_upload_response

__all__ = ["UploadOutcome", "UploadSessionTracker", "Uploader", "parse_upload_response"]
