from dataclasses import dataclass
from pathlib import Path
from typing import Literal

FileCategory = Literal["image", "video", "audio", "unsupported"]

SUPPORTED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})
SUPPORTED_VIDEO_TYPES = frozenset(
    {"video/mp4", "video/webm", "video/mov", "video/quicktime"}
)
SUPPORTED_AUDIO_TYPES = frozenset(
    {
        "audio/wav",
        "audio/x-wav",
        "audio/mp3",
        "audio/mpeg",
        "audio/m4a",
        "audio/ogg",
    }
)


def get_file_category(mime_type: str) -> FileCategory:
    """Map a declared MIME type onto the analysis category that handles it."""
    if mime_type in SUPPORTED_IMAGE_TYPES:
        return "image"
    if mime_type in SUPPORTED_VIDEO_TYPES:
        return "video"
    if mime_type in SUPPORTED_AUDIO_TYPES:
        return "audio"
    return "unsupported"


@dataclass(frozen=True)
class UploadedFile:
    """A request-scoped upload persisted to transient storage."""

    path: Path
    mime_type: str
    size_bytes: int
    original_name: str

    @property
    def category(self) -> FileCategory:
        return get_file_category(self.mime_type)
