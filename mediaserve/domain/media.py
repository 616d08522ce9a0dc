from __future__ import annotations

import mimetypes
from pathlib import PurePath

__all__ = [
    "DEFAULT_MEDIA_TYPE",
    "VIDEO_EXTENSIONS",
    "guess_media_type",
    "is_video",
]

DEFAULT_MEDIA_TYPE = "application/octet-stream"

VIDEO_EXTENSIONS = frozenset({".mkv", ".mp4", ".avi", ".mov", ".wmv", ".flv", ".webm"})

# Private table so registering container types never touches the global registry.
# Some platforms ship a mime.types without these.
_MIME = mimetypes.MimeTypes()
for _ext, _type in (
    (".mkv", "video/x-matroska"),
    (".webm", "video/webm"),
    (".flv", "video/x-flv"),
    (".wmv", "video/x-ms-wmv"),
    (".mp4", "video/mp4"),
    (".mov", "video/quicktime"),
    (".avi", "video/x-msvideo"),
):
    _MIME.add_type(_type, _ext)


def guess_media_type(path: str | PurePath) -> str:
    """Return the Content-Type for a file name, by extension only."""
    media_type, _ = _MIME.guess_type(PurePath(path).name, strict=False)
    return media_type or DEFAULT_MEDIA_TYPE


def is_video(path: str | PurePath) -> bool:
    return PurePath(path).suffix.lower() in VIDEO_EXTENSIONS
