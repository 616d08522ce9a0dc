from __future__ import annotations

__all__ = [
    "MediaError",
    "ForbiddenPathError",
    "NotFoundError",
    "MalformedRangeError",
    "RangeNotSatisfiableError",
    "StreamIOError",
]


class MediaError(Exception):
    """Base class for per-request failures.

    `code` is the stable machine-readable identifier reported to clients and
    `status_code` the HTTP status the API maps it to. `public_message` is the
    generic text clients see; `str(exc)` may carry detail and is only logged.
    """

    code: str = "media_error"
    status_code: int = 500
    public_message: str = "Request failed"


class ForbiddenPathError(MediaError):
    code = "forbidden"
    status_code = 403
    public_message = "Access denied"


class NotFoundError(MediaError):
    code = "not_found"
    status_code = 404
    public_message = "File not found"


class MalformedRangeError(MediaError):
    code = "malformed_range"
    status_code = 400
    public_message = "Invalid range header"


class RangeNotSatisfiableError(MediaError):
    code = "range_not_satisfiable"
    status_code = 416
    public_message = "Range not satisfiable"

    def __init__(self, message: str, *, total_size: int) -> None:
        super().__init__(message)
        self.total_size = total_size

    @property
    def content_range(self) -> str:
        """Unsatisfied-range form of Content-Range, e.g. ``bytes */1024``."""
        return f"bytes */{self.total_size}"


class StreamIOError(MediaError):
    """Reading the file failed after the request had been validated."""

    code = "io_failure"
    status_code = 500
    public_message = "Error reading file"
