from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import MalformedRangeError, RangeNotSatisfiableError
from .paths import ResolvedPath

__all__ = [
    "ByteRange",
    "StreamPlan",
    "parse_range_header",
    "plan_stream",
]

# Single range, explicit start, optional end. ASCII digits only: `\d` would
# also admit other Unicode decimal digits.
_RANGE_RE = re.compile(r"bytes=([0-9]+)-([0-9]*)")


@dataclass(frozen=True)
class ByteRange:
    """Inclusive byte window `[start, end]` inside a file of known size."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"invalid byte range {self.start}-{self.end}")

    @classmethod
    def within(cls, start: int, end: int, total_size: int) -> ByteRange:
        """Build a range, refusing anything outside `[0, total_size)`.

        Raises:
            RangeNotSatisfiableError: if the file is empty, either bound is past
                the last byte, or start > end.
        """
        if total_size == 0:
            raise RangeNotSatisfiableError("file is empty", total_size=total_size)
        if start >= total_size or end >= total_size or start > end:
            raise RangeNotSatisfiableError(
                f"bytes {start}-{end} outside 0-{total_size - 1}", total_size=total_size
            )
        return cls(start=start, end=end)

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, total_size: int) -> str:
        return f"bytes {self.start}-{self.end}/{total_size}"


@dataclass(frozen=True)
class StreamPlan:
    """Validated description of the bytes one response will carry."""

    path: ResolvedPath
    total_size: int
    range: ByteRange | None = None

    @property
    def is_partial(self) -> bool:
        return self.range is not None

    @property
    def offset(self) -> int:
        return self.range.start if self.range else 0

    @property
    def length(self) -> int:
        return self.range.length if self.range else self.total_size

    @property
    def status_code(self) -> int:
        return 206 if self.range else 200


def parse_range_header(value: str) -> tuple[int, int | None]:
    """Split `bytes=<start>-[<end>]` into `(start, end)`; `end` may be None.

    Multi-range lists, suffix ranges (`bytes=-500`), other units and stray
    whitespace are all rejected rather than partially honoured.

    Raises:
        MalformedRangeError: if the value does not match the grammar exactly.
    """
    m = _RANGE_RE.fullmatch(value)
    if m is None:
        raise MalformedRangeError(f"unsupported range header {value!r}")
    start_s, end_s = m.groups()
    return int(start_s), (int(end_s) if end_s else None)


def plan_stream(path: ResolvedPath, total_size: int, range_header: str | None) -> StreamPlan:
    """Turn a file size and an optional raw Range header into a StreamPlan.

    Syntax is checked before bounds, so a malformed header on an empty file
    is still a 400, not a 416.
    """
    if range_header is None:
        return StreamPlan(path=path, total_size=total_size)

    start, end = parse_range_header(range_header)
    if end is None:
        end = total_size - 1
    return StreamPlan(
        path=path,
        total_size=total_size,
        range=ByteRange.within(start, end, total_size),
    )
