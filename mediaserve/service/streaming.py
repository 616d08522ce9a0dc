"""Chunked emission of a validated StreamPlan.

The body is produced by an async generator over an already-open file, so
peak memory per request is one chunk no matter how large the window is.
"""
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

import anyio
from anyio import AsyncFile
from fastapi.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

from ..domain.errors import StreamIOError
from ..domain.media import guess_media_type
from ..domain.ranges import StreamPlan
from ..logging_conf import get_logger

__all__ = [
    "CHUNK_SIZE",
    "open_plan",
    "iter_file_range",
    "FileStreamResponse",
    "build_response",
]

CHUNK_SIZE = 1024 * 1024  # 1 MiB

logger = get_logger("service.streaming")


async def open_plan(plan: StreamPlan) -> AsyncFile[bytes]:
    """Open the planned file for reading before any response bytes are sent."""
    try:
        return await anyio.open_file(plan.path.path, "rb")
    except OSError as e:
        logger.exception(
            "stream.open_failed",
            extra={"event": "stream_open_failed", "path": plan.path.relative},
        )
        raise StreamIOError(f"cannot open {plan.path.relative}: {e}") from e


async def iter_file_range(
    handle: AsyncFile[bytes],
    offset: int,
    length: int,
    *,
    chunk_size: int = CHUNK_SIZE,
    name: str = "",
) -> AsyncGenerator[bytes, None]:
    """Yield exactly `length` bytes starting at `offset`, then close `handle`.

    - Short reads are retried for the remainder; only an empty read before
      `length` is reached counts as failure (StreamIOError).
    - If the consumer stops early (client disconnect) the generator is closed
      or cancelled at its next await; that is logged, not raised.
    """
    sent = 0
    failed = False
    try:
        try:
            if offset:
                await handle.seek(offset)
            while sent < length:
                chunk = await handle.read(min(chunk_size, length - sent))
                if not chunk:
                    failed = True
                    logger.error(
                        "stream.io_error",
                        extra={
                            "event": "stream_io_error",
                            "path": name,
                            "sent": sent,
                            "expected": length,
                            "reason": "unexpected end of file",
                        },
                    )
                    raise StreamIOError(f"{name}: file ended after {sent} of {length} bytes")
                sent += len(chunk)
                yield chunk
        except OSError as e:
            failed = True
            logger.exception(
                "stream.io_error",
                extra={"event": "stream_io_error", "path": name, "sent": sent, "expected": length},
            )
            raise StreamIOError(f"{name}: read failed after {sent} bytes") from e
    finally:
        # Closing must survive the cancellation that may have brought us here.
        with anyio.CancelScope(shield=True):
            await handle.aclose()
        if sent < length and not failed:
            logger.info(
                "stream.aborted",
                extra={"event": "stream_aborted", "path": name, "sent": sent, "expected": length},
            )


class FileStreamResponse(StreamingResponse):
    """StreamingResponse that owns an open file and always releases it.

    Closing inside the body generator is not enough: a generator that never
    started (client gone before the first chunk) skips its `finally`.
    """

    def __init__(
        self, body: AsyncGenerator[bytes, None], handle: AsyncFile[bytes], **kwargs: Any
    ) -> None:
        super().__init__(body, **kwargs)
        self._body = body
        self._handle = handle

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            with anyio.CancelScope(shield=True):
                await self._body.aclose()
                await self._handle.aclose()


def build_response(plan: StreamPlan, handle: AsyncFile[bytes]) -> FileStreamResponse:
    """Frame the plan as a 200 or 206 response streaming from `handle`."""
    headers = {
        "Accept-Ranges": "bytes",
        "Content-Length": str(plan.length),
    }
    if plan.range is not None:
        headers["Content-Range"] = plan.range.content_range(plan.total_size)

    body = iter_file_range(handle, plan.offset, plan.length, name=plan.path.relative)
    return FileStreamResponse(
        body,
        handle,
        status_code=plan.status_code,
        headers=headers,
        media_type=guess_media_type(plan.path.path),
    )
