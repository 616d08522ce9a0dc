from __future__ import annotations

import stat
from pathlib import Path

import anyio
import anyio.to_thread
from fastapi.responses import StreamingResponse

from ..domain.errors import NotFoundError, StreamIOError
from ..domain.paths import ResolvedPath, canonical_root, resolve_path
from ..domain.ranges import StreamPlan, plan_stream
from ..logging_conf import get_logger
from .listing import collect_videos, render_listing
from .streaming import build_response, open_plan

logger = get_logger("service.media")


class MediaService:
    """Serves files below one read-only root directory.

    Built once per application from configuration; holds no per-request state,
    so concurrent requests share it freely.
    """

    def __init__(self, root_dir: str | Path) -> None:
        self.root = canonical_root(root_dir)

    def resolve(self, request_path: str) -> ResolvedPath:
        return resolve_path(self.root, request_path)

    async def plan(self, request_path: str, range_header: str | None) -> StreamPlan:
        """Resolve, stat and validate a request into a StreamPlan.

        Raises:
            ForbiddenPathError: the path escapes the root.
            NotFoundError: nothing there, or not a regular file.
            MalformedRangeError / RangeNotSatisfiableError: bad Range header.
            StreamIOError: stat failed for another reason.
        """
        resolved = self.resolve(request_path)
        try:
            st = await anyio.Path(resolved.path).stat()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(f"no such file: {resolved.relative}") from e
        except OSError as e:
            logger.exception(
                "file.stat_failed",
                extra={"event": "file_stat_failed", "path": resolved.relative},
            )
            raise StreamIOError(f"cannot stat {resolved.relative}") from e

        if not stat.S_ISREG(st.st_mode):
            raise NotFoundError(f"not a regular file: {resolved.relative}")

        return plan_stream(resolved, st.st_size, range_header)

    async def stream(self, plan: StreamPlan) -> StreamingResponse:
        """Open the planned file and wrap it in a streaming response."""
        handle = await open_plan(plan)
        logger.info(
            "stream.start",
            extra={
                "event": "stream_start",
                "path": plan.path.relative,
                "status_code": plan.status_code,
                "offset": plan.offset,
                "length": plan.length,
                "total_size": plan.total_size,
            },
        )
        return build_response(plan, handle)

    async def listing(self) -> str:
        """Render the HTML index, walking the tree off the event loop."""
        files = await anyio.to_thread.run_sync(collect_videos, self.root)
        return render_listing(files)
