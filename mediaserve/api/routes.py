from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import HTMLResponse, StreamingResponse

from ..domain.errors import MediaError, RangeNotSatisfiableError
from ..logging_conf import get_logger
from ..service.media_service import MediaService
from .models import ErrorResponse

router = APIRouter()
logger = get_logger("api")

# Client-error log event per error code
_EVENTS = {
    "forbidden": "path.forbidden",
    "not_found": "path.not_found",
    "malformed_range": "range.malformed",
    "range_not_satisfiable": "range.unsatisfiable",
}

_ERROR_RESPONSES = {
    code: {"model": ErrorResponse} for code in (400, 403, 404, 416, 500)
}


def get_media_service(request: Request) -> MediaService:
    """Return the MediaService bound to this application."""
    return request.app.state.media_service


def to_http_error(exc: MediaError) -> HTTPException:
    """Map a domain error to an HTTPException with a generic message."""
    headers = None
    if isinstance(exc, RangeNotSatisfiableError):
        headers = {"Content-Range": exc.content_range}
    return HTTPException(
        status_code=exc.status_code,
        detail={"error_code": exc.code, "error_message": exc.public_message},
        headers=headers,
    )


@router.get("/", response_class=HTMLResponse, summary="Browse available videos")
async def index(service: MediaService = Depends(get_media_service)) -> HTMLResponse:
    """List the video files under the media root."""
    return HTMLResponse(await service.listing())


@router.get(
    "/{file_path:path}",
    response_class=StreamingResponse,
    responses=_ERROR_RESPONSES,
    summary="Stream a file, honouring a single byte range",
)
async def stream_file(
    file_path: str,
    range_header: str | None = Header(default=None, alias="Range"),
    service: MediaService = Depends(get_media_service),
) -> StreamingResponse:
    """Serve the whole file (200) or the requested `bytes=start-[end]` window (206)."""
    try:
        plan = await service.plan(file_path, range_header)
        return await service.stream(plan)
    except MediaError as exc:
        if exc.status_code >= 500:
            logger.error(
                "request.io_failure",
                extra={"event": "io_failure", "error": str(exc)},
            )
        else:
            logger.info(
                _EVENTS.get(exc.code, "request.rejected"),
                extra={"event": exc.code, "error": str(exc)},
            )
        raise to_http_error(exc) from exc
