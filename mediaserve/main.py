"""FastAPI app factory: request logging, health endpoint and media routes."""
from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from . import __version__
from .api import router as media_router
from .api.models import HealthResponse
from .config import ServerConfig
from .logging_conf import bind_request_id, get_logger, reset_request_id, setup_logging
from .service.media_service import MediaService

logger = get_logger("app")


def create_app(config: ServerConfig | None = None) -> FastAPI:
    """Build an application bound to one media root.

    With no config, settings come from the environment (MEDIA_ROOT, PORT, ...).
    """
    config = config or ServerConfig.from_env()
    setup_logging(config.log_level)

    app = FastAPI(title="Media Range Server", version=__version__)
    app.state.config = config
    app.state.media_service = MediaService(config.root_dir)

    @app.on_event("startup")
    async def _on_startup() -> None:
        logger.info(
            "startup",
            extra={"event": "startup", "root_dir": str(config.root_dir), "port": config.port},
        )

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        logger.info("shutdown", extra={"event": "shutdown"})

    @app.middleware("http")
    async def request_logger(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Log start/end of every request and propagate X-Request-ID.

        The end event fires once headers are ready; streamed bodies may still
        be in flight.
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id
        # Every log line below, including those from the route, carries the id.
        token = bind_request_id(request_id)
        try:
            start = time.perf_counter()
            logger.info(
                "request.start",
                extra={
                    "event": "request_start",
                    "method": request.method,
                    "path": request.url.path,
                    "range": request.headers.get("range"),
                },
            )
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "request.error",
                    extra={
                        "event": "request_error",
                        "path": request.url.path,
                        "method": request.method,
                    },
                )
                raise
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000.0

            response.headers["X-Request-ID"] = request_id
            logger.info(
                "request.end",
                extra={
                    "event": "request_end",
                    "status_code": response.status_code,
                    "elapsed_ms": round(elapsed_ms, 2),
                },
            )
            return response
        finally:
            reset_request_id(token)

    @app.get("/health", response_model=HealthResponse, summary="Liveness check")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    # Catch-all file route: must come after /health.
    app.include_router(media_router)

    return app
