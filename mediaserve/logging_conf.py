"""Logging configuration for the media server.

Emits one JSON object per line on stdout, which keeps container logs greppable.
setup_logging() is idempotent: repeated calls never stack handlers.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from logging import Handler, LogRecord
from typing import Any

_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Correlation id of the request being served; set by the HTTP middleware and
# inherited by the tasks that stream the body.
_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def bind_request_id(request_id: str) -> Token[str | None]:
    """Tag every log line emitted in this context with `request_id`."""
    return _request_id.set(request_id)


def reset_request_id(token: Token[str | None]) -> None:
    _request_id.reset(token)


def current_request_id() -> str | None:
    return _request_id.get()


# Attributes every LogRecord carries; anything else arrived through `extra`.
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }
)


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line.

    - Always includes ts, level, logger and message.
    - Structured fields passed via ``logger.info("msg", extra={...})`` are merged in.
    - The current request id, when one is bound, is added as `request_id`.
    - Values that are not JSON-native (paths, enums) are stringified.
    """

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
        }

        msg = record.msg
        if isinstance(msg, dict):
            payload.update(msg)
        else:
            payload["message"] = record.getMessage()

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            # Core keys win over extras with the same name
            if key not in payload:
                payload[key] = value

        # Lines logged while streaming a body still point back at their request
        request_id = _request_id.get()
        if request_id is not None and "request_id" not in payload:
            payload["request_id"] = request_id

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _make_stream_handler(level: int) -> Handler:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    return handler


def _normalize_level(level: str | int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(level: str | int = _DEFAULT_LEVEL) -> None:
    """Configure root and uvicorn loggers for JSON output.

    Idempotent: only attaches a handler if the root logger has none.
    """
    root = logging.getLogger()
    level = _normalize_level(level)

    if root.handlers:  # Already configured (reload, tests, embedding app)
        return

    root.setLevel(level)
    root.addHandler(_make_stream_handler(level))

    # Route uvicorn's own loggers through the root handler.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger.

    Usage: logger = get_logger("service.streaming")
    """
    return logging.getLogger(name if name else __name__)
