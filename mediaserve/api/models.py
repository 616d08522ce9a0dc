from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    ok: bool


class ErrorDetail(BaseModel):
    """Body of every client- or server-error response, under `detail`."""
    error_code: str
    error_message: str


class ErrorResponse(BaseModel):
    detail: ErrorDetail
