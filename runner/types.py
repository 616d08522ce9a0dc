from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CheckResult:
    """Outcome of one request made against the server during the smoke run."""

    path: str
    check: str
    ok: bool
    status_code: int | None
    elapsed_ms: float
    detail: str = ""


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., health never ready)."""


class FetchError(SmokeError):
    """Raised when a GET keeps failing at the transport level after retries."""
