from __future__ import annotations

import asyncio
import time
from urllib.parse import quote

import httpx

from mediaserve.logging_conf import get_logger
from runner.types import CheckResult, FetchError, SmokeError
from runner.utils import split_disjoint

logger = get_logger("runner.client")


async def wait_for_health(base_url: str, timeout_s: float = 20.0) -> None:
    """Ping /health until it returns ok or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/health")
                if r.status_code == 200 and r.json().get("ok") is True:
                    logger.info("health.ok", extra={"event": "health_ok"})
                    return
            except httpx.HTTPError:
                pass
            await asyncio.sleep(0.25)
    raise SmokeError("Health check did not pass within timeout")


async def fetch(
    client: httpx.AsyncClient, rel_path: str, range_header: str | None = None, *, retries: int = 3
) -> tuple[httpx.Response, float]:
    """GET one file (optionally ranged) and return the response and elapsed ms.

    Transport errors are retried a few times; HTTP statuses are returned as-is
    because the checks assert on them.
    """
    headers = {"Range": range_header} if range_header else {}
    last_err: Exception | None = None
    for attempt in range(retries):
        start = time.perf_counter()
        try:
            r = await client.get("/" + quote(rel_path), headers=headers)
            return r, (time.perf_counter() - start) * 1000.0
        except httpx.TransportError as e:  # pragma: no cover - network flakiness
            last_err = e
            logger.warning(
                "fetch.retry",
                extra={
                    "event": "fetch_retry",
                    "path": rel_path,
                    "range": range_header,
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
    raise FetchError(f"GET {rel_path} failed: {last_err}")


def _expect(
    rel_path: str,
    check: str,
    r: httpx.Response,
    elapsed_ms: float,
    *,
    status: int,
    body: bytes | None = None,
    content_range: str | None = None,
) -> CheckResult:
    problems: list[str] = []
    if r.status_code != status:
        problems.append(f"status {r.status_code} != {status}")
    if content_range is not None and r.headers.get("content-range") != content_range:
        problems.append(f"content-range {r.headers.get('content-range')!r} != {content_range!r}")
    if body is not None:
        if r.content != body:
            problems.append(f"body mismatch ({len(r.content)} bytes vs {len(body)})")
        if r.headers.get("content-length") != str(len(body)):
            problems.append(f"content-length {r.headers.get('content-length')!r} != {len(body)}")
    return CheckResult(
        path=rel_path,
        check=check,
        ok=not problems,
        status_code=r.status_code,
        elapsed_ms=round(elapsed_ms, 2),
        detail="; ".join(problems),
    )


async def check_full(client: httpx.AsyncClient, rel_path: str, data: bytes) -> CheckResult:
    r, ms = await fetch(client, rel_path)
    return _expect(rel_path, "full", r, ms, status=200, body=data)


async def check_open_ended(client: httpx.AsyncClient, rel_path: str, data: bytes) -> CheckResult:
    size = len(data)
    start = size // 2
    r, ms = await fetch(client, rel_path, f"bytes={start}-")
    return _expect(
        rel_path,
        "open_ended",
        r,
        ms,
        status=206,
        body=data[start:],
        content_range=f"bytes {start}-{size - 1}/{size}",
    )


async def check_disjoint(
    client: httpx.AsyncClient, rel_path: str, data: bytes, parts: int
) -> list[CheckResult]:
    """Request disjoint windows concurrently and verify each independently."""
    size = len(data)
    windows = split_disjoint(size, parts)
    responses = await asyncio.gather(
        *(fetch(client, rel_path, f"bytes={s}-{e}") for s, e in windows)
    )
    return [
        _expect(
            rel_path,
            "disjoint",
            r,
            ms,
            status=206,
            body=data[s : e + 1],
            content_range=f"bytes {s}-{e}/{size}",
        )
        for (s, e), (r, ms) in zip(windows, responses)
    ]


async def check_unsatisfiable(client: httpx.AsyncClient, rel_path: str, size: int) -> CheckResult:
    r, ms = await fetch(client, rel_path, f"bytes={size}-")
    return _expect(rel_path, "unsatisfiable", r, ms, status=416, content_range=f"bytes */{size}")
