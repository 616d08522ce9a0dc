#!/usr/bin/env python3
"""End-to-end smoke run against a live media server.

Steps:
- wait for server health
- for every fixture: full GET, open-ended range, concurrent disjoint ranges
- one out-of-bounds range per file, expecting 416
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import httpx

from mediaserve.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import (
    check_disjoint,
    check_full,
    check_open_ended,
    check_unsatisfiable,
    wait_for_health,
)
from runner.types import CheckResult
from runner.utils import collect_fixtures, summarize

setup_logging()
logger = get_logger("runner")


async def _check_file(
    client: httpx.AsyncClient, rel_path: str, data: bytes, parts: int
) -> list[CheckResult]:
    results = [await check_full(client, rel_path, data)]
    if data:
        results.append(await check_open_ended(client, rel_path, data))
        results.extend(await check_disjoint(client, rel_path, data, parts))
    results.append(await check_unsatisfiable(client, rel_path, len(data)))
    return results


async def run_smoke(
    *, base_url: str, fixtures_dir: Path, parts: int = 4, timeout_s: float = 20.0
) -> int:
    await wait_for_health(base_url, timeout_s)
    files = collect_fixtures(fixtures_dir)
    results: list[CheckResult] = []
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        for path in files:
            rel = path.relative_to(fixtures_dir).as_posix()
            results.extend(await _check_file(client, rel, path.read_bytes(), parts))
    summary, exit_code = summarize(results)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            fixtures_dir=Path(args.fixtures),
            parts=args.parts,
            timeout_s=args.timeout,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
