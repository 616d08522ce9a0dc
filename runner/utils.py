from __future__ import annotations

from pathlib import Path

from runner.types import CheckResult, SmokeError


def percentile(values: list[float], p: float) -> float:
    """Compute the p-th percentile using linear interpolation."""
    if not values:
        return 0.0
    s = sorted(values)
    k = (len(s) - 1) * p
    f = int(k)
    c = min(f + 1, len(s) - 1)
    if f == c:
        return s[f]
    d0 = s[f] * (c - k)
    d1 = s[c] * (k - f)
    return d0 + d1


def collect_fixtures(fixtures_dir: Path) -> list[Path]:
    """Return every regular file below the fixtures directory, sorted."""
    if not fixtures_dir.is_dir():
        raise SmokeError(f"fixtures directory not found: {fixtures_dir}")
    files = sorted(p for p in fixtures_dir.rglob("*") if p.is_file())
    if not files:
        raise SmokeError(f"no fixture files under {fixtures_dir}")
    return files


def split_disjoint(size: int, parts: int) -> list[tuple[int, int]]:
    """Cut `[0, size)` into at most `parts` contiguous inclusive windows.

    Every byte is covered exactly once; small files yield fewer windows.
    """
    if size <= 0 or parts <= 0:
        return []
    parts = min(parts, size)
    step, extra = divmod(size, parts)
    out: list[tuple[int, int]] = []
    start = 0
    for i in range(parts):
        length = step + (1 if i < extra else 0)
        out.append((start, start + length - 1))
        start += length
    return out


def summarize(results: list[CheckResult]) -> tuple[dict, int]:
    """Compute summary dict and an exit code from check results."""
    durations = [r.elapsed_ms for r in results]
    per_check: dict[str, dict[str, int]] = {}
    failures: list[dict] = []

    for r in results:
        bucket = per_check.setdefault(r.check, {"passed": 0, "failed": 0})
        if r.ok:
            bucket["passed"] += 1
        else:
            bucket["failed"] += 1
            failures.append(
                {
                    "path": r.path,
                    "check": r.check,
                    "status_code": r.status_code,
                    "detail": r.detail,
                }
            )

    passed = sum(1 for r in results if r.ok)
    avg_ms = (sum(durations) / len(durations)) if durations else 0.0
    summary = {
        "component": "runner",
        "event": "summary",
        "checks": len(results),
        "passed": passed,
        "failed": len(results) - passed,
        "timings": {
            "avg_ms": round(avg_ms, 2),
            "p95_ms": round(percentile(durations, 0.95), 2),
            "max_ms": round(max(durations) if durations else 0.0, 2),
        },
        "per_check": per_check,
        "failures": failures,
    }
    exit_code = 0 if (results and not failures) else 1
    return summary, exit_code
