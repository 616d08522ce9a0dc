import httpx
import pytest

from mediaserve.config import ServerConfig
from mediaserve.main import create_app
from runner.client import check_disjoint, check_full, check_open_ended, check_unsatisfiable
from runner.types import CheckResult
from runner.utils import percentile, split_disjoint, summarize


def test_split_disjoint_covers_every_byte_once():
    for size in (1, 2, 7, 100, 1001):
        windows = split_disjoint(size, 4)
        covered = [b for s, e in windows for b in range(s, e + 1)]
        assert covered == list(range(size))
    assert split_disjoint(0, 4) == []
    assert len(split_disjoint(2, 4)) == 2


def test_percentile():
    assert percentile([], 0.95) == 0.0
    assert percentile([5.0], 0.5) == 5.0
    assert percentile([0.0, 10.0], 0.5) == 5.0


def test_summarize_exit_codes():
    ok = CheckResult(path="a", check="full", ok=True, status_code=200, elapsed_ms=1.0)
    bad = CheckResult(path="a", check="disjoint", ok=False, status_code=200, elapsed_ms=3.0, detail="x")
    summary, code = summarize([ok])
    assert code == 0 and summary["passed"] == 1
    summary, code = summarize([ok, bad])
    assert code == 1
    assert summary["per_check"]["disjoint"] == {"passed": 0, "failed": 1}
    assert summary["failures"][0]["detail"] == "x"
    assert summarize([])[1] == 1


@pytest.mark.anyio
async def test_checks_pass_against_the_app(media_root):
    app = create_app(ServerConfig(root_dir=media_root))
    data = (media_root / "subdir" / "sub.mkv").read_bytes()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        results = [
            await check_full(client, "subdir/sub.mkv", data),
            await check_open_ended(client, "subdir/sub.mkv", data),
            *await check_disjoint(client, "subdir/sub.mkv", data, 3),
            await check_unsatisfiable(client, "subdir/sub.mkv", len(data)),
        ]
    assert all(r.ok for r in results), [r.detail for r in results if not r.ok]
    assert len(results) == 6


@pytest.mark.anyio
async def test_check_reports_mismatch(media_root):
    app = create_app(ServerConfig(root_dir=media_root))
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        result = await check_full(client, "test.mkv", b"something else")
    assert not result.ok
    assert "body mismatch" in result.detail
