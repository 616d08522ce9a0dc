from pathlib import Path

import anyio
import pytest
from fastapi.testclient import TestClient

from mediaserve.config import ServerConfig
from mediaserve.main import create_app

# 43 bytes; easy to slice by eye in assertions.
SAMPLE = b"fake mkv content for testing range requests"


def pattern(size: int) -> bytes:
    return bytes((i * 31 + 7) % 251 for i in range(size))


@pytest.fixture
def media_root(tmp_path: Path) -> Path:
    root = tmp_path / "media"
    root.mkdir()
    (root / "test.mkv").write_bytes(SAMPLE)
    (root / "movie.mp4").write_bytes(b"fake mp4 content")
    (root / "document.txt").write_bytes(b"not a video file")
    (root / "empty.webm").write_bytes(b"")
    (root / "blob.bin").write_bytes(pattern(3 * 1024 * 1024 + 17))
    sub = root / "subdir"
    sub.mkdir()
    (sub / "sub.mkv").write_bytes(b"subdirectory video")
    return root


@pytest.fixture
def client(media_root: Path) -> TestClient:
    app = create_app(ServerConfig(root_dir=media_root))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def anyio_backend():
    return "asyncio"


def asgi_scope(path: str, headers: list[tuple[bytes, bytes]] | None = None) -> dict:
    """Bare HTTP scope, bypassing any client-side URL normalization."""
    return {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.3"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [(b"host", b"test"), *(headers or [])],
        "client": ("127.0.0.1", 50000),
        "server": ("test", 80),
    }


async def asgi_get(app, path: str, *, disconnected: bool = False) -> list[dict]:
    """Drive `app` with one GET and return every message it sent.

    With `disconnected`, the client is already gone when the app first listens.
    """
    done = anyio.Event()
    request_sent = False
    messages: list[dict] = []

    async def receive() -> dict:
        nonlocal request_sent
        if disconnected:
            return {"type": "http.disconnect"}
        if not request_sent:
            request_sent = True
            return {"type": "http.request", "body": b"", "more_body": False}
        await done.wait()
        return {"type": "http.disconnect"}

    async def send(message: dict) -> None:
        messages.append(message)
        if message["type"] == "http.response.body" and not message.get("more_body", False):
            done.set()

    await app(asgi_scope(path), receive, send)
    return messages
