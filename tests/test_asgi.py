import anyio
import pytest

from mediaserve.config import ServerConfig
from mediaserve.main import create_app

from .conftest import asgi_get


def _status(messages):
    return next(m["status"] for m in messages if m["type"] == "http.response.start")


@pytest.mark.anyio
@pytest.mark.parametrize("path", ["/../../etc/passwd", "/subdir/../../outside.mkv", "/.."])
async def test_dot_dot_escape_is_forbidden(media_root, path):
    app = create_app(ServerConfig(root_dir=media_root))
    messages = await asgi_get(app, path)
    assert _status(messages) == 403


@pytest.mark.anyio
async def test_dot_dot_inside_root_is_served(media_root):
    app = create_app(ServerConfig(root_dir=media_root))
    messages = await asgi_get(app, "/subdir/../test.mkv")
    assert _status(messages) == 200


@pytest.mark.anyio
async def test_disconnect_before_body_releases_file(media_root, monkeypatch):
    opened = []
    real_open_file = anyio.open_file

    async def recording_open_file(*args, **kwargs):
        handle = await real_open_file(*args, **kwargs)
        opened.append(handle)
        return handle

    monkeypatch.setattr(anyio, "open_file", recording_open_file)
    app = create_app(ServerConfig(root_dir=media_root))

    await asgi_get(app, "/blob.bin", disconnected=True)

    assert len(opened) == 1
    assert opened[0].wrapped.closed


@pytest.mark.anyio
async def test_completed_stream_releases_file(media_root, monkeypatch):
    opened = []
    real_open_file = anyio.open_file

    async def recording_open_file(*args, **kwargs):
        handle = await real_open_file(*args, **kwargs)
        opened.append(handle)
        return handle

    monkeypatch.setattr(anyio, "open_file", recording_open_file)
    app = create_app(ServerConfig(root_dir=media_root))

    messages = await asgi_get(app, "/test.mkv")

    assert _status(messages) == 200
    assert opened and all(h.wrapped.closed for h in opened)
