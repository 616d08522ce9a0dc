import json
import logging
from pathlib import Path

from mediaserve.logging_conf import (
    JsonFormatter,
    bind_request_id,
    current_request_id,
    reset_request_id,
)


def _record(msg, **extra):
    rec = logging.LogRecord("service.test", logging.INFO, __file__, 1, msg, None, None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


def test_json_line_with_extras():
    out = json.loads(JsonFormatter().format(_record("stream.start", path=Path("a.mkv"), length=10)))
    assert out["message"] == "stream.start"
    assert out["level"] == "INFO"
    assert out["logger"] == "service.test"
    assert out["path"] == "a.mkv"
    assert out["length"] == 10


def test_extras_do_not_clobber_core_keys():
    out = json.loads(JsonFormatter().format(_record("hello", level="bogus")))
    assert out["level"] == "INFO"


def test_bound_request_id_is_attached():
    token = bind_request_id("req-42")
    try:
        assert current_request_id() == "req-42"
        out = json.loads(JsonFormatter().format(_record("stream.aborted")))
    finally:
        reset_request_id(token)
    assert out["request_id"] == "req-42"
    assert current_request_id() is None
    assert "request_id" not in json.loads(JsonFormatter().format(_record("after")))


def test_explicit_request_id_extra_wins():
    token = bind_request_id("bound")
    try:
        out = json.loads(JsonFormatter().format(_record("x", request_id="explicit")))
    finally:
        reset_request_id(token)
    assert out["request_id"] == "explicit"
