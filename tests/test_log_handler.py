import logging
import time

import pytest

from pulsetel.config import (
    new_telemetry_config,
    with_allow_concurrent_execution,
    with_concurrent_buffer_size,
    with_concurrent_pool_size,
)
from pulsetel.log_handler import LogHandler, handle_event
from pulsetel.provider import Telemetry

LOGGER = "pulsetel.log_handler"


def _now_ms():
    return int(time.time() * 1000)


def _messages(caplog):
    return [r.getMessage() for r in caplog.records if r.name == LOGGER]


def _trigger_basic(provider):
    provider.trigger_event("gopulse.event.test", {"occured_at": _now_ms()}, {"result": "ok", "error": None})
    provider.trigger_event(
        "gopulse.event.test.error", {"occured_at": _now_ms()}, {"result": "error", "error": "test error"}
    )
    provider.trigger_event(
        "gopulse.event.test.panic", {"occured_at": _now_ms()}, {"result": "panic", "error": "test panic"}
    )


def test_attached_handlers_cover_event_family():
    handler = LogHandler("log", None)
    assert handler.id() == "log"
    assert handler.config() is None
    assert [r.event for r in handler.attached_handlers()] == [
        "gopulse.event.test",
        "gopulse.event.test.error",
        "gopulse.event.test.panic",
        "gopulse.event.test.start",
        "gopulse.event.test.end",
    ]


def test_handle_event_message_format(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER)
    handle_event("error")("some.event", {"a": 1}, {"b": 2}, None)
    records = [r for r in caplog.records if r.name == LOGGER]
    assert [r.getMessage() for r in records] == ["event: some.event, [error] [{'a': 1}], metadata: {'b': 2}"]
    assert records[0].levelno == logging.ERROR


def test_log_telemetry(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER)
    provider = Telemetry(new_telemetry_config())
    provider.add_handlers(LogHandler("log", None))
    _trigger_basic(provider)
    messages = _messages(caplog)
    assert len(messages) == 3
    assert messages[0].startswith("event: gopulse.event.test, [info]")
    assert messages[1].startswith("event: gopulse.event.test.error, [error]")
    assert "'error': 'test error'" in messages[1]
    assert messages[2].startswith("event: gopulse.event.test.panic, [panic]")


def test_log_telemetry_async(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER)
    config = new_telemetry_config(
        with_allow_concurrent_execution(True),
        with_concurrent_buffer_size(10),
        with_concurrent_pool_size(5),
    )
    provider = Telemetry(config)
    try:
        provider.add_handlers(LogHandler("log", None))
        _trigger_basic(provider)
        provider.trigger_event("gopulse.event.test.start", {"occured_at": _now_ms()}, {"result": "start", "error": None})
        provider.trigger_event("gopulse.event.test.end", {"occured_at": _now_ms()}, {"result": "end", "error": None})
        deadline = time.monotonic() + 2
        while len(_messages(caplog)) < 5 and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        provider.close()
    levels = sorted(m.split(", ")[1].split("]")[0] for m in _messages(caplog))
    assert levels == ["[debug", "[error", "[info", "[info", "[panic"]


def test_log_telemetry_span(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER)
    provider = Telemetry(new_telemetry_config())
    provider.add_handlers(LogHandler("log", None))
    result = provider.trigger_span(
        "gopulse.event.test",
        {"occured_at": _now_ms()},
        lambda: (None, None, {"result": "ok", "error": None}, {"result": "ok"}),
    )
    assert result is None
    messages = _messages(caplog)
    assert len(messages) == 2
    assert messages[0].startswith("event: gopulse.event.test.start, [debug]")
    assert messages[1].startswith("event: gopulse.event.test.end, [info]")
    assert "'duration'" in messages[1]


def test_log_telemetry_span_with_error(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER)
    provider = Telemetry(new_telemetry_config())
    provider.add_handlers(LogHandler("log", None))

    def span():
        raise RuntimeError("test panic")

    with pytest.raises(RuntimeError, match="test panic"):
        provider.trigger_span("gopulse.event.test", {"occured_at": _now_ms()}, span)
    messages = _messages(caplog)
    assert messages[0].startswith("event: gopulse.event.test.start, [debug]")
    assert messages[-1].startswith("event: gopulse.event.test.panic, [panic]")
    assert not any(".end," in m for m in messages)