"""Tests for structured logging setup."""

from __future__ import annotations

import io
import json
import logging

import pytest
import structlog

from odf_spine.core.logging import LogContext, configure_logging, get_logger


@pytest.fixture
def log_stream():
    buf = io.StringIO()
    yield buf
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


def _last_event(buf: io.StringIO) -> dict:
    return json.loads(buf.getvalue().strip().splitlines()[-1])


class TestConfigureLogging:
    def test_json_lines(self, log_stream):
        configure_logging("INFO", json_format=True, stream=log_stream)
        get_logger("odf.test").info("frame_saved", ports=3)
        event = _last_event(log_stream)
        assert event["event"] == "frame_saved"
        assert event["ports"] == 3
        assert event["level"] == "info"
        assert event["service"] == "odf-spine"
        assert "timestamp" in event

    def test_level_filters(self, log_stream):
        configure_logging("WARNING", json_format=True, stream=log_stream)
        get_logger("odf.test").info("quiet")
        assert log_stream.getvalue() == ""

    def test_unknown_level_defaults_to_info(self, log_stream):
        configure_logging("CHATTY", json_format=True, stream=log_stream)
        get_logger("odf.test").debug("hidden")
        get_logger("odf.test").info("shown")
        assert _last_event(log_stream)["event"] == "shown"
        assert "hidden" not in log_stream.getvalue()

    def test_no_timestamp(self, log_stream):
        configure_logging("INFO", json_format=True, add_timestamp=False, stream=log_stream)
        get_logger("odf.test").info("plain")
        assert "timestamp" not in _last_event(log_stream)


class TestLogContext:
    def test_fields_bound_inside_block(self, log_stream):
        configure_logging("INFO", json_format=True, stream=log_stream)
        log = get_logger("odf.test")
        with LogContext(request_id="req-1"):
            log.info("inside")
            assert _last_event(log_stream)["request_id"] == "req-1"
        log.info("outside")
        assert "request_id" not in _last_event(log_stream)

    @pytest.mark.asyncio
    async def test_async_block(self, log_stream):
        configure_logging("INFO", json_format=True, stream=log_stream)
        async with LogContext(storage_key="North||A"):
            get_logger("odf.test").info("loaded")
        assert _last_event(log_stream)["storage_key"] == "North||A"
