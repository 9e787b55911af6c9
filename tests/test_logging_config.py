"""
Tests for structured JSON logging.
"""
import json
import logging

from api.logging_config import StructuredJSONFormatter, log_request


def make_record(message="hello", **extra):
    record = logging.LogRecord(
        name="forecast_core.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredJSONFormatter:
    def setup_method(self):
        self.formatter = StructuredJSONFormatter()

    def test_basic_fields(self):
        entry = json.loads(self.formatter.format(make_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "forecast_core.service"
        assert entry["message"] == "hello"
        assert "timestamp" in entry

    def test_structured_fields_included(self):
        record = make_record(mode="cache-first", kind="currentWeather", status="cache_hit")

        entry = json.loads(self.formatter.format(record))

        assert entry["mode"] == "cache-first"
        assert entry["kind"] == "currentWeather"
        assert entry["status"] == "cache_hit"
        assert "request_id" not in entry

    def test_unknown_extras_ignored(self):
        entry = json.loads(self.formatter.format(make_record(secret="x")))

        assert "secret" not in entry


def test_log_request_fields(caplog):
    logger = logging.getLogger("api.test")

    with caplog.at_level(logging.INFO, logger="api.test"):
        log_request(logger, "req-1", "daily_forecast", 12, "success", "done")

    record = caplog.records[-1]
    assert record.request_id == "req-1"
    assert record.task == "daily_forecast"
    assert record.duration_ms == 12
    assert record.status == "success"
