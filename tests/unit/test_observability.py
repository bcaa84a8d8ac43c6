"""Tests for observability/logger.py and observability/metrics.py"""
import io
import json
import logging
import sys

from confluence2notion.observability import (
    MetricsHook,
    NoopMetricsHook,
    StructuredFormatter,
    get_logger,
)


class TestStructuredFormatter:
    def _get_record(self, msg, level=logging.INFO, exc_info=None, extra_fields=None):
        record = logging.LogRecord(
            name="test",
            level=level,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        return record

    def test_basic_format(self):
        result = json.loads(StructuredFormatter().format(self._get_record("hello world")))
        assert result["message"] == "hello world"
        assert result["level"] == "INFO"
        assert result["logger"] == "test"
        assert result["ts"].endswith("+00:00")

    def test_extra_fields_merged(self):
        record = self._get_record("msg", extra_fields={"page_id": "abc", "blocks": 5})
        result = json.loads(StructuredFormatter().format(record))
        assert result["page_id"] == "abc"
        assert result["blocks"] == 5

    def test_non_json_values_stringified(self):
        record = self._get_record("msg", extra_fields={"obj": object()})
        result = json.loads(StructuredFormatter().format(record))
        assert result["obj"].startswith("<object object")

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = self._get_record("failed", level=logging.ERROR, exc_info=sys.exc_info())
        result = json.loads(StructuredFormatter().format(record))
        assert "ValueError: boom" in result["exception"]

    def test_unicode_kept(self):
        result = StructuredFormatter().format(self._get_record("Überblick → Notion"))
        assert "Überblick → Notion" in result


class TestGetLogger:
    def test_writes_json_lines_to_stream(self):
        stream = io.StringIO()
        log = get_logger("confluence2notion.test.stream", stream=stream)
        log.info("hello", extra={"extra_fields": {"op": "test"}})
        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "hello"
        assert entry["op"] == "test"
        assert entry["logger"] == "confluence2notion.test.stream"

    def test_idempotent(self):
        stream = io.StringIO()
        first = get_logger("confluence2notion.test.idempotent", stream=stream)
        second = get_logger("confluence2notion.test.idempotent", stream=stream)
        assert first is second
        assert len(first.handlers) == 1

    def test_level_by_name(self):
        stream = io.StringIO()
        log = get_logger("confluence2notion.test.level", level="warning", stream=stream)
        log.info("hidden")
        log.warning("shown")
        lines = stream.getvalue().strip().splitlines()
        assert [json.loads(line)["message"] for line in lines] == ["shown"]

    def test_does_not_propagate(self):
        log = get_logger("confluence2notion.test.propagate", stream=io.StringIO())
        assert log.propagate is False


class TestMetricsHook:
    def test_noop_satisfies_protocol(self):
        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_noop_accepts_all_calls(self):
        hook = NoopMetricsHook()
        hook.increment("a")
        hook.increment("a", 3, tags={"k": "v"})
        hook.timing("b", 1.5)
        hook.gauge("c", 2.0)

    def test_recording_hook_satisfies_protocol(self, metrics):
        assert isinstance(metrics, MetricsHook)
