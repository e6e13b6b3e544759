"""Tests for observability/logger.py and observability/metrics.py."""

from __future__ import annotations

import io
import json
import logging
import sys

from gdocify.observability import (
    MetricsHook,
    NoopMetricsHook,
    StructuredFormatter,
    get_logger,
    log_fields,
)


def make_record(msg, level=logging.INFO, exc_info=None, extra_fields=None):
    record = logging.LogRecord(
        name="gdocify.test",
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


class TestStructuredFormatter:

    def test_basic_format(self):
        result = json.loads(StructuredFormatter().format(make_record("hello world")))
        assert result["message"] == "hello world"
        assert result["level"] == "INFO"
        assert result["logger"] == "gdocify.test"
        assert "ts" in result

    def test_extra_fields_merged(self):
        record = make_record("msg", extra_fields={"document_id": "abc", "operations": 5})
        result = json.loads(StructuredFormatter().format(record))
        assert result["document_id"] == "abc"
        assert result["operations"] == 5

    def test_extra_fields_cannot_overwrite_reserved_keys(self):
        record = make_record("real", extra_fields={"message": "fake", "level": "NOPE"})
        result = json.loads(StructuredFormatter().format(record))
        assert result["message"] == "real"
        assert result["level"] == "INFO"

    def test_exception_included(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = make_record("failed", level=logging.ERROR, exc_info=sys.exc_info())
        result = json.loads(StructuredFormatter().format(record))
        assert "ValueError: bad" in result["exception"]

    def test_non_serialisable_values_are_stringified(self):
        record = make_record("msg", extra_fields={"obj": object()})
        result = json.loads(StructuredFormatter().format(record))
        assert result["obj"].startswith("<object object")


class TestLogFields:

    def test_wraps_fields(self):
        assert log_fields(op="convert", blocks=3) == {
            "extra_fields": {"op": "convert", "blocks": 3},
        }


class TestGetLogger:

    def test_outside_hierarchy_gets_own_handler(self):
        stream = io.StringIO()
        logger = get_logger("gdocify_test_standalone", stream=stream)
        logger.info("hello", extra=log_fields(op="t"))
        line = json.loads(stream.getvalue())
        assert line["message"] == "hello"
        assert line["op"] == "t"

    def test_repeated_calls_do_not_duplicate_handlers(self):
        first = get_logger("gdocify_test_repeat", stream=io.StringIO())
        second = get_logger("gdocify_test_repeat")
        assert first is second
        assert len(second.handlers) == 1

    def test_string_level(self):
        logger = get_logger("gdocify_test_level", level="warning", stream=io.StringIO())
        assert logger.level == logging.WARNING

    def test_children_propagate_to_root(self):
        child = get_logger("gdocify.test_child")
        assert child.handlers == []
        assert child.propagate is True
        assert logging.getLogger("gdocify").handlers


class TestMetrics:

    def test_noop_satisfies_protocol(self):
        hook = NoopMetricsHook()
        assert isinstance(hook, MetricsHook)
        hook.increment("x")
        hook.timing("y", 1.5, tags={"a": "b"})

    def test_custom_backend_satisfies_protocol(self):
        class Recorder:
            def __init__(self):
                self.calls = []

            def increment(self, name, value=1, tags=None):
                self.calls.append((name, value))

            def timing(self, name, ms, tags=None):
                self.calls.append((name, ms))

        assert isinstance(Recorder(), MetricsHook)
