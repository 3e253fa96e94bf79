# src/school_records/tests/test_logging/test_filters.py
import logging

from school_records.core.logging.filters import MISSING_TRACE_ID, RedactFilter, TraceIdFilter
from school_records.core.tracing.context import trace_scope


def make_record():
    # name, level, pathname, lineno, msg, args, exc_info
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello %s", ("world",), None)


def test_trace_id_filter_defaults_to_dash():
    rec = make_record()
    f = TraceIdFilter()
    assert f.filter(rec) is True
    assert rec.trace_id == MISSING_TRACE_ID == "-"  # fallback sentinel


def test_trace_id_filter_uses_active_scope():
    rec = make_record()
    with trace_scope("abc-123"):
        TraceIdFilter().filter(rec)
    assert rec.trace_id == "abc-123"


def test_trace_id_filter_respects_record_extra():
    rec = make_record()
    rec.trace_id = "explicit"
    with trace_scope("context-id"):
        TraceIdFilter().filter(rec)
    # an explicit extra wins over the context
    assert rec.trace_id == "explicit"


def test_trace_id_filter_after_scope_closed():
    with trace_scope("gone"):
        pass
    rec = make_record()
    TraceIdFilter().filter(rec)
    assert rec.trace_id == "-"


def test_redact_filter_masks_sensitive_extras_and_details():
    rec = make_record()
    rec.password = "hunter2"
    rec.details = {"token": "abc", "student_id": "42"}
    assert RedactFilter().filter(rec) is True
    assert rec.password == "***REDACTED***"
    assert rec.details == {"token": "***REDACTED***", "student_id": "42"}
