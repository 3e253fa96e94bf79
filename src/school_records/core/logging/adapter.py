# src/school_records/core/logging/adapter.py
"""
Trace-aware logger.

A thin `logging.LoggerAdapter` that prefixes every message with the current
trace id:

    [traceId=6f1c...] Student 42 not found

Outside a request (startup code, scripts, tests without a scope) the message is
left unchanged. Everything else is plain stdlib logging: records still flow
through the handlers/filters configured by `setup_logging`, so the JSON output
also carries `trace_id` as its own field (stamped by TraceIdFilter).

Each level method accepts an optional `details` mapping which is attached to the
record as the `details` extra:

    log = get_trace_logger(__name__)
    log.warning("Student not found", details={"student_id": str(student_id)})
"""

import logging
from typing import Any, MutableMapping

from ..tracing.context import get_current_trace_id


def format_with_trace(message: str, trace_id: str | None) -> str:
    if not trace_id:
        return message
    return f"[traceId={trace_id}] {message}"


class TraceLogger(logging.LoggerAdapter):
    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        details = kwargs.pop("details", None)
        if details is not None:
            extra = dict(kwargs.get("extra") or {})
            extra["details"] = details
            kwargs["extra"] = extra
        return format_with_trace(str(msg), get_current_trace_id()), kwargs

    def warn(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        # short alias kept for callers used to log/warn/error/debug
        self.warning(msg, *args, **kwargs)


def get_trace_logger(name: str) -> TraceLogger:
    return TraceLogger(logging.getLogger(name), {})
