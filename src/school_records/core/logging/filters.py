# src/school_records/core/logging/filters.py
"""
Logging filters

Trace id filter and a redaction filter.

Why this exists
----------------
- Every log line written while a request is being handled should be attributable
  to that request. The trace id lives in the trace context (a ContextVar, see
  `core/tracing/context.py`); this filter copies it onto each `LogRecord` as
  `record.trace_id` so formatters can print it as its own field.
- The TraceIdFilter guarantees that any formatter referencing `%(trace_id)s`
  will not KeyError: each record gets either the real id or the sentinel "-".

How it is intended to be used
------------------------------
Install the filter into the dictConfig and attach it to every handler:

     "filters": {
         "trace_id": {"()": TraceIdFilter}
     },
     "handlers": {
         "console": {"class": "logging.StreamHandler", "filters": ["trace_id"], ...}
     }

The filter only reads the context; opening and closing trace scopes is the job
of the tracing middleware.

Design notes
------------
- An explicit `extra={"trace_id": ...}` wins over the context value.
- The filter always returns True; it annotates, it never drops.
- With queue logging the filter runs on the handler inside the listener thread,
  where the request context is gone. QueueHandler therefore carries the filter
  too, so the id is stamped in the request's own context before enqueueing.
"""

import logging
from logging import LogRecord

from ..tracing.context import get_current_trace_id

MISSING_TRACE_ID = "-"


class TraceIdFilter(logging.Filter):
    """
    Logging filter that guarantees every LogRecord has a `trace_id` attribute.

    `record.trace_id` is, in order of preference:
      * the value passed explicitly via `extra={"trace_id": ...}`
      * the trace id of the active trace scope
      * the sentinel "-"
    """

    def filter(self, record: LogRecord) -> bool:
        record.trace_id = (
            getattr(record, "trace_id", None) or get_current_trace_id() or MISSING_TRACE_ID
        )
        return True


# Redact sensitive information
class RedactFilter(logging.Filter):
    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "ssn", "authorization"}

    def filter(self, record: LogRecord) -> bool:
        # mask attributes on record that match SENSITIVE
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = "***REDACTED***"
        details = getattr(record, "details", None)
        if isinstance(details, dict):
            record.details = {
                k: "***REDACTED***" if str(k).lower() in self.SENSITIVE else v for k, v in details.items()
            }
        return True


r"""
-------------------------------------------------
Where does the trace id show up?
-------------------------------------------------
| Where you're logging                      | Has `trace_id`?     | Why?                                                  |
| ----------------------------------------- | ------------------- | ----------------------------------------------------- |
| Router / service / repository (request)   | Yes                 | Same async context as the middleware's trace scope.   |
| Error normalizer (handlers + middleware)  | Yes                 | Runs inside the trace scope of the failing request.   |
| Startup code, CLI, tests without a scope  | No (shows "-")      | No scope was opened; the filter falls back to "-".    |

Two requests interleaved on the same event loop never see each other's id:
each asyncio task runs in its own copy of the context.

-------------------------------------------------
Message prefix vs. field
-------------------------------------------------
Code that logs through `get_trace_logger(...)` (adapter.py) also gets the id in
the message text ("[traceId=...] ..."), which keeps plain-text logs greppable.
The JSON formatter additionally emits `trace_id` as a field for log search tools:

    {"level": "WARNING", "message": "[traceId=6f1c...] 404 Not Found: Student 7 not found", "trace_id": "6f1c..."}
"""
