# src/school_records/core/tracing/
# ├─ __init__.py      # public API
# ├─ context.py       # trace id contextvar + trace_scope()
# └─ middleware.py    # TraceIdMiddleware (pure ASGI, outermost)
#
# middleware.py is imported by its module path; it depends on the error normalizer.

from .context import (
    get_current_trace_id,
    is_valid_trace_id,
    new_trace_id,
    reset_trace_id,
    set_trace_id,
    trace_scope,
)

__all__ = [
    "get_current_trace_id",
    "is_valid_trace_id",
    "new_trace_id",
    "reset_trace_id",
    "set_trace_id",
    "trace_scope",
]
