# src/school_records/core/logging/
# ├─ __init__.py            # public API: setup_logging, get_trace_logger, TraceIdFilter
# ├─ adapter.py             # TraceLogger: "[traceId=...] message" prefix + `details` extra
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # TraceIdFilter, RedactFilter
# └─ handlers.py            # handler config factories (console/file)


from .adapter import TraceLogger, get_trace_logger
from .builder import make_dict_config, setup_logging, stop_queue_logging
from .filters import RedactFilter, TraceIdFilter

__all__ = [
    "setup_logging",
    "make_dict_config",
    "stop_queue_logging",
    "get_trace_logger",
    "TraceLogger",
    "TraceIdFilter",
    "RedactFilter",
]
