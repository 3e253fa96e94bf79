# src/school_records/core/logging/builder.py
"""
Logging builder: create and apply a dictConfig logging configuration and optionally
wire a background QueueListener to decouple log IO from request handling.

This module:
 - builds a dictConfig-compatible mapping from Settings
 - allows a queue-backed logging mode (LOG_USE_QUEUE) that moves the actual writes
   to a background thread while producers only enqueue records
 - provides NonBlockingQueueHandler, which drops records instead of blocking a
   producer when a bounded queue is full
 - stamps the producer-side filters (TraceIdFilter, RedactFilter) on the
   QueueHandler, so the trace id is read in the request's own context
 - exposes stop_queue_logging() to flush and stop the listener at shutdown.

Configuration knobs (Settings):
 - LOG_LEVEL, LOG_FORMAT, LOG_TO_STDOUT, LOG_DIR, LOG_MAX_BYTES, LOG_BACKUP_COUNT
 - ENABLE_SQL_LOGGING: SQLAlchemy engine logs at DEBUG (may contain data)
 - LOG_USE_QUEUE, LOG_QUEUE_MAX_SIZE (0 -> unbounded)
"""

from __future__ import annotations

import logging
import logging.config
import queue as _queue
import threading
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from typing import Optional

from ...config.settings import Settings
from .filters import RedactFilter, TraceIdFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import get_console_handler, get_error_file_handler, get_file_handler

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(trace_id)s | %(message)s"

# Running QueueListener and its queue, so shutdown can stop them
_QUEUE_LISTENER: Optional[QueueListener] = None
_QUEUE: Optional[_queue.Queue] = None

# Diagnostics for dropped logs (bounded queue)
_DROPPED_LOGS_COUNT = 0
_DROPPED_LOGS_LOCK = threading.Lock()


# -----------------------
# Helper: non-blocking queue handler
# -----------------------
class NonBlockingQueueHandler(QueueHandler):
    """
    QueueHandler variant that never blocks the producer when a bounded queue is full.
    Dropped records are counted (see `get_queue_stats`) and reported via handleError.
    """

    def emit(self, record: logging.LogRecord) -> None:
        global _DROPPED_LOGS_COUNT
        try:
            self.queue.put_nowait(self.prepare(record))
        except _queue.Full:
            with _DROPPED_LOGS_LOCK:
                _DROPPED_LOGS_COUNT += 1
            self.handleError(record)


def get_queue_stats() -> dict:
    """Return small diagnostics about queue usage (dropped logs count)."""
    with _DROPPED_LOGS_LOCK:
        return {"dropped_logs": _DROPPED_LOGS_COUNT, "queue_present": _QUEUE is not None}


# -----------------------
# dictConfig builder
# -----------------------
def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping using the provided settings.

    The returned mapping includes:
      - formatters: "standard" (colored in text mode) and "json"
      - filters: "trace_id", "redact"
      - handlers: console, plus file/error_file when LOG_TO_STDOUT is off
      - loggers: root, uvicorn.error, uvicorn.access, sqlalchemy.engine
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": TEXT_FORMAT,
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": settings.APP_NAME,
        },
    }

    filters = {
        "trace_id": {"()": TraceIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if (not settings.LOG_TO_STDOUT) and settings.LOG_DIR:
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": settings.LOG_LEVEL,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            # SQL logging may contain row data
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


# --------------------------
# Entrypoint: setup & optional queue wiring
# --------------------------
def setup_logging(settings: Settings) -> None:
    """
    Initialize logging using settings and optionally switch to queue-backed logging.

    Steps:
      1. Ensure LOG_DIR exists when writing files.
      2. Apply dictConfig(make_dict_config(settings)).
      3. If LOG_USE_QUEUE:
            - move the real root handlers into a QueueListener (background thread)
            - attach a QueueHandler (NonBlockingQueueHandler for bounded queues) to
              the root, carrying TraceIdFilter and RedactFilter
    """
    global _QUEUE_LISTENER, _QUEUE

    # calling setup twice must not leave a listener thread behind
    stop_queue_logging()

    if (not settings.LOG_TO_STDOUT) and settings.LOG_DIR:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    if not settings.LOG_USE_QUEUE:
        return

    root_logger = logging.getLogger()
    current_handlers = list(root_logger.handlers)
    if not current_handlers:
        return

    # The real handlers must only run inside the listener thread.
    handlers_to_move = set(current_handlers)
    for logger_obj in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(logger_obj, logging.Logger):
            for h in list(logger_obj.handlers):
                if h in handlers_to_move:
                    logger_obj.removeHandler(h)
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    max_size = settings.LOG_QUEUE_MAX_SIZE or 0
    log_queue: _queue.Queue = _queue.Queue(max_size) if max_size > 0 else _queue.Queue()
    queue_handler_cls = NonBlockingQueueHandler if max_size > 0 else QueueHandler

    listener = QueueListener(log_queue, *current_handlers, respect_handler_level=True)
    listener.start()

    qh = queue_handler_cls(log_queue)
    qh.addFilter(TraceIdFilter())
    qh.addFilter(RedactFilter())
    root_logger.addHandler(qh)

    _QUEUE_LISTENER = listener
    _QUEUE = log_queue


def stop_queue_logging() -> None:
    """Stop the QueueListener (flushing pending records) and clear module refs."""
    global _QUEUE_LISTENER, _QUEUE
    listener = _QUEUE_LISTENER
    if listener is None:
        return

    try:
        listener.stop()
    finally:
        _QUEUE_LISTENER = None
        _QUEUE = None


"""
-------------------------------------------------
Which handlers are active?
-------------------------------------------------
| `LOG_TO_STDOUT` | `LOG_DIR` set  | Active handlers                  |
| --------------- | -------------- | -------------------------------- |
| `true`          | doesn't matter | `console`                        |
| `false`         | set            | `console` + `file` + `error_file`|

Every handler runs TraceIdFilter and RedactFilter, so `%(trace_id)s` is always
safe to reference in a format string.

-------------------------------------------------
Queue mode and the trace id
-------------------------------------------------
The trace id lives in a ContextVar, which is only visible in the task that
handles the request. The QueueListener thread has no such context, so the
QueueHandler stamps `record.trace_id` before the record leaves the request's
context. When the listener's handlers run TraceIdFilter again, the explicit
`trace_id` attribute wins over the (empty) context.
"""
