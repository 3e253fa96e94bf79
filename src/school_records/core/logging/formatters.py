# src/school_records/core/logging/formatters.py

"""
Custom logging formatters.

  - JsonFormatter: structured JSON lines for log collectors. Carries the
    observability fields (service, env, version, trace_id) and any `extra`
    values, converting non-serializable ones to strings.

  - ColorFormatter: compact ANSI-colored lines for a developer console, with the
    trace id in its own column.

The builder (dictConfig) picks one per handler based on LOG_FORMAT:

    formatters = {
        "standard": {"()": ColorFormatter, "format": "..."},
        "json": {"()": JsonFormatter, "env": settings.ENV, "service": settings.APP_NAME},
    }

Formatters print whatever was passed in `extra`: sensitive values are masked by
RedactFilter before they get here.
"""

import json
import logging
from logging import LogRecord
from typing import Any

from ...utils.logging import get_project_version

PROJECT_VERSION = get_project_version()

# attributes every LogRecord has; anything else on the record came from `extra`
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Construction:
      - env: environment name ("development", "production", ...)
      - service: logical service name (defaults to "school-records")
      - datefmt: passed to logging.Formatter (used by formatTime)

    Must never raise: extras that json cannot encode are emitted as `str(value)`.
    """

    def __init__(self, *, env: str | None = None, service: str = "school-records", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "trace_id": getattr(record, "trace_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for k, v in record.__dict__.items():
            if k in log_record or k in _RESERVED_ATTRS or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                log_record[k] = v
            except (TypeError, ValueError):
                log_record[k] = str(v)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    Development-friendly colored formatter:

        TIMESTAMP | LEVEL | LOGGER_NAME | TRACE_ID | MESSAGE

    Only the level name is colored. Tracebacks follow on the next lines.
    """

    COLOR_CODES = {
        "DEBUG": "\033[1;36;47m",   # bold cyan on white
        "INFO": "\033[32m",         # green
        "WARNING": "\033[33m",      # yellow
        "ERROR": "\033[31m",        # red
        "CRITICAL": "\033[1;41m",   # bold on red background
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        base = (
            f"{timestamp} | {color}{record.levelname:<10}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'trace_id', '-'):<36} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)

        return base


"""
-------------------------------------------------
What a JSON line looks like
-------------------------------------------------
A 409 logged by the error normalizer during POST /api/teachers:

    {
      "timestamp": "2026-10-18 09:12:44,120",
      "level": "WARNING",
      "logger": "school_records.exceptions.normalizer",
      "message": "[traceId=6f1c2a4e-...] 409 Conflict: Duplicate value for field(s): email",
      "trace_id": "6f1c2a4e-...",
      "service": "school-records",
      "env": "production",
      "version": "0.1.0",
      ...
    }

A 500 carries the failure's own message plus an `exc_info` field with the
traceback. Neither ever reaches the response body.
"""
