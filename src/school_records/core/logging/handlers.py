# src/school_records/core/logging/handlers.py
"""
Handler factories for logging.dictConfig.

Each helper returns a plain handler configuration dict; builder.py plugs them
into the final dictConfig. Keeping them as pure functions of `Settings` makes
the environment-specific choices (json vs text, level, file paths) easy to test.

Every handler carries the "trace_id" and "redact" filters, which builder.py
declares in the dictConfig's "filters" section.
"""

from pathlib import Path

from ...config.settings import Settings

HANDLER_FILTERS = ["trace_id", "redact"]


def _formatter_name(settings: Settings) -> str:
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def get_console_handler(settings: Settings) -> dict:
    """
    Console/stream handler. Writes to stdout so container log collectors pick it up.
    """
    return {
        "class": "logging.StreamHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filters": list(HANDLER_FILTERS),
        "stream": "ext://sys.stdout",
    }


def get_file_handler(settings: Settings) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filename": str(Path(settings.LOG_DIR) / "app.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(HANDLER_FILTERS),
    }


# Error-only rotating file, always JSON (alerting/archival).
def get_error_file_handler(settings: Settings) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "level": "ERROR",
        "filename": str(Path(settings.LOG_DIR) / "errors.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(HANDLER_FILTERS),
    }
