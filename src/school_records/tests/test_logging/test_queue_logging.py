# src/school_records/tests/test_logging/test_queue_logging.py
import json
import logging
import logging.handlers
from pathlib import Path

from school_records.core.logging.builder import get_queue_stats, setup_logging, stop_queue_logging
from school_records.core.tracing.context import trace_scope
from school_records.tests.test_fixtures.settings_fixtures import make_settings


def make_queue_settings(tmp_path: Path, **overrides):
    values = {
        "LOG_TO_STDOUT": False,  # write to files, not stdout
        "LOG_DIR": tmp_path,
        "LOG_USE_QUEUE": True,  # enable queue for the test
        "LOG_MAX_BYTES": 1_000_000,
        "LOG_BACKUP_COUNT": 1,
    }
    values.update(overrides)
    return make_settings(**values)


def test_queue_listener_writes_file_with_trace_id(tmp_path):
    # Ensure previous listener (if any) is stopped before test starts
    stop_queue_logging()
    settings = make_queue_settings(tmp_path)

    # Initialize logging (this will create handlers, start QueueListener, etc.)
    setup_logging(settings)
    assert get_queue_stats()["queue_present"] is True

    logger = logging.getLogger("test.queue")

    # The listener thread has no request context: the id must be stamped before enqueueing
    with trace_scope("6f1c2a4e-1111-4000-8000-000000000001"):
        for i in range(10):
            logger.info("test message %d", i, extra={"iteration": i})

    # Stop and flush the queue listener, important to ensure logs are written
    stop_queue_logging()
    assert get_queue_stats()["queue_present"] is False

    app_log = Path(settings.LOG_DIR) / "app.log"
    assert app_log.exists(), "app.log should exist after logging"
    lines = [json.loads(line) for line in app_log.read_text().splitlines() if line.strip()]
    ours = [line for line in lines if line["logger"] == "test.queue"]
    assert [line["iteration"] for line in ours] == list(range(10))
    assert {line["trace_id"] for line in ours} == {"6f1c2a4e-1111-4000-8000-000000000001"}


def test_setup_logging_twice_replaces_listener(tmp_path):
    stop_queue_logging()
    settings = make_queue_settings(tmp_path, LOG_QUEUE_MAX_SIZE=100)
    setup_logging(settings)
    setup_logging(settings)
    try:
        root = logging.getLogger()
        # exactly one queue handler on the root after re-initialization
        queue_handlers = [h for h in root.handlers if isinstance(h, logging.handlers.QueueHandler)]
        assert len(queue_handlers) == 1
    finally:
        stop_queue_logging()
