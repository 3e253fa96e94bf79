"""Settings for tests, independent of any .env file or environment on the machine."""

from school_records.config import Settings

# Every test gets its own engine on this URL. With StaticPool (see build_engine) an in-memory
# SQLite database lives exactly as long as its engine, so tests never share rows.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_settings(**overrides) -> Settings:
    """
    Defaults: ENV=testing (errors not hardened), JSON logs to stdout, no queue.
    Pass keyword overrides for anything a test needs to change.
    """
    values = {
        "ENV": "testing",
        "DATABASE_URL": TEST_DATABASE_URL,
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json",
        "LOG_TO_STDOUT": True,
        "LOG_USE_QUEUE": False,
        "TRUST_INBOUND_TRACE_ID": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)
