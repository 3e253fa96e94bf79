from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Annotated, Literal
from functools import lru_cache
from ..validators.config_validators import normalize_env, split_csv, to_lowercase, to_uppercase


class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"
    APP_NAME: str = "school-records"
    API_PREFIX: str = "/api"

    # Database configuration
    # DATABASE_URL wins when set; otherwise the POSTGRES_* parts are used when a host is given.
    DATABASE_URL: str | None = None
    POSTGRES_DRIVER: str = "asyncpg"
    POSTGRES_USERNAME: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_HOST: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "students_db"
    SQLITE_PATH: Path = Path("./school_records.db")

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/school-records")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False
    LOG_USE_QUEUE: bool = False
    LOG_QUEUE_MAX_SIZE: int = 0  # 0 -> unbounded

    # Tracing
    TRACE_HEADER: str = "X-Trace-Id"
    TRUST_INBOUND_TRACE_ID: bool = False
    INBOUND_TRACE_HEADERS: Annotated[list[str], NoDecode] = ["X-Trace-Id", "X-Request-ID"]

    # Error responses
    # None -> decided by ENV (only production hides messages of unexpected errors)
    EXPOSE_ERROR_MESSAGES: bool | None = None

    # --- Derived settings ---
    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        """
        Return the database URL the engine should use.

        Priority:
          1. `DATABASE_URL` verbatim (CI overrides, tests use `sqlite+aiosqlite://`).
          2. Postgres URL assembled from the POSTGRES_* parts when POSTGRES_HOST is set.
          3. Local SQLite file at SQLITE_PATH, so a fresh checkout runs without a DB server.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.POSTGRES_HOST:
            credentials = self.POSTGRES_USERNAME or ""
            if self.POSTGRES_PASSWORD:
                credentials = f"{credentials}:{self.POSTGRES_PASSWORD}"
            auth = f"{credentials}@" if credentials else ""
            return (
                f"postgresql+{self.POSTGRES_DRIVER}://"
                f"{auth}{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
                f"{self.POSTGRES_DB}"
            )

        return f"sqlite+aiosqlite:///{self.SQLITE_PATH}"

    @property
    def HARDENED_ERRORS(self) -> bool:
        """
        True when unexpected failures must be answered with the fixed
        "Internal server error" message instead of their own text.
        """
        if self.EXPOSE_ERROR_MESSAGES is not None:
            return not self.EXPOSE_ERROR_MESSAGES
        return self.ENV == "production"

    # --- Validators ---
    @field_validator("ENV", mode="before")
    def normalize_environment(cls, v: str | None) -> str | None:
        return normalize_env(v)

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_LEVEL value to uppercase; logging expects "DEBUG", "INFO", ...
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        return to_lowercase(v)

    @field_validator("INBOUND_TRACE_HEADERS", mode="before")
    def parse_inbound_headers(cls, v):
        return split_csv(v)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# get_settings() takes no arguments and always returns the same settings from the environment,
# so it is cached. Tests build their own Settings(...) and pass it to create_app().
@lru_cache()
def get_settings() -> Settings:
    return Settings()
