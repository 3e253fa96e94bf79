"""
Small normalizers used by `Settings` field validators (mode="before").

They run on raw environment strings, so every helper must accept None and
return None unchanged.
"""

_ENV_ALIASES = {
    "dev": "development",
    "local": "development",
    "test": "testing",
    "stage": "staging",
    "prod": "production",
}


def to_uppercase(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip().upper()


def to_lowercase(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip().lower()


def normalize_env(value: str | None) -> str | None:
    """
    Lower-case an ENV value and expand the usual short aliases
    ("prod" -> "production", "dev" -> "development", ...).
    """
    value = to_lowercase(value)
    if value is None:
        return None
    return _ENV_ALIASES.get(value, value)


def split_csv(value):
    """
    Accept either a list or a comma separated string ("X-Trace-Id, X-Request-ID")
    and return a list of non-empty, stripped items.
    """
    if value is None or isinstance(value, (list, tuple)):
        return value
    return [item.strip() for item in str(value).split(",") if item.strip()]
