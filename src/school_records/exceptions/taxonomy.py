"""
Failure kinds and the lookup tables the error normalizer classifies with.

The vendor-code table is deliberately small and open: the repository adapter
raises `PersistenceError(vendor_code=...)` and only the codes registered here get
a dedicated HTTP mapping. Everything else is an unknown failure (500).
"""

from enum import Enum
from http import HTTPStatus


class FailureKind(str, Enum):
    # priority order: first match wins
    DOMAIN_HTTP = "domain_http"
    VALIDATION = "validation"
    PERSISTENCE_CONFLICT = "persistence_conflict"
    PERSISTENCE_NOT_FOUND = "persistence_not_found"
    UNKNOWN = "unknown"


# https://www.postgresql.org/docs/current/errcodes-appendix.html
class SqlState(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"
    INTEGRITY_CONSTRAINT_VIOLATION = "23000"
    UNDEFINED_COLUMN = "42703"
    NO_DATA_FOUND = "P0002"


VENDOR_CODE_KINDS: dict[str, FailureKind] = {
    SqlState.UNIQUE_VIOLATION.value: FailureKind.PERSISTENCE_CONFLICT,
    SqlState.NO_DATA_FOUND.value: FailureKind.PERSISTENCE_NOT_FOUND,
}


def register_vendor_code(code: str, kind: FailureKind) -> None:
    """
    Teach the normalizer another vendor code, e.g. when a second storage adapter
    reports uniqueness problems with its own code.
    """
    if kind not in (FailureKind.PERSISTENCE_CONFLICT, FailureKind.PERSISTENCE_NOT_FOUND):
        raise ValueError(f"vendor codes can only map to persistence kinds, got {kind.value}")
    VENDOR_CODE_KINDS[str(code)] = kind


def kind_for_vendor_code(code: str | None) -> FailureKind | None:
    if code is None:
        return None
    return VENDOR_CODE_KINDS.get(str(code))


# Client-facing texts
VALIDATION_MESSAGE = "Validation failed"
INTERNAL_ERROR_MESSAGE = "Internal server error"
CONFLICT_FALLBACK_MESSAGE = "Resource already exists"
RECORD_NOT_FOUND_MESSAGE = "Record not found"
VALIDATION_FALLBACK_FIELD = "body"


def status_text(status_code: int) -> str:
    """'Not Found' for 404, 'Conflict' for 409, ...; 'Error' for codes HTTP does not name."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"
