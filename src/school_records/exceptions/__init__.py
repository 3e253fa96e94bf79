
# school_records/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # Failure variants (DomainHttpError, ValidationFailedError, PersistenceError)
# │   ├── taxonomy.py                # Failure kinds, vendor-code table, fixed client messages
# │   ├── integrity_classifier.py    # SQLSTATE / column extraction from driver errors
# │   ├── mapper.py                  # Map SQLAlchemy errors to PersistenceError
# │   └── normalizer.py              # Failure -> ErrorEnvelope (+ one log entry)
#
# normalizer is imported by its module path; it depends on validators, which depend on base.

from .base import (
    AppError,
    BadRequestError,
    ConflictError,
    DomainHttpError,
    FieldViolation,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
    ValidationFailedError,
    Violation,
)
from .taxonomy import FailureKind, SqlState, register_vendor_code

__all__ = [
    "AppError",
    "BadRequestError",
    "ConflictError",
    "DomainHttpError",
    "FailureKind",
    "FieldViolation",
    "ForbiddenError",
    "NotFoundError",
    "PersistenceError",
    "SqlState",
    "UnauthorizedError",
    "ValidationFailedError",
    "Violation",
    "register_vendor_code",
]
