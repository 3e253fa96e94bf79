"""
Failure vocabulary shared by every layer.

Each failure is built as a concrete variant at the point where it happens, so the
error normalizer can match on the class instead of sniffing payload shapes:

    DomainHttpError        raised by services; carries the intended HTTP status
    ValidationFailedError  raised by the input-binding boundary (bad body/query/path)
    PersistenceError       raised by the repository adapter; carries a vendor code

Anything that is none of these is an unexpected failure and becomes a 500.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence


@dataclass(frozen=True)
class FieldViolation:
    """One field and every rule it broke, e.g. FieldViolation("age", ["age must be >= 6"])."""

    field: str
    messages: list[str] = field(default_factory=list)


Violation = str | FieldViolation


class AppError(Exception):
    """Base of every failure variant this application raises on purpose."""


# =================================================================================================================
# Domain failures (carry their HTTP status)
# =================================================================================================================


class DomainHttpError(AppError):
    """
    A failure with an intended HTTP status and a client-safe message.

    - status_code: HTTP status to send (404, 409, ...)
    - message: human-friendly text (or list of texts) safe to show to clients
    - violations: optional per-field problems; when present the failure is
      rendered as a validation failure (400, "Validation failed")
    """

    status_code: int = 400

    def __init__(self, message: str | list[str] | None = None, *, status_code: int | None = None,
                 violations: Sequence[Violation] | None = None):
        if status_code is not None:
            self.status_code = status_code
        self.message = message if message is not None else "Request failed"
        self.violations = list(violations) if violations else None
        super().__init__(self.message if isinstance(self.message, str) else "; ".join(self.message))


class BadRequestError(DomainHttpError):
    status_code = 400


class UnauthorizedError(DomainHttpError):
    status_code = 401


class ForbiddenError(DomainHttpError):
    status_code = 403


class NotFoundError(DomainHttpError):
    status_code = 404

    @classmethod
    def for_resource(cls, resource: str, resource_id: Any) -> "NotFoundError":
        return cls(f"{resource} {resource_id} not found")


class ConflictError(DomainHttpError):
    status_code = 409


# =================================================================================================================
# Input validation failures
# =================================================================================================================


class ValidationFailedError(AppError):
    """
    One or more input violations, found before the service layer was reached.

    `violations` is an ordered sequence of plain strings (no field known) and/or
    FieldViolation records.
    """

    def __init__(self, violations: Iterable[Violation]):
        self.violations = list(violations)
        super().__init__(f"{len(self.violations)} validation error(s)")


# =================================================================================================================
# Persistence failures (carry a vendor code)
# =================================================================================================================


class PersistenceError(AppError):
    """
    Failure raised by the repository adapter.

    - vendor_code: storage-specific code (SQLSTATE here, e.g. '23505'); None if the driver gave none
    - meta: optional structured context, e.g. {"target": ["email"], "constraint": "uq_teachers_email"}
    - message: internal description (goes to logs only in hardened mode)
    """

    def __init__(self, message: str, *, vendor_code: str | None = None, meta: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.vendor_code = vendor_code
        self.meta = dict(meta) if meta else {}

    @property
    def target(self) -> list[str]:
        """Field names involved in the violation, if the adapter could tell."""
        return list(self.meta.get("target") or [])

    def __str__(self) -> str:
        # keep vendor code and fields in the log line
        parts = []
        if self.vendor_code:
            parts.append(f"code: {self.vendor_code}")
        if self.target:
            parts.append(f"fields: {', '.join(self.target)}")
        if self.meta.get("constraint"):
            parts.append(f"constraint: {self.meta['constraint']}")
        if parts:
            return f"{self.message} ({'; '.join(parts)})"
        return self.message


__all__ = [
    "AppError",
    "FieldViolation",
    "Violation",
    "DomainHttpError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ValidationFailedError",
    "PersistenceError",
]
