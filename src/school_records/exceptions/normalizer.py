# src/school_records/exceptions/normalizer.py
"""
Error normalizer: the single place where a failure becomes an HTTP error response.

Every failure that escapes request handling ends up here, either through the
exception handlers registered on the app (failures raised inside routing) or
through the tracing middleware (everything else). Per failure it:

    1. classifies it into exactly one FailureKind (first match wins):
         DomainHttpError / Starlette HTTPException   -> DOMAIN_HTTP  (status carried by the failure)
           ... unless it carries violations          -> VALIDATION
         ValidationFailedError / RequestValidationError -> VALIDATION (400)
         PersistenceError with a known vendor code   -> PERSISTENCE_CONFLICT (409) / PERSISTENCE_NOT_FOUND (404)
         anything else                               -> UNKNOWN (500)
    2. renders one ErrorEnvelope (stamped with the current trace id, if any);
    3. writes one log entry: WARNING for < 500 (rendered message only),
       ERROR for >= 500 (the failure's own message + traceback);
    4. returns the envelope / JSONResponse for the caller to send.

Classification and envelope building are pure functions of (failure, trace id),
so normalizing the same failure twice gives identical envelopes. Rendering is not
allowed to fail: if it does, a hardcoded minimal 500 envelope is used instead.

Client-safety rules:
  - `message` for UNKNOWN is the fixed "Internal server error" in hardened mode
    (production); other modes may show the failure's own message.
  - tracebacks, exception class names, SQL and vendor details never go into the
    envelope, only into the log line.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.logging.adapter import TraceLogger, get_trace_logger
from ..core.tracing.context import get_current_trace_id
from ..schemas.errors import ErrorDetails, ErrorEnvelope, ValidationErrorItem
from ..validators.request_validators import validation_failure_from_request
from .base import DomainHttpError, FieldViolation, PersistenceError, ValidationFailedError, Violation
from .taxonomy import (
    CONFLICT_FALLBACK_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    RECORD_NOT_FOUND_MESSAGE,
    VALIDATION_FALLBACK_FIELD,
    VALIDATION_MESSAGE,
    FailureKind,
    kind_for_vendor_code,
    status_text,
)


@dataclass(frozen=True)
class Classification:
    kind: FailureKind
    status_code: int
    message: str | list[str]
    errors: tuple[ValidationErrorItem, ...] = ()


# -----------------------
# Validation formatting
# -----------------------

def _coerce_violation(item: Any) -> Violation:
    """Accept our own records, plain strings, or dicts such as {"field": ..., "messages": [...]}."""
    if isinstance(item, (FieldViolation, str)):
        return item
    if isinstance(item, Mapping):
        field = item.get("field") or item.get("property") or VALIDATION_FALLBACK_FIELD
        messages = item.get("messages") or list((item.get("constraints") or {}).values())
        if isinstance(messages, str):
            messages = [messages]
        return FieldViolation(field=str(field), messages=[str(m) for m in messages] or [f"{field} is invalid"])
    return str(item)


def group_violations(violations: Iterable[Violation]) -> tuple[ValidationErrorItem, ...]:
    """
    One entry per distinct field, in first-seen order. Plain strings have no field
    and are grouped under "body". Never returns an empty tuple.
    """
    grouped: dict[str, list[str]] = {}
    for violation in violations:
        if isinstance(violation, FieldViolation):
            field = violation.field or VALIDATION_FALLBACK_FIELD
            messages = [str(m) for m in violation.messages if m] or [f"{field} is invalid"]
        else:
            field = VALIDATION_FALLBACK_FIELD
            messages = [str(violation)]
        grouped.setdefault(field, []).extend(messages)

    if not grouped:
        grouped[VALIDATION_FALLBACK_FIELD] = ["Invalid request"]
    return tuple(ValidationErrorItem(field=f, messages=m) for f, m in grouped.items())


def _validation(violations: Iterable[Violation]) -> Classification:
    return Classification(
        kind=FailureKind.VALIDATION,
        status_code=400,
        message=VALIDATION_MESSAGE,
        errors=group_violations(violations),
    )


def _describe(exc: BaseException) -> str:
    """Failure text for logs. Must not raise, whatever __str__ does."""
    try:
        text = str(exc)
    except Exception:
        text = ""
    return text or exc.__class__.__name__


class ErrorNormalizer:
    """
    Classifies failures and renders the canonical error envelope.

    Args:
        hardened: hide the own message of unexpected failures (production mode).
        logger: trace-aware logger for the one log entry per failure.
    """

    def __init__(self, *, hardened: bool = True, logger: TraceLogger | None = None):
        self.hardened = hardened
        self.logger = logger or get_trace_logger(__name__)

    # ---- 1. classification ----

    def classify(self, exc: BaseException) -> Classification:
        if isinstance(exc, DomainHttpError):
            if exc.violations:
                return _validation(exc.violations)
            return Classification(FailureKind.DOMAIN_HTTP, exc.status_code, exc.message)

        if isinstance(exc, StarletteHTTPException):
            detail = exc.detail
            if isinstance(detail, (list, tuple)) and detail:
                return _validation(_coerce_violation(item) for item in detail)
            if isinstance(detail, Mapping):
                detail = detail.get("message") or detail.get("detail")
                if isinstance(detail, (list, tuple)) and detail:
                    return _validation(_coerce_violation(item) for item in detail)
            if not detail:
                detail = status_text(exc.status_code)
            return Classification(FailureKind.DOMAIN_HTTP, exc.status_code, str(detail))

        if isinstance(exc, RequestValidationError):
            exc = validation_failure_from_request(exc)
        if isinstance(exc, ValidationFailedError):
            return _validation(exc.violations)

        if isinstance(exc, PersistenceError):
            kind = kind_for_vendor_code(exc.vendor_code)
            if kind is FailureKind.PERSISTENCE_CONFLICT:
                target = ", ".join(exc.target)
                message = f"Duplicate value for field(s): {target}" if target else CONFLICT_FALLBACK_MESSAGE
                return Classification(kind, 409, message)
            if kind is FailureKind.PERSISTENCE_NOT_FOUND:
                return Classification(kind, 404, RECORD_NOT_FOUND_MESSAGE)

        return self._unknown(exc)

    def _unknown(self, exc: BaseException) -> Classification:
        message = INTERNAL_ERROR_MESSAGE
        if not self.hardened:
            # PersistenceError.__str__ appends the vendor code; `message` is the bare text
            own = exc.message if isinstance(exc, PersistenceError) else str(exc)
            message = own or INTERNAL_ERROR_MESSAGE
        return Classification(FailureKind.UNKNOWN, 500, message)

    # ---- 2. rendering ----

    def build_envelope(self, exc: BaseException, trace_id: str | None = None) -> ErrorEnvelope:
        classification = self.classify(exc)
        return ErrorEnvelope(
            status_code=classification.status_code,
            message=classification.message,
            error=status_text(classification.status_code),
            trace_id=trace_id,
            details=ErrorDetails(errors=list(classification.errors)) if classification.errors else None,
        )

    @staticmethod
    def fallback_envelope(trace_id: str | None = None) -> ErrorEnvelope:
        return ErrorEnvelope(
            status_code=500,
            message=INTERNAL_ERROR_MESSAGE,
            error="Internal Server Error",
            trace_id=trace_id,
        )

    # ---- 3. logging ----

    def _log(self, exc: BaseException, envelope: ErrorEnvelope, render_error: BaseException | None = None) -> None:
        status = envelope.status_code
        if status < 500:
            message = envelope.message if isinstance(envelope.message, str) else "; ".join(envelope.message)
            self.logger.warning("%s %s: %s", status, envelope.error, message)
            return

        text = _describe(exc)
        if render_error is not None:
            text = f"{text} (error rendering failed: {_describe(render_error)})"
        self.logger.error(
            "%s %s: %s", status, envelope.error, text,
            exc_info=(type(exc), exc, exc.__traceback__),
        )

    # ---- entry points ----

    def normalize(self, exc: BaseException) -> ErrorEnvelope:
        """
        Classify, render and log one failure. Always returns an envelope.
        """
        trace_id = get_current_trace_id()
        render_error = None
        try:
            envelope = self.build_envelope(exc, trace_id)
        except Exception as err:
            render_error = err
            envelope = self.fallback_envelope(trace_id)

        self._log(exc, envelope, render_error)
        return envelope

    def render(self, exc: BaseException) -> JSONResponse:
        envelope = self.normalize(exc)
        headers = getattr(exc, "headers", None) if isinstance(exc, StarletteHTTPException) else None
        return JSONResponse(status_code=envelope.status_code, content=envelope.to_content(), headers=headers)


r"""
-------------------------------------------------
Why variants instead of shape checks?
-------------------------------------------------
A failure decides what it is when it is raised:

| Raised by                  | Variant                  | Envelope                                   |
| -------------------------- | ------------------------ | ------------------------------------------ |
| services                   | `NotFoundError(...)`     | 404, own message                           |
| request binding (FastAPI)  | `RequestValidationError` | 400, "Validation failed", details.errors   |
| repositories               | `PersistenceError(23505)`| 409, "Duplicate value for field(s): email" |
| anything else              | -                        | 500, "Internal server error" (production)  |

The normalizer only matches on classes, so a service returning a list-shaped
message can never be mistaken for a validation failure by accident.
"""
