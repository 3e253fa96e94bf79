"""
Input-binding boundary: turn FastAPI/pydantic validation errors into the
application's own `ValidationFailedError`.

Pydantic reports each problem as a dict like

    {"type": "greater_than_equal", "loc": ("body", "age"), "msg": "...", "ctx": {"ge": 6}}

We keep one FieldViolation per error (the normalizer groups them by field) and
rewrite the message into a short "<field> <rule>" sentence for the common types.
"""

from typing import Any, Iterable

from fastapi.exceptions import RequestValidationError

from ..exceptions.base import FieldViolation, ValidationFailedError

# location prefixes FastAPI adds in front of the field path
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}

_MESSAGE_TEMPLATES: dict[str, str] = {
    "missing": "{field} is required",
    "greater_than_equal": "{field} must be >= {ge}",
    "greater_than": "{field} must be > {gt}",
    "less_than_equal": "{field} must be <= {le}",
    "less_than": "{field} must be < {lt}",
    "string_too_short": "{field} must be at least {min_length} characters",
    "string_too_long": "{field} must be at most {max_length} characters",
    "int_parsing": "{field} must be an integer",
    "int_type": "{field} must be an integer",
    "bool_parsing": "{field} must be a boolean",
    "bool_type": "{field} must be a boolean",
    "string_type": "{field} must be a string",
    "uuid_parsing": "{field} must be a UUID",
    "uuid_type": "{field} must be a UUID",
    "extra_forbidden": "{field} should not exist",
    "json_invalid": "request body is not valid JSON",
}


def field_name_from_loc(loc: Iterable[Any]) -> str:
    """
    ("body", "age") -> "age"; ("body", "courses", 0, "code") -> "courses.0.code"; ("body",) -> "body".
    """
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_ROOTS:
        root, parts = parts[0], parts[1:]
        if not parts:
            return root
    return ".".join(parts) or "body"


def message_for_error(error: dict[str, Any], field: str) -> str:
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}

    if error_type == "value_error" and ctx.get("error") is not None:
        # raised by our own field validators: the text is already client-ready
        return str(ctx["error"])

    template = _MESSAGE_TEMPLATES.get(error_type)
    if template is not None:
        try:
            return template.format(field=field, **ctx)
        except (KeyError, IndexError):
            pass
    return str(error.get("msg") or f"{field} is invalid")


def violations_from_errors(errors: Iterable[dict[str, Any]]) -> list[FieldViolation]:
    violations = []
    for error in errors:
        field = field_name_from_loc(error.get("loc", ()))
        violations.append(FieldViolation(field=field, messages=[message_for_error(error, field)]))
    return violations


def validation_failure_from_request(exc: RequestValidationError) -> ValidationFailedError:
    return ValidationFailedError(violations_from_errors(exc.errors()))
