import logging
import re
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from .taxonomy import SqlState

logger = logging.getLogger(__name__)

# =================================================================================================================
# Vendor code lookup
# =================================================================================================================

# Integrity codes we can recognise from the message text when the driver gives no SQLSTATE (SQLite, some MySQL
# drivers). Order matters: "not null" must be tested before "null value".
_MESSAGE_PATTERNS: list[tuple[SqlState, tuple[str, ...]]] = [
    (SqlState.UNIQUE_VIOLATION, ("unique constraint", "unique failed", "unique violation", "duplicate")),
    (SqlState.NOT_NULL_VIOLATION, ("not null constraint", "not null", "null value in column")),
    (SqlState.FOREIGN_KEY_VIOLATION, ("foreign key constraint", "foreign key", "is not present in table")),
    (SqlState.CHECK_VIOLATION, ("check constraint", "check failed")),
]


def _driver_sqlstate(orig) -> str | None:
    """
    SQLSTATE reported by the DBAPI driver, if any.
    psycopg exposes it as `pgcode`/`sqlstate`, asyncpg as `sqlstate`.
    """
    for attr in ("pgcode", "sqlstate"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return None


def _constraint_name(orig) -> str | None:
    diag = getattr(orig, "diag", None)
    if diag is not None:
        name = getattr(diag, "constraint_name", None)
        if name:
            return name
    return getattr(orig, "constraint_name", None)


def _classify_from_message(msg: str) -> SqlState:
    normalized = (msg or "").lower()
    for code, keywords in _MESSAGE_PATTERNS:
        if any(keyword in normalized for keyword in keywords):
            return code

    logger.warning("Unknown integrity error message encountered", extra={"message_snippet": normalized[:200]})
    return SqlState.INTEGRITY_CONSTRAINT_VIOLATION


def classify_integrity_error(exc: IntegrityError) -> tuple[str, str | None]:
    """
    Classify a SQLAlchemy IntegrityError.

    Returns:
        (vendor_code, constraint_name). The vendor code is the driver's SQLSTATE when
        it reports one, otherwise the SQLSTATE matching the message text
        ('23505' for "UNIQUE constraint failed: ...", and so on).
    """
    orig = exc.orig
    code = _driver_sqlstate(orig)
    constraint = _constraint_name(orig)

    if code:
        logger.debug("Integrity diagnostic", extra={"sqlstate": code, "constraint_name": constraint})
        return code, constraint

    return _classify_from_message(str(orig) if orig is not None else str(exc)).value, constraint


def sqlstate_of(exc: SQLAlchemyError) -> str | None:
    """SQLSTATE of any DBAPI-backed SQLAlchemy error (OperationalError, DataError, ...), or None."""
    return _driver_sqlstate(getattr(exc, "orig", None))


# =================================================================================================================
# Column extraction
# =================================================================================================================

def _columns_postgres(msg: str) -> list[str] | None:
    # 'null value in column "name" ...'
    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]
    # 'DETAIL:  Key (email)=(a@b.com) already exists.'
    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]
    return None


def _columns_sqlite(msg: str) -> list[str] | None:
    # 'UNIQUE constraint failed: teachers.email' / 'NOT NULL constraint failed: students.name'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE | re.MULTILINE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols").strip())]
    return None


def _columns_mysql(msg: str) -> list[str] | None:
    # "Duplicate entry 'x' for key 'teachers.uq_teachers_email'"
    m = re.search(r"Duplicate entry .* for key '?(?P<key>[^']+)'?", msg, flags=re.IGNORECASE)
    if m:
        return [m.group("key").split('.')[-1]]
    return None


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of the offending column names from the DB message.
    """
    orig = exc.orig
    msg = str(orig) if orig is not None else str(exc)
    for extractor in (_columns_postgres, _columns_sqlite, _columns_mysql):
        cols = extractor(msg)
        if cols:
            return cols
    return None
