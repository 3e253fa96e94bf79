import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import PersistenceError
from .integrity_classifier import classify_integrity_error, extract_columns_from_integrity, sqlstate_of
from .taxonomy import SqlState

logger = logging.getLogger(__name__)


# -----------------------
# Mapper
# -----------------------

def map_integrity_error(exc: IntegrityError, model_name: str | None = None) -> PersistenceError:
    """
    Turn a SQLAlchemy IntegrityError into a PersistenceError carrying the vendor code
    and, where the message allows it, the offending columns in `meta["target"]`.
    """
    code, constraint = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"

    meta: dict = {}
    if columns:
        meta["target"] = columns
    if constraint:
        meta["constraint"] = constraint

    if code == SqlState.UNIQUE_VIOLATION.value:
        # expected client-level scenario (409); the normalizer writes the failure entry
        logger.debug("mapper.duplicate_detected", extra={"model": model_part, "fields": columns, "constraint": constraint})
        return PersistenceError(f"{model_part} unique constraint violated", vendor_code=code, meta=meta)

    raw = str(exc.orig) if exc.orig is not None else str(exc)
    logger.debug("mapper.integrity_raw", extra={"model": model_part, "raw": raw, "sqlstate": code})
    return PersistenceError(f"{model_part} integrity error: {raw}", vendor_code=code, meta=meta)


# -----------------------
# Async context manager to DRY error handling in repositories
# -----------------------
@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... DB ops that may raise ...

    Rolls back on storage errors and re-raises them as PersistenceError (chained with
    `from exc`, so the original traceback stays in the logs). Non-SQLAlchemy exceptions
    pass through untouched.
    """
    try:
        yield
    except IntegrityError as exc:
        await _rollback(db, model_name)
        raise map_integrity_error(exc, model_name) from exc
    except NoResultFound as exc:
        raise PersistenceError(
            f"{model_name or 'Record'} not found", vendor_code=SqlState.NO_DATA_FOUND.value
        ) from exc
    except SQLAlchemyError as exc:
        await _rollback(db, model_name)
        # Unexpected storage failure (connection drop, bad SQL, ...). The vendor code is kept
        # but is not one the normalizer maps, so clients get a 500.
        raise PersistenceError(
            f"Failed to operate on {model_name or 'database'}: {exc.orig if getattr(exc, 'orig', None) else exc}",
            vendor_code=sqlstate_of(exc),
        ) from exc


async def _rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except Exception:
        # If rollback fails, that is unusual: log with stack at ERROR and keep raising the original error.
        logger.exception("Failed to rollback session", extra={"model": model_name})
