"""Translation of engine errors into the vote store error taxonomy.

Only this module knows how individual database drivers report constraint
violations. PostgreSQL exposes the SQLSTATE on the driver exception
(`pgcode`); SQLite only reports it in the message text.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from spacing.errors import MissingRequiredFieldError, StoreError

logger = logging.getLogger(__name__)

# SQLSTATE class 23 - integrity constraint violation
PG_NOT_NULL_VIOLATION = "23502"
SQLITE_NOT_NULL_MARKER = "NOT NULL constraint failed"


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    return str(code) if code is not None else None


def is_not_null_violation(exc: SQLAlchemyError) -> bool:
    if not isinstance(exc, DBAPIError):
        return False
    if _sqlstate(exc) == PG_NOT_NULL_VIOLATION:
        return True
    return SQLITE_NOT_NULL_MARKER in str(exc.orig)


def translate_error(exc: SQLAlchemyError) -> StoreError:
    """Return the taxonomy error matching `exc`; callers raise it `from exc`."""
    message = str(exc.orig) if isinstance(exc, DBAPIError) else str(exc)
    if is_not_null_violation(exc):
        return MissingRequiredFieldError(exc, message)
    return StoreError(exc, message)


@contextmanager
def store_errors(operation: str, table: str) -> Iterator[None]:
    """Re-raise engine errors raised inside the block as taxonomy errors."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("votes.%s.failed table=%s", operation, table, exc_info=True)
        raise translate_error(exc) from exc


__all__ = ["translate_error", "is_not_null_violation", "store_errors"]
