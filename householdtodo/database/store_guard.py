"""Translation of storage failures into StoreUnavailableError."""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from householdtodo.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def store_guard(db: Session, action: str):
    """Roll back, log and re-raise any SQLAlchemy failure as StoreUnavailableError.

    Errors from this package (NotFoundError, ConflictError, ...) pass through
    untouched.
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {type(e).__name__}: {str(e)}")
        raise StoreUnavailableError(f"Store unavailable while trying to {action}") from e
