# /quadriparlanti/services/database_helpers/errors.py

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.exceptions import BackendError

logger = logging.getLogger(__name__)


@contextmanager
def backend_call(db: Session, operation: str):
    """
    Runs one repository operation. Any SQLAlchemy failure rolls the session
    back and is re-raised as BackendError, so callers never see driver errors.
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("ERROR during backend operation '%s': %s", operation, e)
        raise BackendError(f"Backend operation failed: {operation}") from e
