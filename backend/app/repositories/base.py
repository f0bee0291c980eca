"""Shared translation of SQLAlchemy failures into DatabaseError."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str, **context: Any) -> Iterator[None]:
    """
    Re-raise any SQLAlchemyError from the block as DatabaseError.

    The original error is logged with its context; the client only ever
    sees DatabaseError's generic message.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s | Context: %s", operation, str(e), context)
        raise DatabaseError(
            context={"operation": operation, "error_type": type(e).__name__, **context},
        ) from e
