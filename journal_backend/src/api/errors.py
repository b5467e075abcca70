import logging
from typing import Optional

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)

NOT_FOUND = "NOT_FOUND"
DATABASE_ERROR = "DATABASE_ERROR"

GENERIC_DATABASE_MESSAGE = "A database error occurred. Please try again."


class AppError(Exception):
    """Base class for errors raised by the services."""


class NotFoundError(AppError):
    """A record that must exist is absent."""

    def __init__(self, context: str):
        super().__init__(f"Not found: {context}")
        self.context = context


class StorageError(AppError):
    """The storage engine failed; detail is for the logs only."""

    def __init__(self, detail: str):
        super().__init__(f"Database error: {detail}")
        self.detail = detail


class UniqueConstraintError(StorageError):
    """An insert or update collided with a unique index."""


# PUBLIC_INTERFACE
def from_sqlalchemy(exc: SQLAlchemyError) -> StorageError:
    """
    Wrap a SQLAlchemy exception in the internal taxonomy.

    Unique index violations become UniqueConstraintError, everything else
    StorageError. The driver message is kept as internal detail.
    """
    detail = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, IntegrityError) and "UNIQUE constraint failed" in detail:
        return UniqueConstraintError(detail)
    return StorageError(detail)


class ErrorResponse(BaseModel):
    """Boundary-safe error: a readable message and an optional stable code."""
    message: str
    code: Optional[str] = None


# PUBLIC_INTERFACE
def to_error_response(exc: Exception) -> ErrorResponse:
    """
    Translate any error into an ErrorResponse.

    The untranslated error is logged first; only NotFoundError keeps its
    own message, everything else collapses to a generic database message.
    """
    logger.error("Application error occurred: %r", exc, exc_info=exc)
    if isinstance(exc, NotFoundError):
        return ErrorResponse(message=exc.context, code=NOT_FOUND)
    return ErrorResponse(message=GENERIC_DATABASE_MESSAGE, code=DATABASE_ERROR)
