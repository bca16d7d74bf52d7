"""
Domain errors raised by the ClipTube service layer.

Every error carries a machine readable ``error_code`` and the HTTP
``status_code`` the routing layer answers with.  Storage failures never
leave the service layer raw: ``translate_storage_errors`` turns them into
``UniqueConstraintError`` or ``DatabaseError`` after rolling the session back.
"""
import logging
from functools import wraps

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base class for ClipTube domain errors."""

    status_code = 500
    error_code = "CATALOG_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(CatalogError):
    """A referenced or target entity does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"


class UniqueConstraintError(CatalogError):
    """A natural key collided on create or rename."""

    status_code = 409
    error_code = "UNIQUE_CONSTRAINT"


class InvalidOperationError(CatalogError):
    """The request is well formed but not allowed, e.g. following oneself."""

    status_code = 400
    error_code = "INVALID_OPERATION"


class ValidationError(CatalogError):
    """A request payload or field combination was rejected."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class DatabaseError(CatalogError):
    """Unexpected storage failure. The message keeps the original cause."""

    status_code = 500
    error_code = "DATABASE_ERROR"


def is_unique_violation(error: IntegrityError) -> bool:
    """Tell unique-key collisions apart from other integrity failures."""
    message = str(error.orig).lower()
    return "unique" in message or "duplicate key" in message


def translate_storage_errors(action: str, unique_message: str | None = None):
    """Decorator for service methods talking to the session.

    Domain errors pass through untouched.  Any ``SQLAlchemyError`` rolls back
    ``self.session`` first; unique violations become ``UniqueConstraintError``
    when ``unique_message`` is given, everything else becomes
    ``DatabaseError`` prefixed with ``action``.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(self, *args, **kwargs):
            try:
                return f(self, *args, **kwargs)
            except CatalogError:
                raise
            except IntegrityError as e:
                self.session.rollback()
                if unique_message and is_unique_violation(e):
                    raise UniqueConstraintError(unique_message) from e
                logger.warning(f"{action}: integrity error: {e.orig}")
                raise DatabaseError(f"{action}: {e.orig}") from e
            except SQLAlchemyError as e:
                self.session.rollback()
                raise DatabaseError(f"{action}: {e}") from e
        return decorated_function
    return decorator
