# mountains/utils/error_handler.py
"""
Centralized error types and database error handling for mountains.
"""
import logging
import sqlite3
from functools import wraps

logger = logging.getLogger(__name__)


class MountainsError(Exception):
    """Base class for every error raised by mountains itself."""
    pass


class StoreIOError(MountainsError):
    """Raised when the data directory or database file cannot be opened."""
    pass


class SchemaError(MountainsError):
    """Raised when schema initialization fails."""
    pass


class DatabaseError(MountainsError):
    """Raised when database operations fail."""
    pass


class CorruptDataError(DatabaseError):
    """Raised when a stored value cannot be parsed back (e.g. a bad date)."""
    pass


class ValidationError(MountainsError, ValueError):
    """Raised when user input cannot be turned into a field value."""
    pass


def handle_db_errors(operation_name: str):
    """
    Decorator for consistent database error handling.

    sqlite3 errors and anything the replica driver raises become
    DatabaseError; our own errors pass through untouched.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except MountainsError:
                raise
            except sqlite3.OperationalError as e:
                error_msg = str(e).lower()
                if 'locked' in error_msg or 'busy' in error_msg:
                    logger.warning(f"{operation_name} - Database busy: {e}")
                else:
                    logger.error(f"{operation_name} - DB operational error: {e}")
                raise DatabaseError(f"{operation_name} failed: {e}") from e
            except Exception as e:
                # libsql surfaces its failures as plain ValueError/RuntimeError
                logger.error(f"{operation_name} - DB error: {e}", exc_info=True)
                raise DatabaseError(f"{operation_name} failed: {e}") from e
        return wrapper
    return decorator
