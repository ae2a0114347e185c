# src/sqlab/database/error_handler.py
import logging
from typing import Any, Optional, Dict
from pymysql.constants import CR
from sqlalchemy.exc import SQLAlchemyError, OperationalError, DBAPIError, DisconnectionError, TimeoutError

from sqlab.core.exceptions.custom_exceptions import (
    DatabaseConnectionError,
    QueryError,
    SQLabError
)

logger = logging.getLogger(__name__)

# Client error codes meaning the server could not be reached, not that the SQL was wrong
CONNECTION_ERROR_CODES = frozenset({
    CR.CR_CONNECTION_ERROR,
    CR.CR_CONN_HOST_ERROR,
    CR.CR_SERVER_GONE_ERROR,
    CR.CR_SERVER_LOST,
    CR.CR_SERVER_LOST_EXTENDED,
})


def driver_message(error: Exception) -> str:
    """The database's own message, without SQLAlchemy's statement and background link."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        orig = error.orig
        # PyMySQL errors carry (code, message)
        if len(getattr(orig, "args", ())) >= 2 and isinstance(orig.args[1], str):
            return orig.args[1]
        return str(orig)
    return str(error)


def driver_error_code(error: Exception) -> Optional[int]:
    """Numeric code of a PyMySQL error wrapped by SQLAlchemy, if any."""
    orig = getattr(error, "orig", None)
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None


class DatabaseErrorHandler:
    """
    Centralized error handler for database operations.
    Converts SQLAlchemy errors into SQLab exceptions and logs them.

    Errors are never retried: student statements are not assumed idempotent.
    """

    def __init__(self, log_level: int = logging.ERROR):
        """
        Args:
            log_level: Logging level for database errors
        """
        self.log_level = log_level

    def handle_error(
            self,
            error: Exception,
            operation: str,
            context: Optional[Dict[str, Any]] = None
    ) -> SQLabError:
        """
        Handle a database error.

        Args:
            error: The original exception
            operation: Description of the operation being performed
            context: Additional context information

        Returns:
            SQLabError: Appropriate SQLab exception
        """
        context = context or {}

        self._log_error(error, operation, context)

        if isinstance(error, SQLabError):
            return error

        if isinstance(error, SQLAlchemyError):
            return self._handle_sqlalchemy_error(error, operation, context)

        return DatabaseConnectionError(
            message=f"Unexpected error during {operation}: {str(error)}",
            error_code="DB_UNKNOWN_ERROR"
        )

    def _handle_sqlalchemy_error(
            self,
            error: SQLAlchemyError,
            operation: str,
            context: Dict[str, Any]
    ) -> SQLabError:
        message = driver_message(error)

        if isinstance(error, (DisconnectionError, TimeoutError)):
            return DatabaseConnectionError(
                message=f"Database connection error during {operation}: {message}",
                error_code="DB_CONNECTION_ERROR"
            )

        if isinstance(error, OperationalError) and \
                (error.connection_invalidated or driver_error_code(error) in CONNECTION_ERROR_CODES):
            return DatabaseConnectionError(
                message=f"Database connection error during {operation}: {message}",
                error_code="DB_CONNECTION_ERROR"
            )

        # Syntax errors, unknown tables, constraint violations: the student's to fix
        return QueryError(
            query=context.get("query", "Unknown query"),
            error_message=f"Database error: {message}"
        )

    def _log_error(
            self,
            error: Exception,
            operation: str,
            context: Dict[str, Any]
    ) -> None:
        message = f"Database error during {operation}: {str(error)}"

        safe_context = {k: v for k, v in context.items()
                        if not any(sensitive in k.lower()
                                   for sensitive in ['password', 'token', 'key', 'secret'])}

        logger.log(self.log_level, message, extra={"context": safe_context})
