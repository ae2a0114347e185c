# src/sqlab/web_interface/routes/errors.py
import logging

from fastapi import HTTPException, status

from sqlab.core.exceptions.custom_exceptions import QueryError, DatabaseConnectionError

logger = logging.getLogger(__name__)


def to_http_exception(error: Exception, action: str) -> HTTPException:
    """
    Map a service error to the HTTP status the console expects.

    QueryError keeps the database message verbatim (400); an unreachable
    database is 503; anything else is 500.
    """
    if isinstance(error, QueryError):
        logger.warning(f"Query error while {action}: {error.error_message}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.get_user_message())

    if isinstance(error, DatabaseConnectionError):
        logger.error(f"Database connection error while {action}: {str(error)}")
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=error.get_user_message())

    logger.error(f"Unexpected error while {action}: {str(error)}", exc_info=error)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                         detail=f"An unexpected error occurred: {str(error)}")
