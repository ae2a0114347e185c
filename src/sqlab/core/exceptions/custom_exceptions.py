# src/sqlab/core/exceptions/custom_exceptions.py
from typing import List, Optional


class SQLabError(Exception):
    """Base exception for the SQLab console."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def get_user_message(self) -> str:
        """Get a user-friendly message."""
        return self.message


class DatabaseConnectionError(SQLabError):
    """Raised when there's an issue with database connection."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.error_code = error_code
        super().__init__(message)

    def get_user_message(self) -> str:
        """Get a user-friendly message about the connection error."""
        return f"Unable to connect to database. {self.message}"


class QueryError(SQLabError):
    """
    Raised when a query or a paginated fetch fails.

    The user message is the underlying database (or HTTP) message, passed
    through untranslated so students see exactly what the engine said.
    """

    def __init__(self, query: str, error_message: str):
        self.query = query
        self.error_message = error_message
        super().__init__(f"Error executing query: {query}. Details: {error_message}")

    def get_user_message(self) -> str:
        return self.error_message


class ConfigurationError(SQLabError):
    """Raised when settings cannot be read or fail validation."""

    def __init__(self, config_name: str, problems: List[str]):
        self.config_name = config_name
        self.problems = problems
        super().__init__(f"Invalid {config_name} configuration: {'; '.join(problems)}")


class MalformedEnvelopeError(SQLabError):
    """Raised when a page payload lacks the fields needed to render it."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Page data is missing required fields: {', '.join(missing)}")
