from abc import ABC, abstractmethod
from typing import Any


class QueryExecutionInterface(ABC):
    """Abstract base class for query execution."""

    @abstractmethod
    def execute_query(self, query: str) -> Any:
        """Execute a single SQL statement.

        Args:
            query (str): SQL statement to execute.

        Returns:
            Any: Statement result with column names and rows.
        """
        pass

    @abstractmethod
    def validate_query(self, query: str) -> bool:
        """Check that a SQL text is worth sending to the database.

        Args:
            query (str): SQL text to validate.

        Returns:
            bool: True if query can be executed, False otherwise.
        """
        pass
