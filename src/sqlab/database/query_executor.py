# src/sqlab/database/query_executor.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from sqlab.core.interfaces.query_interface import QueryExecutionInterface
from sqlab.core.exceptions.custom_exceptions import QueryError, DatabaseConnectionError
from sqlab.database.connection import DatabaseConnection
from sqlab.database.error_handler import DatabaseErrorHandler
from sqlab.database.formatters import normalize_row
from sqlab.pagination.params import PaginationParams
from sqlab.sql.rewriter import split_statements

logger = logging.getLogger(__name__)

# Student SQL goes to the driver untouched: no bind-parameter parsing, no % formatting
RAW_SQL_OPTIONS = {"no_parameters": True}


@dataclass
class StatementResult:
    """Columns and rows of one executed statement, possibly a single page of it."""
    columns: List[str]
    rows: List[List[Any]]
    total: int
    params: Optional[PaginationParams] = None
    returns_rows: bool = True
    affected_rows: Optional[int] = None
    statements: int = 1
    extra: Dict[str, Any] = field(default_factory=dict)


class QueryExecutor(QueryExecutionInterface):
    """
    Executes SQL against a database connection.

    Every call opens one session and closes it on the way out, returning the
    pooled connection on success and on failure alike.
    """

    def __init__(self, connection: DatabaseConnection, error_handler: Optional[DatabaseErrorHandler] = None):
        """
        Initialize with a database connection.

        Args:
            connection (DatabaseConnection): An established database connection
            error_handler (Optional[DatabaseErrorHandler]): Error handler for database operations
        """
        self._connection = connection
        self._error_handler = error_handler or DatabaseErrorHandler()

    def validate_query(self, query: str) -> bool:
        """Any non-blank text is sent; the database is the judge of its validity."""
        return isinstance(query, str) and bool(split_statements(query))

    def _run_statement(self,
                       session: Session,
                       statement: str,
                       params: Optional[PaginationParams] = None) -> StatementResult:
        """
        Execute one statement and read its rows.

        With ``params`` the full result is streamed once: ``total`` counts every
        row and only the rows of the requested page are kept, in the order the
        statement produced them.
        """
        result = session.connection().exec_driver_sql(statement, execution_options=RAW_SQL_OPTIONS)

        if not result.returns_rows:
            return StatementResult(columns=[], rows=[], total=0, params=params,
                                   returns_rows=False, affected_rows=result.rowcount)

        columns = [str(column) for column in result.keys()]

        if params is None:
            rows = [normalize_row(row) for row in result]
            return StatementResult(columns=columns, rows=rows, total=len(rows))

        rows = []
        total = 0
        page_end = params.offset + params.limit
        for row in result:
            if params.offset <= total < page_end:
                rows.append(normalize_row(row))
            total += 1

        return StatementResult(columns=columns, rows=rows, total=total, params=params)

    def execute_query(self, query: str) -> StatementResult:
        """
        Execute a single SQL statement and return all its rows.

        Args:
            query (str): SQL statement to execute

        Returns:
            StatementResult: Columns and rows

        Raises:
            QueryError: If the query is blank or the database rejects it
            DatabaseConnectionError: If the database cannot be reached
        """
        if not self.validate_query(query):
            raise QueryError(query=str(query), error_message="Query cannot be empty")

        statement = query.strip().rstrip(';').strip()

        try:
            with self._connection.get_session() as session:
                return self._run_statement(session, statement)
        except (QueryError, DatabaseConnectionError):
            raise
        except Exception as e:
            raise self._error_handler.handle_error(e, "query execution", {"query": statement})

    def execute_script(self, sql_text: str, params: Optional[PaginationParams] = None) -> StatementResult:
        """
        Execute a ``;``-separated script in one session.

        Every statement runs in order; the result describes the last one and is
        paginated with ``params`` when given. Session variables set by earlier
        statements are visible to later ones.

        Args:
            sql_text (str): One or more SQL statements
            params (Optional[PaginationParams]): Page to keep from the last statement

        Returns:
            StatementResult: Result of the last statement

        Raises:
            QueryError: If the script is blank or any statement fails
            DatabaseConnectionError: If the database cannot be reached
        """
        statements = split_statements(sql_text)
        if not statements:
            raise QueryError(query=str(sql_text), error_message="Query cannot be empty")

        current = statements[0]
        try:
            with self._connection.get_session() as session:
                for current in statements[:-1]:
                    self._run_statement(session, current)
                current = statements[-1]
                result = self._run_statement(session, current, params)
                result.statements = len(statements)
                return result
        except (QueryError, DatabaseConnectionError):
            raise
        except Exception as e:
            raise self._error_handler.handle_error(e, "script execution", {"query": current})

    def _quote_table(self, session: Session, table_name: str) -> str:
        preparer = session.get_bind().dialect.identifier_preparer
        return preparer.quote_identifier(table_name)

    def fetch_table_page(self, table_name: str, params: PaginationParams) -> StatementResult:
        """
        Read one page of a table: a COUNT(*) followed by ``LIMIT ... OFFSET ...``.

        The two statements are not wrapped in a transaction; rows written in
        between can make ``total`` disagree with the page.

        Raises:
            QueryError: If the table does not exist or the read fails
        """
        query = f"SELECT * FROM {table_name}"
        try:
            with self._connection.get_session() as session:
                quoted = self._quote_table(session, table_name)
                query = f"SELECT * FROM {quoted} LIMIT {params.limit} OFFSET {params.offset}"

                count = session.connection().exec_driver_sql(
                    f"SELECT COUNT(*) AS total FROM {quoted}", execution_options=RAW_SQL_OPTIONS
                ).scalar()

                page = self._run_statement(session, query)
                return StatementResult(columns=page.columns, rows=page.rows,
                                       total=int(count or 0), params=params)
        except (QueryError, DatabaseConnectionError):
            raise
        except Exception as e:
            raise self._error_handler.handle_error(e, f"read of table {table_name}", {"query": query})
