# src/sqlab/database/query_service.py
import time
import logging
from typing import Dict, Any, List, Optional, Union
from pathlib import Path
import pandas as pd

from sqlab.core.exceptions.custom_exceptions import QueryError, DatabaseConnectionError
from sqlab.database.connection import DatabaseConnection
from sqlab.database.query_executor import QueryExecutor, StatementResult
from sqlab.database.error_handler import DatabaseErrorHandler
from sqlab.database.schema_retriever import SchemaRetriever
from sqlab.database.tsv_source import TsvDataSource
from sqlab.database.formatters import format_adventure_name, is_hash_column
from sqlab.pagination.params import (
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
    PaginationParams,
    build_envelope
)
from sqlab.sql.rewriter import enhance_query_with_formula

logger = logging.getLogger(__name__)


class QueryResult:
    """
    One page of a table or query result, with execution metadata.
    """

    def __init__(self,
                 columns: List[str],
                 rows: List[List[Any]],
                 total: Optional[int],
                 offset: int,
                 limit: int,
                 query: str,
                 execution_time: float,
                 metadata: Optional[Dict[str, Any]] = None):
        """
        Args:
            columns (List[str]): Column names
            rows (List[List[Any]]): Rows of this page, one value per column
            total (Optional[int]): Rows in the whole result
            offset (int): Offset applied
            limit (int): Limit applied
            query (str): The executed query, or the table/file name browsed
            execution_time (float): Execution time in seconds
            metadata (Optional[Dict[str, Any]]): Additional metadata
        """
        self.columns = columns
        self.rows = rows
        self.total = total
        self.offset = offset
        self.limit = limit
        self.query = query
        self.execution_time = execution_time
        self.metadata = metadata or {}

    @classmethod
    def from_statement(cls,
                       result: StatementResult,
                       params: PaginationParams,
                       query: str,
                       execution_time: float,
                       metadata: Optional[Dict[str, Any]] = None) -> 'QueryResult':
        return cls(columns=result.columns, rows=result.rows, total=result.total,
                   offset=params.offset, limit=params.limit, query=query,
                   execution_time=execution_time, metadata=metadata)

    def to_envelope(self, **extra: Any) -> Dict[str, Any]:
        """The ``{columns, rows, total, offset, limit}`` response body."""
        return build_envelope(self.columns, self.rows, self.total,
                              PaginationParams(self.offset, self.limit), **extra)

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert this page to a pandas DataFrame.

        Returns:
            pd.DataFrame: DataFrame with one column per result column
        """
        return pd.DataFrame(self.rows, columns=self.columns)

    def first(self) -> Optional[List[Any]]:
        return self.rows[0] if self.rows else None

    def value(self) -> Any:
        """
        First value of the first row, or None. Handy for COUNT(*) and
        single-token answers.
        """
        first_row = self.first()
        if not first_row:
            return None
        return first_row[0]

    def __len__(self) -> int:
        return len(self.rows)

    def __bool__(self) -> bool:
        return len(self.rows) > 0


class QueryService:
    """
    Service behind the SQLab console endpoints:
    - Paginated query execution and answer checking with a formula column
    - Paginated table and TSV browsing
    - Table listing and database information
    """

    def __init__(self,
                 connection: DatabaseConnection,
                 executor: Optional[QueryExecutor] = None,
                 error_handler: Optional[DatabaseErrorHandler] = None,
                 schema_retriever: Optional[SchemaRetriever] = None,
                 default_limit: int = DEFAULT_PAGE_LIMIT,
                 max_limit: int = MAX_PAGE_LIMIT,
                 hide_hash_columns: bool = True,
                 system_table_prefix: str = "sqlab_",
                 data_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the query service.

        Args:
            connection (DatabaseConnection): Database connection
            executor (Optional[QueryExecutor]): Query executor
            error_handler (Optional[DatabaseErrorHandler]): Error handler
            schema_retriever (Optional[SchemaRetriever]): Schema retriever
            default_limit (int): Page size when the caller gives none
            max_limit (int): Largest page size accepted
            hide_hash_columns (bool): Drop result columns whose name ends in "hash"
            system_table_prefix (str): Tables hidden from the table list
            data_dir (Optional[Union[str, Path]]): Directory holding TSV tables
        """
        self._connection = connection
        self._error_handler = error_handler or DatabaseErrorHandler()
        self._executor = executor or QueryExecutor(connection, self._error_handler)
        self._schema = schema_retriever or SchemaRetriever(connection)
        self._default_limit = default_limit
        self._max_limit = max_limit
        self._hide_hash_columns = hide_hash_columns
        self._system_table_prefix = system_table_prefix
        self._tsv_source = TsvDataSource(data_dir) if data_dir is not None else None

    def pagination_params(self, offset: Any = None, limit: Any = None) -> PaginationParams:
        """Coerce raw offset/limit values; never rejects them."""
        return PaginationParams.coerce(offset, limit,
                                       default_limit=self._default_limit,
                                       max_limit=self._max_limit)

    def _without_hash_columns(self, result: StatementResult) -> StatementResult:
        if not self._hide_hash_columns:
            return result

        keep = [index for index, column in enumerate(result.columns) if not is_hash_column(column)]
        if len(keep) == len(result.columns):
            return result

        result.columns = [result.columns[index] for index in keep]
        result.rows = [[row[index] for index in keep] for row in result.rows]
        return result

    def execute_query(self,
                      query: str,
                      offset: Any = None,
                      limit: Any = None,
                      skip_pagination: bool = False) -> QueryResult:
        """
        Execute a SQL script and return one page of its last statement.

        Args:
            query (str): SQL script, statements separated by ``;``
            offset (Any): Requested offset, coerced
            limit (Any): Requested page size, coerced
            skip_pagination (bool): Return every row in one page

        Returns:
            QueryResult: Page of the result

        Raises:
            QueryError: If the query is blank or the database rejects it
            DatabaseConnectionError: If the database cannot be reached
        """
        if not query or not query.strip():
            raise QueryError(query=query or "", error_message="Query cannot be empty")

        params = None if skip_pagination else self.pagination_params(offset, limit)

        start_time = time.time()
        try:
            statement_result = self._executor.execute_script(query, params)
        except (QueryError, DatabaseConnectionError) as e:
            logger.error(f"Query execution failed: {str(e)}")
            raise

        execution_time = time.time() - start_time
        statement_result = self._without_hash_columns(statement_result)

        if params is None:
            params = PaginationParams(0, statement_result.total or self._default_limit)

        result = QueryResult.from_statement(
            statement_result, params, query, execution_time,
            metadata={
                'statements': statement_result.statements,
                'returns_rows': statement_result.returns_rows,
                'affected_rows': statement_result.affected_rows,
                'timestamp': time.time()
            }
        )

        return result

    def check_solution(self,
                       query: str,
                       formula: str,
                       offset: Any = None,
                       limit: Any = None) -> QueryResult:
        """
        Execute a submitted answer with the verification formula appended to its SELECTs.

        Args:
            query (str): The student's SQL
            formula (str): Verification expression of the current exercise

        Returns:
            QueryResult: Page of the result; ``metadata['rewritten_query']``
            holds the SQL actually executed

        Raises:
            QueryError: If query or formula is blank or execution fails
        """
        if not formula or not formula.strip():
            raise QueryError(query=query or "", error_message="No formula available for this exercise")
        if not query or not query.strip():
            raise QueryError(query=query or "", error_message="Query cannot be empty")

        rewritten = enhance_query_with_formula(query.strip(), formula.strip())
        logger.info(f"Checking solution with rewritten query: {rewritten[:200]}")

        result = self.execute_query(rewritten, offset, limit)
        result.metadata['rewritten_query'] = rewritten
        return result

    def get_table_data(self, table_name: str, offset: Any = None, limit: Any = None) -> QueryResult:
        """
        One page of a table's rows.

        Raises:
            QueryError: If the table does not exist
        """
        params = self.pagination_params(offset, limit)

        start_time = time.time()
        statement_result = self._executor.fetch_table_page(table_name, params)
        execution_time = time.time() - start_time

        return QueryResult.from_statement(statement_result, params, table_name, execution_time,
                                          metadata={'table_name': table_name})

    def get_table_columns(self, table_name: str) -> List[str]:
        """Column names of a table, hash columns removed when they are hidden."""
        columns = self._schema.get_column_names(table_name)
        if self._hide_hash_columns:
            columns = [column for column in columns if not is_hash_column(column)]
        return columns

    def list_tables(self, include_system: bool = False) -> List[str]:
        """
        Tables of the current database, sorted.

        Args:
            include_system (bool): Keep tables starting with the system prefix
        """
        tables = self._schema.get_all_tables()
        if include_system or not self._system_table_prefix:
            return tables
        return [table for table in tables if not table.startswith(self._system_table_prefix)]

    def get_database_info(self) -> Dict[str, Any]:
        """
        Name, host, port and adventure title of the current database.
        Falls back to a "Not connected" placeholder when the database is unreachable.
        """
        try:
            info = self._schema.get_database_info()
        except (DatabaseConnectionError, QueryError) as e:
            logger.error(f"Error fetching database info: {str(e)}")
            return {
                'name': 'Not connected',
                'host': 'localhost',
                'adventure': 'Unknown'
            }

        info['adventure'] = format_adventure_name(info.get('name'))
        return info

    def list_tsv_files(self) -> List[str]:
        return self._require_tsv_source().list_files()

    def get_tsv_data(self, name: str, offset: Any = None, limit: Any = None) -> QueryResult:
        """
        One page of a TSV reference table.

        Raises:
            QueryError: If the file does not exist or no data directory is configured
        """
        params = self.pagination_params(offset, limit)
        start_time = time.time()
        statement_result = self._require_tsv_source().get_page(name, params)
        return QueryResult.from_statement(statement_result, params, name, time.time() - start_time,
                                          metadata={'table_name': name})

    def _require_tsv_source(self) -> TsvDataSource:
        if self._tsv_source is None:
            raise QueryError(query="", error_message="No TSV data directory configured")
        return self._tsv_source
