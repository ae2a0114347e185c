from pathlib import Path
from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from sqlab.core.exceptions.custom_exceptions import DatabaseConnectionError, QueryError
from sqlab.database.connection import DatabaseConnection


class SchemaRetriever:
    """
    Retrieves table and column names of the current SQLab database.
    """

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize with a database connection.

        Args:
            connection (DatabaseConnection): An established database connection
        """
        self._connection = connection

    def _get_engine(self) -> Engine:
        engine = self._connection.get_engine()
        if engine is None:
            raise DatabaseConnectionError("No active database engine")
        return engine

    def get_all_tables(self) -> List[str]:
        """
        Get the table names of the current database, sorted.

        Returns:
            List[str]: List of table names
        """
        try:
            return sorted(inspect(self._get_engine()).get_table_names())
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(f"Failed to list tables: {str(e)}") from e

    def get_column_names(self, table_name: str) -> List[str]:
        """
        Get the column names of a table in declaration order.

        Raises:
            QueryError: If the table does not exist
        """
        try:
            columns = inspect(self._get_engine()).get_columns(table_name)
        except sa.exc.NoSuchTableError as e:
            raise QueryError(query=table_name, error_message=f"Table '{table_name}' doesn't exist") from e
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(f"Failed to read columns of {table_name}: {str(e)}") from e
        return [column['name'] for column in columns]

    def get_database_name(self) -> Optional[str]:
        """
        Name of the current database; the file stem for SQLite.
        """
        engine = self._get_engine()
        if engine.dialect.name in ('mysql', 'mariadb'):
            with engine.connect() as connection:
                return connection.execute(sa.text("SELECT DATABASE() AS name")).scalar()

        database = engine.url.database
        if database and engine.dialect.name == 'sqlite':
            return Path(database).stem
        return database

    def get_host(self) -> str:
        engine = self._get_engine()
        if engine.dialect.name in ('mysql', 'mariadb'):
            with engine.connect() as connection:
                host = connection.execute(sa.text("SELECT @@hostname AS host")).scalar()
                if host:
                    return host
        return engine.url.host or 'localhost'

    def get_database_info(self) -> Dict[str, Any]:
        """
        Raises:
            DatabaseConnectionError: If the server cannot be queried
        """
        engine = self._get_engine()
        try:
            return {
                'name': self.get_database_name(),
                'host': self.get_host(),
                'port': engine.url.port,
            }
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(f"Failed to read database information: {str(e)}") from e
