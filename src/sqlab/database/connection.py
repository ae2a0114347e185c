from typing import Dict, Any, Optional
import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from sqlab.core.exceptions.custom_exceptions import DatabaseConnectionError
from sqlab.database.config import DatabaseConfig
from sqlab.database.connection_pool import ConnectionPool, get_global_connection_pool

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """
    Handle on the SQLab database.

    Sessions returned by ``get_session`` are meant to be used as context
    managers; leaving the block returns the underlying connection to the pool
    whether the statements succeeded or failed.
    """

    def __init__(
            self,
            connection_string: Optional[str] = None,
            config: Optional[DatabaseConfig] = None,
            use_pool: bool = True,
            pool: Optional[ConnectionPool] = None,
            connect_args: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            connection_string (Optional[str]): Direct connection string, read from
                the environment when omitted
            config (Optional[DatabaseConfig]): Database configuration
            use_pool (bool): Whether to share engines through the connection pool
            pool (Optional[ConnectionPool]): Pool to use instead of the global one
            connect_args (Optional[Dict[str, Any]]): Additional DBAPI connect arguments
        """
        self._connection_string = connection_string
        self._config = config or DatabaseConfig()
        self._use_pool = use_pool
        self._connect_args = connect_args or {}

        self._engine: Optional[Engine] = None
        self._session_factory = None
        self._is_connected = False

        self._pool = (pool or get_global_connection_pool()) if use_pool else None

    def connect(self) -> bool:
        """
        Establish a database connection.

        Returns:
            bool: True if connection is successful

        Raises:
            DatabaseConnectionError: If connection fails
        """
        if self._is_connected and self._engine:
            return True

        if not self._connection_string:
            self._connection_string = self._config.get_connection_string_from_env()

        try:
            if self._use_pool and self._pool:
                engine_kwargs = {"connect_args": self._connect_args} if self._connect_args else {}
                self._engine = self._pool.get_engine(self._connection_string, **engine_kwargs)
            else:
                self._engine = sa.create_engine(
                    self._connection_string,
                    connect_args=self._connect_args,
                    isolation_level="AUTOCOMMIT"
                )
                with self._engine.connect() as connection:
                    connection.execute(sa.text("SELECT 1"))

            self._session_factory = sessionmaker(bind=self._engine)
            self._is_connected = True
            logger.debug(f"Connected to database: {self._engine.url.render_as_string(hide_password=True)}")

            return True
        except SQLAlchemyError as e:
            self._is_connected = False
            self._engine = None
            self._session_factory = None

            error_message = f"Failed to connect to database: {str(e)}"
            logger.error(error_message)

            raise DatabaseConnectionError(error_message, error_code="DB_CONNECTION_ERROR") from e

    def disconnect(self) -> None:
        """
        Release this handle.
        Pooled engines stay alive for the next request; private ones are disposed.
        """
        if not self._is_connected:
            return

        if not self._use_pool and self._engine is not None:
            self._engine.dispose()
            logger.info("Database connection closed")

        self._engine = None
        self._session_factory = None
        self._is_connected = False

    def get_session(self) -> Session:
        """
        Get a database session, connecting first if needed.

        Returns:
            Session: SQLAlchemy database session

        Raises:
            DatabaseConnectionError: If no connection can be established
        """
        if not self._is_connected or not self._session_factory:
            self.connect()

        return self._session_factory()

    def get_engine(self) -> Engine:
        if not self._is_connected or self._engine is None:
            self.connect()
        return self._engine

    def is_connected(self) -> bool:
        """
        Check if the database connection is active.

        Returns:
            bool: True if connected, False otherwise
        """
        if not self._is_connected or not self._engine:
            return False

        try:
            with self._engine.connect() as connection:
                connection.execute(sa.text("SELECT 1"))
            return True
        except SQLAlchemyError:
            self._is_connected = False
            return False

    def get_connection_info(self) -> Dict[str, Any]:
        """
        Get information about the current connection.

        Returns:
            Dict[str, Any]: Connection information

        Raises:
            DatabaseConnectionError: If no connection is established
        """
        if not self._is_connected or self._engine is None:
            raise DatabaseConnectionError("No active database connection")

        url = self._engine.url
        return {
            "database_type": url.get_backend_name(),
            "host": url.host,
            "port": url.port,
            "database": url.database,
            "pooled": self._use_pool
        }
