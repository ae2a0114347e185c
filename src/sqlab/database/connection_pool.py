from typing import Dict, Any
import threading
import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
import logging

from sqlab.core.exceptions.custom_exceptions import DatabaseConnectionError
from sqlab.database.config import DatabaseConfig

logger = logging.getLogger(__name__)


class ConnectionPool:
    """
    Registry of SQLAlchemy engines, one per connection string.
    Each engine carries a bounded connection pool; statements run in
    autocommit mode so every statement commits on its own.
    """

    def __init__(
            self,
            config: DatabaseConfig,
            pool_size: int = 5,
            max_overflow: int = 0,
            pool_timeout: int = 30,
            pool_recycle: int = 1800
    ):
        """
        Initialize a connection pool.

        Args:
            config (DatabaseConfig): Database configuration
            pool_size (int): The size of the pool to be maintained
            max_overflow (int): The maximum overflow size of the pool
            pool_timeout (int): Seconds to wait before giving up on getting a connection
            pool_recycle (int): Seconds after which a connection is automatically recycled
        """
        self.config = config
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle

        self._engines: Dict[str, Engine] = {}
        self._lock = threading.RLock()

    def _engine_kwargs(self, connection_string: str, **kwargs) -> Dict[str, Any]:
        engine_kwargs = {"isolation_level": "AUTOCOMMIT"}

        # SQLite pools do not take QueuePool sizing arguments
        if not connection_string.startswith("sqlite"):
            engine_kwargs.update(self.config.get_connection_pool_args(
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_timeout=self.pool_timeout,
                pool_recycle=self.pool_recycle
            ))

        engine_kwargs.update(kwargs)
        return engine_kwargs

    def get_engine(self, connection_string: str, **kwargs) -> Engine:
        """
        Get a database engine from the pool or create a new one.

        Args:
            connection_string (str): SQLAlchemy connection string
            **kwargs: Additional engine creation parameters

        Returns:
            Engine: SQLAlchemy engine

        Raises:
            DatabaseConnectionError: If engine creation fails
        """
        conn_id = f"{connection_string}:{hash(str(sorted(kwargs.items())))}"

        with self._lock:
            if conn_id in self._engines:
                return self._engines[conn_id]

            try:
                engine = sa.create_engine(connection_string, **self._engine_kwargs(connection_string, **kwargs))

                with engine.connect() as connection:
                    connection.execute(sa.text("SELECT 1"))

                self._engines[conn_id] = engine
                logger.info(f"Created engine for {engine.url.render_as_string(hide_password=True)}")

                return engine
            except SQLAlchemyError as e:
                raise DatabaseConnectionError(
                    f"Failed to create database engine: {str(e)}",
                    error_code="DB_CONNECTION_ERROR"
                ) from e

    def dispose_all(self):
        """Dispose all engines and clean up the pool."""
        with self._lock:
            for conn_id, engine in self._engines.items():
                try:
                    engine.dispose()
                except SQLAlchemyError as e:
                    logger.warning(f"Failed to dispose engine {conn_id}: {str(e)}")

            self._engines.clear()


# Global connection pool
_GLOBAL_POOL = None
_POOL_LOCK = threading.Lock()


def get_global_connection_pool() -> ConnectionPool:
    """
    Get or create the process-wide connection pool.

    Returns:
        ConnectionPool: Global connection pool
    """
    global _GLOBAL_POOL

    with _POOL_LOCK:
        if _GLOBAL_POOL is None:
            _GLOBAL_POOL = ConnectionPool(DatabaseConfig())

    return _GLOBAL_POOL


def dispose_global_connection_pool() -> None:
    """Dispose the engines of the process-wide pool, if it was ever created."""
    with _POOL_LOCK:
        if _GLOBAL_POOL is not None:
            _GLOBAL_POOL.dispose_all()
