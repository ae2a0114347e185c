# src/sqlab/database/config.py
import os
from typing import Dict, Any, Optional
from urllib.parse import quote_plus

from sqlab.core.exceptions.custom_exceptions import DatabaseConnectionError


class DatabaseConfig:
    """
    Connection settings for the SQLab database.
    Reads ``DB_*`` environment variables, falling back to the classic local
    SQLab setup (MariaDB on port 3307, database ``sqlab_island``).
    """

    MARIADB = "mariadb"
    MYSQL = "mysql"
    SQLITE = "sqlite"

    DEFAULT_PORTS = {
        MARIADB: 3307,
        MYSQL: 3306,
    }

    DEFAULTS = {
        "TYPE": MARIADB,
        "HOST": "localhost",
        "USERNAME": "root",
        "DATABASE": "sqlab_island",
    }

    def __init__(self, env_prefix: str = "DB_"):
        """
        Initialize database configuration.

        Args:
            env_prefix (str): Prefix for environment variables
        """
        self._env_prefix = env_prefix

    @property
    def env_prefix(self) -> str:
        return self._env_prefix

    def _env(self, name: str) -> Optional[str]:
        value = os.getenv(f"{self._env_prefix}{name}")
        if value is None or value == "":
            return self.DEFAULTS.get(name)
        return value

    @classmethod
    def get_connection_string(
            cls,
            db_type: str,
            username: Optional[str] = None,
            password: Optional[str] = None,
            host: Optional[str] = None,
            port: Optional[int] = None,
            database: str = ""
    ) -> str:
        """
        Generate a SQLAlchemy connection string.

        Args:
            db_type (str): Type of database (mariadb, mysql, sqlite)
            username (Optional[str]): Database username
            password (Optional[str]): Database password, may be empty
            host (Optional[str]): Database host
            port (Optional[int]): Database port
            database (str): Database name, or file path for SQLite

        Returns:
            str: Formatted connection string

        Raises:
            ValueError: If the type is unsupported or parameters are missing
        """
        db_type = (db_type or "").lower()

        if db_type == cls.SQLITE:
            return f"sqlite:///{database}"

        if db_type in (cls.MARIADB, cls.MYSQL):
            if not all([username, host, database]):
                raise ValueError("Missing required connection parameters")

            credentials = quote_plus(username)
            if password:
                credentials = f"{credentials}:{quote_plus(password)}"

            return (
                f"{db_type}+pymysql://{credentials}@"
                f"{host}:{port or cls.DEFAULT_PORTS[db_type]}/{database}"
            )

        raise ValueError(f"Unsupported database type: {db_type}")

    def get_connection_string_from_env(self) -> str:
        """
        Generate a connection string from environment variables.

        ``DB_URL`` is used verbatim when set.

        Returns:
            str: Connection string

        Raises:
            DatabaseConnectionError: If required settings are missing or invalid
        """
        prefix = self._env_prefix

        url = os.getenv(f"{prefix}URL")
        if url:
            return url

        db_type = self._env("TYPE").lower()

        if db_type == self.SQLITE:
            database = os.getenv(f"{prefix}DATABASE")
            if not database:
                raise DatabaseConnectionError(f"Missing {prefix}DATABASE environment variable")
            return self.get_connection_string(db_type=db_type, database=database)

        username = self._env("USERNAME")
        password = self._env("PASSWORD")
        host = self._env("HOST")
        database = self._env("DATABASE")
        port = self._env("PORT")

        missing = [f"{prefix}{name}" for name, value in
                   (("USERNAME", username), ("HOST", host), ("DATABASE", database)) if not value]
        if missing:
            raise DatabaseConnectionError(f"Missing environment variables: {', '.join(missing)}")

        if port:
            try:
                port = int(port)
            except ValueError:
                raise DatabaseConnectionError(f"Invalid port number: {port}")

        try:
            return self.get_connection_string(
                db_type=db_type,
                username=username,
                password=password,
                host=host,
                port=port,
                database=database
            )
        except ValueError as e:
            raise DatabaseConnectionError(str(e)) from e

    def get_connection_pool_args(self,
                                 pool_size: int = 5,
                                 max_overflow: int = 0,
                                 pool_timeout: int = 30,
                                 pool_recycle: int = 1800) -> Dict[str, Any]:
        """
        Get connection pooling arguments for SQLAlchemy.

        Args:
            pool_size (int): Connections kept in the pool
            max_overflow (int): Extra connections allowed beyond pool_size
            pool_timeout (int): Seconds to wait before giving up on getting a connection
            pool_recycle (int): Seconds after which a connection is recycled

        Returns:
            Dict[str, Any]: Connection pooling arguments
        """
        return {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_recycle": pool_recycle
        }
