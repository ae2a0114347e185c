# src/sqlab/web_interface/dependencies.py
from functools import lru_cache
from fastapi import Depends
import logging

from sqlab.config.app_config import SQLabConfig
from sqlab.database.connection import DatabaseConnection
from sqlab.database.query_service import QueryService
from sqlab.database.error_handler import DatabaseErrorHandler

# Get logger
logger = logging.getLogger(__name__)


@lru_cache()
def get_app_config() -> SQLabConfig:
    """
    Application settings, loaded once per process.
    """
    return SQLabConfig()


def get_db_connection():
    """
    Get a database connection handle for one request.

    The handle connects on first use, so endpoints that tolerate an unreachable
    database (``/database-info``) can still answer. It is released when the
    request is done, whatever the outcome.
    """
    connection = DatabaseConnection()
    try:
        yield connection
    finally:
        connection.disconnect()


def get_query_service(
        connection: DatabaseConnection = Depends(get_db_connection),
        app_config: SQLabConfig = Depends(get_app_config)
) -> QueryService:
    """
    Get a query service with the database connection.
    """
    return QueryService(
        connection=connection,
        error_handler=DatabaseErrorHandler(),
        default_limit=app_config.default_page_limit,
        max_limit=app_config.max_page_limit,
        hide_hash_columns=app_config.hide_hash_columns,
        system_table_prefix=app_config.system_table_prefix,
        data_dir=app_config.data_dir
    )
