# src/sqlab/database/__init__.py
from sqlab.database.connection import DatabaseConnection
from sqlab.database.config import DatabaseConfig
from sqlab.database.query_executor import QueryExecutor, StatementResult
from sqlab.database.query_service import QueryService, QueryResult
from sqlab.database.schema_retriever import SchemaRetriever
from sqlab.database.error_handler import DatabaseErrorHandler
from sqlab.database.tsv_source import TsvDataSource

__all__ = [
    'DatabaseConnection',
    'DatabaseConfig',
    'QueryExecutor',
    'StatementResult',
    'QueryService',
    'QueryResult',
    'SchemaRetriever',
    'DatabaseErrorHandler',
    'TsvDataSource'
]
