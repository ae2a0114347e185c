# src/sqlab/client/__init__.py
from sqlab.client.api_client import SQLabClient, table_fetcher, query_fetcher, tsv_fetcher

__all__ = [
    'SQLabClient',
    'table_fetcher',
    'query_fetcher',
    'tsv_fetcher'
]
