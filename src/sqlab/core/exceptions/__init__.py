# src/sqlab/core/exceptions/__init__.py
from .custom_exceptions import (
    SQLabError,
    DatabaseConnectionError,
    QueryError,
    ConfigurationError,
    MalformedEnvelopeError
)

__all__ = [
    'SQLabError',
    'DatabaseConnectionError',
    'QueryError',
    'ConfigurationError',
    'MalformedEnvelopeError'
]
