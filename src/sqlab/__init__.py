# src/sqlab/__init__.py
"""SQLab console backend: paginated table/query browsing and answer checking."""

__version__ = "0.1.0"
