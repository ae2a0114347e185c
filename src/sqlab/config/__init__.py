# src/sqlab/config/__init__.py
from .base_config import BaseConfig
from .logging_config import LoggingConfig
from .app_config import SQLabConfig

__all__ = [
    'BaseConfig',
    'LoggingConfig',
    'SQLabConfig'
]
