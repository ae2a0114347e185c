# src/sqlab/config/logging_config.py
import logging
import logging.config
from pathlib import Path
from typing import Optional, Union

from sqlab.config.base_config import BaseConfig


class LoggingConfig(BaseConfig):
    """
    Configuration for application logging.
    Console output plus rotating log files under ``log_dir``.
    """

    DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s'

    def __init__(self, env_prefix: str = "LOG", log_dir: Union[str, Path] = "logs"):
        """
        Initialize logging configuration.

        Args:
            env_prefix (str): Prefix for environment variables
            log_dir (Union[str, Path]): Directory receiving the log files
        """
        super().__init__("logging", env_prefix)
        self.log_dir = Path(log_dir)

        self._default_config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'standard': {
                    'format': self.DEFAULT_FORMAT
                },
                'detailed': {
                    'format': self.DETAILED_FORMAT
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': 'INFO',
                    'formatter': 'standard',
                    'stream': 'ext://sys.stdout'
                },
                'file': {
                    'class': 'logging.handlers.RotatingFileHandler',
                    'level': 'DEBUG',
                    'formatter': 'detailed',
                    'filename': str(self.log_dir / 'app.log'),
                    'maxBytes': 10485760,  # 10MB
                    'backupCount': 5
                },
                'error_file': {
                    'class': 'logging.handlers.RotatingFileHandler',
                    'level': 'ERROR',
                    'formatter': 'detailed',
                    'filename': str(self.log_dir / 'error.log'),
                    'maxBytes': 10485760,  # 10MB
                    'backupCount': 5
                }
            },
            'loggers': {
                '': {
                    'handlers': ['console', 'file', 'error_file'],
                    'level': 'DEBUG',
                    'propagate': True
                },
                'sqlalchemy.engine': {
                    'level': 'WARNING'
                }
            }
        }

    def configure(self, config_file: Optional[Union[str, Path]] = None) -> None:
        """
        Configure logging system.

        Args:
            config_file (Optional[Union[str, Path]]): Path to logging configuration file
        """
        # Environment variables (LOG_LEVEL etc.) are not dictConfig keys
        config = self.load_config(
            defaults=self._default_config,
            config_file=config_file,
            env_override=False
        )

        self.log_dir.mkdir(parents=True, exist_ok=True)

        logging.config.dictConfig(config)

        level = self.load_from_env().get('level')
        if level:
            self.set_level('', str(level))

        logging.info(f"Logging configured with level: {self.get_root_level()}")

    def get_root_level(self) -> str:
        """
        Get the root logger level name.

        Returns:
            str: Level name (DEBUG, INFO, etc.)
        """
        return logging.getLevelName(logging.getLogger().level)

    def set_level(self, logger_name: str = '', level: Union[int, str] = logging.INFO) -> None:
        """
        Set log level for a specific logger.

        Args:
            logger_name (str): Logger name (empty for root logger)
            level (Union[int, str]): Log level (can be name or level number)
        """
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)

        logging.getLogger(logger_name).setLevel(level)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)
