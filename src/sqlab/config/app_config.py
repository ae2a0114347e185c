# src/sqlab/config/app_config.py
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from sqlab.config.base_config import BaseConfig


class SQLabConfig(BaseConfig):
    """
    Application settings for the SQLab console.
    Values come from defaults, an optional JSON/YAML file and ``SQLAB_*`` variables.
    """

    DEFAULTS: Dict[str, Any] = {
        'default_page_limit': 10,
        'max_page_limit': 1000,
        'hide_hash_columns': True,
        'system_table_prefix': 'sqlab_',
        'data_dir': 'data',
        'host': '0.0.0.0',
        'port': 3000,
        'reload': False,
    }

    def __init__(self, env_prefix: str = "SQLAB", config_file: Optional[Union[str, Path]] = None):
        super().__init__("sqlab", env_prefix)
        self.load_config(defaults=self.DEFAULTS, config_file=config_file)

    def validate(self, config: Dict[str, Any]) -> List[str]:
        problems = []

        limits_ok = True
        for key in ('default_page_limit', 'max_page_limit'):
            value = config.get(key)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                problems.append(f"{key} must be a positive integer, got {value!r}")
                limits_ok = False

        if limits_ok and config['default_page_limit'] > config['max_page_limit']:
            problems.append("default_page_limit must not exceed max_page_limit")

        port = config.get('port')
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            problems.append(f"port must be between 1 and 65535, got {port!r}")

        return problems

    @property
    def default_page_limit(self) -> int:
        return int(self.get('default_page_limit'))

    @property
    def max_page_limit(self) -> int:
        return int(self.get('max_page_limit'))

    @property
    def hide_hash_columns(self) -> bool:
        return bool(self.get('hide_hash_columns'))

    @property
    def system_table_prefix(self) -> str:
        return str(self.get('system_table_prefix') or '')

    @property
    def data_dir(self) -> Path:
        return Path(str(self.get('data_dir')))

    @property
    def port(self) -> int:
        return int(self.get('port'))
