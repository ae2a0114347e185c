# src/sqlab/config/base_config.py
import os
import json
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dotenv import load_dotenv

from sqlab.core.exceptions.custom_exceptions import ConfigurationError

TRUE_STRINGS = ('true', 'yes', 'on', '1')
FALSE_STRINGS = ('false', 'no', 'off', '0')


class BaseConfig:
    """
    Settings layered as defaults, then an optional JSON/YAML file, then
    ``<PREFIX>_<KEY>`` environment variables. A ``.env`` file in the working
    directory is loaded into the environment first.

    Environment values arrive as strings and are converted to the type of the
    default they override: ``SQLAB_PORT=8080`` becomes an int and
    ``SQLAB_HIDE_HASH_COLUMNS=0`` a bool. Variables without a default stay strings.
    Subclasses report invalid combinations from ``validate``.
    """

    def __init__(self, config_name: str, env_prefix: str = ""):
        """
        Args:
            config_name (str): Name used in error messages
            env_prefix (str): Prefix of the environment variables read; none are read without one
        """
        self.config_name = config_name
        self.env_prefix = env_prefix
        self._config_data: Dict[str, Any] = {}

        env_path = Path('.env')
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

    def load_from_env(self, types: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Read ``<PREFIX>_*`` variables, keyed by the lower-cased rest of their name.

        Args:
            types (Optional[Dict[str, Any]]): Sample values whose types the matching
                variables are converted to

        Raises:
            ConfigurationError: If a value cannot be converted
        """
        if not self.env_prefix:
            return {}

        prefix = f"{self.env_prefix}_"
        types = types or {}
        env_config = {}
        for name, value in os.environ.items():
            if name.startswith(prefix):
                key = name[len(prefix):].lower()
                env_config[key] = self._convert(key, value, types.get(key))
        return env_config

    def _convert(self, key: str, value: str, like: Any) -> Any:
        if like is None or isinstance(like, str):
            return value

        # bool before int: bool is an int subclass
        if isinstance(like, bool):
            lowered = value.strip().lower()
            if lowered in TRUE_STRINGS:
                return True
            if lowered in FALSE_STRINGS:
                return False
            raise ConfigurationError(self.config_name, [f"{key} expects a boolean, got {value!r}"])

        try:
            return type(like)(value.strip())
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                self.config_name, [f"{key} expects {type(like).__name__}, got {value!r}"]
            ) from e

    def load_from_file(self, file_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Read a JSON or YAML settings file holding a single mapping.

        Raises:
            ConfigurationError: If the file is missing, of another format, or not a mapping
        """
        path = Path(file_path)
        if not path.exists():
            raise ConfigurationError(self.config_name, [f"file not found: {path}"])

        suffix = path.suffix.lower()
        with open(path, 'r') as f:
            if suffix == '.json':
                data = json.load(f)
            elif suffix in ('.yml', '.yaml'):
                data = yaml.safe_load(f) or {}
            else:
                raise ConfigurationError(self.config_name, [f"unsupported file format: {suffix}"])

        if not isinstance(data, dict):
            raise ConfigurationError(self.config_name, [f"{path} does not hold a mapping"])
        return data

    def load_config(self, defaults: Optional[Dict[str, Any]] = None,
                    config_file: Optional[Union[str, Path]] = None,
                    env_override: bool = True) -> Dict[str, Any]:
        """
        Merge defaults, file and environment, then validate the result.

        Args:
            defaults (Optional[Dict[str, Any]]): Default values, also the conversion types
            config_file (Optional[Union[str, Path]]): JSON or YAML settings file
            env_override (bool): Whether environment variables are applied

        Returns:
            Dict[str, Any]: Combined configuration

        Raises:
            ConfigurationError: If a layer cannot be read or ``validate`` reports problems
        """
        config = dict(defaults or {})

        if config_file:
            config.update(self.load_from_file(config_file))

        if env_override:
            config.update(self.load_from_env(types=defaults))

        problems = self.validate(config)
        if problems:
            raise ConfigurationError(self.config_name, problems)

        self._config_data = config
        return config

    def validate(self, config: Dict[str, Any]) -> List[str]:
        """Problems found in a merged configuration; none by default."""
        return []

    def get(self, key: str, default: Any = None) -> Any:
        return self._config_data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._config_data[key] = value

    def as_dict(self) -> Dict[str, Any]:
        return self._config_data.copy()
