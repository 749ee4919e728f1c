"""
Configuration management for the table_unify system.

This module provides explicit configuration values for database and HTTP
connections, read from environment variables or properties files, and a
ConfigManager that loads and caches mapping configuration files. Nothing here
is global: callers create the values they need and pass them to connections.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass, field

from ..models import MappingConfiguration
from ..mapping.serializers import get_serializer_for_path
from ..exceptions import ConfigurationError
from .format_defaults import FormatDefaults


ENV_PREFIX = "TABLE_UNIFY_"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got '{raw}'") from e


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got '{raw}'") from e


@dataclass
class DatabaseConfig:
    """
    Database connection settings passed explicitly to DbConnection.

    Attributes:
        connection_string: ODBC connection string for pyodbc, or a database path / sqlite: URL for sqlite3
        username: Optional user name appended as UID for ODBC connections
        password: Optional password appended as PWD for ODBC connections
        driver_module: Name of the DB-API module used to connect
        timeout: Connection timeout in seconds
    """
    connection_string: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    driver_module: str = FormatDefaults.DB_DRIVER_MODULE
    timeout: int = FormatDefaults.DB_TIMEOUT

    def __post_init__(self):
        if not self.connection_string or not str(self.connection_string).strip():
            raise ConfigurationError("Database connection string cannot be empty")

    @classmethod
    def from_environment(cls) -> 'DatabaseConfig':
        """
        Create database configuration from TABLE_UNIFY_* environment variables.

        Raises:
            ConfigurationError: If TABLE_UNIFY_CONNECTION_STRING is not set
        """
        connection_string = _env('CONNECTION_STRING')
        if not connection_string:
            raise ConfigurationError(f"{ENV_PREFIX}CONNECTION_STRING environment variable is not set")

        return cls(
            connection_string=connection_string,
            username=_env('DB_USERNAME') or None,
            password=_env('DB_PASSWORD') or None,
            driver_module=_env('DB_DRIVER', FormatDefaults.DB_DRIVER_MODULE),
            timeout=_env_int('DB_TIMEOUT', FormatDefaults.DB_TIMEOUT)
        )

    @classmethod
    def from_properties(cls, properties_path: Union[str, Path]) -> 'DatabaseConfig':
        """
        Create database configuration from a key=value properties file.

        Recognized keys are url, user, password, driver and timeout. Lines
        starting with '#' or '!' are comments.

        Raises:
            ConfigurationError: If the file is missing or has no url
        """
        path = Path(properties_path)
        if not path.exists():
            raise ConfigurationError(f"Database properties file not found: {path}")

        values = {}
        with open(path, 'r', encoding='utf-8') as file:
            for line in file:
                line = line.strip()
                if not line or line.startswith(('#', '!')):
                    continue
                separator = '=' if '=' in line else ':'
                if separator not in line:
                    continue
                key, value = line.split(separator, 1)
                values[key.strip()] = value.strip()

        if not values.get('url'):
            raise ConfigurationError(f"Database properties file {path} does not define 'url'")

        try:
            timeout = int(values.get('timeout', FormatDefaults.DB_TIMEOUT))
        except ValueError as e:
            raise ConfigurationError(f"Invalid timeout in {path}: {values.get('timeout')}") from e

        return cls(
            connection_string=values['url'],
            username=values.get('user') or None,
            password=values.get('password') or None,
            driver_module=values.get('driver') or FormatDefaults.DB_DRIVER_MODULE,
            timeout=timeout
        )

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        issues = []
        if not self.driver_module:
            issues.append("Database driver module is not set")
        if self.timeout <= 0:
            issues.append(f"Database timeout must be positive, got {self.timeout}")
        if self.password and not self.username:
            issues.append("Database password is set without a username")
        return issues


@dataclass
class HttpConfig:
    """HTTP client settings used by REST and remote file connections."""
    timeout: float = FormatDefaults.HTTP_TIMEOUT
    follow_redirects: bool = True
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_environment(cls) -> 'HttpConfig':
        """Create HTTP configuration from TABLE_UNIFY_HTTP_* environment variables."""
        return cls(
            timeout=_env_float('HTTP_TIMEOUT', FormatDefaults.HTTP_TIMEOUT),
            follow_redirects=_env('HTTP_FOLLOW_REDIRECTS', 'true').lower() == 'true'
        )


class ConfigManager:
    """
    Loads and caches mapping configurations and exposes connection settings.

    Relative mapping paths are resolved against the base config path, taken
    from the argument, then TABLE_UNIFY_CONFIG_PATH, then the working directory.
    """

    def __init__(self, base_config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            base_config_path: Base path for configuration files
        """
        self.logger = logging.getLogger(__name__)

        if base_config_path is not None:
            self.base_config_path = Path(base_config_path)
        else:
            self.base_config_path = Path(_env('CONFIG_PATH', str(Path.cwd())))

        self.http_config = HttpConfig.from_environment()
        self._database_config: Optional[DatabaseConfig] = None
        self._mapping_cache: Dict[str, MappingConfiguration] = {}

        self.logger.info(f"ConfigManager initialized with base path: {self.base_config_path}")

    def get_database_config(self) -> DatabaseConfig:
        """
        Return database settings from the environment, reading them on first use.

        Raises:
            ConfigurationError: If the environment does not define a connection string
        """
        if self._database_config is None:
            self._database_config = DatabaseConfig.from_environment()
        return self._database_config

    def get_http_config(self) -> HttpConfig:
        return self.http_config

    def resolve_path(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.base_config_path / path

    def load_mapping_configuration(self, mapping_path: Union[str, Path]) -> MappingConfiguration:
        """
        Load a JSON or YAML mapping configuration with caching.

        Args:
            mapping_path: Path to a .json, .yaml or .yml mapping file

        Returns:
            Loaded mapping configuration

        Raises:
            ConfigurationError: If the file does not exist
            MappingError: If the file cannot be parsed or describes an invalid mapping
        """
        full_path = self.resolve_path(mapping_path)
        cache_key = str(full_path)

        if cache_key in self._mapping_cache:
            self.logger.debug(f"Returning cached mapping configuration for {cache_key}")
            return self._mapping_cache[cache_key]

        if not full_path.exists():
            raise ConfigurationError(f"Mapping configuration file not found: {full_path}")

        config = get_serializer_for_path(full_path).read_from_file(full_path)
        self._mapping_cache[cache_key] = config

        self.logger.info(f"Loaded mapping configuration from {full_path} "
                         f"({len(config.column_mappings)} column mappings)")
        return config

    def validate_configuration(self) -> bool:
        """
        Validate the environment-provided configuration.

        Returns:
            True if configuration is usable, False otherwise
        """
        is_valid = True

        if not self.base_config_path.exists():
            self.logger.error(f"Base configuration path does not exist: {self.base_config_path}")
            is_valid = False

        if self.http_config.timeout <= 0:
            self.logger.error(f"HTTP timeout must be positive, got {self.http_config.timeout}")
            is_valid = False

        if _env('CONNECTION_STRING'):
            for issue in self.get_database_config().validate():
                self.logger.error(f"Database configuration: {issue}")
                is_valid = False
        else:
            self.logger.warning(f"{ENV_PREFIX}CONNECTION_STRING is not set; database connections need explicit settings")

        return is_valid

    def get_configuration_summary(self) -> Dict[str, Any]:
        """Return a summary of the active configuration without secrets."""
        database = None
        if _env('CONNECTION_STRING'):
            db_config = self.get_database_config()
            database = {
                'driver_module': db_config.driver_module,
                'timeout': db_config.timeout,
                'has_credentials': bool(db_config.username)
            }

        return {
            'base_config_path': str(self.base_config_path),
            'database': database,
            'http': {
                'timeout': self.http_config.timeout,
                'follow_redirects': self.http_config.follow_redirects
            },
            'cached_mappings': sorted(self._mapping_cache),
            'defaults': FormatDefaults.to_dict()
        }

    def clear_cache(self) -> None:
        """Clear cached mapping configurations."""
        self._mapping_cache.clear()
        self.logger.info("Configuration cache cleared")

    def reload_configuration(self) -> None:
        """Re-read environment settings and clear caches."""
        self.http_config = HttpConfig.from_environment()
        self._database_config = None
        self.clear_cache()
        self.logger.info("Configuration reloaded from environment")
