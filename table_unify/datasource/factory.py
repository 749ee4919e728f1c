"""
Factory creating connections from location strings.
"""

import logging
from dataclasses import replace
from enum import Enum
from typing import Optional

from ..config.config_manager import DatabaseConfig, HttpConfig
from ..exceptions import DataSourceError
from ..interfaces import DataSourceConnectionInterface
from .db_connection import DbConnection
from .file_connection import FileConnection
from .nosql_connection import NoSQLConnection
from .rest_connection import RESTConnection


logger = logging.getLogger(__name__)


class ConnectionKind(Enum):
    """Closed set of connection kinds."""
    FILE = "file"
    DATABASE = "database"
    REST = "rest"
    NOSQL = "nosql"


_DATABASE_PREFIXES = ("jdbc:", "odbc:", "sqlite:")
_FILE_SUFFIXES = (".csv", ".json", ".xml")


def connection_kind_for(location: str) -> ConnectionKind:
    """
    Classify a location string.

    Database URLs and ODBC connection strings are checked first, then file
    extensions, then http(s) URLs (REST when the path contains /api/ or
    /rest/, otherwise a remote file), then document store URLs.

    Raises:
        DataSourceError: If the location format is not supported
    """
    if not location or not location.strip():
        raise DataSourceError("Location cannot be empty", location)

    lowered = location.strip().lower()
    if lowered.startswith(_DATABASE_PREFIXES) or "driver=" in lowered:
        return ConnectionKind.DATABASE
    if lowered.endswith(_FILE_SUFFIXES):
        return ConnectionKind.FILE
    if lowered.startswith(("http://", "https://")):
        if "/api/" in lowered or "/rest/" in lowered:
            return ConnectionKind.REST
        return ConnectionKind.FILE
    if lowered.startswith(("mongodb://", "mongodb+srv://")):
        return ConnectionKind.NOSQL
    raise DataSourceError(f"Unsupported location format: {location}", location)


def create_connection(location: str, db_config: Optional[DatabaseConfig] = None,
                      http_config: Optional[HttpConfig] = None) -> DataSourceConnectionInterface:
    """
    Create an unconnected connection for a location.

    Args:
        location: File path, URL, database URL or ODBC connection string
        db_config: Credentials and driver for database locations; the location
            replaces its connection string
        http_config: HTTP settings for REST endpoints and remote files

    Returns:
        Connection matching the location kind

    Raises:
        DataSourceError: If the location format is not supported
    """
    kind = connection_kind_for(location)
    logger.debug(f"Creating {kind.value} connection for {location}")

    if kind is ConnectionKind.DATABASE:
        if db_config is not None:
            return DbConnection(replace(db_config, connection_string=location))
        driver = "sqlite3" if "sqlite:" in location.lower() else "pyodbc"
        return DbConnection(DatabaseConfig(connection_string=location, driver_module=driver))
    if kind is ConnectionKind.REST:
        return RESTConnection(location, http_config=http_config)
    if kind is ConnectionKind.NOSQL:
        return NoSQLConnection(location)
    return FileConnection(location, http_config=http_config)
