"""
Connection to a relational database through a DB-API 2.0 driver.

pyodbc is the default driver and receives an ODBC connection string. Any
other DB-API module can be named in DatabaseConfig.driver_module; sqlite3
receives a database path, with sqlite:/jdbc:sqlite: prefixes removed.
"""

import importlib
import logging
from contextlib import contextmanager
from typing import Any, Optional, Sequence

from ..config.config_manager import DatabaseConfig
from ..exceptions import DatabaseError, DataSourceConnectionError
from ..interfaces import DataSourceConnectionInterface


_SQLITE_PREFIXES = ("jdbc:sqlite:", "sqlite:///", "sqlite://", "sqlite:")


class DbConnection(DataSourceConnectionInterface):
    """
    Database session created from an explicit DatabaseConfig.

    Args:
        config: Connection string, credentials and driver module
    """

    def __init__(self, config: DatabaseConfig):
        if config is None:
            raise ValueError("Database configuration cannot be null")
        self.logger = logging.getLogger(__name__)
        self.config = config
        self._driver = None
        self._connection = None

    @property
    def location(self) -> str:
        return self.config.connection_string

    @property
    def connection_type(self) -> str:
        return "database"

    @property
    def driver_module(self) -> str:
        return self.config.driver_module

    @property
    def properties(self):
        props = super().properties
        props.update({"driver_module": self.config.driver_module, "username": self.config.username})
        return props

    @property
    def driver_error(self):
        """Base exception class of the driver module, available once connected."""
        return self._driver.Error

    def is_remote(self) -> bool:
        return self.config.driver_module != "sqlite3"

    def is_connected(self) -> bool:
        return self._connection is not None

    def connect(self) -> bool:
        if self._connection is not None:
            return True

        try:
            self._driver = importlib.import_module(self.config.driver_module)
        except ImportError as e:
            self.logger.error(f"Database driver module '{self.config.driver_module}' is not available: {e}")
            return False

        try:
            self._connection = self._open()
        except self._driver.Error as e:
            self.logger.error(f"Database connection failed: {e}")
            self._connection = None
            return False

        self.logger.info(f"Connected to database using {self.config.driver_module}")
        return True

    def _open(self):
        if self.config.driver_module == "sqlite3":
            database = self.config.connection_string
            for prefix in _SQLITE_PREFIXES:
                if database.lower().startswith(prefix):
                    database = database[len(prefix):]
                    break
            return self._driver.connect(database, timeout=self.config.timeout, check_same_thread=False)

        if self.config.driver_module == "pyodbc":
            connection_string = self.config.connection_string
            if connection_string.lower().startswith("odbc:"):
                connection_string = connection_string[len("odbc:"):]
            if self.config.username:
                connection_string = connection_string.rstrip(";") + f";UID={self.config.username}"
                if self.config.password:
                    connection_string += f";PWD={self.config.password}"
            return self._driver.connect(connection_string, autocommit=False, timeout=self.config.timeout)

        return self._driver.connect(self.config.connection_string)

    def disconnect(self) -> None:
        if self._connection is not None:
            try:
                self._connection.close()
            except self._driver.Error as e:
                self.logger.warning(f"Error closing database connection: {e}")
            finally:
                self._connection = None
                self.logger.debug("Database connection closed")

    def get_raw_connection(self) -> Any:
        """Return the DB-API connection, or None when disconnected."""
        return self._connection

    def _require_connection(self):
        if not self.connect():
            raise DataSourceConnectionError("Failed to connect to database", self.location)
        return self._connection

    def execute(self, sql: str, params: Sequence[Any] = (), table_name: Optional[str] = None):
        """
        Execute one statement and return the cursor.

        Raises:
            DataSourceConnectionError: If the database cannot be reached
            DatabaseError: If the statement fails
        """
        connection = self._require_connection()
        cursor = connection.cursor()
        try:
            cursor.execute(sql, tuple(params))
        except self._driver.Error as e:
            cursor.close()
            self.logger.error(f"SQL execution failed: {e}")
            raise DatabaseError(f"SQL execution failed: {e}", self.location,
                                sql_query=sql, table_name=table_name) from e
        return cursor

    @contextmanager
    def transaction(self):
        """
        Context manager for explicit transaction management.

        Commits when the block completes and rolls back on any exception,
        which is re-raised.

        Yields:
            Cursor on the active connection
        """
        connection = self._require_connection()
        cursor = connection.cursor()
        try:
            yield cursor
            connection.commit()
            self.logger.debug("Transaction committed")
        except Exception:
            connection.rollback()
            self.logger.warning("Transaction rolled back")
            raise
        finally:
            cursor.close()
