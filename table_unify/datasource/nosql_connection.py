"""
Connection to a MongoDB-compatible document store.

pymongo is an optional dependency (install the 'optional' extra); it is only
imported when a connection is opened without a custom client factory.
"""

import logging
from typing import Any, Callable, Optional

from ..config.format_defaults import FormatDefaults
from ..exceptions import DataSourceConnectionError, DataSourceError
from ..interfaces import DataSourceConnectionInterface


def mongo_client_factory(url: str, username: Optional[str] = None, password: Optional[str] = None):
    """Create a pymongo.MongoClient for the given URL."""
    import pymongo

    kwargs = {"serverSelectionTimeoutMS": FormatDefaults.NOSQL_SERVER_SELECTION_TIMEOUT_MS}
    if username:
        kwargs["username"] = username
        kwargs["password"] = password
    return pymongo.MongoClient(url, **kwargs)


class NoSQLConnection(DataSourceConnectionInterface):
    """
    Document store connection.

    Args:
        connection_string: mongodb:// or mongodb+srv:// URL
        database: Database name
        collection: Default collection name
        username: Optional user name
        password: Optional password
        client_factory: Callable (url, username, password) -> client; defaults to pymongo
    """

    def __init__(self, connection_string: str, database: str = "default", collection: str = "default",
                 username: Optional[str] = None, password: Optional[str] = None,
                 client_factory: Optional[Callable[..., Any]] = None):
        if not connection_string or not connection_string.strip():
            raise DataSourceError("NoSQL connection string cannot be empty", connection_string)
        self.logger = logging.getLogger(__name__)
        self.connection_string = connection_string
        self.database = database
        self.collection = collection
        self.username = username
        self._password = password
        self._client_factory = client_factory or mongo_client_factory
        self._client = None

    @property
    def location(self) -> str:
        return self.connection_string

    @property
    def connection_type(self) -> str:
        return "nosql"

    @property
    def properties(self):
        props = super().properties
        props.update({"database": self.database, "collection": self.collection})
        return props

    def is_remote(self) -> bool:
        return True

    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self) -> bool:
        if self._client is not None:
            return True
        client = None
        try:
            client = self._client_factory(self.connection_string, self.username, self._password)
            client.admin.command("ping")
        except ImportError as e:
            self.logger.error(f"pymongo is required for NoSQL connections: {e}")
            return False
        except Exception as e:
            self.logger.error(f"Error connecting to NoSQL database {self.database}: {e}")
            if client is not None:
                client.close()
            return False

        self._client = client
        self.logger.info(f"Connected to NoSQL database {self.database}")
        return True

    def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
        self.logger.debug("NoSQL connection closed")

    def get_raw_connection(self) -> Any:
        """Return the client object, or None when disconnected."""
        return self._client

    def get_collection(self, name: Optional[str] = None):
        """
        Return a collection handle, connecting first if needed.

        Raises:
            DataSourceConnectionError: If the store is unreachable
        """
        if not self.connect():
            raise DataSourceConnectionError(f"Failed to connect to {self.database}", self.connection_string)
        return self._client[self.database][name or self.collection]
