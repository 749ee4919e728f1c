"""
Abstract interfaces for the table_unify system.

This module defines the contracts that format readers and writers program
against: the generic tabular data-source contract, the per-format capability
interfaces, the connection lifecycle and the mapping serializer contract.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from .exceptions import DataSourceConnectionError
from .models import MappingConfiguration


class DataSourceInterface(ABC):
    """
    Generic tabular contract every format reader and writer is written against.

    All values cross this boundary as strings.
    """

    @abstractmethod
    def get_row_count(self) -> int:
        """Return the number of rows."""
        pass

    @abstractmethod
    def get_column_count(self) -> int:
        """Return the number of columns."""
        pass

    @abstractmethod
    def get_column_name(self, index: int) -> str:
        """
        Return the name of the column at a position.

        Raises:
            IndexError: If the index is out of range
        """
        pass

    @abstractmethod
    def get_value_at(self, row_index: int, column_name: str) -> str:
        """
        Return a cell value in its string form.

        Raises:
            IndexError: If the row index is out of range
            SchemaError: If the column does not exist
        """
        pass

    @abstractmethod
    def infer_type(self, value: Optional[str]) -> str:
        """Classify a string as 'int', 'double', 'boolean' or 'string'."""
        pass

    @abstractmethod
    def set_columns(self, columns: Mapping[str, str]) -> None:
        """
        Replace the schema with an ordered name-to-type mapping.

        Raises:
            SchemaError: If names are blank or repeated, or a type is unknown
        """
        pass

    @abstractmethod
    def add_row(self, row: Mapping[str, str]) -> None:
        """
        Validate and append a row given as column name to string value.

        Raises:
            SchemaError: If a required column is missing
            ValidationError: If a value does not match its column type
        """
        pass


class CSVDataSource(DataSourceInterface):
    """Capability interface for sinks and sources of delimited text."""
    pass


class JSONDataSource(DataSourceInterface):
    """Capability interface for sinks and sources of JSON documents."""
    pass


class XMLDataSource(DataSourceInterface):
    """Capability interface for sinks and sources of XML documents."""
    pass


class JDBCDataSource(DataSourceInterface):
    """Capability interface for sinks and sources backed by a SQL database."""
    pass


class RESTDataSource(DataSourceInterface):
    """Capability interface for sinks fed from HTTP/REST endpoints."""
    pass


class NoSQLDataSource(DataSourceInterface):
    """Capability interface for sinks fed from document stores."""
    pass


class DataSourceConnectionInterface(ABC):
    """
    Lifecycle and identity of a connection to a physical resource.

    Connections are scoped resources: use them as context managers, or pair
    every successful connect() with disconnect() on all exit paths.
    """

    @abstractmethod
    def connect(self) -> bool:
        """
        Open the connection.

        Returns:
            True on success (including when already connected), False on failure
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the underlying resource. Safe to call when not connected."""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Return whether connect() has succeeded and disconnect() has not been called since."""
        pass

    @property
    @abstractmethod
    def connection_type(self) -> str:
        """Short name of the connection kind ('file', 'database', 'rest', 'nosql')."""
        pass

    @property
    @abstractmethod
    def location(self) -> str:
        """Path, URL or connection string this connection points at."""
        pass

    @abstractmethod
    def get_raw_connection(self) -> Any:
        """Return the kind-specific handle (path, URL, DB-API connection, client)."""
        pass

    @abstractmethod
    def is_remote(self) -> bool:
        """Return whether the resource is reached over the network."""
        pass

    @property
    def properties(self) -> Dict[str, Any]:
        """Descriptive connection properties, without secrets."""
        return {"type": self.connection_type, "location": self.location, "remote": self.is_remote()}

    def __enter__(self):
        if not self.connect():
            raise DataSourceConnectionError(f"Failed to connect to {self.location}", self.location)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False


class DataReaderInterface(ABC):
    """Reads external data into a table-shaped sink."""

    @abstractmethod
    def read_data(self, sink: DataSourceInterface, connection: DataSourceConnectionInterface,
                  config: MappingConfiguration) -> int:
        """
        Read all records from the connection into the sink.

        Args:
            sink: Table adapter receiving rows
            connection: Connection to the physical resource; connected on demand
            config: Column mappings and format options

        Returns:
            Number of rows added

        Raises:
            DataSourceConnectionError: If the connection cannot be opened
            DataSourceError: If the resource cannot be read or parsed
        """
        pass


class DataWriterInterface(ABC):
    """Writes a table-shaped source to an external resource."""

    @abstractmethod
    def write_data(self, source: DataSourceInterface, connection: DataSourceConnectionInterface,
                   config: MappingConfiguration) -> int:
        """
        Write all rows of the source through the connection.

        Returns:
            Number of rows written

        Raises:
            DataSourceConnectionError: If the connection cannot be opened
            DataSourceError: If the resource cannot be written
        """
        pass


class MappingSerializerInterface(ABC):
    """Converts mapping configurations to and from a text format."""

    @abstractmethod
    def serialize(self, config: MappingConfiguration) -> str:
        """
        Raises:
            MappingError: If the configuration cannot be serialized
        """
        pass

    @abstractmethod
    def deserialize(self, content: str) -> MappingConfiguration:
        """
        Raises:
            MappingError: If the content is malformed or describes an invalid configuration
        """
        pass

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Name of the text format handled ('json', 'yaml')."""
        pass
