"""
Adapters exposing a Table through format capability interfaces.

An adapter forwards every contract call to the table it wraps. The format a
caller needs is chosen explicitly with SourceKind rather than discovered by
inspecting the object at runtime.
"""

from enum import Enum
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from ..core.table import RowLike, Table
from ..datasource.factory import ConnectionKind, connection_kind_for
from ..exceptions import DataSourceError
from ..interfaces import (
    CSVDataSource,
    DataSourceInterface,
    JDBCDataSource,
    JSONDataSource,
    NoSQLDataSource,
    RESTDataSource,
    XMLDataSource,
)


class BaseTableAdapter(DataSourceInterface):
    """Delegates the tabular contract to a wrapped Table."""

    def __init__(self, table: Table):
        if table is None:
            raise ValueError("Table cannot be null")
        self._table = table

    @property
    def table(self) -> Table:
        return self._table

    def get_row_count(self) -> int:
        return self._table.get_row_count()

    def get_column_count(self) -> int:
        return self._table.get_column_count()

    def get_column_name(self, index: int) -> str:
        return self._table.get_column_name(index)

    def get_value_at(self, row_index: int, column_name: str) -> str:
        return self._table.get_value_at(row_index, column_name)

    def set_value_at(self, row_index: int, column_name: str, value: Optional[str]) -> None:
        self._table.set_value_at(row_index, column_name, value)

    def get_column_type(self, column_name: str) -> str:
        return self._table.get_column_type(column_name)

    def infer_type(self, value: Optional[str]) -> str:
        return self._table.infer_type(value)

    def set_columns(self, columns: Mapping[str, Any]) -> None:
        self._table.set_columns(columns)

    def add_row(self, row: RowLike) -> None:
        self._table.add_row(row)

    def __repr__(self):
        return f"{type(self).__name__}({self._table!r})"


class CSVTableAdapter(BaseTableAdapter, CSVDataSource):
    pass


class JSONTableAdapter(BaseTableAdapter, JSONDataSource):
    pass


class XMLTableAdapter(BaseTableAdapter, XMLDataSource):
    pass


class JDBCTableAdapter(BaseTableAdapter, JDBCDataSource):
    pass


class RESTTableAdapter(BaseTableAdapter, RESTDataSource):
    pass


class NoSQLTableAdapter(BaseTableAdapter, NoSQLDataSource):
    pass


class SourceKind(Enum):
    """Closed set of supported source formats."""
    CSV = "csv"
    JSON = "json"
    XML = "xml"
    JDBC = "jdbc"
    REST = "rest"
    NOSQL = "nosql"


_ADAPTERS = {
    SourceKind.CSV: CSVTableAdapter,
    SourceKind.JSON: JSONTableAdapter,
    SourceKind.XML: XMLTableAdapter,
    SourceKind.JDBC: JDBCTableAdapter,
    SourceKind.REST: RESTTableAdapter,
    SourceKind.NOSQL: NoSQLTableAdapter,
}


def adapter_for(kind: SourceKind, table: Table) -> BaseTableAdapter:
    """Wrap a table in the adapter for the given source kind."""
    return _ADAPTERS[SourceKind(kind)](table)


_CONNECTION_SOURCE_KINDS = {
    ConnectionKind.DATABASE: SourceKind.JDBC,
    ConnectionKind.REST: SourceKind.REST,
    ConnectionKind.NOSQL: SourceKind.NOSQL,
}

_FILE_SOURCE_KINDS = ((".csv", SourceKind.CSV), (".json", SourceKind.JSON), (".xml", SourceKind.XML))


def source_kind_for(location: str) -> SourceKind:
    """
    Determine the source kind of a location known only at runtime.

    Classification follows connection_kind_for. File locations take their kind
    from the path extension; http(s) URLs without a known extension are REST.

    Raises:
        DataSourceError: If the location matches no supported kind
    """
    kind = connection_kind_for(location)
    if kind is not ConnectionKind.FILE:
        return _CONNECTION_SOURCE_KINDS[kind]

    text = location.strip()
    remote = text.lower().startswith(("http://", "https://"))
    path = urlparse(text).path.lower() if remote else text.lower()
    for suffix, source_kind in _FILE_SOURCE_KINDS:
        if path.endswith(suffix):
            return source_kind
    if remote:
        return SourceKind.REST
    raise DataSourceError(f"Unsupported data source: {location}", location)
