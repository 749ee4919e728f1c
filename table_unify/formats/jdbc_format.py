"""
Relational database readers and writers over a DbConnection.
"""

import logging
import re
from collections import OrderedDict
from datetime import date, time
from typing import Any, Dict, List, Optional, Tuple

from ..config.format_defaults import FormatDefaults
from ..core.type_system import convert_from_string
from ..datasource.db_connection import DbConnection
from ..exceptions import ConversionError, DatabaseError
from ..interfaces import DataReaderInterface, DataWriterInterface, JDBCDataSource
from ..mapping.record_mapper import load_records, stringify_value
from ..models import DataType, MappingConfiguration, MappingOptions
from .base import ensure_connected, identity_mapping, mapped_source_value, require_mappings


_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?")

SQL_TYPES = {
    DataType.INT.value: "INTEGER",
    DataType.DOUBLE.value: "DOUBLE",
    DataType.BOOLEAN.value: "BOOLEAN",
    DataType.STRING.value: f"VARCHAR({FormatDefaults.VARCHAR_LENGTH})",
    DataType.DATE.value: f"VARCHAR({FormatDefaults.VARCHAR_LENGTH})",
    DataType.TIME.value: f"VARCHAR({FormatDefaults.VARCHAR_LENGTH})",
    DataType.DATETIME.value: f"VARCHAR({FormatDefaults.VARCHAR_LENGTH})",
}


def sql_type_for(type_name: str) -> str:
    return SQL_TYPES[DataType.from_name(type_name).value]


def validate_identifier(name: Optional[str], kind: str = "table") -> str:
    """
    Check a table or column name before it is placed in SQL text.

    Raises:
        DatabaseError: If the name is missing or not a plain identifier
    """
    if not name or not _IDENTIFIER.fullmatch(name):
        raise DatabaseError(f"Invalid {kind} name: {name!r}", table_name=name)
    return name


def _select_statement(config: MappingConfiguration) -> Tuple[str, Optional[str]]:
    query = config.get_option(MappingOptions.QUERY)
    table_name = config.get_option(MappingOptions.TABLE_NAME)
    if query:
        return query, table_name
    if not table_name:
        raise DatabaseError("Either 'query' or 'tableName' option is required")
    return f"SELECT * FROM {validate_identifier(table_name)}", table_name


def fetch_records(connection: DbConnection, sql: str, table_name: Optional[str] = None) -> List[Dict[str, Any]]:
    """Run a query and return each result row as a column-name keyed dict."""
    cursor = connection.execute(sql, table_name=table_name)
    try:
        columns = [description[0] for description in cursor.description or ()]
        return [OrderedDict(zip(columns, row)) for row in cursor.fetchall()]
    finally:
        cursor.close()


def _boolean_targets(config: MappingConfiguration):
    return [mapping for mapping in config.column_mappings
            if mapping.target_column_type == DataType.BOOLEAN.value]


def _normalize_booleans(records: List[Dict[str, Any]], config: MappingConfiguration) -> None:
    # Databases without a native boolean type return 0/1 for BOOLEAN columns
    for mapping in _boolean_targets(config):
        for record in records:
            if mapping.uses_source_column_name():
                key = mapping.source_column_name
            elif mapping.source_column_index < len(record):
                key = list(record)[mapping.source_column_index]
            else:
                continue
            value = record.get(key)
            if isinstance(value, int) and not isinstance(value, bool) and value in (0, 1):
                record[key] = bool(value)


def python_type_name(value: Any) -> str:
    """Map a value returned by a DB-API driver to a column type name."""
    if isinstance(value, bool):
        return DataType.BOOLEAN.value
    if isinstance(value, int):
        return DataType.INT.value
    if isinstance(value, float):
        return DataType.DOUBLE.value
    return DataType.STRING.value


def _bind_value(text: str, type_name: str) -> Any:
    value = convert_from_string(text, type_name)
    if isinstance(value, (date, time)):
        return value.isoformat()
    return value


class JDBCMappingReader(DataReaderInterface):
    """
    Reads query results into a sink using a mapping configuration.

    Options:
        query: SQL query to run
        tableName: Table to read when no query is given
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_data(self, sink: JDBCDataSource, connection: DbConnection,
                  config: MappingConfiguration) -> int:
        require_mappings(config)
        ensure_connected(connection)
        sql, table_name = _select_statement(config)

        records = fetch_records(connection, sql, table_name)
        _normalize_booleans(records, config)
        count = load_records(sink, config, records)
        self.logger.info(f"Read {count} rows from database query")
        return count


class JDBCReader(DataReaderInterface):
    """
    Reads query results into a sink, typing columns from the first row's values.

    Options:
        query: SQL query to run
        tableName: Table to read when no query is given
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_data(self, sink: JDBCDataSource, connection: DbConnection,
                  config: MappingConfiguration) -> int:
        ensure_connected(connection)
        sql, table_name = _select_statement(config)
        records = fetch_records(connection, sql, table_name)
        if not records:
            self.logger.warning("Query returned no rows")
            return 0

        if sink.get_column_count() == 0:
            columns = OrderedDict()
            for name in records[0]:
                sample = next((record[name] for record in records if record[name] is not None), None)
                columns[name] = python_type_name(sample)
            sink.set_columns(columns)

        for record in records:
            sink.add_row({name: stringify_value(value) for name, value in record.items()})
        self.logger.info(f"Read {len(records)} rows from database query")
        return len(records)


class JDBCMappingWriter(DataWriterInterface):
    """
    Inserts the mapped columns of a source into a database table.

    Options:
        tableName: Target table (required)
        createTable: Create the table if it does not exist (default False)
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def create_table_sql(self, table_name: str, config: MappingConfiguration) -> str:
        columns = ", ".join(f"{validate_identifier(name, 'column')} {sql_type_for(type_name)}"
                            for name, type_name in config.create_column_definitions().items())
        return f"CREATE TABLE IF NOT EXISTS {validate_identifier(table_name)} ({columns})"

    def insert_sql(self, table_name: str, config: MappingConfiguration) -> str:
        names = [validate_identifier(mapping.target_column_name, 'column') for mapping in config.column_mappings]
        placeholders = ", ".join("?" for _ in names)
        return f"INSERT INTO {validate_identifier(table_name)} ({', '.join(names)}) VALUES ({placeholders})"

    def write_data(self, source: JDBCDataSource, connection: DbConnection,
                   config: MappingConfiguration) -> int:
        require_mappings(config)
        table_name = validate_identifier(config.get_option(MappingOptions.TABLE_NAME))
        ensure_connected(connection)

        insert = self.insert_sql(table_name, config)
        try:
            parameters = [
                tuple(_bind_value(mapped_source_value(source, row_index, mapping), mapping.target_column_type)
                      for mapping in config.column_mappings)
                for row_index in range(source.get_row_count())
            ]
        except ConversionError as e:
            raise DatabaseError(f"Cannot bind value for table {table_name}: {e}", connection.location,
                                sql_query=insert, table_name=table_name) from e

        statement = insert
        try:
            with connection.transaction() as cursor:
                if config.get_bool_option(MappingOptions.CREATE_TABLE, False):
                    statement = self.create_table_sql(table_name, config)
                    cursor.execute(statement)
                statement = insert
                if parameters:
                    cursor.executemany(insert, parameters)
        except connection.driver_error as e:
            self.logger.error(f"Failed writing to table {table_name}: {e}")
            raise DatabaseError(f"Failed writing to table {table_name}: {e}", connection.location,
                                sql_query=statement, table_name=table_name) from e

        self.logger.info(f"Wrote {len(parameters)} rows to table {table_name}")
        return len(parameters)


class JDBCWriter(DataWriterInterface):
    """
    Inserts every column of a source into a database table.

    Column types are inferred from the source values.

    Options:
        tableName: Target table (required)
        createTable: Create the table if it does not exist (default True)
    """

    def __init__(self):
        self._mapping_writer = JDBCMappingWriter()

    def write_data(self, source: JDBCDataSource, connection: DbConnection,
                   config: MappingConfiguration) -> int:
        mapping = identity_mapping(source, config)
        if MappingOptions.CREATE_TABLE not in mapping.options:
            options = dict(mapping.options)
            options[MappingOptions.CREATE_TABLE] = True
            mapping = MappingConfiguration(mapping.source_location, mapping.column_mappings, options)
        return self._mapping_writer.write_data(source, connection, mapping)
