"""
JSON readers and writers.

Documents hold an array of objects, optionally wrapped in an object under
the rootElement option:

    {"employees": [{"name": "Alice", "age": 30}, ...]}
"""

import json
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional

from ..config.format_defaults import FormatDefaults
from ..datasource.file_connection import FileConnection
from ..exceptions import JSONFormatError
from ..interfaces import DataReaderInterface, DataWriterInterface, JSONDataSource
from ..mapping.record_mapper import load_records, stringify_value
from ..models import DataType, MappingConfiguration, MappingOptions
from .base import require_mappings


logger = logging.getLogger(__name__)


def json_type_name(value: Any) -> str:
    """Map a parsed JSON value to a column type name."""
    if isinstance(value, bool):
        return DataType.BOOLEAN.value
    if isinstance(value, int):
        return DataType.INT.value
    if isinstance(value, float):
        return DataType.DOUBLE.value
    return DataType.STRING.value


def extract_json_records(document: Any, root_element: Optional[str] = None,
                         location: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Locate the array of record objects in a parsed JSON document.

    A single object is treated as a one-record array.

    Raises:
        JSONFormatError: If the root element is missing or records are not objects
    """
    data = document
    if root_element:
        if not isinstance(data, Mapping) or root_element not in data:
            raise JSONFormatError(f"Root element '{root_element}' not found in JSON document", location)
        data = data[root_element]

    if isinstance(data, Mapping):
        data = [data]
    if not isinstance(data, list):
        raise JSONFormatError(f"Expected a JSON array of objects, got {type(data).__name__}", location)

    for index, record in enumerate(data):
        if not isinstance(record, Mapping):
            raise JSONFormatError(f"JSON record {index} is not an object", location)
    return data


def parse_json(content: str, location: Optional[str] = None) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise JSONFormatError(f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}", location) from e


def widen_json_type(current: Optional[str], value: Any) -> Optional[str]:
    """Combine the type seen so far for a field with one more parsed value."""
    if value is None:
        return current
    observed = json_type_name(value)
    if current is None or current == observed:
        return observed
    if {current, observed} == {DataType.INT.value, DataType.DOUBLE.value}:
        return DataType.DOUBLE.value
    return DataType.STRING.value


def infer_json_columns(records: List[Mapping[str, Any]]) -> "OrderedDict[str, str]":
    """
    Derive column definitions from the field values of every record.

    Columns are ordered by first appearance. int and double values widen to
    double, any other disagreement falls back to string, and fields that are
    always null are typed as string.
    """
    types = OrderedDict()
    for record in records:
        for key, value in record.items():
            types[key] = widen_json_type(types.get(key), value)
    return OrderedDict((key, kind or DataType.STRING.value) for key, kind in types.items())


class JSONMappingReader(DataReaderInterface):
    """
    Reads a JSON array of objects into a sink using a mapping configuration.

    Options:
        rootElement: Key of the top-level object holding the array
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_data(self, sink: JSONDataSource, connection: FileConnection,
                  config: MappingConfiguration) -> int:
        require_mappings(config)
        document = parse_json(connection.read_text(), connection.location)
        records = extract_json_records(document, config.get_option(MappingOptions.ROOT_ELEMENT),
                                       connection.location)

        count = load_records(sink, config, records)
        self.logger.info(f"Read {count} JSON records from {connection.location}")
        return count


class JSONReader(DataReaderInterface):
    """
    Reads a JSON array of objects, deriving columns from the JSON value types.

    Options:
        rootElement: Key of the top-level object holding the array
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_data(self, sink: JSONDataSource, connection: FileConnection,
                  config: Optional[MappingConfiguration] = None) -> int:
        config = config or MappingConfiguration()
        document = parse_json(connection.read_text(), connection.location)
        records = extract_json_records(document, config.get_option(MappingOptions.ROOT_ELEMENT),
                                       connection.location)
        return load_json_records(sink, records, connection.location)


def load_json_records(sink, records: List[Mapping[str, Any]], location: Optional[str] = None) -> int:
    """Install inferred columns on an empty sink and add one row per record."""
    if not records:
        logger.warning(f"No records found in {location}")
        return 0
    if sink.get_column_count() == 0:
        sink.set_columns(infer_json_columns(records))

    for record in records:
        sink.add_row({key: stringify_value(value) for key, value in record.items()})
    logger.info(f"Read {len(records)} records from {location}")
    return len(records)


def json_column_types(source, names: List[str]) -> Dict[str, Optional[str]]:
    """
    Return the declared type of each column, or None for every column when the
    source does not expose declared types.
    """
    get_column_type = getattr(source, "get_column_type", None)
    if get_column_type is None:
        return {name: None for name in names}
    return {name: get_column_type(name) for name in names}


def typed_json_value(source, text: str, type_name: Optional[str] = None) -> Any:
    """
    Render a string cell as a JSON value.

    The column's declared type decides the JSON type; without one the type is
    inferred from the text.
    """
    if text is None or text == "":
        return None
    kind = type_name or source.infer_type(text)
    if kind == DataType.INT.value:
        return int(text)
    if kind == DataType.DOUBLE.value:
        return float(text)
    if kind == DataType.BOOLEAN.value:
        return text.lower() == "true"
    return text


class JSONWriter(DataWriterInterface):
    """
    Writes a source as a JSON array of objects.

    Options:
        prettyPrint: Indent the output (default False)
        rootElement: Wrap the array in an object under this key
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def write_data(self, source: JSONDataSource, connection: FileConnection,
                   config: Optional[MappingConfiguration] = None) -> int:
        config = config or MappingConfiguration()
        names = [source.get_column_name(i) for i in range(source.get_column_count())]
        types = json_column_types(source, names)

        records = []
        for row_index in range(source.get_row_count()):
            records.append(OrderedDict(
                (name, typed_json_value(source, source.get_value_at(row_index, name), types[name]))
                for name in names
            ))

        root_element = config.get_option(MappingOptions.ROOT_ELEMENT)
        document = {root_element: records} if root_element else records
        indent = FormatDefaults.JSON_INDENT if config.get_bool_option(MappingOptions.PRETTY_PRINT) else None

        connection.write_bytes(json.dumps(document, indent=indent).encode("utf-8"))
        self.logger.info(f"Wrote {len(records)} JSON records to {connection.location}")
        return len(records)
