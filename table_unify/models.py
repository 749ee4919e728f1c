"""
Core data models for the table_unify system.

This module defines the data types understood by table columns and the
declarative mapping configuration that describes how fields of an external
record correspond to typed table columns.
"""

from collections import OrderedDict
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import SchemaError


class DataType(Enum):
    """Supported column data types."""
    INT = "int"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    STRING = "string"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"

    @classmethod
    def from_name(cls, name: Any) -> "DataType":
        """
        Resolve a type name (or an existing DataType) to a DataType.

        Args:
            name: Canonical type name, alias such as 'integer' or 'bool', or a DataType

        Returns:
            Matching DataType

        Raises:
            SchemaError: If the name is blank or not a supported type
        """
        if isinstance(name, cls):
            return name
        if name is None or not str(name).strip():
            raise SchemaError("Column type cannot be null or blank")

        key = str(name).strip().lower()
        resolved = _TYPE_ALIASES.get(key)
        if resolved is None:
            raise SchemaError(f"Unsupported column type: {name}")
        return resolved


_TYPE_ALIASES = {
    "int": DataType.INT,
    "integer": DataType.INT,
    "long": DataType.INT,
    "double": DataType.DOUBLE,
    "float": DataType.DOUBLE,
    "boolean": DataType.BOOLEAN,
    "bool": DataType.BOOLEAN,
    "string": DataType.STRING,
    "str": DataType.STRING,
    "date": DataType.DATE,
    "time": DataType.TIME,
    "datetime": DataType.DATETIME,
}


class MappingOptions:
    """Option keys recognized by the format readers and writers."""
    HAS_HEADER_ROW = "hasHeaderRow"
    WITH_HEADER_ROW = "withHeaderRow"
    ALLOW_EMPTY_VALUES = "allowEmptyValues"
    TABLE_NAME = "tableName"
    CREATE_TABLE = "createTable"
    QUERY = "query"
    USERNAME = "username"
    PASSWORD = "password"
    ROOT_ELEMENT = "rootElement"
    ROW_ELEMENT = "rowElement"
    PRETTY_PRINT = "prettyPrint"
    METHOD = "method"
    RESPONSE_FORMAT = "responseFormat"
    USE_ALIASES = "useAliases"
    LIMIT = "limit"
    COLLECTION = "collection"
    BODY = "body"


@dataclass(frozen=True)
class ColumnMapping:
    """
    Defines how one source field maps to a target table column.

    The source field is selected by exactly one of a column name or a
    zero-based column index.

    Attributes:
        target_column_name: Name of the column created in the target table
        target_column_type: Type name of the target column ('int', 'double', ...)
        source_column_name: Field name in the source record
        source_column_index: Position of the field in the source record
        default_value: Value used when the source field is missing or empty
    """
    target_column_name: str
    target_column_type: str
    source_column_name: Optional[str] = None
    source_column_index: Optional[int] = None
    default_value: Optional[str] = None

    def __post_init__(self):
        """Validate the selector and the target column definition."""
        has_name = self.source_column_name is not None
        has_index = self.source_column_index is not None

        if has_name and has_index:
            raise SchemaError(
                f"Mapping for '{self.target_column_name}' declares both a source column name and index"
            )
        if not has_name and not has_index:
            raise SchemaError(
                f"Mapping for '{self.target_column_name}' must declare a source column name or index"
            )
        if has_name and not str(self.source_column_name).strip():
            raise SchemaError("Source column name cannot be blank")
        if has_index:
            if isinstance(self.source_column_index, bool) or not isinstance(self.source_column_index, int):
                raise SchemaError(f"Source column index must be an integer: {self.source_column_index!r}")
            if self.source_column_index < 0:
                raise SchemaError(f"Source column index cannot be negative: {self.source_column_index}")
        if not self.target_column_name or not str(self.target_column_name).strip():
            raise SchemaError("Target column name cannot be null or blank")

        # Normalizes aliases such as 'integer' to the canonical type name
        object.__setattr__(self, "target_column_type", DataType.from_name(self.target_column_type).value)

    def uses_source_column_name(self) -> bool:
        return self.source_column_name is not None

    def uses_source_column_index(self) -> bool:
        return self.source_column_index is not None

    def to_dict(self) -> Dict[str, Any]:
        """Return the serialized camelCase shape of this mapping."""
        data = {}
        if self.uses_source_column_name():
            data["sourceColumnName"] = self.source_column_name
        else:
            data["sourceColumnIndex"] = self.source_column_index
        data["targetColumnName"] = self.target_column_name
        data["targetColumnType"] = self.target_column_type
        if self.default_value is not None:
            data["defaultValue"] = self.default_value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ColumnMapping":
        """
        Build a mapping from its serialized shape.

        Raises:
            SchemaError: If required keys are missing or the selector is invalid
        """
        if "targetColumnName" not in data or "targetColumnType" not in data:
            raise SchemaError("Column mapping requires targetColumnName and targetColumnType")

        default_value = data.get("defaultValue")
        return cls(
            target_column_name=data["targetColumnName"],
            target_column_type=data["targetColumnType"],
            source_column_name=data.get("sourceColumnName"),
            source_column_index=data.get("sourceColumnIndex"),
            default_value=None if default_value is None else str(default_value),
        )


@dataclass(frozen=True)
class MappingConfiguration:
    """
    Declarative description of how external records map to table columns.

    Instances are immutable once built; use MappingConfigurationBuilder to
    assemble one incrementally.

    Attributes:
        source_location: File path, URL, connection string or endpoint of the data
        column_mappings: Ordered field-to-column rules
        options: Format specific options keyed by option name (see MappingOptions)
    """
    source_location: Optional[str] = None
    column_mappings: Tuple[ColumnMapping, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        mappings = tuple(self.column_mappings or ())
        for mapping in mappings:
            if not isinstance(mapping, ColumnMapping):
                raise SchemaError(f"Invalid column mapping: {mapping!r}")
        object.__setattr__(self, "column_mappings", mappings)
        object.__setattr__(self, "options", MappingProxyType(dict(self.options or {})))

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def get_bool_option(self, key: str, default: bool = False) -> bool:
        """Return an option as a boolean, accepting 'true'/'false' strings from config files."""
        value = self.options.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1")
        return bool(value)

    def create_column_definitions(self) -> "OrderedDict[str, str]":
        """
        Derive the target schema from the column mappings.

        Columns appear in mapping order. When two mappings target the same
        column name the later mapping's type replaces the earlier one.

        Returns:
            Ordered mapping of target column name to type name
        """
        definitions = OrderedDict()
        for mapping in self.column_mappings:
            definitions[mapping.target_column_name] = mapping.target_column_type
        return definitions

    def with_source_location(self, source_location: str) -> "MappingConfiguration":
        return replace(self, source_location=source_location)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceLocation": self.source_location,
            "options": dict(self.options),
            "columnMappings": [mapping.to_dict() for mapping in self.column_mappings],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MappingConfiguration":
        """
        Build a configuration from its serialized shape.

        Raises:
            SchemaError: If the data is not a mapping or a column mapping is invalid
        """
        if not isinstance(data, Mapping):
            raise SchemaError("Mapping configuration must be an object")

        mappings = [ColumnMapping.from_dict(item) for item in data.get("columnMappings") or []]
        return cls(
            source_location=data.get("sourceLocation"),
            column_mappings=tuple(mappings),
            options=data.get("options") or {},
        )

    @staticmethod
    def builder() -> "MappingConfigurationBuilder":
        return MappingConfigurationBuilder()


class MappingConfigurationBuilder:
    """Fluent builder producing an immutable MappingConfiguration."""

    def __init__(self):
        self._source_location = None
        self._column_mappings: List[ColumnMapping] = []
        self._options: Dict[str, Any] = {}

    def set_source_location(self, source_location: str) -> "MappingConfigurationBuilder":
        self._source_location = source_location
        return self

    def set_option(self, key: str, value: Any) -> "MappingConfigurationBuilder":
        self._options[key] = value
        return self

    def set_options(self, options: Mapping[str, Any]) -> "MappingConfigurationBuilder":
        self._options.update(options)
        return self

    def add_column_mapping(self, mapping: ColumnMapping) -> "MappingConfigurationBuilder":
        if mapping is None:
            raise SchemaError("Column mapping cannot be null")
        self._column_mappings.append(mapping)
        return self

    def map_column(self, source, target_column_name: str, target_column_type: str,
                   default_value: Optional[str] = None) -> "MappingConfigurationBuilder":
        """
        Add a mapping selecting the source by name (str) or index (int).
        """
        if isinstance(source, int) and not isinstance(source, bool):
            mapping = ColumnMapping(target_column_name, target_column_type,
                                    source_column_index=source, default_value=default_value)
        else:
            mapping = ColumnMapping(target_column_name, target_column_type,
                                    source_column_name=source, default_value=default_value)
        return self.add_column_mapping(mapping)

    def build(self) -> MappingConfiguration:
        return MappingConfiguration(
            source_location=self._source_location,
            column_mappings=tuple(self._column_mappings),
            options=dict(self._options),
        )
