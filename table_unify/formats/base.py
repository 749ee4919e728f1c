"""
Helpers shared by the format readers and writers.
"""

from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.type_system import infer_type
from ..exceptions import DataSourceConnectionError
from ..interfaces import DataSourceConnectionInterface, DataSourceInterface
from ..models import ColumnMapping, DataType, MappingConfiguration


def ensure_connected(connection: DataSourceConnectionInterface) -> None:
    """
    Connect on demand.

    Raises:
        DataSourceConnectionError: If connect() reports failure
    """
    if connection is None:
        raise ValueError("Connection cannot be null")
    if not connection.is_connected() and not connection.connect():
        raise DataSourceConnectionError(f"Failed to connect to {connection.location}", connection.location)


def require_mappings(config: MappingConfiguration) -> None:
    if config is None:
        raise ValueError("Mapping configuration cannot be null")
    if not config.column_mappings:
        raise ValueError("Column mappings cannot be null or empty")


def widen_type(current: Optional[str], value: Optional[str]) -> Optional[str]:
    """
    Combine the type seen so far for a column with the type of one more value.

    int widens to double, and any other disagreement falls back to string.
    Empty values do not change the type.
    """
    if value is None or value == "":
        return current
    observed = infer_type(value)
    if current is None or current == observed:
        return observed
    if {current, observed} == {DataType.INT.value, DataType.DOUBLE.value}:
        return DataType.DOUBLE.value
    return DataType.STRING.value


def infer_column_types(headers: Sequence[str], rows: Iterable[Sequence[Optional[str]]]) -> "OrderedDict[str, str]":
    """
    Infer a column type for each header from string rows.

    Columns with no non-empty values are typed as string.
    """
    types: List[Optional[str]] = [None] * len(headers)
    for row in rows:
        for index in range(min(len(headers), len(row))):
            types[index] = widen_type(types[index], row[index])
    return OrderedDict((name, column_type or DataType.STRING.value)
                       for name, column_type in zip(headers, types))


def source_rows(source: DataSourceInterface) -> List[Dict[str, str]]:
    """Read every row of a source through the string-level contract."""
    names = [source.get_column_name(i) for i in range(source.get_column_count())]
    return [{name: source.get_value_at(row, name) for name in names}
            for row in range(source.get_row_count())]


def identity_mapping(source: DataSourceInterface, config: Optional[MappingConfiguration] = None,
                     infer_types: bool = True) -> MappingConfiguration:
    """
    Build a configuration mapping every source column onto itself.

    Options and source location are taken from config when given.
    """
    names = [source.get_column_name(i) for i in range(source.get_column_count())]
    if infer_types:
        rows = [[row[name] for name in names] for row in source_rows(source)]
        types = infer_column_types(names, rows)
    else:
        types = OrderedDict((name, DataType.STRING.value) for name in names)

    mappings = tuple(ColumnMapping(name, column_type, source_column_name=name)
                     for name, column_type in types.items())
    return MappingConfiguration(
        source_location=config.source_location if config else None,
        column_mappings=mappings,
        options=dict(config.options) if config else {},
    )


def mapped_source_value(source: DataSourceInterface, row_index: int, mapping: ColumnMapping) -> str:
    """Fetch the value a writer mapping selects from a source row, applying its default."""
    if mapping.uses_source_column_name():
        column_name = mapping.source_column_name
    else:
        column_name = source.get_column_name(mapping.source_column_index)
    value = source.get_value_at(row_index, column_name)
    if (value is None or value == "") and mapping.default_value is not None:
        return mapping.default_value
    return "" if value is None else value
