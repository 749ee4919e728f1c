"""
Mapping-driven record resolution shared by every format reader.

Readers only decide how to obtain records from their physical format; this
module decides which fields become which columns, applies per-mapping
defaults and hands each assembled row to the sink's add_row.
"""

import json
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ..interfaces import DataSourceInterface
from ..models import ColumnMapping, MappingConfiguration


logger = logging.getLogger(__name__)


def stringify_value(value: Any) -> Optional[str]:
    """Render a raw field value from a parsed document as text for add_row."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def install_schema(sink: DataSourceInterface, config: MappingConfiguration) -> bool:
    """
    Install the configuration's column definitions on an empty sink.

    A sink that already has columns keeps them, so callers can pre-configure
    a different schema.

    Returns:
        True if columns were installed
    """
    if sink.get_column_count() > 0:
        logger.debug(f"Sink already has {sink.get_column_count()} columns; keeping existing schema")
        return False
    sink.set_columns(config.create_column_definitions())
    return True


def resolve_value(mapping: ColumnMapping, record: Any,
                  headers: Optional[Sequence[str]] = None) -> Optional[str]:
    """
    Fetch the raw value a mapping selects from one record.

    Args:
        mapping: Column mapping holding the selector
        record: Sequence of field values, or mapping of field name to value
        headers: Field names for sequence records, used by name selectors

    Returns:
        Selected value as text, or None when the field is not present
    """
    if isinstance(record, Mapping):
        if mapping.uses_source_column_name():
            if mapping.source_column_name not in record:
                logger.warning(f"Field '{mapping.source_column_name}' not found in record. "
                               f"Using default value if available.")
                return None
            return stringify_value(record[mapping.source_column_name])
        values = list(record.values())
        index = mapping.source_column_index
    else:
        values = record
        if mapping.uses_source_column_name():
            if headers is None:
                logger.warning(f"Cannot select '{mapping.source_column_name}' by name without a header row")
                return None
            try:
                index = list(headers).index(mapping.source_column_name)
            except ValueError:
                logger.warning(f"Column '{mapping.source_column_name}' not found in headers. "
                               f"Using default value if available.")
                return None
        else:
            index = mapping.source_column_index

    if index >= len(values):
        logger.warning(f"Column index {index} out of bounds. Using default value if available.")
        return None
    return stringify_value(values[index])


def map_record(config: MappingConfiguration, record: Any,
               headers: Optional[Sequence[str]] = None) -> Dict[str, str]:
    """
    Build a target-column-name to value map for one record.

    Null or empty values take the mapping's default value; without a default
    the field is left out so the sink's own missing-column policy applies.
    """
    row = {}
    for mapping in config.column_mappings:
        value = resolve_value(mapping, record, headers)
        if value is None or value == "":
            value = mapping.default_value
        if value is not None:
            row[mapping.target_column_name] = value
    return row


def load_records(sink: DataSourceInterface, config: MappingConfiguration, records: Iterable[Any],
                 headers: Optional[Sequence[str]] = None) -> int:
    """
    Install the schema if needed and add one row per record.

    Returns:
        Number of rows added

    Raises:
        SchemaError, ValidationError: If the sink rejects a row
    """
    install_schema(sink, config)
    count = 0
    for record in records:
        sink.add_row(map_record(config, record, headers))
        count += 1
    logger.debug(f"Added {count} rows from {config.source_location}")
    return count
