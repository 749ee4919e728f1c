"""
Type inference, string conversion and canonical defaults for column values.

Every value crossing the table's string-level access contract passes through
these functions, so readers and writers never deal with typed values directly.
"""

import math
import re
from datetime import date, datetime, time
from typing import Any, Optional, Tuple

from ..exceptions import ConversionError
from ..models import DataType


_INT_PATTERN = re.compile(r"-?\d+")
_DOUBLE_PATTERN = re.compile(r"-?\d*\.\d+")
_SIGNED_INT_PATTERN = re.compile(r"[-+]?\d+")

_BOOLEAN_TEXT = {"true": True, "false": False}

_PYTHON_TYPES = {
    DataType.INT: (int,),
    DataType.DOUBLE: (float,),
    DataType.BOOLEAN: (bool,),
    DataType.STRING: (str,),
    DataType.DATE: (date,),
    DataType.TIME: (time,),
    DataType.DATETIME: (datetime,),
}


def infer_type(value: Optional[str]) -> str:
    """
    Classify a string as 'int', 'double', 'boolean' or 'string'.

    Patterns are tried in that order, so integer text is never reported
    as a double. None and empty strings are reported as 'string'.
    """
    if value is None or value == "":
        return DataType.STRING.value
    if _INT_PATTERN.fullmatch(value):
        return DataType.INT.value
    if _DOUBLE_PATTERN.fullmatch(value):
        return DataType.DOUBLE.value
    if value.lower() in _BOOLEAN_TEXT:
        return DataType.BOOLEAN.value
    return DataType.STRING.value


def python_type_for(data_type) -> Tuple[type, ...]:
    """Return the Python classes a non-null value of the given type must be an instance of."""
    return _PYTHON_TYPES[DataType.from_name(data_type)]


def is_instance_of(value: Any, data_type) -> bool:
    """
    Check a non-null value against a column type.

    bool is rejected for INT columns and datetime is rejected for DATE
    columns even though Python treats them as subclasses.
    """
    data_type = DataType.from_name(data_type)
    if data_type is DataType.INT and isinstance(value, bool):
        return False
    if data_type is DataType.DATE and isinstance(value, datetime):
        return False
    return isinstance(value, _PYTHON_TYPES[data_type])


def convert_from_string(value: Optional[str], target_type) -> Any:
    """
    Convert a string into a typed value.

    Args:
        value: Text to convert
        target_type: DataType or type name

    Returns:
        Typed value; None for null or empty input unless the target is a string

    Raises:
        ConversionError: If the text does not lexically match the target type
    """
    data_type = DataType.from_name(target_type)

    if data_type is DataType.STRING:
        return value
    if value is None or value == "":
        return None

    text = value.strip()
    try:
        if data_type is DataType.INT:
            if not _SIGNED_INT_PATTERN.fullmatch(text):
                raise ValueError(f"not an integer: {value!r}")
            return int(text)
        if data_type is DataType.DOUBLE:
            result = float(text)
            if math.isnan(result) or math.isinf(result):
                raise ValueError(f"not a finite number: {value!r}")
            return result
        if data_type is DataType.BOOLEAN:
            return _BOOLEAN_TEXT[text.lower()]
        if data_type is DataType.DATE:
            return date.fromisoformat(text)
        if data_type is DataType.TIME:
            return time.fromisoformat(text)
        return datetime.fromisoformat(text)
    except (ValueError, KeyError) as e:
        raise ConversionError(
            f"Cannot convert '{value}' to {data_type.value}",
            value=value,
            target_type=data_type.value,
        ) from e


def default_value_for(data_type) -> str:
    """
    Return the canonical default string for a type.

    '' for string, '0' for int, '0.0' for double and 'false' for boolean.
    Date types default to the current date, time or timestamp.
    """
    data_type = DataType.from_name(data_type)
    if data_type is DataType.STRING:
        return ""
    if data_type is DataType.INT:
        return "0"
    if data_type is DataType.DOUBLE:
        return "0.0"
    if data_type is DataType.BOOLEAN:
        return "false"
    now = datetime.now().replace(microsecond=0)
    if data_type is DataType.DATE:
        return now.date().isoformat()
    if data_type is DataType.TIME:
        return now.time().isoformat()
    return now.isoformat()


def format_value(value: Any) -> str:
    """Render a typed value using its canonical string form ('' for None)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)
