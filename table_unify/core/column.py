"""
Typed schema units (Column) and typed value holders (Cell).
"""

from dataclasses import dataclass
from typing import Any, Optional

from ..exceptions import ConversionError, SchemaError, ValidationError
from ..models import DataType
from . import type_system


@dataclass(frozen=True)
class Column:
    """
    A named, typed column of a table.

    Attributes:
        name: Column name, unique within its table
        data_type: Declared value type
        default_value: Canonical default used when a row omits this column
    """
    name: str
    data_type: DataType
    default_value: Optional[str] = None

    def __post_init__(self):
        if self.name is None or not str(self.name).strip():
            raise SchemaError("Column name cannot be null or blank")
        object.__setattr__(self, "data_type", DataType.from_name(self.data_type))
        if self.default_value is None:
            object.__setattr__(self, "default_value", type_system.default_value_for(self.data_type))

    @property
    def type_name(self) -> str:
        return self.data_type.value

    def is_valid_value(self, value: Any) -> bool:
        """Null is always valid; anything else must be an instance of the declared type."""
        if value is None:
            return True
        return type_system.is_instance_of(value, self.data_type)

    def convert_from_string(self, text: Optional[str]) -> Any:
        """
        Convert text to this column's type.

        Raises:
            ConversionError: If the text does not match the column type
        """
        try:
            return type_system.convert_from_string(text, self.data_type)
        except ConversionError as e:
            raise ConversionError(
                f"Invalid value '{text}' for column '{self.name}' of type {self.type_name}",
                column_name=self.name,
                value=text,
                target_type=self.type_name,
            ) from e

    def format_value(self, value: Any) -> str:
        return type_system.format_value(value)

    def create_default_value(self) -> Any:
        return self.convert_from_string(self.default_value)


def create_column(name: str, type_name, default_value: Optional[str] = None) -> Column:
    """
    Create a column from a type name such as 'int', 'double', 'boolean' or 'string'.

    Raises:
        SchemaError: If the name is blank or the type is not supported
    """
    return Column(name, DataType.from_name(type_name), default_value)


class Cell:
    """A single value held by a row for one column."""

    __slots__ = ("column", "_value", "_text")

    def __init__(self, column: Column, value: Any = None):
        if column is None:
            raise SchemaError("Cell column cannot be null")
        self.column = column
        self._value = None
        self._text = None
        self.set_value(value)

    @property
    def value(self) -> Any:
        return self._value

    def set_value(self, value: Any) -> None:
        """
        Replace the cell value.

        Raises:
            ValidationError: If the value is not an instance of the column type
        """
        if not self.column.is_valid_value(value):
            raise ValidationError(
                f"Invalid value {value!r} for column '{self.column.name}' of type {self.column.type_name}",
                column_name=self.column.name,
            )
        self._value = value
        self._text = None

    def set_from_string(self, text: Optional[str]) -> None:
        """
        Convert text to the column type and store it.

        The stripped text of a double is kept so it reads back as written.
        """
        self._value = self.column.convert_from_string(text)
        if self.column.data_type is DataType.DOUBLE and self._value is not None:
            self._text = text.strip()
        else:
            self._text = None

    def value_as_string(self) -> str:
        if self._value is None:
            return ""
        if self._text is not None:
            return self._text
        return self.column.format_value(self._value)

    def copy(self) -> "Cell":
        clone = Cell(self.column)
        clone._value = self._value
        clone._text = self._text
        return clone

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self.column == other.column and self._value == other._value

    def __repr__(self):
        return f"Cell({self.column.name}={self._value!r})"
