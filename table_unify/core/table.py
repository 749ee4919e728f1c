"""
In-memory table with schema enforcement and string-level value access.

The Table owns an ordered collection of columns and an append-only sequence
of rows. Every mutation is validated against the schema before it takes
effect, and a rejected row never partially changes the table.
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..exceptions import SchemaError, TableIndexError, ValidationError
from ..models import DataType
from . import type_system
from .column import Cell, Column, create_column
from .row import Row


logger = logging.getLogger(__name__)

RowLike = Union[Row, Mapping[str, Any]]


class Table:
    """
    Ordered columns plus an append-only sequence of validated rows.

    Args:
        name: Optional table name
        create_default_value: When True, columns missing from an incoming row are
            filled with the column default; when False the row is rejected
    """

    def __init__(self, name: str = "", create_default_value: bool = True):
        self._name = name or ""
        self._columns: "OrderedDict[str, Column]" = OrderedDict()
        self._column_list: List[Column] = []
        self._rows: List[Row] = []
        self.create_default_value = create_default_value

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value or ""

    def add_column(self, column: Column) -> None:
        """
        Append a column to the schema.

        Raises:
            SchemaError: If the column is None or its name already exists
        """
        if column is None:
            raise SchemaError("Column cannot be null")
        if column.name in self._columns:
            raise SchemaError(f"Column already exists: {column.name}")
        self._columns[column.name] = column
        self._column_list.append(column)

    def set_columns(self, columns: Mapping[str, Any]) -> None:
        """
        Replace the schema with the given ordered name-to-type mapping.

        Args:
            columns: Ordered mapping of column name to type name or DataType

        Raises:
            SchemaError: If a name or type is blank or unknown, names repeat,
                or the table already holds rows
        """
        if columns is None:
            raise SchemaError("Columns map cannot be null")
        if self._rows:
            raise SchemaError(f"Cannot replace columns of a table holding {len(self._rows)} rows")

        items = list(columns.items())
        new_columns = []
        seen = set()
        for name, type_name in items:
            if name is None or not str(name).strip():
                raise SchemaError("Column names cannot be null or blank")
            if type_name is None or (isinstance(type_name, str) and not type_name.strip()):
                raise SchemaError(f"Column type for '{name}' cannot be null or blank")
            if name in seen:
                raise SchemaError(f"Duplicate column name: {name}")
            seen.add(name)
            new_columns.append(create_column(name, type_name))

        self._columns = OrderedDict((column.name, column) for column in new_columns)
        self._column_list = new_columns
        logger.debug(f"Installed {len(new_columns)} columns on table '{self._name}'")

    @property
    def columns(self) -> Tuple[Column, ...]:
        return tuple(self._column_list)

    def get_column(self, index: int) -> Column:
        """
        Raises:
            TableIndexError: If the index is out of range
        """
        if not 0 <= index < len(self._column_list):
            raise TableIndexError(f"Invalid column index: {index}", index, len(self._column_list))
        return self._column_list[index]

    def get_column_name(self, index: int) -> str:
        return self.get_column(index).name

    def get_column_by_name(self, name: str) -> Column:
        """
        Raises:
            SchemaError: If no column has this name
        """
        column = self._columns.get(name)
        if column is None:
            raise SchemaError(f"Column '{name}' does not exist")
        return column

    def has_column(self, name: str) -> bool:
        return name in self._columns

    def get_column_count(self) -> int:
        return len(self._column_list)

    @property
    def rows(self) -> Tuple[Row, ...]:
        return tuple(self._rows)

    def get_row_count(self) -> int:
        return len(self._rows)

    def get_row(self, index: int) -> Row:
        """
        Raises:
            TableIndexError: If the index is out of range
        """
        if not 0 <= index < len(self._rows):
            raise TableIndexError(f"Invalid row index: {index}", index, len(self._rows))
        return self._rows[index]

    def create_row(self) -> Row:
        return Row()

    def add_row(self, row: RowLike) -> None:
        """
        Validate a row and append it to the table.

        Accepts either a Row or a mapping of column name to string value.
        Typed (non-string) mapping values are validated as-is.

        Raises:
            SchemaError: If a column is missing and create_default_value is False,
                or the row names a column the table does not have
            ValidationError: If a value does not match its column type
                (ConversionError when a string cannot be parsed)
        """
        new_row = self._build_row(row)
        self._append_row(new_row)

    def _append_row(self, row: Row) -> None:
        self._rows.append(row)

    def _build_row(self, row: RowLike) -> Row:
        if row is None:
            raise SchemaError("Row cannot be null")
        if isinstance(row, Row):
            return self._build_from_row(row)
        if isinstance(row, Mapping):
            return self._build_from_mapping(row)
        raise SchemaError(f"Unsupported row type: {type(row).__name__}")

    def _build_from_mapping(self, values: Mapping[str, Any]) -> Row:
        for key in values:
            if key not in self._columns:
                raise SchemaError(f"Column '{key}' does not exist")

        new_row = Row()
        for column in self._column_list:
            value = values.get(column.name)
            if value is None:
                value = self._missing_value(column)
            if isinstance(value, str):
                new_row.set_from_string(column, value)
            else:
                new_row.set_value(column, value)
        return new_row

    def _build_from_row(self, row: Row) -> Row:
        for cell in row.cells():
            if cell.column.name not in self._columns:
                raise SchemaError(f"Column '{cell.column.name}' does not exist")

        new_row = Row()
        for column in self._column_list:
            cell = row.get_cell(column.name)
            if cell is None:
                new_row.set_from_string(column, self._missing_value(column))
                continue
            if not column.is_valid_value(cell.value):
                raise ValidationError(
                    f"Invalid value {cell.value!r} for column '{column.name}' of type {column.type_name}",
                    column_name=column.name,
                )
            if cell.column == column:
                new_row.set_cell(cell.copy())
            else:
                new_row.set_value(column, cell.value)
        return new_row

    def _missing_value(self, column: Column) -> str:
        if not self.create_default_value:
            raise SchemaError(f"Row is missing column: {column.name}")
        return column.default_value

    def _cell_at(self, row_index: int, column_name: str) -> Tuple[Row, Column]:
        column = self.get_column_by_name(column_name)
        return self.get_row(row_index), column

    def get_value_at(self, row_index: int, column_name: str) -> str:
        """Return a cell value in its string form ('' for null)."""
        row, column = self._cell_at(row_index, column_name)
        cell = row.get_cell(column.name)
        return "" if cell is None else cell.value_as_string()

    def set_value_at(self, row_index: int, column_name: str, value: Optional[str]) -> None:
        """
        Set a cell from its string form, converting to the column type.

        Raises:
            ConversionError: If the text does not match the column type
        """
        row, column = self._cell_at(row_index, column_name)
        cell = Cell(column)
        cell.set_from_string(value)
        row.set_cell(cell)

    def get_value_object(self, row_index: int, column_name: str) -> Any:
        row, column = self._cell_at(row_index, column_name)
        return row.get_value(column.name)

    def set_value(self, row_index: int, column_name: str, value: Any) -> None:
        """
        Set a typed cell value.

        Raises:
            ValidationError: If the value is not an instance of the column type
        """
        row, column = self._cell_at(row_index, column_name)
        row.set_cell(Cell(column, value))

    def get_column_type(self, column_name: str) -> str:
        """Return the declared type name of a column."""
        return self.get_column_by_name(column_name).type_name

    def infer_type(self, value: Optional[str]) -> str:
        return type_system.infer_type(value)

    def get_default_value(self, type_name) -> str:
        return type_system.default_value_for(type_name)

    def format_table(self) -> str:
        """Render the table as a fixed-width text grid."""
        headers = [column.name for column in self._column_list]
        body = [[self.get_value_at(index, name) for name in headers] for index in range(len(self._rows))]
        widths = [max([len(name)] + [len(line[i]) for line in body]) for i, name in enumerate(headers)]

        lines = [" | ".join(name.ljust(widths[i]) for i, name in enumerate(headers))]
        lines.append("-+-".join("-" * width for width in widths))
        for line in body:
            lines.append(" | ".join(value.ljust(widths[i]) for i, value in enumerate(line)))
        return "\n".join(lines)

    def print_table(self) -> None:
        logger.info(f"Table '{self._name}':\n{self.format_table()}")

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self):
        return (f"{type(self).__name__}(name={self._name!r}, columns={self.get_column_count()}, "
                f"rows={self.get_row_count()})")


class TableBuilder:
    """
    Fluent builder for tables populated in code.

    Example:
        table = (TableBuilder()
                 .add_string_column("Name")
                 .add_int_column("Age")
                 .add_row(Name="Alice", Age="30")
                 .build())
    """

    def __init__(self, table: Optional[Table] = None):
        self._table = table if table is not None else Table()
        self._pending_rows: List[Dict[str, Any]] = []

    def set_name(self, name: str) -> "TableBuilder":
        self._table.name = name
        return self

    def set_create_default_value(self, create_default_value: bool) -> "TableBuilder":
        self._table.create_default_value = create_default_value
        return self

    def add_column(self, name: str, type_name) -> "TableBuilder":
        self._table.add_column(create_column(name, type_name))
        return self

    def add_string_column(self, name: str) -> "TableBuilder":
        return self.add_column(name, DataType.STRING)

    def add_int_column(self, name: str) -> "TableBuilder":
        return self.add_column(name, DataType.INT)

    def add_double_column(self, name: str) -> "TableBuilder":
        return self.add_column(name, DataType.DOUBLE)

    def add_boolean_column(self, name: str) -> "TableBuilder":
        return self.add_column(name, DataType.BOOLEAN)

    def add_row(self, values: Optional[Mapping[str, Any]] = None, **kwargs) -> "TableBuilder":
        row = dict(values or {})
        row.update(kwargs)
        self._pending_rows.append(row)
        return self

    def build(self) -> Table:
        """
        Add the collected rows and return the table.

        Raises:
            SchemaError, ValidationError: If a collected row is rejected
        """
        for row in self._pending_rows:
            self._table.add_row(row)
        self._pending_rows = []
        return self._table
