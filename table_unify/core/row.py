"""
Row: one record of a table, holding one cell per column keyed by column name.

A row does not reference the table it belongs to. Operations that need a
column definition take the Column explicitly.
"""

from collections import OrderedDict
from typing import Any, Dict, Iterator, List, Optional

from ..exceptions import SchemaError
from .column import Cell, Column


class Row:
    """Ordered mapping of column name to Cell."""

    __slots__ = ("_cells",)

    def __init__(self):
        self._cells: "OrderedDict[str, Cell]" = OrderedDict()

    def set_value(self, column: Column, value: Any) -> Cell:
        """
        Set a typed value, creating the cell the first time the column is set.

        Raises:
            ValidationError: If the value does not match the column type
        """
        cell = self._cells.get(column.name)
        if cell is None or cell.column != column:
            cell = Cell(column, value)
            self._cells[column.name] = cell
        else:
            cell.set_value(value)
        return cell

    def set_from_string(self, column: Column, text: Optional[str]) -> Cell:
        """
        Set a value from its string form.

        Raises:
            ConversionError: If the text does not match the column type
        """
        cell = Cell(column)
        cell.set_from_string(text)
        self._cells[column.name] = cell
        return cell

    def set_cell(self, cell: Cell) -> None:
        if cell is None:
            raise SchemaError("Cell cannot be null")
        self._cells[cell.column.name] = cell

    def get_cell(self, column_name: str) -> Optional[Cell]:
        return self._cells.get(column_name)

    def get_value(self, column_name: str) -> Any:
        cell = self._cells.get(column_name)
        return None if cell is None else cell.value

    def has_cell(self, column_name: str) -> bool:
        return column_name in self._cells

    def cells(self) -> List[Cell]:
        return list(self._cells.values())

    def to_string_map(self) -> Dict[str, str]:
        return {name: cell.value_as_string() for name, cell in self._cells.items()}

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, column_name) -> bool:
        return column_name in self._cells

    def __iter__(self) -> Iterator[Cell]:
        return iter(list(self._cells.values()))

    def __repr__(self):
        return f"Row({self.to_string_map()})"
