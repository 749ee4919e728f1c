"""
Thread-safe table variant for parallel row insertion.

Columns must be fully defined before threads start calling add_row. Calling
freeze_schema() makes that ordering explicit by rejecting later schema changes.
"""

import logging
import threading
from typing import Any, Mapping, Optional

from ..exceptions import SchemaError
from .column import Column
from .row import Row
from .table import RowLike, Table


class ConcurrentTable(Table):
    """
    Table whose add_row may be called from many threads at once.

    Each row is validated outside the lock and appended under it, so every
    accepted call is visible exactly once and a rejected row has no effect.
    The relative order of rows from racing callers is not defined.

    Args:
        name: Optional table name
        create_default_value: Missing-column policy (see Table)
        expected_rows: Optional sizing hint for the number of rows to be added
    """

    def __init__(self, name: str = "", create_default_value: bool = True,
                 expected_rows: Optional[int] = None):
        super().__init__(name, create_default_value)
        self.logger = logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._schema_frozen = False
        self.expected_rows = expected_rows
        if expected_rows is not None:
            if expected_rows < 0:
                raise ValueError("expected_rows cannot be negative")
            self.logger.debug(f"Concurrent table '{name}' sized for {expected_rows} rows")

    @property
    def schema_frozen(self) -> bool:
        return self._schema_frozen

    def freeze_schema(self) -> None:
        """Reject any further column changes."""
        self._schema_frozen = True
        self.logger.debug(f"Schema frozen for table '{self.name}' with {self.get_column_count()} columns")

    def add_column(self, column: Column) -> None:
        self._check_schema_mutable()
        super().add_column(column)

    def set_columns(self, columns: Mapping[str, Any]) -> None:
        self._check_schema_mutable()
        super().set_columns(columns)

    def _check_schema_mutable(self) -> None:
        if self._schema_frozen:
            raise SchemaError(f"Schema of table '{self.name}' is frozen")

    def add_row(self, row: RowLike) -> None:
        new_row = self._build_row(row)
        with self._lock:
            self._append_row(new_row)

    def get_row_count(self) -> int:
        with self._lock:
            return super().get_row_count()

    def get_row(self, index: int) -> Row:
        with self._lock:
            return super().get_row(index)

    def set_value_at(self, row_index: int, column_name: str, value: Optional[str]) -> None:
        with self._lock:
            super().set_value_at(row_index, column_name, value)

    def set_value(self, row_index: int, column_name: str, value: Any) -> None:
        with self._lock:
            super().set_value(row_index, column_name, value)
