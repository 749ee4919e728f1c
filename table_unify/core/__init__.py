"""
In-memory table model: type system, columns, cells, rows and tables.
"""

from .type_system import infer_type, convert_from_string, default_value_for, format_value
from .column import Column, Cell, create_column
from .row import Row
from .table import Table, TableBuilder
from .concurrent_table import ConcurrentTable
from .profiled_table import ProfiledTable, OperationProfiler, OperationMetrics

__all__ = [
    'infer_type',
    'convert_from_string',
    'default_value_for',
    'format_value',
    'Column',
    'Cell',
    'create_column',
    'Row',
    'Table',
    'TableBuilder',
    'ConcurrentTable',
    'ProfiledTable',
    'OperationProfiler',
    'OperationMetrics'
]
