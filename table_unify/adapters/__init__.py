"""
Capability adapters binding a Table to format-specific interfaces.
"""

from .table_adapter import (
    BaseTableAdapter,
    CSVTableAdapter,
    JSONTableAdapter,
    XMLTableAdapter,
    JDBCTableAdapter,
    RESTTableAdapter,
    NoSQLTableAdapter,
    SourceKind,
    adapter_for,
    source_kind_for
)

__all__ = [
    'BaseTableAdapter',
    'CSVTableAdapter',
    'JSONTableAdapter',
    'XMLTableAdapter',
    'JDBCTableAdapter',
    'RESTTableAdapter',
    'NoSQLTableAdapter',
    'SourceKind',
    'adapter_for',
    'source_kind_for'
]
