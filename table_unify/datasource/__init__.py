"""
Connections to files, databases, REST endpoints and document stores.
"""

from .file_connection import FileConnection
from .db_connection import DbConnection
from .rest_connection import RESTConnection
from .nosql_connection import NoSQLConnection
from .factory import ConnectionKind, connection_kind_for, create_connection

__all__ = [
    'FileConnection',
    'DbConnection',
    'RESTConnection',
    'NoSQLConnection',
    'ConnectionKind',
    'connection_kind_for',
    'create_connection'
]
