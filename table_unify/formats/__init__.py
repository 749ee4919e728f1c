"""
Format readers and writers for delimited text, JSON, XML, databases,
REST endpoints and document stores.
"""

from .csv_format import CSVMappingReader, CSVMappingWriter, CSVReader, CSVWriter
from .json_format import JSONMappingReader, JSONReader, JSONWriter
from .xml_format import XMLMappingReader, XMLReader, XMLWriter
from .jdbc_format import JDBCMappingReader, JDBCMappingWriter, JDBCReader, JDBCWriter
from .rest_format import RESTReader
from .nosql_format import NoSQLReader

__all__ = [
    'CSVMappingReader',
    'CSVMappingWriter',
    'CSVReader',
    'CSVWriter',
    'JSONMappingReader',
    'JSONReader',
    'JSONWriter',
    'XMLMappingReader',
    'XMLReader',
    'XMLWriter',
    'JDBCMappingReader',
    'JDBCMappingWriter',
    'JDBCReader',
    'JDBCWriter',
    'RESTReader',
    'NoSQLReader'
]
