"""
Custom exceptions for the table_unify system.

This module defines specific exception types for the error conditions that
can occur while building tables, applying mapping configurations and moving
data to and from external sources.
"""


class TableUnifyError(Exception):
    """Base exception for all table_unify related errors."""

    def __init__(self, message: str, source_location: str = None):
        """
        Initialize table_unify error.

        Args:
            message: Error description
            source_location: Optional location of the data source involved in the error
        """
        super().__init__(message)
        self.source_location = source_location


class TableError(TableUnifyError):
    """Base exception for errors raised by the in-memory table model."""
    pass


class SchemaError(TableError):
    """Exception raised when a table schema or mapping selector is invalid."""
    pass


class ValidationError(TableError):
    """Exception raised when a cell value fails its column's type predicate."""

    def __init__(self, message: str, column_name: str = None, source_location: str = None):
        """
        Initialize validation error.

        Args:
            message: Error description
            column_name: Name of the column whose value was rejected
            source_location: Optional location of the data source
        """
        super().__init__(message, source_location)
        self.column_name = column_name


class ConversionError(ValidationError):
    """Exception raised when a string cannot be parsed into the declared target type."""

    def __init__(self, message: str, column_name: str = None, value: str = None,
                 target_type: str = None, source_location: str = None):
        """
        Initialize conversion error.

        Args:
            message: Error description
            column_name: Name of the column being populated, when known
            value: Original string that failed conversion
            target_type: Target data type name
            source_location: Optional location of the data source
        """
        super().__init__(message, column_name, source_location)
        self.value = value
        self.target_type = target_type


class TableIndexError(TableError, IndexError):
    """Exception raised when a row or column index is out of range."""

    def __init__(self, message: str, index: int = None, size: int = None):
        super().__init__(message)
        self.index = index
        self.size = size


class DataSourceError(TableUnifyError):
    """Base exception for errors raised while reading or writing external data sources."""

    def __init__(self, message: str, location: str = None):
        super().__init__(message, location)
        self.location = location


class DataSourceConnectionError(DataSourceError, ConnectionError):
    """Exception raised when a required connection cannot be established."""
    pass


class CSVError(DataSourceError):
    """Exception raised when delimited text cannot be read or written."""

    def __init__(self, message: str, location: str = None, line_number: int = None):
        """
        Initialize CSV error.

        Args:
            message: Error description
            location: File or URL being processed
            line_number: Optional 1-based line number where the problem occurred
        """
        super().__init__(message, location)
        self.line_number = line_number


class JSONFormatError(DataSourceError):
    """Exception raised when JSON content has an unexpected shape or cannot be parsed."""
    pass


class XMLError(DataSourceError):
    """Exception raised when XML content cannot be parsed or written."""

    def __init__(self, message: str, location: str = None, line: int = None, column: int = None):
        """
        Initialize XML error.

        Args:
            message: Error description
            location: File or URL being processed
            line: Optional line number reported by the parser
            column: Optional column number reported by the parser
        """
        super().__init__(message, location)
        self.line = line
        self.column = column


class DatabaseError(DataSourceError):
    """Exception raised when a database statement fails."""

    def __init__(self, message: str, location: str = None, sql_query: str = None,
                 table_name: str = None):
        """
        Initialize database error.

        Args:
            message: Error description
            location: Connection string or database path
            sql_query: SQL statement that failed
            table_name: Target or source table name
        """
        super().__init__(message, location)
        self.sql_query = sql_query
        self.table_name = table_name


class RESTError(DataSourceError):
    """Exception raised when an HTTP request fails or returns an error status."""

    def __init__(self, message: str, location: str = None, status_code: int = None):
        super().__init__(message, location)
        self.status_code = status_code


class MappingError(DataSourceError):
    """Exception raised when a mapping configuration cannot be loaded or serialized."""

    def __init__(self, message: str, location: str = None, source: str = None,
                 target: str = None):
        """
        Initialize mapping error.

        Args:
            message: Error description
            location: File the mapping was read from or written to
            source: Source field involved, when known
            target: Target column involved, when known
        """
        super().__init__(message, location)
        self.source = source
        self.target = target


class ConfigurationError(TableUnifyError):
    """Exception raised when configuration is invalid or missing."""
    pass
