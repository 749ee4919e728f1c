"""
table_unify

A format-agnostic in-memory table model with a declarative mapping framework
for moving data between tables and delimited text, JSON, XML, relational
databases, REST endpoints and document stores.
"""

__version__ = "1.0.0"
__author__ = "Table Unify Team"

# Import core models and interfaces for easy access
from .models import (
    DataType,
    ColumnMapping,
    MappingConfiguration,
    MappingConfigurationBuilder,
    MappingOptions
)

from .core import (
    Column,
    Cell,
    Row,
    Table,
    TableBuilder,
    ConcurrentTable,
    ProfiledTable,
    create_column,
    infer_type,
    convert_from_string,
    default_value_for
)

from .interfaces import (
    DataSourceInterface,
    DataSourceConnectionInterface,
    DataReaderInterface,
    DataWriterInterface,
    MappingSerializerInterface
)

from .exceptions import (
    TableUnifyError,
    TableError,
    SchemaError,
    ValidationError,
    ConversionError,
    TableIndexError,
    DataSourceError,
    DataSourceConnectionError,
    MappingError,
    ConfigurationError
)

__all__ = [
    # Core models
    "DataType",
    "ColumnMapping",
    "MappingConfiguration",
    "MappingConfigurationBuilder",
    "MappingOptions",
    "Column",
    "Cell",
    "Row",
    "Table",
    "TableBuilder",
    "ConcurrentTable",
    "ProfiledTable",
    "create_column",
    "infer_type",
    "convert_from_string",
    "default_value_for",

    # Interfaces
    "DataSourceInterface",
    "DataSourceConnectionInterface",
    "DataReaderInterface",
    "DataWriterInterface",
    "MappingSerializerInterface",

    # Exceptions
    "TableUnifyError",
    "TableError",
    "SchemaError",
    "ValidationError",
    "ConversionError",
    "TableIndexError",
    "DataSourceError",
    "DataSourceConnectionError",
    "MappingError",
    "ConfigurationError"
]
