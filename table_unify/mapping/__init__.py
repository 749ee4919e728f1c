"""
Mapping-driven record resolution and mapping configuration serializers.
"""

from .record_mapper import install_schema, resolve_value, map_record, load_records
from .serializers import (
    JSONMappingSerializer,
    YAMLMappingSerializer,
    get_serializer,
    get_serializer_for_path
)

__all__ = [
    'install_schema',
    'resolve_value',
    'map_record',
    'load_records',
    'JSONMappingSerializer',
    'YAMLMappingSerializer',
    'get_serializer',
    'get_serializer_for_path'
]
