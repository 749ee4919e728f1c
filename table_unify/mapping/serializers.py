"""
JSON and YAML serializers for mapping configurations.

Both formats use the same document shape:

    sourceLocation: data/employees.csv
    options:
      hasHeaderRow: true
    columnMappings:
      - sourceColumnName: Name
        targetColumnName: name
        targetColumnType: string
"""

import json
import logging
from abc import abstractmethod
from pathlib import Path
from typing import Union

import yaml

from ..exceptions import MappingError, SchemaError
from ..interfaces import MappingSerializerInterface
from ..models import MappingConfiguration


class AbstractMappingSerializer(MappingSerializerInterface):
    """Shared file handling and validation for mapping serializers."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def serialize(self, config: MappingConfiguration) -> str:
        if config is None:
            raise MappingError("Mapping configuration cannot be null")
        return self._dump(config.to_dict())

    def deserialize(self, content: str) -> MappingConfiguration:
        if content is None or not content.strip():
            raise MappingError(f"Empty {self.format_name} mapping content")

        data = self._load(content)
        if not isinstance(data, dict):
            raise MappingError(f"{self.format_name} mapping must be an object, got {type(data).__name__}")

        try:
            return MappingConfiguration.from_dict(data)
        except SchemaError as e:
            raise MappingError(f"Invalid mapping configuration: {e}") from e

    def write_to_file(self, config: MappingConfiguration, path: Union[str, Path]) -> None:
        """
        Serialize a configuration to a file.

        Raises:
            MappingError: If the file cannot be written
        """
        path = Path(path)
        content = self.serialize(config)
        try:
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise MappingError(f"Failed to write mapping file {path}: {e}", str(path)) from e
        self.logger.info(f"Wrote {self.format_name} mapping configuration to {path}")

    def read_from_file(self, path: Union[str, Path]) -> MappingConfiguration:
        """
        Read a configuration from a file.

        Raises:
            MappingError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            content = path.read_text(encoding='utf-8')
        except OSError as e:
            raise MappingError(f"Failed to read mapping file {path}: {e}", str(path)) from e

        try:
            config = self.deserialize(content)
        except MappingError as e:
            raise MappingError(f"{e} ({path})", str(path)) from e
        self.logger.debug(f"Read {len(config.column_mappings)} column mappings from {path}")
        return config

    @abstractmethod
    def _dump(self, data: dict) -> str:
        pass

    @abstractmethod
    def _load(self, content: str):
        pass


class JSONMappingSerializer(AbstractMappingSerializer):
    """Mapping serializer for JSON documents."""

    @property
    def format_name(self) -> str:
        return "json"

    def _dump(self, data: dict) -> str:
        return json.dumps(data, indent=2)

    def _load(self, content: str):
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise MappingError(f"Invalid JSON mapping at line {e.lineno}: {e.msg}") from e


class YAMLMappingSerializer(AbstractMappingSerializer):
    """Mapping serializer for YAML documents."""

    @property
    def format_name(self) -> str:
        return "yaml"

    def _dump(self, data: dict) -> str:
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)

    def _load(self, content: str):
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise MappingError(f"Invalid YAML mapping: {e}") from e


_SERIALIZERS = {
    "json": JSONMappingSerializer,
    "yaml": YAMLMappingSerializer,
    "yml": YAMLMappingSerializer,
}


def get_serializer(format_name: str) -> AbstractMappingSerializer:
    """
    Return a serializer for 'json', 'yaml' or 'yml'.

    Raises:
        MappingError: If the format is not supported
    """
    serializer_class = _SERIALIZERS.get((format_name or "").strip().lower().lstrip("."))
    if serializer_class is None:
        raise MappingError(f"Unsupported mapping format: {format_name}")
    return serializer_class()


def get_serializer_for_path(path: Union[str, Path]) -> AbstractMappingSerializer:
    """Return a serializer chosen by the file extension."""
    suffix = Path(path).suffix
    if not suffix:
        raise MappingError(f"Cannot determine mapping format of {path}", str(path))
    return get_serializer(suffix)
