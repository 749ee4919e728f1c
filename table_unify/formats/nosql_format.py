"""
Reader for document store collections.
"""

import json
import logging
from typing import Any, Dict, List

from ..datasource.nosql_connection import NoSQLConnection
from ..exceptions import DataSourceError
from ..interfaces import DataReaderInterface, NoSQLDataSource
from ..mapping.record_mapper import load_records
from ..models import MappingConfiguration, MappingOptions
from ..config.format_defaults import FormatDefaults
from .json_format import load_json_records


def _document_record(document: Dict[str, Any]) -> Dict[str, Any]:
    record = dict(document)
    if "_id" in record:
        record["_id"] = str(record["_id"])
    return record


class NoSQLReader(DataReaderInterface):
    """
    Reads documents from a collection into a sink.

    With column mappings the documents go through the mapping pipeline;
    without them columns are inferred from the document values.

    Options:
        collection: Collection name (default: the connection's collection)
        query: Filter document, as a dict or JSON text (default: all documents)
        limit: Maximum number of documents, 0 for no limit
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def _query(self, config: MappingConfiguration, location: str) -> Dict[str, Any]:
        query = config.get_option(MappingOptions.QUERY) or {}
        if isinstance(query, str):
            try:
                query = json.loads(query)
            except json.JSONDecodeError as e:
                raise DataSourceError(f"Invalid NoSQL query: {e.msg}", location) from e
        if not isinstance(query, dict):
            raise DataSourceError(f"NoSQL query must be an object, got {type(query).__name__}", location)
        return query

    def read_data(self, sink: NoSQLDataSource, connection: NoSQLConnection,
                  config: MappingConfiguration) -> int:
        if config is None:
            raise ValueError("Mapping configuration cannot be null")
        query = self._query(config, connection.location)
        try:
            limit = int(config.get_option(MappingOptions.LIMIT, FormatDefaults.NOSQL_LIMIT))
        except (TypeError, ValueError) as e:
            raise DataSourceError(f"Invalid limit option: {config.get_option(MappingOptions.LIMIT)}",
                                  connection.location) from e

        collection = connection.get_collection(config.get_option(MappingOptions.COLLECTION))
        cursor = collection.find(query)
        if limit > 0:
            cursor = cursor.limit(limit)
        records: List[Dict[str, Any]] = [_document_record(document) for document in cursor]
        self.logger.debug(f"Fetched {len(records)} documents from {connection.database}")

        if not config.column_mappings:
            return load_json_records(sink, records, connection.location)

        count = load_records(sink, config, records)
        self.logger.info(f"Read {count} documents from {connection.database}")
        return count
