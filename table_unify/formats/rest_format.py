"""
Reader for HTTP/REST endpoints returning JSON, XML or delimited text.
"""

import logging

from ..config.format_defaults import FormatDefaults
from ..datasource.rest_connection import RESTConnection
from ..exceptions import RESTError
from ..interfaces import DataReaderInterface, RESTDataSource
from ..mapping.record_mapper import load_records
from ..models import MappingConfiguration, MappingOptions
from .csv_format import parse_csv_rows
from .json_format import extract_json_records, load_json_records, parse_json
from .xml_format import extract_xml_records, parse_xml


class RESTReader(DataReaderInterface):
    """
    Reads records from an endpoint response into a sink.

    With column mappings the records go through the mapping pipeline; without
    them JSON responses are loaded with columns inferred from the values.

    Options:
        method: HTTP method (default GET); 'body' is sent as JSON for POST/PUT
        responseFormat: json (default), xml or csv
        rootElement: JSON key holding the array, or XML document element
        rowElement: XML row element name (default 'row')
        hasHeaderRow: For csv responses, first line holds field names (default True)
    """

    SUPPORTED_FORMATS = ("json", "xml", "csv")

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_data(self, sink: RESTDataSource, connection: RESTConnection,
                  config: MappingConfiguration) -> int:
        if config is None:
            raise ValueError("Mapping configuration cannot be null")
        response_format = str(config.get_option(MappingOptions.RESPONSE_FORMAT,
                                                FormatDefaults.RESPONSE_FORMAT)).lower()
        if response_format not in self.SUPPORTED_FORMATS:
            raise RESTError(f"Unsupported response format: {response_format}", connection.location)

        method = str(config.get_option(MappingOptions.METHOD, FormatDefaults.HTTP_METHOD)).upper()
        body = config.get_option(MappingOptions.BODY) if method in ("POST", "PUT", "PATCH") else None
        response = connection.request(method, json_body=body)
        self.logger.debug(f"{method} {connection.location} returned {len(response.content)} bytes")

        headers = None
        if response_format == "json":
            records = extract_json_records(parse_json(response.text, connection.location),
                                           config.get_option(MappingOptions.ROOT_ELEMENT), connection.location)
            if not config.column_mappings:
                return load_json_records(sink, records, connection.location)
        elif response_format == "xml":
            records = extract_xml_records(
                parse_xml(response.content, connection.location),
                config.get_option(MappingOptions.ROOT_ELEMENT) or FormatDefaults.ROOT_ELEMENT,
                config.get_option(MappingOptions.ROW_ELEMENT) or FormatDefaults.ROW_ELEMENT,
                connection.location
            )
        else:
            rows = parse_csv_rows(response.text, config.get_bool_option(MappingOptions.ALLOW_EMPTY_VALUES),
                                  connection.location)
            if config.get_bool_option(MappingOptions.HAS_HEADER_ROW, True) and rows:
                headers, records = rows[0], rows[1:]
            else:
                records = rows

        if not config.column_mappings:
            raise ValueError(f"Column mappings are required for {response_format} responses")

        count = load_records(sink, config, records, headers)
        self.logger.info(f"Read {count} records from {connection.location}")
        return count
