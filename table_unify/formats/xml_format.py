"""
XML readers and writers built on lxml.

Documents use one element per row and one child element per field:

    <data>
      <row><name>Alice</name><age>30</age></row>
    </data>

The root and row element names come from the rootElement and rowElement options.
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from lxml import etree

from ..config.format_defaults import FormatDefaults
from ..datasource.file_connection import FileConnection
from ..exceptions import XMLError
from ..interfaces import DataReaderInterface, DataWriterInterface, XMLDataSource
from ..mapping.record_mapper import load_records
from ..models import MappingConfiguration, MappingOptions
from .base import infer_column_types, require_mappings


def _local_name(tag) -> Optional[str]:
    if not isinstance(tag, str):
        return None
    return etree.QName(tag).localname


def parse_xml(content: bytes, location: Optional[str] = None):
    """
    Parse XML bytes into a root element.

    Raises:
        XMLError: If the content is not well-formed
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
    try:
        return etree.fromstring(content, parser)
    except etree.XMLSyntaxError as e:
        line, column = e.position if e.position else (None, None)
        raise XMLError(f"Invalid XML: {e.msg}", location, line=line, column=column) from e


def extract_xml_records(root, root_element: str = FormatDefaults.ROOT_ELEMENT,
                        row_element: str = FormatDefaults.ROW_ELEMENT,
                        location: Optional[str] = None) -> List[Dict[str, str]]:
    """
    Collect field values from each row element.

    Row attributes become fields too; a child element with the same name
    takes precedence.

    Raises:
        XMLError: If the document root is not the expected element
    """
    if _local_name(root.tag) != root_element:
        raise XMLError(f"Expected root element <{root_element}>, found <{_local_name(root.tag)}>", location)

    records = []
    for row in root:
        if _local_name(row.tag) != row_element:
            continue
        record = OrderedDict((_local_name(name), value) for name, value in row.attrib.items())
        for child in row:
            name = _local_name(child.tag)
            if name is not None:
                record[name] = (child.text or "").strip()
        records.append(record)
    return records


def _layout(config: MappingConfiguration):
    return (config.get_option(MappingOptions.ROOT_ELEMENT) or FormatDefaults.ROOT_ELEMENT,
            config.get_option(MappingOptions.ROW_ELEMENT) or FormatDefaults.ROW_ELEMENT)


class XMLMappingReader(DataReaderInterface):
    """
    Reads XML rows into a sink using a mapping configuration.

    Options:
        rootElement: Document element name (default 'data')
        rowElement: Row element name (default 'row')
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_data(self, sink: XMLDataSource, connection: FileConnection,
                  config: MappingConfiguration) -> int:
        require_mappings(config)
        root_element, row_element = _layout(config)
        root = parse_xml(connection.read_bytes(), connection.location)
        records = extract_xml_records(root, root_element, row_element, connection.location)

        count = load_records(sink, config, records)
        self.logger.info(f"Read {count} <{row_element}> elements from {connection.location}")
        return count


class XMLReader(DataReaderInterface):
    """
    Reads XML rows, deriving columns from the field names and values.

    Options:
        rootElement: Document element name (default 'data')
        rowElement: Row element name (default 'row')
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_data(self, sink: XMLDataSource, connection: FileConnection,
                  config: Optional[MappingConfiguration] = None) -> int:
        config = config or MappingConfiguration()
        root_element, row_element = _layout(config)
        root = parse_xml(connection.read_bytes(), connection.location)
        records = extract_xml_records(root, root_element, row_element, connection.location)
        if not records:
            self.logger.warning(f"No <{row_element}> elements found in {connection.location}")
            return 0

        headers = list(OrderedDict((name, None) for record in records for name in record))
        if sink.get_column_count() == 0:
            sink.set_columns(infer_column_types(headers, [[record.get(name) for name in headers]
                                                          for record in records]))
        for record in records:
            sink.add_row(dict(record))

        self.logger.info(f"Read {len(records)} <{row_element}> elements from {connection.location}")
        return len(records)


class XMLWriter(DataWriterInterface):
    """
    Writes a source as XML with one element per row.

    Options:
        rootElement: Document element name (default 'data')
        rowElement: Row element name (default 'row')
        prettyPrint: Indent the output (default False)
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def write_data(self, source: XMLDataSource, connection: FileConnection,
                   config: Optional[MappingConfiguration] = None) -> int:
        config = config or MappingConfiguration()
        root_element, row_element = _layout(config)
        names = [source.get_column_name(i) for i in range(source.get_column_count())]

        try:
            root = etree.Element(root_element)
            for row_index in range(source.get_row_count()):
                row = etree.SubElement(root, row_element)
                for name in names:
                    etree.SubElement(row, name).text = source.get_value_at(row_index, name)
        except ValueError as e:
            raise XMLError(f"Cannot write XML element: {e}", connection.location) from e

        content = etree.tostring(root, pretty_print=config.get_bool_option(MappingOptions.PRETTY_PRINT),
                                 xml_declaration=True, encoding="UTF-8")
        connection.write_bytes(content)

        count = source.get_row_count()
        self.logger.info(f"Wrote {count} <{row_element}> elements to {connection.location}")
        return count
