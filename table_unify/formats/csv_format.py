"""
Delimited text readers and writers.
"""

import csv
import io
import logging
from typing import List, Optional, Tuple

from ..datasource.file_connection import FileConnection
from ..exceptions import CSVError
from ..interfaces import CSVDataSource, DataReaderInterface, DataWriterInterface
from ..mapping.record_mapper import load_records
from ..models import MappingConfiguration, MappingOptions
from ..config.format_defaults import FormatDefaults
from .base import identity_mapping, infer_column_types, mapped_source_value, require_mappings


logger = logging.getLogger(__name__)


def parse_csv_rows(content: str, allow_empty_values: bool = False, location: Optional[str] = None,
                   delimiter: str = FormatDefaults.CSV_DELIMITER) -> List[List[str]]:
    """
    Split delimited text into rows of fields.

    Blank lines are skipped. Unless allow_empty_values is set, trailing
    empty fields are dropped from each row.

    Raises:
        CSVError: If the text is not valid delimited data
    """
    rows = []
    reader = csv.reader(io.StringIO(content), delimiter=delimiter)
    try:
        for values in reader:
            if not values or (len(values) == 1 and not values[0].strip()):
                logger.warning(f"Empty line found at line {reader.line_num}, skipping")
                continue
            if not allow_empty_values:
                while values and values[-1] == "":
                    values.pop()
                if not values:
                    logger.warning(f"No values found at line {reader.line_num}, skipping")
                    continue
            rows.append(values)
    except csv.Error as e:
        raise CSVError(f"Error parsing CSV line {reader.line_num}: {e}", location,
                       line_number=reader.line_num) from e
    return rows


def _split_header(rows: List[List[str]], has_header_row: bool,
                  location: Optional[str]) -> Tuple[Optional[List[str]], List[List[str]]]:
    if not has_header_row:
        return None, rows
    if not rows or not rows[0]:
        raise CSVError(f"Expected header row but found none in file: {location}", location, line_number=1)
    return rows[0], rows[1:]


def _read_content(connection: FileConnection) -> str:
    # utf-8-sig drops a leading byte order mark
    return connection.read_text("utf-8-sig")


class CSVMappingReader(DataReaderInterface):
    """
    Reads delimited text into a sink using a mapping configuration.

    Options:
        hasHeaderRow: First line holds field names (default False)
        allowEmptyValues: Keep trailing empty fields (default False)
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_data(self, sink: CSVDataSource, connection: FileConnection,
                  config: MappingConfiguration) -> int:
        require_mappings(config)
        has_header_row = config.get_bool_option(MappingOptions.HAS_HEADER_ROW, False)
        allow_empty_values = config.get_bool_option(MappingOptions.ALLOW_EMPTY_VALUES, False)

        rows = parse_csv_rows(_read_content(connection), allow_empty_values, connection.location)
        if not rows:
            self.logger.warning(f"No data found in CSV file: {connection.location}")
            return 0

        headers, records = _split_header(rows, has_header_row, connection.location)
        count = load_records(sink, config, records, headers)
        self.logger.info(f"Read {count} rows from {connection.location}")
        return count


class CSVMappingWriter(DataWriterInterface):
    """
    Writes the mapped columns of a source as delimited text.

    Each mapping's source selector names (or indexes) a source column, and
    its target column name is used in the header.

    Options:
        withHeaderRow: Write target column names as the first line (default False)
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def write_data(self, source: CSVDataSource, connection: FileConnection,
                   config: MappingConfiguration) -> int:
        require_mappings(config)
        with_header_row = config.get_bool_option(MappingOptions.WITH_HEADER_ROW, False)

        with connection.open_for_write(FormatDefaults.CSV_ENCODING, newline="") as file:
            writer = csv.writer(file, delimiter=FormatDefaults.CSV_DELIMITER, lineterminator="\n")
            if with_header_row:
                writer.writerow([mapping.target_column_name for mapping in config.column_mappings])
            for row_index in range(source.get_row_count()):
                writer.writerow([mapped_source_value(source, row_index, mapping)
                                 for mapping in config.column_mappings])

        count = source.get_row_count()
        self.logger.info(f"Wrote {count} rows to {connection.location}")
        return count


class CSVReader(DataReaderInterface):
    """
    Reads delimited text without a mapping, inferring column types.

    Without a header row, columns are named Column1, Column2, ...

    Options:
        hasHeaderRow: First line holds column names (default True)
        allowEmptyValues: Keep trailing empty fields (default True)
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_data(self, sink: CSVDataSource, connection: FileConnection,
                  config: Optional[MappingConfiguration] = None) -> int:
        config = config or MappingConfiguration()
        has_header_row = config.get_bool_option(MappingOptions.HAS_HEADER_ROW, True)
        allow_empty_values = config.get_bool_option(MappingOptions.ALLOW_EMPTY_VALUES, True)

        rows = parse_csv_rows(_read_content(connection), allow_empty_values, connection.location)
        headers, records = _split_header(rows, has_header_row, connection.location)
        if headers is None:
            width = max((len(row) for row in records), default=0)
            headers = [f"Column{i + 1}" for i in range(width)]

        if sink.get_column_count() == 0:
            sink.set_columns(infer_column_types(headers, records))

        for values in records:
            sink.add_row({name: value for name, value in zip(headers, values)})

        self.logger.info(f"Read {len(records)} rows from {connection.location}")
        return len(records)


class CSVWriter(DataWriterInterface):
    """
    Writes every column of a source as delimited text.

    Options:
        withHeaderRow: Write column names as the first line (default True)
    """

    def __init__(self):
        self._mapping_writer = CSVMappingWriter()

    def write_data(self, source: CSVDataSource, connection: FileConnection,
                   config: Optional[MappingConfiguration] = None) -> int:
        mapping = identity_mapping(source, config, infer_types=False)
        if MappingOptions.WITH_HEADER_ROW not in mapping.options:
            options = dict(mapping.options)
            options[MappingOptions.WITH_HEADER_ROW] = True
            mapping = MappingConfiguration(mapping.source_location, mapping.column_mappings, options)
        return self._mapping_writer.write_data(source, connection, mapping)
