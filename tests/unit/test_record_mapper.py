"""
Tests for mapping-driven record resolution.
"""

import logging

import pytest

from table_unify.adapters import JSONTableAdapter
from table_unify.core.table import Table
from table_unify.exceptions import SchemaError
from table_unify.mapping.record_mapper import (
    install_schema,
    load_records,
    map_record,
    resolve_value,
    stringify_value,
)
from table_unify.models import ColumnMapping, MappingConfiguration


def test_customer_records_populate_table(customer_records, customer_mapping, empty_table):
    sink = JSONTableAdapter(empty_table)

    added = load_records(sink, customer_mapping, customer_records)

    assert added == 3
    assert empty_table.get_row_count() == 3
    assert empty_table.get_value_at(0, "name") == "John Doe"
    assert empty_table.get_value_object(2, "age") == 40
    assert [column.name for column in empty_table.columns] == ["id", "name", "email", "age"]


def test_schema_installed_only_on_empty_sink(customer_mapping):
    table = Table()
    table.set_columns({"id": "string", "name": "string", "email": "string", "age": "string"})

    assert install_schema(table, customer_mapping) is False
    assert table.get_column_by_name("id").type_name == "string"

    fresh = Table()
    assert install_schema(fresh, customer_mapping) is True
    assert fresh.get_column_by_name("id").type_name == "int"


def test_missing_field_uses_default():
    config = (MappingConfiguration.builder()
              .map_column("name", "name", "string")
              .map_column("country", "country", "string", default_value="US")
              .build())
    assert map_record(config, {"name": "Ann"}) == {"name": "Ann", "country": "US"}
    assert map_record(config, {"name": "Ann", "country": ""}) == {"name": "Ann", "country": "US"}


def test_missing_field_without_default_is_omitted(caplog):
    config = MappingConfiguration.builder().map_column("name", "name", "string").map_column(
        "age", "age", "int").build()
    with caplog.at_level(logging.WARNING):
        row = map_record(config, {"name": "Ann"})
    assert row == {"name": "Ann"}
    assert "age" in caplog.text


def test_omitted_field_follows_sink_policy():
    config = MappingConfiguration.builder().map_column("name", "name", "string").map_column(
        "age", "age", "int").build()

    lenient = Table()
    load_records(lenient, config, [{"name": "Ann"}])
    assert lenient.get_value_at(0, "age") == "0"

    strict = Table(create_default_value=False)
    with pytest.raises(SchemaError):
        load_records(strict, config, [{"name": "Ann"}])


def test_resolve_by_index_and_header():
    by_index = ColumnMapping("b", "string", source_column_index=1)
    by_name = ColumnMapping("c", "string", source_column_name="C")

    assert resolve_value(by_index, ["x", "y", "z"]) == "y"
    assert resolve_value(by_name, ["x", "y", "z"], headers=["A", "B", "C"]) == "z"
    assert resolve_value(by_name, ["x", "y", "z"]) is None
    assert resolve_value(ColumnMapping("d", "string", source_column_index=5), ["x"]) is None


def test_index_selector_on_mapping_record():
    mapping = ColumnMapping("second", "string", source_column_index=1)
    assert resolve_value(mapping, {"a": 1, "b": 2}) == "2"


@pytest.mark.parametrize("value,expected", [
    (None, None),
    ("text", "text"),
    (True, "true"),
    (3, "3"),
    (2.5, "2.5"),
    ({"k": 1}, '{"k": 1}'),
    ([1, 2], "[1, 2]"),
])
def test_stringify_value(value, expected):
    assert stringify_value(value) == expected
