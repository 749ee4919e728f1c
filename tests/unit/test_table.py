"""
Tests for the in-memory Table and TableBuilder.

Covers schema installation, row validation, default filling, string-level
value access and the guarantee that a rejected row leaves the table unchanged.
"""

import logging
import unittest
from collections import OrderedDict

import pytest

from table_unify.core.column import create_column
from table_unify.core.row import Row
from table_unify.core.table import Table, TableBuilder
from table_unify.exceptions import (
    ConversionError,
    SchemaError,
    TableIndexError,
    ValidationError,
)


def _schema():
    return OrderedDict([("Name", "string"), ("Age", "int"), ("Salary", "double"), ("Active", "boolean")])


class TestTableSchema(unittest.TestCase):
    """Test column installation and lookup."""

    def setUp(self):
        self.table = Table("people")

    def test_set_columns_preserves_order(self):
        self.table.set_columns(_schema())
        self.assertEqual(self.table.get_column_count(), 4)
        self.assertEqual([self.table.get_column_name(i) for i in range(4)],
                         ["Name", "Age", "Salary", "Active"])
        self.assertEqual(self.table.get_column_by_name("Age").type_name, "int")

    def test_set_columns_rejects_unknown_type(self):
        with self.assertRaises(SchemaError):
            self.table.set_columns({"Name": "varchar"})
        self.assertEqual(self.table.get_column_count(), 0)

    def test_set_columns_rejects_blank_name_or_type(self):
        with self.assertRaises(SchemaError):
            self.table.set_columns({"": "string"})
        with self.assertRaises(SchemaError):
            self.table.set_columns({"Name": " "})
        with self.assertRaises(SchemaError):
            self.table.set_columns(None)

    def test_set_columns_replaces_schema_of_empty_table(self):
        self.table.set_columns(_schema())
        self.table.set_columns({"Only": "string"})
        self.assertEqual(self.table.get_column_count(), 1)
        self.assertFalse(self.table.has_column("Name"))

    def test_set_columns_rejected_once_rows_exist(self):
        self.table.set_columns(_schema())
        self.table.add_row({"Name": "Alice"})
        with self.assertRaises(SchemaError):
            self.table.set_columns({"Other": "string"})

    def test_add_column_rejects_duplicate(self):
        self.table.add_column(create_column("Name", "string"))
        with self.assertRaises(SchemaError):
            self.table.add_column(create_column("Name", "int"))

    def test_column_index_out_of_range(self):
        self.table.set_columns(_schema())
        with self.assertRaises(TableIndexError) as context:
            self.table.get_column_name(4)
        self.assertEqual(context.exception.index, 4)
        self.assertEqual(context.exception.size, 4)
        with self.assertRaises(IndexError):
            self.table.get_column(-1)

    def test_unknown_column_name(self):
        self.table.set_columns(_schema())
        with self.assertRaises(SchemaError):
            self.table.get_column_by_name("Missing")


class TestAddRow(unittest.TestCase):
    """Test row validation and default filling."""

    def setUp(self):
        self.table = Table()
        self.table.set_columns(_schema())

    def test_strings_are_converted(self):
        self.table.add_row({"Name": "Alice", "Age": "30", "Salary": "50000.50", "Active": "true"})
        self.assertEqual(self.table.get_value_object(0, "Age"), 30)
        self.assertEqual(self.table.get_value_object(0, "Salary"), 50000.5)
        self.assertIs(self.table.get_value_object(0, "Active"), True)

    def test_double_text_reads_back_verbatim(self):
        self.table.add_row({"Name": "Alice", "Age": "30", "Salary": "50000.50", "Active": "true"})
        self.assertEqual(self.table.get_value_at(0, "Salary"), "50000.50")
        self.assertEqual(self.table.get_value_at(0, "Age"), "30")

    def test_double_text_is_stored_stripped(self):
        self.table.add_row({"Name": "Alice", "Age": "30", "Salary": " 1.50 ", "Active": "true"})
        self.assertEqual(self.table.get_value_at(0, "Salary"), "1.50")

    def test_typed_values_are_validated(self):
        self.table.add_row({"Name": "Bob", "Age": 45, "Salary": 1.5, "Active": False})
        self.assertEqual(self.table.get_value_at(0, "Active"), "false")
        with self.assertRaises(ValidationError):
            self.table.add_row({"Name": "Bob", "Age": 4.5})

    def test_missing_columns_take_defaults(self):
        self.table.add_row({})
        self.assertEqual(self.table.get_value_at(0, "Name"), "")
        self.assertEqual(self.table.get_value_at(0, "Age"), "0")
        self.assertEqual(self.table.get_value_at(0, "Salary"), "0.0")
        self.assertEqual(self.table.get_value_at(0, "Active"), "false")

    def test_missing_column_rejected_in_strict_mode(self):
        strict = Table(create_default_value=False)
        strict.set_columns(_schema())
        with self.assertRaises(SchemaError):
            strict.add_row({"Name": "Alice", "Age": "30", "Salary": "1.0"})
        self.assertEqual(strict.get_row_count(), 0)

    def test_unknown_column_rejected(self):
        with self.assertRaises(SchemaError):
            self.table.add_row({"Name": "Alice", "Nickname": "Al"})

    def test_rejected_row_leaves_table_unchanged(self):
        self.table.add_row({"Name": "Alice", "Age": "30"})
        with self.assertRaises(ConversionError) as context:
            self.table.add_row({"Name": "Bob", "Age": "forty"})
        self.assertEqual(context.exception.column_name, "Age")
        self.assertEqual(self.table.get_row_count(), 1)
        self.assertEqual(self.table.get_value_at(0, "Name"), "Alice")

    def test_none_row_rejected(self):
        with self.assertRaises(SchemaError):
            self.table.add_row(None)

    def test_add_prebuilt_row(self):
        row = self.table.create_row()
        row.set_value(self.table.get_column_by_name("Name"), "Carol")
        row.set_from_string(self.table.get_column_by_name("Salary"), "10.10")
        self.table.add_row(row)
        self.assertEqual(self.table.get_value_at(0, "Name"), "Carol")
        self.assertEqual(self.table.get_value_at(0, "Salary"), "10.10")
        self.assertEqual(self.table.get_value_at(0, "Age"), "0")

    def test_prebuilt_row_with_foreign_column_rejected(self):
        row = Row()
        row.set_value(create_column("Age", "string"), "thirty")
        with self.assertRaises(ValidationError):
            self.table.add_row(row)
        self.assertEqual(len(self.table), 0)

    def test_row_does_not_share_state_with_source(self):
        row = Row()
        name = self.table.get_column_by_name("Name")
        row.set_value(name, "Dan")
        self.table.add_row(row)
        row.set_value(name, "Changed")
        self.assertEqual(self.table.get_value_at(0, "Name"), "Dan")


class TestValueAccess(unittest.TestCase):
    """Test indexed string and typed value access."""

    def setUp(self):
        self.table = Table()
        self.table.set_columns(_schema())
        self.table.add_row({"Name": "Alice", "Age": "30", "Salary": "1.5", "Active": "true"})

    def test_set_value_at_converts(self):
        self.table.set_value_at(0, "Age", "31")
        self.assertEqual(self.table.get_value_object(0, "Age"), 31)

    def test_set_value_at_rejects_bad_text(self):
        with self.assertRaises(ConversionError):
            self.table.set_value_at(0, "Age", "old")
        self.assertEqual(self.table.get_value_at(0, "Age"), "30")

    def test_set_value_at_empty_gives_null(self):
        self.table.set_value_at(0, "Salary", "")
        self.assertIsNone(self.table.get_value_object(0, "Salary"))
        self.assertEqual(self.table.get_value_at(0, "Salary"), "")

    def test_set_typed_value(self):
        self.table.set_value(0, "Active", False)
        self.assertEqual(self.table.get_value_at(0, "Active"), "false")
        with self.assertRaises(ValidationError):
            self.table.set_value(0, "Active", "no")

    def test_row_index_out_of_range(self):
        with self.assertRaises(TableIndexError):
            self.table.get_value_at(1, "Name")
        with self.assertRaises(TableIndexError):
            self.table.get_row(-1)

    def test_type_helpers(self):
        self.assertEqual(self.table.infer_type("3.14"), "double")
        self.assertEqual(self.table.get_default_value("int"), "0")


def test_builder_table(employee_table):
    assert employee_table.name == "employees"
    assert employee_table.get_row_count() == 3
    assert employee_table.get_value_at(0, "Salary") == "50000.50"
    assert employee_table.get_value_at(1, "Name") == "Bob, Jr."
    assert employee_table.get_value_object(2, "Age") == 28


def test_builder_rejects_bad_row():
    builder = TableBuilder().add_int_column("Age").add_row(Age="abc")
    with pytest.raises(ConversionError):
        builder.build()


def test_builder_strict_mode():
    builder = (TableBuilder()
               .set_create_default_value(False)
               .add_string_column("Name")
               .add_int_column("Age")
               .add_row({"Name": "Alice"}))
    with pytest.raises(SchemaError):
        builder.build()


def test_print_table_logs_grid(employee_table, caplog):
    with caplog.at_level(logging.INFO, logger="table_unify.core.table"):
        employee_table.print_table()
    assert "Alice" in caplog.text
    assert "Salary" in caplog.text
    lines = employee_table.format_table().splitlines()
    assert len(lines) == 5
