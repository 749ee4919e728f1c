"""
Tests for type inference, string conversion and canonical defaults.
"""

from datetime import date, datetime

import pytest

from table_unify.core.type_system import (
    convert_from_string,
    default_value_for,
    format_value,
    infer_type,
    is_instance_of,
)
from table_unify.exceptions import ConversionError, SchemaError, ValidationError
from table_unify.models import DataType


@pytest.mark.parametrize("value,expected", [
    ("123", "int"),
    ("-42", "int"),
    ("123.45", "double"),
    (".5", "double"),
    ("-0.25", "double"),
    ("true", "boolean"),
    ("FALSE", "boolean"),
    ("hello", "string"),
    ("12a", "string"),
    ("1.", "string"),
    ("", "string"),
    (None, "string"),
])
def test_infer_type(value, expected):
    assert infer_type(value) == expected


def test_integer_text_is_never_double():
    assert infer_type("007") == "int"


class TestConvertFromString:

    def test_parses_each_core_type(self):
        assert convert_from_string("30", "int") == 30
        assert convert_from_string("50000.50", "double") == 50000.5
        assert convert_from_string("True", "boolean") is True
        assert convert_from_string("text", "string") == "text"

    def test_null_and_empty_map_to_none_for_non_string_types(self):
        for type_name in ("int", "double", "boolean", "date"):
            assert convert_from_string(None, type_name) is None
            assert convert_from_string("", type_name) is None

    def test_string_type_is_identity(self):
        assert convert_from_string("", "string") == ""
        assert convert_from_string(None, "string") is None
        assert convert_from_string("  padded ", DataType.STRING) == "  padded "

    @pytest.mark.parametrize("value,type_name", [
        ("abc", "int"),
        ("1.5", "int"),
        ("abc", "double"),
        ("nan", "double"),
        ("yes", "boolean"),
        ("2024-13-45", "date"),
    ])
    def test_lexical_mismatch_raises_conversion_error(self, value, type_name):
        with pytest.raises(ConversionError) as exc_info:
            convert_from_string(value, type_name)
        assert exc_info.value.value == value
        assert exc_info.value.target_type == DataType.from_name(type_name).value

    def test_conversion_error_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            convert_from_string("x", "int")

    def test_date_types_use_iso_format(self):
        assert convert_from_string("2024-03-01", "date") == date(2024, 3, 1)
        assert convert_from_string("2024-03-01T10:15:00", "datetime") == datetime(2024, 3, 1, 10, 15)

    def test_unknown_type_raises_schema_error(self):
        with pytest.raises(SchemaError):
            convert_from_string("1", "decimal")


def test_default_values_are_exact_literals():
    assert default_value_for("string") == ""
    assert default_value_for("int") == "0"
    assert default_value_for("double") == "0.0"
    assert default_value_for("boolean") == "false"


def test_date_default_is_parseable():
    assert isinstance(convert_from_string(default_value_for("date"), "date"), date)
    assert isinstance(convert_from_string(default_value_for("datetime"), "datetime"), datetime)


def test_type_aliases():
    assert DataType.from_name("integer") is DataType.INT
    assert DataType.from_name("Float") is DataType.DOUBLE
    assert DataType.from_name("bool") is DataType.BOOLEAN
    with pytest.raises(SchemaError):
        DataType.from_name("  ")


def test_bool_is_not_an_int_and_datetime_is_not_a_date():
    assert is_instance_of(5, "int")
    assert not is_instance_of(True, "int")
    assert is_instance_of(date(2024, 1, 1), "date")
    assert not is_instance_of(datetime(2024, 1, 1), "date")


def test_format_value():
    assert format_value(None) == ""
    assert format_value(False) == "false"
    assert format_value(2.5) == "2.5"
    assert format_value(date(2024, 1, 2)) == "2024-01-02"
