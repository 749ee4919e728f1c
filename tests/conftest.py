"""Shared fixtures for table_unify tests."""

import pytest

from table_unify.core.table import Table, TableBuilder
from table_unify.models import MappingConfiguration


@pytest.fixture
def employee_table():
    """Name/Age/Salary table with three rows."""
    return (TableBuilder()
            .set_name("employees")
            .add_string_column("Name")
            .add_int_column("Age")
            .add_double_column("Salary")
            .add_boolean_column("Manager")
            .add_row(Name="Alice", Age="30", Salary="50000.50", Manager="true")
            .add_row(Name="Bob, Jr.", Age="45", Salary="72000.00", Manager="false")
            .add_row(Name='Carol "CJ" Jones', Age="28", Salary="61000.25", Manager="false")
            .build())


@pytest.fixture
def customer_records():
    """Source records as parsed from a JSON document."""
    return [
        {"id": 1, "name": "John Doe", "email": "john@example.com", "age": 30},
        {"id": 2, "name": "Jane Smith", "email": "jane@example.com", "age": 25},
        {"id": 3, "name": "Bob Johnson", "email": "bob@example.com", "age": 40},
    ]


@pytest.fixture
def customer_mapping():
    """Mapping onto id(int), name(string), email(string), age(int)."""
    return (MappingConfiguration.builder()
            .set_source_location("customers.json")
            .map_column("id", "id", "int")
            .map_column("name", "name", "string")
            .map_column("email", "email", "string")
            .map_column("age", "age", "int")
            .build())


@pytest.fixture
def empty_table():
    return Table("target")
