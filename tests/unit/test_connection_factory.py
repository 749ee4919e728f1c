"""
Tests for connection classification and creation.
"""

import unittest

from table_unify.config import DatabaseConfig, HttpConfig
from table_unify.datasource import (
    ConnectionKind,
    DbConnection,
    FileConnection,
    NoSQLConnection,
    RESTConnection,
    connection_kind_for,
    create_connection,
)
from table_unify.exceptions import DataSourceError


class TestConnectionKind(unittest.TestCase):
    """Test location classification order."""

    def test_database_locations(self):
        for location in ("jdbc:sqlserver://db;databaseName=sales", "odbc:DSN=sales",
                         "sqlite:sales.db", "Driver={SQLite3};Database=sales.db"):
            self.assertIs(connection_kind_for(location), ConnectionKind.DATABASE, location)

    def test_file_extension_wins_over_http(self):
        self.assertIs(connection_kind_for("https://example.com/api/export.csv"), ConnectionKind.FILE)
        self.assertIs(connection_kind_for("/tmp/people.json"), ConnectionKind.FILE)

    def test_http_locations(self):
        self.assertIs(connection_kind_for("https://example.com/api/users"), ConnectionKind.REST)
        self.assertIs(connection_kind_for("http://example.com/rest/items"), ConnectionKind.REST)
        self.assertIs(connection_kind_for("https://example.com/download"), ConnectionKind.FILE)

    def test_document_store(self):
        self.assertIs(connection_kind_for("mongodb+srv://cluster.example.com"), ConnectionKind.NOSQL)

    def test_unsupported(self):
        for location in (None, "", "ftp://example.com/x", "plain-name"):
            with self.assertRaises(DataSourceError):
                connection_kind_for(location)


class TestCreateConnection(unittest.TestCase):
    """Test connection construction."""

    def test_file_connection(self):
        connection = create_connection("data/people.csv")
        self.assertIsInstance(connection, FileConnection)
        self.assertEqual(connection.connection_type, "csv")
        self.assertFalse(connection.is_remote())
        self.assertFalse(connection.is_connected())

    def test_sqlite_location_uses_sqlite3(self):
        connection = create_connection("jdbc:sqlite:sales.db")
        self.assertIsInstance(connection, DbConnection)
        self.assertEqual(connection.driver_module, "sqlite3")
        self.assertFalse(connection.is_remote())

    def test_odbc_location_uses_pyodbc(self):
        connection = create_connection("DRIVER={ODBC Driver 17 for SQL Server};SERVER=db")
        self.assertEqual(connection.driver_module, "pyodbc")
        self.assertTrue(connection.is_remote())

    def test_database_config_supplies_credentials(self):
        config = DatabaseConfig("unused", username="loader", password="secret", driver_module="sqlite3")
        connection = create_connection("sqlite:sales.db", db_config=config)

        self.assertEqual(connection.location, "sqlite:sales.db")
        self.assertEqual(connection.config.username, "loader")
        self.assertEqual(config.connection_string, "unused")
        self.assertNotIn("secret", str(connection.properties))

    def test_rest_connection(self):
        http_config = HttpConfig(timeout=5.0)
        connection = create_connection("https://example.com/api/users", http_config=http_config)
        self.assertIsInstance(connection, RESTConnection)
        self.assertIs(connection.http_config, http_config)
        self.assertEqual(connection.properties, {
            "type": "rest", "location": "https://example.com/api/users", "remote": True,
        })

    def test_nosql_connection(self):
        connection = create_connection("mongodb://localhost:27017")
        self.assertIsInstance(connection, NoSQLConnection)
        self.assertEqual(connection.connection_type, "nosql")


if __name__ == '__main__':
    unittest.main()
