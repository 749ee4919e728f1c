"""
Integration tests for local and remote file connections.
"""

import httpx
import pytest

from table_unify.core.table import Table
from table_unify.datasource import FileConnection
from table_unify.exceptions import DataSourceConnectionError, DataSourceError
from table_unify.formats import CSVReader


def test_local_file(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b\n1,2\n", encoding="utf-8")
    connection = FileConnection(str(path))

    assert connection.connection_type == "csv"
    assert connection.connect()
    assert connection.get_raw_connection() == path
    assert connection.read_text() == "a,b\n1,2\n"
    connection.disconnect()
    assert not connection.is_connected()


def test_missing_local_file(tmp_path):
    connection = FileConnection(str(tmp_path / "absent.json"))
    assert connection.connect() is False
    with pytest.raises(DataSourceConnectionError):
        connection.read_bytes()


def test_write_target_needs_existing_directory(tmp_path):
    assert FileConnection(str(tmp_path / "new.xml"), for_write=True).connect()
    assert not FileConnection(str(tmp_path / "nope" / "new.xml"), for_write=True).connect()


def test_explicit_file_type(tmp_path):
    connection = FileConnection(str(tmp_path / "export.txt"), file_type="CSV")
    assert connection.connection_type == "csv"
    assert FileConnection(str(tmp_path / "README")).connection_type == "file"


def test_empty_location():
    with pytest.raises(DataSourceError):
        FileConnection("")


def test_remote_file_read_into_table():
    def handler(request):
        if request.url.path != "/exports/people.csv":
            return httpx.Response(404)
        if request.method == "HEAD":
            return httpx.Response(200)
        return httpx.Response(200, text="name,age\nAnn,31\n")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    connection = FileConnection("https://files.example.com/exports/people.csv?sig=1", client=client)

    assert connection.is_remote()
    assert connection.connection_type == "csv"

    target = Table()
    CSVReader().read_data(target, connection)
    assert target.get_value_object(0, "age") == 31
    assert connection.get_raw_connection() == "https://files.example.com/exports/people.csv?sig=1"


def test_remote_file_not_found():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    connection = FileConnection("https://files.example.com/missing.json", client=client)

    assert connection.connect() is False
    with pytest.raises(DataSourceConnectionError):
        connection.read_bytes()


def test_remote_file_is_read_only():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    connection = FileConnection("https://files.example.com/out.json", client=client)

    with pytest.raises(DataSourceConnectionError):
        connection.write_bytes(b"[]")
