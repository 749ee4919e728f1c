"""
Connection to a local file or a file served over HTTP.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from ..config.config_manager import HttpConfig
from ..exceptions import DataSourceConnectionError, DataSourceError
from ..interfaces import DataSourceConnectionInterface


def _file_type_of(location: str) -> str:
    suffix = Path(location.split("?", 1)[0]).suffix.lower().lstrip(".")
    return suffix or "file"


class FileConnection(DataSourceConnectionInterface):
    """
    Connection to a local path or an http(s) URL.

    A local connection succeeds when the file exists, or, with for_write=True,
    when its parent directory exists. A remote connection succeeds when a HEAD
    request answers with a status below 400.

    Args:
        location: Local path or http(s) URL
        file_type: Format name reported as connection_type; derived from the extension when omitted
        for_write: Allow connecting to a local file that does not exist yet
        http_config: HTTP settings for remote files
        client: Optional httpx.Client to use for remote files
    """

    def __init__(self, location: str, file_type: Optional[str] = None, for_write: bool = False,
                 http_config: Optional[HttpConfig] = None, client: Optional[httpx.Client] = None):
        if not location or not str(location).strip():
            raise DataSourceError("File location cannot be empty", location)
        self.logger = logging.getLogger(__name__)
        self._location = str(location)
        self._file_type = (file_type or _file_type_of(self._location)).lower()
        self._remote = self._location.lower().startswith(("http://", "https://"))
        self.for_write = for_write
        self.http_config = http_config or HttpConfig()
        self._client = client
        self._owns_client = False
        self._connected = False

    @property
    def location(self) -> str:
        return self._location

    @property
    def connection_type(self) -> str:
        return self._file_type

    @property
    def path(self) -> Path:
        return Path(self._location)

    def is_remote(self) -> bool:
        return self._remote

    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> bool:
        if self._connected:
            return True
        if self._remote:
            self._connected = self._check_remote()
        else:
            self._connected = self._check_local()
        if self._connected:
            self.logger.info(f"Connected to {self._file_type} file {self._location}")
        return self._connected

    def _check_local(self) -> bool:
        path = self.path
        if path.is_file():
            return True
        if self.for_write and not path.exists():
            parent = path.parent if str(path.parent) else Path(".")
            if parent.is_dir():
                return True
            self.logger.error(f"Parent directory does not exist: {parent}")
            return False
        self.logger.error(f"File not found: {self._location}")
        return False

    def _check_remote(self) -> bool:
        if self.for_write:
            self.logger.error(f"Cannot write to remote file {self._location}")
            return False
        try:
            response = self._get_client().head(self._location)
        except httpx.HTTPError as e:
            self.logger.error(f"Error connecting to file {self._location}: {e}")
            return False
        if response.status_code >= 400:
            self.logger.error(f"File {self._location} returned HTTP {response.status_code}")
            return False
        return True

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                follow_redirects=self.http_config.follow_redirects,
                timeout=self.http_config.timeout,
                headers=self.http_config.headers
            )
            self._owns_client = True
        return self._client

    def disconnect(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None
            self._owns_client = False
        self._connected = False

    def get_raw_connection(self) -> Any:
        """Return the URL string for remote files, otherwise the Path."""
        return self._location if self._remote else self.path

    def read_bytes(self) -> bytes:
        """
        Read the whole file, connecting first if needed.

        Raises:
            DataSourceConnectionError: If the file cannot be reached
            DataSourceError: If reading fails
        """
        if not self.connect():
            raise DataSourceConnectionError(f"Failed to connect to {self._location}", self._location)

        if not self._remote:
            try:
                return self.path.read_bytes()
            except OSError as e:
                raise DataSourceError(f"Error reading file {self._location}: {e}", self._location) from e

        try:
            response = self._get_client().get(self._location)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise DataSourceError(f"Error downloading {self._location}: {e}", self._location) from e
        return response.content

    def read_text(self, encoding: str = "utf-8") -> str:
        data = self.read_bytes()
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as e:
            raise DataSourceError(f"File {self._location} is not valid {encoding}: {e}", self._location) from e

    def open_for_write(self, encoding: str = "utf-8", newline: Optional[str] = None):
        """
        Open the local file for writing, connecting first if needed.

        Raises:
            DataSourceConnectionError: If the file is remote or its directory does not exist
        """
        self.for_write = True
        if not self.connect() or self._remote:
            raise DataSourceConnectionError(f"Cannot write to {self._location}", self._location)
        return open(self.path, "w", encoding=encoding, newline=newline)

    def write_bytes(self, data: bytes) -> None:
        """
        Replace the local file content.

        Raises:
            DataSourceConnectionError: If the file is remote or its directory does not exist
            DataSourceError: If writing fails
        """
        self.for_write = True
        if not self.connect() or self._remote:
            raise DataSourceConnectionError(f"Cannot write to {self._location}", self._location)
        try:
            self.path.write_bytes(data)
        except OSError as e:
            raise DataSourceError(f"Error writing file {self._location}: {e}", self._location) from e
