"""
Connection to an HTTP/REST endpoint backed by an httpx client.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..config.config_manager import HttpConfig
from ..exceptions import DataSourceConnectionError, DataSourceError, RESTError
from ..interfaces import DataSourceConnectionInterface


class RESTConnection(DataSourceConnectionInterface):
    """
    REST endpoint connection.

    connect() sends a HEAD request; any status below 400 counts as reachable,
    and so does 405 for endpoints that do not implement HEAD.

    Args:
        endpoint: Base URL of the resource
        auth_token: Optional bearer token sent with every request
        http_config: Timeout, redirect and header settings
        client: Optional pre-configured httpx.Client (the connection will not close it)
    """

    def __init__(self, endpoint: str, auth_token: Optional[str] = None,
                 http_config: Optional[HttpConfig] = None, client: Optional[httpx.Client] = None):
        if not endpoint or not endpoint.strip():
            raise DataSourceError("REST endpoint cannot be empty", endpoint)
        self.logger = logging.getLogger(__name__)
        self.endpoint = endpoint
        self.http_config = http_config or HttpConfig()
        self.headers: Dict[str, str] = dict(self.http_config.headers)
        if auth_token:
            self.headers["Authorization"] = f"Bearer {auth_token}"
        self._client = client
        self._owns_client = client is None
        self._connected = False

    @property
    def location(self) -> str:
        return self.endpoint

    @property
    def connection_type(self) -> str:
        return "rest"

    def is_remote(self) -> bool:
        return True

    def is_connected(self) -> bool:
        return self._connected

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                follow_redirects=self.http_config.follow_redirects,
                timeout=self.http_config.timeout
            )
            self._owns_client = True
        return self._client

    def connect(self) -> bool:
        if self._connected:
            return True
        try:
            response = self._get_client().head(self.endpoint, headers=self.headers)
        except httpx.HTTPError as e:
            self.logger.error(f"Error connecting to REST API {self.endpoint}: {e}")
            return False

        self._connected = response.status_code < 400 or response.status_code == 405
        if self._connected:
            self.logger.info(f"Connected to REST API {self.endpoint}")
        else:
            self.logger.error(f"REST API {self.endpoint} returned HTTP {response.status_code}")
        return self._connected

    def disconnect(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None
        self._connected = False

    def get_raw_connection(self) -> Any:
        """Return the httpx.Client used for requests."""
        return self._client

    def request(self, method: str = "GET", json_body: Any = None,
                params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """
        Send a request to the endpoint, connecting first if needed.

        Raises:
            DataSourceConnectionError: If the endpoint is unreachable
            RESTError: If the request fails or returns an error status
        """
        if not self.connect():
            raise DataSourceConnectionError(f"Failed to connect to {self.endpoint}", self.endpoint)

        try:
            response = self._get_client().request(
                method.upper(), self.endpoint, headers=self.headers, json=json_body, params=params
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RESTError(f"HTTP {e.response.status_code} from {self.endpoint}", self.endpoint,
                            status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise RESTError(f"Request to {self.endpoint} failed: {e}", self.endpoint) from e

        self.logger.debug(f"{method.upper()} {self.endpoint} -> {response.status_code}")
        return response
