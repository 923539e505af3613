"""
Kappa HTTP Connection.

Issues authenticated GET requests against the Kraken REST API and maps
HTTP status and JSON parse failures into the Kappa error model.

The API version is negotiated through the ``Accept`` header, chosen by the
concrete connection class.

Example:
    ```python
    config = ClientConfig(client_id="abc123")
    with V5Connection(config) as conn:
        channel_json = conn.get("channels/44322889")

        # One-shot header override for the next request only
        conn.add_per_request_header({"Accept-Language": "de"}).get("streams/44322889")
    ```
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional
from urllib.parse import urljoin

import requests

from ._version import __version__
from .accumulation import AccumulationOptions, Accumulator
from .config import ClientConfig
from .pagination import PageHandler, Paginator
from .runtime.errors import ArgumentError, FormatError, TransportError, error_from_status

logger = logging.getLogger(__name__)


class Connection(ABC):
    """
    Base connection for the Kraken REST API.

    Holds the base URL, client id and optional OAuth token from the
    configuration, plus a set of per-request headers that is merged into the
    next request only and then discarded.

    A connection is not safe to share between threads: the per-request header
    state belongs to the instance. Use one connection per thread.
    """

    def __init__(
        self,
        config: ClientConfig,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the connection.

        Args:
            config: Client configuration (client id, auth token, timeout)
            base_url: Base URL overriding ``config.base_url``
            session: Optional requests.Session for connection pooling

        Raises:
            ArgumentError: If config, client id or base URL is missing
        """
        if config is None:
            raise ArgumentError("config")
        if not config.client_id:
            raise ArgumentError("client_id")
        if base_url is None:
            base_url = config.base_url
        if not base_url:
            raise ArgumentError("base_url")

        self._config = config
        self._client_id = config.client_id
        self._base_url = base_url
        self._per_request_headers: Dict[str, str] = {}
        self._session = session or requests.Session()
        self._owns_session = session is None

        # Raises the level of the package logger, shared by every connection in the process
        if config.debug:
            logging.getLogger("kappa_client").setLevel(logging.DEBUG)

    @property
    def base_url(self) -> str:
        """Get the API base URL."""
        return self._base_url

    @property
    def config(self) -> ClientConfig:
        """Get the client configuration."""
        return self._config

    def close(self) -> None:
        """Close the HTTP session if owned by this connection."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @abstractmethod
    def headers(self) -> Dict[str, str]:
        """Version negotiation headers for this API variant."""

    # =========================================================================
    # Requests
    # =========================================================================

    def get(self, path: str, query: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Issue a GET request and return the parsed JSON body.

        Pending per-request headers are merged into this request and cleared,
        whatever the outcome of the request.

        Args:
            path: Path relative to the base URL, may carry its own query string
            query: Additional query parameters

        Returns:
            Parsed JSON value

        Raises:
            ArgumentError: If path is empty
            TransportError: If the request could not be sent
            ClientError: On HTTP 4xx
            ServerError: On HTTP 5xx
            FormatError: If the body is not valid JSON
        """
        if not path:
            raise ArgumentError("path")

        request_url = urljoin(self._base_url, path)

        all_headers = {
            "Client-ID": self._client_id,
            "Kappa-Version": __version__,
            "User-Agent": self._config.user_agent,
        }
        all_headers.update(self.headers())

        if self._config.auth_token:
            all_headers["Authorization"] = f"OAuth {self._config.auth_token}"

        all_headers.update(self._per_request_headers)
        self._per_request_headers = {}

        logger.debug(f"GET {request_url} params={query}")

        try:
            response = self._session.get(
                request_url,
                headers=all_headers,
                params=query,
                timeout=self._config.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}", request_url, e) from e

        url = response.url
        status = response.status_code
        body = response.text

        error = error_from_status(status, url, body)
        if error is not None:
            logger.debug(f"GET {url} failed with status {status}")
            raise error

        try:
            return response.json()
        except requests.exceptions.JSONDecodeError as e:
            raise FormatError(e, url, status, body) from e

    def add_per_request_header(self, header: Mapping[str, str]) -> Connection:
        """
        Add headers to the next request only.

        Args:
            header: Header names and values to merge

        Returns:
            This connection, for chaining
        """
        self._per_request_headers = {**self._per_request_headers, **header}
        return self

    # =========================================================================
    # Pagination
    # =========================================================================

    def paginate(
        self,
        path: str,
        on_page: PageHandler,
        limit: int = 100,
        offset: int = 0,
        params: Optional[Mapping[str, Any]] = None
    ) -> int:
        """Page through a list endpoint. See :class:`kappa_client.pagination.Paginator`."""
        return Paginator(self).paginate(path, on_page, limit=limit, offset=offset, params=params)

    def accumulate(
        self,
        options: AccumulationOptions,
        on_item: Optional[Callable[[Any], None]] = None
    ) -> Optional[List[Any]]:
        """Drain a list endpoint into domain objects. See :class:`kappa_client.accumulation.Accumulator`."""
        return Accumulator(self).run(options, on_item)


class V2Connection(Connection):
    """Connection negotiating version 2 of the Kraken API."""

    def headers(self) -> Dict[str, str]:
        return {"Accept": "application/vnd.twitchtv.v2+json"}


class V5Connection(Connection):
    """Connection negotiating version 5 of the Kraken API."""

    def headers(self) -> Dict[str, str]:
        return {"Accept": "application/vnd.twitchtv.v5+json"}
