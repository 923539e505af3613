"""
Offset/limit pagination over Kraken list endpoints.

List endpoints are paged with ``limit`` and ``offset`` query parameters.
The paginator fetches pages strictly in sequence, because each page decides
whether another fetch is needed, and hands every page to a handler.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, TYPE_CHECKING
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .runtime.errors import ArgumentError

if TYPE_CHECKING:
    from .connection import Connection

logger = logging.getLogger(__name__)

MAX_PAGE_LIMIT = 100


class PageSignal(Enum):
    """Returned by a page handler to tell the paginator whether to go on."""

    CONTINUE = "continue"
    LAST_PAGE = "last_page"
    STOP_AT_LIMIT = "stop_at_limit"


PageHandler = Callable[[Any], Optional[PageSignal]]


def with_page_query(path: str, limit: int, offset: int) -> str:
    """
    Merge ``limit`` and ``offset`` into the query string of a path.

    Query parameters already present on the path are preserved.
    """
    parts = urlsplit(path)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query.update({"limit": str(limit), "offset": str(offset)})
    return urlunsplit(parts._replace(query=urlencode(query)))


@dataclass
class PageRequest:
    """
    A request for one slice of a list endpoint.

    The limit is capped at ``MAX_PAGE_LIMIT`` whatever the caller asks for.
    """

    path: str
    limit: int = MAX_PAGE_LIMIT
    offset: int = 0
    params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.path:
            raise ArgumentError("path")
        if self.limit is None or self.limit < 1:
            raise ArgumentError("limit", f"Page limit must be positive, got {self.limit}")
        if self.offset is None or self.offset < 0:
            raise ArgumentError("offset", f"Offset must not be negative, got {self.offset}")
        self.limit = min(self.limit, MAX_PAGE_LIMIT)
        self.params = dict(self.params or {})

    def url_at(self, offset: int) -> str:
        """Path with the page query for the given offset."""
        return with_page_query(self.path, self.limit, offset)


def is_unavailable(page: Any) -> bool:
    """True if the page is an embedded 503 error body."""
    return isinstance(page, Mapping) and bool(page.get("error")) and page.get("status") == 503


class Paginator:
    """
    Sequential offset paginator.

    After each yielded page, pagination stops when:

    - the handler returns anything other than ``PageSignal.CONTINUE`` (or None),
    - the page declares ``_total`` and the next offset would exceed it.

    A fetched page that is an embedded 503 error (``error`` set and
    ``status == 503``) ends pagination without being yielded.
    """

    def __init__(self, connection: Connection):
        self._connection = connection

    def paginate(
        self,
        path: str,
        on_page: PageHandler,
        limit: int = MAX_PAGE_LIMIT,
        offset: int = 0,
        params: Optional[Mapping[str, Any]] = None
    ) -> int:
        """
        Fetch pages of a list endpoint and pass each one to ``on_page``.

        Args:
            path: Endpoint path, may carry its own query string
            on_page: Handler called with each page's JSON, returns a PageSignal
            limit: Page size, capped at 100
            offset: Offset of the first page
            params: Extra query parameters sent with every page

        Returns:
            Number of pages handed to ``on_page``

        Raises:
            ArgumentError: If path, limit or offset is invalid
        """
        request = PageRequest(path, limit, offset, dict(params or {}))
        return self.run(request, on_page)

    def run(self, request: PageRequest, on_page: PageHandler) -> int:
        """Paginate a prepared :class:`PageRequest`. See :meth:`paginate`."""
        used_offset = request.offset
        page = self._fetch(request, used_offset)
        pages = 0

        while True:
            if is_unavailable(page):
                logger.debug(f"Page at offset {used_offset} of {request.path} is unavailable (503), stopping")
                break

            pages += 1
            signal = on_page(page)
            if signal is not None and signal is not PageSignal.CONTINUE:
                logger.debug(f"Handler stopped pagination of {request.path} at offset {used_offset}: {signal!r}")
                break

            next_offset = used_offset + request.limit
            total = page.get("_total") if isinstance(page, Mapping) else None
            if total is not None and next_offset > total:
                logger.debug(f"Next offset {next_offset} exceeds total {total} for {request.path}")
                break

            page = self._fetch(request, next_offset)
            used_offset = next_offset

        return pages

    def _fetch(self, request: PageRequest, offset: int) -> Any:
        logger.debug(f"Fetching {request.path} limit={request.limit} offset={offset}")
        return self._connection.get(request.url_at(offset), request.params or None)
