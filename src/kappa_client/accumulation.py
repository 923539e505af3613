"""
Accumulation of paginated list endpoints into domain objects.

The accumulator drives the paginator, pulls the named array out of every
page, builds one domain object per element and delivers each distinct
object once, either into a list or through a callback.

Example:
    ```python
    options = AccumulationOptions(
        path="channels/44322889/follows",
        json="follows",
        sub_json="user",
        create=User,
        limit=20,
    )
    followers = Accumulator(connection).run(options)

    # Stream instead of materializing
    Accumulator(connection).run(options, on_item=lambda user: print(user.name))
    ```
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, TYPE_CHECKING

from pydantic import BaseModel

from .pagination import MAX_PAGE_LIMIT, PageRequest, PageSignal, Paginator
from .runtime.errors import ArgumentError, DecodeError

if TYPE_CHECKING:
    from .connection import Connection

logger = logging.getLogger(__name__)

Factory = Callable[[Any], Any]


@dataclass
class AccumulationOptions:
    """
    Options for one accumulation.

    ``path``, ``json`` and ``create`` are required. ``create`` is any
    single-argument callable building a domain object from one item's JSON;
    a model class is accepted as well.
    """

    path: Optional[str] = None
    json: Optional[str] = None
    create: Optional[Factory] = None
    sub_json: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    params: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        """
        Check the required options.

        Raises:
            ArgumentError: If a required option is missing or a bound is invalid
        """
        if self.json is None:
            raise ArgumentError("json")
        if self.path is None:
            raise ArgumentError("path")
        if self.create is None:
            raise ArgumentError("create")
        if self.limit is not None and self.limit < 1:
            raise ArgumentError("limit", f"Limit must be positive, got {self.limit}")

    @property
    def page_limit(self) -> int:
        return min(self.limit or MAX_PAGE_LIMIT, MAX_PAGE_LIMIT)


def resolve_factory(create: Any) -> Factory:
    """
    Turn ``create`` into a single-argument factory.

    Classes exposing ``from_json`` use it, other pydantic models are
    validated with ``model_validate``, anything else is called as is.
    """
    if isinstance(create, type):
        if hasattr(create, "from_json"):
            return create.from_json
        if issubclass(create, BaseModel):
            return create.model_validate
    return create


@dataclass
class _AccumulationState:
    seen: Set[Any] = field(default_factory=set)
    count: int = 0
    pages: int = 0


class Accumulator:
    """
    Drains a paginated list endpoint into distinct domain objects.

    Objects are identified by their ``id``; an id already delivered during the
    current run is skipped, which protects against items shifting across a
    page boundary while the list is being read.
    """

    def __init__(self, connection: Connection):
        self._paginator = Paginator(connection)

    def run(
        self,
        options: AccumulationOptions,
        on_item: Optional[Callable[[Any], None]] = None
    ) -> Optional[List[Any]]:
        """
        Accumulate the objects of a list endpoint.

        Args:
            options: What to fetch and how to build objects
            on_item: Optional callback receiving each object in page order

        Returns:
            List of objects if no callback was given, None otherwise

        Raises:
            ArgumentError: If options are incomplete, before any request
        """
        options.validate()
        create = resolve_factory(options.create)
        request = PageRequest(options.path, options.page_limit, options.offset or 0, options.params)

        objects: List[Any] = []
        deliver = on_item if on_item is not None else objects.append
        state = _AccumulationState()

        def on_page(page: Any) -> PageSignal:
            state.pages += 1
            items = _page_items(page, options.json)
            for item_json in items:
                if options.sub_json:
                    item_json = _unwrap(item_json, options.sub_json)
                obj = create(item_json)
                identity = obj.id
                if identity in state.seen:
                    logger.debug(f"Skipping duplicate {type(obj).__name__} {identity}")
                    continue
                state.seen.add(identity)
                state.count += 1
                deliver(obj)
                if options.limit is not None and state.count >= options.limit:
                    return PageSignal.STOP_AT_LIMIT

            if len(items) < request.limit:
                return PageSignal.LAST_PAGE
            return PageSignal.CONTINUE

        self._paginator.run(request, on_page)
        logger.debug(f"Accumulated {state.count} objects from {state.pages} pages of {options.path}")

        return None if on_item is not None else objects


def _page_items(page: Any, name: str) -> List[Any]:
    if not isinstance(page, Mapping):
        raise DecodeError("page", f"expected a JSON object, got {type(page).__name__}")
    items = page.get(name)
    if items is None:
        return []
    if not isinstance(items, list):
        raise DecodeError("page", f"field '{name}' is not an array")
    return items


def _unwrap(item_json: Any, name: str) -> Any:
    if not isinstance(item_json, Mapping) or name not in item_json:
        raise DecodeError("item", f"missing nested field '{name}'")
    return item_json[name]


def accumulate(
    connection: Connection,
    options: AccumulationOptions,
    on_item: Optional[Callable[[Any], None]] = None
) -> Optional[List[Any]]:
    """Shortcut for ``Accumulator(connection).run(options, on_item)``."""
    return Accumulator(connection).run(options, on_item)
