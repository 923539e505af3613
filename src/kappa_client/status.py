"""
HTTP status mapping.

Some endpoints signal "nothing here" through an error status rather than an
empty body. ``status_map`` turns selected statuses into plain values.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Mapping, TypeVar, Union

from .runtime.errors import HttpError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def status_map(mapping: Mapping[int, Any], func: Callable[[], T]) -> Union[T, Any]:
    """
    Call ``func`` and map selected HTTP error statuses to values.

    Example:
        ```python
        channel = status_map({404: None, 422: None}, lambda: channels_get("foo"))
        ```

    Args:
        mapping: HTTP status to the value returned in its place
        func: Callable issuing the request

    Returns:
        The result of ``func``, or the mapped value for a mapped status

    Raises:
        HttpError: If the status is not mapped
    """
    try:
        return func()
    except HttpError as e:
        if e.status in mapping:
            logger.debug(f"Mapped HTTP {e.status} from {e.request_url} to {mapping[e.status]!r}")
            return mapping[e.status]
        raise
