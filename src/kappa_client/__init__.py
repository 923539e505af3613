"""
Kappa Python Client

Client for the Kraken streaming platform REST API: authenticated requests,
typed domain objects and transparent pagination of list endpoints.
"""

from ._version import __version__
from .config import ClientConfig, DEFAULT_BASE_URL
from .connection import Connection, V2Connection, V5Connection
from .pagination import Paginator, PageRequest, PageSignal, MAX_PAGE_LIMIT
from .accumulation import Accumulator, AccumulationOptions, accumulate
from .status import status_map
from .client import Kappa
from .runtime.errors import *
from .v5 import *

__all__ = [
    "__version__",
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "Connection",
    "V2Connection",
    "V5Connection",
    "Paginator",
    "PageRequest",
    "PageSignal",
    "MAX_PAGE_LIMIT",
    "Accumulator",
    "AccumulationOptions",
    "accumulate",
    "status_map",
    "Kappa",

    # Errors
    "ErrorCode",
    "KappaError",
    "ArgumentError",
    "TransportError",
    "ResponseError",
    "HttpError",
    "ClientError",
    "ServerError",
    "FormatError",
    "ResponseFormatError",
    "DecodeError",

    # v5 resources
    "User",
    "Channel",
    "Subscription",
    "Stream",
    "Video",
    "Channels",
    "Users",
    "Streams",
    "Videos",
]
