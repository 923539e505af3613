"""Runtime helpers for the Kappa client"""

from .errors import (
    ErrorCode,
    KappaError,
    ArgumentError,
    TransportError,
    ResponseError,
    HttpError,
    ClientError,
    ServerError,
    FormatError,
    ResponseFormatError,
    DecodeError,
    error_from_status,
)

__all__ = [
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
    "error_from_status",
]
