"""
Kappa Error Model

This module provides the error taxonomy for the Kappa client: argument
validation failures raised before any I/O, HTTP status failures, response
format failures and domain decode failures.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Kappa error codes."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INVALID_ARGUMENT = 2

    # Transport errors (100-199)
    TRANSPORT_ERROR = 100

    # HTTP errors (200-299)
    HTTP_CLIENT_ERROR = 200
    HTTP_SERVER_ERROR = 201

    # Encoding errors (300-399)
    INVALID_JSON = 300
    DECODE_ERROR = 301


class KappaError(Exception):
    """
    Base class for all Kappa errors.

    Provides structured error information: a message, an error code,
    free-form details and the underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a Kappa error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ArgumentError(KappaError, ValueError):
    """Missing or invalid call parameters, detected before any I/O."""

    def __init__(self, argument: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid argument: {argument}", ErrorCode.INVALID_ARGUMENT,
                         {"argument": argument})
        self.argument = argument


class TransportError(KappaError):
    """The HTTP transport failed before a response was received."""

    def __init__(self, message: str, request_url: str, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.TRANSPORT_ERROR, {"request_url": request_url}, cause)
        self.request_url = request_url


class ResponseError(KappaError):
    """
    Base class for errors raised from a received response.

    Carries the request URL, HTTP status and raw body so the failure can be
    diagnosed without re-issuing the request.
    """

    def __init__(self, message: str, request_url: str, status: Optional[int], body: Optional[str],
                 code: ErrorCode = ErrorCode.UNKNOWN, cause: Optional[Exception] = None):
        super().__init__(message, code, {"request_url": request_url, "status": status}, cause)
        self.request_url = request_url
        self.status = status
        self.body = body

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation, including the raw body."""
        result = super().to_dict()
        result["body"] = self.body
        return result


class HttpError(ResponseError):
    """The server answered with an HTTP error status."""


class ClientError(HttpError):
    """HTTP 4xx response."""

    def __init__(self, message: str, request_url: str, status: int, body: Optional[str]):
        super().__init__(message, request_url, status, body, ErrorCode.HTTP_CLIENT_ERROR)


class ServerError(HttpError):
    """HTTP 5xx response."""

    def __init__(self, message: str, request_url: str, status: int, body: Optional[str]):
        super().__init__(message, request_url, status, body, ErrorCode.HTTP_SERVER_ERROR)


class FormatError(ResponseError):
    """The response body is not valid JSON."""

    def __init__(self, cause: Exception, request_url: str, status: Optional[int], body: Optional[str]):
        super().__init__(f"Response is not valid JSON: {cause}", request_url, status, body,
                         ErrorCode.INVALID_JSON, cause)


ResponseFormatError = FormatError


class DecodeError(KappaError):
    """JSON was parsed but does not match the expected domain schema."""

    def __init__(self, model: str, message: str, cause: Optional[Exception] = None):
        super().__init__(f"Cannot decode {model}: {message}", ErrorCode.DECODE_ERROR,
                         {"model": model}, cause)
        self.model = model


def error_from_status(status: int, request_url: str, body: Optional[str]) -> Optional[HttpError]:
    """
    Create the appropriate HTTP error for a response status.

    Args:
        status: HTTP status code
        request_url: URL that produced the response
        body: Raw response body

    Returns:
        ClientError for 4xx, ServerError for 5xx, None otherwise
    """
    if 400 <= status < 500:
        return ClientError(f"HTTP client error, status {status}.", request_url, status, body)
    if 500 <= status < 600:
        return ServerError(f"HTTP server error, status {status}.", request_url, status, body)
    return None


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
