# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from .request import Request


class ServiceError(Exception):
    """Base class for failures raised or carried by the service layer."""


class BadInputError(ServiceError):
    """The request could not be turned into a valid transport call."""

    def __init__(self, request: Request, reason: str = "") -> None:
        self.request = request
        self.reason = reason
        message = f"Bad input for request {request.path!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NoDataError(ServiceError):
    """The transport call succeeded but returned no body."""

    def __init__(self, request: Request) -> None:
        self.request = request
        super().__init__(f"No data returned for request {request.path!r}")


class MissingStatusError(ServiceError):
    """The transport reported no (recognized) status code."""

    def __init__(self, status_code: int | None = None) -> None:
        self.status_code = status_code
        if status_code is None:
            super().__init__("Missing status code")
        else:
            super().__init__(f"Unrecognized status code {status_code}")


class ParseError(ServiceError):
    """A response body could not be decoded as JSON."""


class TransportCancelled(ServiceError):
    """The transport call was cancelled before a response was delivered."""

    def __init__(self, message: str = "Request cancelled") -> None:
        super().__init__(message)


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    CANCELLED = "CANCELLED"
    BAD_INPUT = "BAD_INPUT"
    NO_DATA = "NO_DATA"
    MISSING_STATUS = "MISSING_STATUS"
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


_SERVICE_ERROR_CATEGORIES: dict[type[ServiceError], ErrorCategory] = {
    BadInputError: ErrorCategory.BAD_INPUT,
    NoDataError: ErrorCategory.NO_DATA,
    ParseError: ErrorCategory.PARSE_ERROR,
    TransportCancelled: ErrorCategory.CANCELLED,
}


def categorize_exception(exc: BaseException | None) -> ErrorCategory:
    """
    Map service errors and Python/httpx exceptions to ErrorCategory.

    A MissingStatusError is categorized by its cause when the transport supplied one.
    """
    if exc is None:
        return ErrorCategory.NONE

    if isinstance(exc, MissingStatusError):
        cause: Any = exc.__cause__
        if cause is not None:
            return categorize_exception(cause)
        return ErrorCategory.MISSING_STATUS

    for error_type, category in _SERVICE_ERROR_CATEGORIES.items():
        if isinstance(exc, error_type):
            return category

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        context = exc.__context__ or exc.__cause__
        if context is not None and context is not exc:
            nested = categorize_exception(context)
            if nested in {ErrorCategory.SSL_ERROR, ErrorCategory.DNS_ERROR}:
                return nested
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.CANCELLED: "Request cancelled",
        ErrorCategory.BAD_INPUT: "Request could not be built",
        ErrorCategory.NO_DATA: "Response carried no data",
        ErrorCategory.MISSING_STATUS: "Response carried no status code",
        ErrorCategory.PARSE_ERROR: "Response body is not valid JSON",
        ErrorCategory.UNKNOWN_ERROR: "Request failed",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed")


__all__ = [
    "BadInputError",
    "ErrorCategory",
    "MissingStatusError",
    "NoDataError",
    "ParseError",
    "ServiceError",
    "TransportCancelled",
    "categorize_exception",
    "error_category_to_reason",
]
