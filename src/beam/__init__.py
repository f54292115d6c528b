# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Beam package entrypoint.

Beam is a small HTTP client layer for application code. Calls are described as
`Request` values, executed by a `Service` bound to an `Environment`, and
delivered to a callback as one of three `Response` variants. The transport is
injectable; the default one runs httpx on a worker pool.
"""

from .auth import Authentication, BasicAuth, BearerAuth, CustomAuth, NoAuth
from .config import HttpSettings, load_http_settings
from .environment import CachePolicy, ClientIdentity, Environment, default_headers
from .errors import (
    BadInputError,
    ErrorCategory,
    MissingStatusError,
    NoDataError,
    ParseError,
    ServiceError,
    TransportCancelled,
)
from .http import HttpxTransport, StubTransport, Transport, TransportOutcome, TransportRequest
from .log import setup_logging
from .request import BodyParameters, DataType, HTTPMethod, Parameters, Request, UrlParameters
from .response import DataResponse, ErrorResponse, JSONPayload, JsonResponse, Response
from .service import DefaultService, Service, ServiceCallback, build_transport_request
from .status import Status, is_success
from .task import Task
from .token import Cancellable, Token
from .version import __version__

__all__ = [
    "Authentication",
    "BadInputError",
    "BasicAuth",
    "BearerAuth",
    "BodyParameters",
    "CachePolicy",
    "Cancellable",
    "ClientIdentity",
    "CustomAuth",
    "DataResponse",
    "DataType",
    "DefaultService",
    "Environment",
    "ErrorCategory",
    "ErrorResponse",
    "HTTPMethod",
    "HttpSettings",
    "HttpxTransport",
    "JSONPayload",
    "JsonResponse",
    "MissingStatusError",
    "NoAuth",
    "NoDataError",
    "Parameters",
    "ParseError",
    "Request",
    "Response",
    "Service",
    "ServiceCallback",
    "ServiceError",
    "Status",
    "StubTransport",
    "Task",
    "Token",
    "Transport",
    "TransportCancelled",
    "TransportOutcome",
    "TransportRequest",
    "UrlParameters",
    "build_transport_request",
    "default_headers",
    "is_success",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
