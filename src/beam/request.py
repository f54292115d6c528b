# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request contract: one API call described as a value."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .auth import Authentication, NoAuth
from .environment import Headers

if TYPE_CHECKING:
    from .environment import Environment

DEFAULT_TIMEOUT_INTERVAL = 10.0


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class DataType(str, Enum):
    """Shape the caller expects the response body in."""

    JSON = "JSON"
    DATA = "DATA"


@dataclass(frozen=True)
class Parameters:
    """Key/value pairs sent with a request; subclasses pick where they go."""

    values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BodyParameters(Parameters):
    """Serialized into the request body as a JSON object."""


@dataclass(frozen=True)
class UrlParameters(Parameters):
    """Appended to the URL as query parameters."""


@dataclass(frozen=True)
class Request:
    """
    Description of one API call.

    Use directly or subclass per endpoint, overriding field defaults:

        @dataclass(frozen=True)
        class ListUsers(Request):
            path: str = "users"
            version: str | None = "v1"
    """

    path: str
    method: HTTPMethod = HTTPMethod.GET
    version: str | None = None
    data_type: DataType = DataType.JSON
    parameters: Parameters | None = None
    authentication: Authentication = field(default_factory=NoAuth)
    headers: Headers | None = None
    timeout_interval: float = DEFAULT_TIMEOUT_INTERVAL

    def all_headers(self, environment: Environment | None = None) -> Headers:
        """Environment defaults overlaid with this request's headers."""
        merged: Headers = dict(environment.headers) if environment is not None else {}
        for key, value in (self.headers or {}).items():
            merged[key] = value
        return merged

    def describe(self, environment: Environment | None = None) -> str:
        """Multi-line summary for logs."""
        parameters = "none"
        if self.parameters is not None:
            parameters = f"{type(self.parameters).__name__}({dict(self.parameters.values)!r})"
        return "\n".join(
            [
                f"Headers = {self.all_headers(environment)!r}",
                f"Method = {self.method.value}",
                f"Data Type = {self.data_type.value}",
                f"Path = {self.path}",
                f"Parameters = {parameters}",
                f"Authorization = {self.authentication.serialize() or 'none'} ({self.authentication.describe()})",
            ]
        )

    def __str__(self) -> str:
        return self.describe()


__all__ = [
    "BodyParameters",
    "DataType",
    "HTTPMethod",
    "Parameters",
    "Request",
    "UrlParameters",
]
