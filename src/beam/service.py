# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Service layer: turns Requests into transport calls and outcomes into Responses."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from .config import HttpSettings, load_http_settings
from .environment import Environment
from .errors import BadInputError
from .http.client import Transport, create_default_transport
from .http.headers import fill_missing_headers
from .http.models import TransportOutcome, TransportRequest
from .http.url import compose_url, parse_absolute_url, with_query
from .request import BodyParameters, Request, UrlParameters
from .response import ErrorResponse, Response
from .status import Status
from .token import Token

logger = logging.getLogger(__name__)

ServiceCallback = Callable[[Response], None]

SCALAR_TYPES = (str, int, float, bool)


class Service(Protocol):
    environment: Environment

    def execute(self, request: Request, callback: ServiceCallback) -> Token | None: ...


def _scalar_values(request: Request, values: Mapping[str, Any]) -> dict[str, Any]:
    checked: dict[str, Any] = {}
    for key, value in values.items():
        if not isinstance(key, str):
            raise BadInputError(request, f"parameter name {key!r} is not a string")
        if not isinstance(value, SCALAR_TYPES):
            raise BadInputError(request, f"parameter {key!r} has unsupported type {type(value).__name__}")
        checked[key] = value
    return checked


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_transport_request(environment: Environment, request: Request) -> TransportRequest:
    """
    Resolve URL, parameters, headers and timeout for one request.

    Raises BadInputError when the URL does not parse or a parameter value is not a scalar.
    """
    raw_url = compose_url(environment.base_url, request.path, request.version)
    try:
        url = parse_absolute_url(raw_url)
    except ValueError as exc:
        raise BadInputError(request, str(exc)) from exc

    body: bytes | None = None
    parameters = request.parameters
    if isinstance(parameters, BodyParameters):
        values = _scalar_values(request, parameters.values)
        try:
            body = json.dumps(values, allow_nan=False).encode("utf-8")
        except ValueError as exc:
            raise BadInputError(request, str(exc)) from exc
    elif isinstance(parameters, UrlParameters):
        values = _scalar_values(request, parameters.values)
        url = with_query(url, {key: _query_value(value) for key, value in values.items()})
    elif parameters is not None:
        raise BadInputError(request, f"unsupported parameters type {type(parameters).__name__}")

    headers = request.all_headers(environment)
    fill_missing_headers(headers, environment.cache_policy.headers())
    fill_missing_headers(headers, {"Authorization": request.authentication.serialize()})

    return TransportRequest(
        url=str(url),
        method=request.method.value,
        headers=headers,
        body=body,
        timeout=request.timeout_interval,
    )


class DefaultService(Service):
    """Service backed by a Transport (httpx by default)."""

    def __init__(
        self,
        environment: Environment,
        transport: Transport | None = None,
        settings: HttpSettings | None = None,
    ):
        self.environment = environment
        self.settings = settings or load_http_settings()
        self.transport = transport or create_default_transport(self.settings)

    def prepare(self, request: Request) -> TransportRequest:
        return build_transport_request(self.environment, request)

    def execute(self, request: Request, callback: ServiceCallback) -> Token | None:
        """
        Dispatch `request` and deliver exactly one Response to `callback`.

        When the request cannot be built, the callback fires before this method
        returns and None is returned instead of a Token.
        """
        try:
            transport_request = self.prepare(request)
        except BadInputError as exc:
            logger.warning("[%s] Could not build request: %s", self.environment.name, exc)
            self._invoke(callback, ErrorResponse(Status.UNKNOWN, exc), request)
            return None

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("[%s] %s %s\n%s", self.environment.name, transport_request.method, transport_request.url, request.describe(self.environment))

        def completion(outcome: TransportOutcome) -> None:
            response = Response.from_outcome(outcome, request)
            if isinstance(response, ErrorResponse):
                logger.info(
                    "[%s] %s %s failed with status %s (%s)",
                    self.environment.name,
                    transport_request.method,
                    transport_request.url,
                    response.status.code,
                    response.category.value,
                )
            self._invoke(callback, response, request)

        try:
            handle = self.transport.send(transport_request, completion)
        except Exception as exc:  # noqa: BLE001
            logger.warning("[%s] Transport refused %s %s: %s", self.environment.name, transport_request.method, transport_request.url, exc)
            self._invoke(callback, ErrorResponse(Status.UNKNOWN, exc), request)
            return None
        return Token(handle)

    @staticmethod
    def _invoke(callback: ServiceCallback, response: Response, request: Request) -> None:
        try:
            callback(response)
        except Exception:  # noqa: BLE001
            logger.exception("Callback for request %r raised", request.path)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> DefaultService:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["DefaultService", "Service", "ServiceCallback", "build_transport_request"]
