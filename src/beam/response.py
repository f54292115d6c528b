# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Classified results of transport calls."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .errors import ErrorCategory, MissingStatusError, NoDataError, ParseError, categorize_exception
from .http.models import TransportOutcome
from .request import DataType, Request
from .status import Status, is_success


@dataclass(frozen=True)
class JSONPayload:
    """Parsed JSON body; exactly one of `value`/`error` is meaningful."""

    value: Any = None
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def parse(cls, data: bytes) -> JSONPayload:
        try:
            return cls(value=json.loads(data))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            error = ParseError(f"Invalid JSON body: {exc}")
            error.__cause__ = exc
            return cls(error=error)


@dataclass(frozen=True)
class Response:
    """Base class for the three response variants."""

    status: Status

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    @classmethod
    def from_outcome(cls, outcome: TransportOutcome, request: Request) -> Response:
        """Classify one transport outcome for the request that produced it."""
        status = Status.from_code(outcome.status_code)
        if outcome.status_code is None or status is Status.UNKNOWN:
            missing = MissingStatusError(outcome.status_code)
            if outcome.error is not None:
                missing.__cause__ = outcome.error
            return ErrorResponse(Status.UNKNOWN, missing)

        if not is_success(outcome.status_code):
            return ErrorResponse(status, outcome.error)

        if not outcome.content:
            return ErrorResponse(status, NoDataError(request))

        if request.data_type is DataType.DATA:
            return DataResponse(status, outcome.content)
        return JsonResponse(status, JSONPayload.parse(outcome.content))


@dataclass(frozen=True)
class JsonResponse(Response):
    json: JSONPayload

    @property
    def value(self) -> Any:
        return self.json.value


@dataclass(frozen=True)
class DataResponse(Response):
    data: bytes


@dataclass(frozen=True)
class ErrorResponse(Response):
    error: BaseException | None = None

    @property
    def category(self) -> ErrorCategory:
        if self.error is None:
            return ErrorCategory.NONE
        return categorize_exception(self.error)


__all__ = [
    "DataResponse",
    "ErrorResponse",
    "JSONPayload",
    "JsonResponse",
    "Response",
]
