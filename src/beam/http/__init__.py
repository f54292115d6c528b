# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport exports."""

from .adapters import StubTransport
from .client import CallHandle, Completion, Transport, create_default_transport
from .headers import fill_missing_headers, has_header
from .httpx_transport import HttpxTransport
from .models import TransportOutcome, TransportRequest
from .url import compose_url, parse_absolute_url, with_query

__all__ = [
    "CallHandle",
    "Completion",
    "HttpxTransport",
    "StubTransport",
    "Transport",
    "TransportOutcome",
    "TransportRequest",
    "compose_url",
    "create_default_transport",
    "fill_missing_headers",
    "has_header",
    "parse_absolute_url",
    "with_query",
]
