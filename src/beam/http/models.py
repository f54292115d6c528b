# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport-level request/outcome data models."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..environment import Headers


@dataclass
class TransportRequest:
    """Fully resolved call handed to a Transport implementation."""

    url: str
    method: str = "GET"
    headers: Headers = field(default_factory=dict)
    body: bytes | None = None
    timeout: float | None = None


@dataclass
class TransportOutcome:
    """
    What the transport observed for one call.

    `status_code` is None when no response was received at all; `error` carries the
    transport's own exception unmodified.
    """

    status_code: int | None = None
    content: bytes | None = None
    error: BaseException | None = None
    headers: Headers = field(default_factory=dict)
    url: str | None = None
