# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction and factory."""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import Protocol

from ..config import HttpSettings, load_http_settings
from ..token import Cancellable
from .models import TransportOutcome, TransportRequest

Completion = Callable[[TransportOutcome], None]


class Transport(Protocol):
    """Issues one HTTP call asynchronously and reports its outcome exactly once."""

    def send(self, request: TransportRequest, completion: Completion) -> Cancellable: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


class CallHandle:
    """Cancellable state for one transport call; owned by the transport."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()
        self._done = threading.Event()
        self._future: Future | None = None

    def attach(self, future: Future) -> None:
        self._future = future

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def mark_done(self) -> None:
        self._done.set()

    def cancel(self) -> None:
        if self.done:
            return
        self._cancelled.set()
        if self._future is not None:
            self._future.cancel()


def create_default_transport(settings: HttpSettings | None = None) -> Transport:
    """Factory for the default httpx-backed transport."""
    from .httpx_transport import HttpxTransport

    return HttpxTransport(settings or load_http_settings())
