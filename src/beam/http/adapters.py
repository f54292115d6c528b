# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Deterministic transports for tests and offline use."""

from __future__ import annotations

import threading

from ..errors import TransportCancelled
from .client import CallHandle, Completion, Transport
from .models import TransportOutcome, TransportRequest


class StubTransport(Transport):
    """
    Programmable Transport answering from outcomes registered per URL.

    Calls complete inline unless `deferred=True`, in which case they wait for
    `release()` (or `cancel()` on their handle).
    """

    def __init__(self, outcomes: dict[str, TransportOutcome] | None = None, *, deferred: bool = False):
        self._outcomes = outcomes or {}
        self.deferred = deferred
        self.requests: list[TransportRequest] = []
        self._pending: list[tuple[TransportRequest, Completion, CallHandle]] = []
        self._lock = threading.Lock()
        self.closed = False

    def add(self, url: str, outcome: TransportOutcome) -> None:
        self._outcomes[url] = outcome

    def outcome_for(self, request: TransportRequest) -> TransportOutcome:
        if request.url in self._outcomes:
            return self._outcomes[request.url]
        return TransportOutcome(error=ConnectionError("No stubbed outcome configured"), url=request.url)

    def send(self, request: TransportRequest, completion: Completion) -> CallHandle:
        self.requests.append(request)
        handle = _StubHandle(self)
        if self.deferred:
            with self._lock:
                self._pending.append((request, completion, handle))
        else:
            self._complete(request, completion, handle, self.outcome_for(request))
        return handle

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def release(self) -> int:
        """Complete every held call; returns how many were delivered."""
        with self._lock:
            pending, self._pending = self._pending, []
        for request, completion, handle in pending:
            self._complete(request, completion, handle, self.outcome_for(request))
        return len(pending)

    def _cancel(self, handle: CallHandle) -> None:
        with self._lock:
            entry = next((item for item in self._pending if item[2] is handle), None)
            if entry is not None:
                self._pending.remove(entry)
        if entry is not None:
            request, completion, _ = entry
            self._complete(request, completion, handle, TransportOutcome(error=TransportCancelled(), url=request.url))

    @staticmethod
    def _complete(request: TransportRequest, completion: Completion, handle: CallHandle, outcome: TransportOutcome) -> None:
        handle.mark_done()
        completion(outcome)

    def close(self) -> None:
        self.closed = True


class _StubHandle(CallHandle):
    def __init__(self, transport: StubTransport) -> None:
        super().__init__()
        self._transport = transport

    def cancel(self) -> None:
        if self.done:
            return
        super().cancel()
        self._transport._cancel(self)
