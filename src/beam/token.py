# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cancellation handles for in-flight transport calls."""

from __future__ import annotations

from typing import Protocol


class Cancellable(Protocol):
    """Handle owned by the transport for one call."""

    @property
    def done(self) -> bool: ...

    def cancel(self) -> None: ...


class Token:
    """
    Caller-side handle for one in-flight call.

    The token only reads the transport's handle; once the call has completed or
    been cancelled, `cancel()` does nothing.
    """

    def __init__(self, handle: Cancellable):
        self._handle = handle

    @property
    def active(self) -> bool:
        return not self._handle.done

    def cancel(self) -> None:
        if self._handle.done:
            return
        self._handle.cancel()

    def __repr__(self) -> str:
        state = "active" if self.active else "inert"
        return f"<Token {state}>"


__all__ = ["Cancellable", "Token"]
