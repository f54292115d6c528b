# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Authentication schemes.

Every scheme serializes to exactly one `Authorization` header value and can be
parsed back from one. Two schemes are equal when their serialized values are.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

BASIC_PREFIX = "Basic "
BEARER_PREFIX = "Bearer "


class Authentication:
    """Base class for the authentication variants."""

    def serialize(self) -> str:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    @property
    def is_none(self) -> bool:
        return not self.serialize()

    @classmethod
    def parse(cls, raw: str | None) -> Authentication:
        """
        Parse an `Authorization` header value.

        A `Basic` payload that does not decode to `user:password` yields NoAuth.
        """
        value = raw or ""
        if value.startswith(BASIC_PREFIX):
            encoded = value[len(BASIC_PREFIX):]
            try:
                decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError, ValueError):
                return NoAuth()
            user, sep, password = decoded.partition(":")
            if not sep:
                return NoAuth()
            return BasicAuth(user=user, password=password)
        if value.startswith(BEARER_PREFIX):
            return BearerAuth(token=value[len(BEARER_PREFIX):])
        if value:
            return CustomAuth(value=value)
        return NoAuth()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Authentication):
            return NotImplemented
        return self.serialize() == other.serialize()

    def __hash__(self) -> int:
        return hash(self.serialize())

    def __str__(self) -> str:
        return self.serialize()


@dataclass(frozen=True, eq=False)
class NoAuth(Authentication):
    def serialize(self) -> str:
        return ""

    def describe(self) -> str:
        return "No authorization"


@dataclass(frozen=True, eq=False)
class BasicAuth(Authentication):
    user: str
    password: str

    def serialize(self) -> str:
        credentials = f"{self.user}:{self.password}".encode("utf-8")
        return BASIC_PREFIX + base64.b64encode(credentials).decode("ascii")

    def describe(self) -> str:
        return f"Standard - user={self.user}"


@dataclass(frozen=True, eq=False)
class BearerAuth(Authentication):
    token: str

    def serialize(self) -> str:
        return BEARER_PREFIX + self.token

    def describe(self) -> str:
        return f"Bearer - token={self.token}"


@dataclass(frozen=True, eq=False)
class CustomAuth(Authentication):
    value: str

    def serialize(self) -> str:
        return self.value

    def describe(self) -> str:
        return f"Custom - value={self.value}"


__all__ = [
    "Authentication",
    "BasicAuth",
    "BearerAuth",
    "CustomAuth",
    "NoAuth",
]
