# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Deployment targets and the default headers sent to them.

Default headers are derived from a ClientIdentity computed once at startup and
passed into each Environment, so the values never change under a running service.
"""

from __future__ import annotations

import os
import platform
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from .config import load_http_settings
from .version import __version__

Headers = dict[str, str]

DEFAULT_ACCEPT_ENCODING = "gzip;q=1.0, compress;q=0.5"
DEFAULT_CONTENT_TYPE = "application/json"
MAX_PREFERRED_LANGUAGES = 6


def _preferred_languages_from_env() -> tuple[str, ...]:
    raw = os.getenv("BEAM_LANGUAGES") or os.getenv("LANGUAGE") or ""
    if raw:
        separator = "," if "," in raw else ":"
        candidates = [item.strip() for item in raw.split(separator)]
    else:
        candidates = [os.getenv("LC_ALL") or os.getenv("LANG") or ""]

    languages: list[str] = []
    for candidate in candidates:
        # en_US.UTF-8 -> en-US
        code = candidate.split(".", 1)[0].split("@", 1)[0].replace("_", "-")
        if not code or code in {"C", "POSIX"} or code in languages:
            continue
        languages.append(code)
    return tuple(languages) or ("en",)


@dataclass(frozen=True)
class ClientIdentity:
    """Application and platform metadata used to build default headers."""

    app_name: str = "Beam"
    bundle_id: str = "Unknown"
    app_version: str = __version__
    build: str = "Unknown"
    os_name: str = "Unknown"
    os_release: str = "Unknown"
    preferred_languages: tuple[str, ...] = ("en",)
    user_agent_override: str | None = None

    @classmethod
    def from_runtime(cls, user_agent: str | None = None) -> ClientIdentity:
        """Collect identity once from the process environment."""
        argv0 = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else ""
        return cls(
            app_name=os.getenv("BEAM_APP_NAME") or argv0 or cls.app_name,
            bundle_id=os.getenv("BEAM_BUNDLE_ID") or cls.bundle_id,
            app_version=os.getenv("BEAM_APP_VERSION") or cls.app_version,
            build=os.getenv("BEAM_APP_BUILD") or cls.build,
            os_name=platform.system() or cls.os_name,
            os_release=platform.release() or cls.os_release,
            preferred_languages=_preferred_languages_from_env(),
            user_agent_override=user_agent,
        )

    @property
    def accept_language(self) -> str:
        parts = []
        for index, language in enumerate(self.preferred_languages[:MAX_PREFERRED_LANGUAGES]):
            quality = round(1.0 - index * 0.1, 1)
            parts.append(f"{language};q={quality}")
        return ", ".join(parts)

    @property
    def user_agent(self) -> str:
        if self.user_agent_override:
            return self.user_agent_override
        return f"{self.app_name}/{self.app_version} ({self.bundle_id}; build:{self.build}; {self.os_name} {self.os_release})"

    def default_headers(self) -> Headers:
        return {
            "Accept-Encoding": DEFAULT_ACCEPT_ENCODING,
            "Accept-Language": self.accept_language,
            "User-Agent": self.user_agent,
            "Content-Type": DEFAULT_CONTENT_TYPE,
        }


_default_identity: ClientIdentity | None = None


def default_identity() -> ClientIdentity:
    """Return the process-wide identity, computing it on first use."""
    global _default_identity
    if _default_identity is None:
        _default_identity = ClientIdentity.from_runtime(user_agent=load_http_settings().user_agent)
    return _default_identity


def default_headers() -> Headers:
    return default_identity().default_headers()


class CachePolicy(str, Enum):
    USE_PROTOCOL = "USE_PROTOCOL"
    RELOAD_IGNORING_CACHE = "RELOAD_IGNORING_CACHE"
    RETURN_CACHE_ELSE_LOAD = "RETURN_CACHE_ELSE_LOAD"

    def headers(self) -> Headers:
        """Request headers expressing this policy."""
        if self is CachePolicy.RELOAD_IGNORING_CACHE:
            return {"Cache-Control": "no-cache", "Pragma": "no-cache"}
        if self is CachePolicy.RETURN_CACHE_ELSE_LOAD:
            return {"Cache-Control": "max-stale"}
        return {}


def _frozen_headers(headers: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType({str(key): str(value) for key, value in headers.items()})


@dataclass(frozen=True)
class Environment:
    """Deployment target shared by every request issued through a service."""

    name: str
    base_url: str
    headers: Mapping[str, str] = field(default_factory=default_headers, hash=False)
    cache_policy: CachePolicy = CachePolicy.RELOAD_IGNORING_CACHE

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _frozen_headers(self.headers))


__all__ = [
    "CachePolicy",
    "ClientIdentity",
    "Environment",
    "Headers",
    "default_headers",
    "default_identity",
]
