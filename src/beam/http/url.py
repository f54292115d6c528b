# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL composition helpers."""

from __future__ import annotations

from collections.abc import Mapping

import httpx

ALLOWED_SCHEMES = {"http", "https"}


def compose_url(base_url: str, path: str, version: str | None = None) -> str:
    """
    Join base URL, optional API version and request path.

    Example:
      ("https://api.example.com", "users", "v2") -> https://api.example.com/v2/users
    """
    full_path = f"{base_url}/"
    if version:
        full_path += f"{version}/"
    return full_path + path


def parse_absolute_url(raw: str) -> httpx.URL:
    """Parse `raw` as an absolute http(s) URL; raises ValueError otherwise."""
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ValueError(f"invalid URL {raw!r}: {exc}") from exc
    if url.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"unsupported or missing URL scheme in {raw!r}")
    if not url.host:
        raise ValueError(f"missing host in {raw!r}")
    return url


def with_query(url: httpx.URL, params: Mapping[str, str]) -> httpx.URL:
    """Append query parameters, keeping any already present on the URL."""
    if not params:
        return url
    return url.copy_merge_params(dict(params))


__all__ = ["ALLOWED_SCHEMES", "compose_url", "parse_absolute_url", "with_query"]
