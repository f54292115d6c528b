# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header helpers.

Request/environment merges are case-sensitive on purpose: a request key only
replaces an environment key spelled the same way. Implicit headers (cache policy,
Authorization) are filled in with case-insensitive matching so they never shadow
a value the caller already supplied under a different casing.
"""

from __future__ import annotations

from collections.abc import Mapping


def has_header(headers: Mapping[str, str] | None, name: str) -> bool:
    if not headers:
        return False
    lower = name.lower()
    return any(str(key).lower() == lower for key in headers)


def fill_missing_headers(headers: dict[str, str], extra: Mapping[str, str]) -> dict[str, str]:
    """Add entries from `extra` whose names are not already present (case-insensitive)."""
    for key, value in extra.items():
        if value and not has_header(headers, key):
            headers[key] = value
    return headers


__all__ = ["fill_missing_headers", "has_header"]
