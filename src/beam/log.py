# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Logging setup for the `beam` CLI.

Library modules only emit through `logging.getLogger(__name__)`; applications
embedding Beam configure handlers themselves. BEAM_LOG_LEVEL sets the default
level used here.
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Install a stderr handler on the root logger at `level` (or BEAM_LOG_LEVEL)."""
    name = (level or os.getenv("BEAM_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(level=getattr(logging, name, logging.WARNING), format=LOG_FORMAT)


__all__ = ["LOG_FORMAT", "setup_logging"]
