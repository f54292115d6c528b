# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Call-site wrapper pairing a Request with a Service."""

from __future__ import annotations

from .request import Request
from .service import Service, ServiceCallback
from .token import Token


class Task:
    """
    Runs one request through a service.

    Subclass and override `run` for custom pre/post-processing:

        class LoggedTask(Task):
            def run(self, service, callback):
                log.info("running %s", self.request.path)
                return super().run(service, callback)
    """

    def __init__(self, request: Request):
        self.request = request

    def run(self, service: Service, callback: ServiceCallback) -> Token | None:
        return service.execute(self.request, callback)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(request={self.request.path!r})"


__all__ = ["Task"]
