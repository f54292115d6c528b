# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import TransportCancelled, categorize_exception
from .client import CallHandle, Completion, Transport
from .models import TransportOutcome, TransportRequest

logger = logging.getLogger(__name__)


class HttpxTransport(Transport):
    """
    Runs each call through a shared httpx.Client on a worker pool.

    Completions fire on a pool thread, or on the cancelling thread when a queued
    call is cancelled before it starts.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.Client | None = None,
        executor: ThreadPoolExecutor | None = None,
    ):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="beam-transport",
        )

    def send(self, request: TransportRequest, completion: Completion) -> CallHandle:
        handle = CallHandle()
        future = self._executor.submit(self._perform, request, handle)
        handle.attach(future)
        future.add_done_callback(partial(self._deliver, request, completion, handle))
        return handle

    def _perform(self, request: TransportRequest, handle: CallHandle) -> TransportOutcome:
        if handle.cancelled:
            return TransportOutcome(error=TransportCancelled(), url=request.url)

        timeout = request.timeout if request.timeout is not None else self.settings.timeout
        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
                timeout=timeout,
            ) as resp:
                content = bytearray()
                for chunk in resp.iter_bytes():
                    if handle.cancelled:
                        logger.debug("Cancelled %s %s while reading body", request.method, request.url)
                        return TransportOutcome(error=TransportCancelled(), url=request.url)
                    if chunk:
                        content.extend(chunk)

            return TransportOutcome(
                status_code=resp.status_code,
                content=bytes(content),
                headers=dict(resp.headers),
                url=str(resp.url),
            )
        except Exception as exc:  # noqa: BLE001
            logger.info(
                "Transport error for %s %s (%s): %s",
                request.method,
                request.url,
                categorize_exception(exc).value,
                exc,
            )
            return TransportOutcome(error=exc, url=request.url)

    def _deliver(
        self,
        request: TransportRequest,
        completion: Completion,
        handle: CallHandle,
        future: Future,
    ) -> None:
        if future.cancelled():
            outcome = TransportOutcome(error=TransportCancelled(), url=request.url)
        else:
            outcome = future.result()
        handle.mark_done()
        try:
            completion(outcome)
        except Exception:  # noqa: BLE001
            logger.exception("Completion for %s %s raised", request.method, request.url)

    def close(self) -> None:
        self._executor.shutdown(wait=True, cancel_futures=True)
        self._client.close()
