# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Retrying ``requests`` wrapper used by the Notion transport.

Every call to the private API is a POST, so the policy covers network
exceptions and the transient status codes Notion returns under load
(429, 502, 503, 504). The final attempt's response is returned as is and
status handling is left to the caller.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Optional

import requests

from ._error_codes import TRANSIENT_STATUS_CODES

logger = logging.getLogger(__name__)

_WRITE_METHODS = ("post", "put", "patch", "delete")
_WRITE_TIMEOUT = 120
_READ_TIMEOUT = 10


class _HttpClient:
    """
    Sends requests with bounded retries and exponential backoff.

    All knobs accept None to mean "use the default", which lets
    :class:`~notional.core.config.NotionalConfig` pass its fields straight through.

    :param retries: Total attempts per request, including the first. Default 5.
    :param backoff: Delay before the second attempt, doubled for each further attempt. Default 0.5s.
    :param timeout: Timeout applied to every request. Default depends on the method
        (120s for writes, 10s otherwise).
    :param max_backoff: Ceiling for any single delay, ``Retry-After`` included. Default 60s.
    :param jitter: Randomize each computed delay by up to 25% either way. Default True.
    :param retry_transient_errors: Retry 429/502/503/504 responses. Default True.
    :param session: Shared ``requests.Session``; closed by :meth:`close`.
    """

    def __init__(
        self,
        retries: Optional[int] = None,
        backoff: Optional[float] = None,
        timeout: Optional[float] = None,
        max_backoff: Optional[float] = None,
        jitter: Optional[bool] = None,
        retry_transient_errors: Optional[bool] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.max_attempts = 5 if retries is None else retries
        self.base_delay = 0.5 if backoff is None else backoff
        self.max_backoff = 60.0 if max_backoff is None else max_backoff
        self.default_timeout = timeout
        self.jitter = True if jitter is None else jitter
        self.retry_transient_errors = True if retry_transient_errors is None else retry_transient_errors
        self.transient_status_codes = set(TRANSIENT_STATUS_CODES)
        self._session = session

    def _timeout_for(self, method: str) -> float:
        if self.default_timeout is not None:
            return self.default_timeout
        return _WRITE_TIMEOUT if (method or "").lower() in _WRITE_METHODS else _READ_TIMEOUT

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        sender = self._session.request if self._session is not None else requests.request
        return sender(method, url, **kwargs)

    def _should_retry(self, response: requests.Response) -> bool:
        return self.retry_transient_errors and response.status_code in self.transient_status_codes

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Send a request, retrying network failures and transient statuses.

        :param method: HTTP method, e.g. ``"post"``.
        :param url: Absolute URL.
        :param kwargs: Forwarded to ``requests``; ``timeout`` overrides the client default.
        :return: The last response received, whatever its status.
        :raises requests.exceptions.RequestException: When the last attempt fails at the network level.
        """
        kwargs.setdefault("timeout", self._timeout_for(method))
        last_attempt = max(1, self.max_attempts) - 1

        attempt = 0
        while True:
            try:
                response = self._send(method, url, **kwargs)
            except requests.exceptions.RequestException as exc:
                if attempt == last_attempt:
                    raise
                delay = self._calculate_retry_delay(attempt)
                logger.debug("%s %s failed (%s); retry %d in %.2fs", method.upper(), url, exc, attempt + 1, delay)
            else:
                if attempt == last_attempt or not self._should_retry(response):
                    return response
                delay = self._calculate_retry_delay(attempt, response)
                logger.debug(
                    "%s %s returned %s; retry %d in %.2fs",
                    method.upper(),
                    url,
                    response.status_code,
                    attempt + 1,
                    delay,
                )
            time.sleep(delay)
            attempt += 1

    def _calculate_retry_delay(self, attempt: int, response: Optional[requests.Response] = None) -> float:
        """
        Seconds to wait after failed attempt number ``attempt`` (0-based).

        An integer ``Retry-After`` header is honored up to ``max_backoff``.
        Otherwise the delay is ``base_delay * 2**attempt``, capped, then jittered.
        """
        retry_after = (getattr(response, "headers", None) or {}).get("Retry-After")
        if retry_after is not None:
            try:
                return min(int(retry_after), self.max_backoff)
            except (TypeError, ValueError):
                logger.debug("Ignoring unparseable Retry-After header %r", retry_after)

        delay = min(self.base_delay * (2**attempt), self.max_backoff)
        if not self.jitter:
            return delay
        spread = delay * 0.25
        return max(0.0, delay + random.uniform(-spread, spread))

    def close(self) -> None:
        """Close the shared session, if any. Idempotent."""
        session, self._session = self._session, None
        if session is not None:
            session.close()
