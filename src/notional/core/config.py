# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

DEFAULT_BASE_URL = "https://www.notion.so"

_T = TypeVar("_T")


def _env(name: str, cast: Callable[[str], _T]) -> Optional[_T]:
    raw = os.environ.get(name)
    return cast(raw) if raw else None


@dataclass(frozen=True)
class NotionalConfig:
    """
    Settings shared by every request a :class:`~notional.client.NotionalClient` sends.

    Collection queries:

    :param base_url: Notion origin. Requests go to ``{base_url}/api/v3``.
    :param page_size: ``limit`` sent with ``queryCollection``. A single page is
        fetched per query, so tables larger than this are truncated. Default 100.
    :param user_locale: ``userLocale`` reported to the collection loader. Default ``"en"``.
    :param user_time_zone: ``userTimeZone`` reported to the collection loader. Default ``"Europe/London"``.

    Transport resilience (None keeps the :class:`~notional.core._http._HttpClient` default):

    :param http_retries: Attempts per request, first one included.
    :param http_backoff: Initial backoff delay in seconds.
    :param http_max_backoff: Upper bound on any one delay in seconds.
    :param http_timeout: Per-request timeout in seconds.
    :param http_jitter: Randomize backoff delays.
    :param http_retry_transient_errors: Retry rate limiting and gateway failures.
    """

    base_url: str = DEFAULT_BASE_URL
    page_size: int = 100
    user_locale: str = "en"
    user_time_zone: str = "Europe/London"

    http_retries: Optional[int] = None
    http_backoff: Optional[float] = None
    http_max_backoff: Optional[float] = None
    http_timeout: Optional[float] = None
    http_jitter: Optional[bool] = None
    http_retry_transient_errors: Optional[bool] = None

    @property
    def api_url(self) -> str:
        """Root of the private JSON API, without a trailing slash."""
        return f"{self.base_url.rstrip('/')}/api/v3"

    @classmethod
    def from_env(cls) -> "NotionalConfig":
        """
        Build a configuration from ``NOTIONAL_*`` environment variables.

        ``NOTIONAL_BASE_URL``, ``NOTIONAL_HTTP_TIMEOUT`` and ``NOTIONAL_HTTP_RETRIES``
        are read; unset or empty variables keep the field default.
        """
        return cls(
            base_url=os.environ.get("NOTIONAL_BASE_URL") or DEFAULT_BASE_URL,
            http_retries=_env("NOTIONAL_HTTP_RETRIES", int),
            http_timeout=_env("NOTIONAL_HTTP_TIMEOUT", float),
        )
