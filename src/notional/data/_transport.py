# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Low-level client for Notion's private JSON API.

Every endpoint is a POST of a JSON body to ``{base_url}/api/v3/<path>``,
authenticated with the ``token_v2`` cookie. Non-2xx responses are raised as
:class:`~notional.core.errors.HttpError`; network exceptions from
``requests`` propagate unchanged once retries are exhausted.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

import requests

from ..core._error_codes import _http_subcode, _is_transient_status
from ..core._http import _HttpClient
from ..core.config import NotionalConfig
from ..core.errors import HttpError
from ..models.table_keys import TableKeySet

logger = logging.getLogger(__name__)

# loadPageChunk settings: one chunk holding the whole page.
_PAGE_CHUNK_CONFIG = {
    "limit": 100000,
    "chunkNumber": 0,
    "cursor": {"stack": []},
    "verticalColumns": False,
}


class _NotionTransport:
    """
    Notion API client: raw endpoint calls with structured error handling.

    :param token: ``token_v2`` cookie value.
    :type token: str
    :param config: Client configuration.
    :type config: ~notional.core.config.NotionalConfig
    :param session: Optional shared session for connection pooling.
    :type session: requests.Session | None
    """

    def __init__(
        self,
        token: str,
        config: Optional[NotionalConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._token = token
        self.config = config or NotionalConfig.from_env()
        self.api = self.config.api_url
        self._http = _HttpClient(
            retries=self.config.http_retries,
            backoff=self.config.http_backoff,
            timeout=self.config.http_timeout,
            max_backoff=self.config.http_max_backoff,
            jitter=self.config.http_jitter,
            retry_transient_errors=self.config.http_retry_transient_errors,
            session=session,
        )

    def close(self) -> None:
        self._http.close()

    def _headers(self) -> Dict[str, str]:
        return {
            "Cookie": f"token_v2={self._token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST ``body`` to an API endpoint and return the decoded JSON object.

        :raises ~notional.core.errors.HttpError: On a non-2xx response.
        """
        url = f"{self.api}/{path.lstrip('/')}"
        logger.debug("POST %s", url)
        r = self._http._request("post", url, headers=self._headers(), json=body)
        status = getattr(r, "status_code", 0) or 0
        if status >= 400:
            self._raise_http_error(path, r)
        try:
            data = r.json() if getattr(r, "text", None) else {}
        except ValueError:
            data = {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _raise_http_error(path: str, r: Any) -> None:
        status = int(r.status_code)
        body_excerpt = None
        message = None
        try:
            payload = r.json()
            if isinstance(payload, dict):
                message = payload.get("message") or payload.get("name")
        except ValueError:
            payload = None
        text = getattr(r, "text", None)
        if text:
            body_excerpt = text[:500]
        headers = getattr(r, "headers", None) or {}
        retry_after = None
        if "Retry-After" in headers:
            try:
                retry_after = int(headers["Retry-After"])
            except (TypeError, ValueError):
                retry_after = None
        raise HttpError(
            message or f"Notion request to '{path}' failed with status {status}",
            status_code=status,
            is_transient=_is_transient_status(status),
            subcode=_http_subcode(status),
            path=path,
            body_excerpt=body_excerpt,
            retry_after=retry_after,
        )

    # ------------------------------------------------------------ endpoints
    def _query_collection(self, keys: TableKeySet) -> Dict[str, Any]:
        """Run the view's query once, returning ``{"result": ..., "recordMap": ...}``."""
        body = {
            "collectionId": keys.collection_id,
            "collectionViewId": keys.collection_view_id,
            "loader": {
                "limit": int(self.config.page_size),
                "loadContentCover": False,
                "type": "table",
                "userLocale": self.config.user_locale,
                "userTimeZone": self.config.user_time_zone,
            },
            "query": {
                "aggregate": [],
                "filter": [],
                "filter_operator": "and",
                "sort": [],
            },
        }
        return self._post("queryCollection", body)

    def _submit_transaction(self, transactions: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
        """Submit transactions as one batch under a fresh request id."""
        payload = {"requestId": str(uuid.uuid4()), "transactions": list(transactions)}
        logger.debug(
            "Submitting %d transaction(s) under request %s", len(payload["transactions"]), payload["requestId"]
        )
        return self._post("submitTransaction", payload)

    def _load_user_content(self) -> Dict[str, Any]:
        return self._post("loadUserContent", {})

    def _sync_record_values(self, table: str, ids: List[str]) -> Dict[str, Any]:
        """Fetch the latest version of the given records (``-1`` requests any version)."""
        return self._post("syncRecordValues", {"recordVersionMap": {table: {rid: -1 for rid in ids}}})

    def _load_page_chunk(self, page_id: str) -> Dict[str, Any]:
        return self._post("loadPageChunk", {**_PAGE_CHUNK_CONFIG, "pageId": page_id})


__all__ = ["_NotionTransport"]
