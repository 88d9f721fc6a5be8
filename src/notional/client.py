# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

import requests

from .core._error_codes import VALIDATION_CREDENTIALS_MISSING
from .core.config import NotionalConfig
from .core.errors import ValidationError
from .data._table_keys import TableKeyCache, _TableKeyResolver
from .data._transport import _NotionTransport
from .models.table_keys import TableKeySet
from .operations.block import Block
from .operations.table import Table


class NotionalClient:
    """
    High-level client for Notion tables.

    The client authenticates with a ``token_v2`` cookie, resolves page URLs to
    table keys (cached), and hands out :class:`~notional.operations.table.Table`
    and :class:`~notional.operations.block.Block` handles. HTTP work is delegated
    to an internal transport created on first use.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager pools connections in one session
        and releases it on exit::

            with NotionalClient(token, user_id) as client:
                table = client.table("https://www.notion.so/acme/0123456789abcdef0123456789abcdef")
                print(table.get_rows({"Name": "dods"}))

    :param token: Value of the ``token_v2`` cookie of a signed-in user.
    :type token: :class:`str`
    :param user_id: Id of that user; stamped as author on inserted rows.
    :type user_id: :class:`str`
    :param config: Optional configuration. Defaults to :meth:`NotionalConfig.from_env`.
    :type config: ~notional.core.config.NotionalConfig or None
    :param cache: Initial table key cache (normalized URL to keys), e.g. from a previous
        :meth:`get_cached_table_keys` call.
    :type cache: dict or None
    :param use_cache: When False, page URLs are always re-resolved.
    :type use_cache: :class:`bool`

    :raises ~notional.core.errors.ValidationError: If ``token`` or ``user_id`` is missing.
    """

    def __init__(
        self,
        token: str,
        user_id: str,
        config: Optional[NotionalConfig] = None,
        cache: Optional[Mapping[str, Any]] = None,
        use_cache: bool = True,
    ) -> None:
        if not token or not user_id:
            raise ValidationError("Both a token and user_id are required", subcode=VALIDATION_CREDENTIALS_MISSING)
        self._token = token
        self.user_id = user_id
        self._config = config or NotionalConfig.from_env()
        self._initial_cache = dict(cache or {})
        self._use_cache = use_cache
        self._transport: Optional[_NotionTransport] = None
        self._resolver: Optional[_TableKeyResolver] = None
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False

    def __enter__(self) -> "NotionalClient":
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the transport and any session this client opened.

        Safe to call multiple times. The table key cache survives closing.
        """
        if self._transport is not None:
            self._transport.close()
            self._transport = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _get_transport(self) -> _NotionTransport:
        """Create the transport on first use, sharing the context manager's session if any."""
        if self._transport is None:
            self._transport = _NotionTransport(self._token, self._config, session=self._session)
        return self._transport

    def _get_resolver(self) -> _TableKeyResolver:
        if self._resolver is None:
            self._resolver = _TableKeyResolver(self._get_transport(), self._initial_cache, self._use_cache)
        else:
            # Re-point at the live transport after a close().
            self._resolver._transport = self._get_transport()
        return self._resolver

    # ------------------------------------------------------------- table keys
    def get_cached_table_keys(self) -> TableKeyCache:
        """Current table key cache (normalized URL to keys)."""
        return self._get_resolver().get_cached_table_keys()

    def cache_table_keys(self, table_keys: Mapping[str, Any]) -> TableKeyCache:
        """Merge ``table_keys`` into the cache, overwriting existing URLs, and return the cache."""
        return self._get_resolver().cache_table_keys(table_keys)

    def get_table_ids_from_page(self, page_url: str) -> TableKeyCache:
        """Keys of every table on a page, also merged into the cache."""
        return self._get_resolver().get_table_ids_from_page(page_url)

    # ---------------------------------------------------------------- handles
    def table(self, table: Union[str, TableKeySet, Mapping[str, Any]]) -> Table:
        """
        Open a table by page URL or by keys, loading its schema.

        :param table: Page URL holding exactly one table, or the table's keys.
        :return: A table handle with its schema loaded.
        :raises ~notional.core.errors.UnresolvedIdentifierError: If the URL holds no table or several.
        :raises ~notional.core.errors.ValidationError: If the URL is not a Notion page URL.
        """
        if isinstance(table, str):
            keys = self._get_resolver().resolve(table)
        elif isinstance(table, TableKeySet):
            keys = table
        else:
            keys = TableKeySet.from_dict(dict(table))
        handle = Table(keys, self._get_transport(), self.user_id)
        handle.get_schema()
        return handle

    def block(self, block_id: str) -> Block:
        return Block(block_id, self._get_transport(), self.user_id)


__all__ = ["NotionalClient"]
