# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Page URL to table key resolution, with a caller-seedable cache."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Mapping, Optional, Tuple, Union, TYPE_CHECKING
from urllib.parse import urlparse

from ..core._error_codes import TABLE_AMBIGUOUS, TABLE_NOT_FOUND, VALIDATION_PAGE_URL_INVALID
from ..core.errors import UnresolvedIdentifierError, ValidationError
from ..models.table_keys import TableKeySet

if TYPE_CHECKING:
    from ._transport import _NotionTransport

logger = logging.getLogger(__name__)

_PAGE_ID_RE = re.compile(r"([0-9a-fA-F]{32})$")
_VIEW_BLOCK_TYPES = ("collection_view", "collection_view_page")

TableKeyCache = Dict[str, TableKeySet]


def _to_uuid(page_id: str) -> str:
    """Dash a 32-character hex id into 8-4-4-4-12 form."""
    return f"{page_id[0:8]}-{page_id[8:12]}-{page_id[12:16]}-{page_id[16:20]}-{page_id[20:32]}"


def _split_page_url(page_url: str) -> Tuple[str, str]:
    parsed = urlparse(page_url or "")
    path = parsed.path.rstrip("/")
    match = _PAGE_ID_RE.search(path.replace("-", "")) if path else None
    if not parsed.scheme or not parsed.netloc or not match:
        raise ValidationError(
            f"Not a Notion page URL: {page_url!r}",
            subcode=VALIDATION_PAGE_URL_INVALID,
        )
    segments = [s for s in path.split("/") if s]
    origin = f"{parsed.scheme}://{parsed.netloc}"
    base = f"{origin}/{segments[0]}" if len(segments) > 1 else origin
    return base, match.group(1).lower()


def _coerce_keys(value: Union[TableKeySet, Mapping[str, Any]]) -> TableKeySet:
    return value if isinstance(value, TableKeySet) else TableKeySet.from_dict(dict(value))


class _TableKeyResolver:
    """
    Resolves page URLs to table keys and remembers the answers.

    Cache keys are normalized URLs of the form ``{origin}/{workspace}/{32-hex id}``;
    the ``v`` (view) query parameter is not taken into account.
    """

    def __init__(
        self,
        transport: "_NotionTransport",
        cache: Optional[Mapping[str, Any]] = None,
        use_cache: bool = True,
    ) -> None:
        self._transport = transport
        self._use_cache = use_cache
        self._cache: TableKeyCache = {}
        if cache:
            self.cache_table_keys(cache)

    @staticmethod
    def normalize_url(page_url: str) -> str:
        base, page_id = _split_page_url(page_url)
        return f"{base}/{page_id}"

    def get_cached_table_keys(self) -> TableKeyCache:
        return dict(self._cache)

    def cache_table_keys(self, table_keys: Mapping[str, Any]) -> TableKeyCache:
        """Merge ``table_keys`` into the cache, overwriting existing entries."""
        for url, keys in table_keys.items():
            self._cache[url] = _coerce_keys(keys)
        return self.get_cached_table_keys()

    def get_table_ids_from_page(self, page_url: str) -> TableKeyCache:
        """
        Find every table embedded in a page and cache their keys.

        :return: Normalized table URL to keys, for each collection view block on the page.
        """
        base, page_id = _split_page_url(page_url)
        response = self._transport._load_page_chunk(_to_uuid(page_id))
        blocks = ((response.get("recordMap") or {}).get("block")) or {}

        found: TableKeyCache = {}
        for entry in blocks.values():
            value = entry.get("value") if isinstance(entry, dict) else None
            if not isinstance(value, dict) or value.get("type") not in _VIEW_BLOCK_TYPES:
                continue
            collection_id = value.get("collection_id")
            view_ids = value.get("view_ids") or []
            if not collection_id or not view_ids:
                logger.debug("Skipping collection view block %s without ids", value.get("id"))
                continue
            table_url = f"{base}/{collection_id.replace('-', '')}"
            # First view wins; other views of the same table are ignored.
            found.setdefault(table_url, TableKeySet(collection_id, view_ids[0]))

        self.cache_table_keys(found)
        return found

    def resolve(self, page_url: str) -> TableKeySet:
        """
        Keys of the single table on ``page_url``.

        :raises ~notional.core.errors.UnresolvedIdentifierError: If the page holds no table or several.
        """
        uri = self.normalize_url(page_url)
        if self._use_cache and uri in self._cache:
            return self._cache[uri]

        tables = self.get_table_ids_from_page(uri)
        if not tables:
            raise UnresolvedIdentifierError(f'No table found on URL "{page_url}"', subcode=TABLE_NOT_FOUND)
        if len(tables) > 1:
            raise UnresolvedIdentifierError(
                f'Multiple tables found on URL "{page_url}"',
                subcode=TABLE_AMBIGUOUS,
                details={"tables": sorted(tables)},
            )
        keys = next(iter(tables.values()))
        self._cache[uri] = keys
        return keys


__all__ = ["_TableKeyResolver", "TableKeyCache"]
