# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Row query engine: fetch a collection view, decode rows, apply filters.

A filter set maps column display names to either an expected value, compared
with ``==`` (structural for lists and dicts), or a callable that receives the
decoded value and returns truthy to keep the row. Filter keys that are not
columns of the row are ignored.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union, TYPE_CHECKING

from ..models.table_keys import TableKeySet
from ._codec import decode_row
from ._schema import parse_schema, raw_schema_from_response

if TYPE_CHECKING:
    from ._transport import _NotionTransport

logger = logging.getLogger(__name__)

RowFilter = Union[Any, Callable[[Any], bool]]
Filters = Mapping[str, RowFilter]

ROW_ID_KEY = "id"


def row_matches(row: Mapping[str, Any], filters: Optional[Filters]) -> bool:
    """True when every filter present in ``row`` accepts the row's value."""
    for key, expected in (filters or {}).items():
        if key not in row:
            continue
        actual = row[key]
        if callable(expected):
            if not expected(actual):
                return False
        elif expected != actual:
            return False
    return True


class _RowQueryEngine:
    """
    Executes the single-page collection query for one table.

    Caching is off by default. :meth:`snapshot` turns it on for the duration of
    a ``with`` block so a read-then-write sequence sees one consistent response,
    and always discards the cached response on exit.
    """

    def __init__(self, transport: "_NotionTransport", keys: TableKeySet) -> None:
        self._transport = transport
        self.keys = keys
        self._caching = False
        self._cached: Optional[Dict[str, Any]] = None

    def _set_caching(self, enabled: bool) -> None:
        self._caching = enabled
        if not enabled:
            self._cached = None

    def fetch_rows(self) -> Dict[str, Any]:
        """Return the raw ``{"result", "recordMap"}`` response for the table's view."""
        if self._caching and self._cached is not None:
            return self._cached
        response = self._transport._query_collection(self.keys)
        if self._caching:
            self._cached = response
        return response

    @contextmanager
    def snapshot(self) -> Iterator[Dict[str, Any]]:
        """Yield one cached query response; the cache is released on every exit path."""
        self._set_caching(True)
        try:
            yield self.fetch_rows()
        finally:
            self._set_caching(False)

    def decode_rows(self, response: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Decode every row of a response, adding the block id under ``"id"``."""
        columns = list(parse_schema(raw_schema_from_response(response, self.keys.collection_id)).values())
        result = response.get("result") or {}
        blocks = ((response.get("recordMap") or {}).get("block")) or {}
        rows = []
        for block_id in result.get("blockIds") or []:
            entry = blocks.get(block_id)
            block = entry.get("value") if isinstance(entry, dict) else None
            if not isinstance(block, dict):
                logger.debug("Block %s missing from record map; using defaults", block_id)
                block = {}
            row = decode_row(columns, block)
            row[ROW_ID_KEY] = block_id
            rows.append(row)
        return rows

    def select_rows(self, response: Dict[str, Any], filters: Optional[Filters] = None) -> List[Dict[str, Any]]:
        return [row for row in self.decode_rows(response) if row_matches(row, filters)]

    def get_rows(self, filters: Optional[Filters] = None) -> List[Dict[str, Any]]:
        return self.select_rows(self.fetch_rows(), filters)


__all__ = ["_RowQueryEngine", "row_matches", "Filters", "RowFilter", "ROW_ID_KEY"]
