# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Collection schema parsing and the per-table schema index."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

from ..core._error_codes import SCHEMA_COLUMN_NOT_FOUND
from ..core.errors import UnknownColumnError
from ..models.schema import ColumnSchema

if TYPE_CHECKING:
    from ._query import _RowQueryEngine

logger = logging.getLogger(__name__)


def raw_schema_from_response(response: Dict[str, Any], collection_id: str) -> Dict[str, Any]:
    """Pull ``recordMap.collection[<id>].value.schema`` out of a query response ({} when absent)."""
    record_map = response.get("recordMap") if isinstance(response, dict) else None
    collections = (record_map or {}).get("collection") or {}
    entry = collections.get(collection_id) or {}
    value = entry.get("value") if isinstance(entry, dict) else None
    schema = (value or {}).get("schema") if isinstance(value, dict) else None
    return schema if isinstance(schema, dict) else {}


def parse_schema(raw_schema: Dict[str, Any]) -> Dict[str, ColumnSchema]:
    """
    Map display name to column for every visible column of a raw schema.

    Columns without a name are internal and left out.
    """
    columns: Dict[str, ColumnSchema] = {}
    for internal_id, raw in (raw_schema or {}).items():
        column = ColumnSchema.from_api_response(internal_id, raw)
        if column is None:
            continue
        if column.display_name in columns:
            logger.warning(
                "Duplicate column name %r (ids %s and %s); keeping the first",
                column.display_name,
                columns[column.display_name].internal_id,
                internal_id,
            )
            continue
        columns[column.display_name] = column
    return columns


class _SchemaIndex:
    """
    Lazily loaded, memoized view of one table's visible schema.

    The schema is read from the collection query response the first time it is
    needed and reused for the lifetime of the owning table handle.
    """

    def __init__(self, query: "_RowQueryEngine") -> None:
        self._query = query
        self._columns: Optional[Dict[str, ColumnSchema]] = None

    def load(self) -> Dict[str, ColumnSchema]:
        if self._columns is None:
            response = self._query.fetch_rows()
            self._columns = parse_schema(raw_schema_from_response(response, self._query.keys.collection_id))
            logger.debug("Loaded %d column(s) for collection %s", len(self._columns), self._query.keys.collection_id)
        return self._columns

    def resolve(self, display_name: str) -> ColumnSchema:
        """
        Look up a column by display name.

        :raises ~notional.core.errors.UnknownColumnError: If no visible column has that name.
        """
        column = self.load().get(display_name)
        if column is None:
            raise UnknownColumnError(display_name, subcode=SCHEMA_COLUMN_NOT_FOUND)
        return column

    def invalidate(self) -> None:
        self._columns = None


__all__ = ["_SchemaIndex", "parse_schema", "raw_schema_from_response"]
