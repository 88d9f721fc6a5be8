# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Table handle: typed row access to one Notion collection view."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union, TYPE_CHECKING

import pandas as pd

from ..core._error_codes import VALIDATION_ROWS_NOT_LIST
from ..core.errors import UnknownColumnError, ValidationError
from ..data._query import Filters, ROW_ID_KEY, _RowQueryEngine
from ..data._schema import _SchemaIndex, parse_schema, raw_schema_from_response
from ..data._transactions import PropertyWrite, _TransactionBuilder
from ..data._users import _UserDirectory
from ..models.schema import ColumnSchema, ColumnType
from ..models.table_keys import TableKeySet
from ..models.user import User

if TYPE_CHECKING:
    from ..data._transport import _NotionTransport

logger = logging.getLogger(__name__)

_USER_TYPES = (ColumnType.USER, ColumnType.PERSON)


class Table:
    """
    Row operations on one collection view.

    Obtained from :meth:`~notional.client.NotionalClient.table`; the schema is
    loaded once and reused for the handle's lifetime. Reads return plain dicts
    keyed by column display name plus the row's block id under ``"id"``.

    Example::

        table = client.table("https://www.notion.so/acme/0123456789abcdef0123456789abcdef")

        rows = table.get_rows({"Status": "Done"})
        table.insert_rows([{"Name": "Write docs", "Tags": ["docs", "q3"]}])
        table.update_rows({"Done": True}, {"Name": "Write docs"})
        table.delete_rows({"Name": lambda name: name.startswith("tmp-")})

        table.where({"Name": "Write docs"}).update({"Owner": "Ada Lovelace"})
    """

    def __init__(
        self,
        keys: TableKeySet,
        transport: "_NotionTransport",
        user_id: str,
    ) -> None:
        self._keys = keys
        self._query = _RowQueryEngine(transport, keys)
        self._schema = _SchemaIndex(self._query)
        self._users = _UserDirectory(transport)
        self._transactions = _TransactionBuilder(transport, user_id, keys)

    @property
    def keys(self) -> TableKeySet:
        return self._keys

    # ------------------------------------------------------------------ reads
    def get_schema(self) -> Dict[str, ColumnSchema]:
        """
        Visible columns by display name.

        :return: Mapping of display name to column (internal id and type).
        :rtype: dict[str, ~notional.models.schema.ColumnSchema]
        """
        return self._schema.load()

    def get_users(self) -> List[User]:
        """Workspace members, fetched once and cached after the first non-empty result."""
        return self._users.list_users()

    def get_rows(self, filters: Optional[Filters] = None) -> List[Dict[str, Any]]:
        """
        Decoded rows matching ``filters``.

        :param filters: Column name to expected value, or to a predicate over the
            decoded value. Names that are not columns are ignored.
        :type filters: dict or None
        :return: One dict per row, including the block id under ``"id"``.
        :rtype: list[dict]
        """
        return self._query.get_rows(filters)

    def get_dataframe(self, filters: Optional[Filters] = None) -> pd.DataFrame:
        """
        Matching rows as a DataFrame with one column per visible column plus ``id``.

        :rtype: pandas.DataFrame
        """
        columns = [*self.get_schema().keys(), ROW_ID_KEY]
        return pd.DataFrame(self.get_rows(filters), columns=columns)

    # ----------------------------------------------------------------- writes
    def _resolve_users(self, column: ColumnSchema, value: Any) -> Any:
        if column.column_type in _USER_TYPES:
            return self._users.resolve_id(value)
        return value

    def insert_rows(self, rows: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]) -> Dict[str, Any]:
        """
        Insert rows, one new page per row.

        Fields that are not columns of the table are dropped with a warning.
        Rows left without any known field are skipped.

        :param rows: A row dict or a list of row dicts keyed by column display name.
        :return: The ``submitTransaction`` response, or ``{}`` when nothing was sent.
        :raises ~notional.core.errors.ValidationError: If ``rows`` is not a dict or list of dicts.
        """
        if isinstance(rows, Mapping):
            rows = [rows]
        if not isinstance(rows, (list, tuple)) or not all(isinstance(r, Mapping) for r in rows):
            raise ValidationError("rows must be a dict or a list of dicts", subcode=VALIDATION_ROWS_NOT_LIST)

        entries: List[List[PropertyWrite]] = []
        for row in rows:
            writes = []
            for name, value in row.items():
                try:
                    column = self._schema.resolve(name)
                except UnknownColumnError:
                    logger.warning('Unrecognised key "%s". Ignoring.', name)
                    continue
                if not column.is_writable:
                    logger.warning('Column "%s" is read-only. Ignoring.', name)
                    continue
                writes.append(PropertyWrite(column.internal_id, column.type, self._resolve_users(column, value)))
            if writes:
                entries.append(writes)
            else:
                logger.warning("Row has no recognised columns; not inserting it.")

        if not entries:
            return {}
        return self._transactions.insert(entries)

    def update_rows(
        self, fields: Mapping[str, Any], filters: Optional[Filters] = None
    ) -> Union[Dict[str, Any], List[Any]]:
        """
        Update every row matching ``filters`` with ``fields``.

        Each matched row is rewritten in full: supplied columns get the new value,
        the rest keep their current decoded value. Rows and filters are evaluated
        against a single query snapshot; supplied names are resolved through the
        schema index, which loads from that same snapshot when not yet cached.

        :param fields: Column display name to new value.
        :param filters: Row filters, as for :meth:`get_rows`; empty matches every row.
        :return: The ``submitTransaction`` response, or ``[]`` when no row qualifies.
        """
        with self._query.snapshot() as response:
            supplied: Dict[str, Any] = {}
            for name, value in (fields or {}).items():
                try:
                    column = self._schema.resolve(name)
                except UnknownColumnError:
                    logger.warning('Unrecognised key "%s". Ignoring.', name)
                    continue
                if not column.is_writable:
                    logger.warning('Column "%s" is read-only. Ignoring.', name)
                    continue
                supplied[column.internal_id] = self._resolve_users(column, value)
            if not supplied:
                return []

            columns = parse_schema(raw_schema_from_response(response, self._keys.collection_id))
            updates = []
            for row in self._query.select_rows(response, filters):
                writes = []
                for name, column in columns.items():
                    if not column.is_writable:
                        continue
                    if column.internal_id in supplied:
                        value = supplied[column.internal_id]
                    else:
                        value = row.get(name)
                        if value is None or value == []:
                            continue
                        # Dates without a payload decode to their text and cannot be re-encoded.
                        if column.column_type is ColumnType.DATE and not isinstance(value, dict):
                            continue
                    writes.append(PropertyWrite(column.internal_id, column.type, value))
                updates.append((row[ROW_ID_KEY], writes))

        if not updates:
            return []
        return self._transactions.update(updates)

    def delete_rows(self, filters: Optional[Filters] = None) -> Union[Dict[str, Any], List[Any]]:
        """
        Archive every row matching ``filters`` (``alive: false``; parent link kept).

        :return: The ``submitTransaction`` response, or ``[]`` when no row matches.
        """
        with self._query.snapshot() as response:
            block_ids = [row[ROW_ID_KEY] for row in self._query.select_rows(response, filters)]
        if not block_ids:
            return []
        return self._transactions.delete(block_ids)

    def set_schema(self, schema: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Replace the collection's whole raw schema in one transaction.

        ``schema`` is the backend shape (internal id to ``{"name", "type", ...}``).
        The cached schema is dropped so the next access reloads it.
        """
        result = self._transactions.set_schema(dict(schema))
        self._schema.invalidate()
        return result

    def where(self, filters: Optional[Filters] = None) -> "BoundRowQuery":
        """Bind ``filters`` for a following ``get()``, ``update()`` or ``delete()``."""
        return BoundRowQuery(self, filters or {})


class BoundRowQuery:
    """Filters bound to a table, returned by :meth:`Table.where`."""

    def __init__(self, table: Table, filters: Filters) -> None:
        self._table = table
        self.filters = filters

    def get(self) -> List[Dict[str, Any]]:
        return self._table.get_rows(self.filters)

    def get_dataframe(self) -> pd.DataFrame:
        return self._table.get_dataframe(self.filters)

    def update(self, fields: Mapping[str, Any]) -> Union[Dict[str, Any], List[Any]]:
        return self._table.update_rows(fields, self.filters)

    def delete(self) -> Union[Dict[str, Any], List[Any]]:
        return self._table.delete_rows(self.filters)


__all__ = ["Table", "BoundRowQuery"]
