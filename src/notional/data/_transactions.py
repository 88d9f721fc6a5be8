# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Transaction builder: turns row-level intents into ordered operation batches.

Ordering rules the backend relies on:

- a new block's lifecycle operations (type, view ordering, parent linkage,
  authorship stamps) are sent in the batch's first transaction, ahead of any
  property writes for that block;
- within a row, property writes come before the ``last_edited_time`` stamp.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, TYPE_CHECKING

from ..models.operation import Operation, Transaction
from ..models.table_keys import TableKeySet
from ._codec import PRE_FORMATTED, encode_value

if TYPE_CHECKING:
    from ._transport import _NotionTransport

logger = logging.getLogger(__name__)

USER_TABLE = "notion_user"


class PropertyWrite(NamedTuple):
    """One property value to write: the column's internal id, its type and the application value."""

    internal_id: str
    type: str
    value: Any


def _now_ms(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


class _TransactionBuilder:
    """
    Builds and submits operation batches for one table (or a lone block).

    :param transport: Transport used for ``submitTransaction``.
    :param user_id: Id of the acting user, stamped on new blocks.
    :param keys: Table coordinates; required for insert, delete and schema replace.
    :param clock: Returns seconds since the epoch; defaults to :func:`time.time`.
    """

    def __init__(
        self,
        transport: "_NotionTransport",
        user_id: str,
        keys: Optional[TableKeySet] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._transport = transport
        self._user_id = user_id
        self._keys = keys
        self._clock = clock or time.time

    def _require_keys(self) -> TableKeySet:
        if self._keys is None:
            raise ValueError("This operation needs table keys (collection and view ids).")
        return self._keys

    @staticmethod
    def _property_set(block_id: str, write: PropertyWrite) -> Operation:
        return Operation(
            id=block_id,
            table="block",
            path=["properties", write.internal_id],
            command="set",
            args=encode_value(write.type, write.value),
        )

    @staticmethod
    def _stamp(block_id: str, field: str, value: Any) -> Operation:
        return Operation(id=block_id, table="block", path=[field], command="set", args=value)

    def _lifecycle(self, block_id: str, now: int) -> List[Operation]:
        keys = self._require_keys()
        return [
            Operation(
                id=block_id,
                table="block",
                path=[],
                command="set",
                args={"type": "page", "id": block_id, "version": 1},
            ),
            Operation(
                id=keys.collection_view_id,
                table="collection_view",
                path=["page_sort"],
                command="listAfter",
                args={"id": block_id},
            ),
            Operation(
                id=block_id,
                table="block",
                path=[],
                command="update",
                args={"parent_id": keys.collection_id, "parent_table": "collection", "alive": True},
            ),
            self._stamp(block_id, "created_by_id", self._user_id),
            self._stamp(block_id, "created_by_table", USER_TABLE),
            self._stamp(block_id, "created_time", now),
            self._stamp(block_id, "last_edited_time", now),
            self._stamp(block_id, "last_edited_by_id", self._user_id),
            self._stamp(block_id, "last_edited_by_table", USER_TABLE),
        ]

    # ------------------------------------------------------------- builders
    def build_insert(self, rows: Sequence[Sequence[PropertyWrite]]) -> Tuple[List[Transaction], List[str]]:
        """
        Build the insert batch for ``rows``.

        :return: The transactions and the new block ids, one per row in input order.
        """
        now = _now_ms(self._clock)
        block_ids = [str(uuid.uuid4()) for _ in rows]
        lifecycle = Transaction(operations=[op for block_id in block_ids for op in self._lifecycle(block_id, now)])
        properties = [
            Transaction(operations=[self._property_set(block_id, write) for write in row])
            for block_id, row in zip(block_ids, rows)
        ]
        return [lifecycle, *properties], block_ids

    def build_update(self, rows: Sequence[Tuple[str, Sequence[PropertyWrite]]]) -> List[Transaction]:
        now = _now_ms(self._clock)
        return [
            Transaction(
                operations=[
                    *(self._property_set(block_id, write) for write in writes),
                    self._stamp(block_id, "last_edited_time", now),
                ]
            )
            for block_id, writes in rows
        ]

    def build_delete(self, block_ids: Iterable[str]) -> List[Transaction]:
        keys = self._require_keys()
        now = _now_ms(self._clock)
        return [
            Transaction(
                operations=[
                    Operation(
                        id=block_id,
                        table="block",
                        path=[],
                        command="update",
                        args={"parent_id": keys.collection_id, "parent_table": "collection", "alive": False},
                    ),
                    self._stamp(block_id, "last_edited_time", now),
                ]
            )
            for block_id in block_ids
        ]

    def build_schema_replace(self, schema: Dict[str, Any]) -> List[Transaction]:
        keys = self._require_keys()
        return [
            Transaction(
                operations=[
                    Operation(
                        id=keys.collection_id,
                        table="collection",
                        path=[],
                        command="update",
                        args={"schema": schema},
                    )
                ]
            )
        ]

    def build_title_update(self, block_id: str, content: Any) -> List[Transaction]:
        """Overwrite a block's title text; ``content`` is a string or a list of lines."""
        value = content if isinstance(content, list) else [[content]]
        return self.build_update([(block_id, [PropertyWrite("title", PRE_FORMATTED, value)])])

    # ----------------------------------------------------------- submission
    def submit(self, transactions: Sequence[Transaction]) -> Dict[str, Any]:
        """Send ``transactions`` as one batch and return the transport's response unchanged."""
        return self._transport._submit_transaction([t.to_dict() for t in transactions])

    def insert(self, rows: Sequence[Sequence[PropertyWrite]]) -> Dict[str, Any]:
        transactions, block_ids = self.build_insert(rows)
        logger.info("Inserting %d row(s): %s", len(block_ids), ", ".join(block_ids))
        return self.submit(transactions)

    def update(self, rows: Sequence[Tuple[str, Sequence[PropertyWrite]]]) -> Dict[str, Any]:
        logger.info("Updating %d row(s)", len(rows))
        return self.submit(self.build_update(rows))

    def delete(self, block_ids: Sequence[str]) -> Dict[str, Any]:
        logger.info("Deleting %d row(s)", len(block_ids))
        return self.submit(self.build_delete(block_ids))

    def set_schema(self, schema: Dict[str, Any]) -> Dict[str, Any]:
        return self.submit(self.build_schema_replace(schema))

    def set_title(self, block_id: str, content: Any) -> Dict[str, Any]:
        return self.submit(self.build_title_update(block_id, content))


__all__ = ["_TransactionBuilder", "PropertyWrite", "USER_TABLE"]
