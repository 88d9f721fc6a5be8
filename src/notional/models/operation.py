# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Write batch building blocks.

An :class:`Operation` is one field-level mutation of a record. Operations are
grouped into :class:`Transaction` objects, and a list of transactions is
submitted together as one batch.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal

TargetTable = Literal["block", "collection", "collection_view"]
Command = Literal["set", "update", "listAfter"]


@dataclass(frozen=True)
class Operation:
    """
    :param id: Target record id.
    :param table: Record table the target lives in.
    :param path: Path inside the record; empty for whole-record commands.
    :param command: ``set`` replaces, ``update`` merges, ``listAfter`` appends to a list.
    :param args: Command payload.
    """

    id: str
    table: TargetTable
    path: List[str]
    command: Command
    args: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "table": self.table,
            "path": list(self.path),
            "command": self.command,
            "args": self.args,
        }


@dataclass
class Transaction:
    operations: List[Operation] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "operations": [op.to_dict() for op in self.operations]}


__all__ = ["Operation", "Transaction", "TargetTable", "Command"]
