# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class TableKeySet:
    """
    Coordinates of a table: the backing collection and the view rows are read through.

    :param collection_id: Collection (table store) id.
    :type collection_id: str
    :param collection_view_id: View id used for queries and page ordering.
    :type collection_view_id: str
    """

    collection_id: str
    collection_view_id: str

    def __post_init__(self) -> None:
        if not self.collection_id or not self.collection_view_id:
            raise ValueError("Both collection_id and collection_view_id are required.")

    def to_dict(self) -> Dict[str, str]:
        return {"collectionId": self.collection_id, "collectionViewId": self.collection_view_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableKeySet":
        """Build from either the camelCase wire form or snake_case keys."""
        return cls(
            collection_id=data.get("collectionId") or data.get("collection_id") or "",
            collection_view_id=data.get("collectionViewId") or data.get("collection_view_id") or "",
        )


__all__ = ["TableKeySet"]
