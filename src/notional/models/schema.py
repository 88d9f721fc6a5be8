# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Column metadata models for Notional.

Provides the closed :class:`ColumnType` enumeration and the
:class:`ColumnSchema` entry describing one visible column of a collection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ColumnType(str, Enum):
    """Column types with a dedicated encode/decode rule."""

    TEXT = "text"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    FILE = "file"
    DATE = "date"
    MULTI_SELECT = "multi_select"
    CHECKBOX = "checkbox"
    USER = "user"
    PERSON = "person"
    CREATED_BY = "created_by"
    CREATED_TIME = "created_time"
    LAST_EDITED_BY = "last_edited_by"
    LAST_EDITED_TIME = "last_edited_time"
    ID = "id"

    @classmethod
    def parse(cls, value: Any) -> Optional["ColumnType"]:
        """Return the member for ``value``, or None for types without a dedicated rule."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# Types whose values come from block metadata and are never written as properties.
METADATA_COLUMN_TYPES = frozenset(
    {
        ColumnType.CREATED_BY,
        ColumnType.CREATED_TIME,
        ColumnType.LAST_EDITED_BY,
        ColumnType.LAST_EDITED_TIME,
        ColumnType.ID,
    }
)


@dataclass
class ColumnSchema:
    """
    One visible column of a collection.

    :param internal_id: Property key used in block ``properties`` (e.g. ``"title"``, ``"a@Vb"``).
    :type internal_id: str
    :param display_name: Human-readable column name, unique within the table.
    :type display_name: str
    :param type: Raw column type string as reported by the backend.
    :type type: str
    :param extra: Remaining raw attributes (select options, formats, ...).
    :type extra: dict[str, Any]
    """

    internal_id: str
    display_name: str
    type: str
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def column_type(self) -> Optional[ColumnType]:
        return ColumnType.parse(self.type)

    @property
    def is_writable(self) -> bool:
        return self.column_type not in METADATA_COLUMN_TYPES

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.internal_id, "type": self.type, **self.extra}

    @classmethod
    def from_api_response(cls, internal_id: str, raw: Dict[str, Any]) -> Optional["ColumnSchema"]:
        """
        Build an entry from one raw schema value.

        :return: The entry, or None for hidden columns that carry no name.
        """
        if not isinstance(raw, dict):
            return None
        name = raw.get("name")
        if name is None:
            return None
        extra = {k: v for k, v in raw.items() if k not in ("name", "type")}
        return cls(internal_id=internal_id, display_name=name, type=raw.get("type", ""), extra=extra)


__all__ = ["ColumnType", "ColumnSchema", "METADATA_COLUMN_TYPES"]
