# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class User:
    """
    A member of the workspace, as returned by ``syncRecordValues``.

    Example::

        users = table.get_users()
        print([u.full_name for u in users])
    """

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "photo_url": self.photo_url,
        }

    @classmethod
    def from_api_response(cls, record: Dict[str, Any]) -> Optional["User"]:
        """Build a user from a ``notion_user`` record map entry; None when it has no value."""
        value = (record or {}).get("value") if isinstance(record, dict) else None
        if not isinstance(value, dict) or not value.get("id"):
            return None
        return cls(
            id=value["id"],
            first_name=value.get("given_name"),
            last_name=value.get("family_name"),
            email=value.get("email"),
            photo_url=value.get("profile_photo"),
        )


__all__ = ["User"]
