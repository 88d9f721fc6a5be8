# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Workspace user directory used to resolve person references."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..models.user import User

if TYPE_CHECKING:
    from ._transport import _NotionTransport

logger = logging.getLogger(__name__)


def _member_ids(load_user_content: Dict[str, Any]) -> List[str]:
    spaces = ((load_user_content.get("recordMap") or {}).get("space") or {}).values()
    seen: Dict[str, None] = {}
    for space in spaces:
        value = space.get("value") if isinstance(space, dict) else None
        for permission in (value or {}).get("permissions") or []:
            user_id = permission.get("user_id") if isinstance(permission, dict) else None
            if user_id:
                seen.setdefault(user_id, None)
    return list(seen)


class _UserDirectory:
    """
    Users visible to the authenticated account, fetched once and cached.

    An empty result is not cached, so the next call fetches again.
    """

    def __init__(self, transport: "_NotionTransport") -> None:
        self._transport = transport
        self._users: Optional[List[User]] = None

    def list_users(self) -> List[User]:
        if self._users:
            return list(self._users)

        user_ids = _member_ids(self._transport._load_user_content())
        if not user_ids:
            logger.debug("No workspace members found")
            return []

        response = self._transport._sync_record_values("notion_user", user_ids)
        records = ((response.get("recordMap") or {}).get("notion_user") or {}).values()
        users = [u for u in (User.from_api_response(r) for r in records) if u is not None]
        if users:
            self._users = users
        return list(users)

    def resolve_id(self, value: Any) -> Any:
        """
        Map a user id or ``"First Last"`` name to a user id.

        Unknown values come back unchanged; lists are resolved element-wise.
        """
        if isinstance(value, (list, tuple)):
            return [self.resolve_id(v) for v in value]
        if not isinstance(value, str):
            return value
        users = self.list_users()
        for user in users:
            if user.id == value:
                return value
        lowered = value.lower()
        for user in users:
            if user.full_name.lower() == lowered:
                return user.id
        return value


__all__ = ["_UserDirectory"]
