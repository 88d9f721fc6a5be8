# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Block handle: edits to one block outside any table."""

from __future__ import annotations

from typing import Any, Dict, List, Union, TYPE_CHECKING

from ..data._transactions import _TransactionBuilder

if TYPE_CHECKING:
    from ..data._transport import _NotionTransport


class Block:
    """
    A single block addressed by id.

    Example::

        client.block("382c5059-3aa8-4cdd-a576-284ef11403b2").update("Shipped")
    """

    def __init__(self, block_id: str, transport: "_NotionTransport", user_id: str) -> None:
        if not block_id:
            raise ValueError("block_id is required.")
        self.id = block_id
        self._transactions = _TransactionBuilder(transport, user_id)

    def update(self, content: Union[str, List[List[Any]]]) -> Dict[str, Any]:
        """
        Replace the block's title text.

        :param content: Plain text, or title lines already in ``[[text], ...]`` form.
        :return: The ``submitTransaction`` response.
        """
        return self._transactions.set_title(self.id, content)


__all__ = ["Block"]
