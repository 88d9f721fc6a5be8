# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from notional.operations.block import Block
from tests.unit.test_helpers import USER_ID, make_transport, submitted_transactions


def test_update_sets_title_and_stamps_edit_time(sample_block_id):
    transport = make_transport()
    Block(sample_block_id, transport, USER_ID).update("Shipped")

    (transaction,) = submitted_transactions(transport)
    title, stamp = transaction["operations"]
    assert title["id"] == sample_block_id
    assert title["path"] == ["properties", "title"]
    assert title["args"] == [["Shipped"]]
    assert stamp["path"] == ["last_edited_time"]
    assert isinstance(stamp["args"], int)


def test_update_accepts_formatted_lines(sample_block_id):
    transport = make_transport()
    lines = [["Release "], ["notes", [["a", "https://example.com/notes"]]]]
    Block(sample_block_id, transport, USER_ID).update(lines)

    (transaction,) = submitted_transactions(transport)
    assert transaction["operations"][0]["args"] == lines


def test_block_id_is_required():
    with pytest.raises(ValueError):
        Block("", make_transport(), USER_ID)
