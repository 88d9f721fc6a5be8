# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest

import pytest

from notional.data._codec import STAND_IN_TEXT
from notional.data._transactions import PropertyWrite, _TransactionBuilder
from tests.unit.test_helpers import COLLECTION_ID, KEYS, USER_ID, VIEW_ID, make_transport, submitted_transactions

NOW_S = 1600000000.0
NOW_MS = 1600000000000


def _paths(transaction):
    return [(op.table, tuple(op.path), op.command) for op in transaction.operations]


class TestInsertBatch(unittest.TestCase):
    def setUp(self):
        self.transport = make_transport()
        self.builder = _TransactionBuilder(self.transport, USER_ID, KEYS, clock=lambda: NOW_S)

    def test_lifecycle_order(self):
        transactions, (block_id,) = self.builder.build_insert([[PropertyWrite("title", "title", "hello")]])
        lifecycle = transactions[0]
        self.assertEqual(
            _paths(lifecycle),
            [
                ("block", (), "set"),
                ("collection_view", ("page_sort",), "listAfter"),
                ("block", (), "update"),
                ("block", ("created_by_id",), "set"),
                ("block", ("created_by_table",), "set"),
                ("block", ("created_time",), "set"),
                ("block", ("last_edited_time",), "set"),
                ("block", ("last_edited_by_id",), "set"),
                ("block", ("last_edited_by_table",), "set"),
            ],
        )
        ops = lifecycle.operations
        self.assertEqual(ops[0].args, {"type": "page", "id": block_id, "version": 1})
        self.assertEqual(ops[1].id, VIEW_ID)
        self.assertEqual(ops[1].args, {"id": block_id})
        self.assertEqual(ops[2].args, {"parent_id": COLLECTION_ID, "parent_table": "collection", "alive": True})
        self.assertEqual(ops[3].args, USER_ID)
        self.assertEqual(ops[4].args, "notion_user")
        self.assertEqual(ops[5].args, NOW_MS)
        self.assertEqual(ops[6].args, NOW_MS)

    def test_lifecycle_precedes_property_writes(self):
        rows = [
            [PropertyWrite("title", "title", "one"), PropertyWrite("done", "checkbox", True)],
            [PropertyWrite("title", "title", "two")],
        ]
        transactions, block_ids = self.builder.build_insert(rows)
        self.assertEqual(len(transactions), 3)
        self.assertEqual(len(block_ids), 2)
        self.assertEqual(len(set(block_ids)), 2)
        lifecycle_ids = {op.id for op in transactions[0].operations if op.table == "block"}
        self.assertEqual(lifecycle_ids, set(block_ids))
        first_row = transactions[1].operations
        self.assertEqual([op.id for op in first_row], [block_ids[0], block_ids[0]])
        self.assertEqual(first_row[0].path, ["properties", "title"])
        self.assertEqual(first_row[0].args, [["one"]])
        self.assertEqual(first_row[1].args, [["Yes"]])
        self.assertEqual(transactions[2].operations[0].id, block_ids[1])

    def test_insert_submits_one_batch(self):
        self.builder.insert([[PropertyWrite("own", "person", "u1")]])
        self.transport._submit_transaction.assert_called_once()
        batch = submitted_transactions(self.transport)
        self.assertEqual(len(batch), 2)
        self.assertEqual(batch[1]["operations"][0]["args"], [[STAND_IN_TEXT, [["u", "u1"]]]])


class TestUpdateAndDelete(unittest.TestCase):
    def setUp(self):
        self.transport = make_transport()
        self.builder = _TransactionBuilder(self.transport, USER_ID, KEYS, clock=lambda: NOW_S)

    def test_update_stamps_after_property_writes(self):
        (transaction,) = self.builder.build_update(
            [("b1", [PropertyWrite("done", "checkbox", False), PropertyWrite("tags", "multi_select", ["a"])])]
        )
        self.assertEqual(
            _paths(transaction),
            [
                ("block", ("properties", "done"), "set"),
                ("block", ("properties", "tags"), "set"),
                ("block", ("last_edited_time",), "set"),
            ],
        )
        self.assertIsNone(transaction.operations[0].args)
        self.assertEqual(transaction.operations[2].args, NOW_MS)

    def test_delete_is_soft(self):
        transactions = self.builder.build_delete(["b1", "b2"])
        self.assertEqual(len(transactions), 2)
        archive, stamp = transactions[0].operations
        self.assertEqual(archive.command, "update")
        self.assertEqual(archive.path, [])
        self.assertEqual(archive.args, {"parent_id": COLLECTION_ID, "parent_table": "collection", "alive": False})
        self.assertEqual(stamp.path, ["last_edited_time"])

    def test_schema_replace(self):
        schema = {"title": {"name": "Name", "type": "title"}}
        (transaction,) = self.builder.build_schema_replace(schema)
        (op,) = transaction.operations
        self.assertEqual(
            op.to_dict(),
            {"id": COLLECTION_ID, "table": "collection", "path": [], "command": "update", "args": {"schema": schema}},
        )

    def test_title_update_passes_lines_through(self):
        (transaction,) = self.builder.build_title_update("b9", [["line", [["b"]]]])
        self.assertEqual(transaction.operations[0].path, ["properties", "title"])
        self.assertEqual(transaction.operations[0].args, [["line", [["b"]]]])

    def test_title_update_wraps_plain_text(self):
        (transaction,) = self.builder.build_title_update("b9", "Shipped")
        self.assertEqual(transaction.operations[0].args, [["Shipped"]])

    def test_submit_returns_transport_response(self):
        self.transport._submit_transaction.return_value = {"ok": 1}
        self.assertEqual(self.builder.delete(["b1"]), {"ok": 1})


def test_table_operations_need_keys():
    builder = _TransactionBuilder(make_transport(), USER_ID)
    with pytest.raises(ValueError):
        builder.build_insert([[PropertyWrite("title", "title", "x")]])
    with pytest.raises(ValueError):
        builder.build_delete(["b1"])
    assert builder.build_title_update("b1", "ok")
