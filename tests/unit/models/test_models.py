# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import uuid

import pytest

from notional.models.operation import Operation, Transaction
from notional.models.schema import METADATA_COLUMN_TYPES, ColumnSchema, ColumnType
from notional.models.table_keys import TableKeySet
from notional.models.user import User


class TestColumnSchema:
    def test_unknown_type_has_no_column_type(self):
        assert ColumnType.parse("formula") is None
        assert ColumnSchema("f", "Formula", "formula").column_type is None

    def test_metadata_columns_are_read_only(self):
        assert ColumnSchema("c", "Created", "created_time").is_writable is False
        assert ColumnSchema("t", "Name", "title").is_writable is True
        assert ColumnSchema("d", "Done", "checkbox").is_writable is True
        assert len(METADATA_COLUMN_TYPES) == 5

    def test_from_api_response(self):
        column = ColumnSchema.from_api_response("a@Vb", {"name": "When", "type": "date", "date_format": "relative"})
        assert column.internal_id == "a@Vb"
        assert column.column_type is ColumnType.DATE
        assert column.extra == {"date_format": "relative"}

    def test_unnamed_columns_are_skipped(self):
        assert ColumnSchema.from_api_response("x", {"type": "text"}) is None
        assert ColumnSchema.from_api_response("x", None) is None


class TestTableKeySet:
    def test_wire_form(self):
        keys = TableKeySet("c1", "v1")
        assert keys.to_dict() == {"collectionId": "c1", "collectionViewId": "v1"}
        assert TableKeySet.from_dict(keys.to_dict()) == keys
        assert TableKeySet.from_dict({"collection_id": "c1", "collection_view_id": "v1"}) == keys

    def test_both_ids_are_required(self):
        with pytest.raises(ValueError):
            TableKeySet("c1", "")
        with pytest.raises(ValueError):
            TableKeySet.from_dict({"collectionId": "c1"})


class TestUser:
    def test_from_api_response(self):
        user = User.from_api_response(
            {"role": "reader", "value": {"id": "u1", "given_name": "Ada", "family_name": "Lovelace", "email": "a@x"}}
        )
        assert user.full_name == "Ada Lovelace"
        assert user.to_dict()["email"] == "a@x"
        assert user.photo_url is None

    def test_records_without_value_are_skipped(self):
        assert User.from_api_response({"role": "none"}) is None
        assert User.from_api_response({"value": {"given_name": "No id"}}) is None


class TestTransaction:
    def test_to_dict(self):
        op = Operation(id="b1", table="block", path=["properties", "title"], command="set", args=[["x"]])
        tx = Transaction(operations=[op])
        data = tx.to_dict()
        uuid.UUID(data["id"])
        assert data["operations"] == [
            {"id": "b1", "table": "block", "path": ["properties", "title"], "command": "set", "args": [["x"]]}
        ]

    def test_transaction_ids_are_unique(self):
        assert Transaction().id != Transaction().id
