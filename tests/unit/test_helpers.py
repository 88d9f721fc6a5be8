# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared test utilities for unit tests.

Provides canned Notion API payloads and a recording transport so tests can
drive tables without any network access.
"""

import json
import types
from unittest.mock import MagicMock

from notional.data._transport import _NotionTransport
from notional.models.table_keys import TableKeySet

COLLECTION_ID = "c0000000-0000-0000-0000-000000000001"
VIEW_ID = "v0000000-0000-0000-0000-000000000002"
USER_ID = "u0000000-0000-0000-0000-000000000003"
KEYS = TableKeySet(COLLECTION_ID, VIEW_ID)

# Raw schema as Notion returns it: internal id -> {name, type}
RAW_SCHEMA = {
    "title": {"name": "Name", "type": "title"},
    "tags": {"name": "Tags", "type": "multi_select"},
    "done": {"name": "Done", "type": "checkbox"},
    "site": {"name": "Site", "type": "url"},
    "when": {"name": "When", "type": "date"},
    "own": {"name": "Owner", "type": "person"},
    "ctm": {"name": "Created", "type": "created_time"},
    "hid": {"type": "text"},
}


def make_block(block_id, properties=None, **fields):
    value = {"id": block_id, "type": "page", "alive": True, **fields}
    if properties is not None:
        value["properties"] = properties
    return {"role": "editor", "value": value}


def make_query_response(rows, schema=None, collection_id=COLLECTION_ID):
    """
    Build a ``queryCollection`` response.

    :param rows: list of ``(block_id, properties)`` or ``(block_id, properties, extra_fields)``.
    """
    blocks = {}
    ids = []
    for row in rows:
        block_id, properties = row[0], row[1]
        extra = row[2] if len(row) > 2 else {}
        ids.append(block_id)
        blocks[block_id] = make_block(block_id, properties, **extra)
    return {
        "result": {"type": "table", "blockIds": ids, "total": len(ids)},
        "recordMap": {
            "block": blocks,
            "collection": {
                collection_id: {
                    "role": "editor",
                    "value": {"id": collection_id, "schema": RAW_SCHEMA if schema is None else schema},
                }
            },
            "space": {},
        },
    }


def make_user_content(*user_ids):
    return {
        "recordMap": {
            "space": {
                "s1": {"value": {"id": "s1", "permissions": [{"role": "editor", "user_id": uid} for uid in user_ids]}}
            }
        }
    }


def make_user_records(*users):
    """``users`` are ``(id, given_name, family_name)`` tuples."""
    return {
        "recordMap": {
            "notion_user": {
                uid: {"value": {"id": uid, "given_name": first, "family_name": last, "email": f"{first}@example.com"}}
                for uid, first, last in users
            }
        }
    }


def make_transport(query_response=None):
    """MagicMock standing in for the transport, with a default query response."""
    transport = MagicMock(spec=_NotionTransport)
    transport._query_collection.return_value = query_response or make_query_response([])
    transport._submit_transaction.return_value = {}
    return transport


def submitted_transactions(transport):
    """Transactions passed to the most recent ``_submit_transaction`` call."""
    (transactions,), _ = transport._submit_transaction.call_args
    return transactions


class DummyHTTP:
    """Stand-in for ``_HttpClient`` returning pre-configured responses.

    Args:
        responses: List of (status_code, headers, body) tuples to return in sequence.

    Attributes:
        calls: List of (method, url, kwargs) tuples recording all requests made.
    """

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def _request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if not self._responses:
            raise AssertionError("No more dummy responses configured")
        status, headers, body = self._responses.pop(0)
        resp = types.SimpleNamespace()
        resp.status_code = status
        resp.headers = headers
        if isinstance(body, dict):
            resp.text = json.dumps(body)
            resp.json = lambda: body
        else:
            resp.text = body or ""

            def json_fail():
                raise ValueError("non-json")

            resp.json = json_fail
        return resp

    def close(self):
        pass


class TestableTransport(_NotionTransport):
    """Transport with mocked HTTP."""

    def __init__(self, responses, config=None):
        super().__init__("test-token", config)
        self._http = DummyHTTP(responses)
