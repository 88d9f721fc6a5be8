# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Unit tests for NotionalClient context manager support."""

import unittest
from unittest.mock import MagicMock

import requests

from notional.client import NotionalClient
from notional.core.config import NotionalConfig
from tests.unit.test_helpers import USER_ID


class TestContextManager(unittest.TestCase):
    """Test context manager support on NotionalClient."""

    def setUp(self):
        self.config = NotionalConfig(base_url="https://notion.example")

    def test_enter_creates_session(self):
        client = NotionalClient("token", USER_ID, self.config)
        self.assertIsNone(client._session)

        result = client.__enter__()

        self.assertIsInstance(client._session, requests.Session)
        self.assertTrue(client._owns_session)
        self.assertIs(result, client)

    def test_exit_closes_session(self):
        client = NotionalClient("token", USER_ID, self.config)
        client.__enter__()
        mock_session = MagicMock(spec=requests.Session)
        client._session = mock_session

        client.__exit__(None, None, None)

        mock_session.close.assert_called()
        self.assertIsNone(client._session)
        self.assertFalse(client._owns_session)

    def test_transport_shares_the_session(self):
        with NotionalClient("token", USER_ID, self.config) as client:
            transport = client._get_transport()
            self.assertIs(transport._http._session, client._session)

        self.assertIsNone(client._session)
        self.assertIsNone(client._transport)

    def test_close_idempotent(self):
        client = NotionalClient("token", USER_ID, self.config)
        client.__enter__()

        client.close()
        client.close()

    def test_close_without_enter(self):
        client = NotionalClient("token", USER_ID, self.config)
        client._get_transport()

        client.close()

        self.assertIsNone(client._transport)
        self.assertIsNone(client._session)

    def test_table_cache_survives_close(self):
        cache = {"https://notion.example/x": {"collectionId": "c", "collectionViewId": "v"}}
        client = NotionalClient("token", USER_ID, self.config, cache=cache)
        client.close()
        self.assertIn("https://notion.example/x", client.get_cached_table_keys())

    def test_exception_inside_block_still_closes(self):
        with self.assertRaises(RuntimeError):
            with NotionalClient("token", USER_ID, self.config) as client:
                raise RuntimeError("boom")
        self.assertIsNone(client._session)
