# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for Notional tests.
"""

import pytest

from notional.core.config import NotionalConfig


@pytest.fixture
def test_config():
    """Test configuration with safe defaults."""
    return NotionalConfig(
        base_url="https://notion.example",
        http_retries=1,
        http_backoff=0.1,
        http_timeout=5,
    )


@pytest.fixture
def sample_page_url():
    """Page URL with a workspace segment and a slugged title."""
    return "https://www.notion.so/acme/Roadmap-481ef7846c1a4f0c8f30e3a3911d9129?v=0b2f1c"


@pytest.fixture
def sample_block_id():
    return "11111111-2222-3333-4444-555555555555"
