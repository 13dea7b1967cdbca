"""Shared fixtures for the content CLI tests."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

from content_cli.config import clear_settings_cache
from content_cli.models import ContentItem, ContentItemPublishingStatus
from content_cli.queue import BurstableQueue, PollPolicy


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep DC_CLI_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("DC_CLI_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def fast_queue():
    """Queue factory without start spacing, so tests are not paced at 1/s."""
    def make(**kwargs) -> BurstableQueue:
        kwargs.setdefault("min_time_ms", 0)
        return BurstableQueue(**kwargs)
    return make


@pytest.fixture
def fast_policy():
    return PollPolicy(delay_ms=1)


@pytest.fixture
def make_item():
    def make(
        content_item_id: str,
        label: str = "",
        publishing_status: ContentItemPublishingStatus = ContentItemPublishingStatus.LATEST,
    ) -> ContentItem:
        return ContentItem(
            id=content_item_id,
            label=label or f"Item {content_item_id}",
            publishing_status=publishing_status,
        )
    return make


@pytest.fixture
def mock_client():
    """Management API client with every network call mocked."""
    client = MagicMock()
    client.publish_content_item = AsyncMock()
    client.get_publishing_job_by_location = AsyncMock()
    client.get_publishing_job = AsyncMock()
    client.unpublish_content_item = AsyncMock(return_value=None)
    client.get_content_item = AsyncMock()
    client.list_content_items = AsyncMock(return_value=[])
    return client
