"""Tests for the publish, unpublish and sync command flows."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from content_cli.client import ContentHubApiError
from content_cli.commands import BulkOptions, SyncOptions, publish, sync, unpublish
from content_cli.commands.common import get_content_items, unique_items
from content_cli.lib import FileLog
from content_cli.models import (
    ContentItem,
    ContentItemPublishingStatus,
    ContentItemStatus,
    CreatedJob,
    PublishingJob,
    PublishingJobState,
    SyncJob,
    SyncJobStatus,
)
from content_cli.publishing import (
    ContentItemPublishingJobService,
    ContentItemPublishingService,
    ContentItemSyncService,
    ContentItemUnpublishingService,
)


def always_yes(question: str) -> str:
    return "y"


def comments(log: FileLog) -> list[str]:
    return [item.data for item in log.items if item.comment]


class TestGetContentItems:

    @pytest.mark.asyncio
    async def test_by_id_skips_missing_and_inactive(self, mock_client):
        async def get(content_item_id):
            if content_item_id == "missing":
                raise ContentHubApiError(404, "Not found")
            status = ContentItemStatus.ARCHIVED if content_item_id == "old" else ContentItemStatus.ACTIVE
            return ContentItem(id=content_item_id, status=status)

        mock_client.get_content_item = AsyncMock(side_effect=get)

        selection = await get_content_items(mock_client, BulkOptions(ids=["a", "missing", "old"]))

        assert [item.id for item in selection.items] == ["a"]
        assert selection.missing_content

    @pytest.mark.asyncio
    async def test_by_repository(self, mock_client):
        mock_client.list_content_items = AsyncMock(return_value=[ContentItem(id="a")])

        selection = await get_content_items(mock_client, BulkOptions(repo_id="repo-1"))

        assert [item.id for item in selection.items] == ["a"]
        assert not selection.missing_content
        mock_client.list_content_items.assert_awaited_once_with(
            repository_id="repo-1", folder_id=None, status=ContentItemStatus.ACTIVE
        )

    @pytest.mark.asyncio
    async def test_hub_wide_listing_is_rejected(self, mock_client):
        with pytest.raises(ValueError):
            await get_content_items(mock_client, BulkOptions())

    def test_unique_items_keeps_first(self):
        items = [ContentItem(id="a", label="first"), ContentItem(id="b"), ContentItem(id="a", label="second")]

        assert [(item.id, item.label) for item in unique_items(items)] == [("a", "first"), ("b", "")]


class TestPublishCommand:

    @pytest.mark.asyncio
    async def test_publishes_and_checks_jobs(self, mock_client, fast_queue, fast_policy, make_item):
        mock_client.publish_content_item = AsyncMock(side_effect=lambda item: f"loc/{item.id}")
        mock_client.get_publishing_job_by_location = AsyncMock(
            side_effect=lambda location: PublishingJob(id=f"job-{location[4:]}")
        )

        async def get_job(job_id):
            state = PublishingJobState.FAILED if job_id == "job-b" else PublishingJobState.COMPLETED
            return PublishingJob(id=job_id, state=state, publishErrorStatus="INVALID")

        mock_client.get_publishing_job = AsyncMock(side_effect=get_job)
        log = FileLog(title=publish.LOG_TITLE)

        failures = await publish.process_items(
            mock_client,
            [make_item("a"), make_item("b")],
            BulkOptions(ids=["a", "b"], force=True),
            log,
            publishing_service=ContentItemPublishingService(mock_client, fast_queue()),
            job_service=ContentItemPublishingJobService(mock_client, fast_queue(), fast_policy),
        )

        assert failures == 1
        assert "Failed to publish Item b: INVALID" in comments(log)
        assert comments(log)[-1] == "Publishing complete with 1 failure"

    @pytest.mark.asyncio
    async def test_failed_start_is_logged_and_counted(self, mock_client, fast_queue, make_item):
        mock_client.publish_content_item = AsyncMock(side_effect=ContentHubApiError(409, "Locked"))
        log = FileLog(title=publish.LOG_TITLE)
        ask = MagicMock(side_effect=["y", "n"])

        failures = await publish.process_items(
            mock_client,
            [make_item("a")],
            BulkOptions(ids=["a"]),
            log,
            ask=ask,
            publishing_service=ContentItemPublishingService(mock_client, fast_queue()),
        )

        assert failures == 1
        assert log.result_code() == "WARNING"
        assert ask.call_count == 2
        mock_client.get_publishing_job.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_declined_confirmation_publishes_nothing(self, mock_client, make_item):
        log = FileLog(title=publish.LOG_TITLE)

        failures = await publish.process_items(
            mock_client, [make_item("a")], BulkOptions(ids=["a"]), log, ask=lambda question: "n"
        )

        assert failures == 0
        mock_client.publish_content_item.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_nothing_found(self, mock_client, capsys):
        failures = await publish.process_items(mock_client, [], BulkOptions(), FileLog())

        assert failures == 0
        assert "Nothing found to publish" in capsys.readouterr().out


class TestUnpublishCommand:

    @pytest.mark.asyncio
    async def test_only_published_items_are_unpublished(self, mock_client, fast_queue, make_item):
        items = [
            make_item("a", publishing_status=ContentItemPublishingStatus.LATEST),
            make_item("b", publishing_status=ContentItemPublishingStatus.UNPUBLISHED),
        ]
        log = FileLog(title=unpublish.LOG_TITLE)

        failures = await unpublish.process_items(
            mock_client,
            items,
            BulkOptions(force=True, repo_id="repo-1"),
            log,
            unpublishing_service=ContentItemUnpublishingService(mock_client, fast_queue()),
        )

        assert failures == 0
        mock_client.unpublish_content_item.assert_awaited_once_with(items[0])
        assert 'Initiated unpublish for "Item a"' in comments(log)

    @pytest.mark.asyncio
    async def test_nothing_to_unpublish(self, mock_client, make_item):
        log = FileLog(title=unpublish.LOG_TITLE)

        failures = await unpublish.process_items(
            mock_client,
            [make_item("a", publishing_status=ContentItemPublishingStatus.NONE)],
            BulkOptions(force=True, ids=["a"]),
            log,
        )

        assert failures == 0
        assert comments(log) == ["Found 0 items to unpublish."]
        mock_client.unpublish_content_item.assert_not_awaited()


class TestSyncCommand:

    @pytest.mark.asyncio
    async def test_counts_failed_jobs(self, fast_queue, fast_policy, make_item):
        hub = MagicMock()
        hub.create_deep_sync_job = AsyncMock(
            side_effect=lambda request: CreatedJob(job_id=f"job-{request.input.root_content_item_ids[0]}")
        )

        async def get_job(job_id):
            status = SyncJobStatus.FAILED if job_id == "job-b" else SyncJobStatus.COMPLETED
            return SyncJob(id=job_id, status=status, errors=[{"message": "schema"}])

        hub.get_job = AsyncMock(side_effect=get_job)
        log = FileLog(title=sync.LOG_TITLE)

        failures = await sync.process_items(
            hub,
            [make_item("a"), make_item("b"), make_item("a")],
            SyncOptions(force=True, hub_id="src", destination_hub_id="dest"),
            log,
            sync_service=ContentItemSyncService(fast_queue(concurrency=1), fast_policy),
        )

        assert failures == 1
        assert comments(log)[0] == "Found 2 items to sync (ignoring 1 duplicate item)"
        assert 'Failed content item sync job job-b: [{"message": "schema"}]' in comments(log)
        assert comments(log)[-1] == "Sync complete with 1 failed job - check logs for details"

    @pytest.mark.asyncio
    async def test_run_requires_destination(self, mock_client):
        with pytest.raises(ValueError):
            await sync.run(mock_client, SyncOptions(ids=["a"], hub_id="src"))
