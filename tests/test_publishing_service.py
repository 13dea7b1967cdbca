"""Tests for ContentItemPublishingService and ContentItemPublishingJobService."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from content_cli.client import ContentHubApiError
from content_cli.models import PublishingJob, PublishingJobState
from content_cli.publishing import ContentItemPublishingJobService, ContentItemPublishingService


def job(job_id: str, state: PublishingJobState = PublishingJobState.PREPARING) -> PublishingJob:
    return PublishingJob(id=job_id, state=state)


@pytest.fixture
def publishing_client(mock_client):
    """Publishing returns a location per item; the location resolves to a job."""
    jobs = {"item-1": "J1", "item-2": "J2", "item-3": "J3"}

    async def publish(item):
        return f"https://api.test/publishing-jobs/{jobs[item.id]}"

    async def by_location(location):
        return job(location.rsplit("/", 1)[-1])

    mock_client.publish_content_item = AsyncMock(side_effect=publish)
    mock_client.get_publishing_job_by_location = AsyncMock(side_effect=by_location)
    return mock_client


class TestContentItemPublishingService:

    @pytest.mark.asyncio
    async def test_publish_calls_on_started_with_job(self, publishing_client, fast_queue, make_item):
        service = ContentItemPublishingService(publishing_client, fast_queue())
        item = make_item("item-1")
        on_started = MagicMock()

        service.publish(item, on_started)
        await service.on_idle()

        on_started.assert_called_once()
        called_item, handle = on_started.call_args.args
        assert called_item is item
        assert handle.id == "J1"
        assert [j.id for j in service.publish_jobs] == ["J1"]

    @pytest.mark.asyncio
    async def test_handles_multiple_publishes(self, publishing_client, fast_queue, make_item):
        service = ContentItemPublishingService(publishing_client, fast_queue())
        on_started = MagicMock()

        service.publish(make_item("item-1"), on_started)
        service.publish(make_item("item-2"), on_started)
        await service.on_idle()

        assert on_started.call_count == 2
        assert sorted(j.id for j in service.publish_jobs) == ["J1", "J2"]

    @pytest.mark.asyncio
    async def test_failed_start_surfaces_on_its_future_only(self, publishing_client, fast_queue, make_item):
        async def publish(item):
            if item.id == "item-2":
                raise ContentHubApiError(409, "Item is locked")
            return f"https://api.test/publishing-jobs/J-{item.id}"

        publishing_client.publish_content_item = AsyncMock(side_effect=publish)
        service = ContentItemPublishingService(publishing_client, fast_queue())
        on_started = MagicMock()

        ok = service.publish(make_item("item-1"), on_started)
        failed = service.publish(make_item("item-2"), on_started)
        await service.on_idle()

        assert ok.result().id == "J-item-1"
        with pytest.raises(ContentHubApiError):
            await failed
        on_started.assert_called_once()
        assert len(service.publish_jobs) == 1

    @pytest.mark.asyncio
    async def test_failed_jobs_filters_recorded_jobs(self, publishing_client, fast_queue, make_item):
        publishing_client.get_publishing_job_by_location = AsyncMock(side_effect=[
            job("J1", PublishingJobState.PREPARING),
            job("J2", PublishingJobState.FAILED),
        ])
        service = ContentItemPublishingService(publishing_client, fast_queue(concurrency=1))

        service.publish(make_item("item-1"), MagicMock())
        service.publish(make_item("item-2"), MagicMock())
        await service.on_idle()

        assert len(service.publish_jobs) == 2
        assert [j.id for j in service.failed_jobs] == ["J2"]

    def test_uses_default_queue(self, publishing_client):
        service = ContentItemPublishingService(publishing_client)

        assert service.queue.concurrency == 4
        assert service.queue.burst_interval_cap == 70


class TestContentItemPublishingJobService:

    @pytest.mark.asyncio
    async def test_calls_callback_when_job_completes(self, mock_client, fast_queue, fast_policy):
        mock_client.get_publishing_job = AsyncMock(return_value=job("job1", PublishingJobState.COMPLETED))
        service = ContentItemPublishingJobService(mock_client, fast_queue(), fast_policy)
        callback = MagicMock()

        service.check(job("job1"), callback)
        await service.on_idle()

        callback.assert_called_once()
        assert callback.call_args.args[0].state == PublishingJobState.COMPLETED
        assert service.failed_jobs == []

    @pytest.mark.asyncio
    async def test_calls_callback_when_job_fails(self, mock_client, fast_queue, fast_policy):
        mock_client.get_publishing_job = AsyncMock(return_value=job("job1", PublishingJobState.FAILED))
        service = ContentItemPublishingJobService(mock_client, fast_queue(), fast_policy)
        callback = MagicMock()

        service.check(job("job1"), callback)
        await service.on_idle()

        assert callback.call_args.args[0].state == PublishingJobState.FAILED
        assert [j.id for j in service.failed_jobs] == ["job1"]

    @pytest.mark.asyncio
    async def test_retries_until_job_is_done(self, mock_client, fast_queue, fast_policy):
        mock_client.get_publishing_job = AsyncMock(side_effect=[
            job("job1", PublishingJobState.PREPARING),
            job("job1", PublishingJobState.COMPLETED),
        ])
        service = ContentItemPublishingJobService(mock_client, fast_queue(), fast_policy)
        callback = MagicMock()

        service.check(job("job1"), callback)
        await service.on_idle()

        callback.assert_called_once()
        assert mock_client.get_publishing_job.await_count == 2
        assert service.size == 0
        assert service.pending == 0

    @pytest.mark.asyncio
    async def test_async_callback_is_awaited(self, mock_client, fast_queue, fast_policy):
        mock_client.get_publishing_job = AsyncMock(return_value=job("job1", PublishingJobState.COMPLETED))
        service = ContentItemPublishingJobService(mock_client, fast_queue(), fast_policy)
        seen = []

        async def callback(resolved):
            await asyncio.sleep(0)
            seen.append(resolved.id)

        service.check(job("job1"), callback)
        await service.on_idle()

        assert seen == ["job1"]


def test_unrecognised_publishing_state_is_not_terminal():
    publishing_job = PublishingJob.model_validate({"id": "P1", "state": "SCHEDULED"})

    assert publishing_job.state == "SCHEDULED"
    assert not publishing_job.is_terminal
    assert not publishing_job.is_failed


@pytest.mark.asyncio
async def test_unrecognised_publishing_state_keeps_polling(mock_client, fast_queue, fast_policy):
    mock_client.get_publishing_job = AsyncMock(side_effect=[
        PublishingJob.model_validate({"id": "job1", "state": "SCHEDULED"}),
        job("job1", PublishingJobState.COMPLETED),
    ])
    service = ContentItemPublishingJobService(mock_client, fast_queue(), fast_policy)
    callback = MagicMock()

    service.check(job("job1"), callback)
    await service.on_idle()

    assert mock_client.get_publishing_job.await_count == 2
    assert callback.call_args.args[0].state is PublishingJobState.COMPLETED
