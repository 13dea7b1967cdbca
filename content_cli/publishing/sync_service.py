"""Deep sync of content items to another hub."""

import asyncio
from typing import Callable, Optional, Protocol

from content_cli.lib import job_logger
from content_cli.models import ContentItem, CreatedJob, DeepSyncJobRequest, SyncJob, state_value
from content_cli.queue import AsyncJobPoller, BurstableQueue, PollPolicy


class SyncJobSource(Protocol):
    """The source hub: creates deep sync jobs and reports their status."""

    async def create_deep_sync_job(self, request: DeepSyncJobRequest) -> CreatedJob: ...

    async def get_job(self, job_id: str) -> SyncJob: ...


class ContentItemSyncService:
    """Creates deep sync jobs one at a time and waits for each to finish."""

    def __init__(self, queue: Optional[BurstableQueue] = None, policy: Optional[PollPolicy] = None):
        # Sync jobs are submitted strictly one at a time
        self.queue = queue or BurstableQueue(concurrency=1)
        self.poller = AsyncJobPoller(policy)
        self._failed_jobs: list[SyncJob] = []

    def sync(
        self,
        destination_hub_id: str,
        hub: SyncJobSource,
        content_item: ContentItem,
        on_complete: Callable[[SyncJob], None],
    ) -> asyncio.Future:
        """
        Queue a deep sync of `content_item` from `hub` to `destination_hub_id`.

        Returns:
            Future resolved with the terminal sync job
        """
        async def run_sync() -> SyncJob:
            request = DeepSyncJobRequest.for_content_item(
                destination_hub_id,
                content_item.id,
                label=f"dc-cli content item: {content_item.label}",
            )
            created = await hub.create_deep_sync_job(request)
            job_log = job_logger(created.job_id, "sync", content_item_id=content_item.id)
            job_log.debug(f"Created sync job to hub {destination_hub_id}")

            completed = await self.poller.poll_until_terminal(created.job_id, hub.get_job)
            status = state_value(completed.status)
            if completed.is_failed:
                self._failed_jobs.append(completed)
                job_log.warning(f"Sync job failed: {completed.errors}", extra={"status": status})
            else:
                job_log.info("Sync job completed", extra={"status": status})

            on_complete(completed)
            return completed

        return self.queue.add(run_sync)

    async def on_idle(self) -> None:
        await self.queue.on_idle()

    @property
    def failed_jobs(self) -> list[SyncJob]:
        return self._failed_jobs
