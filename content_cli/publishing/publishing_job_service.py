"""Waiting for publishing jobs to finish."""

import asyncio
from typing import Awaitable, Callable, Optional, Union

from content_cli.client import ContentHubClient
from content_cli.lib import job_logger
from content_cli.models import PublishingJob, state_value
from content_cli.queue import AsyncJobPoller, BurstableQueue, PollPolicy

ResolvedCallback = Callable[[PublishingJob], Union[None, Awaitable[None]]]


class ContentItemPublishingJobService:
    """Polls publishing jobs until they complete or fail."""

    def __init__(
        self,
        client: ContentHubClient,
        queue: Optional[BurstableQueue] = None,
        policy: Optional[PollPolicy] = None,
    ):
        self.client = client
        self.queue = queue or BurstableQueue()
        self.poller = AsyncJobPoller(policy)
        self._failed_jobs: list[PublishingJob] = []

    def check(self, publishing_job: PublishingJob, on_resolved: ResolvedCallback) -> asyncio.Future:
        """Queue a status check that polls the job and then calls `on_resolved`."""
        async def wait_for_job() -> PublishingJob:
            resolved = await self.poller.poll_until_terminal(publishing_job.id, self.client.get_publishing_job)
            if resolved.is_failed:
                self._failed_jobs.append(resolved)
                job_logger(resolved.id, "publish").warning(
                    f"Publishing job failed: {resolved.publish_error_status}",
                    extra={"status": state_value(resolved.state)},
                )

            result = on_resolved(resolved)
            if asyncio.iscoroutine(result):
                await result
            return resolved

        return self.queue.add(wait_for_job)

    @property
    def failed_jobs(self) -> list[PublishingJob]:
        return self._failed_jobs

    async def on_idle(self) -> None:
        await self.queue.on_idle()

    @property
    def size(self) -> int:
        return self.queue.size()

    @property
    def pending(self) -> int:
        return self.queue.pending()
