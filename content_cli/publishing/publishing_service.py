"""Rate-limited publishing of content items."""

import asyncio
import logging
from typing import Callable, Optional

from content_cli.client import ContentHubClient
from content_cli.models import ContentItem, PublishingJob
from content_cli.queue import BurstableQueue

logger = logging.getLogger(__name__)


class ContentItemPublishingService:
    """Starts publishes through a burstable queue and records every started job."""

    def __init__(self, client: ContentHubClient, queue: Optional[BurstableQueue] = None):
        self.client = client
        self.queue = queue or BurstableQueue()
        self._publish_jobs: list[PublishingJob] = []

    def publish(
        self,
        content_item: ContentItem,
        on_started: Callable[[ContentItem, PublishingJob], None],
    ) -> asyncio.Future:
        """
        Queue a publish for a content item.

        Does not wait for the publishing job to finish; use
        ContentItemPublishingJobService for that.

        Returns:
            Future that fails if the publish could not be started
        """
        async def start_publish() -> PublishingJob:
            location = await self.client.publish_content_item(content_item)
            publishing_job = await self.client.get_publishing_job_by_location(location)
            self._publish_jobs.append(publishing_job)
            logger.debug(f"Started publishing job {publishing_job.id} for {content_item.id}")
            on_started(content_item, publishing_job)
            return publishing_job

        return self.queue.add(start_publish)

    @property
    def publish_jobs(self) -> list[PublishingJob]:
        """Every publishing job started so far, in start order."""
        return self._publish_jobs

    @property
    def failed_jobs(self) -> list[PublishingJob]:
        """Started jobs whose recorded state is FAILED."""
        return [job for job in self._publish_jobs if job.is_failed]

    async def on_idle(self) -> None:
        await self.queue.on_idle()
