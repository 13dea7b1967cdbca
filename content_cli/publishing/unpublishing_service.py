"""Rate-limited unpublishing of content items."""

import asyncio
import logging
from typing import Callable, Optional

from content_cli.client import ContentHubClient
from content_cli.models import ContentItem
from content_cli.queue import BurstableQueue

logger = logging.getLogger(__name__)


class ContentItemUnpublishingService:
    """Unpublishes content items through a burstable queue.

    Items without a live published version (UNPUBLISHED, NONE or unknown)
    are skipped. The callback fires once per item either way.
    """

    def __init__(self, client: ContentHubClient, queue: Optional[BurstableQueue] = None):
        self.client = client
        self.queue = queue or BurstableQueue()

    def unpublish(self, content_item: ContentItem, on_done: Callable[[ContentItem], None]) -> asyncio.Future:
        async def run_unpublish() -> None:
            if content_item.can_unpublish:
                await self.client.unpublish_content_item(content_item)
            else:
                logger.debug(f"Skipping unpublish of {content_item.id} ({content_item.publishing_status})")
            on_done(content_item)

        return self.queue.add(run_unpublish)

    async def on_idle(self) -> None:
        await self.queue.on_idle()
