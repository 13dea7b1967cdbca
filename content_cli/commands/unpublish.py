"""`unpublish` command."""

import logging
from typing import Callable, Optional

from content_cli.client import ContentHubClient
from content_cli.lib import FileLog, LogErrorLevel, default_log_path
from content_cli.models import ContentItem
from content_cli.publishing import ContentItemUnpublishingService

from .common import BulkOptions, confirm_all_content, get_content_items, plural, report_option_conflicts, unique_items

logger = logging.getLogger(__name__)

LOG_TITLE = "Content Items Unpublish Log"


def default_log_file() -> str:
    return default_log_path("content-item", "unpublish")


async def process_items(
    client: ContentHubClient,
    items: list[ContentItem],
    options: BulkOptions,
    log: FileLog,
    all_content: bool = False,
    missing_content: bool = False,
    ask: Callable[[str], str] = input,
    unpublishing_service: Optional[ContentItemUnpublishingService] = None,
) -> int:
    """
    Unpublish the given items, skipping ones that are not currently published.

    Returns:
        Number of items whose unpublish request failed
    """
    if not items:
        print("Nothing found to unpublish, aborting.")
        return 0

    published = [item for item in unique_items(items) if item.can_unpublish]
    log.append_line(f"Found {plural(len(published), 'item')} to unpublish.")
    if not published:
        return 0

    if not options.force:
        if not await confirm_all_content("unpublish", "content items", all_content, missing_content, ask):
            return 0

    log.append_line(f"Unpublishing {plural(len(published), 'item')}.")

    unpublishing_service = unpublishing_service or ContentItemUnpublishingService(client)

    def on_done(content_item: ContentItem) -> None:
        log.add_comment(f'Initiated unpublish for "{content_item.label}"')

    submissions = [(item, unpublishing_service.unpublish(item, on_done)) for item in published]
    await unpublishing_service.on_idle()

    failures = 0
    for item, submission in submissions:
        error = submission.exception()
        if error is not None:
            failures += 1
            log.add_error(LogErrorLevel.WARNING, f"Failed to initiate unpublish for {item.label}", error)

    log.append_line("The request for content item/s to be unpublished has been completed - please manually verify.")
    return failures


async def run(client: ContentHubClient, options: BulkOptions, ask: Callable[[str], str] = input) -> int:
    """Entry point of the `unpublish` command. Returns the failure count."""
    report_option_conflicts(options, "unpublishing")

    selection = await get_content_items(client, options)
    log = FileLog(options.log_file or default_log_file(), LOG_TITLE)
    try:
        return await process_items(
            client,
            selection.items,
            options,
            log,
            all_content=options.all_content,
            missing_content=selection.missing_content,
            ask=ask,
        )
    finally:
        log.close(write=not options.silent)
