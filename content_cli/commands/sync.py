"""`sync` command: deep sync content items to another hub."""

import json
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from content_cli.client import ContentHubClient, HubResource
from content_cli.lib import FileLog, LogErrorLevel, default_log_path
from content_cli.models import ContentItem, SyncJob
from content_cli.publishing import ContentItemSyncService

from .common import BulkOptions, confirm_all_content, get_content_items, plural, report_option_conflicts, unique_items

logger = logging.getLogger(__name__)

LOG_TITLE = "Content Items Sync Log"


@dataclass
class SyncOptions(BulkOptions):
    hub_id: str = ""  # Source hub
    destination_hub_id: str = ""


def default_log_file() -> str:
    return default_log_path("content-item", "sync")


async def process_items(
    hub: HubResource,
    items: list[ContentItem],
    options: SyncOptions,
    log: FileLog,
    all_content: bool = False,
    ask: Callable[[str], str] = input,
    sync_service: Optional[ContentItemSyncService] = None,
) -> int:
    """
    Sync the given items to `options.destination_hub_id`.

    Returns:
        Number of failed sync jobs plus items whose job could not be created
    """
    if not items:
        print("Nothing found to sync, aborting.")
        return 0

    root_items = unique_items(items)
    log.append_line(
        f"Found {plural(len(root_items), 'item')} to sync "
        f"(ignoring {plural(len(items) - len(root_items), 'duplicate item')})"
    )

    if not options.force:
        if not await confirm_all_content("sync", "content items", all_content, False, ask):
            return 0

    log.append_line(f"Syncing {plural(len(root_items), 'item')}")
    sync_service = sync_service or ContentItemSyncService()

    submissions = []
    for content_item in root_items:
        log.add_comment(f"Requesting content item sync: {content_item.label}")

        def on_complete(sync_job: SyncJob, content_item: ContentItem = content_item) -> None:
            if sync_job.is_failed:
                log.add_comment(f"Failed content item sync job {sync_job.id}: {json.dumps(sync_job.errors)}")
                return
            log.add_comment(f"Content item synced: {content_item.label} (jobId: {sync_job.id})")

        submissions.append(
            (content_item, sync_service.sync(options.destination_hub_id, hub, content_item, on_complete))
        )

    await sync_service.on_idle()

    errored = 0
    for content_item, submission in submissions:
        error = submission.exception()
        if error is not None:
            errored += 1
            log.add_error(LogErrorLevel.WARNING, f"Failed to sync {content_item.label}", error)

    failed_jobs = len(sync_service.failed_jobs)
    failed_jobs_msg = f"with {plural(failed_jobs, 'failed job')} - check logs for details" if failed_jobs else ""
    log.append_line(f"Sync complete {failed_jobs_msg}".rstrip())
    return failed_jobs + errored


async def run(client: ContentHubClient, options: SyncOptions, ask: Callable[[str], str] = input) -> int:
    """Entry point of the `sync` command. Returns the failure count."""
    if not options.destination_hub_id:
        raise ValueError("A destination hub id is required")
    if not options.hub_id:
        raise ValueError("A source hub id is required")

    report_option_conflicts(options, "syncing")

    selection = await get_content_items(client, options)
    hub = client.hub(options.hub_id)
    log = FileLog(options.log_file or default_log_file(), LOG_TITLE)
    try:
        return await process_items(hub, selection.items, options, log, all_content=options.all_content, ask=ask)
    finally:
        log.close(write=not options.silent)
