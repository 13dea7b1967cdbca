"""`publish` command: publish content items and optionally wait for the jobs."""

import logging
from typing import Callable, Optional

from content_cli.client import ContentHubClient
from content_cli.lib import FileLog, LogErrorLevel, default_log_path
from content_cli.models import ContentItem, PublishingJob
from content_cli.publishing import ContentItemPublishingJobService, ContentItemPublishingService

from .common import (
    BulkOptions,
    ask_yes_no,
    confirm_all_content,
    get_content_items,
    plural,
    report_option_conflicts,
    unique_items,
)

logger = logging.getLogger(__name__)

LOG_TITLE = "Content Items Publish Log"


def default_log_file() -> str:
    return default_log_path("content-item", "publish")


async def process_items(
    client: ContentHubClient,
    items: list[ContentItem],
    options: BulkOptions,
    log: FileLog,
    all_content: bool = False,
    missing_content: bool = False,
    ask: Callable[[str], str] = input,
    publishing_service: Optional[ContentItemPublishingService] = None,
    job_service: Optional[ContentItemPublishingJobService] = None,
) -> int:
    """
    Publish the given items.

    Returns:
        Number of items that failed to start or whose publishing job failed
    """
    if not items:
        print("Nothing found to publish, aborting.")
        return 0

    items = unique_items(items)
    log.append_line(f"Found {plural(len(items), 'item')} to publish.")

    if not options.force:
        if not await confirm_all_content("publish", "content items", all_content, missing_content, ask):
            return 0

    log.append_line(f"Publishing {plural(len(items), 'item')}.")

    publishing_service = publishing_service or ContentItemPublishingService(client)
    started: list[tuple[ContentItem, PublishingJob]] = []
    failures = 0

    def on_started(content_item: ContentItem, publishing_job: PublishingJob) -> None:
        started.append((content_item, publishing_job))
        log.add_comment(f'Initiated publish for "{content_item.label}"')

    submissions = [(item, publishing_service.publish(item, on_started)) for item in items]
    await publishing_service.on_idle()

    for item, submission in submissions:
        error = submission.exception()
        if error is not None:
            failures += 1
            log.add_error(LogErrorLevel.WARNING, f"Failed to initiate publish for {item.label}", error)

    wait_for_jobs = options.force or await ask_yes_no(
        "All publishes have been requested, would you like to wait for all publishes to complete?", ask
    )

    if wait_for_jobs and started:
        log.append_line(f"Checking publishing state for {plural(len(started), 'item')}.")
        job_service = job_service or ContentItemPublishingJobService(client)

        for content_item, publishing_job in started:
            def on_resolved(resolved: PublishingJob, content_item: ContentItem = content_item) -> None:
                log.add_comment(f"Finished checking publish job for {content_item.label}")
                if resolved.is_failed:
                    log.append_line(f"Failed to publish {content_item.label}: {resolved.publish_error_status}")

            job_service.check(publishing_job, on_resolved)

        await job_service.on_idle()
        failures += len(job_service.failed_jobs)

    log.append_line("Publishing complete" + (f" with {plural(failures, 'failure')}" if failures else ""))
    return failures


async def run(client: ContentHubClient, options: BulkOptions, ask: Callable[[str], str] = input) -> int:
    """Entry point of the `publish` command. Returns the failure count."""
    report_option_conflicts(options, "publishing")

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
