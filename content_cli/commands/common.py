"""Helpers shared by the bulk content item commands."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from content_cli.client import ContentHubApiError, ContentHubClient
from content_cli.models import ContentItem, ContentItemStatus

logger = logging.getLogger(__name__)


@dataclass
class BulkOptions:
    """Item selection and behaviour flags common to publish, unpublish and sync."""
    ids: list[str] = field(default_factory=list)
    repo_id: Optional[str] = None
    folder_id: Optional[str] = None
    force: bool = False
    silent: bool = False
    log_file: Optional[str] = None

    @property
    def all_content(self) -> bool:
        return not self.ids and not self.repo_id and not self.folder_id


@dataclass
class ItemSelection:
    """Result of resolving the requested items."""
    items: list[ContentItem]
    missing_content: bool = False


def report_option_conflicts(options: BulkOptions, verb: str) -> None:
    """Print notices for options that override each other."""
    if options.repo_id and options.ids:
        print("ID of content item is specified, ignoring repository ID")
    if options.repo_id and options.folder_id:
        print("Folder is specified, ignoring repository ID")
    if options.all_content:
        print(f"No filter was given, {verb} all content")


async def get_content_items(client: ContentHubClient, options: BulkOptions) -> ItemSelection:
    """
    Resolve the items a command should act on.

    By id: missing ids are skipped and flagged, only ACTIVE items are kept.
    Otherwise: every ACTIVE item of the folder or repository.
    """
    if options.ids:
        items: list[ContentItem] = []
        for content_item_id in options.ids:
            try:
                items.append(await client.get_content_item(content_item_id))
            except ContentHubApiError as e:
                logger.warning(f"Could not fetch content item {content_item_id}: {e}")

        active = [item for item in items if item.status == ContentItemStatus.ACTIVE]
        return ItemSelection(items=active, missing_content=len(active) != len(options.ids))

    if not options.repo_id and not options.folder_id:
        raise ValueError("Listing every repository of a hub is not supported; give an id, --repo-id or --folder-id")

    items = await client.list_content_items(
        repository_id=options.repo_id,
        folder_id=options.folder_id,
        status=ContentItemStatus.ACTIVE,
    )
    return ItemSelection(items=items)


def unique_items(items: list[ContentItem]) -> list[ContentItem]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[str] = set()
    result = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        result.append(item)
    return result


async def ask_yes_no(question: str, ask: Callable[[str], str] = input) -> bool:
    """Ask a y/n question without blocking the event loop."""
    answer = await asyncio.to_thread(ask, f"{question} (y/n)\n")
    return answer.strip().lower() in ("y", "yes")


async def confirm_all_content(
    action: str,
    category: str,
    all_content: bool,
    missing_content: bool,
    ask: Callable[[str], str] = input,
) -> bool:
    """Ask the user to confirm a bulk action."""
    if missing_content:
        question = f"Some {category} could not be found. Continue anyway?"
    elif all_content:
        question = f"Providing no ID or filter will {action} ALL {category}! Are you sure you want to do this?"
    else:
        question = f"Are you sure you want to {action} the selected {category}?"
    return await ask_yes_no(question, ask)


def plural(count: int, singular: str, many: Optional[str] = None) -> str:
    return f"{count} {singular if count == 1 else (many or singular + 's')}"
