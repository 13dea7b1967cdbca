"""Main entry point for the content CLI."""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

import httpx

from content_cli.client import ContentHubApiError, ContentHubClient
from content_cli.commands import BulkOptions, SyncOptions, publish, sync, unpublish
from content_cli.config import get_settings
from content_cli.lib import setup_logging

logger = logging.getLogger(__name__)

COMMANDS = {
    "publish": publish.run,
    "unpublish": unpublish.run,
    "sync": sync.run,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="content-cli", description="Bulk operations on content items")
    parser.add_argument("--client-id", help="OAuth client id (default: DC_CLI_CLIENT_ID)")
    parser.add_argument("--client-secret", help="OAuth client secret (default: DC_CLI_CLIENT_SECRET)")
    parser.add_argument("--pat-token", help="Personal access token (default: DC_CLI_PAT_TOKEN)")
    parser.add_argument("--hub-id", help="Hub to operate on (default: DC_CLI_HUB_ID)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, verb in (("publish", "published"), ("unpublish", "unpublished"), ("sync", "synced")):
        sub = subparsers.add_parser(name, help=f"{name.capitalize()} content items")
        sub.add_argument("ids", nargs="*", metavar="id", help=f"ID of a content item to be {verb}")
        sub.add_argument("--repo-id", help=f"ID of a content repository to search items in to be {verb}")
        sub.add_argument("--folder-id", help=f"ID of a folder to search items in to be {verb}")
        sub.add_argument("-f", "--force", action="store_true", help="Skip the confirmation prompt")
        sub.add_argument("-s", "--silent", action="store_true", help="Do not write a log file")
        sub.add_argument("--log-file", help="Path to a log file to write to")
        if name == "sync":
            sub.add_argument("--destination-hub-id", required=True, help="ID of the hub to sync with")

    return parser


def options_from_args(args: argparse.Namespace, hub_id: str) -> BulkOptions:
    common = dict(
        ids=list(args.ids),
        repo_id=args.repo_id,
        folder_id=args.folder_id,
        force=args.force,
        silent=args.silent,
        log_file=args.log_file,
    )
    if args.command == "sync":
        return SyncOptions(**common, hub_id=hub_id, destination_hub_id=args.destination_hub_id)
    return BulkOptions(**common)


async def run_command(args: argparse.Namespace) -> int:
    settings = get_settings()
    options = options_from_args(args, args.hub_id or settings.hub_id)

    async with ContentHubClient(
        settings,
        client_id=args.client_id,
        client_secret=args.client_secret,
        pat_token=args.pat_token,
    ) as client:
        return await COMMANDS[args.command](client, options)


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    setup_logging(level=settings.log_level, log_format=settings.log_format)

    args = build_parser().parse_args(argv)
    try:
        failures = asyncio.run(run_command(args))
    except (ContentHubApiError, httpx.HTTPError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if failures:
        logger.info(f"{args.command} finished with {failures} failures")
    # Per-item failures are reported in the log, not through the exit status
    return 0


if __name__ == "__main__":
    sys.exit(main())
