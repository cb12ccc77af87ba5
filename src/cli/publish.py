"""
Review the staging area and publish selected records as WordPress drafts.

    python -m cli.publish list
    python -m cli.publish publish            # interactive selection
    python -m cli.publish publish --all
    python -m cli.publish publish --id t3_abc --id t3_def
    python -m cli.publish clear --yes
"""
import argparse
import asyncio
import logging
import sys
from typing import Callable, List, Optional

from core.entities import StagedRecord
from services.config import load_config
from services.database import Database
from services.dedup_store import DedupStore
from services.logging import setup_logging
from services.staging_store import StagingStore
from workflows.pipeline_factory import create_cms_client
from workflows.publish import publish_staged

logger = logging.getLogger(__name__)


def format_record(index: int, record: StagedRecord) -> str:
    line = f"[{index}] {record.title} ({record.category.value})"
    if record.artist:
        line += f" - {record.artist}"
    return line


def select_interactively(
    records: List[StagedRecord],
    prompt: Callable[[str], str] = input,
) -> List[str]:
    """
    Pick records by number until 'done'; 'all' selects everything left.
    """
    remaining = list(records)
    selected: List[str] = []

    while remaining:
        print("\n--- Staged Posts ---")
        for index, record in enumerate(remaining, start=1):
            print(format_record(index, record))
        print("--------------------\n")

        choice = prompt(
            "Enter number of post to publish (e.g., 1), 'all', or 'done' to finish selecting: "
        ).strip().lower() or "done"

        if choice == "done":
            break
        if choice == "all":
            selected.extend(record.id for record in remaining)
            break
        if choice.isdigit() and 1 <= int(choice) <= len(remaining):
            record = remaining.pop(int(choice) - 1)
            selected.append(record.id)
            print(f"Selected for publishing: \"{record.title}\"")
        else:
            print("Invalid selection. Please try again.")

    return selected


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the staging area.")
    parser.add_argument("--config", help="Path to config.yml")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List staged records")

    publish = sub.add_parser("publish", help="Publish staged records to WordPress")
    publish.add_argument("--all", action="store_true", help="Publish everything staged")
    publish.add_argument("--id", action="append", default=[], dest="ids", help="Record id to publish")

    clear = sub.add_parser("clear", help="Clear staging area and processed ids")
    clear.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load configuration: {e}")
        return 1

    database = Database(config.DATABASE_PATH)
    staging = StagingStore(database)

    if args.command == "clear":
        if not args.yes:
            answer = input(
                "Permanently clear all staged posts and processed ids? "
                "They will be refetched from Reddit. [y/N] "
            )
            if answer.strip().lower() not in ("y", "yes"):
                return 0
        await staging.clear()
        await DedupStore(database).clear()
        return 0

    records = await staging.list()
    if not records:
        print("No posts currently in the staging area.")
        return 0

    if args.command == "list":
        for index, record in enumerate(records, start=1):
            print(format_record(index, record))
        return 0

    cms = create_cms_client(config)
    if cms is None:
        return 1

    if args.all:
        ids = [record.id for record in records]
    elif args.ids:
        ids = args.ids
    else:
        ids = select_interactively(records)

    if not ids:
        print("No posts selected for publishing.")
        return 0

    summary = await publish_staged(staging, cms, ids)
    print(f"Published {summary.published} of {summary.selected} post(s).")
    return 0 if summary.failed == 0 else 2


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
