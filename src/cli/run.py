import argparse
import asyncio
import logging
import sys
import time
from typing import List, Optional

from services.config import load_config
from services.logging import setup_logging
from services.scheduler import next_run_time, seconds_until
from workflows.pipeline_factory import create_pipeline_from_config


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch r/khiphop, enrich new posts and stage them for review."
    )
    parser.add_argument("--config", help="Path to config.yml")
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="Keep running, once a day at SCHEDULE_HOUR",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load configuration: {e}")
        return 1

    pipeline = create_pipeline_from_config(config)

    while True:
        start_time = time.perf_counter()
        summary = await pipeline.run_once()
        logger.info(
            f"Run summary: fetched={summary.fetched} new={summary.new_count} "
            f"staged={summary.staged_count} ({time.perf_counter() - start_time:.1f}s)"
        )

        if not args.schedule:
            return 0

        run_at = next_run_time(config.SCHEDULE_HOUR)
        logger.info(f"Next run at {run_at.isoformat()}")
        await asyncio.sleep(seconds_until(run_at))


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
