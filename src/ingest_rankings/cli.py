"""CLI for the daily ranking ingestion."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import get_config, load_config, set_config
from common.datetime import get_timezone, previous_day
from ingest_rankings.helpers import parse_ingest_rankings_args
from ingest_rankings.ingest_rankings import run_ingestion

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = parse_ingest_rankings_args(argv)

    if args.config:
        set_config(load_config(args.config))
    config = get_config()

    end_date = args.date or previous_day(get_timezone(config.timezone))
    logger.info("Processing articles for date: %s", end_date.isoformat())

    if run_ingestion(end_date):
        logger.info("Successfully processed articles for %s", end_date.isoformat())
        return 0

    logger.error("Failed to process articles for %s", end_date.isoformat())
    return 1


if __name__ == "__main__":
    sys.exit(main())
