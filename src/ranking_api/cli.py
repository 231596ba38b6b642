"""CLI for reading stored rankings."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import parse_date, setup_logging
from common.config import load_config, set_config
from common.errors import InvalidArgument, RankingError
from ranking_api.params import parse_query_parameters
from ranking_api.service import RankingService

load_dotenv()

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print stored rankings as JSON.")
    parser.add_argument("--unit", required=True, help="daily, weekly or monthly.")
    parser.add_argument("--range", default=None, help="Number of periods (1-31).")
    parser.add_argument("--count", default=None)
    parser.add_argument("--order", default=None)
    parser.add_argument("--date", type=parse_date, default=None, help="Target date (default: today).")
    parser.add_argument("--config", default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.config:
        set_config(load_config(args.config))

    try:
        query = parse_query_parameters(
            {"unit": args.unit, "range": args.range, "count": args.count, "order": args.order}
        )
    except InvalidArgument as exc:
        parser.error(str(exc))

    try:
        data = RankingService().get_rankings(query, args.date)
    except RankingError as exc:
        logger.error("Error reading rankings: %s", exc)
        return 1

    print(json.dumps({"data": data}, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
