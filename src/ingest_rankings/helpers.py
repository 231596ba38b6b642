"""Helper functions for the ingest_rankings CLI."""

from __future__ import annotations

import argparse
from datetime import date, timedelta, tzinfo

from common.cli_helpers import parse_date
from common.datetime import end_of_day, start_of_day
from ingest_rankings.models import FetchWindow


def build_window(end_date: date, lookback_days: int, tz: tzinfo) -> FetchWindow:
    '''Window covering ``lookback_days`` whole days ending on ``end_date``.'''
    if lookback_days <= 0:
        raise ValueError(f"lookback_days must be positive, got {lookback_days}")

    start_date = end_date - timedelta(days=lookback_days - 1)
    return FetchWindow(start=start_of_day(start_date, tz), end=end_of_day(end_date, tz))


def parse_ingest_rankings_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for ingest_rankings.'''

    parser = argparse.ArgumentParser(description="Fetch, archive and rank articles for one end date.")
    parser.add_argument(
        "--date",
        type=parse_date,
        default=None,
        help="End date YYYY-MM-DD (default: yesterday in the configured timezone).",
    )
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: prod).")
    return parser.parse_args(argv)
