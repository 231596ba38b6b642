"""Fetch, archive and summarize articles for one end date."""

import logging
from datetime import date

from common.config import get_config
from common.datetime import get_timezone
from common.errors import RankingError
from ingest_rankings.fetch_articles import ContentSource, fetch_articles
from ingest_rankings.helpers import build_window
from ingest_rankings.store import archive_articles, summarize
from ingest_rankings.zenn_client import ZennClient

logger = logging.getLogger(__name__)


def run_ingestion(
    end_date: date,
    source: ContentSource | None = None,
    blob_store=None,
    keyed_store=None,
) -> bool:
    """Run one ingestion for the window ending on ``end_date``.

    The archive is written before the summary, and the summary is only
    attempted once the archive write has succeeded.

    Returns:
        True if every step succeeded or there was nothing to store.
    """
    config = get_config()
    tz = get_timezone(config.timezone)
    window = build_window(end_date, config.ingest.lookback_days, tz)
    if source is None:
        source = ZennClient(config.source)

    logger.info(
        "Ingesting articles published from %s to %s",
        window.start.isoformat(),
        window.end.isoformat(),
    )

    try:
        articles = fetch_articles(
            window,
            source,
            call_budget=config.source.call_budget,
            page_size=config.source.page_size,
            order=config.source.order,
            delay_seconds=config.source.request_delay_seconds,
            tz=tz,
        )
    except RankingError as exc:
        logger.error("Error fetching articles for %s: %s", end_date.isoformat(), exc)
        return False

    logger.info("Fetched %d articles for %s", len(articles), end_date.isoformat())
    if not articles:
        logger.warning("No articles found for %s", end_date.isoformat())
        return True

    if not archive_articles(articles, end_date, blob_store):
        return False

    return summarize(end_date, blob_store, keyed_store)
