"""Two-tier persistence: raw archive blob first, ranked summary second."""

import json
import logging
from datetime import date, datetime, timedelta

from common.aws import build_archive_key, get_blob_store, get_keyed_store
from common.config import get_config
from common.datetime import get_timezone, start_of_day
from common.errors import DecodeFailure, RankingError
from ingest_rankings.models import PeriodSummary, RawArticle
from ingest_rankings.rank_articles import rank_articles

logger = logging.getLogger(__name__)


def archive_articles(articles: list[RawArticle], end_date: date, blob_store=None) -> bool:
    """Write the full filtered article set to ``YYYY/MM/YYYYMMDD.json``.

    Returns:
        True on success, False if the store is misconfigured or the write fails.
    """
    key = build_archive_key(end_date)
    try:
        if blob_store is None:
            blob_store = get_blob_store()
        body = json.dumps(articles, ensure_ascii=False).encode("utf-8")
        blob_store.put(key, body)
    except RankingError as exc:
        logger.error("Error saving archive for %s: %s", end_date.isoformat(), exc)
        return False

    logger.info("Archived %d articles to %s", len(articles), blob_store.describe(key))
    return True


def read_archive(end_date: date, blob_store=None) -> list[RawArticle]:
    """Read back the archive written for ``end_date``.

    Raises:
        NotFound: If no archive exists for the date.
        TransportFailure: If the read fails.
        DecodeFailure: If the archive is not a JSON list.
    """
    if blob_store is None:
        blob_store = get_blob_store()
    key = build_archive_key(end_date)
    body = blob_store.get(key)
    try:
        articles = json.loads(body)
    except (UnicodeDecodeError, ValueError) as exc:
        raise DecodeFailure(f"Archive {key} is not valid JSON") from exc
    if not isinstance(articles, list):
        raise DecodeFailure(f"Archive {key} does not hold a list of articles")
    return articles


def build_summary(
    articles: list[RawArticle],
    end_date: date,
    top_n: int,
    ttl_days: int,
    tz,
    now: datetime | None = None,
) -> PeriodSummary:
    """Rank articles into the summary stored under the day key of ``end_date``."""
    return PeriodSummary(
        period_key=end_date.isoformat(),
        articles=rank_articles(articles, top_n),
        stored_at=now or datetime.now(tz),
        expires_at=start_of_day(end_date + timedelta(days=ttl_days), tz),
    )


def summarize(end_date: date, blob_store=None, keyed_store=None, now: datetime | None = None) -> bool:
    """Rank the archived articles for ``end_date`` and store the summary.

    Returns:
        True on success, False if the archive cannot be read or the write fails.
    """
    config = get_config()
    tz = get_timezone(config.timezone)
    try:
        articles = read_archive(end_date, blob_store)
        summary = build_summary(
            articles,
            end_date,
            top_n=config.ingest.top_n,
            ttl_days=config.ingest.summary_ttl_days,
            tz=tz,
            now=now,
        )
        if keyed_store is None:
            keyed_store = get_keyed_store("day")
        payload = json.dumps(summary.to_payload(), ensure_ascii=False)
        keyed_store.put(summary.period_key, payload, summary.expires_at)
    except RankingError as exc:
        logger.error("Error saving summary for %s: %s", end_date.isoformat(), exc)
        return False

    logger.info("Stored summary %s with %d articles", summary.period_key, len(summary.articles))
    return True
