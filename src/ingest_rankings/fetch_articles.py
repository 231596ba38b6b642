"""Rate-limited, window-bounded pagination over the content source."""

import logging
from datetime import timezone, tzinfo
from time import sleep
from typing import Protocol

from common.datetime import parse_datetime
from ingest_rankings.models import ArticlePage, FetchWindow, RawArticle

logger = logging.getLogger(__name__)


class ContentSource(Protocol):
    def get_page(self, page: int, count: int, order: str) -> ArticlePage: ...


def fetch_articles(
    window: FetchWindow,
    source: ContentSource,
    call_budget: int,
    page_size: int,
    order: str = "latest",
    delay_seconds: float = 1.0,
    tz: tzinfo = timezone.utc,
) -> list[RawArticle]:
    """Collect liked articles published inside ``window``.

    Pages must come back newest first. The first article older than
    ``window.start`` ends pagination; articles newer than ``window.end`` are
    skipped. At most ``call_budget`` pages are requested, with
    ``delay_seconds`` between consecutive requests.

    Raises:
        TransportFailure: If any page request fails. Nothing is returned.
    """
    articles: list[RawArticle] = []
    page = 1
    call_count = 0

    while page is not None:
        if call_count + 1 > call_budget:
            logger.info("Reached maximum API calls (%d), stopping pagination", call_budget)
            break

        if call_count > 0:
            sleep(delay_seconds)

        call_count += 1
        logger.info("Fetching page %d (call %d/%d)", page, call_count, call_budget)
        result = source.get_page(page, page_size, order)

        if not result.articles:
            logger.info("Page %d is empty, stopping pagination", page)
            break

        reached_start = False
        for article in result.articles:
            published_raw = article.get("published_at")
            if not published_raw:
                logger.warning("Skipping article %s without published_at", article.get("id"))
                continue
            try:
                published_at = parse_datetime(published_raw, tz)
            except (TypeError, ValueError, AttributeError):
                logger.warning(
                    "Skipping article %s with unparseable published_at %r", article.get("id"), published_raw
                )
                continue

            # Newest first: everything after this is older too.
            if published_at < window.start:
                reached_start = True
                break

            if published_at > window.end:
                continue

            if (article.get("liked_count") or 0) <= 0:
                continue

            articles.append(article)

        if reached_start:
            logger.info("Reached articles older than %s on page %d", window.start.isoformat(), page)
            break

        page = result.next_page

    logger.info("Collected %d articles in %d calls", len(articles), call_count)
    return articles
