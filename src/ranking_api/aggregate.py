"""Read aggregation of stored period summaries."""

import json
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError, as_completed
from datetime import date

from common.aws import get_keyed_store
from common.date_range import generate_keys
from common.errors import DecodeFailure, InvalidArgument, NotFound, RankingError, TransportFailure

logger = logging.getLogger(__name__)

MAX_LOOKUP_WORKERS = 31


def decode_articles(key: str, payload: str) -> list[dict]:
    """Decode a stored summary payload into its article list.

    Raises:
        DecodeFailure: If the payload is not JSON or has no ``articles`` list.
    """
    try:
        content = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise DecodeFailure(f"Summary for {key} is not valid JSON") from exc

    articles = content.get("articles") if isinstance(content, dict) else None
    if not isinstance(articles, list):
        raise DecodeFailure(f"Summary for {key} has no articles list")
    return articles


def lookup_articles(store, key: str) -> list[dict] | None:
    """Articles stored for ``key``, or None if nothing is stored."""
    try:
        payload = store.get(key)
    except NotFound:
        logger.info("No data found for key: %s", key)
        return None
    return decode_articles(key, payload)


def aggregate(
    unit: str,
    range_: int,
    target_date: date,
    per_period_limit: int,
    store=None,
    timeout: float | None = None,
) -> list[dict]:
    """Collect stored rankings for each period, oldest first.

    Periods without a stored summary are left out. Each period's articles are
    cut to ``per_period_limit``.

    Raises:
        InvalidArgument: For a bad unit, range or limit.
        DecodeFailure: If any stored summary is malformed.
        TransportFailure: If any lookup fails or ``timeout`` elapses.
    """
    if per_period_limit < 0:
        raise InvalidArgument(f"per_period_limit must not be negative, got {per_period_limit}")

    keys = generate_keys(unit, target_date, range_)
    if store is None:
        store = get_keyed_store(unit)

    found: dict[str, list[dict]] = {}
    executor = ThreadPoolExecutor(max_workers=min(len(keys), MAX_LOOKUP_WORKERS))
    try:
        future_map = {executor.submit(lookup_articles, store, key): key for key in keys}
        for future in as_completed(future_map, timeout=timeout):
            key = future_map[future]
            articles = future.result()
            if articles is not None:
                found[key] = articles
    except FuturesTimeoutError as exc:
        logger.error("Timed out reading %d %s summaries", len(keys), unit)
        raise TransportFailure(f"Timed out after {timeout}s reading {unit} summaries") from exc
    except RankingError as exc:
        logger.error("Error fetching %s summaries: %s", unit, exc)
        raise
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    # Re-impose generation order; completion order is arbitrary.
    return [{"key": key, "articles": found[key][:per_period_limit]} for key in keys if key in found]
