"""Ranking read service."""

import logging
from datetime import date
from typing import Callable

from common.aws import get_keyed_store
from common.config import Config, get_config
from common.datetime import get_timezone, today
from common.errors import DecodeFailure, TransportFailure
from ranking_api.aggregate import aggregate
from ranking_api.cache import RankingCache
from ranking_api.params import RankingQuery

logger = logging.getLogger(__name__)


class RankingService:
    """Serves aggregated rankings, caching each result for the configured TTL."""

    def __init__(
        self,
        config: Config | None = None,
        store_factory: Callable[[str], object] | None = None,
        cache: RankingCache | None = None,
    ):
        self.config = config or get_config()
        self._store_factory = store_factory or (lambda unit: get_keyed_store(unit, self.config))
        if cache is None:
            cache = RankingCache(
                ttl_seconds=self.config.cache.ttl_seconds,
                max_stale_seconds=self.config.cache.max_stale_seconds,
            )
        self.cache = cache

    def get_rankings(self, query: RankingQuery, target_date: date | None = None) -> list[dict]:
        """Rankings for a validated query, newest period last.

        A fresh cached result is returned without touching the store. If the
        store read fails, a stale cached result is served when one exists.
        """
        target_date = target_date or today(get_timezone(self.config.timezone))
        cache_key = (query.unit, query.range, query.count, target_date.isoformat())

        if self.config.cache.enabled:
            cached = self.cache.get_fresh(cache_key)
            if cached is not None:
                logger.info("Using cached data for %s %d", query.unit, query.range)
                return cached

        try:
            data = aggregate(
                query.period_unit,
                query.range,
                target_date,
                query.count,
                store=self._store_factory(query.period_unit),
                timeout=self.config.api.lookup_timeout_seconds,
            )
        except (TransportFailure, DecodeFailure):
            stale = self.cache.get_stale(cache_key) if self.config.cache.enabled else None
            if stale is None:
                raise
            logger.warning("Using stale cached data for %s %d after read error", query.unit, query.range)
            return stale

        if self.config.cache.enabled:
            self.cache.put(cache_key, data)
        return data
