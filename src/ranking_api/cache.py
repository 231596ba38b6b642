"""In-process TTL cache for aggregated rankings."""

import threading
import time
from typing import Any, Callable, Hashable


class RankingCache:
    """Maps a key to ``(value, inserted_at)``.

    Entries younger than ``ttl_seconds`` are fresh. Older entries are kept so
    they can be served as a stale fallback when the upstream read fails, until
    they reach ``max_stale_seconds`` and are pruned on the next ``put``.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
        max_stale_seconds: float = 86400,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_stale_seconds = max(max_stale_seconds, ttl_seconds)
        self._clock = clock
        self._entries: dict[Hashable, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def put(self, key: Hashable, value: Any) -> None:
        now = self._clock()
        with self._lock:
            for k, (_, inserted_at) in list(self._entries.items()):
                if now - inserted_at >= self.max_stale_seconds:
                    del self._entries[k]
            self._entries[key] = (value, now)

    def get_fresh(self, key: Hashable) -> Any | None:
        """Value for key if inserted within the TTL, else None."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        value, inserted_at = entry
        if self._clock() - inserted_at >= self.ttl_seconds:
            return None
        return value

    def get_stale(self, key: Hashable) -> Any | None:
        """Value for key regardless of age, else None."""
        with self._lock:
            entry = self._entries.get(key)
        return entry[0] if entry is not None else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
