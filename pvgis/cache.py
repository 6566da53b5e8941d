# pvgis/cache.py
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from estimator.ports import YieldQuery

logger = logging.getLogger(__name__)


def make_cache_key(query: YieldQuery) -> str:
    """
    The six identifying request parameters at fixed precision.

    lat/lon to 4 decimals (~11 m), capacity 2, loss 1, angle and aspect 0.
    """
    return "|".join(
        [
            f"{query.lat:.4f}",
            f"{query.lon:.4f}",
            f"{query.peakpower:.2f}",
            f"{query.loss:.1f}",
            f"{query.angle:.0f}",
            f"{query.aspect:.0f}",
        ]
    )


class TTLCache:
    """
    In-process cache; entries expire ttl_seconds after they were stored.

    Every set() drops expired entries, then the oldest ones beyond max_entries.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic, max_entries: Optional[int] = None):
        self.ttl_seconds = float(ttl_seconds)
        self.max_entries = int(max_entries) if max_entries else None
        self._clock = clock
        self._data: Dict[str, Tuple[float, Any]] = {}
        self.hits = 0
        self.misses = 0

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        item = self._data.get(key)
        if item is None:
            self.misses += 1
            logger.debug("cache miss %s", key)
            return None

        stored_at, value = item
        if self._expired(stored_at, self._clock()):
            del self._data[key]
            self.misses += 1
            logger.debug("cache expired %s", key)
            return None

        self.hits += 1
        logger.debug("cache hit %s", key)
        return value

    def purge(self) -> int:
        now = self._clock()
        stale = [k for k, (stored_at, _) in self._data.items() if self._expired(stored_at, now)]
        for k in stale:
            del self._data[k]
        return len(stale)

    def set(self, key: str, value: Any) -> None:
        self.purge()
        self._data.pop(key, None)
        self._data[key] = (self._clock(), value)
        if self.max_entries is not None:
            # dicts keep insertion order, so the first keys are the oldest
            while len(self._data) > self.max_entries:
                oldest = next(iter(self._data))
                del self._data[oldest]
                logger.debug("cache evicted %s", oldest)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def stats(self) -> Dict[str, Any]:
        return {
            "size": len(self._data),
            "keys": list(self._data.keys()),
            "hits": self.hits,
            "misses": self.misses,
            "ttl_seconds": self.ttl_seconds,
            "max_entries": self.max_entries,
        }
