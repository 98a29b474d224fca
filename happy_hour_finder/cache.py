"""Injectable result cache for pipeline runs.

The pipeline itself holds no state. Callers that want to memoize results
per (location, time) bucket pass a ResultCache; the key combines rounded
viewer coordinates, a time bucket and the deal-data version, so a new data
version invalidates every older entry.
"""

import logging
from datetime import datetime
from typing import Hashable, Optional, Protocol, Sequence

from .models import PipelineResult, ViewerLocation

logger = logging.getLogger(__name__)


class ResultCache(Protocol):
    """Minimal cache interface the pipeline depends on."""

    def get(self, key: Hashable) -> Optional[PipelineResult]:
        ...

    def set(self, key: Hashable, result: PipelineResult) -> None:
        ...


def make_cache_key(
    viewer: Optional[ViewerLocation],
    now_local: datetime,
    data_version: str,
    radius_tiers: Sequence[float],
    coord_precision: int = 3,
    bucket_minutes: int = 5,
) -> tuple:
    """
    Build a cache key.

    Every instant inside one time bucket shares a key, so a cached result's
    is_active flags can be up to one bucket stale; a deal that ended at
    18:02 still shows as active for an 18:04 request with 5-minute buckets.

    Returns:
        Tuple of (lat, lng, local date, time bucket, data version, tiers)
    """
    lat = round(viewer.lat, coord_precision) if viewer is not None else None
    lng = round(viewer.lng, coord_precision) if viewer is not None else None
    minute_of_day = now_local.hour * 60 + now_local.minute
    bucket = minute_of_day // bucket_minutes

    return (
        lat,
        lng,
        now_local.date().isoformat(),
        bucket,
        data_version,
        tuple(float(t) for t in radius_tiers),
    )


class InMemoryResultCache:
    """Dict-backed cache, one instance per owner (never process-global)."""

    def __init__(self, max_entries: int = 1024):
        self.max_entries = max_entries
        self.cache: dict[Hashable, PipelineResult] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[PipelineResult]:
        result = self.cache.get(key)
        if result is None:
            self.misses += 1
        else:
            self.hits += 1
        return result

    def set(self, key: Hashable, result: PipelineResult) -> None:
        if key not in self.cache and len(self.cache) >= self.max_entries:
            # Evict the oldest entry
            oldest = next(iter(self.cache))
            del self.cache[oldest]
            logger.debug(f"Result cache full ({self.max_entries}), evicted {oldest}")
        self.cache[key] = result

    def clear(self) -> None:
        self.cache.clear()
