import logging
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel

from data.Flight import Flight

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 6 * 60 * 60


class CacheMetadata(BaseModel):
    cached: bool
    timestamp: Optional[int] = None  # epoch millis


class CacheStats(BaseModel):
    size: int
    entries: List[str]


class FlightCache:
    """In-memory search result cache keyed by origin and date range.

    Destinations are not part of the key, so a narrower query can be served
    flights cached for a broader one.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self._cache: Dict[str, dict] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.ttl = ttl_seconds

    def _get_key(self, origin: str, from_date: str, to_date: str) -> str:
        return f"{origin}-{from_date}-{to_date}"

    def get_entry(self, origin: str, from_date: str, to_date: str) -> Optional[Tuple[List[Flight], CacheMetadata]]:
        """Cached flights and their creation time, read against a single clock reading."""
        key = self._get_key(origin, from_date, to_date)
        now = self._clock()
        with self._lock:
            entry = self._cache.get(key)
            if not entry:
                logger.info("Cache MISS for %s", key)
                return None

            # Check if expired
            if now > entry["expiry"]:
                del self._cache[key]
                logger.info("Cache EXPIRED for %s", key)
                return None

        age_minutes = round((now - entry["created"]) / 60)
        logger.info("Cache HIT for %s (age: %s minutes, %s flights)", key, age_minutes, len(entry["data"]))
        return list(entry["data"]), CacheMetadata(cached=True, timestamp=int(entry["created"] * 1000))

    def get(self, origin: str, from_date: str, to_date: str) -> Optional[List[Flight]]:
        entry = self.get_entry(origin, from_date, to_date)
        return None if entry is None else entry[0]

    def set(self, origin: str, from_date: str, to_date: str, flights: List[Flight]) -> CacheMetadata:
        key = self._get_key(origin, from_date, to_date)
        now = self._clock()
        with self._lock:
            self._cache[key] = {
                "created": now,
                "expiry": now + self.ttl,
                "data": tuple(flights),
            }
            size = len(self._cache)
        logger.info("Cache SET for %s (%s flights, ttl %ss, %s entries)", key, len(flights), self.ttl, size)
        return CacheMetadata(cached=True, timestamp=int(now * 1000))

    def get_metadata(self, origin: str, from_date: str, to_date: str) -> CacheMetadata:
        key = self._get_key(origin, from_date, to_date)
        with self._lock:
            entry = self._cache.get(key)
        if not entry or self._clock() > entry["expiry"]:
            return CacheMetadata(cached=False)
        return CacheMetadata(cached=True, timestamp=int(entry["created"] * 1000))

    def clear(self) -> None:
        logger.info("Clearing all cache entries")
        with self._lock:
            self._cache.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(size=len(self._cache), entries=list(self._cache))

    def cleanup(self) -> int:
        """Remove all expired entries to free memory."""
        now = self._clock()
        with self._lock:
            expired_keys = [k for k, v in self._cache.items() if now > v["expiry"]]
            for k in expired_keys:
                del self._cache[k]
        if expired_keys:
            logger.info("Cleaned up %s expired cache entries", len(expired_keys))
        return len(expired_keys)
