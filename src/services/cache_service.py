"""In-process response cache with read-time expiry."""

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import structlog

from src.models.weather import CacheStatus

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 600  # 10 minutes


def canonical_params(params: dict[str, Any]) -> str:
    """Serialize params so that key order never changes the result."""
    return json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)


def make_cache_key(endpoint: str, params: dict[str, Any]) -> str:
    """Build the cache key for an endpoint and its parameters."""
    return f"{endpoint}:{canonical_params(params)}"


@dataclass(frozen=True)
class CacheEntry:
    """Cached payload stamped with its write time (epoch seconds)."""

    payload: Any
    written_at: float


class ResponseCache:
    """Key-value cache for raw provider payloads.

    Entries older than the TTL are treated as absent by `get` but stay
    stored until overwritten or cleared. There is no eviction beyond that,
    and no locking: every operation is synchronous, so under a single event
    loop it runs to completion between awaits.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def is_expired(self, entry: CacheEntry) -> bool:
        """Check whether an entry has outlived the TTL."""
        return self._clock() - entry.written_at > self.ttl_seconds

    def get(self, endpoint: str, params: dict[str, Any]) -> Optional[Any]:
        """Return the cached payload, or None if missing or expired."""
        key = make_cache_key(endpoint, params)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self.is_expired(entry):
            logger.debug(
                "weather_cache_expired",
                key=key,
                age_seconds=round(self._clock() - entry.written_at, 1),
            )
            return None

        logger.debug("weather_cache_hit", key=key)
        return entry.payload

    def put(self, endpoint: str, params: dict[str, Any], payload: Any) -> None:
        """Store a payload stamped with the current time."""
        key = make_cache_key(endpoint, params)
        self._entries[key] = CacheEntry(payload=payload, written_at=self._clock())
        logger.debug("weather_cached", key=key, ttl=self.ttl_seconds)

    def clear(self) -> None:
        """Drop every entry."""
        count = len(self._entries)
        self._entries.clear()
        logger.info("weather_cache_cleared", entries=count)

    def status(self) -> CacheStatus:
        """Report entry count and approximate serialized size in bytes."""
        serialized = json.dumps(
            [
                {"data": entry.payload, "timestamp": entry.written_at}
                for entry in self._entries.values()
            ],
            default=str,
        )
        return CacheStatus(
            entries=len(self._entries),
            size_bytes=len(serialized.encode("utf-8")),
        )

    def __len__(self) -> int:
        return len(self._entries)
