"""In-process TTL cache for the video account directory."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable, Generic, Optional, Sequence, TypeVar

from scheduler.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    items: tuple[T, ...]
    stored_at: datetime


class DirectoryCache(Generic[T]):
    """Read-through cache holding one snapshot of a resource directory.

    The whole snapshot is swapped under a lock, so a reader sees either the
    old entry or the new one, never a partial update. Expiry is checked
    lazily on read.
    """

    def __init__(self, ttl_seconds: int = 300, clock: Clock = _utcnow):
        """
        Initialize cache.

        Args:
            ttl_seconds: Time-to-live of a snapshot in seconds (default: 5 minutes)
            clock: Returns the current time, replaceable in tests
        """
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: Optional[CacheEntry[T]] = None

    def _expired(self, entry: Optional[CacheEntry[T]]) -> bool:
        return entry is None or self._clock() - entry.stored_at >= self.ttl

    def get(self) -> Optional[list[T]]:
        """Return the cached items, or None when missing or expired."""
        with self._lock:
            entry = self._entry
        if self._expired(entry):
            return None
        return list(entry.items)

    def set(self, items: Sequence[T]) -> None:
        entry = CacheEntry(items=tuple(items), stored_at=self._clock())
        with self._lock:
            self._entry = entry

    def clear(self) -> None:
        with self._lock:
            self._entry = None
        logger.debug("Cleared directory cache")

    def is_expired(self) -> bool:
        with self._lock:
            entry = self._entry
        return self._expired(entry)

    def stats(self) -> dict[str, object]:
        with self._lock:
            entry = self._entry
        return {
            "size": len(entry.items) if entry else 0,
            "last_updated": entry.stored_at if entry else None,
            "is_expired": self._expired(entry),
        }


@lru_cache
def get_account_cache() -> DirectoryCache:
    """Process-wide account directory cache shared by all requests."""
    return DirectoryCache(ttl_seconds=settings.ACCOUNT_CACHE_TTL_SECONDS)
