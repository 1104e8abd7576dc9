"""
TTL cache in front of a search provider.

Keys are built from the normalized query text, region and result count,
so "iPhone 17" and " iphone  17 " share an entry. Provider errors are
never cached. The cache holds at most `maxsize` entries: every write drops
expired entries, then evicts the entry closest to expiry when still full.
"""
from __future__ import annotations

import hashlib
import json
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..logger import get_logger
from ..models import RawOffer
from ..utils.text_cleaning import normalize_query
from .base import SearchProvider

logger = get_logger(__name__)


@dataclass(slots=True)
class CacheEntry:
    offers: List[RawOffer]
    expires_at: float


def build_key(query: str, region: str, max_results: int) -> str:
    """
    Cache key for one provider call.

    Examples:
        >>> build_key("iPhone 17", "us", 100) == build_key("  iphone   17 ", "US", 100)
        True
    """
    params = {"q": normalize_query(query), "gl": (region or "").lower(), "num": max_results}
    digest = hashlib.sha256(json.dumps(params, sort_keys=True).encode("utf-8")).hexdigest()
    return f"shopping:{digest[:32]}"


class CachedSearchProvider(SearchProvider):
    """Cache-or-miss wrapper around another SearchProvider."""

    def __init__(
        self,
        provider: SearchProvider,
        ttl_hours: float = 24,
        maxsize: int = 500,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            provider: Provider to call on a miss
            ttl_hours: Entry lifetime
            maxsize: Maximum number of entries held
            clock: Time source in seconds (injectable for tests)
        """
        self.provider = provider
        self.name = f"cached:{provider.name}"
        self.ttl_s = ttl_hours * 3600
        self.maxsize = maxsize
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def search(self, query: str, region: str = "us", max_results: int = 100) -> List[RawOffer]:
        key = build_key(query, region, max_results)

        cached = self.get(key)
        if cached is not None:
            self.hits += 1
            logger.debug(f"Cache hit for '{query}' ({key})")
            return cached

        self.misses += 1
        offers = self.provider.search(query, region=region, max_results=max_results)
        self.set(key, offers)
        return list(offers)

    def get(self, key: str) -> Optional[List[RawOffer]]:
        """Return cached offers, or None on a miss or an expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return list(entry.offers)

    def set(self, key: str, offers: List[RawOffer], ttl_hours: Optional[float] = None) -> None:
        ttl_s = ttl_hours * 3600 if ttl_hours is not None else self.ttl_s
        now = self._clock()
        with self._lock:
            self._drop_expired(now)
            # Evict entries closest to expiry if at capacity
            while key not in self._entries and self._entries and len(self._entries) >= self.maxsize:
                oldest_key = min(self._entries, key=lambda k: self._entries[k].expires_at)
                del self._entries[oldest_key]
            self._entries[key] = CacheEntry(offers=list(offers), expires_at=now + ttl_s)

    def delete_expired(self) -> int:
        """
        Remove expired entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            removed = self._drop_expired(self._clock())
        if removed:
            logger.info(f"Search cache: deleted {removed} expired entries")
        return removed

    def _drop_expired(self, now: float) -> int:
        """Remove expired entries; caller holds the lock."""
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for k in expired:
            del self._entries[k]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
