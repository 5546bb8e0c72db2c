"""
Result Cache — bounded, TTL'd store of detection results.

Eviction removes the entry with the fewest hits, breaking ties by the oldest
insertion. Expired entries are dropped lazily on lookup (and purged before a
live entry is evicted). Results go in and come out as deep copies so callers
can never corrupt a cached entry.
"""

from __future__ import annotations

import hashlib
import threading
import time
from typing import Callable, Optional

import structlog

from api.schemas import CacheEntry, CacheStats, DetectionOptions, DetectionResult

logger = structlog.get_logger()


class ResultCache:
    """Thread-safe in-process cache; one lock serialises every access."""

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.ttl_ms = ttl_seconds * 1000.0
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    @staticmethod
    def make_key(normalized_text: str, options: Optional[DetectionOptions] = None) -> str:
        """Hash of the normalised text and the options that change the verdict."""
        options = options or DetectionOptions()
        material = f"{normalized_text}\x1f{int(options.offline)}\x1f{options.min_confidence:.4f}"
        return hashlib.sha256(material.encode("utf-8")).hexdigest()

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def _expired(self, entry: CacheEntry, now_ms: float) -> bool:
        return now_ms - entry.inserted_at_ms >= self.ttl_ms

    def get(self, key: str) -> Optional[DetectionResult]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if self._expired(entry, self._now_ms()):
                del self._entries[key]
                self._expirations += 1
                self._misses += 1
                return None
            # Swap in a new entry rather than mutating the stored one
            self._entries[key] = entry.model_copy(update={"hit_count": entry.hit_count + 1})
            self._hits += 1
            return entry.result.model_copy(deep=True)

    def put(self, key: str, result: DetectionResult) -> None:
        entry = CacheEntry(
            result=result.model_copy(deep=True),
            inserted_at_ms=self._now_ms(),
        )
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                self._purge_expired(entry.inserted_at_ms)
                if len(self._entries) >= self.max_size:
                    self._evict_one()
            self._entries[key] = entry

    def _purge_expired(self, now_ms: float) -> None:
        expired = [key for key, entry in self._entries.items() if self._expired(entry, now_ms)]
        for key in expired:
            del self._entries[key]
        self._expirations += len(expired)

    def _evict_one(self) -> None:
        victim = min(
            self._entries,
            key=lambda k: (self._entries[k].hit_count, self._entries[k].inserted_at_ms),
        )
        del self._entries[victim]
        self._evictions += 1
        logger.debug("cache_evicted", key=victim[:12])

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                max_size=self.max_size,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                expirations=self._expirations,
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = self._misses = self._evictions = self._expirations = 0
