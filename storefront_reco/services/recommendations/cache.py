"""
Recommendation result cache
Bounded LRU with a per-entry time-to-live
"""
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional


@dataclass
class CacheEntry:
    """Cached result with its storage time"""
    data: Any
    stored_at: float
    ttl: float
    hits: int = 0

    def age(self, now: float) -> float:
        return now - self.stored_at

    def is_expired(self, now: float) -> bool:
        """Fresh while age < ttl; an entry exactly ttl old is stale"""
        return self.age(now) >= self.ttl


class RecommendationCache:
    """
    Cache of computed recommendation lists keyed by request parameters

    Holds at most `max_size` entries and evicts the least recently used
    one on overflow. Stale entries are dropped when read, and
    cleanup_expired() sweeps the rest (the app runs it on a schedule,
    from a worker thread, hence the lock).
    """

    def __init__(
        self,
        max_size: int = 1000,
        default_ttl: float = 300,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            max_size: Maximum number of entries (0 disables caching)
            default_ttl: Seconds an entry stays fresh
            clock: Monotonic time source in seconds
        """
        self.max_size = max_size
        self.default_ttl = default_ttl
        self.clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.expirations = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Cached value, or None when absent or stale"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired(self.clock()):
                del self._entries[key]
                self.expirations += 1
                entry = None

            if entry is None:
                self.misses += 1
                return None

            self._entries.move_to_end(key)
            entry.hits += 1
            self.hits += 1
            return entry.data

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None):
        """Store `value`, evicting the least recently used entry when full"""
        if self.max_size <= 0:
            return

        with self._lock:
            if key not in self._entries:
                while len(self._entries) >= self.max_size:
                    self._entries.popitem(last=False)
                    self.evictions += 1

            self._entries[key] = CacheEntry(
                data=value,
                stored_at=self.clock(),
                ttl=self.default_ttl if ttl is None else ttl
            )
            self._entries.move_to_end(key)

    def delete(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self):
        """Drop every entry; dropped entries count as evictions"""
        with self._lock:
            self.evictions += len(self._entries)
            self._entries.clear()

    def cleanup_expired(self) -> int:
        """
        Remove stale entries

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self.clock()
            stale = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in stale:
                del self._entries[key]
            self.expirations += len(stale)
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def get_stats(self) -> Dict[str, Any]:
        """Size, hit rate and eviction counters"""
        requests = self.hits + self.misses
        size = len(self._entries)
        return {
            "size": size,
            "max_size": self.max_size,
            "utilization": size / self.max_size if self.max_size > 0 else 0,
            "default_ttl": self.default_ttl,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hits / requests, 4) if requests else 0,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "total_requests": requests
        }

    def get_entry_info(self, key: Hashable) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        now = self.clock()
        age = entry.age(now)
        return {
            "key": key,
            "age_seconds": round(age, 2),
            "ttl": entry.ttl,
            "remaining_seconds": round(max(entry.ttl - age, 0), 2),
            "hits": entry.hits,
            "is_expired": entry.is_expired(now)
        }
