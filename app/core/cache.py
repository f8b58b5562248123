"""
app/core/cache.py
═══════════════════════════════════════════════════════════════════════════
In-memory TTL cache for normalized upstream responses.
  • Handlers call get() before the upstream and set() after a success
  • Writes are protected by a threading lock → atomic replace, never partial
  • Failed upstream calls never call set() → nothing bad gets cached
  • Expiry is lazy: a stale entry is ignored on read and overwritten on the
    next miss. There is no sweep, so memory is only reclaimed by overwrite.
  • State is per process. Horizontally scaled instances each keep their own
    copy; swap in another CacheBackend to share it.
═══════════════════════════════════════════════════════════════════════════
"""

import json
import logging
import threading
import time
from typing import Any, Callable, Optional, Protocol

from app.core.config import CACHE_TTL_S

log = logging.getLogger("cache")


class CacheBackend(Protocol):
    def get(self, key: str) -> Optional[Any]: ...
    def set(self, key: str, value: Any) -> None: ...
    def is_fresh(self, key: str) -> bool: ...


class TTLCache:
    """Process-wide key → {value, stored_at} map with a fixed time-to-live."""

    def __init__(self, ttl_s: float = CACHE_TTL_S, clock: Callable[[], float] = time.time):
        self.ttl_s  = ttl_s
        self._clock = clock
        self._store: dict[str, dict] = {}
        self._lock  = threading.Lock()
        self.hits   = 0
        self.misses = 0

    def _fresh(self, entry: Optional[dict]) -> bool:
        return entry is not None and self._clock() - entry["stored_at"] < self.ttl_s

    def get(self, key: str) -> Optional[Any]:
        """Cached value, or None if the key was never set or has expired."""
        with self._lock:
            e = self._store.get(key)
            if self._fresh(e):
                self.hits += 1
                log.info(f"Cache hit for: {key}")
                return e["value"]
            self.misses += 1
        log.debug(f"Cache miss for: {key}")
        return None

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store[key] = {"value": value, "stored_at": self._clock()}

    def is_fresh(self, key: str) -> bool:
        with self._lock:
            return self._fresh(self._store.get(key))

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self.hits = self.misses = 0

    def summary(self) -> dict:
        """Metadata only — safe to expose in /health."""
        with self._lock:
            now = self._clock()
            return {
                "entries": len(self._store),
                "hits":    self.hits,
                "misses":  self.misses,
                "keys": {
                    k: {
                        "age_s": round(now - v["stored_at"], 1),
                        "fresh": now - v["stored_at"] < self.ttl_s,
                    }
                    for k, v in self._store.items()
                },
            }


_recipe_cache = TTLCache()


def get_recipe_cache() -> CacheBackend:
    """FastAPI dependency. Override it to plug in a shared cache store."""
    return _recipe_cache


# ── Key construction ──────────────────────────────────────────────────────────

def canonical_tags(tags: Optional[str]) -> str:
    """'b, a,,a' → 'a,b' so tag order never changes the cache key."""
    if not tags:
        return ""
    return ",".join(sorted({t.strip() for t in tags.split(",") if t.strip()}))


def search_key(query: str, offset: int, size: int, tags: str) -> str:
    # JSON-encoded so a ":" inside the query or a tag cannot collide with another key
    return "search:" + json.dumps([query, offset, size, canonical_tags(tags)], ensure_ascii=False)


def details_key(recipe_id: str) -> str:
    return f"details:{recipe_id}"


FEATURED_KEY = "featured"
TAGS_KEY     = "tags"
