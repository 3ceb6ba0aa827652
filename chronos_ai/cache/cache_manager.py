"""
Response Cache - process-local TTL memo for idempotent features
"""

import hashlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple

from ..monitoring.metrics import cache_hits, cache_misses

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    key: str
    payload: Any
    stored_at: float


class ResponseCache:
    """TTL-bounded memo keyed by derived request signatures"""

    def __init__(self, ttl: float = 300.0, clock: Callable[[], float] = time.monotonic):
        """
        Initialize response cache

        Args:
            ttl: Seconds an entry stays valid after it is stored
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """
        Get a live payload

        Expired entries are treated as absent; they are overwritten by the
        next successful compute rather than purged here.
        """
        with self._lock:
            entry = self._entries.get(key)
        if entry is not None and self._clock() - entry.stored_at < self.ttl:
            return entry.payload
        return None

    def set(self, key: str, payload: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())

    async def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Awaitable[Any]],
    ) -> Tuple[Any, bool]:
        """
        Return ``(payload, served_from_cache)``

        On a miss ``compute`` runs and its result is stored only if it
        returns; an exception propagates and nothing is cached.
        """
        feature = key.split(":", 1)[0]
        cached = self.get(key)
        if cached is not None:
            cache_hits.labels(feature=feature).inc()
            logger.debug(f"Cache hit for {key}")
            return cached, True

        cache_misses.labels(feature=feature).inc()
        logger.debug(f"Cache miss for {key}")
        payload = await compute()
        self.set(key, payload)
        return payload, False

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _truncate(part: Any, limit: Optional[int]) -> str:
    text = str(part)
    return text[:limit] if limit is not None else text


def make_cache_key(feature: str, *parts: Any, limit: Optional[int] = None) -> str:
    """
    Generate cache key from a feature name and signature parts

    Parts are truncated to ``limit`` characters and hashed so that keys stay
    small and never carry raw request text.
    """
    key_str = ":".join(_truncate(part, limit) for part in parts)
    return f"{feature}:{hashlib.md5(key_str.encode()).hexdigest()}"


def name_signature(names: Iterable[str], limit: int = 100) -> str:
    """Sorted, comma-joined names bounded to ``limit`` characters."""
    return ",".join(sorted(names))[:limit]
