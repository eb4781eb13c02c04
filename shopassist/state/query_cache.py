"""
Tag-based query cache

Caches storefront GET responses under a key and a set of tags, so that a
mutation can drop every cached query for a tag ("Products", "Product")
without knowing the individual keys.

Author: TM3
Date: 2026-10-15
"""
import time
import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, Optional, Set, Tuple

logger = logging.getLogger(__name__)

PRODUCT_TAGS = ('Products', 'Product')


class QueryCache:
    """
    In-memory TTL cache with tag invalidation.

    For production with multiple instances, consider using Redis.
    """

    def __init__(self, ttl_seconds: int = 60):
        self.ttl_seconds = ttl_seconds
        # {key: (stored_at, value)}
        self._entries: Dict[str, Tuple[float, Any]] = {}
        # {tag: {key, ...}}
        self._tags: Dict[str, Set[str]] = defaultdict(set)

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, value = entry
        if self._expired(stored_at, time.time()):
            self._discard(key)
            return None
        return value

    def set(self, key: str, value: Any, tags: Iterable[str]) -> None:
        if not self.enabled:
            return
        now = time.time()
        self.purge_expired(now)
        self._entries[key] = (now, value)
        for tag in tags:
            self._tags[tag].add(key)

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Drop every expired entry and its tag registrations; returns count dropped"""
        now = time.time() if now is None else now
        expired = [key for key, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]
        for key in expired:
            self._discard(key)
        if expired:
            logger.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.ttl_seconds

    def _discard(self, key: str) -> None:
        self._entries.pop(key, None)
        for tag in [tag for tag, keys in self._tags.items() if key in keys]:
            self._tags[tag].discard(key)
            if not self._tags[tag]:
                del self._tags[tag]

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Drop every entry registered under any of ``tags``; returns count dropped"""
        tags = list(tags)
        dropped = 0
        for tag in tags:
            for key in self._tags.pop(tag, set()):
                if key in self._entries:
                    dropped += 1
                self._discard(key)

        logger.info(f"Invalidated cache tags {list(tags)}: {dropped} entries dropped")
        return dropped

    def __len__(self) -> int:
        return len(self._entries)
