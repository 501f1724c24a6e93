from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .models import Article, Category
from .utils.logging import get_logger

logger = get_logger("nw.cache")

DEFAULT_TTL_SECONDS = 3600.0


@dataclass(frozen=True, slots=True)
class CacheEntry:
    timestamp: float
    articles: Tuple[Article, ...]


class FreshnessCache:
    """Per-category, in-memory store of the last refreshed article list.

    An entry is fresh while ``clock() - timestamp < ttl_seconds``. Entries are
    replaced whole; there is no partial update of a category's list.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[Category, CacheEntry] = {}

    def get(self, category: Category) -> Optional[List[Article]]:
        entry = self._entries.get(category)
        if entry is None:
            return None
        age = self.clock() - entry.timestamp
        if age >= self.ttl_seconds:
            logger.debug("Cache expired for %s (age=%.0fs)", category.value, age)
            return None
        logger.debug("Cache hit for %s (%d articles)", category.value, len(entry.articles))
        return list(entry.articles)

    def put(self, category: Category, articles: Sequence[Article]) -> None:
        # single assignment keeps timestamp and list consistent
        self._entries[category] = CacheEntry(timestamp=self.clock(), articles=tuple(articles))

    def entry(self, category: Category) -> Optional[CacheEntry]:
        return self._entries.get(category)

    def invalidate(self, category: Category) -> None:
        self._entries.pop(category, None)

    def invalidate_all(self) -> None:
        self._entries.clear()
        logger.info("Cleared all article caches")
