from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import partial
from typing import Callable, Dict, List, Optional

from .analysis import group_similar_stories
from .cache import FreshnessCache
from .fetchers import fetch_feed
from .models import Article, Category, Source, StoryGroup
from .processors import Deduplicator, DedupStats
from .sources import SourceRegistry
from .utils.logging import get_logger
from .utils.pipeline_config import PipelineConfig

logger = get_logger("nw.orchestrator")

FetchFn = Callable[[Source], List[Article]]


class Orchestrator:
    """Fetch, dedupe and cache articles per category.

    Each category refresh fans out one fetch+parse unit per source on a
    thread pool and waits for all of them. A unit that fails contributes no
    articles; it never cancels or delays the others beyond its own timeout.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        *,
        cache: Optional[FreshnessCache] = None,
        config: Optional[PipelineConfig] = None,
        dedup: Optional[Deduplicator] = None,
        fetcher: Optional[FetchFn] = None,
    ) -> None:
        self.registry = registry
        self.config = config or PipelineConfig()
        self.cache = cache or FreshnessCache(ttl_seconds=self.config.cache_ttl_seconds)
        self.dedup = dedup or Deduplicator(
            title_threshold=self.config.dedup_threshold,
            max_articles=self.config.max_articles,
        )
        self.fetcher: FetchFn = fetcher or partial(fetch_feed, timeout=self.config.fetch_timeout)

    def _fetch_source(self, source: Source) -> List[Article]:
        try:
            return list(self.fetcher(source) or [])
        except Exception as exc:  # noqa: BLE001 - one feed must not sink the batch
            logger.exception("Failed to fetch from %s: %s", source.name, exc)
            return []

    def fetch_category(self, category: Category | str) -> List[Article]:
        """Fetch every source of ``category`` concurrently and return the union.

        Results are concatenated in completion order unless the config asks
        for ``deterministic_order``, in which case source order is used.
        """
        category = Category.parse(category)
        sources = self.registry.sources_for(category)
        if not sources:
            logger.info("No sources configured for %s", category.value)
            return []

        per_source: Dict[int, List[Article]] = {}
        arrival: List[Article] = []
        max_workers = max(1, min(self.config.max_workers, len(sources)))
        logger.debug(
            "Starting concurrent fetch for %s: %d sources (workers=%d)", category.value, len(sources), max_workers
        )
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="feed") as executor:
            future_map = {executor.submit(self._fetch_source, s): idx for idx, s in enumerate(sources)}
            for fut in as_completed(future_map):
                idx = future_map[fut]
                items = fut.result()
                per_source[idx] = items
                arrival.extend(items)

        self._record_custom_fetches(sources, per_source)

        if self.config.deterministic_order:
            results = [a for idx in range(len(sources)) for a in per_source.get(idx, [])]
        else:
            results = arrival
        logger.info(
            "Concurrent fetch complete for %s: total=%d from sources=%d", category.value, len(results), len(sources)
        )
        return results

    def _record_custom_fetches(self, sources: List[Source], per_source: Dict[int, List[Article]]) -> None:
        custom = self.registry.custom
        counts: Dict[str, int] = {}
        for idx, source in enumerate(sources):
            entry = custom.find_by_source_id(source.id)
            if entry is not None:
                counts[entry.id] = len(per_source.get(idx, []))
        if not counts:
            return
        try:
            custom.record_fetches(counts)
        except OSError as exc:
            logger.warning("Could not save custom source fetch stats to %s: %s", custom.store_path, exc)

    def refresh_category(self, category: Category | str) -> List[Article]:
        """Fetch, dedupe, sort newest first, cap, and store in the cache."""
        category = Category.parse(category)
        raw = self.fetch_category(category)
        stats = DedupStats(total=0, kept=0, duplicates=0)
        articles = self.dedup.process(raw, stats=stats)
        self.cache.put(category, articles)
        logger.info(
            "Refreshed %s: fetched=%d, duplicates=%d, kept=%d",
            category.value,
            stats.total,
            stats.duplicates,
            len(articles),
        )
        return articles

    def get_or_fetch(self, category: Category | str) -> List[Article]:
        category = Category.parse(category)
        cached = self.cache.get(category)
        if cached is not None:
            logger.info("Using cached articles for %s (%d articles)", category.value, len(cached))
            return cached
        return self.refresh_category(category)

    def fetch_all_categories(self) -> Dict[Category, List[Article]]:
        return {category: self.get_or_fetch(category) for category in Category}

    def group_similar_stories(self, articles: List[Article]) -> List[StoryGroup]:
        return group_similar_stories(
            articles,
            similarity_threshold=self.config.cluster_threshold,
            window=self.config.cluster_window,
        )

    def invalidate_cache(self, category: Category | str) -> None:
        self.cache.invalidate(Category.parse(category))

    def invalidate_all_caches(self) -> None:
        self.cache.invalidate_all()
