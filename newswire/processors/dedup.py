from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from ..models import Article
from ..utils.logging import get_logger

logger = get_logger("nw.processors.dedup")

DEFAULT_TITLE_THRESHOLD = 0.85
DEFAULT_MAX_ARTICLES = 100

_non_word_re = re.compile(r"[^\w\s]|_")


def normalize_title(title: str | None) -> str:
    """Lowercase and drop everything that is not a letter, digit or whitespace."""
    return _non_word_re.sub("", (title or "").lower())


def _tokens(normalized: str) -> Set[str]:
    return set(normalized.split())


def jaccard_similarity(a: Set[str], b: Set[str]) -> float:
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def title_similarity(a: str | None, b: str | None) -> float:
    """Token-set Jaccard similarity of two titles after normalization."""
    return jaccard_similarity(_tokens(normalize_title(a)), _tokens(normalize_title(b)))


@dataclass(slots=True)
class DedupStats:
    total: int
    kept: int
    duplicates: int


class Deduplicator:
    """Collapse near-identical titles (syndicated wire copy) within one batch.

    Matching is first-seen-wins: an article is dropped when its title is more
    similar than ``title_threshold`` to any title already accepted, so which
    copy survives depends on the order the batch arrived in.
    """

    def __init__(
        self,
        *,
        title_threshold: float = DEFAULT_TITLE_THRESHOLD,
        max_articles: int = DEFAULT_MAX_ARTICLES,
    ) -> None:
        self.title_threshold = title_threshold
        self.max_articles = max_articles

    def is_duplicate(self, tokens: Set[str], accepted: Iterable[Set[str]]) -> bool:
        return any(jaccard_similarity(tokens, seen) > self.title_threshold for seen in accepted)

    def dedupe(self, articles: Iterable[Article], *, stats: Optional[DedupStats] = None) -> List[Article]:
        unique: List[Article] = []
        accepted: List[Set[str]] = []
        total = 0
        for art in articles:
            total += 1
            tokens = _tokens(normalize_title(art.title))
            if self.is_duplicate(tokens, accepted):
                logger.debug("Dropping duplicate title: %s", art.title)
                continue
            accepted.append(tokens)
            unique.append(art)
        if stats is not None:
            stats.total = total
            stats.kept = len(unique)
            stats.duplicates = total - len(unique)
        logger.info("Deduplication: %d -> %d unique articles", total, len(unique))
        return unique

    def process(self, articles: Iterable[Article], *, stats: Optional[DedupStats] = None) -> List[Article]:
        """Dedupe, order newest first and keep at most ``max_articles``."""
        unique = self.dedupe(articles, stats=stats)
        unique.sort(key=lambda a: a.published, reverse=True)
        return unique[: self.max_articles]


def remove_duplicates(
    articles: Iterable[Article],
    *,
    dedup: Optional[Deduplicator] = None,
    return_stats: bool = False,
):
    """Run the full dedupe/sort/cap step over a raw category batch.

    Returns the surviving articles by default. If ``return_stats`` is True,
    returns a tuple of (articles, DedupStats).
    """
    d = dedup or Deduplicator()
    stats = DedupStats(total=0, kept=0, duplicates=0)
    result = d.process(articles, stats=stats)
    return (result, stats) if return_stats else result
