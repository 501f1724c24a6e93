from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from .bias import BiasRating
from .category import Category
from .source import Source


@dataclass(slots=True, eq=False)
class Article:
    """Canonical record derived from one feed item.

    Fields up to ``image_url`` are set at parse time and never touched by the
    ingestion pipeline afterwards. The remaining fields belong to downstream
    consumers (analysis, reading state) once the article has been handed off.
    """

    title: str
    source: Source
    url: str
    published: datetime
    category: Category
    description: Optional[str] = None
    image_url: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Downstream-owned fields
    summary: Optional[str] = None
    bias: Optional[BiasRating] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    is_breaking_news: bool = False
    importance: int = 5
    is_favorite: bool = False

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Article title must be non-empty")
        if not self.url or not self.url.strip():
            raise ValueError("Article url must be non-empty")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Article):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def title_similarity(self, other: "Article") -> float:
        from ..processors.dedup import title_similarity  # local import to avoid circular import

        return title_similarity(self.title, other.title)

    def time_since_publication(self, now: Optional[datetime] = None) -> timedelta:
        return (now or datetime.now(timezone.utc)) - self.published

    def is_recent(self, now: Optional[datetime] = None) -> bool:
        return self.time_since_publication(now) < timedelta(hours=24)


@dataclass(frozen=True, slots=True)
class StoryGroup:
    """Two or more articles from different outlets covering the same event.

    Built fresh by the story grouper on every request; never cached.
    ``bias_range`` and ``average_bias`` only consider members that carry a
    bias rating and are 0.0 when none does.
    """

    representative: Article
    articles: Tuple[Article, ...]
    bias_range: Tuple[float, float]
    average_bias: float

    @property
    def source_count(self) -> int:
        return len(self.articles)

    @property
    def bias_distribution(self) -> str:
        scores = [a.bias.spectrum.score if a.bias else 0.0 for a in self.articles]
        left = sum(1 for s in scores if s < -0.3)
        center = sum(1 for s in scores if abs(s) <= 0.3)
        right = sum(1 for s in scores if s > 0.3)
        return f"{left}L / {center}C / {right}R"
