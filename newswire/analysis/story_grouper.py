from __future__ import annotations

from collections import deque
from datetime import timedelta
from typing import Deque, Iterable, List, Set, Tuple

from ..models import Article, StoryGroup
from ..processors.dedup import jaccard_similarity, normalize_title
from ..utils.logging import get_logger

logger = get_logger("nw.analysis.story_grouper")

DEFAULT_SIMILARITY_THRESHOLD = 0.70
DEFAULT_WINDOW = timedelta(hours=4)

Group = List[Article]


def _bias_stats(members: Iterable[Article]) -> Tuple[Tuple[float, float], float]:
    scores = [a.bias.spectrum.score for a in members if a.bias is not None]
    if not scores:
        return (0.0, 0.0), 0.0
    return (min(scores), max(scores)), sum(scores) / len(scores)


def group_similar_stories(
    articles: Iterable[Article],
    *,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    window: timedelta = DEFAULT_WINDOW,
) -> List[StoryGroup]:
    """Group articles from different outlets that cover the same event.

    A single greedy pass, head to tail:

    1. pop the first remaining article as the anchor;
    2. pull out every other remaining article whose title similarity to the
       anchor exceeds ``similarity_threshold`` and whose publish time is less
       than ``window`` away from the anchor's;
    3. keep the group if it has two or more members.

    Pulled articles are never reconsidered, so an article only ever joins
    the group of the earliest anchor similar enough to it. The result is
    order-dependent and not a globally optimal clustering. Groups are
    returned largest first.
    """
    remaining: Deque[Tuple[Article, Set[str]]] = deque(
        (a, set(normalize_title(a.title).split())) for a in articles
    )
    groups: List[StoryGroup] = []

    while remaining:
        anchor, anchor_tokens = remaining.popleft()
        members: Group = [anchor]
        unmatched: Deque[Tuple[Article, Set[str]]] = deque()
        for other, other_tokens in remaining:
            close_in_time = abs(anchor.published - other.published) < window
            if close_in_time and jaccard_similarity(anchor_tokens, other_tokens) > similarity_threshold:
                members.append(other)
            else:
                unmatched.append((other, other_tokens))
        remaining = unmatched

        if len(members) < 2:
            continue
        bias_range, average = _bias_stats(members)
        groups.append(
            StoryGroup(
                representative=anchor,
                articles=tuple(members),
                bias_range=bias_range,
                average_bias=average,
            )
        )

    groups.sort(key=lambda g: len(g.articles), reverse=True)
    logger.debug("Grouped %d stories", len(groups))
    return groups
