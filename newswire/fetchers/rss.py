from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

import requests

from ..models import Article, Category, Source
from ..utils.logging import get_logger
from .parser import parse_feed

logger = get_logger("nw.fetchers.rss")

DEFAULT_TIMEOUT = 15.0

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/127.0.0.0 Safari/537.36"
    ),
    "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, text/xml;q=0.8, */*;q=0.5",
}


def fetch_feed(
    source: Source,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
    now: Optional[datetime] = None,
) -> List[Article]:
    """Download one feed and parse it into articles.

    The request is made with ``requests`` using an explicit timeout; the body
    is handed to the SAX parser as raw bytes so the document's own encoding
    declaration is honoured. Transport errors, non-2xx statuses and
    unparsable documents all produce an empty list: one broken feed must not
    break the category it belongs to.
    """
    logger.debug("Fetching feed from %s", source.url)
    http = session or requests
    try:
        resp = http.get(source.url, headers=_DEFAULT_HEADERS, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Feed request error for %s: %s", source.name, exc)
        return []

    if not 200 <= resp.status_code < 300:
        logger.warning("Feed fetch failed (%s): %s", resp.status_code, source.url)
        return []

    return parse_feed(resp.content, source, now=now)


def validate_feed(
    url: str,
    *,
    category: Category | str = Category.US,
    timeout: float = DEFAULT_TIMEOUT,
) -> Tuple[bool, int]:
    """Check that ``url`` serves a parsable feed with at least one article.

    ``category`` is the one the feed is about to be added under; it is only
    stamped on the throwaway articles, so it never changes the outcome.
    Returns ``(success, article_count)``.
    """
    candidate = Source(
        id="feed-validation",
        name="Feed Validation",
        url=url,
        category=Category.parse(category),
        credibility=50,
        factuality=0.5,
    )
    articles = fetch_feed(candidate, timeout=timeout)
    return bool(articles), len(articles)
