"""Feed fetching and parsing layer."""

from .parser import FeedHandler, ItemAccumulator, ParserState, parse_feed
from .rss import fetch_feed, validate_feed

__all__ = [
    "FeedHandler",
    "ItemAccumulator",
    "ParserState",
    "parse_feed",
    "fetch_feed",
    "validate_feed",
]
