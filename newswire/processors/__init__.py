"""Processing steps: description sanitization, date parsing, deduplication."""

from .normalize import sanitize_html, normalize_plain_text, parse_published_date, DATE_FORMATS
from .dedup import (
    Deduplicator,
    DedupStats,
    normalize_title,
    jaccard_similarity,
    title_similarity,
    remove_duplicates,
)

__all__ = [
    "sanitize_html",
    "normalize_plain_text",
    "parse_published_date",
    "DATE_FORMATS",
    "Deduplicator",
    "DedupStats",
    "normalize_title",
    "jaccard_similarity",
    "title_similarity",
    "remove_duplicates",
]
