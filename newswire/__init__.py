"""Top-level package for the newswire feed-ingestion pipeline.

This package fetches syndication feeds concurrently, normalizes their items
into canonical articles, removes near-duplicate wire copy, and groups
articles from different outlets that cover the same story.
"""

__all__ = []
