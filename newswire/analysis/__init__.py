"""Cross-outlet story grouping."""

from .story_grouper import group_similar_stories

__all__ = ["group_similar_stories"]
