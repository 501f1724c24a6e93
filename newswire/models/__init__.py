"""Typed models used across the application."""

from .category import Category
from .bias import BiasSpectrum, BiasRating, credibility_label
from .source import Source
from .article import Article, StoryGroup

__all__ = [
    "Category",
    "BiasSpectrum",
    "BiasRating",
    "credibility_label",
    "Source",
    "Article",
    "StoryGroup",
]
