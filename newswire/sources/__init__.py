"""Feed source registry: built-in sources and user-added custom sources."""

from .custom import CustomSource, CustomSourceManager
from .registry import SourceRegistry, local_news_source

__all__ = ["CustomSource", "CustomSourceManager", "SourceRegistry", "local_news_source"]
