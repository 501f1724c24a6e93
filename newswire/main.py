"""Command-line entrypoint for the newswire pipeline.

1) load the source registry
2) fetch, dedupe and cache one category (or all of them)
3) print the articles, optionally grouped into multi-source stories
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

from .models import Article, Category, StoryGroup
from .orchestrator import Orchestrator
from .sources import CustomSourceManager, SourceRegistry
from .utils.config_loader import ConfigError
from .utils.logging import configure_logging, get_logger
from .utils.pipeline_config import PipelineConfig


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="newswire – fetch, dedupe and group news feeds")
    parser.add_argument(
        "--config",
        default="config/sources.yaml",
        help="Path to the built-in sources file (YAML)",
    )
    parser.add_argument(
        "--custom-sources",
        default=None,
        help="Path to a JSON file with user-added sources",
    )
    parser.add_argument(
        "--category",
        default=Category.US.value,
        choices=[c.value for c in Category] + ["all"],
        help="Category to fetch, or 'all'",
    )
    parser.add_argument(
        "--location",
        nargs=2,
        metavar=("CITY", "STATE"),
        default=None,
        help="Location used to build the Local category feed",
    )
    parser.add_argument(
        "--groups",
        action="store_true",
        help="Print multi-source story groups instead of single articles",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Maximum number of lines to print per category",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args()


def _print_articles(category: Category, articles: List[Article], limit: int) -> None:
    print(f"== {category.display_name} ({len(articles)} articles)")
    for art in articles[:limit]:
        print(f"  {art.published:%Y-%m-%d %H:%M} [{art.source.name}] {art.title}")
        print(f"      {art.url}")


def _print_groups(category: Category, groups: List[StoryGroup], limit: int) -> None:
    print(f"== {category.display_name} ({len(groups)} story groups)")
    for grp in groups[:limit]:
        rep = grp.representative
        sources = ", ".join(sorted({a.source.name for a in grp.articles}))
        print(f"  ({grp.source_count}) {rep.title}")
        print(f"      sources: {sources} | bias {grp.bias_distribution}, avg {grp.average_bias:+.2f}")


def main() -> int:
    # Optional: load .env
    try:
        from dotenv import load_dotenv  # type: ignore

        load_dotenv(override=False)
    except ImportError:
        pass
    args = parse_args()
    configure_logging(level=args.log_level)
    logger = get_logger("nw.cli")

    custom = CustomSourceManager(store_path=args.custom_sources)
    try:
        registry = SourceRegistry.from_config(
            Path(args.config),
            custom=custom,
            location=tuple(args.location) if args.location else None,
        )
    except ConfigError as exc:
        logger.error("Failed to load configuration: %s", exc)
        return 1

    orch = Orchestrator(registry, config=PipelineConfig())
    if args.category == "all":
        results = orch.fetch_all_categories()
    else:
        category = Category.parse(args.category)
        results = {category: orch.get_or_fetch(category)}

    for category, articles in results.items():
        if args.groups:
            _print_groups(category, orch.group_similar_stories(articles), args.limit)
        else:
            _print_articles(category, articles, args.limit)
    return 0


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())
