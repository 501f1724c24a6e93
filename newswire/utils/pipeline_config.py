from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


@dataclass(slots=True)
class PipelineConfig:
    """Tunables of the ingestion pipeline.

    The similarity thresholds and the clustering window are fixed heuristics;
    they are exposed here for operational tuning, not derived from data.
    """

    cache_ttl_seconds: float = field(default_factory=lambda: float(os.getenv("NEWSWIRE_CACHE_TTL_SECONDS", "3600")))
    dedup_threshold: float = field(default_factory=lambda: float(os.getenv("NEWSWIRE_DEDUP_THRESHOLD", "0.85")))
    cluster_threshold: float = field(default_factory=lambda: float(os.getenv("NEWSWIRE_CLUSTER_THRESHOLD", "0.70")))
    cluster_window_hours: float = field(default_factory=lambda: float(os.getenv("NEWSWIRE_CLUSTER_WINDOW_HOURS", "4")))
    max_articles: int = field(default_factory=lambda: int(os.getenv("NEWSWIRE_MAX_ARTICLES", "100")))
    fetch_timeout: float = field(default_factory=lambda: float(os.getenv("NEWSWIRE_FETCH_TIMEOUT", "15")))
    max_workers: int = field(default_factory=lambda: int(os.getenv("NEWSWIRE_MAX_WORKERS", "16")))
    deterministic_order: bool = field(default_factory=lambda: _env_bool("NEWSWIRE_DETERMINISTIC_ORDER"))

    @property
    def cluster_window(self) -> timedelta:
        return timedelta(hours=self.cluster_window_hours)
