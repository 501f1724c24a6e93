from __future__ import annotations

from pathlib import Path
from typing import Iterable, List
from urllib.parse import urlparse

import yaml

from ..models import BiasSpectrum, Category, Source


class ConfigError(Exception):
    """Raised when the configuration file is invalid or missing required fields."""


REQUIRED_FIELDS = {"id", "name", "url", "category"}


def _validate_source_dict(entry: dict) -> None:
    """Validate a single source mapping from YAML.

    Required fields: id (str), name (str), url (http/https), category (one of
    the nine categories).
    Optional fields:
      - bias: one of the seven spectrum labels (default "Center")
      - credibility: int in [0, 100] (default 70)
      - factuality: float in [0.0, 1.0] (default 0.75)
    """
    missing = REQUIRED_FIELDS - set(entry)
    if missing:
        raise ConfigError(f"Missing required fields: {sorted(missing)} in {entry}")

    url_str = str(entry["url"]).strip()
    parsed = urlparse(url_str)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"Invalid URL '{url_str}'. Must be absolute http(s) URL.")

    try:
        Category.parse(entry["category"])
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    if entry.get("bias") is not None:
        try:
            BiasSpectrum.parse(entry["bias"])
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    if entry.get("credibility") is not None:
        cred = entry["credibility"]
        if isinstance(cred, bool) or not isinstance(cred, int) or not 0 <= cred <= 100:
            raise ConfigError(f"'credibility' must be an integer in [0, 100], got {cred!r}")

    if entry.get("factuality") is not None:
        fact = entry["factuality"]
        if isinstance(fact, bool) or not isinstance(fact, (int, float)) or not 0.0 <= float(fact) <= 1.0:
            raise ConfigError(f"'factuality' must be a number in [0.0, 1.0], got {fact!r}")


def _coerce_source(entry: dict) -> Source:
    return Source(
        id=str(entry["id"]).strip(),
        name=str(entry["name"]).strip(),
        url=str(entry["url"]).strip(),
        category=Category.parse(entry["category"]),
        bias=BiasSpectrum.parse(entry.get("bias") or BiasSpectrum.CENTER),
        credibility=int(entry["credibility"] if entry.get("credibility") is not None else 70),
        factuality=float(entry["factuality"] if entry.get("factuality") is not None else 0.75),
    )


def load_sources_config(path: Path | str) -> List[Source]:
    """Load ``sources.yaml`` into typed ``Source`` instances.

    YAML structure:
      - Top-level mapping
      - Key ``sources``: list of source mappings with fields
          - id: string, unique (required)
          - name: string (required)
          - url: http/https feed URL (required)
          - category: 'US' | 'World' | 'Local' | ... (required)
          - bias: 'Far Left' ... 'Far Right' (optional)
          - credibility: 0-100 (optional)
          - factuality: 0.0-1.0 (optional)

    Unknown top-level keys are ignored for forward compatibility.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    sources_raw: Iterable[dict] = (data.get("sources") or [])
    if not isinstance(sources_raw, list):
        raise ConfigError("'sources' must be a list in the YAML configuration")

    sources: List[Source] = []
    seen_ids = set()
    for item in sources_raw:
        if not isinstance(item, dict):
            raise ConfigError(f"Each source must be a mapping, got: {type(item)}")
        _validate_source_dict(item)
        source = _coerce_source(item)
        if source.id in seen_ids:
            raise ConfigError(f"Duplicate source id '{source.id}'")
        seen_ids.add(source.id)
        sources.append(source)
    return sources
