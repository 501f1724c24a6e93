from __future__ import annotations

import json
import threading
import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from ..models import BiasSpectrum, Category, Source
from ..utils.logging import get_logger

logger = get_logger("nw.sources.custom")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class CustomSource:
    """A feed added by the user, with a manually assigned bias."""

    name: str
    url: str
    category: Category
    bias: BiasSpectrum = BiasSpectrum.CENTER
    credibility: int = 70
    factuality: float = 0.75
    is_enabled: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    added_at: datetime = field(default_factory=_utcnow)
    last_fetched: Optional[datetime] = None
    article_count: int = 0

    @property
    def source_id(self) -> str:
        return f"custom-{self.id}"

    def to_source(self) -> Source:
        return Source(
            id=self.source_id,
            name=self.name,
            url=self.url,
            category=self.category,
            bias=self.bias,
            credibility=self.credibility,
            factuality=self.factuality,
        )

    def to_dict(self) -> dict:
        row = asdict(self)
        row["category"] = self.category.value
        row["bias"] = self.bias.value
        row["added_at"] = self.added_at.isoformat()
        row["last_fetched"] = self.last_fetched.isoformat() if self.last_fetched else None
        return row

    @classmethod
    def from_dict(cls, row: dict) -> "CustomSource":
        last_fetched = row.get("last_fetched")
        return cls(
            id=row["id"],
            name=row["name"],
            url=row["url"],
            category=Category.parse(row["category"]),
            bias=BiasSpectrum.parse(row.get("bias") or BiasSpectrum.CENTER),
            credibility=int(row.get("credibility", 70)),
            factuality=float(row.get("factuality", 0.75)),
            is_enabled=bool(row.get("is_enabled", True)),
            added_at=datetime.fromisoformat(row["added_at"]) if row.get("added_at") else _utcnow(),
            last_fetched=datetime.fromisoformat(last_fetched) if last_fetched else None,
            article_count=int(row.get("article_count", 0)),
        )


class CustomSourceManager:
    """User-managed feeds folded into the built-in registry at fetch time.

    With a ``store_path`` the list is kept in a JSON file and rewritten on
    every change; without one it lives in memory only. Updates and writes
    hold one lock, so categories refreshing in parallel can share a manager.
    """

    def __init__(self, *, store_path: Path | str | None = None) -> None:
        self.store_path = Path(store_path) if store_path else None
        self._sources: Dict[str, CustomSource] = {}
        self._lock = threading.RLock()
        self._load()

    # ---------------- Persistence -----------------
    def _load(self) -> None:
        if self.store_path is None or not self.store_path.exists():
            return
        try:
            rows = json.loads(self.store_path.read_text(encoding="utf-8"))
            for row in rows:
                src = CustomSource.from_dict(row)
                self._sources[src.id] = src
            logger.info("Loaded %d custom sources from %s", len(self._sources), self.store_path)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Failed to load custom sources from %s: %s", self.store_path, exc)
            self._sources = {}

    def _persist(self) -> None:
        if self.store_path is None:
            return
        with self._lock:
            rows = [s.to_dict() for s in self._sources.values()]
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.store_path.with_suffix(self.store_path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(self.store_path)

    # ---------------- CRUD -----------------
    @property
    def custom_sources(self) -> List[CustomSource]:
        with self._lock:
            return list(self._sources.values())

    def get(self, source_id: str) -> Optional[CustomSource]:
        return self._sources.get(source_id)

    def add_source(
        self,
        name: str,
        url: str,
        category: Category | str,
        *,
        bias: BiasSpectrum | str = BiasSpectrum.CENTER,
        credibility: int = 70,
        factuality: float = 0.75,
    ) -> CustomSource:
        src = CustomSource(
            name=name.strip(),
            url=url.strip(),
            category=Category.parse(category),
            bias=BiasSpectrum.parse(bias),
            credibility=credibility,
            factuality=factuality,
        )
        # Source enforces the credibility/factuality ranges
        src.to_source()
        with self._lock:
            self._sources[src.id] = src
            self._persist()
        logger.info("Added custom source: %s (%s, %s)", src.name, src.category.value, src.bias.value)
        return src

    def remove_source(self, source_id: str) -> None:
        with self._lock:
            removed = self._sources.pop(source_id, None)
            if removed is not None:
                self._persist()
        if removed is not None:
            logger.info("Removed custom source: %s", removed.name)

    def update_source(self, source: CustomSource) -> None:
        source.to_source()
        with self._lock:
            if source.id not in self._sources:
                raise KeyError(f"Unknown custom source id '{source.id}'")
            self._sources[source.id] = source
            self._persist()

    def toggle_enabled(self, source_id: str) -> None:
        with self._lock:
            src = self._sources.get(source_id)
            if src is None:
                return
            self._sources[source_id] = replace(src, is_enabled=not src.is_enabled)
            self._persist()

    def record_fetch(self, source_id: str, article_count: int, *, when: Optional[datetime] = None) -> None:
        self.record_fetches({source_id: article_count}, when=when)

    def record_fetches(self, counts: Mapping[str, int], *, when: Optional[datetime] = None) -> None:
        """Store fetch time and article count for several sources with one write."""
        when = when or _utcnow()
        with self._lock:
            touched = False
            for source_id, article_count in counts.items():
                src = self._sources.get(source_id)
                if src is None:
                    continue
                src.last_fetched = when
                src.article_count = article_count
                touched = True
            if touched:
                self._persist()

    # ---------------- Retrieval -----------------
    def sources_for(self, category: Category) -> List[Source]:
        """Enabled custom sources of ``category`` as pipeline ``Source`` values."""
        return [s.to_source() for s in self.custom_sources if s.is_enabled and s.category is category]

    @property
    def all_enabled_sources(self) -> List[Source]:
        return [s.to_source() for s in self.custom_sources if s.is_enabled]

    def find_by_source_id(self, source_id: str) -> Optional[CustomSource]:
        if not source_id.startswith("custom-"):
            return None
        return self._sources.get(source_id[len("custom-") :])

    def is_duplicate_url(self, url: str) -> bool:
        needle = url.strip().lower()
        return any(s.url.lower() == needle for s in self.custom_sources)
