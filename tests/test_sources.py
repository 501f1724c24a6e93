from __future__ import annotations

from pathlib import Path

import pytest

from conftest import make_source

from newswire.fetchers import rss
from newswire.models import BiasSpectrum, Category
from newswire.sources import CustomSourceManager, SourceRegistry, local_news_source
from newswire.utils.config_loader import ConfigError, load_sources_config

REPO_CONFIG = Path(__file__).resolve().parents[1] / "config" / "sources.yaml"


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "sources.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_sources_config(tmp_path):
    path = _write(
        tmp_path,
        """
sources:
  - id: npr
    name: NPR News
    url: "https://feeds.npr.org/1001/rss.xml"
    category: US
    bias: Center-Left
    credibility: 87
    factuality: 0.9
  - id: minimal
    name: Minimal
    url: "https://minimal.example.com/feed"
    category: technology
extra: ignored
""",
    )
    npr, minimal = load_sources_config(path)

    assert npr.bias is BiasSpectrum.CENTER_LEFT
    assert npr.credibility == 87
    assert npr.factuality == 0.9
    assert minimal.category is Category.TECHNOLOGY
    assert minimal.bias is BiasSpectrum.CENTER
    assert (minimal.credibility, minimal.factuality) == (70, 0.75)


@pytest.mark.parametrize(
    "entry",
    [
        "{id: x, name: X, url: 'https://x.example.com/rss'}",
        "{id: x, name: X, url: 'ftp://x.example.com/rss', category: US}",
        "{id: x, name: X, url: 'https://x.example.com/rss', category: Astrology}",
        "{id: x, name: X, url: 'https://x.example.com/rss', category: US, bias: Moderate}",
        "{id: x, name: X, url: 'https://x.example.com/rss', category: US, credibility: 140}",
        "{id: x, name: X, url: 'https://x.example.com/rss', category: US, factuality: 1.5}",
    ],
)
def test_invalid_source_entries_raise(tmp_path, entry):
    path = _write(tmp_path, f"sources:\n  - {entry}\n")
    with pytest.raises(ConfigError):
        load_sources_config(path)


def test_duplicate_ids_and_missing_file_raise(tmp_path):
    path = _write(
        tmp_path,
        "sources:\n"
        "  - {id: x, name: X, url: 'https://x.example.com/a', category: US}\n"
        "  - {id: x, name: Y, url: 'https://x.example.com/b', category: US}\n",
    )
    with pytest.raises(ConfigError):
        load_sources_config(path)
    with pytest.raises(ConfigError):
        load_sources_config(tmp_path / "missing.yaml")


def test_shipped_config_is_valid():
    sources = load_sources_config(REPO_CONFIG)
    assert len(sources) == 21
    assert {s.category for s in sources} == set(Category) - {Category.LOCAL}


def test_registry_merges_builtin_and_enabled_custom_sources():
    custom = CustomSourceManager()
    tech_blog = custom.add_source("Tech Blog", "https://blog.example.com/rss", "Technology", bias="Center-Right")
    off = custom.add_source("Off Blog", "https://off.example.com/rss", Category.TECHNOLOGY)
    custom.toggle_enabled(off.id)
    builtin = [make_source("verge", category=Category.TECHNOLOGY), make_source("bbc", category=Category.WORLD)]
    registry = SourceRegistry(builtin, custom=custom)

    ids = [s.id for s in registry.sources_for(Category.TECHNOLOGY)]

    assert ids == ["verge", f"custom-{tech_blog.id}"]
    assert registry.sources_for(Category.LOCAL) == []


def test_local_source_requires_location():
    registry = SourceRegistry([], location=("San Jose", "CA"))
    (local,) = registry.sources_for(Category.LOCAL)
    assert local.id == "local-San Jose"
    assert local.url == "https://news.google.com/rss/search?q=when:24h+allinurl:San%20Jose+CA"
    assert local == local_news_source("San Jose", "CA")


def test_is_duplicate_url_checks_builtin_and_custom():
    custom = CustomSourceManager()
    custom.add_source("Blog", "https://blog.example.com/rss", Category.US)
    registry = SourceRegistry([make_source("wire", url="https://wire.example.com/RSS")], custom=custom)

    assert registry.is_duplicate_url("https://wire.example.com/rss")
    assert registry.is_duplicate_url("HTTPS://BLOG.EXAMPLE.COM/RSS")
    assert not registry.is_duplicate_url("https://new.example.com/rss")


def test_custom_sources_persist_to_json(tmp_path):
    store = tmp_path / "custom" / "sources.json"
    manager = CustomSourceManager(store_path=store)
    src = manager.add_source("Blog", "https://blog.example.com/rss", Category.SCIENCE, credibility=60)
    manager.record_fetch(src.id, 12)
    manager.toggle_enabled(src.id)

    reloaded = CustomSourceManager(store_path=store)
    (restored,) = reloaded.custom_sources

    assert restored.id == src.id
    assert restored.category is Category.SCIENCE
    assert restored.credibility == 60
    assert restored.article_count == 12
    assert restored.last_fetched is not None
    assert restored.is_enabled is False
    assert reloaded.sources_for(Category.SCIENCE) == []


def test_custom_source_update_and_remove():
    manager = CustomSourceManager()
    src = manager.add_source("Blog", "https://blog.example.com/rss", Category.US)
    src.name = "Renamed Blog"
    manager.update_source(src)
    assert manager.sources_for(Category.US)[0].name == "Renamed Blog"

    manager.remove_source(src.id)
    assert manager.custom_sources == []
    with pytest.raises(KeyError):
        manager.update_source(src)


def test_custom_source_rejects_out_of_range_scores():
    manager = CustomSourceManager()
    with pytest.raises(ValueError):
        manager.add_source("Bad", "https://bad.example.com/rss", Category.US, credibility=101)
    assert manager.custom_sources == []


def test_validate_feed(monkeypatch):
    class Resp:
        status_code = 200
        content = b"<rss><channel><item><title>T</title><link>https://v.example.com/1</link></item></channel></rss>"

    monkeypatch.setattr(rss.requests, "get", lambda url, headers=None, timeout=None: Resp())
    assert rss.validate_feed("https://v.example.com/rss") == (True, 1)

    Resp.content = b"not xml"
    assert rss.validate_feed("https://v.example.com/rss") == (False, 0)


def test_validate_feed_accepts_target_category(monkeypatch):
    class Resp:
        status_code = 200
        content = (
            b"<rss><channel>"
            b"<item><title>Match report</title><link>https://s.example.com/1</link></item>"
            b"<item><title>Transfer news</title><link>https://s.example.com/2</link></item>"
            b"</channel></rss>"
        )

    monkeypatch.setattr(rss.requests, "get", lambda url, headers=None, timeout=None: Resp())
    assert rss.validate_feed("https://s.example.com/rss", category="Sports") == (True, 2)
    with pytest.raises(ValueError):
        rss.validate_feed("https://s.example.com/rss", category="Astrology")


def test_record_fetches_writes_once_for_many_sources(tmp_path):
    manager = CustomSourceManager(store_path=tmp_path / "sources.json")
    a = manager.add_source("A", "https://a.example.com/rss", Category.US)
    b = manager.add_source("B", "https://b.example.com/rss", Category.US)

    manager.record_fetches({a.id: 4, b.id: 0, "unknown": 9})

    reloaded = CustomSourceManager(store_path=tmp_path / "sources.json")
    assert (reloaded.get(a.id).article_count, reloaded.get(b.id).article_count) == (4, 0)
    assert reloaded.get(a.id).last_fetched == reloaded.get(b.id).last_fetched
