from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from newswire.models import Article, BiasRating, BiasSpectrum, Category, Source

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_source(
    source_id: str = "wire",
    *,
    category: Category = Category.US,
    bias: BiasSpectrum = BiasSpectrum.CENTER,
    url: Optional[str] = None,
) -> Source:
    return Source(
        id=source_id,
        name=source_id.replace("-", " ").title(),
        url=url or f"https://{source_id}.example.com/rss.xml",
        category=category,
        bias=bias,
        credibility=80,
        factuality=0.8,
    )


def make_article(
    title: str,
    *,
    hours_ago: float = 0.0,
    source: Optional[Source] = None,
    bias: Optional[BiasSpectrum] = None,
) -> Article:
    src = source or make_source()
    return Article(
        title=title,
        source=src,
        url=f"https://{src.id}.example.com/{abs(hash(title))}",
        published=BASE_TIME - timedelta(hours=hours_ago),
        category=src.category,
        bias=BiasRating(spectrum=bias, confidence=0.9, source_bias=bias.score) if bias else None,
    )


class FakeClock:
    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


RSS_DOC = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/"
     xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example Wire</title>
    <link>https://wire.example.com/</link>
    <item>
      <title>Senate passes budget bill</title>
      <link>https://wire.example.com/budget</link>
      <description><![CDATA[<p>The <b>Senate</b> voted &amp; passed it.</p><script>track()</script>]]></description>
      <pubDate>Sun, 01 Mar 2026 10:30:00 +0000</pubDate>
      <media:thumbnail url="https://img.example.com/budget-thumb.jpg"/>
      <media:content url="https://img.example.com/budget-large.jpg" medium="image"/>
    </item>
    <item>
      <title>Storm hits the coast</title>
      <link>https://wire.example.com/storm</link>
      <pubDate>sometime last week</pubDate>
      <enclosure url="https://img.example.com/storm.jpg" type="image/jpeg" length="100"/>
    </item>
    <item>
      <description>An item with neither title nor link</description>
    </item>
  </channel>
</rss>
"""

ATOM_DOC = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Tech Log</title>
  <link href="https://tech.example.com/"/>
  <entry>
    <title>Chipmaker unveils new processor</title>
    <link rel="alternate" href="https://tech.example.com/chip"/>
    <link rel="enclosure" href="https://tech.example.com/chip.mp3"/>
    <published>2026-03-01T09:15:00Z</published>
    <updated>2026-03-01T11:00:00Z</updated>
    <summary>Faster &lt;em&gt;and&lt;/em&gt; cheaper.</summary>
  </entry>
  <entry>
    <title>Browser release notes</title>
    <link href="https://tech.example.com/browser"/>
    <updated>2026-02-28T08:00:00.250+02:00</updated>
    <content type="xhtml"><div xmlns="http://www.w3.org/1999/xhtml"><p>New <b>tabs</b>.</p></div></content>
  </entry>
</feed>
"""
