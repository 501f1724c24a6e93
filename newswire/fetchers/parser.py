from __future__ import annotations

import io
import xml.sax
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from xml.sax.handler import ContentHandler, feature_external_ges
from xml.sax.xmlreader import InputSource

from ..models import Article, Source
from ..processors.normalize import normalize_plain_text, parse_published_date, sanitize_html
from ..utils.logging import get_logger

logger = get_logger("nw.fetchers.parser")

ITEM_TAGS = frozenset({"item", "entry"})
IMAGE_TAGS = frozenset({"enclosure", "media:content", "media:thumbnail"})

# child element -> accumulator field
_FIELD_TAGS = {
    "title": "title",
    "link": "link",
    "guid": "link",
    "description": "description",
    "summary": "description",
    "content:encoded": "content",
    "content": "content",
    "pubDate": "published",
    "published": "published",
    "dc:date": "published",
    "updated": "updated",
}


class ParserState(Enum):
    IDLE = "idle"
    IN_ITEM = "in_item"


@dataclass(slots=True)
class ItemAccumulator:
    """Raw text collected for the item currently being parsed.

    Character data may arrive in several fragments, so every field is
    appended to, never overwritten.
    """

    title: str = ""
    link: str = ""
    description: str = ""
    content: str = ""
    published: str = ""
    updated: str = ""
    image_url: str = ""

    def append(self, field_name: str, text: str) -> None:
        setattr(self, field_name, getattr(self, field_name) + text)


class FeedHandler(ContentHandler):
    """SAX handler turning RSS 2.0 ``<item>`` and Atom ``<entry>`` elements into articles.

    One handler parses exactly one document. It is never shared between
    threads; the fetch layer builds a fresh one for every feed.
    """

    def __init__(self, source: Source, *, now: Optional[datetime] = None) -> None:
        super().__init__()
        self.source = source
        self.now = now or datetime.now(timezone.utc)
        self.articles: List[Article] = []
        self.dropped = 0
        self.state = ParserState.IDLE
        self._item: Optional[ItemAccumulator] = None
        self._field: Optional[str] = None
        self._field_depth = 0
        # element depth below the current item; 1 means a direct child
        self._depth = 0

    # ---------------- SAX callbacks -----------------
    def startElement(self, name, attrs):
        if name in ITEM_TAGS:
            self.state = ParserState.IN_ITEM
            self._item = ItemAccumulator()
            self._field = None
            self._field_depth = 0
            self._depth = 0
            return

        if self.state is not ParserState.IN_ITEM:
            return
        self._depth += 1
        item = self._item

        # markup nested inside a field (e.g. xhtml content) feeds the same field
        if self._field is not None:
            self._field_depth += 1
            return

        if name in IMAGE_TAGS:
            url = (attrs.get("url") or "").strip()
            if url and not item.image_url:
                item.image_url = url
            return

        # <source>, <author> and similar containers carry their own title and dates
        if self._depth != 1:
            return

        field_name = _FIELD_TAGS.get(name)
        if field_name is None:
            return
        if field_name == "link":
            if item.link.strip():
                field_name = None  # first link wins
            elif name == "guid" and (attrs.get("isPermaLink") or "").lower() == "false":
                field_name = None
            elif name == "link" and attrs.get("href"):
                # Atom links carry the URL as an attribute
                if (attrs.get("rel") or "alternate") == "alternate":
                    item.link = attrs.get("href").strip()
                field_name = None
        if field_name is not None:
            self._field = field_name
            self._field_depth = 1

    def characters(self, content):
        if self.state is ParserState.IN_ITEM and self._field is not None:
            self._item.append(self._field, content)

    def endElement(self, name):
        if name in ITEM_TAGS and self.state is ParserState.IN_ITEM:
            self._emit(self._item)
            self.state = ParserState.IDLE
            self._item = None
            self._field = None
            self._field_depth = 0
            self._depth = 0
            return

        if self.state is not ParserState.IN_ITEM:
            return
        self._depth -= 1
        if self._field is not None:
            self._field_depth -= 1
            if self._field_depth == 0:
                self._field = None

    # ---------------- Item -> Article -----------------
    def _emit(self, item: ItemAccumulator) -> None:
        title = normalize_plain_text(item.title)
        link = item.link.strip()
        if not title or not link:
            self.dropped += 1
            logger.debug("Dropping item without title or link from %s", self.source.name)
            return

        date_text = item.published.strip() or item.updated.strip()
        published = parse_published_date(date_text)
        if published is None:
            if date_text:
                logger.debug("Unparsable date %r in %s; using ingestion time", date_text, self.source.name)
            published = self.now

        description = sanitize_html(item.description or item.content) or None

        self.articles.append(
            Article(
                title=title,
                source=self.source,
                url=link,
                published=published,
                category=self.source.category,
                description=description,
                image_url=item.image_url or None,
            )
        )


def _input_source(data: bytes | str) -> InputSource:
    src = InputSource()
    if isinstance(data, str):
        src.setCharacterStream(io.StringIO(data.lstrip()))
    else:
        src.setByteStream(io.BytesIO(data.lstrip()))
    return src


def parse_feed(data: bytes | str, source: Source, *, now: Optional[datetime] = None) -> List[Article]:
    """Parse one RSS or Atom document into articles, in document order.

    A document that is not well-formed XML yields an empty list; single
    items without a title or link are skipped.
    """
    handler = FeedHandler(source, now=now)
    reader = xml.sax.make_parser()
    reader.setFeature(feature_external_ges, False)
    reader.setContentHandler(handler)
    try:
        reader.parse(_input_source(data))
    except xml.sax.SAXException as exc:
        logger.warning("XML parse error for %s: %s", source.name, exc)
        return []

    logger.info("Parsed %d articles from %s (dropped=%d)", len(handler.articles), source.name, handler.dropped)
    return handler.articles
