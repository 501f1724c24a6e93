from __future__ import annotations

import re
import unicodedata
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Sequence

from bs4 import BeautifulSoup

_whitespace_re = re.compile(r"\s+")
_control_chars_re = re.compile(r"[\u0000-\u0008\u000B\u000C\u000E-\u001F\u007F]")

_PUNCT_TRANSLATION = {
    ord("\u2018"): "'",  # left single quote
    ord("\u2019"): "'",  # right single quote
    ord("\u201C"): '"',  # left double quote
    ord("\u201D"): '"',  # right double quote
    ord("\u2013"): "-",  # en dash
    ord("\u2014"): "-",  # em dash
    ord("\u00A0"): " ",  # non-breaking space
}

# Tried in order after the RFC 822 step; the first format that parses wins.
DATE_FORMATS: Sequence[str] = (
    "%Y-%m-%dT%H:%M:%S%z",  # ISO 8601 / Atom
    "%Y-%m-%dT%H:%M:%S.%f%z",  # ISO 8601 with fractional seconds
    "%Y-%m-%dT%H:%M%z",
    "%Y-%m-%d",
)


def sanitize_html(raw_html: str | None) -> str:
    """Reduce an HTML fragment to a single line of plain text.

    - Drop ``<script>`` and ``<style>`` blocks with their content
    - Strip remaining tags
    - Decode character entities
    - Collapse whitespace runs to one space and trim

    Applying it to its own output returns the same string.
    """
    if not raw_html:
        return ""

    soup = BeautifulSoup(raw_html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    text = soup.get_text(" ")
    text = _whitespace_re.sub(" ", text)
    return text.strip()


def normalize_plain_text(text: str | None) -> str:
    """Normalize plain text such as feed titles.

    - Strip BOM
    - Unicode normalize (NFKC)
    - Replace curly quotes/dashes and non-breaking spaces
    - Remove control characters
    - Collapse whitespace
    """
    if not text:
        return ""

    if text.startswith("\ufeff"):
        text = text.lstrip("\ufeff")

    text = text.translate(_PUNCT_TRANSLATION)
    text = unicodedata.normalize("NFKC", text)
    text = _control_chars_re.sub(" ", text)
    text = _whitespace_re.sub(" ", text).strip()
    return text


def _parse_rfc822(value: str) -> Optional[datetime]:
    # handles named zones (EST, PDT, ...), missing seconds and missing weekday
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None


def _as_utc(parsed: datetime) -> datetime:
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_published_date(value: str | None, *, formats: Sequence[str] = DATE_FORMATS) -> Optional[datetime]:
    """Parse a feed date string into an aware UTC datetime.

    RSS dates go through ``email.utils`` first, then ``formats`` is tried in
    order. Returns ``None`` when nothing matches; callers decide the fallback.
    """
    if not value:
        return None
    value = value.strip()
    parsed = _parse_rfc822(value)
    if parsed is not None:
        return _as_utc(parsed)
    for fmt in formats:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return _as_utc(parsed)
    return None
