"""
Feed parsing: raw RSS bytes to feed items, feed items to numbered episodes.
"""

import html
import logging
import mimetypes
import os
import re
from typing import Any, List, Mapping, NamedTuple, Optional, Sequence
from urllib.parse import urlparse

import feedparser

from .errors import ParseError
from .models import Episode, OrderingMode
from .utils import collapse_whitespace

DEFAULT_EXTENSION = "mp3"
MAX_EXTENSION_LENGTH = 5

# mimetypes picks mp2 or mpga for audio/mpeg on some systems
MEDIA_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "m4a",
    "audio/x-m4a": "m4a",
    "audio/aac": "aac",
    "audio/ogg": "ogg",
    "video/mp4": "mp4",
}
KNOWN_MEDIA_EXTENSIONS = set(MEDIA_EXTENSIONS.values()) | {
    "flac",
    "m4b",
    "mov",
    "oga",
    "opus",
    "wav",
    "webm",
}

_HTML_TAG = re.compile(r"<[^>]+>")
_BLANK_LINES = re.compile(r"\n\s*\n+")


class ItemFields(NamedTuple):
    """Fields extracted from one feed item, before numbering."""

    title: str
    url: str
    ext: str
    meta: str


def extract_raw_items(content: bytes) -> List[Mapping[str, Any]]:
    """Tokenize feed content into raw item records in native feed order."""
    logger = logging.getLogger(__name__)

    parsed = feedparser.parse(content)
    feed_title = parsed.feed.get("title", "") if parsed.feed else ""

    if parsed.bozo:
        if not parsed.entries and not feed_title:
            raise ParseError(
                f"Content is not a valid feed: {parsed.get('bozo_exception')}"
            )
        logger.warning(
            "Feed may be malformed: %s", parsed.get("bozo_exception")
        )

    # HTML error pages parse cleanly but match no feed format
    if not parsed.get("version") and not parsed.entries:
        raise ParseError("Content is not a recognized RSS or Atom feed")

    logger.info(
        "Parsed feed '%s' with %d items", feed_title, len(parsed.entries)
    )
    return list(parsed.entries)


def parse_episodes(
    raw_items: Sequence[Mapping[str, Any]], mode: OrderingMode
) -> List[Episode]:
    """Turn raw feed items into a dense, numbered, ordered episode list.

    Args:
        raw_items: Items in the feed's native order
        mode: Ordering mode deciding emitted order and numbering

    Returns:
        Episodes numbered 1..N, each number used exactly once.

    Raises:
        ParseError: If any item lacks a title or a media URL. Nothing is
            returned for the remaining items in that case.
    """
    items = [
        extract_item_fields(item, position)
        for position, item in enumerate(raw_items, 1)
    ]
    total = len(items)

    if mode is OrderingMode.NOT_REVERSE:
        numbered = [(number, item) for number, item in enumerate(items, 1)]
    elif mode is OrderingMode.SIMPLE_REVERSE:
        numbered = [
            (number, item) for number, item in enumerate(reversed(items), 1)
        ]
    elif mode is OrderingMode.REVERSE_WITH_NUMBERS:
        numbered = [
            (total - index, item) for index, item in enumerate(items)
        ]
    else:
        raise ValueError(f"Unknown ordering mode: {mode!r}")

    return [
        Episode(
            number=number,
            title=item.title,
            url=item.url,
            ext=item.ext,
            meta=item.meta,
        )
        for number, item in numbered
    ]


def extract_item_fields(
    item: Mapping[str, Any], position: int = 0
) -> ItemFields:
    """Pull title, media URL, extension and meta text out of one item."""
    title = collapse_whitespace(str(item.get("title") or ""))
    if not title:
        raise ParseError(f"Feed item {position} has no title")

    url, mime_type = _find_enclosure(item)
    if not url:
        raise ParseError(f"Feed item {position} ({title}) has no media URL")

    return ItemFields(
        title=title,
        url=url,
        ext=guess_extension(url, mime_type),
        meta=build_meta(item),
    )


def guess_extension(url: str, mime_type: Optional[str] = None) -> str:
    """Derive a media file extension from the URL path or MIME type.

    A known media extension in the URL path wins over the MIME type, which
    in turn wins over any other extension, such as ``.php``, in the path.
    """
    ext = os.path.splitext(urlparse(url).path)[1].lstrip(".").lower()
    if ext in KNOWN_MEDIA_EXTENSIONS:
        return ext

    if mime_type:
        mime_type = mime_type.split(";")[0].strip().lower()
        if mime_type in MEDIA_EXTENSIONS:
            return MEDIA_EXTENSIONS[mime_type]
        guessed = mimetypes.guess_extension(mime_type)
        if guessed and mime_type.startswith(("audio/", "video/")):
            return guessed.lstrip(".")

    if _is_plausible_extension(ext):
        return ext
    return DEFAULT_EXTENSION


def build_meta(item: Mapping[str, Any]) -> str:
    """Build the free-form meta text block for an item."""
    description = item.get("summary") or item.get("description") or ""
    fields = [
        ("Title", item.get("title")),
        ("Published", item.get("published")),
        ("Duration", item.get("itunes_duration")),
        ("Link", item.get("link")),
        ("Description", strip_html(str(description))),
    ]
    return "\n".join(
        f"{label}: {str(value).strip()}"
        for label, value in fields
        if value and str(value).strip()
    )


def strip_html(text: str) -> str:
    """Remove HTML tags and entities from a description."""
    text = re.sub(r"<br\s*/?>|</p>", "\n", text, flags=re.IGNORECASE)
    text = html.unescape(_HTML_TAG.sub("", text))
    return _BLANK_LINES.sub("\n\n", text).strip()


def _find_enclosure(item: Mapping[str, Any]) -> tuple[str, Optional[str]]:
    for enclosure in item.get("enclosures") or []:
        href = enclosure.get("href") or enclosure.get("url")
        if href:
            return str(href).strip(), enclosure.get("type")

    for link in item.get("links") or []:
        if link.get("rel") == "enclosure" and link.get("href"):
            return str(link["href"]).strip(), link.get("type")

    return "", None


def _is_plausible_extension(ext: str) -> bool:
    return 0 < len(ext) <= MAX_EXTENSION_LENGTH and ext.isalnum()


class FeedParser:
    """Parses feed content into episodes using a fixed ordering mode."""

    def __init__(self, mode: OrderingMode = OrderingMode.SIMPLE_REVERSE):
        """Initialize with the ordering mode to apply."""
        self.mode = mode
        self.logger = logging.getLogger(__name__)

    def parse(self, content: bytes) -> List[Episode]:
        """Parse raw feed bytes into ordered episodes."""
        raw_items = extract_raw_items(content)
        episodes = parse_episodes(raw_items, self.mode)
        self.logger.debug(
            "Numbered %d episodes using %s", len(episodes), self.mode.value
        )
        return episodes
