"""
Test helpers: episode builders and a fake fetcher.
"""

from typing import Any, BinaryIO, Dict, List, Optional, Set

from poddl.errors import NetworkError
from poddl.models import Episode


def create_test_episode(**kwargs: Any) -> Episode:
    """Create an Episode with sensible defaults for any missing field."""
    number = kwargs.get("number", 1)
    defaults: Dict[str, Any] = {
        "number": number,
        "title": f"Episode {number}",
        "url": f"http://test.com/ep{number}.mp3",
        "ext": "mp3",
        "meta": f"Title: Episode {number}",
    }
    defaults.update(kwargs)
    return Episode(**defaults)


def create_test_episodes(count: int) -> List[Episode]:
    """Create episodes numbered 1..count in ascending order."""
    return [create_test_episode(number=n) for n in range(1, count + 1)]


def feed_item(title: str, url: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """Build a raw feed item shaped like a feedparser entry."""
    item: Dict[str, Any] = {"title": title}
    if url is not None:
        item["enclosures"] = [{"href": url, "type": "audio/mpeg"}]
    item.update(extra)
    return item


class FakeFetcher:
    """In-memory stand-in for poddl.downloader.Fetcher."""

    def __init__(
        self,
        feed: Optional[bytes] = None,
        failing_urls: Optional[Set[str]] = None,
    ):
        self.feed = feed
        self.failing_urls = failing_urls or set()
        self.fetched: List[str] = []
        self.streamed: List[str] = []

    @staticmethod
    def content_for(url: str) -> bytes:
        """Body served for a media URL."""
        return f"audio:{url}".encode("utf-8")

    def fetch_text(self, url: str) -> bytes:
        self.fetched.append(url)
        if self.feed is None:
            raise NetworkError(f"Invalid response from URL {url}")
        return self.feed

    def stream_to_file(
        self, url: str, sink: BinaryIO, label: Optional[str] = None
    ) -> bool:
        self.streamed.append(url)
        if url in self.failing_urls:
            sink.write(b"partial")
            return False
        sink.write(self.content_for(url))
        return True
