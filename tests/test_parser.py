"""
Tests for feed parsing and episode ordering.
"""

import unittest

from poddl.errors import ParseError
from poddl.models import OrderingMode
from poddl.parser import (
    FeedParser,
    build_meta,
    extract_raw_items,
    guess_extension,
    parse_episodes,
    strip_html,
)

from tests.base import PodcastTestBase
from tests.utils import feed_item


def _items(*titles: str) -> list:
    return [feed_item(t, f"http://test.com/{t}.mp3") for t in titles]


class TestParseEpisodes(unittest.TestCase):
    """Test ordering and numbering of feed items."""

    def test_not_reverse_keeps_native_order(self) -> None:
        """NotReverse numbers the native order from 1."""
        episodes = parse_episodes(_items("a", "b", "c"), OrderingMode.NOT_REVERSE)

        self.assertEqual([e.title for e in episodes], ["a", "b", "c"])
        self.assertEqual([e.number for e in episodes], [1, 2, 3])

    def test_simple_reverse_reverses_and_numbers(self) -> None:
        """SimpleReverse emits the native-last item first as number 1."""
        episodes = parse_episodes(
            _items("a", "b", "c"), OrderingMode.SIMPLE_REVERSE
        )

        self.assertEqual([e.title for e in episodes], ["c", "b", "a"])
        self.assertEqual([e.number for e in episodes], [1, 2, 3])

    def test_reverse_with_numbers_keeps_order_reverses_numbers(self) -> None:
        """ReverseWithNumbers keeps native order but numbers it backwards."""
        episodes = parse_episodes(
            _items("a", "b", "c"), OrderingMode.REVERSE_WITH_NUMBERS
        )

        self.assertEqual([e.title for e in episodes], ["a", "b", "c"])
        self.assertEqual([e.number for e in episodes], [3, 2, 1])

    def test_numbers_are_dense_for_every_mode(self) -> None:
        """Every mode numbers N items exactly 1..N."""
        for mode in OrderingMode:
            for size in range(1, 8):
                titles = [f"t{i}" for i in range(size)]
                with self.subTest(mode=mode, size=size):
                    episodes = parse_episodes(_items(*titles), mode)
                    numbers = [e.number for e in episodes]
                    self.assertEqual(len(episodes), size)
                    self.assertEqual(sorted(numbers), list(range(1, size + 1)))

    def test_same_number_refers_to_same_item_across_reverse_modes(
        self,
    ) -> None:
        """SimpleReverse and ReverseWithNumbers agree on numbering."""
        items = _items("a", "b", "c", "d")
        simple = parse_episodes(items, OrderingMode.SIMPLE_REVERSE)
        with_numbers = parse_episodes(items, OrderingMode.REVERSE_WITH_NUMBERS)

        self.assertEqual(
            {e.number: e.title for e in simple},
            {e.number: e.title for e in with_numbers},
        )

    def test_empty_feed_returns_empty_list(self) -> None:
        """No items is not an error."""
        for mode in OrderingMode:
            self.assertEqual(parse_episodes([], mode), [])

    def test_item_without_title_aborts_parse(self) -> None:
        """A single bad item fails the whole parse."""
        items = _items("a", "b") + [feed_item("", "http://test.com/x.mp3")]

        with self.assertRaises(ParseError):
            parse_episodes(items, OrderingMode.SIMPLE_REVERSE)

    def test_item_without_enclosure_aborts_parse(self) -> None:
        """An item without a media URL fails the whole parse."""
        items = _items("a") + [feed_item("no media")]

        with self.assertRaises(ParseError) as cm:
            parse_episodes(items, OrderingMode.NOT_REVERSE)
        self.assertIn("no media", str(cm.exception))

    def test_enclosure_link_fallback(self) -> None:
        """An enclosure given only as a link is used."""
        item = {
            "title": "linked",
            "links": [
                {"rel": "alternate", "href": "http://test.com/page"},
                {
                    "rel": "enclosure",
                    "href": "http://test.com/linked.m4a",
                    "type": "audio/mp4",
                },
            ],
        }

        (episode,) = parse_episodes([item], OrderingMode.NOT_REVERSE)

        self.assertEqual(episode.url, "http://test.com/linked.m4a")
        self.assertEqual(episode.ext, "m4a")

    def test_title_whitespace_collapsed(self) -> None:
        """Titles spanning lines are collapsed to one line."""
        item = feed_item("  A\n   title  ", "http://test.com/a.mp3")

        (episode,) = parse_episodes([item], OrderingMode.NOT_REVERSE)

        self.assertEqual(episode.title, "A title")


class TestItemFields(unittest.TestCase):
    """Test extension and meta extraction."""

    def test_extension_from_url_path(self) -> None:
        """Query strings do not leak into the extension."""
        self.assertEqual(
            guess_extension("http://test.com/a/b/ep.MP3?token=x.y"), "mp3"
        )

    def test_extension_from_mime_type(self) -> None:
        """URLs without a usable extension fall back to the MIME type."""
        self.assertEqual(
            guess_extension("http://test.com/stream", "audio/mpeg"), "mp3"
        )

    def test_extension_from_mime_type_beats_script_path(self) -> None:
        """A non-media path extension loses to the enclosure MIME type."""
        self.assertEqual(
            guess_extension("http://test.com/download.php?id=3", "audio/mpeg"),
            "mp3",
        )
        self.assertEqual(
            guess_extension("http://test.com/ep.m4a", "audio/mpeg"), "m4a"
        )
        self.assertEqual(guess_extension("http://test.com/get.php"), "php")

    def test_extension_default(self) -> None:
        """Without URL extension or MIME type the default is mp3."""
        self.assertEqual(guess_extension("http://test.com/download"), "mp3")
        self.assertEqual(
            guess_extension("http://test.com/file.notanextension"), "mp3"
        )

    def test_build_meta(self) -> None:
        """Meta text lists the known fields and skips blank ones."""
        meta = build_meta(
            {
                "title": "Ep",
                "published": "Mon, 01 Jan 2024 10:00:00 GMT",
                "itunes_duration": "",
                "summary": "<p>Hello &amp; <b>welcome</b></p>",
            }
        )

        self.assertEqual(
            meta.splitlines(),
            [
                "Title: Ep",
                "Published: Mon, 01 Jan 2024 10:00:00 GMT",
                "Description: Hello & welcome",
            ],
        )

    def test_strip_html_keeps_paragraph_breaks(self) -> None:
        """Line breaks and paragraphs become newlines."""
        self.assertEqual(strip_html("one<br/>two</p><p>three"), "one\ntwo\nthree")


class TestFeedParser(PodcastTestBase):
    """Test parsing real RSS documents."""

    def test_parse_rss_document(self) -> None:
        """Items are extracted with all fields from an RSS document."""
        content = self.create_mock_rss_content(
            [
                {
                    "title": "Newest",
                    "audio_link": "http://test.com/2.mp3",
                    "description": "Second",
                    "published": "Tue, 02 Jan 2024 10:00:00 GMT",
                    "duration": "10:00",
                },
                {
                    "title": "Oldest",
                    "audio_link": "http://test.com/1.m4a",
                    "type": "audio/mp4",
                },
            ]
        )

        episodes = FeedParser(OrderingMode.SIMPLE_REVERSE).parse(content)

        self.assertEqual([e.title for e in episodes], ["Oldest", "Newest"])
        self.assertEqual([e.number for e in episodes], [1, 2])
        self.assertEqual(episodes[0].url, "http://test.com/1.m4a")
        self.assertEqual(episodes[0].ext, "m4a")
        self.assertIn("Duration: 10:00", episodes[1].meta)
        self.assertIn("Description: Second", episodes[1].meta)

    def test_feed_without_items(self) -> None:
        """A valid feed with no items parses to nothing."""
        content = self.create_mock_rss_content([])

        self.assertEqual(extract_raw_items(content), [])
        self.assertEqual(FeedParser().parse(content), [])

    def test_non_feed_content_raises(self) -> None:
        """Content that is not a feed at all is a parse error."""
        with self.assertRaises(ParseError):
            extract_raw_items(b"this is not xml <<< at all")

    def test_html_page_raises(self) -> None:
        """An HTML page served instead of a feed is a parse error."""
        content = (
            b"<html><head><title>Not Found</title></head>"
            b"<body><p>404</p></body></html>"
        )

        with self.assertRaises(ParseError):
            extract_raw_items(content)

    def test_item_missing_enclosure_raises(self) -> None:
        """A feed item without enclosure fails the parse."""
        content = self.create_mock_rss_content(
            [
                {"title": "Good", "audio_link": "http://test.com/1.mp3"},
                {"title": "Bad"},
            ]
        )

        with self.assertRaises(ParseError):
            FeedParser().parse(content)


if __name__ == "__main__":
    unittest.main()
