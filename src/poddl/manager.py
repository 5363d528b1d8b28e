"""
Main orchestration class for a poddl run.
"""

import logging
from typing import List

from .config import DownloadConfig
from .downloader import Fetcher
from .episode_downloader import DownloadSummary, EpisodeDownloader
from .errors import NoEpisodesError
from .models import Episode
from .parser import FeedParser
from .ranges import RangeSelector


class PodcastManager:
    """
    Orchestrates feed fetching, episode selection and episode downloads
    using dependency injection.
    """

    def __init__(
        self,
        config: DownloadConfig,
        fetcher: Fetcher,
        parser: FeedParser,
        downloader: EpisodeDownloader,
    ):
        """Initialize with dependencies."""
        self.logger = logging.getLogger(__name__)
        self.config = config
        self.fetcher = fetcher
        self.parser = parser
        self.downloader = downloader

    def get_episodes(self) -> List[Episode]:
        """Fetch the feed and return the selected, ordered episodes.

        Raises:
            InvalidRangeError: If the range specification is malformed.
                Checked before anything is fetched.
            NetworkError: If the feed cannot be fetched.
            ParseError: If the feed cannot be parsed.
            NoEpisodesError: If the feed or the selection is empty.
        """
        selector = RangeSelector(self.config.range_spec)

        content = self.fetcher.fetch_text(self.config.url)
        episodes = self.parser.parse(content)
        if not episodes:
            raise NoEpisodesError("No files found in feed")

        selected = selector.apply(episodes)
        if not selected:
            raise NoEpisodesError(
                f"No files found for episodes {self.config.range_spec}"
            )

        self.logger.info(
            "Selected %d of %d episodes", len(selected), len(episodes)
        )
        return selected

    def format_listing(self, episodes: List[Episode]) -> List[str]:
        """Render the episode list shown in list-only mode."""
        lines: List[str] = []
        for episode in episodes:
            lines.append(f"[{episode.number}] {episode.title}")
            if self.config.write_meta and episode.meta:
                lines.append(episode.meta)
        return lines

    def download_episodes(self, episodes: List[Episode]) -> DownloadSummary:
        """Download episodes with skip and stop handling."""
        return self.downloader.download_episodes(episodes)
