"""
Factory functions for creating PodcastManager instances.

This module provides simple factory functions that wire up dependencies
clearly.
"""

import logging

from .config import DownloadConfig
from .downloader import Fetcher
from .episode_downloader import EpisodeDownloader
from .manager import PodcastManager
from .parser import FeedParser
from .storage import Storage


def create_manager(config: DownloadConfig) -> PodcastManager:
    """Validate the configuration and build a PodcastManager for it.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    logger = logging.getLogger(__name__)
    config.validate()

    storage = Storage()
    fetcher = Fetcher(
        timeout=config.timeout, show_progress=config.show_progress
    )
    parser = FeedParser(config.ordering)
    downloader = EpisodeDownloader(
        storage,
        fetcher,
        destination=config.destination or "",
        naming=config.naming,
        pad_width=config.pad_width,
        stop_policy=config.stop_policy,
        write_meta=config.write_meta,
    )

    logger.debug("Created PodcastManager for %s", config.url)
    return PodcastManager(config, fetcher, parser, downloader)
