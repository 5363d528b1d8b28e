"""
poddl - Downloads podcast episodes from an RSS feed.

Fetches the feed, numbers its episodes, optionally narrows them to a
range selection and downloads the media files with atomic writes,
existing-file skipping and early-stop policies.
"""

__version__ = "2024.1.26"

# pylint: disable=wrong-import-position
from .factory import create_manager
from .manager import PodcastManager
from .models import Episode, EpisodeRange, NamingMode, OrderingMode, StopPolicy

__all__ = [
    "__version__",
    "create_manager",
    "PodcastManager",
    "Episode",
    "EpisodeRange",
    "NamingMode",
    "OrderingMode",
    "StopPolicy",
]
