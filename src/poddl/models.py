"""
Data models for podcast episodes, episode ranges and download policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OrderingMode(Enum):
    """How feed items are ordered and numbered.

    Feeds conventionally list newest first, so the default mode reverses
    the feed to get oldest-first episodes numbered from 1.
    """

    NOT_REVERSE = "not_reverse"
    SIMPLE_REVERSE = "simple_reverse"
    REVERSE_WITH_NUMBERS = "reverse_with_numbers"


class NamingMode(Enum):
    """How the base file name of an episode is built."""

    TITLE = "title"
    NUMBER = "number"
    NUMBER_TITLE = "number_title"

    @property
    def uses_number(self) -> bool:
        """Whether the episode number is part of the name."""
        return self is not NamingMode.TITLE


class StopMode(Enum):
    """Early-stop variants, see StopPolicy."""

    OFF = "off"
    ON_EXISTING = "on_existing"
    ON_SUBSTRING = "on_substring"


class EpisodeState(Enum):
    """Terminal states of a single episode in a download run."""

    STOPPED = "stopped"
    SKIPPED = "skipped"
    DOWNLOAD_FAILED = "download_failed"
    MOVED = "moved"
    META_WRITTEN = "meta_written"

    @property
    def downloaded(self) -> bool:
        """Whether the episode file was published to its final path."""
        return self in (EpisodeState.MOVED, EpisodeState.META_WRITTEN)


@dataclass(frozen=True)
class StopPolicy:
    """Early-stop policy, evaluated once per episode before any side effect.

    Use the ``off``, ``on_existing`` and ``on_substring`` constructors
    rather than building the mode/text pair by hand.
    """

    mode: StopMode = StopMode.OFF
    text: str = ""

    @classmethod
    def off(cls) -> "StopPolicy":
        """Never stop early."""
        return cls(StopMode.OFF)

    @classmethod
    def on_existing(cls) -> "StopPolicy":
        """Stop at the first episode whose final file already exists."""
        return cls(StopMode.ON_EXISTING)

    @classmethod
    def on_substring(cls, text: str) -> "StopPolicy":
        """Stop at the first episode whose name contains ``text``."""
        return cls(StopMode.ON_SUBSTRING, text)

    def should_stop(self, name: str, final_exists: bool) -> bool:
        """Decide whether the run ends before touching this episode."""
        if self.mode is StopMode.ON_SUBSTRING:
            return self.text in name
        if self.mode is StopMode.ON_EXISTING:
            return final_exists
        return False


@dataclass(frozen=True)
class Episode:
    """A single feed entry resolved to a downloadable media file.

    ``number`` is assigned by the parser according to the ordering mode
    and is not the entry's position in the feed.
    """

    number: int
    title: str
    url: str
    ext: str
    meta: str = ""


@dataclass(frozen=True)
class EpisodeRange:
    """Inclusive range of episode numbers; ``end=None`` means the last one."""

    start: int
    end: Optional[int] = None

    @property
    def is_valid(self) -> bool:
        """Ranges starting below 1 or ending before the start match nothing."""
        return self.start >= 1 and (self.end is None or self.end >= self.start)

    def contains(self, number: int) -> bool:
        """Check whether an episode number falls inside this range."""
        if not self.is_valid or number < self.start:
            return False
        return self.end is None or number <= self.end

    def __str__(self) -> str:
        if self.end is None:
            return f"{self.start}-"
        if self.end == self.start:
            return str(self.start)
        return f"{self.start}-{self.end}"
