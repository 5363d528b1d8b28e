"""
Episode range specifications such as ``1-10,15,20-``.
"""

import logging
from typing import List, Optional, Sequence

from .errors import InvalidRangeError
from .models import Episode, EpisodeRange


def parse_range_spec(text: str) -> List[EpisodeRange]:
    """Parse a comma-separated range specification.

    Each token is ``N`` (just episode N), ``N-M`` (N through M) or ``N-``
    (N through the last episode).

    Raises:
        InvalidRangeError: If the text is empty or any token is malformed.
    """
    if not text or not text.strip():
        raise InvalidRangeError("Empty episode range")

    return [_parse_token(token) for token in text.split(",")]


def _parse_token(token: str) -> EpisodeRange:
    token = token.strip()
    if not token:
        raise InvalidRangeError("Empty token in episode range")

    start_text, dash, end_text = token.partition("-")
    start = _parse_number(start_text, token)

    if not dash:
        return EpisodeRange(start, start)
    if not end_text.strip():
        return EpisodeRange(start, None)
    return EpisodeRange(start, _parse_number(end_text, token))


def _parse_number(text: str, token: str) -> int:
    text = text.strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidRangeError(f"Invalid episode range '{token}'")
    return int(text)


def select_episodes(
    episodes: Sequence[Episode], ranges: Sequence[EpisodeRange]
) -> List[Episode]:
    """Pick the episodes matching each range, range by range.

    Episodes keep their existing order within a range. Overlapping ranges
    yield the same episode once per matching range.
    """
    logger = logging.getLogger(__name__)

    selected: List[Episode] = []
    for episode_range in ranges:
        if not episode_range.is_valid:
            logger.warning(
                "Episode range %s matches nothing (start must be at least "
                "1 and not after end)",
                episode_range,
            )
            continue

        matches = [
            episode
            for episode in episodes
            if episode_range.contains(episode.number)
        ]
        if not matches:
            logger.warning(
                "Episode range %s matches no episodes", episode_range
            )
        selected.extend(matches)

    return selected


class RangeSelector:
    """Applies an optional range specification to an episode list."""

    def __init__(self, spec: Optional[str] = None):
        """Parse ``spec`` up front so malformed input fails early."""
        self.ranges = parse_range_spec(spec) if spec is not None else None

    def apply(self, episodes: Sequence[Episode]) -> List[Episode]:
        """Return the selected episodes, or all of them without a spec."""
        if self.ranges is None:
            return list(episodes)
        return select_episodes(episodes, self.ranges)
