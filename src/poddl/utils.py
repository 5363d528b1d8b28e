"""
Small helpers shared by the parser, downloaders and CLI.
"""

import os
import re

DEFAULT_PAD_WIDTH = 3

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/*?:"<>|\x00-\x1f\x7f]')
_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and strip the ends."""
    return _WHITESPACE.sub(" ", text).strip()


def sanitize_filename(name: str) -> str:
    """Remove characters that are not allowed in file names.

    Trailing dots and spaces are dropped as well.
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub("", name)
    return collapse_whitespace(cleaned).rstrip(". ")


def zero_pad(number: int, width: int) -> str:
    """Format an episode number, zero padded to ``width`` digits.

    A width of 0 leaves the number unpadded.
    """
    if width <= 0:
        return str(number)
    return str(number).zfill(width)


def display_path(path: str) -> str:
    """Render a filesystem path for console output."""
    return os.path.normpath(path)


def format_bytes(size: int) -> str:
    """Format a byte count as a human readable string."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in ("KB", "MB", "GB"):
        value /= 1024
        if value < 1024:
            return f"{value:.1f} {unit}"
    return f"{value / 1024:.1f} TB"
