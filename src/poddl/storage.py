"""
Pure storage layer for file operations.

This module provides low-level file operations without any business logic.
"""

import logging
import os
from typing import BinaryIO


class Storage:
    """Pure file operations without business logic."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(__name__)

    def exists(self, path: str) -> bool:
        """Check if file or directory exists."""
        return os.path.exists(path)

    def create_dir_if_missing(self, path: str) -> bool:
        """Create directory if it doesn't exist, return success status."""
        try:
            os.makedirs(path, exist_ok=True)
            return True
        except OSError as e:
            self.logger.error("Could not create directory %s: %s", path, e)
            return False

    def move(self, temp_path: str, final_path: str) -> bool:
        """Atomically replace ``final_path`` with ``temp_path``.

        Both paths must be on the same filesystem for the move to be
        atomic, which holds for the scratch directory inside the
        destination.
        """
        try:
            os.replace(temp_path, final_path)
            return True
        except OSError as e:
            self.logger.error(
                "Could not move %s to %s: %s", temp_path, final_path, e
            )
            return False

    def is_empty(self, dir_path: str) -> bool:
        """Check if a directory exists and has no entries."""
        try:
            with os.scandir(dir_path) as entries:
                return next(entries, None) is None
        except OSError:
            return False

    def delete_dir(self, path: str) -> None:
        """Remove an empty directory."""
        os.rmdir(path)

    def delete_file(self, path: str) -> None:
        """Remove a file if it exists."""
        if os.path.exists(path):
            os.remove(path)

    def open_for_write(self, path: str) -> BinaryIO:
        """Open a file for binary writing, truncating any existing content."""
        return open(path, "wb")

    def write_text(self, path: str, text: str) -> bool:
        """Write text to file, return success status."""
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
            return True
        except IOError as e:
            self.logger.error("Could not write %s: %s", path, e)
            return False

    def join_path(self, *parts: str) -> str:
        """Join path parts."""
        return os.path.join(*parts)
