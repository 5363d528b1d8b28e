"""
HTTP fetching for RSS feeds and streamed episode files.
"""

import logging
from typing import BinaryIO, Optional

import requests
from tqdm import tqdm

from . import __version__
from .errors import NetworkError
from .utils import format_bytes

DEFAULT_TIMEOUT = 30
CHUNK_SIZE = 8192
USER_AGENT = f"poddl/{__version__}"


def parse_content_length(value: Optional[str]) -> Optional[int]:
    """Read a Content-Length header, None when missing or malformed."""
    if value is None:
        return None
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value) or None


class Fetcher:
    """Fetches feed documents and streams media files over HTTP."""

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        show_progress: bool = True,
        user_agent: str = USER_AGENT,
    ):
        """Initialize fetcher.

        Args:
            timeout: Connect/read timeout in seconds for every request
            show_progress: Whether to show a progress bar per file
            user_agent: User-Agent header sent with every request
        """
        self.timeout = timeout
        self.show_progress = show_progress
        self.headers = {"User-Agent": user_agent}
        self.logger = logging.getLogger(__name__)

    def fetch_text(self, url: str) -> bytes:
        """Download a feed document.

        Raises:
            NetworkError: If the request fails or the response is empty.
        """
        self.logger.info("Fetching URL: %s", url)
        try:
            response = requests.get(
                url, headers=self.headers, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Invalid response from URL {url}: {e}") from e

        if not response.content:
            raise NetworkError(f"Empty response from URL {url}")

        self.logger.debug(
            "Downloaded feed content (%d bytes)", len(response.content)
        )
        return response.content

    def stream_to_file(
        self, url: str, sink: BinaryIO, label: Optional[str] = None
    ) -> bool:
        """Stream a remote file into an open binary sink.

        Returns:
            True if the whole body was written, False on any network or
            write error. Partial content may have been written to ``sink``.
        """
        label = label or url
        try:
            with requests.get(
                url, headers=self.headers, stream=True, timeout=self.timeout
            ) as response:
                response.raise_for_status()

                content_length = parse_content_length(
                    response.headers.get("content-length")
                )
                if content_length:
                    self.logger.debug(
                        "Content length: %s", format_bytes(content_length)
                    )

                with tqdm(
                    total=content_length,
                    unit="B",
                    unit_scale=True,
                    desc=label[:40],
                    leave=False,
                    disable=not self.show_progress,
                ) as progress_bar:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:  # Filter out keep-alive chunks
                            sink.write(chunk)
                            progress_bar.update(len(chunk))

            return True
        except (
            requests.exceptions.RequestException,
            IOError,
            ValueError,
        ) as e:
            self.logger.error("Download failed for %s: %s", label, e)
            return False
