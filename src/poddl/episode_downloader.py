"""
Download service for podcast episodes.

Each episode goes through the same steps: stop check, skip check,
streamed download into the scratch directory, atomic move into the
destination and an optional metadata sidecar. A failed download is
recorded and the run continues; a failed move aborts the run.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .downloader import Fetcher
from .errors import DirectoryError, DownloadFailure, MoveFailure
from .models import Episode, EpisodeState, NamingMode, StopPolicy
from .storage import Storage
from .utils import display_path, sanitize_filename, zero_pad

SCRATCH_DIR_NAME = "tmp"
META_EXTENSION = "txt"


@dataclass
class RunContext:
    """Per-run progress state, created fresh for every download run."""

    total: int
    count: int = 0

    def advance(self) -> int:
        """Move on to the next episode and return its 1-based position."""
        self.count += 1
        return self.count


@dataclass
class DownloadResult:
    """Result of processing a single episode."""

    episode: Episode
    state: EpisodeState
    file_path: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Whether the episode ended without a download error."""
        return self.state is not EpisodeState.DOWNLOAD_FAILED


@dataclass
class DownloadSummary:
    """Summary of a download run."""

    successful: int
    skipped: int
    failed: int
    stopped: bool = False
    results: List[DownloadResult] = field(default_factory=list)

    @classmethod
    def from_results(
        cls, results: List[DownloadResult], stopped: bool = False
    ) -> "DownloadSummary":
        """Create summary from list of results."""
        successful = sum(1 for r in results if r.state.downloaded)
        skipped = sum(1 for r in results if r.state is EpisodeState.SKIPPED)
        failed = sum(1 for r in results if not r.success)

        return cls(
            successful=successful,
            skipped=skipped,
            failed=failed,
            stopped=stopped,
            results=results,
        )


@dataclass(frozen=True)
class EpisodePaths:
    """Display name and on-disk locations for one episode."""

    name: str
    final: str
    temp: str
    meta: str


def build_display_name(
    episode: Episode, naming: NamingMode, pad_width: int = 0
) -> str:
    """Build the base name of an episode according to the naming mode."""
    if naming is NamingMode.TITLE:
        return episode.title

    number = zero_pad(episode.number, pad_width)
    if naming is NamingMode.NUMBER:
        return number
    return f"{number}. {episode.title}"


class EpisodeDownloader:
    """Service for downloading podcast episodes."""

    def __init__(
        self,
        storage: Storage,
        fetcher: Fetcher,
        destination: str,
        naming: NamingMode = NamingMode.TITLE,
        pad_width: int = 0,
        stop_policy: Optional[StopPolicy] = None,
        write_meta: bool = False,
    ):
        """Initialize with collaborators and download policy.

        Args:
            storage: Filesystem operations
            fetcher: Streams remote files into open sinks
            destination: Directory receiving the final files
            naming: How file base names are built
            pad_width: Zero-pad width for number-based names, 0 for none
            stop_policy: When to end the run early
            write_meta: Whether to write a sidecar text file per episode
        """
        self.storage = storage
        self.fetcher = fetcher
        self.destination = destination
        self.naming = naming
        self.pad_width = pad_width
        self.stop_policy = stop_policy or StopPolicy.off()
        self.write_meta = write_meta
        self.logger = logging.getLogger(__name__)

    @property
    def scratch_dir(self) -> str:
        """Directory holding in-progress downloads."""
        return self.storage.join_path(self.destination, SCRATCH_DIR_NAME)

    def episode_paths(self, episode: Episode) -> EpisodePaths:
        """Compute display name and final, scratch and sidecar paths."""
        name = build_display_name(episode, self.naming, self.pad_width)
        base = sanitize_filename(name) or str(episode.number)
        return EpisodePaths(
            name=name,
            final=self.storage.join_path(
                self.destination, f"{base}.{episode.ext}"
            ),
            temp=self.storage.join_path(
                self.scratch_dir, f"{base}.{episode.ext}"
            ),
            meta=self.storage.join_path(
                self.destination, f"{base}.{META_EXTENSION}"
            ),
        )

    def prepare_directories(self) -> None:
        """Create destination and scratch directories.

        Raises:
            DirectoryError: If either directory cannot be created.
        """
        if not self.storage.create_dir_if_missing(self.destination):
            raise DirectoryError(
                f"Could not create directory {display_path(self.destination)}"
            )
        if not self.storage.create_dir_if_missing(self.scratch_dir):
            raise DirectoryError(
                "Could not create temp directory "
                f"{display_path(self.scratch_dir)}"
            )

    def download_episode(
        self, episode: Episode, context: RunContext
    ) -> DownloadResult:
        """Run one episode through stop, skip, download, move and meta.

        Raises:
            MoveFailure: If the finished scratch file cannot be moved into
                place. The scratch file is left where it is.
        """
        paths = self.episode_paths(episode)
        final_exists = self.storage.exists(paths.final)

        if self.stop_policy.should_stop(paths.name, final_exists):
            self._log_stop(paths)
            return DownloadResult(episode, EpisodeState.STOPPED)

        if final_exists:
            self.logger.info("Skipping file %s", display_path(paths.final))
            return DownloadResult(
                episode, EpisodeState.SKIPPED, file_path=paths.final
            )

        self.logger.info(
            "Downloading file %d/%d [%d] %s",
            context.count,
            context.total,
            episode.number,
            episode.title,
        )
        try:
            self._stream_to_scratch(episode, paths)
        except DownloadFailure as e:
            self.logger.error("%s", e)
            return DownloadResult(
                episode, EpisodeState.DOWNLOAD_FAILED, error=str(e)
            )

        if not self.storage.move(paths.temp, paths.final):
            raise MoveFailure(
                display_path(paths.temp), display_path(paths.final)
            )

        if self.write_meta:
            return self._write_sidecar(episode, paths)
        return DownloadResult(
            episode, EpisodeState.MOVED, file_path=paths.final
        )

    def download_episodes(
        self, episodes: Sequence[Episode]
    ) -> DownloadSummary:
        """Download episodes in order until done or stopped.

        The scratch directory is removed afterwards if it ended up empty,
        also when the run is aborted by a MoveFailure.
        """
        if not episodes:
            self.logger.info("No episodes to download")
            return DownloadSummary.from_results([])

        self.prepare_directories()
        self.logger.info("Downloading %d files", len(episodes))

        context = RunContext(total=len(episodes))
        results: List[DownloadResult] = []
        stopped = False
        try:
            for episode in episodes:
                context.advance()
                result = self.download_episode(episode, context)
                results.append(result)
                if result.state is EpisodeState.STOPPED:
                    stopped = True
                    break
        finally:
            self.cleanup_scratch_dir()

        summary = DownloadSummary.from_results(results, stopped=stopped)
        self._log_download_results(summary)
        return summary

    def cleanup_scratch_dir(self) -> None:
        """Delete the scratch directory if nothing is left in it."""
        if not self.storage.is_empty(self.scratch_dir):
            self.logger.debug(
                "Keeping temp directory %s", display_path(self.scratch_dir)
            )
            return
        try:
            self.storage.delete_dir(self.scratch_dir)
        except OSError as e:
            self.logger.warning(
                "Could not delete temp directory %s: %s",
                display_path(self.scratch_dir),
                e,
            )

    def _stream_to_scratch(
        self, episode: Episode, paths: EpisodePaths
    ) -> None:
        """Stream the episode into its scratch file, discarding it on error."""
        try:
            with self.storage.open_for_write(paths.temp) as sink:
                completed = self.fetcher.stream_to_file(
                    episode.url, sink, label=paths.name
                )
        except OSError as e:
            self.logger.debug("Could not write %s: %s", paths.temp, e)
            completed = False

        if not completed:
            self._discard_scratch_file(paths.temp)
            raise DownloadFailure(f"Error downloading file {episode.title}")

    def _discard_scratch_file(self, temp_path: str) -> None:
        try:
            self.storage.delete_file(temp_path)
            self.logger.debug("Cleaned up partial file: %s", temp_path)
        except OSError as e:
            self.logger.warning(
                "Could not remove partial file %s: %s", temp_path, e
            )

    def _write_sidecar(
        self, episode: Episode, paths: EpisodePaths
    ) -> DownloadResult:
        if self.storage.write_text(paths.meta, episode.meta + "\n"):
            return DownloadResult(
                episode, EpisodeState.META_WRITTEN, file_path=paths.final
            )
        self.logger.warning(
            "Could not write meta file %s", display_path(paths.meta)
        )
        return DownloadResult(
            episode, EpisodeState.MOVED, file_path=paths.final
        )

    def _log_stop(self, paths: EpisodePaths) -> None:
        if self.stop_policy.text:
            self.logger.info(
                "Found string %s in title %s",
                self.stop_policy.text,
                paths.name,
            )
        else:
            self.logger.info("File exists %s", display_path(paths.final))
        self.logger.info("Exiting")

    def _log_download_results(self, summary: DownloadSummary) -> None:
        """Log the download results summary."""
        self.logger.info(
            "Download results: %d successful, %d skipped, %d failed%s",
            summary.successful,
            summary.skipped,
            summary.failed,
            " (stopped early)" if summary.stopped else "",
        )
