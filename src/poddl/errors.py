"""Custom exceptions for poddl."""


class PoddlError(Exception):
    """Base exception for all poddl errors."""

    pass


class ConfigError(PoddlError):
    """Bad or missing configuration."""

    pass


class NetworkError(PoddlError):
    """Feed could not be fetched."""

    pass


class ParseError(PoddlError):
    """Feed content is malformed or an item lacks required fields."""

    pass


class InvalidRangeError(PoddlError):
    """Malformed episode range specification."""

    pass


class NoEpisodesError(PoddlError):
    """Feed or selection produced no episodes."""

    pass


class DirectoryError(PoddlError):
    """Destination or scratch directory could not be created."""

    pass


class DownloadFailure(PoddlError):
    """Streaming a single episode failed. Recoverable."""

    pass


class MoveFailure(PoddlError):
    """Publishing a scratch file to its final path failed. Aborts the run."""

    def __init__(self, temp_path: str, final_path: str):
        self.temp_path = temp_path
        self.final_path = final_path
        super().__init__(
            f"Could not move temp file {temp_path} to {final_path}"
        )
