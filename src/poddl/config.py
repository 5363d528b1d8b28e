"""
Run configuration for poddl.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from .downloader import DEFAULT_TIMEOUT
from .errors import ConfigError
from .models import NamingMode, OrderingMode, StopMode, StopPolicy

OUTPUT_DIRECTORY_ENV = "PODDL_OUTPUT_DIRECTORY"


@dataclass
class DownloadConfig:  # pylint: disable=too-many-instance-attributes
    """Everything a run needs, as produced by the command line."""

    url: str
    destination: Optional[str] = None
    ordering: OrderingMode = OrderingMode.SIMPLE_REVERSE
    range_spec: Optional[str] = None
    naming: NamingMode = NamingMode.TITLE
    pad_width: int = 0
    stop_policy: StopPolicy = field(default_factory=StopPolicy.off)
    write_meta: bool = False
    list_only: bool = False
    show_progress: bool = True
    timeout: int = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.destination:
            self.destination = os.getenv(OUTPUT_DIRECTORY_ENV) or None

    def validate(self) -> None:
        """Check the configuration before anything is fetched.

        Raises:
            ConfigError: If the configuration cannot be used for a run.
        """
        if not self.url or not self.url.strip():
            raise ConfigError("A feed URL is required")
        if not self.destination and not self.list_only:
            raise ConfigError(
                "An output path is required unless only listing episodes "
                f"(pass it on the command line or set {OUTPUT_DIRECTORY_ENV})"
            )
        if self.pad_width < 0:
            raise ConfigError(
                f"Zero pad width must not be negative, got {self.pad_width}"
            )
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        if (
            self.stop_policy.mode is StopMode.ON_SUBSTRING
            and not self.stop_policy.text
        ):
            raise ConfigError("Stop string must not be empty")
