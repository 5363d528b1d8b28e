"""
Command-line interface for the podcast downloader.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import OUTPUT_DIRECTORY_ENV, DownloadConfig
from .errors import PoddlError
from .factory import create_manager
from .models import NamingMode, OrderingMode, StopPolicy
from .utils import DEFAULT_PAD_WIDTH, display_path


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    ``-h`` is the stop option, so help lives on ``--help`` only.
    """
    parser = argparse.ArgumentParser(
        prog="poddl",
        description="Download podcast episodes from RSS feeds",
        add_help=False,
        epilog=(
            f"The output path falls back to ${OUTPUT_DIRECTORY_ENV}. "
            "Put URL and PATH before -z and -h when those are given "
            "without a value."
        ),
    )
    parser.add_argument("url", help="URL of the podcast RSS feed")
    parser.add_argument("path", nargs="?", help="Output path")
    parser.add_argument(
        "-o", dest="output", metavar="PATH", help="Output path"
    )
    parser.add_argument(
        "-l",
        dest="list_only",
        action="store_true",
        help="Only display list of episodes",
    )
    parser.add_argument(
        "-r",
        dest="newest_first",
        action="store_true",
        help="Download/List newest episodes first",
    )
    parser.add_argument(
        "-rr",
        dest="reverse_numbers",
        action="store_true",
        help="Download/List newest episodes first with reversed numbers",
    )
    parser.add_argument(
        "-i",
        dest="append_number",
        action="store_true",
        help="Add episode index/number to file names",
    )
    parser.add_argument(
        "-s",
        dest="short_names",
        action="store_true",
        help="Use episode index/number as file names (nnn.ext)",
    )
    parser.add_argument(
        "-z",
        dest="pad_width",
        metavar="N",
        type=int,
        nargs="?",
        const=DEFAULT_PAD_WIDTH,
        default=0,
        help=(
            "Zero pad index/number when -i or -s are used "
            f"(default = {DEFAULT_PAD_WIDTH} if N is left out)"
        ),
    )
    parser.add_argument(
        "-n",
        dest="episodes",
        metavar="N[-N][,N[-N]]",
        help="Download episodes",
    )
    parser.add_argument(
        "-h",
        dest="stop",
        metavar="TEXT",
        nargs="?",
        const="",
        default=None,
        help=(
            "Quit when first existing file is found, or when the first "
            "file name matches TEXT"
        ),
    )
    parser.add_argument(
        "-m",
        dest="meta",
        action="store_true",
        help="Print meta information of episodes to list or additional files",
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable progress bars"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--version", action="version", version=f"poddl {__version__}"
    )
    parser.add_argument(
        "--help", action="help", help="Show this help message and exit"
    )
    return parser


def build_config(args: argparse.Namespace) -> DownloadConfig:
    """Translate parsed arguments into a DownloadConfig."""
    if args.reverse_numbers:
        ordering = OrderingMode.REVERSE_WITH_NUMBERS
    elif args.newest_first:
        ordering = OrderingMode.NOT_REVERSE
    else:
        ordering = OrderingMode.SIMPLE_REVERSE

    if args.short_names:
        naming = NamingMode.NUMBER
    elif args.append_number:
        naming = NamingMode.NUMBER_TITLE
    else:
        naming = NamingMode.TITLE

    if args.stop is None:
        stop_policy = StopPolicy.off()
    elif args.stop:
        stop_policy = StopPolicy.on_substring(args.stop)
    else:
        stop_policy = StopPolicy.on_existing()

    return DownloadConfig(
        url=args.url,
        destination=args.output or args.path,
        ordering=ordering,
        range_spec=args.episodes,
        naming=naming,
        pad_width=args.pad_width,
        stop_policy=stop_policy,
        write_meta=args.meta,
        list_only=args.list_only,
        show_progress=not args.no_progress,
    )


def configure_logging(verbose: bool = False) -> None:
    """Send progress messages to stdout, with details when verbose."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stdout,
        )
    else:
        logging.basicConfig(
            level=logging.INFO, format="%(message)s", stream=sys.stdout
        )
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point for podcast downloader."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = build_config(args)
        manager = create_manager(config)

        episodes = manager.get_episodes()

        if config.list_only:
            print(f"Listing {len(episodes)} files\n")
            for line in manager.format_listing(episodes):
                print(line)
            return

        print(f"Output path: {display_path(config.destination or '')}")
        summary = manager.download_episodes(episodes)

        print("\nDownload complete:")
        print(f"  Successfully downloaded: {summary.successful}")
        print(f"  Already existed (skipped): {summary.skipped}")
        print(f"  Failed downloads: {summary.failed}")
        if summary.stopped:
            print("  Stopped early")

    except KeyboardInterrupt:
        print("\nDownload interrupted by user", file=sys.stderr)
        sys.exit(130)
    except PoddlError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
