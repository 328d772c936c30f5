#!/usr/bin/env python3
"""
Hermes - BitTorrent client
Command-line entry point.
"""

import argparse
import sys
from pathlib import Path
from hermes.client.session import Client
from hermes.common.logging import DEFAULT_LOG_DIR, config_logging, stop_logging
from hermes.torrent.errors import (
    DecodeError,
    InvalidFieldError,
    MissingRequiredFieldError,
    NewTorrentFromFileError,
)
import logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_UNREADABLE = 3
EXIT_DECODE = 4
EXIT_MISSING_FIELD = 5
EXIT_INVALID_FIELD = 6

EXIT_CODES = (
    (OSError, EXIT_UNREADABLE),
    (DecodeError, EXIT_DECODE),
    (MissingRequiredFieldError, EXIT_MISSING_FIELD),
    (InvalidFieldError, EXIT_INVALID_FIELD),
)


def exit_code_for(error: NewTorrentFromFileError) -> int:
    for kind, code in EXIT_CODES:
        if isinstance(error.cause, kind):
            return code
    return 1


def add_command(client: Client, torrent_file: Path) -> int:
    """
    Add a torrent file to the session.

    Args:
        client: Session the torrent is added to
        torrent_file: Path to the .torrent file
    """
    try:
        torrent = client.add_torrent(torrent_file)
    except NewTorrentFromFileError as e:
        logger.debug(
            f"Could not add {torrent_file}",
            exc_info=e,
            extra={"torrent_path": str(torrent_file), "error_kind": type(e.cause).__name__},
        )
        print(f"Error: {e}", file=sys.stderr)
        return exit_code_for(e)

    print("Torrent added!")
    print(f"\n{'='*60}")
    print(torrent)
    print(f"{'='*60}")
    return EXIT_OK


def build_parser() -> tuple[argparse.ArgumentParser, argparse.ArgumentParser]:
    parser = argparse.ArgumentParser(
        prog="hermes",
        description="Hermes - BitTorrent client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s add ubuntu.torrent
  %(prog)s -v add movie.torrent
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--log-file",
        default="hermes.log.jsonl",
        help="Name of the JSON log file (default: hermes.log.jsonl)"
    )

    parser.add_argument(
        "--log-dir",
        type=Path,
        default=DEFAULT_LOG_DIR,
        help=f"Directory for log files (default: {DEFAULT_LOG_DIR})"
    )

    subparsers = parser.add_subparsers(dest="command")
    add_parser = subparsers.add_parser("add", help="Add a .torrent file")
    add_parser.add_argument(
        "file",
        metavar="FILE",
        type=Path,
        nargs="?",
        help="Path to the .torrent file"
    )

    return parser, add_parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the Hermes client."""
    parser, add_parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_usage()
        return EXIT_USAGE

    if args.file is None:
        add_parser.print_usage()
        return EXIT_USAGE

    config_logging(args.log_file, args.log_dir, args.verbose)
    try:
        return add_command(Client(), args.file)
    finally:
        stop_logging()


if __name__ == "__main__":
    sys.exit(main())
