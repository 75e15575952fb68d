"""CLI entry point for mailpull."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .commands import apply_cli_overrides, fetch_cmd, parse_mode, text_cmd
from .config import load_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("mailpull")


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=Path("config.toml"),
        help="Path to configuration file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def add_retrieval_args(parser: argparse.ArgumentParser) -> None:
    """Add mailbox selection and side-effect arguments to a parser."""
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--unread",
        action="store_true",
        help="Only retrieve unread messages",
    )
    mode.add_argument(
        "--since",
        type=str,
        metavar="YYYY-MM-DD",
        help="Only retrieve messages received on or after this date",
    )
    parser.add_argument(
        "--folder",
        type=str,
        help="Override the folder to select",
    )
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Select the folder read-only",
    )
    seen = parser.add_mutually_exclusive_group()
    seen.add_argument(
        "--mark-read",
        action="store_true",
        help="Leave retrieved messages marked as read",
    )
    seen.add_argument(
        "--keep-unread",
        action="store_true",
        help="Remove the seen flag from every retrieved message",
    )
    parser.add_argument(
        "--delete",
        action="store_true",
        help="Flag every retrieved message as deleted",
    )
    parser.add_argument(
        "--queue-size",
        type=positive_int,
        help="Maximum responses buffered ahead of the consumer",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        description="Mailpull mailbox retrieval",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # fetch - Stream messages from the mailbox
    fetch_parser = subparsers.add_parser("fetch", help="Retrieve messages from the configured folder")
    add_common_args(fetch_parser)
    add_retrieval_args(fetch_parser)
    fetch_parser.add_argument(
        "--text",
        action="store_true",
        help="Print the visible text of each message body",
    )

    # text - Visible text of an HTML document
    text_parser = subparsers.add_parser("text", help="Print the visible text of an HTML file")
    text_parser.add_argument("file", type=Path, nargs="?", help="HTML file (default: stdin)")
    text_parser.add_argument(
        "--nested",
        action="store_true",
        help="Track nested non-visible elements instead of a single on/off flag",
    )
    text_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Show help if no command specified
    if not args.command:
        parser.print_help()
        sys.exit(0)

    if getattr(args, "verbose", False):
        logger.setLevel(logging.DEBUG)

    if args.command == "text":
        if args.file is not None and not args.file.exists():
            logger.error(f"File not found: {args.file}")
            sys.exit(1)
        sys.exit(text_cmd(args.file, track_nesting=args.nested))

    if not args.config.exists():
        logger.error(f"Configuration file not found: {args.config}")
        sys.exit(1)

    config = load_config(args.config)
    config = apply_cli_overrides(config, args)

    if args.command == "fetch":
        try:
            mode = parse_mode(args)
        except ValueError as e:
            logger.error(f"Invalid --since date: {e}")
            sys.exit(2)
        sys.exit(fetch_cmd(config, mode, show_text=args.text))


if __name__ == "__main__":
    main()
