"""Main CLI entry point for gifops."""

from __future__ import annotations

import argparse
import logging
import sys

from gifops import __version__

from .info_cli import build_info_parser
from .transform_cli import build_transform_parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gifops",
        description="Resize and re-encode animated images with bounded memory",
    )
    parser.add_argument("--version", action="version", version=f"gifops {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log pipeline progress to stderr")
    # Accepted after the subcommand too; SUPPRESS keeps a top-level -v intact.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
                        help="Log pipeline progress to stderr")
    subparsers = parser.add_subparsers(dest="command")
    build_transform_parser(subparsers, (common,))
    build_info_parser(subparsers, (common,))
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0
    _configure_logging(args.verbose)
    return args.func(args)


def cli_entry() -> None:
    sys.exit(main())
