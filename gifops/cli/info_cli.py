"""
CLI command for inspecting an image without transforming it.

Usage:
    gifops info animation.gif
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..decoder import new_decoder
from ..exceptions import GifOpsError


def cmd_info(args: argparse.Namespace) -> int:
    """Handler for ``gifops info``."""
    path = Path(args.input)
    if not path.is_file():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1
    try:
        with new_decoder(path.read_bytes()) as dec:
            header = dec.header()
            fmt = dec.description()
    except GifOpsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    loop = "none" if header.loop_count is None else (
        "infinite" if header.loop_count == 0 else str(header.loop_count))
    print(f"Format:      {fmt or 'unknown'}")
    print(f"Size:        {header.width}x{header.height}")
    print(f"Mode:        {header.mode}")
    print(f"Frames:      {header.frame_count}")
    print(f"Loop:        {loop}")
    print(f"Orientation: {header.orientation.name}")
    return 0


def build_info_parser(subparsers: argparse._SubParsersAction,
                      parents: tuple[argparse.ArgumentParser, ...] = ()) -> None:
    """Register the ``info`` subcommand."""
    p = subparsers.add_parser(
        "info",
        parents=list(parents),
        help="Print image metadata",
        description="Print the stream header of an image file.",
    )
    p.add_argument("input", help="Path to the image file")
    p.set_defaults(func=cmd_info)
