"""
CLI command for transforming an image file.

Usage:
    gifops transform in.gif -o out.gif --width 320 --height 240 --resize fit
    gifops transform in.gif -o still.jpeg --quality jpeg_quality=85
    gifops transform in.webp -o short.webp --max-frames 50 --max-duration 3000
    gifops transform in.gif -o out.webp --config options.yaml
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..config import (DEFAULT_MAX_SIZE, load_options, normalize_file_type,
                      options_from_mapping)
from ..decoder import new_decoder
from ..exceptions import ConfigError, GifOpsError
from ..ops import GifOps
from ..types import TransformOptions


def _parse_quality_args(pairs: list[str]) -> dict[str, int]:
    """Turn ``["jpeg_quality=85", "16=6"]`` into a quality mapping."""
    quality: dict[str, int] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ConfigError(f"Quality option must look like KEY=VALUE, got {pair!r}.")
        try:
            quality[key.strip()] = int(value)
        except ValueError:
            raise ConfigError(f"Quality value for {key!r} is not an integer: {value!r}.") from None
    return quality


def _build_options(args: argparse.Namespace, output_path: Path) -> TransformOptions:
    base = TransformOptions(file_type=normalize_file_type(output_path.suffix or ".gif"))
    if args.config:
        base = load_options(args.config, base)

    overrides: dict = {}
    if args.format:
        overrides["format"] = args.format
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    if args.resize:
        overrides["resize"] = args.resize
    if args.quality:
        overrides["quality"] = _parse_quality_args(args.quality)
    if args.max_frames is not None:
        overrides["max_frames"] = args.max_frames
    if args.max_duration is not None:
        overrides["max_duration_ms"] = args.max_duration
    return options_from_mapping(overrides, base)


def _format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def cmd_transform(args: argparse.Namespace) -> int:
    """Main handler for ``gifops transform``."""
    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: file not found: {input_path}", file=sys.stderr)
        return 1
    output_path = Path(args.output)

    try:
        options = _build_options(args, output_path)
        data = input_path.read_bytes()
        with GifOps(args.max_size) as ops, new_decoder(data) as dec:
            result = ops.transform(dec, options)
            output_path.write_bytes(bytes(result))
    except (GifOpsError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Done! {input_path} -> {output_path} ({_format_size(len(result))})")
    return 0


def build_transform_parser(subparsers: argparse._SubParsersAction,
                           parents: tuple[argparse.ArgumentParser, ...] = ()) -> None:
    """Register the ``transform`` subcommand and its arguments."""
    p = subparsers.add_parser(
        "transform",
        parents=list(parents),
        help="Resize and re-encode an image",
        description="Decode an (animated) image frame by frame, optionally resize "
                    "each frame, and encode the result.",
    )
    p.add_argument("input", help="Path to the source image")
    p.add_argument(
        "-o", "--output", required=True,
        help="Output file path; its extension selects the format unless --format is given",
    )
    p.add_argument(
        "--format", default=None,
        help="Output file type, e.g. gif, webp, apng, jpeg, png",
    )
    p.add_argument("--width", type=int, default=None, help="Output width in pixels")
    p.add_argument("--height", type=int, default=None, help="Output height in pixels")
    p.add_argument(
        "--resize", choices=["none", "fit", "resize"], default=None,
        help="fit crops to keep aspect, resize stretches (default: none)",
    )
    p.add_argument(
        "--quality", action="append", metavar="KEY=VALUE",
        help="Encode option, e.g. jpeg_quality=85, png_compression=6, "
             "webp_quality=101 (lossless); repeatable",
    )
    p.add_argument(
        "--max-frames", type=int, default=None,
        help="Stop after encoding this many frames; 0 = unbounded",
    )
    p.add_argument(
        "--max-duration", type=int, default=None, metavar="MS",
        help="Stop before the animation exceeds this many milliseconds; 0 = unbounded",
    )
    p.add_argument(
        "--max-size", type=int, default=DEFAULT_MAX_SIZE,
        help=f"Largest frame edge the pipeline accepts (default: {DEFAULT_MAX_SIZE})",
    )
    p.add_argument("--config", default=None, help="YAML file with transform options")
    p.set_defaults(func=cmd_transform)
