"""
Building TransformOptions from mappings and YAML files.

An options file looks like::

    format: .webp
    width: 320
    height: 240
    resize: fit            # none | fit | resize
    quality:
      webp_quality: 80     # or the integer key, e.g. 64: 80
    max_frames: 100        # 0 = unbounded
    max_duration_ms: 5000  # 0 = unbounded
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from gifops.encoder import OPTION_NAMES, supported_file_types
from gifops.exceptions import ConfigError
from gifops.types import ResizeMethod, TransformOptions

DEFAULT_MAX_SIZE = 4096

_KNOWN_KEYS = {"format", "width", "height", "resize", "quality",
               "max_frames", "max_duration_ms"}


def normalize_file_type(file_type: str) -> str:
    """Return *file_type* lower-cased with a leading dot."""
    ft = file_type.strip().lower()
    if not ft:
        raise ConfigError("Output format is empty.")
    return ft if ft.startswith(".") else "." + ft


def _non_negative_int(data: dict, key: str) -> int:
    value = data.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key!r} must be an integer, got {value!r}.")
    if value < 0:
        raise ConfigError(f"{key!r} must be >= 0, got {value}.")
    return value


def _parse_quality(raw: Any) -> dict[int, int]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'quality' must be a mapping, got {type(raw).__name__}.")
    options: dict[int, int] = {}
    for key, value in raw.items():
        if isinstance(key, str) and not key.isdigit():
            if key not in OPTION_NAMES:
                raise ConfigError(
                    f"Unknown quality option {key!r}; expected one of "
                    f"{', '.join(sorted(OPTION_NAMES))}.")
            code = OPTION_NAMES[key]
        else:
            code = int(key)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"Quality option {key!r} must be an integer, got {value!r}.")
        options[code] = value
    return options


def parse_resize_method(value: str | ResizeMethod) -> ResizeMethod:
    if isinstance(value, ResizeMethod):
        return value
    try:
        return ResizeMethod(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in ResizeMethod)
        raise ConfigError(f"Unknown resize method {value!r}; expected one of {choices}.") from None


def validate_options(opt: TransformOptions) -> TransformOptions:
    """Check cross-field constraints and return *opt* unchanged."""
    if opt.file_type not in supported_file_types():
        raise ConfigError(
            f"Unsupported output format {opt.file_type!r}; expected one of "
            f"{', '.join(supported_file_types())}.")
    if opt.resize_method is not ResizeMethod.NONE and (opt.width <= 0 or opt.height <= 0):
        raise ConfigError(
            f"Resize method {opt.resize_method.value!r} needs a positive width "
            f"and height, got {opt.width}x{opt.height}.")
    if opt.max_encode_frames < 0 or opt.max_encode_duration_ms < 0:
        raise ConfigError("Frame and duration limits must be >= 0.")
    return opt


def options_from_mapping(data: dict[str, Any],
                         base: TransformOptions | None = None) -> TransformOptions:
    """Build validated TransformOptions from a plain mapping.

    Keys absent from *data* keep their value from *base*.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Options must be a mapping, got {type(data).__name__}.")
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown option(s): {', '.join(sorted(map(str, unknown)))}.")

    opt = base or TransformOptions()
    changes: dict[str, Any] = {}
    if "format" in data:
        changes["file_type"] = normalize_file_type(str(data["format"]))
    if "width" in data:
        changes["width"] = _non_negative_int(data, "width")
    if "height" in data:
        changes["height"] = _non_negative_int(data, "height")
    if "resize" in data:
        changes["resize_method"] = parse_resize_method(data["resize"])
    if "quality" in data:
        changes["encode_options"] = _parse_quality(data["quality"])
    if "max_frames" in data:
        changes["max_encode_frames"] = _non_negative_int(data, "max_frames")
    if "max_duration_ms" in data:
        changes["max_encode_duration_ms"] = _non_negative_int(data, "max_duration_ms")
    return validate_options(replace(opt, **changes))


def load_options(path: Path | str,
                 base: TransformOptions | None = None) -> TransformOptions:
    """Read a YAML options file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read options file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    return options_from_mapping(data, base)
