"""
Streaming frame encoders.

An encoder is fed one Framebuffer per encode() call and answers with an
EncodeResult: MORE asks for another frame, DONE carries the finished
artifact.  Passing ``None`` instead of a buffer means "no more frames"
and always yields DONE (or raises).

Two batching policies exist:

    AnimationEncoder  .gif .webp .apng   keeps every frame, emits one
                                         animated file when finalized
    StillEncoder      .jpeg .png ...     emits the first frame at once

Encode options are a mapping of small integer keys to integer values:

    JPEG_QUALITY      1   0 -- 100
    PNG_COMPRESSION   16  0 -- 9
    WEBP_QUALITY      64  0 -- 100, above 100 selects lossless
"""

from __future__ import annotations

import abc
import io
import logging
from typing import Any

from PIL import Image

from gifops.decoder import Decoder
from gifops.exceptions import (BufferTooSmallError, EncodeError,
                               UnsupportedFormatError)
from gifops.framebuffer import Framebuffer
from gifops.types import EncodeResult

logger = logging.getLogger(__name__)

JPEG_QUALITY = 1
PNG_COMPRESSION = 16
WEBP_QUALITY = 64

OPTION_NAMES: dict[str, int] = {
    "jpeg_quality": JPEG_QUALITY,
    "png_compression": PNG_COMPRESSION,
    "webp_quality": WEBP_QUALITY,
}

_STILL_FORMATS: dict[str, str] = {
    ".jpeg": "JPEG",
    ".jpg": "JPEG",
    ".png": "PNG",
    ".bmp": "BMP",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}

_ANIMATED_FORMATS: dict[str, str] = {
    ".gif": "GIF",
    ".webp": "WEBP",
    ".apng": "PNG",
}


def supported_file_types() -> list[str]:
    return sorted({**_STILL_FORMATS, **_ANIMATED_FORMATS})


def _save_params(fmt: str, options: dict[int, int]) -> dict[str, Any]:
    """Translate integer-keyed encode options into Pillow save() kwargs."""
    params: dict[str, Any] = {}
    if fmt == "JPEG" and JPEG_QUALITY in options:
        params["quality"] = options[JPEG_QUALITY]
    elif fmt == "PNG" and PNG_COMPRESSION in options:
        params["compress_level"] = options[PNG_COMPRESSION]
    elif fmt == "WEBP" and WEBP_QUALITY in options:
        quality = options[WEBP_QUALITY]
        if quality > 100:
            params["lossless"] = True
        else:
            params["quality"] = quality
    return params


def _flatten(img: Image.Image, background: str = "white") -> Image.Image:
    """Composite RGBA onto an opaque background for alpha-less formats."""
    bg = Image.new("RGB", img.size, background)
    bg.paste(img, mask=img.split()[3])
    return bg


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class Encoder(abc.ABC):
    """Abstract interface that every encoder must implement.

    *dst* is an optional preallocated output buffer.  When given, the
    encoded artifact is written into its prefix and returned as a
    memoryview over that prefix; an artifact longer than ``len(dst)``
    raises BufferTooSmallError.
    """

    def __init__(self, fmt: str, decoder: Decoder, dst: bytearray | None = None) -> None:
        self.format = fmt
        self.decoder = decoder
        self.dst = dst
        self._finished = False

    @abc.abstractmethod
    def encode(self, buffer: Framebuffer | None, options: dict[int, int]) -> EncodeResult:
        """Consume *buffer*, or finalize when it is None."""

    def close(self) -> None:
        """Release encoder resources."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._finished:
            raise EncodeError("Encoder has already produced its output.")

    def _deliver(self, data: bytes) -> EncodeResult:
        self._finished = True
        if self.dst is None:
            return EncodeResult.done(data)
        if len(data) > len(self.dst):
            raise BufferTooSmallError(
                f"Encoded {self.format} is {len(data)} bytes, "
                f"destination holds {len(self.dst)}.",
                required=len(data), capacity=len(self.dst))
        self.dst[:len(data)] = data
        return EncodeResult.done(memoryview(self.dst)[:len(data)])


# ---------------------------------------------------------------------------
# Single image
# ---------------------------------------------------------------------------

class StillEncoder(Encoder):
    """Encode the first frame received as a single image."""

    def encode(self, buffer, options):
        self._check_open()
        if buffer is None:
            raise EncodeError(f"No frame was supplied to the {self.format} encoder.")
        img = buffer.image()
        if self.format == "JPEG":
            img = _flatten(img)
        out = io.BytesIO()
        try:
            img.save(out, format=self.format, **_save_params(self.format, options))
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"{self.format} encode failed: {exc}") from exc
        logger.debug("Encoded %dx%d still as %s", img.width, img.height, self.format)
        return self._deliver(out.getvalue())


# ---------------------------------------------------------------------------
# Animation
# ---------------------------------------------------------------------------

class AnimationEncoder(Encoder):
    """Collect frames until finalized, then write one animated file."""

    def __init__(self, fmt: str, decoder: Decoder, dst: bytearray | None = None) -> None:
        super().__init__(fmt, decoder, dst)
        self._frames: list[Image.Image] = []
        self._durations: list[int] = []

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    def encode(self, buffer, options):
        self._check_open()
        if buffer is not None:
            self._frames.append(buffer.image())
            self._durations.append(buffer.duration_ms)
            return EncodeResult.more()
        return self._finalize(options)

    def _animation_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"duration": list(self._durations)}
        loop = self.decoder.header().loop_count
        if self.format == "GIF":
            params["disposal"] = 2
            if loop is not None:
                params["loop"] = loop
        else:
            params["loop"] = loop or 0
            if self.format == "PNG":
                params["default_image"] = False
        return params

    def _finalize(self, options: dict[int, int]) -> EncodeResult:
        if not self._frames:
            raise EncodeError(f"No frames were supplied to the {self.format} encoder.")
        first, rest = self._frames[0], self._frames[1:]
        out = io.BytesIO()
        try:
            first.save(
                out,
                format=self.format,
                save_all=True,
                append_images=rest,
                **self._animation_params(),
                **_save_params(self.format, options),
            )
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"{self.format} encode failed: {exc}") from exc
        logger.debug("Encoded %d frame(s) as animated %s", len(self._frames), self.format)
        return self._deliver(out.getvalue())

    def close(self) -> None:
        for img in self._frames:
            img.close()
        self._frames.clear()
        self._durations.clear()


def new_encoder(file_type: str, decoder: Decoder, dst: bytearray | None = None) -> Encoder:
    """Return an encoder for *file_type* (a dot-prefixed extension)."""
    ext = file_type.lower()
    if ext in _ANIMATED_FORMATS:
        return AnimationEncoder(_ANIMATED_FORMATS[ext], decoder, dst)
    if ext in _STILL_FORMATS:
        return StillEncoder(_STILL_FORMATS[ext], decoder, dst)
    raise UnsupportedFormatError(
        f"No encoder for {file_type!r}; expected one of "
        f"{', '.join(supported_file_types())}.")
