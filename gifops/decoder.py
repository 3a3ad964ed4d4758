"""
Frame decoders.

A decoder produces one frame per decode_to() call into a caller-owned
Framebuffer and raises StreamExhausted once the source has no frames
left.  skip_frame() advances past a frame without decoding its pixels.

PillowDecoder covers every multi-frame format Pillow can read (GIF,
WebP, APNG, TIFF, ...).  Frames are composited onto the full logical
screen, so every decoded frame has the canvas size from header().
"""

from __future__ import annotations

import abc
import io
import logging

from PIL import Image, UnidentifiedImageError

from gifops.exceptions import DecodeError, StreamExhausted
from gifops.framebuffer import Framebuffer
from gifops.types import ImageHeader, ImageOrientation

logger = logging.getLogger(__name__)

_EXIF_ORIENTATION = 0x0112


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class Decoder(abc.ABC):
    """Abstract interface that every decoder must implement."""

    @abc.abstractmethod
    def header(self) -> ImageHeader:
        """Return stream-level metadata without decoding any frame."""

    @abc.abstractmethod
    def decode_to(self, buffer: Framebuffer) -> None:
        """Decode the next frame into *buffer*.

        Raises StreamExhausted when no frames remain.
        """

    @abc.abstractmethod
    def skip_frame(self) -> None:
        """Advance past the next frame without decoding it.

        Raises StreamExhausted when no frames remain.
        """

    def description(self) -> str:
        """Short name of the source format, e.g. ``"GIF"``."""
        return ""

    def close(self) -> None:
        """Release decoder resources."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Pillow
# ---------------------------------------------------------------------------

def _read_orientation(img: Image.Image) -> ImageOrientation:
    try:
        raw = img.getexif().get(_EXIF_ORIENTATION, 1)
        return ImageOrientation(int(raw))
    except (ValueError, TypeError, OSError):
        return ImageOrientation.TOP_LEFT


class PillowDecoder(Decoder):
    """Decode any Pillow-readable image held in memory."""

    def __init__(self, data: bytes) -> None:
        if not data:
            raise DecodeError("Input is empty.")
        try:
            self._img = Image.open(io.BytesIO(data))
        except (UnidentifiedImageError, OSError) as exc:
            raise DecodeError(f"Cannot identify image data: {exc}") from exc
        # n_frames walks the whole stream, so damage past the first frame shows up here.
        try:
            self._frame_count = getattr(self._img, "n_frames", 1)
        except (OSError, EOFError, ValueError, IndexError) as exc:
            self._img.close()
            raise DecodeError(f"Corrupt image data: {exc}") from exc
        self._next_frame = 0
        self._header: ImageHeader | None = None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def frames_consumed(self) -> int:
        """Frames decoded or skipped so far."""
        return self._next_frame

    def header(self) -> ImageHeader:
        if self._header is None:
            img = self._img
            self._header = ImageHeader(
                width=img.width,
                height=img.height,
                mode=img.mode,
                orientation=_read_orientation(img),
                frame_count=self._frame_count,
                loop_count=img.info.get("loop"),
                is_animated=self._frame_count > 1,
            )
        return self._header

    def description(self) -> str:
        return self._img.format or ""

    def _advance(self) -> int:
        if self._next_frame >= self._frame_count:
            raise StreamExhausted()
        index = self._next_frame
        self._next_frame += 1
        return index

    def decode_to(self, buffer: Framebuffer) -> None:
        index = self._advance()
        try:
            self._img.seek(index)
            frame = self._img.convert("RGBA")
        except (OSError, EOFError, ValueError, IndexError) as exc:
            raise DecodeError(f"Frame {index}: {exc}") from exc
        duration = self._img.info.get("duration") or 0
        buffer.load_image(frame, int(duration))
        logger.debug("Decoded frame %d (%dx%d, %d ms)",
                     index, buffer.width, buffer.height, buffer.duration_ms)

    def skip_frame(self) -> None:
        index = self._advance()
        logger.debug("Skipped frame %d", index)

    def close(self) -> None:
        self._img.close()


def new_decoder(data: bytes) -> Decoder:
    """Return a decoder for *data*."""
    return PillowDecoder(data)
