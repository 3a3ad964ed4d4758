"""
Fixed-capacity RGBA pixel buffers.

A Framebuffer owns one ``(max_height, max_width, 4)`` uint8 array that is
allocated at construction and never reallocated.  A frame occupies the
top-left ``height x width`` region of that array; the rest is slack.

Resampling is delegated to Pillow:

    fit        ImageOps.fit       crop to target aspect, then scale
    resize_to  Image.resize       scale each axis independently
"""

from __future__ import annotations

import numpy as np
from PIL import Image, ImageOps

from gifops.exceptions import (BufferTooSmallError, GifOpsError,
                               InvalidDimensionsError)

RESAMPLE = Image.Resampling.LANCZOS


class Framebuffer:
    """Reusable pixel container with per-frame duration metadata."""

    def __init__(self, max_width: int, max_height: int) -> None:
        if max_width <= 0 or max_height <= 0:
            raise InvalidDimensionsError(
                f"Framebuffer capacity must be positive, got {max_width}x{max_height}.")
        self.max_width = max_width
        self.max_height = max_height
        self._pixels: np.ndarray | None = np.zeros(
            (max_height, max_width, 4), dtype=np.uint8)
        self.width = 0
        self.height = 0
        self.duration_ms = 0

    # -- State -------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._pixels is None

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def _arena(self) -> np.ndarray:
        if self._pixels is None:
            raise GifOpsError("Framebuffer is closed.")
        return self._pixels

    def clear(self) -> None:
        """Zero all pixel data without releasing the backing array."""
        self._arena().fill(0)
        self.width = 0
        self.height = 0
        self.duration_ms = 0

    def close(self) -> None:
        """Release the backing array."""
        self._pixels = None
        self.width = 0
        self.height = 0
        self.duration_ms = 0

    # -- Pixel access ------------------------------------------------------

    def fits(self, width: int, height: int) -> bool:
        return width <= self.max_width and height <= self.max_height

    def load_image(self, img: Image.Image, duration_ms: int = 0) -> None:
        """Copy *img* into the buffer as RGBA and record its duration."""
        arena = self._arena()
        w, h = img.size
        if not self.fits(w, h):
            raise BufferTooSmallError(
                f"Frame {w}x{h} exceeds buffer capacity "
                f"{self.max_width}x{self.max_height}.",
                required=w * h, capacity=self.max_width * self.max_height)
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        arena[:h, :w] = np.asarray(img)
        self.width = w
        self.height = h
        self.duration_ms = int(duration_ms)

    def pixels(self) -> np.ndarray:
        """Return a view of the occupied region (no copy)."""
        return self._arena()[:self.height, :self.width]

    def image(self) -> Image.Image:
        """Return the current frame as a new RGBA Pillow image."""
        if self.empty:
            raise GifOpsError("Framebuffer holds no frame.")
        # fromarray may share memory with its input; never hand out the arena.
        return Image.fromarray(self.pixels().copy())

    # -- Transforms --------------------------------------------------------

    def _check_target(self, width: int, height: int, dst: Framebuffer) -> None:
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(
                f"Resize target must be positive, got {width}x{height}.")
        if not dst.fits(width, height):
            raise BufferTooSmallError(
                f"Resize target {width}x{height} exceeds destination capacity "
                f"{dst.max_width}x{dst.max_height}.",
                required=width * height, capacity=dst.max_width * dst.max_height)

    def fit(self, width: int, height: int, dst: Framebuffer) -> None:
        """Crop-resize into *dst* at exactly (width, height), keeping aspect."""
        self._check_target(width, height, dst)
        fitted = ImageOps.fit(self.image(), (width, height), method=RESAMPLE)
        dst.load_image(fitted, self.duration_ms)

    def resize_to(self, width: int, height: int, dst: Framebuffer) -> None:
        """Stretch into *dst* at exactly (width, height)."""
        self._check_target(width, height, dst)
        resized = self.image().resize((width, height), RESAMPLE)
        dst.load_image(resized, self.duration_ms)

    def __repr__(self) -> str:
        return (f"Framebuffer({self.width}x{self.height} of "
                f"{self.max_width}x{self.max_height}, {self.duration_ms} ms)")
