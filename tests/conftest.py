"""
Shared fixtures for the gifops test suite.
"""

from __future__ import annotations

import io
import tempfile
from pathlib import Path

import pytest
from PIL import Image


def frame_color(index: int) -> tuple[int, int, int]:
    """A distinct solid colour per frame index (distinct for 0 -- 15)."""
    return ((index * 53) % 256, 255 - (index * 31) % 256, (index * 97 + 40) % 256)


def encode_animation(
    n_frames: int = 3,
    size: tuple[int, int] = (60, 40),
    duration_ms: int | list[int] = 40,
    loop: int | None = 0,
    fmt: str = "GIF",
) -> bytes:
    """Build an in-memory animation whose frames all differ."""
    frames = [Image.new("RGB", size, frame_color(i)) for i in range(n_frames)]
    buf = io.BytesIO()
    params = {"duration": duration_ms}
    if loop is not None:
        params["loop"] = loop
    frames[0].save(buf, format=fmt, save_all=True, append_images=frames[1:], **params)
    return buf.getvalue()


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory(prefix="gifops_test_") as d:
        yield Path(d)


@pytest.fixture
def three_frame_gif() -> bytes:
    """A 60x40 GIF with three 40 ms frames, looping forever."""
    return encode_animation(n_frames=3)


@pytest.fixture
def five_frame_gif() -> bytes:
    """A 60x40 GIF with five 40 ms frames, looping forever."""
    return encode_animation(n_frames=5)


@pytest.fixture
def striped_frame() -> Image.Image:
    """A 40x20 red frame whose leftmost 8 columns are green."""
    img = Image.new("RGBA", (40, 20), (255, 0, 0, 255))
    for x in range(8):
        for y in range(20):
            img.putpixel((x, y), (0, 255, 0, 255))
    return img


@pytest.fixture
def png_still() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (30, 20), (10, 20, 30)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def make_animation():
    """Factory fixture wrapping encode_animation()."""
    return encode_animation


@pytest.fixture
def color_of():
    """Factory fixture wrapping frame_color()."""
    return frame_color
