"""
Core data structures shared by the controller and the codecs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class ResizeMethod(enum.Enum):
    """How each decoded frame is brought to the output size."""
    NONE = "none"         # Encode at source resolution.
    FIT = "fit"           # Aspect-preserving crop-resize.
    RESIZE = "resize"     # Non-uniform stretch.


class ImageOrientation(enum.IntEnum):
    """EXIF orientation tag values (TIFF 6.0, tag 0x0112)."""
    TOP_LEFT = 1
    TOP_RIGHT = 2
    BOTTOM_RIGHT = 3
    BOTTOM_LEFT = 4
    LEFT_TOP = 5
    RIGHT_TOP = 6
    RIGHT_BOTTOM = 7
    LEFT_BOTTOM = 8


class EncodeStatus(enum.Enum):
    """Answer of an encoder to a single encode() call."""
    MORE = "more"         # Supply another frame.
    DONE = "done"         # Final artifact is ready.


@dataclass(frozen=True)
class EncodeResult:
    """Tagged result of Encoder.encode().

    ``content`` is only meaningful when ``status`` is DONE; a DONE result
    with empty content is still a final answer.
    """
    status: EncodeStatus
    content: bytes | memoryview = b""

    @classmethod
    def more(cls) -> EncodeResult:
        return cls(EncodeStatus.MORE)

    @classmethod
    def done(cls, content: bytes | memoryview) -> EncodeResult:
        return cls(EncodeStatus.DONE, content)

    @property
    def is_done(self) -> bool:
        return self.status is EncodeStatus.DONE


@dataclass(frozen=True)
class ImageHeader:
    """Stream-level metadata reported by a decoder before decoding."""
    width: int
    height: int
    mode: str = "RGBA"
    orientation: ImageOrientation = ImageOrientation.TOP_LEFT
    frame_count: int = 1
    loop_count: int | None = 0    # 0 = infinite, None = play once
    is_animated: bool = False

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class TransformOptions:
    """Per-call settings for GifOps.transform()."""
    file_type: str = ".gif"       # Dot-prefixed extension, e.g. ".jpeg"
    width: int = 0
    height: int = 0
    resize_method: ResizeMethod = ResizeMethod.NONE
    encode_options: dict[int, int] = field(default_factory=dict)
    max_encode_frames: int = 0    # 0 = unbounded
    max_encode_duration_ms: int = 0  # 0 = unbounded
