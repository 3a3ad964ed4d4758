"""
gifops -- Bounded-memory resize and re-encode of animated images.

Frames are decoded one at a time into a fixed pair of buffers, optionally
fitted or stretched to a target size, and streamed into an encoder that
may batch them into a single animated artifact.
"""

__version__ = "0.1.0"

from gifops.decoder import Decoder, PillowDecoder, new_decoder
from gifops.encoder import (JPEG_QUALITY, PNG_COMPRESSION, WEBP_QUALITY,
                            AnimationEncoder, Encoder, StillEncoder,
                            new_encoder)
from gifops.exceptions import GifOpsError, StreamExhausted
from gifops.framebuffer import Framebuffer
from gifops.ops import GifOps
from gifops.types import (EncodeResult, EncodeStatus, ImageHeader,
                          ImageOrientation, ResizeMethod, TransformOptions)

__all__ = [
    "AnimationEncoder",
    "Decoder",
    "EncodeResult",
    "EncodeStatus",
    "Encoder",
    "Framebuffer",
    "GifOps",
    "GifOpsError",
    "ImageHeader",
    "ImageOrientation",
    "JPEG_QUALITY",
    "PNG_COMPRESSION",
    "PillowDecoder",
    "ResizeMethod",
    "StillEncoder",
    "StreamExhausted",
    "TransformOptions",
    "WEBP_QUALITY",
    "new_decoder",
    "new_encoder",
]
