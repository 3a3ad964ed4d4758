"""
Custom exception hierarchy for gifops.

All gifops errors inherit from GifOpsError so callers can catch the
entire family with a single except clause.  StreamExhausted is the one
exception outside the family: it is the decoder's end-of-stream signal
and never reaches a caller of GifOps.transform().
"""

from __future__ import annotations


class StreamExhausted(Exception):
    """Raised by a decoder when no further frames exist."""


class GifOpsError(Exception):
    """Base exception for all gifops errors."""


class DecodeError(GifOpsError):
    """Raised when a frame cannot be decoded."""


class EncodeError(GifOpsError):
    """Raised when the encoder cannot produce output."""


class BufferTooSmallError(GifOpsError):
    """Raised when pixel data or encoded output exceeds a buffer's capacity."""

    def __init__(self, message: str, required: int = 0, capacity: int = 0) -> None:
        super().__init__(message)
        self.required = required
        self.capacity = capacity


class InvalidDimensionsError(GifOpsError):
    """Raised when a resize target has a non-positive width or height."""


class UnsupportedFormatError(GifOpsError):
    """Raised when no encoder exists for the requested file type."""



class ConfigError(GifOpsError):
    """Raised when transform options are invalid."""
