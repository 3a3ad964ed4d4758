"""
Transform pipeline controller.

    Decoder  -->  active buffer  -->  [fit | resize]  -->  Encoder  -->  bytes

GifOps owns exactly two Framebuffers for its whole lifetime.  Decoding
always targets the *active* buffer, which holds the full-resolution
frame.  A resize writes into the *secondary* buffer and the two roles are
swapped for the encode call, then swapped back before the next decode.
Peak pixel memory is therefore two buffers no matter how many frames the
source has.

The encoder may batch: an EncodeResult of MORE means "feed me another
frame", DONE carries the final artifact.  Two data-driven limits can cut a
transform short, a frame count and a cumulative duration.  Either one
drains the decoder and finalizes the encoder so the output stays a
complete file.
"""

from __future__ import annotations

import logging

from gifops.decoder import Decoder
from gifops.encoder import Encoder, new_encoder
from gifops.exceptions import EncodeError, StreamExhausted
from gifops.framebuffer import Framebuffer
from gifops.types import ResizeMethod, TransformOptions

logger = logging.getLogger(__name__)


class GifOps:
    """Reusable object that resizes and re-encodes (animated) images.

    A GifOps is cheap to reuse and expensive to create, so servers should
    keep one per worker and call transform() repeatedly.  It is not safe
    for concurrent use.

    Usage::

        ops = GifOps(max_size=2048)
        opts = TransformOptions(file_type=".gif", width=320, height=240,
                                resize_method=ResizeMethod.FIT,
                                max_encode_frames=100)
        with new_decoder(data) as dec:
            out = ops.transform(dec, opts)
        ops.close()
    """

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        self._frames = [
            Framebuffer(max_size, max_size),
            Framebuffer(max_size, max_size),
        ]
        self._frame_index = 0

    # -- Double buffer -----------------------------------------------------

    def active(self) -> Framebuffer:
        return self._frames[self._frame_index]

    def secondary(self) -> Framebuffer:
        return self._frames[1 - self._frame_index]

    def _swap(self) -> None:
        self._frame_index = 1 - self._frame_index

    # -- Lifecycle ---------------------------------------------------------

    def clear(self) -> None:
        """Zero all pixel data.

        Not needed between transform() calls; use it to drop image data
        from memory.
        """
        self._frames[0].clear()
        self._frames[1].clear()

    def close(self) -> None:
        """Release both buffers.  The object must not be used afterwards."""
        self._frames[0].close()
        self._frames[1].close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- Stages ------------------------------------------------------------

    def _decode(self, d: Decoder) -> None:
        d.decode_to(self.active())

    def _fit(self, width: int, height: int) -> bool:
        self.active().fit(width, height, self.secondary())
        self._swap()
        return True

    def _resize(self, width: int, height: int) -> bool:
        self.active().resize_to(width, height, self.secondary())
        self._swap()
        return True

    def _encode(self, e: Encoder, opt: dict[int, int]):
        return e.encode(self.active(), opt)

    def _encode_empty(self, e: Encoder, opt: dict[int, int]):
        return e.encode(None, opt)

    def _skip_to_end(self, d: Decoder) -> None:
        """Skip every remaining frame.

        Returns on StreamExhausted; any other exception propagates.
        """
        skipped = 0
        while True:
            try:
                d.skip_frame()
            except StreamExhausted:
                logger.debug("Drained %d remaining frame(s)", skipped)
                return
            skipped += 1

    def _finalize(self, e: Encoder, opt: dict[int, int]):
        result = self._encode_empty(e, opt)
        if not result.is_done:
            raise EncodeError("Encoder asked for more frames after the last one.")
        return result.content

    def _finish_early(self, d: Decoder, e: Encoder, opt: dict[int, int]):
        self._skip_to_end(d)
        return self._finalize(e, opt)

    # -- Transform ---------------------------------------------------------

    def transform(self, d: Decoder, opt: TransformOptions,
                  dst: bytearray | None = None) -> bytes | memoryview:
        """Decode, resize and re-encode every frame of *d*.

        The decoder must not have decoded any frame yet.  If *dst* is
        given the result is a memoryview over its prefix, otherwise a
        new bytes object.  Decode, resize and encode errors propagate
        unchanged; the encoder is closed on every exit path.
        """
        with new_encoder(opt.file_type, d, dst) as enc:
            frame_count = 0
            duration_ms = 0

            while True:
                source_exhausted = False
                try:
                    self._decode(d)
                except StreamExhausted:
                    # Out of frames: tell the encoder to wrap up.
                    source_exhausted = True

                if not source_exhausted:
                    duration_ms += self.active().duration_ms

                if opt.max_encode_duration_ms and duration_ms > opt.max_encode_duration_ms:
                    logger.debug("Duration limit %d ms exceeded at %d ms after %d frame(s)",
                                 opt.max_encode_duration_ms, duration_ms, frame_count)
                    return self._finish_early(d, enc, opt.encode_options)

                if source_exhausted:
                    logger.debug("Source exhausted after %d frame(s)", frame_count)
                    return self._finalize(enc, opt.encode_options)

                # TODO: apply d.header().orientation once Framebuffer grows
                # an orientation transform.

                swapped = False
                if opt.resize_method is ResizeMethod.FIT:
                    swapped = self._fit(opt.width, opt.height)
                elif opt.resize_method is ResizeMethod.RESIZE:
                    swapped = self._resize(opt.width, opt.height)

                result = self._encode(enc, opt.encode_options)
                if result.is_done:
                    return result.content

                frame_count += 1

                if opt.max_encode_frames and frame_count == opt.max_encode_frames:
                    logger.debug("Frame limit %d reached", opt.max_encode_frames)
                    return self._finish_early(d, enc, opt.encode_options)

                # The next decode needs the full-resolution buffer active again.
                if swapped:
                    self._swap()
