"""Animation assembly and GIF serialization.

``assemble`` pairs an ordered list of quantized frames with a uniform
per-frame delay and a loop count. ``serialize`` turns the result into a
GIF89a byte stream built from Pillow's GIF block writers:

- the header, logical screen descriptor and global colour table,
- the NETSCAPE2.0 application extension carrying the loop count
  (0 = loop forever),
- per frame: one graphic control extension carrying the delay in
  hundredths of a second, an image descriptor with a local colour table and
  one LZW-compressed image data block,
- the trailer.

The blocks are written directly rather than through ``Image.save``, whose
GIF writer folds a frame identical to its predecessor into the previous
frame. Every frame of the Animation lands in the file with its own delay.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import GifImagePlugin

from .config import GIF_MAX_UINT16
from .error_handling import EncodingError, error_context
from .io import atomic_write
from .quantize import MAX_PALETTE_SIZE, QuantizedFrame

logger = logging.getLogger(__name__)

# Pillow takes GIF frame durations in milliseconds
MS_PER_HUNDREDTH = 10
GIF_TRAILER = b";"


@dataclass(frozen=True)
class Animation:
    """Frames, per-frame delays (hundredths of a second) and loop count."""

    frames: tuple[QuantizedFrame, ...]
    delays: tuple[int, ...]
    loop: int = 0

    def __post_init__(self) -> None:
        if len(self.delays) != len(self.frames):
            raise EncodingError(
                f"Animation has {len(self.frames)} frames but {len(self.delays)} delays"
            )

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def size(self) -> tuple[int, int]:
        """Logical screen size, taken from the first frame."""
        return self.frames[0].size if self.frames else (0, 0)

    @property
    def total_delay(self) -> int:
        """Total playback time of one loop in hundredths of a second."""
        return sum(self.delays)


def validate_frame(frame: QuantizedFrame, index: int) -> None:
    """Check that a frame can be stored in a GIF.

    Raises:
        EncodingError: If the frame is not palette-indexed, its palette is
            too large, or its dimensions do not fit the format
    """
    image = frame.image
    label = frame.source or f"frame {index}"

    if image.mode != "P":
        raise EncodingError(
            f"{label} is not palette-indexed (mode {image.mode})",
            context={"index": index},
        )

    palette_size = frame.palette_size
    if not 0 < palette_size <= MAX_PALETTE_SIZE:
        raise EncodingError(
            f"{label} has {palette_size} palette entries, GIF allows 1-{MAX_PALETTE_SIZE}",
            context={"index": index},
        )

    width, height = image.size
    if not (0 < width <= GIF_MAX_UINT16 and 0 < height <= GIF_MAX_UINT16):
        raise EncodingError(
            f"{label} has invalid dimensions {width}x{height}",
            context={"index": index},
        )


def assemble(frames: Sequence[QuantizedFrame], delay: int, loop: int = 0) -> Animation:
    """Build an Animation where every frame shows for ``delay`` hundredths.

    Args:
        frames: Quantized frames in playback order
        delay: Delay between frames in hundredths of a second
        loop: Number of loops, 0 for infinite

    Returns:
        Immutable Animation ready for serialization

    Raises:
        EncodingError: If there are no frames or any frame, the delay or the
            loop count is invalid for GIF
    """
    if not frames:
        raise EncodingError("No frames to encode")

    if not 0 < delay <= GIF_MAX_UINT16:
        raise EncodingError(f"Frame delay must be between 1 and {GIF_MAX_UINT16}, got {delay}")

    if not 0 <= loop <= GIF_MAX_UINT16:
        raise EncodingError(f"Loop count must be between 0 and {GIF_MAX_UINT16}, got {loop}")

    screen_size = frames[0].size
    for index, frame in enumerate(frames):
        validate_frame(frame, index)
        if frame.size != screen_size:
            raise EncodingError(
                f"{frame.source or f'frame {index}'} is {frame.width}x{frame.height}, "
                f"expected {screen_size[0]}x{screen_size[1]}",
                context={"index": index},
            )

    delays = tuple(delay for _ in frames)
    return Animation(frames=tuple(frames), delays=delays, loop=loop)


def _encode_frame(frame: QuantizedFrame, delay: int) -> list[bytes]:
    """Graphic control extension, image descriptor, local palette and image data."""
    return GifImagePlugin.getdata(
        frame.image.copy(),
        duration=delay * MS_PER_HUNDREDTH,
        include_color_table=True,
    )


def serialize(animation: Animation) -> bytes:
    """Encode an Animation as a GIF89a byte stream.

    Raises:
        EncodingError: If the animation is empty or Pillow cannot encode it
    """
    if not animation.frames:
        raise EncodingError("No frames to encode")

    buffer = BytesIO()

    with error_context("encode animated GIF", EncodingError, logger=logger):
        # getheader normalizes the palette of the image it is given in place
        header, _ = GifImagePlugin.getheader(
            animation.frames[0].image.copy(), info={"loop": animation.loop}
        )
        buffer.write(b"".join(header))
        for frame, delay in zip(animation.frames, animation.delays):
            buffer.write(b"".join(_encode_frame(frame, delay)))
        buffer.write(GIF_TRAILER)

    data = buffer.getvalue()
    logger.debug(
        f"Encoded {animation.frame_count} frames ({animation.size[0]}x{animation.size[1]}) "
        f"into {len(data)} bytes"
    )
    return data


def write_animation(animation: Animation, destination: Path) -> int:
    """Serialize an Animation and write it atomically to ``destination``.

    Returns:
        Number of bytes written

    Raises:
        EncodingError: If encoding fails or the destination cannot be written;
            the destination is left untouched in either case
    """
    data = serialize(animation)

    try:
        with atomic_write(destination, mode="wb") as f:
            f.write(data)
    except OSError as e:
        raise EncodingError(
            f"Cannot write animation to {destination}",
            cause=e,
            context={"destination": str(destination)},
        ) from e

    logger.info(f"💾 Wrote {destination} ({len(data)} bytes)")
    return len(data)
