"""Palette quantization for GIF frames.

A frame is reduced in two explicit steps:

1. Palette selection: median cut over the frame's own colours picks at most
   ``MAX_PALETTE_SIZE`` entries.
2. Dithering: the true-colour frame is mapped onto that palette with
   Floyd-Steinberg error diffusion, which keeps gradients from banding.

Pillow ignores ``dither`` when it builds the palette itself, so the palette
is computed first and then applied with ``quantize(palette=...)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image

from .error_handling import QuantizationError, error_context

logger = logging.getLogger(__name__)

MAX_PALETTE_SIZE = 256
MIN_PALETTE_SIZE = 2


@dataclass(frozen=True)
class QuantizedFrame:
    """A palette-indexed frame ready for assembly."""

    image: Image.Image
    source: str | None = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    @property
    def palette_size(self) -> int:
        """Number of RGB entries in the frame's palette."""
        palette = self.image.getpalette()
        return len(palette) // 3 if palette else 0


def select_palette(image: Image.Image, colors: int = MAX_PALETTE_SIZE) -> Image.Image:
    """Pick an adaptive palette for ``image`` with median cut.

    Returns:
        A mode ``P`` image whose palette holds at most ``colors`` entries
    """
    return image.quantize(colors=colors, method=Image.Quantize.MEDIANCUT)


def quantize_frame(
    image: Image.Image, source: str | None = None, colors: int = MAX_PALETTE_SIZE
) -> QuantizedFrame:
    """Reduce a true-colour image to a dithered, palette-indexed frame.

    Args:
        image: Transformed frame in any Pillow mode
        source: Identifier of the source the frame came from (for logging)
        colors: Palette size limit (2-256)

    Returns:
        QuantizedFrame holding a mode ``P`` image

    Raises:
        QuantizationError: If the palette size is out of range or Pillow fails
    """
    if not MIN_PALETTE_SIZE <= colors <= MAX_PALETTE_SIZE:
        raise QuantizationError(
            f"Palette size must be between {MIN_PALETTE_SIZE} and {MAX_PALETTE_SIZE}, got {colors}"
        )

    with error_context(
        "quantize frame", QuantizationError, context={"source": source}, logger=logger
    ):
        rgb = image if image.mode == "RGB" else image.convert("RGB")
        palette_image = select_palette(rgb, colors)
        indexed = rgb.quantize(palette=palette_image, dither=Image.Dither.FLOYDSTEINBERG)

    frame = QuantizedFrame(image=indexed, source=source)
    logger.debug(
        f"Quantized {source or 'frame'} to {frame.palette_size} palette entries"
    )
    return frame
