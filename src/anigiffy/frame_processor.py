"""Per-frame processing: geometry chain followed by palette quantization.

The geometry operations always run in the same order:

    crop -> scale -> rotate -> flip

Cropping first keeps the requested coordinates in source-image space,
scaling before rotating means the rotation works on the resized pixel
count, and flipping last keeps the result deterministic.
"""

from __future__ import annotations

import logging

from PIL import Image

from . import geometry
from .config import AnimationConfig
from .quantize import MAX_PALETTE_SIZE, QuantizedFrame, quantize_frame

logger = logging.getLogger(__name__)


def apply_geometry(config: AnimationConfig, image: Image.Image) -> Image.Image:
    """Apply crop, scale, rotate and flip from ``config`` to ``image``.

    Raises:
        GeometryError: If any stage cannot be applied to this image
    """
    image = geometry.crop(config.crop, image)
    image = geometry.scale(config.scale, image)
    image = geometry.rotate(config.rotate, image)
    image = geometry.flip(config.flip, image)
    return image


def process_image(
    config: AnimationConfig,
    image: Image.Image,
    source: str | None = None,
    colors: int = MAX_PALETTE_SIZE,
) -> QuantizedFrame:
    """Turn one decoded image into a quantized animation frame.

    Args:
        config: Animation settings
        image: Decoded true-colour image
        source: Identifier of the source (used in logs and errors)
        colors: Palette size limit

    Returns:
        QuantizedFrame for the transformed image

    Raises:
        GeometryError: If the geometry chain fails
        QuantizationError: If palette reduction fails
    """
    transformed = apply_geometry(config, image)
    return quantize_frame(transformed, source=source, colors=colors)
