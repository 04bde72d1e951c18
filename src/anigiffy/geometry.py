"""Geometric frame operations: crop, scale, rotate and flip.

Every function takes a Pillow image and returns an image without touching
its input. The no-op settings (full-frame crop, scale 1.0, rotation 0,
flip none) return the input image itself.

Scaling uses the Lanczos filter to keep video frames sharp; rotation and
flipping are exact pixel rearrangements via ``Image.transpose`` so no
interpolation is involved.
"""

from __future__ import annotations

import logging
import math

from PIL import Image

from .config import CropRect, FlipMode, Rotation
from .error_handling import GeometryError

logger = logging.getLogger(__name__)

_ROTATIONS = {
    Rotation.CCW_90: Image.Transpose.ROTATE_90,
    Rotation.CCW_180: Image.Transpose.ROTATE_180,
    Rotation.CCW_270: Image.Transpose.ROTATE_270,
}

_FLIPS = {
    FlipMode.HORIZONTAL: Image.Transpose.FLIP_LEFT_RIGHT,
    FlipMode.VERTICAL: Image.Transpose.FLIP_TOP_BOTTOM,
}


def resolve_crop_box(rect: CropRect, size: tuple[int, int]) -> tuple[int, int, int, int]:
    """Resolve a crop request against an image size.

    Args:
        rect: Requested crop rectangle; ``None`` extents run to the image edge
        size: Image (width, height)

    Returns:
        Pillow box ``(left, top, right, bottom)`` with exclusive right/bottom,
        i.e. covering pixels ``[left, right-1] x [top, bottom-1]``

    Raises:
        GeometryError: If the rectangle does not fit inside the image
    """
    img_width, img_height = size
    width = rect.width if rect.width is not None else img_width - rect.left
    height = rect.height if rect.height is not None else img_height - rect.top

    right = rect.left + width
    bottom = rect.top + height

    if rect.left < 0 or rect.top < 0 or width <= 0 or height <= 0:
        raise GeometryError(
            f"Crop rectangle ({rect.left},{rect.top}) {width}x{height} is empty "
            f"for a {img_width}x{img_height} image",
            context={"rect": rect, "size": size},
        )
    if right > img_width or bottom > img_height:
        raise GeometryError(
            f"Crop rectangle ({rect.left},{rect.top})->({right - 1},{bottom - 1}) "
            f"falls outside the {img_width}x{img_height} image",
            context={"rect": rect, "size": size},
        )

    return rect.left, rect.top, right, bottom


def crop(rect: CropRect, image: Image.Image) -> Image.Image:
    """Crop an image; a full-frame rectangle leaves it untouched."""
    if rect.is_full_frame:
        return image

    left, top, right, bottom = resolve_crop_box(rect, image.size)
    logger.debug(
        f"Cropping original image at ({left},{top})->({right - 1},{bottom - 1})"
    )
    return image.crop((left, top, right, bottom))


def scale(factor: float, image: Image.Image) -> Image.Image:
    """Resize an image by ``factor`` using Lanczos resampling.

    The target size is ``floor(width * factor) x floor(height * factor)``.

    Raises:
        GeometryError: If the factor is not positive or the target is empty
    """
    if factor == 1.0:
        return image

    if not math.isfinite(factor) or factor <= 0:
        raise GeometryError(f"Scale factor must be positive, got {factor}")

    new_width = math.floor(image.width * factor)
    new_height = math.floor(image.height * factor)
    if new_width <= 0 or new_height <= 0:
        raise GeometryError(
            f"Scaling {image.width}x{image.height} by {factor} gives an empty "
            f"{new_width}x{new_height} image",
            context={"factor": factor, "size": image.size},
        )

    logger.debug(
        f"Scaling image from ({image.width}, {image.height}) -> ({new_width}, {new_height})"
    )
    return image.resize((new_width, new_height), Image.Resampling.LANCZOS)


def rotate(rotation: Rotation, image: Image.Image) -> Image.Image:
    """Rotate an image counter-clockwise by a multiple of 90 degrees.

    Raises:
        GeometryError: If ``rotation`` is not a supported Rotation
    """
    if rotation is Rotation.NONE:
        return image

    try:
        method = _ROTATIONS[rotation]
    except KeyError:
        raise GeometryError(f"Unsupported rotation: {rotation!r}") from None

    logger.debug(f"Rotating by {rotation.value}")
    return image.transpose(method)


def flip(mode: FlipMode, image: Image.Image) -> Image.Image:
    """Mirror an image horizontally (columns) or vertically (rows).

    Raises:
        GeometryError: If ``mode`` is not a supported FlipMode
    """
    if mode is FlipMode.NONE:
        return image

    try:
        method = _FLIPS[mode]
    except KeyError:
        raise GeometryError(f"Unsupported flip mode: {mode!r}") from None

    logger.debug(f"Flipping {mode.value}")
    return image.transpose(method)
