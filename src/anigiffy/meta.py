"""Metadata extraction for animated GIF files."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from PIL import Image, ImageSequence

# Safety limit against corrupted files that never report EOF
MAX_FRAMES = 100_000


@dataclass
class AnimationInfo:
    """Metadata read back from a GIF file."""

    path: Path
    width: int
    height: int
    frame_count: int
    file_size: int
    delays: list[int] = field(default_factory=list)  # hundredths of a second
    loop: int | None = None  # None = no loop extension, plays once
    color_counts: list[int] = field(default_factory=list)  # distinct colours per frame
    dominant_colors: list[tuple[int, int, int]] = field(default_factory=list)

    @property
    def loops_forever(self) -> bool:
        return self.loop == 0

    @property
    def total_delay(self) -> int:
        return sum(self.delays)


def _count_colors(image: Image.Image) -> Counter:
    rgb_image = image if image.mode == "RGB" else image.convert("RGB")
    pixels = np.asarray(rgb_image).reshape(-1, 3)
    if pixels.size == 0:
        raise ValueError("Image has no pixels")
    return Counter(map(tuple, pixels.tolist()))


def dominant_color(image: Image.Image) -> tuple[int, int, int]:
    """Return the most frequent RGB colour of an image.

    Raises:
        ValueError: If the image has no pixels
    """
    color, _ = _count_colors(image).most_common(1)[0]
    return color


def extract_animation_info(file_path: Path) -> AnimationInfo:
    """Read frame count, timing, loop count and colours from a GIF.

    Delays are reported in hundredths of a second, the unit stored in the
    GIF graphic control extension.

    Raises:
        OSError: If the file is missing or cannot be read
        ValueError: If the file is not a GIF
    """
    if not file_path.exists():
        raise OSError(f"File not found: {file_path}")

    with Image.open(file_path) as img:
        if img.format != "GIF":
            raise ValueError(f"File is not a GIF: {file_path}")

        width, height = img.size
        loop = img.info.get("loop")
        delays: list[int] = []
        color_counts: list[int] = []
        colors: list[tuple[int, int, int]] = []

        for index, frame in enumerate(ImageSequence.Iterator(img)):
            if index >= MAX_FRAMES:
                raise ValueError(
                    f"GIF appears to have excessive frames (>{MAX_FRAMES}), possibly corrupted"
                )
            delays.append(int(frame.info.get("duration", 0)) // 10)
            counts = _count_colors(frame)
            color_counts.append(len(counts))
            colors.append(counts.most_common(1)[0][0])

    return AnimationInfo(
        path=file_path,
        width=width,
        height=height,
        frame_count=len(delays),
        file_size=file_path.stat().st_size,
        delays=delays,
        loop=loop,
        color_counts=color_counts,
        dominant_colors=colors,
    )
