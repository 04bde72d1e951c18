"""Configuration settings for anigiffy."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .error_handling import ConfigurationError

# Defaults mirror the command-line tool's flags
DEFAULT_SOURCE_PATTERN = "*.jpg"
DEFAULT_DESTINATION = Path("movie.gif")
DEFAULT_SCALE = 1.0
DEFAULT_DELAY = 3  # hundredths of a second, ~33 fps
DEFAULT_LOOP = 0  # 0 = loop forever
FULL_EXTENT = -1  # command-line sentinel for "full width/height"

# GIF stores delays, loop counts and dimensions as unsigned 16-bit values
GIF_MAX_UINT16 = 0xFFFF


class Rotation(Enum):
    """Lossless rotations in degrees (counter-clockwise)."""

    NONE = 0
    CCW_90 = 90
    CCW_180 = 180
    CCW_270 = 270

    @classmethod
    def parse(cls, value: int | str | Rotation) -> Rotation:
        """Convert a raw degree value into a Rotation.

        Raises:
            ConfigurationError: If the value is not 0, 90, 180 or 270
        """
        if isinstance(value, Rotation):
            return value
        try:
            return cls(int(value))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"rotate must be one of 0, 90, 180 or 270, got {value!r}"
            ) from e


class FlipMode(Enum):
    """Mirror operations applied after rotation."""

    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @classmethod
    def parse(cls, value: str | FlipMode) -> FlipMode:
        """Convert a raw flip name into a FlipMode.

        Raises:
            ConfigurationError: If the value is not none, horizontal or vertical
        """
        if isinstance(value, FlipMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ConfigurationError(
                f"flip must be one of none, horizontal or vertical, got {value!r}"
            ) from e


@dataclass(frozen=True)
class CropRect:
    """Crop request in source-image pixel coordinates.

    ``width`` / ``height`` of ``None`` mean "up to the image edge"; they are
    resolved against the actual image size by ``geometry.resolve_crop_box``.
    """

    left: int = 0
    top: int = 0
    width: int | None = None
    height: int | None = None

    def __post_init__(self) -> None:
        if self.left < 0 or self.top < 0:
            raise ConfigurationError(
                f"Crop origin must be non-negative, got ({self.left}, {self.top})"
            )
        for name, value in (("width", self.width), ("height", self.height)):
            if value is not None and value <= 0:
                raise ConfigurationError(
                    f"Crop {name} must be positive or full extent, got {value}"
                )

    @classmethod
    def from_sentinels(
        cls, left: int = 0, top: int = 0, width: int = FULL_EXTENT, height: int = FULL_EXTENT
    ) -> CropRect:
        """Build a CropRect from command-line values where -1 means full extent."""
        return cls(
            left=left,
            top=top,
            width=None if width == FULL_EXTENT else width,
            height=None if height == FULL_EXTENT else height,
        )

    @property
    def is_full_frame(self) -> bool:
        """True when the rectangle selects the whole image."""
        return (
            self.left == 0 and self.top == 0 and self.width is None and self.height is None
        )


@dataclass(frozen=True)
class AnimationConfig:
    """Immutable settings for one animation build.

    Constructed once from validated input and passed explicitly to every
    stage of the pipeline.
    """

    crop: CropRect = field(default_factory=CropRect)
    scale: float = DEFAULT_SCALE
    rotate: Rotation = Rotation.NONE
    flip: FlipMode = FlipMode.NONE
    delay: int = DEFAULT_DELAY
    loop: int = DEFAULT_LOOP
    source_pattern: str = DEFAULT_SOURCE_PATTERN
    destination: Path = DEFAULT_DESTINATION
    verbose: bool = False
    workers: int = 0  # 0 = one worker per CPU

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.rotate, Rotation):
            raise ConfigurationError(f"rotate must be a Rotation, got {self.rotate!r}")
        if not isinstance(self.flip, FlipMode):
            raise ConfigurationError(f"flip must be a FlipMode, got {self.flip!r}")

        if not math.isfinite(self.scale) or self.scale <= 0:
            raise ConfigurationError(f"scale must be positive, got {self.scale}")

        if self.delay <= 0 or self.delay > GIF_MAX_UINT16:
            raise ConfigurationError(
                f"delay must be between 1 and {GIF_MAX_UINT16} hundredths of a second, got {self.delay}"
            )

        if self.loop < 0 or self.loop > GIF_MAX_UINT16:
            raise ConfigurationError(
                f"loop must be between 0 and {GIF_MAX_UINT16} (0 = infinite), got {self.loop}"
            )

        if not self.source_pattern or not self.source_pattern.strip():
            raise ConfigurationError("source pattern must not be empty")

        if self.workers < 0:
            raise ConfigurationError(f"workers must be non-negative, got {self.workers}")

    @classmethod
    def from_values(
        cls,
        crop_left: int = 0,
        crop_top: int = 0,
        crop_width: int = FULL_EXTENT,
        crop_height: int = FULL_EXTENT,
        scale: float = DEFAULT_SCALE,
        rotate: int | str = 0,
        flip: str = "none",
        delay: int = DEFAULT_DELAY,
        loop: int = DEFAULT_LOOP,
        source_pattern: str = DEFAULT_SOURCE_PATTERN,
        destination: Path | str = DEFAULT_DESTINATION,
        verbose: bool = False,
        workers: int = 0,
    ) -> AnimationConfig:
        """Build a config from raw command-line style values.

        Raises:
            ConfigurationError: If any value is out of range
        """
        return cls(
            crop=CropRect.from_sentinels(crop_left, crop_top, crop_width, crop_height),
            scale=float(scale),
            rotate=Rotation.parse(rotate),
            flip=FlipMode.parse(flip),
            delay=delay,
            loop=loop,
            source_pattern=source_pattern,
            destination=Path(destination),
            verbose=verbose,
            workers=workers,
        )


DEFAULT_ANIMATION_CONFIG = AnimationConfig()
