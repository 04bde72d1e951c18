"""Source discovery and decoding.

Sources are matched with a glob pattern and sorted lexicographically; the
sort order is the playback order of the animation, which for grabbed video
frames follows the timestamps embedded in their filenames.
"""

from __future__ import annotations

import glob
import logging
from pathlib import Path

from PIL import Image

from .error_handling import ConfigurationError, DecodeError

logger = logging.getLogger(__name__)


def discover_sources(pattern: str) -> list[Path]:
    """Expand a glob pattern into a sorted list of image files.

    Args:
        pattern: Glob pattern such as ``frames/*.jpg``; ``**`` matches
            across directories

    Returns:
        Matching files sorted lexicographically by path

    Raises:
        ConfigurationError: If the pattern is empty or matches no files
    """
    if not pattern or not pattern.strip():
        raise ConfigurationError("Source pattern must not be empty")

    matches = sorted(
        path for path in glob.glob(pattern, recursive=True) if Path(path).is_file()
    )
    if not matches:
        raise ConfigurationError(
            f"No source images found via pattern {pattern}",
            context={"pattern": pattern},
        )

    logger.debug(f"Found {len(matches)} images to parse")
    return [Path(path) for path in matches]


def decode_image(path: Path) -> Image.Image:
    """Decode an image file into a fully loaded RGB Pillow image.

    Raises:
        DecodeError: If the file is missing, unreadable or not an image
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGB")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(
            f"Error reading {path}", cause=e, context={"source": str(path)}
        ) from e
