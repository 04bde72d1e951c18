from pathlib import Path

import pytest
from PIL import Image

from tests.fixtures.images import make_gradient, write_solid_sources


@pytest.fixture
def gradient_image() -> Image.Image:
    """200x120 RGB gradient."""
    return make_gradient()


@pytest.fixture
def solid_sources(tmp_path: Path) -> list[Path]:
    """Three sorted 100x100 solid-colour PNGs (red, green, blue)."""
    return write_solid_sources(tmp_path / "frames")
