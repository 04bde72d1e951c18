"""Tests for anigiffy.sources module."""

import pytest
from PIL import Image

from anigiffy.error_handling import ConfigurationError, DecodeError
from anigiffy.sources import decode_image, discover_sources
from tests.fixtures.images import write_corrupt_source


class TestDiscoverSources:
    """Tests for discover_sources function."""

    def test_sorted_lexicographically(self, tmp_path):
        """Test matches come back in filename order, not creation order."""
        for name in ["20240101_120005.jpg", "20240101_120001.jpg", "20240101_120003.jpg"]:
            Image.new("RGB", (4, 4)).save(tmp_path / name)

        sources = discover_sources(str(tmp_path / "*.jpg"))

        assert [p.name for p in sources] == [
            "20240101_120001.jpg",
            "20240101_120003.jpg",
            "20240101_120005.jpg",
        ]

    def test_only_matching_files(self, tmp_path):
        """Test files outside the pattern and directories are ignored."""
        Image.new("RGB", (4, 4)).save(tmp_path / "a.jpg")
        Image.new("RGB", (4, 4)).save(tmp_path / "b.png")
        (tmp_path / "dir.jpg").mkdir()

        sources = discover_sources(str(tmp_path / "*.jpg"))
        assert [p.name for p in sources] == ["a.jpg"]

    def test_recursive_pattern(self, tmp_path):
        """Test ** matches across subdirectories."""
        (tmp_path / "day1").mkdir()
        (tmp_path / "day2").mkdir()
        Image.new("RGB", (4, 4)).save(tmp_path / "day1" / "x.png")
        Image.new("RGB", (4, 4)).save(tmp_path / "day2" / "x.png")

        sources = discover_sources(str(tmp_path / "**" / "*.png"))
        assert [p.parent.name for p in sources] == ["day1", "day2"]

    def test_no_matches(self, tmp_path):
        """Test an unmatched pattern is a configuration error."""
        with pytest.raises(ConfigurationError, match="No source images found"):
            discover_sources(str(tmp_path / "*.jpg"))

    @pytest.mark.parametrize("pattern", ["", "   "])
    def test_empty_pattern(self, pattern):
        """Test an empty pattern is rejected."""
        with pytest.raises(ConfigurationError, match="must not be empty"):
            discover_sources(pattern)


class TestDecodeImage:
    """Tests for decode_image function."""

    @pytest.mark.parametrize("suffix", [".png", ".jpg", ".gif", ".bmp"])
    def test_decodes_common_formats(self, tmp_path, suffix):
        """Test any Pillow-readable format decodes to RGB."""
        path = tmp_path / f"frame{suffix}"
        Image.new("RGB", (12, 9), (10, 120, 200)).save(path)

        image = decode_image(path)

        assert image.mode == "RGB"
        assert image.size == (12, 9)

    def test_alpha_source_converted(self, tmp_path):
        """Test sources with an alpha channel are converted to RGB."""
        path = tmp_path / "alpha.png"
        Image.new("RGBA", (5, 5), (1, 2, 3, 128)).save(path)
        assert decode_image(path).mode == "RGB"

    def test_corrupt_file(self, tmp_path):
        """Test garbage contents raise DecodeError naming the file."""
        path = write_corrupt_source(tmp_path / "broken.jpg")

        with pytest.raises(DecodeError, match="broken.jpg") as exc_info:
            decode_image(path)
        assert exc_info.value.cause is not None

    def test_missing_file(self, tmp_path):
        """Test a vanished file raises DecodeError."""
        with pytest.raises(DecodeError):
            decode_image(tmp_path / "gone.png")

    def test_truncated_file(self, tmp_path):
        """Test a truncated image raises DecodeError."""
        path = tmp_path / "truncated.png"
        Image.new("RGB", (64, 64), (50, 60, 70)).save(path)
        path.write_bytes(path.read_bytes()[:40])

        with pytest.raises(DecodeError):
            decode_image(path)
