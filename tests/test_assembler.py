"""Tests for anigiffy.assembler module."""

from io import BytesIO
from unittest.mock import patch

import pytest
from PIL import GifImagePlugin, Image, ImageSequence

from anigiffy.assembler import (
    Animation,
    assemble,
    serialize,
    validate_frame,
    write_animation,
)
from anigiffy.error_handling import EncodingError
from anigiffy.quantize import QuantizedFrame, quantize_frame
from tests.fixtures.images import SOLID_COLORS, assert_color_close


def solid_frames(colors=SOLID_COLORS, size=(40, 30)) -> list[QuantizedFrame]:
    return [
        quantize_frame(Image.new("RGB", size, color), source=f"frame_{i}.png")
        for i, color in enumerate(colors)
    ]


class TestAssemble:
    """Tests for assemble function."""

    def test_uniform_delays(self):
        """Test every frame gets the configured delay."""
        animation = assemble(solid_frames(), delay=7, loop=2)

        assert animation.frame_count == 3
        assert animation.delays == (7, 7, 7)
        assert animation.loop == 2
        assert animation.total_delay == 21
        assert animation.size == (40, 30)

    def test_preserves_order(self):
        """Test frames stay in the order given."""
        frames = solid_frames()
        animation = assemble(frames, delay=3)
        assert list(animation.frames) == frames

    def test_no_frames(self):
        """Test an empty frame list is rejected."""
        with pytest.raises(EncodingError, match="No frames"):
            assemble([], delay=3)

    @pytest.mark.parametrize("delay", [0, -1, 65536])
    def test_invalid_delay(self, delay):
        """Test delays outside the GIF range are rejected."""
        with pytest.raises(EncodingError, match="delay"):
            assemble(solid_frames(), delay=delay)

    @pytest.mark.parametrize("loop", [-1, 65536])
    def test_invalid_loop(self, loop):
        """Test loop counts outside the GIF range are rejected."""
        with pytest.raises(EncodingError, match="Loop count"):
            assemble(solid_frames(), delay=3, loop=loop)

    def test_mismatched_frame_size(self):
        """Test frames must share the first frame's dimensions."""
        frames = solid_frames() + solid_frames([(0, 0, 0)], size=(20, 20))
        with pytest.raises(EncodingError, match="expected 40x30"):
            assemble(frames, delay=3)


class TestValidateFrame:
    """Tests for validate_frame function."""

    def test_valid_frame(self):
        """Test a quantized frame passes validation."""
        validate_frame(solid_frames()[0], 0)

    def test_rejects_true_colour(self):
        """Test RGB frames are rejected."""
        frame = QuantizedFrame(Image.new("RGB", (10, 10)), source="rgb.png")
        with pytest.raises(EncodingError, match="not palette-indexed"):
            validate_frame(frame, 0)


class TestAnimation:
    """Tests for the Animation value type."""

    def test_delay_count_must_match(self):
        """Test frames and delays must have the same length."""
        with pytest.raises(EncodingError):
            Animation(frames=tuple(solid_frames()), delays=(3, 3))


class TestSerialize:
    """Tests for serialize function."""

    def test_gif89a_header(self):
        """Test output starts with the GIF89a signature."""
        data = serialize(assemble(solid_frames(), delay=3))
        assert data[:6] == b"GIF89a"
        assert data[-1:] == b"\x3b"

    def test_round_trip_metadata(self):
        """Test frame count, delay, loop and size survive decoding."""
        data = serialize(assemble(solid_frames(), delay=5, loop=0))

        with Image.open(BytesIO(data)) as img:
            assert img.format == "GIF"
            assert img.size == (40, 30)
            assert img.info["loop"] == 0
            frames = list(ImageSequence.Iterator(img))
            assert len(frames) == 3
            assert [f.info["duration"] for f in frames] == [50, 50, 50]

    def test_round_trip_colours(self):
        """Test each frame decodes to its source colour."""
        data = serialize(assemble(solid_frames(), delay=3))

        with Image.open(BytesIO(data)) as img:
            for frame, expected in zip(ImageSequence.Iterator(img), SOLID_COLORS):
                color = frame.convert("RGB").getpixel((20, 15))
                assert_color_close(color, expected)

    def test_loop_count_written(self):
        """Test a finite loop count lands in the NETSCAPE extension."""
        data = serialize(assemble(solid_frames(), delay=3, loop=3))

        assert b"NETSCAPE2.0" in data
        with Image.open(BytesIO(data)) as img:
            assert img.info["loop"] == 3

    def test_identical_consecutive_frames_kept(self):
        """Test repeated frames are written individually with their own delay."""
        colors = [SOLID_COLORS[0], SOLID_COLORS[0], SOLID_COLORS[2], SOLID_COLORS[2]]
        data = serialize(assemble(solid_frames(colors), delay=5))

        with Image.open(BytesIO(data)) as img:
            assert img.n_frames == 4
            frames = list(ImageSequence.Iterator(img))
            assert [f.info["duration"] for f in frames] == [50, 50, 50, 50]

    def test_single_frame(self):
        """Test a one-frame animation is still a valid looping GIF."""
        data = serialize(assemble(solid_frames(SOLID_COLORS[:1]), delay=9, loop=1))

        with Image.open(BytesIO(data)) as img:
            assert img.n_frames == 1
            assert img.info["duration"] == 90
            assert img.info["loop"] == 1
            assert_color_close(img.convert("RGB").getpixel((0, 0)), SOLID_COLORS[0])

    def test_gradient_frames_decode_exactly(self, gradient_image):
        """Test many-colour frames decode to their quantized pixels via local colour tables."""
        frames = [quantize_frame(gradient_image), quantize_frame(gradient_image.rotate(180))]
        data = serialize(assemble(frames, delay=3))

        with Image.open(BytesIO(data)) as img:
            for decoded, frame in zip(ImageSequence.Iterator(img), frames):
                assert decoded.convert("RGB").tobytes() == frame.image.convert("RGB").tobytes()

    def test_pillow_failure_becomes_encoding_error(self):
        """Test encoder failures are wrapped in EncodingError."""
        animation = assemble(solid_frames(), delay=3)
        with patch.object(GifImagePlugin, "getdata", side_effect=OSError("disk full")):
            with pytest.raises(EncodingError, match="disk full"):
                serialize(animation)


class TestWriteAnimation:
    """Tests for write_animation function."""

    def test_writes_file(self, tmp_path):
        """Test the GIF lands at the destination and the size is reported."""
        destination = tmp_path / "out" / "movie.gif"
        written = write_animation(assemble(solid_frames(), delay=3), destination)

        assert destination.exists()
        assert destination.stat().st_size == written
        assert not list(destination.parent.glob("*.tmp_*"))

    def test_encode_failure_leaves_destination_untouched(self, tmp_path):
        """Test a failed encode never truncates an existing file."""
        destination = tmp_path / "movie.gif"
        destination.write_bytes(b"previous contents")
        animation = assemble(solid_frames(), delay=3)

        with patch("anigiffy.assembler.serialize", side_effect=EncodingError("boom")):
            with pytest.raises(EncodingError):
                write_animation(animation, destination)

        assert destination.read_bytes() == b"previous contents"

    def test_write_failure(self, tmp_path):
        """Test an unwritable destination raises EncodingError."""
        animation = assemble(solid_frames(), delay=3)
        with patch("anigiffy.assembler.atomic_write", side_effect=PermissionError("denied")):
            with pytest.raises(EncodingError, match="Cannot write animation"):
                write_animation(animation, tmp_path / "movie.gif")
