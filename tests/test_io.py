"""Tests for anigiffy.io module."""

import logging

import pytest

from anigiffy.io import LOG_FORMAT, atomic_write, setup_logging


class TestAtomicWrite:
    """Tests for atomic_write context manager."""

    def test_writes_target(self, tmp_path):
        target = tmp_path / "nested" / "movie.gif"
        with atomic_write(target) as f:
            f.write(b"GIF89a")

        assert target.read_bytes() == b"GIF89a"
        assert list(target.parent.iterdir()) == [target]

    def test_failure_keeps_previous_file(self, tmp_path):
        """Test an exception inside the block leaves the old contents and no temp file."""
        target = tmp_path / "movie.gif"
        target.write_bytes(b"old")

        with pytest.raises(RuntimeError):
            with atomic_write(target) as f:
                f.write(b"partial")
                raise RuntimeError("interrupted")

        assert target.read_bytes() == b"old"
        assert list(tmp_path.iterdir()) == [target]


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.fixture(autouse=True)
    def restore_root_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers[:]:
            if handler not in handlers:
                root.removeHandler(handler)
                handler.close()
        for handler in handlers:
            if handler not in root.handlers:
                root.addHandler(handler)
        root.setLevel(level)

    def test_level_and_format(self):
        logger = setup_logging("DEBUG")

        root = logging.getLogger()
        assert logger.name == "anigiffy"
        assert root.level == logging.DEBUG
        assert any(h.formatter and h.formatter._fmt == LOG_FORMAT for h in root.handlers)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        setup_logging("INFO", log_file)

        logging.getLogger("anigiffy.test").info("hello from the pipeline")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "hello from the pipeline" in log_file.read_text(encoding="utf-8")
