"""I/O utilities for atomic writes and logging setup."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_level: str = "INFO", log_file: Path | None = None
) -> logging.Logger:
    """Set up logging configuration for anigiffy.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file that receives a copy of every record

    Returns:
        Configured logger instance
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    return logging.getLogger("anigiffy")


@contextmanager
def atomic_write(target_path: Path, mode: str = "wb") -> Iterator[IO]:
    """Context manager for atomic file writes using temporary files.

    The data goes to a temporary file next to ``target_path`` and is moved
    into place only when the block finishes without error, so a failed
    write never leaves a partial file behind.

    Args:
        target_path: Final path where file should be written
        mode: File open mode

    Yields:
        File handle for writing

    Example:
        with atomic_write(Path("movie.gif")) as f:
            f.write(data)
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    # Temporary file in the same directory so the final rename stays atomic
    temp_file = tempfile.NamedTemporaryFile(
        mode=mode,
        dir=target_path.parent,
        delete=False,
        suffix=f".tmp_{target_path.name}",
    )
    try:
        with temp_file:
            yield temp_file
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_file.name, target_path)
    except BaseException:
        Path(temp_file.name).unlink(missing_ok=True)
        raise
