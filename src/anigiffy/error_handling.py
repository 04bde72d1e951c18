"""Standardized Error Handling Utilities

Provides the exception taxonomy used across anigiffy and the helpers that
turn foreign exceptions (Pillow, OS) into it with consistent logging.

Per-frame errors (``FrameError`` subclasses) are recoverable: the pipeline
logs them and drops the frame. ``ConfigurationError`` and ``EncodingError``
are fatal and propagate to the command line.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum


class ErrorLevel(Enum):
    """Error severity levels for consistent logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AnigiffyError(Exception):
    """Base exception class for all anigiffy errors."""

    def __init__(
        self, message: str, cause: Exception | None = None, context: dict | None = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.cause:
            return f"{base_msg} (caused by: {self.cause})"
        return base_msg


class ConfigurationError(AnigiffyError):
    """Raised when configuration is invalid or no sources were found."""

    pass


class EncodingError(AnigiffyError):
    """Raised when the animation cannot be assembled, serialized or written."""

    pass


class FrameError(AnigiffyError):
    """Base class for errors that only affect a single frame."""

    pass


class DecodeError(FrameError):
    """Raised when a source image cannot be read or decoded."""

    pass


class GeometryError(FrameError):
    """Raised when a crop, scale, rotate or flip cannot be applied."""

    pass


class QuantizationError(FrameError):
    """Raised when a frame cannot be reduced to an indexed palette."""

    pass


def handle_error(
    error: Exception,
    operation: str,
    error_type: type[AnigiffyError] = FrameError,
    level: ErrorLevel = ErrorLevel.ERROR,
    context: dict | None = None,
    logger: logging.Logger | None = None,
    reraise: bool = True,
) -> AnigiffyError | None:
    """Log an error and convert it into the anigiffy taxonomy.

    Args:
        error: Original exception that occurred
        operation: Description of operation that failed
        error_type: Type of AnigiffyError to raise
        level: Logging level for the error
        context: Additional context information
        logger: Logger to use (defaults to module logger)
        reraise: Whether to reraise the transformed exception

    Returns:
        The transformed error if reraise=False, otherwise None

    Raises:
        AnigiffyError: Transformed error if reraise=True
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    message = f"Failed to {operation}: {error}"

    error_context = dict(context or {})
    error_context.update(
        {
            "operation": operation,
            "original_error_type": type(error).__name__,
        }
    )

    transformed_error = error_type(message, cause=error, context=error_context)

    log_message = f"🚨 {operation.capitalize()} failed: {error}"
    context_str = ", ".join(
        f"{k}={v}" for k, v in error_context.items() if k != "operation"
    )
    if context_str:
        log_message += f" (context: {context_str})"

    log_func = getattr(logger, level.value)
    log_func(log_message)

    if level in [ErrorLevel.ERROR, ErrorLevel.CRITICAL]:
        logger.debug(f"Traceback for {operation}: {traceback.format_exc()}")

    if reraise:
        raise transformed_error from error
    return transformed_error


@contextmanager
def error_context(
    operation: str,
    error_type: type[AnigiffyError] = FrameError,
    level: ErrorLevel = ErrorLevel.DEBUG,
    context: dict | None = None,
    logger: logging.Logger | None = None,
) -> Iterator[None]:
    """Context manager for standardized error handling.

    Usage:
        with error_context("decode image", DecodeError, context={"source": path}):
            risky_operation()

    anigiffy errors raised inside the block pass through unchanged; anything
    else is converted into ``error_type``.
    """
    try:
        yield
    except AnigiffyError:
        raise
    except Exception as e:
        handle_error(e, operation, error_type, level, context, logger, reraise=True)


def log_warning_with_context(
    message: str, context: dict | None = None, logger: logging.Logger | None = None
) -> None:
    """Log a warning with standardized context formatting."""
    if logger is None:
        logger = logging.getLogger(__name__)

    warning_msg = f"⚠️  {message}"
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        warning_msg += f" (context: {context_str})"

    logger.warning(warning_msg)
