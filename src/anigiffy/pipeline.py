"""Pipeline driver: sources in, animated GIF out.

Every source is decoded, transformed and quantized independently. Results
land in an ordered slot array indexed by source position, so frames are
assembled in source order no matter which worker finishes first. A source
that fails to decode, transform or quantize is logged and skipped; the run
only fails when no frame survives or the animation cannot be written.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

from .assembler import assemble, write_animation
from .config import AnimationConfig
from .error_handling import (
    ConfigurationError,
    DecodeError,
    EncodingError,
    FrameError,
    error_context,
    log_warning_with_context,
)
from .frame_processor import process_image
from .quantize import QuantizedFrame
from .sources import decode_image, discover_sources

logger = logging.getLogger(__name__)

WORKERS_ENV_VAR = "ANIGIFFY_MAX_WORKERS"

Decoder = Callable[[Path], Image.Image]
ProgressCallback = Callable[[int, int], None]


@dataclass
class SkippedSource:
    """A source that did not make it into the animation."""

    index: int
    source: Path
    reason: str


@dataclass
class PipelineResult:
    """Summary of one pipeline run."""

    destination: Path
    sources_total: int
    frames_encoded: int
    bytes_written: int
    skipped: list[SkippedSource] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def resolve_worker_count(requested: int = 0, task_count: int | None = None) -> int:
    """Work out how many worker threads to use.

    ``requested`` of 0 falls back to ``ANIGIFFY_MAX_WORKERS`` and then to the
    CPU count. The result is bounded to ``[1, 2 * cpu_count]`` and never
    exceeds ``task_count``.
    """
    cpu_count = os.cpu_count() or 1
    workers = requested

    if workers <= 0:
        env_workers = os.environ.get(WORKERS_ENV_VAR)
        if env_workers:
            try:
                workers = int(env_workers)
            except ValueError:
                logger.warning(f"Invalid {WORKERS_ENV_VAR}: {env_workers}")
                workers = cpu_count
        else:
            workers = cpu_count

    workers = max(1, min(workers, cpu_count * 2))
    if task_count is not None:
        workers = max(1, min(workers, task_count))
    return workers


def process_source(
    config: AnimationConfig, source: Path, decoder: Decoder = decode_image
) -> QuantizedFrame:
    """Decode one source and turn it into a quantized frame.

    Raises:
        DecodeError: If the decoder fails for any reason
        GeometryError: If the geometry chain fails
        QuantizationError: If palette reduction fails
    """
    with error_context("decode image", DecodeError, context={"source": str(source)}):
        image = decoder(source)
    return process_image(config, image, source=str(source))


def _fill_slot(
    config: AnimationConfig, index: int, source: Path, decoder: Decoder
) -> tuple[QuantizedFrame | None, SkippedSource | None]:
    try:
        return process_source(config, source, decoder), None
    except FrameError as e:
        return None, SkippedSource(index=index, source=source, reason=str(e))


def process_sources(
    config: AnimationConfig,
    sources: Sequence[Path],
    decoder: Decoder = decode_image,
    workers: int = 1,
    progress_callback: ProgressCallback | None = None,
) -> tuple[list[QuantizedFrame], list[SkippedSource]]:
    """Process all sources and return surviving frames in source order.

    Args:
        config: Animation settings
        sources: Sorted source paths
        decoder: Callable turning a path into a decoded image
        workers: Number of worker threads (1 = run inline)
        progress_callback: Optional callback receiving (completed, total)

    Returns:
        Tuple of (frames in source order, skipped sources in source order)
    """
    total = len(sources)
    slots: list[QuantizedFrame | None] = [None] * total
    skipped: list[SkippedSource] = []

    completed = 0

    def record(index: int, frame: QuantizedFrame | None, skip: SkippedSource | None) -> None:
        nonlocal completed
        completed += 1
        if frame is not None:
            slots[index] = frame
        elif skip is not None:
            skipped.append(skip)
            log_warning_with_context(
                f"Skipping file {skip.source}: {skip.reason}",
                context={"index": index},
                logger=logger,
            )
        if progress_callback:
            progress_callback(completed, total)

    if workers <= 1:
        for index, source in enumerate(sources):
            logger.debug(f"Parsing image {index + 1} of {total} : {source}")
            frame, skip = _fill_slot(config, index, source, decoder)
            record(index, frame, skip)
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(_fill_slot, config, index, source, decoder): index
                for index, source in enumerate(sources)
            }
            for future in as_completed(future_to_index):
                index = future_to_index[future]
                frame, skip = future.result()
                logger.debug(f"Parsed image {index + 1} of {total} : {sources[index]}")
                record(index, frame, skip)

    skipped.sort(key=lambda skip: skip.index)
    frames = _drop_mismatched_frames(
        [(index, frame) for index, frame in enumerate(slots) if frame is not None],
        sources,
        skipped,
    )
    return frames, skipped


def _drop_mismatched_frames(
    indexed_frames: list[tuple[int, QuantizedFrame]],
    sources: Sequence[Path],
    skipped: list[SkippedSource],
) -> list[QuantizedFrame]:
    """Keep only frames matching the size of the first surviving frame.

    GIF frames share one logical screen, so a source whose transformed size
    differs from the first frame is skipped like any other bad frame.
    """
    if not indexed_frames:
        return []

    screen_size = indexed_frames[0][1].size
    frames = []
    for index, frame in indexed_frames:
        if frame.size == screen_size:
            frames.append(frame)
            continue
        reason = (
            f"frame size {frame.width}x{frame.height} does not match "
            f"{screen_size[0]}x{screen_size[1]}"
        )
        skipped.append(SkippedSource(index=index, source=sources[index], reason=reason))
        log_warning_with_context(
            f"Skipping file {sources[index]}: {reason}",
            context={"index": index},
            logger=logger,
        )

    skipped.sort(key=lambda skip: skip.index)
    return frames


def run_pipeline(
    config: AnimationConfig,
    sources: Sequence[Path],
    decoder: Decoder = decode_image,
    progress_callback: ProgressCallback | None = None,
) -> PipelineResult:
    """Build the animation for ``sources`` and write it to ``config.destination``.

    Args:
        config: Animation settings
        sources: Source paths, already sorted into playback order
        decoder: Callable turning a path into a decoded image
        progress_callback: Optional callback receiving (completed, total)

    Returns:
        PipelineResult with frame and skip counts

    Raises:
        ConfigurationError: If there are no sources
        EncodingError: If no frame survived or the GIF cannot be written
    """
    if not sources:
        raise ConfigurationError("No source images to process")

    start_time = time.time()
    workers = resolve_worker_count(config.workers, len(sources))
    logger.info(f"🎞️  Processing {len(sources)} images with {workers} worker(s)")

    frames, skipped = process_sources(
        config, sources, decoder, workers=workers, progress_callback=progress_callback
    )

    if not frames:
        raise EncodingError(
            f"None of the {len(sources)} source images could be processed, "
            f"not creating {config.destination}",
            context={"destination": str(config.destination)},
        )

    logger.debug(
        f"Parsed all images.. now attempting to create animated GIF {config.destination}"
    )
    animation = assemble(frames, config.delay, config.loop)
    bytes_written = write_animation(animation, config.destination)

    return PipelineResult(
        destination=config.destination,
        sources_total=len(sources),
        frames_encoded=animation.frame_count,
        bytes_written=bytes_written,
        skipped=skipped,
        elapsed_seconds=time.time() - start_time,
    )


def build_animation(
    config: AnimationConfig,
    decoder: Decoder = decode_image,
    progress_callback: ProgressCallback | None = None,
) -> PipelineResult:
    """Discover sources from ``config.source_pattern`` and run the pipeline.

    Raises:
        ConfigurationError: If the pattern matches no files
        EncodingError: If no frame survived or the GIF cannot be written
    """
    sources = discover_sources(config.source_pattern)
    return run_pipeline(config, sources, decoder, progress_callback)
