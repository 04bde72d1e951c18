"""Build an animated GIF from a set of still images."""

from pathlib import Path

import click
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from ..config import (
    DEFAULT_DELAY,
    DEFAULT_DESTINATION,
    DEFAULT_LOOP,
    DEFAULT_SCALE,
    DEFAULT_SOURCE_PATTERN,
    FULL_EXTENT,
    AnimationConfig,
)
from ..error_handling import ConfigurationError
from ..io import setup_logging
from ..pipeline import build_animation
from .utils import (
    display_build_summary,
    display_common_header,
    display_path_info,
    handle_configuration_error,
    handle_generic_error,
    handle_keyboard_interrupt,
)


@click.command()
@click.option(
    "--src",
    "source_pattern",
    default=DEFAULT_SOURCE_PATTERN,
    show_default=True,
    help="Glob pattern for source images; matches are sorted by name",
)
@click.option(
    "--dest",
    "destination",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_DESTINATION,
    show_default=True,
    help="Destination filename for the animated GIF",
)
@click.option("--crop-left", type=int, default=0, show_default=True, help="Left coordinate where the crop starts")
@click.option("--crop-top", type=int, default=0, show_default=True, help="Top coordinate where the crop starts")
@click.option(
    "--crop-width",
    type=int,
    default=FULL_EXTENT,
    show_default=True,
    help="Width of the cropped image, -1 runs to the right edge",
)
@click.option(
    "--crop-height",
    type=int,
    default=FULL_EXTENT,
    show_default=True,
    help="Height of the cropped image, -1 runs to the bottom edge",
)
@click.option("--scale", type=float, default=DEFAULT_SCALE, show_default=True, help="Scaling factor (Lanczos)")
@click.option(
    "--rotate",
    type=int,
    default=0,
    show_default=True,
    help="Counter-clockwise rotation: 0, 90, 180 or 270",
)
@click.option(
    "--flip",
    default="none",
    show_default=True,
    help="Mirror after rotating: none, horizontal or vertical",
)
@click.option(
    "--delay",
    type=int,
    default=DEFAULT_DELAY,
    show_default=True,
    help="Delay between frames in hundredths of a second (3 is about 33 fps)",
)
@click.option("--loop", type=int, default=DEFAULT_LOOP, show_default=True, help="Loop count, 0 loops forever")
@click.option(
    "--workers",
    "-j",
    type=int,
    default=0,
    help="Number of worker threads (default: 0 = CPU count)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show in-process messages")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write log messages to this file",
)
def build(
    source_pattern: str,
    destination: Path,
    crop_left: int,
    crop_top: int,
    crop_width: int,
    crop_height: int,
    scale: float,
    rotate: int,
    flip: str,
    delay: int,
    loop: int,
    workers: int,
    verbose: bool,
    log_file: Path | None,
) -> None:
    """Convert alphabetically sorted images into an animated GIF.

    Each image is cropped, scaled, rotated and flipped, in that order,
    before being quantized with Floyd-Steinberg dithering. Images that
    cannot be read or transformed are skipped with a warning.
    """
    setup_logging("DEBUG" if verbose else "INFO", log_file)

    try:
        config = AnimationConfig.from_values(
            crop_left=crop_left,
            crop_top=crop_top,
            crop_width=crop_width,
            crop_height=crop_height,
            scale=scale,
            rotate=rotate,
            flip=flip,
            delay=delay,
            loop=loop,
            source_pattern=source_pattern,
            destination=destination,
            verbose=verbose,
            workers=workers,
        )
    except ConfigurationError as e:
        handle_configuration_error(e)

    display_common_header("anigiffy — building animated GIF")
    display_path_info("Sources", config.source_pattern, "🔎")
    display_path_info("Destination", config.destination, "💾")

    console = Console(stderr=True)
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            transient=True,
            disable=not console.is_terminal,
        ) as progress:
            task = progress.add_task("Processing frames", total=None)

            def on_progress(completed: int, total: int) -> None:
                progress.update(task, completed=completed, total=total)

            result = build_animation(config, progress_callback=on_progress)

    except KeyboardInterrupt:
        handle_keyboard_interrupt("Build")
    except Exception as e:
        handle_generic_error("Build", e)

    display_build_summary(result)
