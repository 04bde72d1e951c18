"""Inspect an animated GIF produced by the build command."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ..meta import extract_animation_info
from .utils import handle_generic_error


@click.command()
@click.argument(
    "gif_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def inspect(gif_path: Path) -> None:
    """Show frame count, timing, loop count and colours of GIF_PATH."""
    try:
        info = extract_animation_info(gif_path)
    except Exception as e:
        handle_generic_error("Inspect", e)

    console = Console()
    loop = "forever" if info.loops_forever else ("once" if info.loop is None else str(info.loop))

    console.print(f"🎞️  {info.path}")
    console.print(f"   Size: {info.width}x{info.height}")
    console.print(f"   File size: {info.file_size / 1024:.1f} KB")
    console.print(f"   Frames: {info.frame_count}")
    console.print(f"   Loop: {loop}")
    console.print(f"   Total delay: {info.total_delay / 100:.2f}s")

    table = Table(title="Frames")
    table.add_column("#", justify="right")
    table.add_column("Delay (1/100s)", justify="right")
    table.add_column("Colours", justify="right")
    table.add_column("Dominant colour")

    for index, (delay, colors, dominant) in enumerate(
        zip(info.delays, info.color_counts, info.dominant_colors)
    ):
        table.add_row(str(index), str(delay), str(colors), "#{:02x}{:02x}{:02x}".format(*dominant))

    console.print(table)
