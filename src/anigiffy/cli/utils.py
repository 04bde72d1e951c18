"""Shared utilities for CLI commands."""

import sys
from pathlib import Path
from typing import NoReturn

import click

from ..pipeline import PipelineResult


def handle_generic_error(command_name: str, error: Exception) -> NoReturn:
    """Handle generic command errors with consistent formatting."""
    click.echo(f"❌ {command_name} failed: {error}", err=True)
    sys.exit(1)


def handle_keyboard_interrupt(command_name: str) -> NoReturn:
    """Handle keyboard interrupt with consistent formatting."""
    click.echo(f"\n⏹️  {command_name} interrupted by user", err=True)
    sys.exit(1)


def handle_configuration_error(error: Exception) -> NoReturn:
    """Report an invalid option combination and exit."""
    click.echo(f"❌ Invalid configuration: {error}", err=True)
    click.echo("💡 Use 'anigiffy build --help' for valid values", err=True)
    sys.exit(1)


def display_common_header(title: str) -> None:
    """Display a common header for CLI commands."""
    click.echo(f"🎞️  {title}")


def display_path_info(label: str, path: Path | str, emoji: str = "📁") -> None:
    """Display path information with consistent formatting."""
    click.echo(f"{emoji} {label}: {path}")


def display_build_summary(result: PipelineResult) -> None:
    """Display the outcome of a build run."""
    click.echo("\n📊 Results:")
    click.echo(f"   • Sources: {result.sources_total}")
    click.echo(f"   • Frames encoded: {result.frames_encoded}")
    click.echo(f"   • Skipped: {result.skipped_count}")
    for skip in result.skipped:
        click.echo(f"     - {skip.source}: {skip.reason}")
    click.echo(f"   • Size: {result.bytes_written / 1024:.1f} KB")
    click.echo(f"   • Time: {result.elapsed_seconds:.2f}s")
    click.echo(f"\n✅ Animated GIF saved to: {result.destination}")
