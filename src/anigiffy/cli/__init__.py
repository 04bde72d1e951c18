"""CLI module for anigiffy commands."""

import click

from .. import __version__
from .build_cmd import build
from .inspect_cmd import inspect


@click.group(context_settings={"auto_envvar_prefix": "ANIGIFFY"})
@click.version_option(version=__version__, prog_name="anigiffy")
def main() -> None:
    """🎞️ anigiffy — turn grabbed video frames into animated GIFs."""
    pass


main.add_command(build)
main.add_command(inspect)

__all__ = [
    "build",
    "inspect",
    "main",
]
