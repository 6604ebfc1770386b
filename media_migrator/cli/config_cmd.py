"""CLI command handler for writing a default configuration file."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from media_migrator.cli.common import cli
from media_migrator.core.config import create_default_config


@cli.command("init-config")
@click.option(
    "--output",
    default="config.yaml",
    show_default=True,
    help="Where to write the default config YAML",
)
def init_config(output: str) -> None:
    """Write a default config file (never overwrites an existing one).

    Args:
        output: Destination path for the config file.
    """
    if not create_default_config(Path(output)):
        sys.exit(1)
    click.echo(f"Default configuration written to {output}")
