#!/usr/bin/env python3
"""
Main execution module for the media migration tool.

Assembles the click CLI group from the subcommand modules and exposes the
console-script entry point.
"""

from media_migrator.cli import config_cmd, migrate_cmd  # noqa: F401  (registers subcommands)
from media_migrator.cli.common import cli, handle_exception

__all__ = ["cli", "handle_exception", "main"]


def main() -> None:
    """Main entry point for the media migration tool."""
    cli()


if __name__ == "__main__":
    main()
