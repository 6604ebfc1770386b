"""Shared CLI infrastructure: option decorators, error handlers, and the CLI group."""

from __future__ import annotations

import logging
from typing import Callable

import click
import requests
from botocore.exceptions import BotoCoreError, ClientError

import media_migrator
from media_migrator.exceptions import (
    ConfigError,
    MigrationAbortedError,
    MigratorError,
)
from media_migrator.utils.logging import log_with_context


# ---------------------------------------------------------------------------
# Shared option decorator
# ---------------------------------------------------------------------------


def common_options(f: Callable[..., None]) -> Callable[..., None]:
    """Decorator that adds options shared across multiple subcommands.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with common options attached.
    """
    f = click.option(
        "--config",
        default="config.yaml",
        show_default=True,
        help="Path to config YAML (optional; defaults are used if missing)",
    )(f)
    f = click.option(
        "--env_file",
        default=".env",
        show_default=True,
        help="Path to a .env file with endpoints, keys and bucket names",
    )(f)
    f = click.option(
        "--verbose",
        "-v",
        is_flag=True,
        default=False,
        help="Enable verbose console logging (shows DEBUG level messages)",
    )(f)
    return f


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=media_migrator.__version__, prog_name="media-migrator")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Supabase Storage to Cloudflare R2 media migration tool.

    Args:
        ctx: The Click context (injected by ``@click.pass_context``).
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


def handle_exception(e: BaseException) -> None:
    """Handle different types of exceptions.

    Args:
        e: The exception to handle.
    """
    if isinstance(e, ConfigError):
        log_with_context(logging.ERROR, f"Configuration error: {e}")
        log_with_context(
            logging.INFO,
            "Check your .env file (SUPABASE_URL, SUPABASE_KEY, R2_ENDPOINT, "
            "R2_ACCESS_KEY, R2_SECRET_KEY and the bucket variables).",
        )
    elif isinstance(e, MigrationAbortedError):
        log_with_context(logging.ERROR, f"Migration aborted: {e}")
    elif isinstance(e, MigratorError):
        log_with_context(logging.ERROR, str(e))
    elif isinstance(e, ClientError):
        code = e.response.get("Error", {}).get("Code")
        log_with_context(logging.ERROR, f"R2 API error ({code}): {e}")
        log_with_context(
            logging.INFO, "Check the R2 endpoint, access keys and bucket permissions."
        )
    elif isinstance(e, (BotoCoreError, requests.exceptions.RequestException)):
        log_with_context(logging.ERROR, f"Network error: {e}")
        log_with_context(
            logging.INFO, "This is likely a temporary issue. Please try again later."
        )
    elif isinstance(e, KeyboardInterrupt):
        log_with_context(logging.WARNING, "Migration interrupted by user.")
        log_with_context(
            logging.INFO,
            "Re-running is safe: files already present in R2 are skipped.",
        )
    else:
        log_with_context(logging.ERROR, f"Migration failed: {e}", exc_info=True)
