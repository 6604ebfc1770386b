"""Immutable migration context.

MigrationContext is a frozen dataclass that holds the configuration and the
service clients for a migration run. It is created once at process start
and passed explicitly to everything that needs a client; nothing in the
package builds clients at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from media_migrator.core.config import Credentials, MigrationConfig
from media_migrator.services.destination import R2Destination, create_r2_client
from media_migrator.services.source import SupabaseStorage


@dataclass(frozen=True)
class MigrationContext:
    """Immutable context for a migration run. Created once, shared everywhere."""

    config: MigrationConfig
    credentials: Credentials

    source: SupabaseStorage
    destination: R2Destination

    # Mode flags
    dry_run: bool = False
    verbose: bool = False

    # Run output directory (logs and report); None when not writing files
    output_dir: str | None = None

    @property
    def log_prefix(self) -> str:
        """Mode-aware log prefix, ``"[DRY RUN] "`` or empty."""
        return "[DRY RUN] " if self.dry_run else ""


def build_context(
    config: MigrationConfig,
    credentials: Credentials,
    dry_run: bool = False,
    verbose: bool = False,
    output_dir: str | None = None,
    s3_client: Any = None,
) -> MigrationContext:
    """Construct the service clients once and bundle them into a context.

    Args:
        config: Loaded migration configuration
        credentials: Endpoints and secrets from the environment
        dry_run: Check and report only, never write to the destination
        verbose: Verbose logging was requested
        output_dir: Directory for this run's log file and report
        s3_client: Pre-built S3 client to use instead of creating one

    Returns:
        A ready-to-use MigrationContext
    """
    source = SupabaseStorage(
        credentials.supabase_url,
        credentials.supabase_key,
        timeout=config.request_timeout,
    )
    client = s3_client or create_r2_client(
        credentials.r2_endpoint, credentials.r2_access_key, credentials.r2_secret_key
    )
    destination = R2Destination(
        client, credentials.r2_endpoint, public_url=config.destination_public_url
    )
    return MigrationContext(
        config=config,
        credentials=credentials,
        source=source,
        destination=destination,
        dry_run=dry_run,
        verbose=verbose,
        output_dir=output_dir,
    )
