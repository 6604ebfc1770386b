"""CLI command handler for the migrate workflow."""

from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path
from types import SimpleNamespace

import click

from media_migrator.cli.common import cli, common_options, handle_exception
from media_migrator.cli.report import (
    create_migration_output_directory,
    generate_report,
    print_summary,
)
from media_migrator.core.config import PROFILE_NAMES, load_config, load_credentials
from media_migrator.core.context import MigrationContext, build_context
from media_migrator.core.migrator import MediaMigrator
from media_migrator.core.pipeline import build_pipeline
from media_migrator.core.stats import RunStats
from media_migrator.exceptions import MigrationAbortedError
from media_migrator.utils.logging import log_with_context, setup_logger


# ---------------------------------------------------------------------------
# migrate subcommand
# ---------------------------------------------------------------------------


@cli.command()
@common_options
@click.option(
    "--profile",
    "profiles",
    multiple=True,
    required=True,
    type=click.Choice([*PROFILE_NAMES, "all"]),
    help="Media profile to migrate; repeat for several, or use 'all'",
)
@click.option(
    "--page_size",
    type=click.IntRange(min=1),
    default=None,
    help="Entries per listing page (overrides the config file)",
)
@click.option(
    "--dry_run",
    is_flag=True,
    default=False,
    help="List and check existence only - nothing is downloaded, uploaded or updated",
)
@click.option(
    "--output_dir",
    default=None,
    help="Directory for the run log and report (default: migration_logs/run_<timestamp>)",
)
@click.option(
    "--json_logs",
    is_flag=True,
    default=False,
    help="Write migration.log as JSON lines",
)
def migrate(
    config: str,
    env_file: str,
    verbose: bool,
    profiles: tuple[str, ...],
    page_size: int | None,
    dry_run: bool,
    output_dir: str | None,
    json_logs: bool,
) -> None:
    """Copy media files from Supabase Storage to Cloudflare R2.

    Args:
        config: Path to config YAML.
        env_file: Path to the .env file with credentials and bucket names.
        verbose: Enable verbose console logging.
        profiles: Profiles to migrate, in order.
        page_size: Optional listing page size override.
        dry_run: Check-only mode.
        output_dir: Optional output directory override.
        json_logs: Write the run log file as JSON lines.
    """
    args = SimpleNamespace(
        config=config,
        env_file=env_file,
        verbose=verbose,
        profiles=expand_profiles(profiles),
        page_size=page_size,
        dry_run=dry_run,
    )

    # Create output directory early so all operations are logged to file
    output_dir = output_dir or create_migration_output_directory()
    setup_logger(args.verbose, output_dir, json_logs=json_logs)

    log_startup_info(args)
    log_with_context(logging.INFO, f"Output directory: {output_dir}")

    orchestrator = MigrationOrchestrator(args)
    orchestrator.output_dir = output_dir

    try:
        orchestrator.prepare()
        orchestrator.run_migration()
    except (Exception, KeyboardInterrupt) as e:
        handle_exception(e)
        orchestrator.write_report()
        sys.exit(1)

    orchestrator.write_report()
    if not orchestrator.succeeded:
        sys.exit(1)


# ---------------------------------------------------------------------------
# MigrationOrchestrator
# ---------------------------------------------------------------------------


class MigrationOrchestrator:
    """Runs each requested profile in turn and collects the outcomes."""

    def __init__(self, args: SimpleNamespace) -> None:
        self.args = args
        self.ctx: MigrationContext | None = None
        self.output_dir: str | None = None
        self.results: dict[str, RunStats] = {}
        self.aborted: dict[str, str] = {}

    def prepare(self) -> None:
        """Load configuration and credentials, and build the service clients once."""
        config = load_config(Path(self.args.config))
        if self.args.page_size:
            config = dataclasses.replace(config, page_size=self.args.page_size)

        credentials = load_credentials(Path(self.args.env_file))

        self.ctx = build_context(
            config,
            credentials,
            dry_run=self.args.dry_run,
            verbose=self.args.verbose,
            output_dir=self.output_dir,
        )

    def run_profile(self, profile: str) -> RunStats | None:
        """Migrate one profile. Returns None when its listing aborted."""
        if self.ctx is None:
            raise RuntimeError("Migration context not initialized")

        pipeline = build_pipeline(self.ctx, profile)
        migrator = MediaMigrator(self.ctx, pipeline)
        try:
            stats = migrator.migrate()
        except MigrationAbortedError as e:
            log_with_context(logging.ERROR, f"Migration aborted: {e}", profile=profile)
            self.aborted[profile] = str(e)
            return None
        except KeyboardInterrupt:
            # Keep the counts so far for the report written on the way out
            self.results[profile] = migrator.stats
            raise

        self.results[profile] = stats
        print_summary(profile, stats, dry_run=self.args.dry_run)
        return stats

    def run_migration(self) -> None:
        """Execute every requested profile; an aborted profile does not stop the rest."""
        for profile in self.args.profiles:
            self.run_profile(profile)

        if not self.aborted and self.succeeded:
            log_with_context(logging.INFO, "Process completed!")

    @property
    def succeeded(self) -> bool:
        """True when no profile aborted and no entry failed."""
        return not self.aborted and not any(
            stats.has_failures for stats in self.results.values()
        )

    def write_report(self) -> None:
        """Write the YAML report, if there is anything to report."""
        if not self.output_dir or not (self.results or self.aborted):
            return
        try:
            generate_report(
                self.output_dir, self.results, self.aborted, dry_run=self.args.dry_run
            )
        except OSError as report_error:
            log_with_context(
                logging.WARNING,
                f"Failed to generate migration report: {report_error}",
            )


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def expand_profiles(profiles: tuple[str, ...]) -> list[str]:
    """Resolve ``all`` and drop duplicates while keeping the given order."""
    expanded: list[str] = []
    for profile in profiles:
        for name in PROFILE_NAMES if profile == "all" else (profile,):
            if name not in expanded:
                expanded.append(name)
    return expanded


def log_startup_info(args: SimpleNamespace) -> None:
    """Log startup information.

    Args:
        args: Parsed CLI arguments containing migration parameters.
    """
    config_path = Path(args.config)
    if not config_path.is_absolute():
        config_path = Path.cwd() / args.config

    log_with_context(logging.INFO, "Starting migration with the following parameters:")
    log_with_context(logging.INFO, f"- Profiles: {', '.join(args.profiles)}")
    log_with_context(logging.INFO, f"- Config: {config_path}")
    log_with_context(logging.INFO, f"- Env file: {args.env_file}")
    log_with_context(logging.INFO, f"- Dry run: {args.dry_run}")
    log_with_context(logging.INFO, f"- Verbose logging: {args.verbose}")
