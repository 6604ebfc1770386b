"""
Report generation for media migration runs
"""

from __future__ import annotations

import datetime
import logging
import os
from typing import Any

import click
import yaml

from media_migrator.core.stats import RunStats
from media_migrator.utils.logging import log_with_context


def print_summary(profile: str, stats: RunStats, dry_run: bool = False) -> None:
    """Print the end-of-run summary for one profile to the console."""
    title = "DRY RUN SUMMARY" if dry_run else "SUMMARY"
    click.echo("\n" + "=" * 60)
    click.echo(f"{title} ({profile})")
    click.echo("=" * 60)
    click.echo(f"Total files listed: {stats.total_entries}")
    click.echo(f"Total files processed: {stats.processed}")
    if dry_run:
        click.echo(f"Would be uploaded: {stats.succeeded}")
    else:
        click.echo(f"Successfully uploaded: {stats.succeeded}")
    click.echo(
        f"Skipped: {stats.skipped} "
        f"(already in R2: {stats.skipped_existing}, unsupported type: {stats.skipped_unsupported})"
    )
    click.echo(f"Failed: {stats.failed}")

    if stats.failed_entries:
        click.echo("\nFailed files:")
        for failed in stats.failed_entries:
            click.echo(f"  - {failed['name']}: {failed['error']}")
    click.echo("=" * 60)


def create_migration_output_directory(base_dir: str = "migration_logs") -> str:
    """Create output directory for a migration run with timestamp.

    Returns:
        The path to the newly created output directory.
    """
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = os.path.join(base_dir, f"run_{timestamp}")
    os.makedirs(output_dir, exist_ok=True)
    return output_dir


def generate_report(
    output_dir: str,
    results: dict[str, RunStats],
    aborted: dict[str, str] | None = None,
    dry_run: bool = False,
    output_file: str = "migration_report.yaml",
) -> str:
    """
    Write a YAML report of every profile run in this invocation.

    Args:
        output_dir: The run's output directory
        results: Stats per profile that completed its transfer loop
        aborted: Error message per profile whose listing failed
        dry_run: Whether this was a dry run
        output_file: Report file name inside ``output_dir``

    Returns:
        Path to the written report
    """
    report_path = os.path.join(output_dir, output_file)

    report: dict[str, Any] = {
        "migration_summary": {
            "timestamp": datetime.datetime.now().isoformat(),
            "dry_run": dry_run,
            "profiles_completed": sorted(results),
            "profiles_aborted": sorted(aborted or {}),
        },
        "profiles": {},
    }

    for profile, stats in results.items():
        report["profiles"][profile] = {
            "stats": stats.to_dict(),
            "failed_files": [dict(failed) for failed in stats.failed_entries],
        }

    for profile, error in (aborted or {}).items():
        report["profiles"][profile] = {"aborted": True, "error": error}

    with open(report_path, "w") as f:
        yaml.safe_dump(report, f, default_flow_style=False, sort_keys=False)

    log_with_context(logging.INFO, f"Migration report saved to {report_path}")
    return report_path
