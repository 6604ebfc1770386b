"""
Outcome accounting for a single migration run.

Every listed entry ends in exactly one terminal classification. Entries
rejected by the extension filter are only counted as skipped; entries that
pass the filter are counted as processed and then as exactly one of
skipped (already at the destination), failed or succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from media_migrator.types import EntryOutcome, FailedEntry


@dataclass
class RunStats:
    """Counters for one run. Owned and mutated by the run's single control flow."""

    processed: int = 0
    skipped: int = 0
    failed: int = 0
    succeeded: int = 0

    total_entries: int = 0
    skipped_unsupported: int = 0
    skipped_existing: int = 0
    failed_entries: list[FailedEntry] = field(default_factory=list)

    def increment_processed(self) -> None:
        self.processed += 1

    def increment_skipped(self) -> None:
        self.skipped += 1

    def increment_failed(self) -> None:
        self.failed += 1

    def increment_succeeded(self) -> None:
        self.succeeded += 1

    def record(self, outcome: EntryOutcome) -> None:
        """Count a terminal outcome, including its skip breakdown."""
        if outcome is EntryOutcome.SKIPPED_UNSUPPORTED:
            self.skipped_unsupported += 1
            self.increment_skipped()
        elif outcome is EntryOutcome.SKIPPED_EXISTING:
            self.skipped_existing += 1
            self.increment_skipped()
        elif outcome is EntryOutcome.FAILED:
            self.increment_failed()
        elif outcome is EntryOutcome.SUCCEEDED:
            self.increment_succeeded()

    def record_failure(self, name: str, error: BaseException) -> None:
        """Count a failed entry and keep its error for the run report."""
        code = getattr(error, "status_code", None) or getattr(error, "code", None)
        self.failed_entries.append(
            FailedEntry(
                name=name,
                error=str(error),
                error_type=type(error).__name__,
                error_code=str(code) if code is not None else None,
            )
        )
        self.record(EntryOutcome.FAILED)

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_entries": self.total_entries,
            "processed": self.processed,
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "skipped_unsupported": self.skipped_unsupported,
            "skipped_existing": self.skipped_existing,
            "failed": self.failed,
        }
