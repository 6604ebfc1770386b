"""
Main migrator class for the media migration tool
"""

from __future__ import annotations

import logging

from tqdm import tqdm

from media_migrator.core.context import MigrationContext
from media_migrator.core.pipeline import TransferPipeline
from media_migrator.core.stats import RunStats
from media_migrator.exceptions import ListingError, MigrationAbortedError
from media_migrator.services.source import SourceLister
from media_migrator.types import EntryOutcome, ExistenceStatus, FileEntry
from media_migrator.utils.logging import log_with_context
from media_migrator.utils.retry import retry


class MediaMigrator:
    """Moves every qualifying object of one pipeline from Supabase to R2.

    Entries are handled one at a time, in listing order. A failure on one
    entry is logged and counted; it never stops the run. A listing failure
    that survives its retries aborts the run before any transfer starts.
    """

    def __init__(self, ctx: MigrationContext, pipeline: TransferPipeline) -> None:
        self.ctx = ctx
        self.pipeline = pipeline
        self.stats = RunStats()

    def _log(self, level: int, message: str, **kwargs) -> None:
        log_with_context(
            level, f"{self.ctx.log_prefix}{message}", profile=self.pipeline.name, **kwargs
        )

    def list_entries(self) -> list[FileEntry]:
        """List the whole source bucket, or raise MigrationAbortedError."""
        lister = SourceLister(
            self.ctx.source,
            self.pipeline.source_bucket,
            page_size=self.ctx.config.page_size,
            retry_policy=self.pipeline.retry_policy,
        )
        try:
            return lister.list_all()
        except ListingError as e:
            self._log(logging.ERROR, f"Fatal error fetching files: {e}", exc_info=True)
            raise MigrationAbortedError(
                f"Listing bucket {self.pipeline.source_bucket} failed: {e}"
            ) from e

    def migrate(self) -> RunStats:
        """
        Run the transfer loop over the full source listing.

        Returns:
            The run's statistics

        Raises:
            MigrationAbortedError: If the source bucket could not be listed
        """
        self.stats = RunStats()
        self._log(
            logging.INFO,
            f"Fetching files from {self.pipeline.source_bucket} "
            f"(profile: {self.pipeline.name})...",
        )

        entries = self.list_entries()
        self.stats.total_entries = len(entries)
        self._log(logging.INFO, f"Total files found: {len(entries)}")

        for entry in tqdm(
            entries, desc=f"Migrating {self.pipeline.name}", unit="file", disable=None
        ):
            self.migrate_entry(entry)

        return self.stats

    def migrate_entry(self, entry: FileEntry) -> EntryOutcome:
        """Classify, check, transfer and count a single entry."""
        if not self.pipeline.accepts(entry.name):
            self._log(
                logging.DEBUG,
                f"Skipping unsupported file type: {entry.name}",
                file_name=entry.name,
            )
            self.stats.record(EntryOutcome.SKIPPED_UNSUPPORTED)
            return EntryOutcome.SKIPPED_UNSUPPORTED

        self.stats.increment_processed()
        self._log(
            logging.INFO,
            f"[{self.stats.processed}/{self.stats.total_entries}] Processing: {entry.name}",
            file_name=entry.name,
        )

        try:
            outcome = self._transfer(entry)
        except Exception as e:
            code = getattr(e, "status_code", None) or getattr(e, "code", None)
            self._log(
                logging.ERROR,
                f"Upload failed for {entry.name}: {e}",
                file_name=entry.name,
                error_code=code,
                exc_info=True,
            )
            self.stats.record_failure(entry.name, e)
            return EntryOutcome.FAILED

        self.stats.record(outcome)
        return outcome

    def _transfer(self, entry: FileEntry) -> EntryOutcome:
        pipeline = self.pipeline
        key = entry.name

        if self._destination_has(key):
            self._log(
                logging.INFO,
                f"Skipping: {key} - Already exists in R2",
                file_name=key,
            )
            return EntryOutcome.SKIPPED_EXISTING

        if self.ctx.dry_run:
            self._log(logging.INFO, f"Would move: {key} -> R2", file_name=key)
            return EntryOutcome.SUCCEEDED

        self._log(logging.INFO, f"Moving: {key} -> R2", file_name=key)

        body = retry(
            lambda: self.ctx.source.download(pipeline.source_bucket, key),
            f"Fetching {key} from Supabase",
            pipeline.transfer_retry_policy,
            file_name=key,
            profile=pipeline.name,
        )

        content_type = pipeline.content_type(key)
        retry(
            lambda: self.ctx.destination.upload(
                pipeline.destination_bucket, key, body, content_type
            ),
            f"Uploading {key} to R2",
            pipeline.transfer_retry_policy,
            file_name=key,
            profile=pipeline.name,
        )
        self._log(logging.INFO, f"Uploaded: {key} -> R2", file_name=key)

        if pipeline.post_upload_hook is not None:
            pipeline.post_upload_hook(
                entry,
                self.ctx.source.public_url(pipeline.source_bucket, key),
                self.ctx.destination.object_url(pipeline.destination_bucket, key),
            )

        return EntryOutcome.SUCCEEDED

    def _destination_has(self, key: str) -> bool:
        """Existence check with retries; a probe error raises once retries run out."""
        bucket = self.pipeline.destination_bucket

        def probe() -> bool:
            result = self.ctx.destination.check_exists(bucket, key)
            if result.status is ExistenceStatus.ERROR:
                raise result.error
            return result.found

        return retry(
            probe,
            f"Checking if {key} exists in R2",
            self.pipeline.retry_policy,
            file_name=key,
            profile=self.pipeline.name,
        )
