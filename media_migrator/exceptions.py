"""Custom exception hierarchy for the media migration tool."""

from __future__ import annotations


class MigratorError(Exception):
    """Base exception for all migration-related errors."""


class ConfigError(MigratorError):
    """Raised when configuration is invalid or missing."""


class ListingError(MigratorError):
    """Raised when a page of the source bucket listing cannot be fetched."""


class ExistenceCheckError(MigratorError):
    """Raised when the destination cannot say whether an object exists."""


class DownloadError(MigratorError):
    """Raised when an object body cannot be fetched from the source."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UploadError(MigratorError):
    """Raised when an object cannot be written to the destination."""


class RecordUpdateError(MigratorError):
    """Raised when a backing record cannot be repointed at the new URL."""


class MigrationAbortedError(MigratorError):
    """Raised when the run is aborted before the transfer loop completes."""
