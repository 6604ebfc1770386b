"""Shared type definitions for the media migration tool.

Provides the structured data flowing through the migration pipeline:
listed source objects, destination existence results, and per-entry
outcome tracking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypedDict

# ---------------------------------------------------------------------------
# Source listing types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileEntry:
    """One object listed from the source bucket."""

    name: str
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileEntry:
        """Build an entry from a row of the storage listing response."""
        return cls(
            name=data["name"],
            metadata={k: v for k, v in data.items() if k != "name"},
        )


# ---------------------------------------------------------------------------
# Destination existence check
# ---------------------------------------------------------------------------


class ExistenceStatus(str, Enum):
    """Outcome of a metadata-only existence probe at the destination."""

    EXISTS = "EXISTS"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"


@dataclass
class ExistenceResult:
    """Structured result from :meth:`R2Destination.check_exists`.

    Three-state model so callers never need to inspect vendor error shapes:
    the object is present, it is absent, or the probe itself failed
    (``error`` holds the cause).
    """

    status: ExistenceStatus
    error: Exception | None = None

    @classmethod
    def exists(cls) -> ExistenceResult:
        return cls(ExistenceStatus.EXISTS)

    @classmethod
    def not_found(cls) -> ExistenceResult:
        return cls(ExistenceStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: Exception) -> ExistenceResult:
        return cls(ExistenceStatus.ERROR, error)

    @property
    def found(self) -> bool:
        """True when the object is already present at the destination."""
        return self.status is ExistenceStatus.EXISTS


# ---------------------------------------------------------------------------
# Internal tracking types
# ---------------------------------------------------------------------------


class EntryOutcome(str, Enum):
    """Terminal classification of a single listed entry."""

    SUCCEEDED = "SUCCEEDED"
    SKIPPED_UNSUPPORTED = "SKIPPED_UNSUPPORTED"
    SKIPPED_EXISTING = "SKIPPED_EXISTING"
    FAILED = "FAILED"


class FailedEntry(TypedDict):
    """An entry that failed to migrate."""

    name: str
    error: str
    error_type: str
    error_code: str | None
