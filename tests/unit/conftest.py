"""Unit test configuration and shared fixtures."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from media_migrator.core.config import Credentials, MigrationConfig
from media_migrator.core.context import MigrationContext
from media_migrator.core.pipeline import TransferPipeline
from media_migrator.exceptions import DownloadError
from media_migrator.types import ExistenceResult, FileEntry
from media_migrator.utils.retry import SINGLE_ATTEMPT, RetryPolicy

# ---------------------------------------------------------------------------
# In-memory stand-ins for the two storage services
# ---------------------------------------------------------------------------


class InMemorySource:
    """Behaves like SupabaseStorage over a dict of ``name -> body``.

    ``missing`` names are listed but answer downloads with a 404.
    """

    def __init__(self, objects: dict[str, bytes], missing: set[str] | None = None):
        self.objects = dict(objects)
        self.missing = set(missing or ())
        self.list_calls: list[tuple[int, int]] = []
        self.downloads: list[str] = []

    def list_page(self, bucket: str, limit: int, offset: int, prefix: str = ""):
        self.list_calls.append((limit, offset))
        names = sorted(self.objects)
        return [FileEntry(name=n) for n in names[offset : offset + limit]]

    def download(self, bucket: str, key: str) -> bytes:
        self.downloads.append(key)
        if key in self.missing:
            raise DownloadError(
                "Failed to fetch with status: 404 Not Found", status_code=404
            )
        return self.objects[key]

    def public_url(self, bucket: str, key: str) -> str:
        return f"https://project.supabase.co/storage/v1/object/public/{bucket}/{key}"


class InMemoryDestination:
    """Behaves like R2Destination over a dict of ``(bucket, key) -> (body, type)``."""

    def __init__(self, existing: dict[tuple[str, str], Any] | None = None):
        self.objects: dict[tuple[str, str], Any] = dict(existing or {})
        self.head_calls: list[str] = []
        self.uploads: list[str] = []

    def check_exists(self, bucket: str, key: str) -> ExistenceResult:
        self.head_calls.append(key)
        if (bucket, key) in self.objects:
            return ExistenceResult.exists()
        return ExistenceResult.not_found()

    def upload(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        self.uploads.append(key)
        self.objects[(bucket, key)] = (body, content_type)

    def object_url(self, bucket: str, key: str) -> str:
        return f"https://account.r2.cloudflarestorage.com/{bucket}/{key}"


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _build_context(
    source: Any = None,
    destination: Any = None,
    config: MigrationConfig | None = None,
    dry_run: bool = False,
    env: dict[str, str] | None = None,
) -> MigrationContext:
    env = env or {}
    credentials = Credentials(
        supabase_url="https://project.supabase.co",
        supabase_key="service-key",
        r2_endpoint="https://account.r2.cloudflarestorage.com",
        r2_access_key="access",
        r2_secret_key="secret",
        environ=env,
    )
    return MigrationContext(
        config=config or MigrationConfig(),
        credentials=credentials,
        source=source if source is not None else MagicMock(),
        destination=destination if destination is not None else MagicMock(),
        dry_run=dry_run,
    )


def _build_pipeline(**overrides: Any) -> TransferPipeline:
    fields: dict[str, Any] = {
        "name": "audio",
        "extensions": (".mp3",),
        "source_bucket": "audio-src",
        "destination_bucket": "audio-dst",
        "retry_policy": RetryPolicy(),
        "transfer_retry_policy": RetryPolicy(),
    }
    fields.update(overrides)
    return TransferPipeline(**fields)


@pytest.fixture()
def make_context():
    """Factory fixture for a MigrationContext with injected services.

    Usage in tests::

        def test_something(make_context):
            ctx = make_context(source=InMemorySource({...}), dry_run=True)
    """
    return _build_context


@pytest.fixture()
def make_pipeline():
    """Factory fixture for an audio-like TransferPipeline; kwargs override fields."""
    return _build_pipeline


@pytest.fixture()
def unhardened_policy():
    return SINGLE_ATTEMPT


@pytest.fixture()
def in_memory_source():
    return InMemorySource


@pytest.fixture()
def in_memory_destination():
    return InMemoryDestination
