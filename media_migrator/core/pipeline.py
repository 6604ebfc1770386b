"""
Transfer pipeline definitions.

A :class:`TransferPipeline` describes *what* one migration run moves: which
files qualify, which buckets they move between, how content types are
resolved, how hard to retry, and what to do after each upload. The audio,
image and track migrations are all instances of it, built from the named
profiles in the configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from media_migrator.core.context import MigrationContext
from media_migrator.services.records import PostUploadHook, TrackUrlUpdater
from media_migrator.utils.media import content_type_for, has_allowed_extension
from media_migrator.utils.retry import SINGLE_ATTEMPT, RetryPolicy


@dataclass(frozen=True)
class TransferPipeline:
    """Configuration of one parametric migration pipeline."""

    name: str
    extensions: tuple[str, ...]
    source_bucket: str
    destination_bucket: str
    retry_policy: RetryPolicy
    # Policy for download/upload; a single attempt for unhardened profiles
    transfer_retry_policy: RetryPolicy = SINGLE_ATTEMPT
    content_type_resolver: Callable[[str], str] = content_type_for
    post_upload_hook: PostUploadHook | None = None

    def accepts(self, file_name: str) -> bool:
        return has_allowed_extension(file_name, self.extensions)

    def content_type(self, file_name: str) -> str:
        return self.content_type_resolver(file_name)


def build_pipeline(ctx: MigrationContext, profile_name: str) -> TransferPipeline:
    """
    Build the pipeline for a named profile.

    Bucket names are resolved from the environment variables the profile
    names; a profile with ``update_records`` gets a :class:`TrackUrlUpdater`
    hook pointed at the configured table.

    Raises:
        ConfigError: For an unknown profile or a missing bucket variable
    """
    config = ctx.config
    profile = config.profile(profile_name)
    retry_policy = config.retry_policy

    hook: PostUploadHook | None = None
    if profile.update_records:
        hook = TrackUrlUpdater(
            ctx.credentials.supabase_url,
            ctx.credentials.supabase_key,
            table=profile.records_table,
            timeout=config.request_timeout,
        )

    return TransferPipeline(
        name=profile_name,
        extensions=profile.extensions,
        source_bucket=ctx.credentials.bucket(profile.source_bucket_env),
        destination_bucket=ctx.credentials.bucket(profile.destination_bucket_env),
        retry_policy=retry_policy,
        transfer_retry_policy=retry_policy if profile.retry_transfers else SINGLE_ATTEMPT,
        post_upload_hook=hook,
    )
