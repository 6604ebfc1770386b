"""
Configuration module for the media migration tool.

Two kinds of input are loaded here. Endpoints, credentials and bucket names
come from the environment (optionally from a ``.env`` file); they are
collected into an immutable :class:`Credentials`. Tunables such as page size,
retry behaviour and per-profile overrides come from an optional YAML file
mapped onto :class:`MigrationConfig`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from media_migrator.constants import (
    AUDIO_EXTENSIONS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_RECORDS_TABLE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_DELAY_MS,
    IMAGE_EXTENSIONS,
)
from media_migrator.exceptions import ConfigError
from media_migrator.utils.logging import log_with_context
from media_migrator.utils.media import normalize_extensions
from media_migrator.utils.retry import RetryPolicy

REQUIRED_ENV_VARS = (
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "R2_ENDPOINT",
    "R2_ACCESS_KEY",
    "R2_SECRET_KEY",
)


@dataclass
class ProfileConfig:
    """Settings for one media profile (which files, which buckets, which extras)."""

    extensions: tuple[str, ...]
    source_bucket_env: str
    destination_bucket_env: str
    retry_transfers: bool = True
    update_records: bool = False
    records_table: str = DEFAULT_RECORDS_TABLE

    def merged(self, overrides: dict[str, Any] | None) -> ProfileConfig:
        """Return a copy with any keys present in ``overrides`` applied."""
        if not overrides:
            return self
        return ProfileConfig(
            extensions=normalize_extensions(
                overrides.get("extensions", self.extensions)
            ),
            source_bucket_env=overrides.get(
                "source_bucket_env", self.source_bucket_env
            ),
            destination_bucket_env=overrides.get(
                "destination_bucket_env", self.destination_bucket_env
            ),
            retry_transfers=overrides.get("retry_transfers", self.retry_transfers),
            update_records=overrides.get("update_records", self.update_records),
            records_table=overrides.get("records_table", self.records_table),
        )


def default_profiles() -> dict[str, ProfileConfig]:
    """The built-in profiles: hardened audio and image moves, and the track move."""
    return {
        "audio": ProfileConfig(
            extensions=AUDIO_EXTENSIONS,
            source_bucket_env="SUPABASE_AUDIO_BUCKET",
            destination_bucket_env="R2_AUDIO_BUCKET",
        ),
        "images": ProfileConfig(
            extensions=IMAGE_EXTENSIONS,
            source_bucket_env="SUPABASE_IMAGE_BUCKET",
            destination_bucket_env="R2_IMAGE_BUCKET",
        ),
        "tracks": ProfileConfig(
            extensions=AUDIO_EXTENSIONS,
            source_bucket_env="SUPABASE_BUCKET",
            destination_bucket_env="R2_BUCKET",
            retry_transfers=False,
            update_records=True,
        ),
    }


PROFILE_NAMES = tuple(default_profiles())


@dataclass
class MigrationConfig:
    """Typed configuration for the migration tool.

    All fields have defaults so an empty or missing YAML file is valid.
    """

    # Listing
    page_size: int = DEFAULT_PAGE_SIZE

    # Retry
    max_retries: int = DEFAULT_MAX_ATTEMPTS
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS

    # HTTP
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT

    # Base URL for migrated objects written to backing records; when unset the
    # R2 endpoint is used.
    destination_public_url: str | None = None

    profiles: dict[str, ProfileConfig] = field(default_factory=default_profiles)

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {self.page_size}")

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_retries, initial_delay_ms=self.retry_delay_ms
        )

    def profile(self, name: str) -> ProfileConfig:
        """Look up a profile by name, raising ConfigError for unknown names."""
        try:
            return self.profiles[name]
        except KeyError:
            raise ConfigError(
                f"Unknown profile '{name}'. Available profiles: {', '.join(sorted(self.profiles))}"
            ) from None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MigrationConfig:
        """Create a MigrationConfig from a raw config dictionary."""
        profiles = default_profiles()
        for name, overrides in (data.get("profiles") or {}).items():
            if name not in profiles:
                raise ConfigError(
                    f"Unknown profile '{name}' in config. "
                    f"Available profiles: {', '.join(sorted(profiles))}"
                )
            profiles[name] = profiles[name].merged(overrides)

        return cls(
            page_size=data.get("page_size", DEFAULT_PAGE_SIZE),
            max_retries=data.get("max_retries", DEFAULT_MAX_ATTEMPTS),
            retry_delay_ms=data.get("retry_delay_ms", DEFAULT_RETRY_DELAY_MS),
            request_timeout=data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT),
            destination_public_url=data.get("destination_public_url"),
            profiles=profiles,
        )


@dataclass(frozen=True)
class Credentials:
    """Endpoints and secrets for both storage services, read from the environment."""

    supabase_url: str
    supabase_key: str
    r2_endpoint: str
    r2_access_key: str
    r2_secret_key: str
    environ: Mapping[str, str] = field(default_factory=dict, repr=False)

    def bucket(self, env_var: str) -> str:
        """Resolve a bucket name from the environment variable a profile names."""
        value = self.environ.get(env_var)
        if not value:
            raise ConfigError(f"Missing required environment variable: {env_var}")
        return value


def load_config(config_path: Path) -> MigrationConfig:
    """
    Load configuration from YAML file and apply default values.

    If the file doesn't exist or can't be parsed, a warning is logged and
    default settings are used. Values that parse but make no sense (an
    unknown profile, a zero page size) raise instead.

    Args:
        config_path: Path to the config YAML file

    Returns:
        MigrationConfig with all necessary defaults applied
    """
    raw: dict[str, Any] = {}

    if config_path.exists():
        try:
            with open(config_path) as f:
                loaded_config = yaml.safe_load(f)
                # Handle None result from empty file
                if loaded_config is not None:
                    raw = loaded_config
            log_with_context(logging.INFO, f"Loaded configuration from {config_path}")
        except (yaml.YAMLError, OSError) as e:
            log_with_context(
                logging.WARNING, f"Failed to load config file {config_path}: {e}"
            )
    else:
        log_with_context(
            logging.DEBUG,
            f"Config file {config_path} not found, using default settings",
        )

    try:
        return MigrationConfig.from_dict(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def load_credentials(
    env_file: Path | None = None, environ: Mapping[str, str] | None = None
) -> Credentials:
    """
    Collect service endpoints and secrets from the environment.

    Args:
        env_file: Optional ``.env`` file loaded into the process environment
            first; variables already set in the environment win.
        environ: Mapping to read from instead of ``os.environ`` (tests)

    Returns:
        Credentials for the source and destination services

    Raises:
        ConfigError: If any required variable is missing, listing all of them
    """
    if env_file is not None:
        if env_file.exists():
            load_dotenv(env_file, override=False)
            log_with_context(logging.DEBUG, f"Loaded environment from {env_file}")
        else:
            log_with_context(
                logging.WARNING, f"Env file {env_file} not found, using process environment"
            )

    env = dict(os.environ if environ is None else environ)

    missing = [name for name in REQUIRED_ENV_VARS if not env.get(name)]
    if missing:
        raise ConfigError(
            f"Missing required environment variable(s): {', '.join(missing)}"
        )

    return Credentials(
        supabase_url=env["SUPABASE_URL"],
        supabase_key=env["SUPABASE_KEY"],
        r2_endpoint=env["R2_ENDPOINT"],
        r2_access_key=env["R2_ACCESS_KEY"],
        r2_secret_key=env["R2_SECRET_KEY"],
        environ=env,
    )


def create_default_config(output_path: Path) -> bool:
    """
    Create a default configuration file with recommended settings.

    The function will not overwrite an existing configuration file.

    Args:
        output_path: Path where the default config should be saved

    Returns:
        True if the config file was created successfully, False otherwise
    """
    if output_path.exists():
        log_with_context(
            logging.WARNING,
            f"Config file {output_path} already exists, not overwriting",
        )
        return False

    default_config = {
        "page_size": DEFAULT_PAGE_SIZE,
        # Retry options (attempts per operation, first backoff in milliseconds)
        "max_retries": DEFAULT_MAX_ATTEMPTS,
        "retry_delay_ms": DEFAULT_RETRY_DELAY_MS,
        "request_timeout": DEFAULT_REQUEST_TIMEOUT,
        "destination_public_url": None,
        "profiles": {
            name: {
                "extensions": list(profile.extensions),
                "retry_transfers": profile.retry_transfers,
                "update_records": profile.update_records,
                "records_table": profile.records_table,
            }
            for name, profile in default_profiles().items()
        },
    }

    try:
        with open(output_path, "w") as f:
            yaml.safe_dump(default_config, f, default_flow_style=False, sort_keys=False)
        log_with_context(logging.INFO, f"Created default config file at {output_path}")
        return True
    except OSError as e:
        log_with_context(logging.ERROR, f"Failed to create default config file: {e}")
        return False
