"""Unit tests for the config module."""

import os
import tempfile
from pathlib import Path

import pytest
import yaml

from media_migrator.core.config import (
    PROFILE_NAMES,
    MigrationConfig,
    create_default_config,
    load_config,
    load_credentials,
)
from media_migrator.exceptions import ConfigError
from media_migrator.utils.retry import RetryPolicy


def test_load_config_with_empty_file():
    """Test loading config from an empty file."""
    with tempfile.NamedTemporaryFile(suffix=".yaml") as temp_file:
        config = load_config(Path(temp_file.name))

        assert config.page_size == 100
        assert config.max_retries == 3
        assert config.retry_delay_ms == 1000
        assert config.request_timeout == 60
        assert config.destination_public_url is None
        assert set(config.profiles) == {"audio", "images", "tracks"}


def test_load_config_missing_file_uses_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config == MigrationConfig()


def test_load_config_invalid_yaml_uses_defaults(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("page_size: [unterminated\n")
    config = load_config(path)
    assert config.page_size == 100


def test_load_config_with_values(tmp_path):
    """Test loading config with specific values and profile overrides."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "page_size": 50,
                "max_retries": 5,
                "retry_delay_ms": 250,
                "destination_public_url": "https://cdn.example.com",
                "profiles": {
                    "audio": {"extensions": ["MP3", "wav"]},
                    "tracks": {"retry_transfers": True, "records_table": "songs"},
                },
            }
        )
    )

    config = load_config(path)

    assert config.page_size == 50
    assert config.retry_policy == RetryPolicy(max_attempts=5, initial_delay_ms=250)
    assert config.destination_public_url == "https://cdn.example.com"
    assert config.profile("audio").extensions == (".mp3", ".wav")
    # Untouched fields keep the built-in values
    assert config.profile("audio").source_bucket_env == "SUPABASE_AUDIO_BUCKET"
    assert config.profile("tracks").retry_transfers is True
    assert config.profile("tracks").update_records is True
    assert config.profile("tracks").records_table == "songs"


def test_load_config_unknown_profile_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"profiles": {"video": {"extensions": ["mp4"]}}}))
    with pytest.raises(ConfigError, match="Unknown profile 'video'"):
        load_config(path)


def test_load_config_zero_page_size_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"page_size": 0}))
    with pytest.raises(ConfigError, match="page_size"):
        load_config(path)


def test_builtin_profiles():
    config = MigrationConfig()
    audio = config.profile("audio")
    images = config.profile("images")
    tracks = config.profile("tracks")

    assert audio.extensions == (".mp3",)
    assert audio.retry_transfers is True
    assert audio.update_records is False

    assert images.extensions == (".jpg", ".jpeg", ".png", ".gif", ".webp")
    assert images.destination_bucket_env == "R2_IMAGE_BUCKET"

    assert tracks.retry_transfers is False
    assert tracks.update_records is True
    assert tracks.records_table == "tracks"

    assert PROFILE_NAMES == ("audio", "images", "tracks")


def test_unknown_profile_lookup_raises():
    with pytest.raises(ConfigError, match="Available profiles"):
        MigrationConfig().profile("video")


class TestLoadCredentials:
    """Tests for load_credentials()."""

    def test_reads_required_variables(self, env_vars):
        creds = load_credentials(environ=env_vars)
        assert creds.supabase_url == "https://project.supabase.co"
        assert creds.r2_endpoint == "https://account.r2.cloudflarestorage.com"
        assert creds.bucket("R2_AUDIO_BUCKET") == "audio-dst"

    def test_missing_variables_are_all_reported(self, env_vars):
        del env_vars["SUPABASE_KEY"]
        del env_vars["R2_SECRET_KEY"]
        with pytest.raises(ConfigError) as exc_info:
            load_credentials(environ=env_vars)
        assert "SUPABASE_KEY" in str(exc_info.value)
        assert "R2_SECRET_KEY" in str(exc_info.value)

    def test_missing_bucket_variable(self, env_vars):
        del env_vars["R2_IMAGE_BUCKET"]
        creds = load_credentials(environ=env_vars)
        with pytest.raises(ConfigError, match="R2_IMAGE_BUCKET"):
            creds.bucket("R2_IMAGE_BUCKET")

    def test_secrets_not_in_repr(self, env_vars):
        creds = load_credentials(environ=env_vars)
        assert "audio-dst" not in repr(creds)

    def test_env_file_is_loaded(self, tmp_path, monkeypatch, env_vars):
        monkeypatch.setattr(os, "environ", {})
        env_file = tmp_path / ".env"
        env_file.write_text("\n".join(f"{k}={v}" for k, v in env_vars.items()))

        creds = load_credentials(env_file)

        assert creds.supabase_key == "service-key"
        assert creds.bucket("SUPABASE_BUCKET") == "tracks-src"

    def test_process_environment_wins_over_env_file(self, tmp_path, monkeypatch, env_vars):
        monkeypatch.setattr(os, "environ", dict(env_vars))
        env_file = tmp_path / ".env"
        env_file.write_text("SUPABASE_KEY=from-file\n")

        creds = load_credentials(env_file)

        assert creds.supabase_key == "service-key"

    def test_missing_env_file_falls_back_to_environment(self, tmp_path, env_vars):
        creds = load_credentials(tmp_path / "absent.env", environ=env_vars)
        assert creds.r2_access_key == "access"


def test_create_default_config(tmp_path):
    """Test creating a default config file."""
    config_path = tmp_path / "config.yaml"
    assert create_default_config(config_path) is True

    with open(config_path) as f:
        written = yaml.safe_load(f)
    assert written["page_size"] == 100
    assert written["max_retries"] == 3
    assert set(written["profiles"]) == {"audio", "images", "tracks"}

    # What we write loads back to the defaults
    assert load_config(config_path) == MigrationConfig()


def test_create_default_config_no_overwrite(tmp_path):
    """Test that create_default_config won't overwrite an existing file."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("existing: true\n")

    assert create_default_config(config_path) is False
    with open(config_path) as f:
        assert yaml.safe_load(f) == {"existing": True}
