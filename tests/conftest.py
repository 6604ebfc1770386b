"""Shared test fixtures for the media_migrator test suite."""

import pytest
from botocore.exceptions import ClientError


def _make_client_error(code: str, operation: str = "HeadObject") -> ClientError:
    """Create a botocore ClientError carrying the given error code."""
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture()
def env_vars():
    """Return an environment mapping with every variable the tool reads."""
    return {
        "SUPABASE_URL": "https://project.supabase.co",
        "SUPABASE_KEY": "service-key",
        "R2_ENDPOINT": "https://account.r2.cloudflarestorage.com",
        "R2_ACCESS_KEY": "access",
        "R2_SECRET_KEY": "secret",
        "SUPABASE_AUDIO_BUCKET": "audio-src",
        "R2_AUDIO_BUCKET": "audio-dst",
        "SUPABASE_IMAGE_BUCKET": "images-src",
        "R2_IMAGE_BUCKET": "images-dst",
        "SUPABASE_BUCKET": "tracks-src",
        "R2_BUCKET": "tracks-dst",
    }


@pytest.fixture()
def listing_rows():
    """Return rows shaped like a Supabase Storage list response."""
    return [
        {
            "name": "a.mp3",
            "id": "11111111-0000-0000-0000-000000000001",
            "updated_at": "2024-01-01T00:00:00Z",
            "metadata": {"size": 3, "mimetype": "audio/mpeg"},
        },
        {
            "name": "b.txt",
            "id": "11111111-0000-0000-0000-000000000002",
            "updated_at": "2024-01-01T00:00:00Z",
            "metadata": {"size": 5, "mimetype": "text/plain"},
        },
        {
            "name": "c.mp3",
            "id": "11111111-0000-0000-0000-000000000003",
            "updated_at": "2024-01-01T00:00:00Z",
            "metadata": {"size": 3, "mimetype": "audio/mpeg"},
        },
    ]


@pytest.fixture()
def make_client_error():
    """Factory fixture for botocore ClientErrors, e.g. ``make_client_error("404")``."""
    return _make_client_error
