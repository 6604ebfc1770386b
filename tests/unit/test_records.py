"""Unit tests for the track URL updater."""

from unittest.mock import MagicMock

import pytest
import requests

from media_migrator.exceptions import RecordUpdateError
from media_migrator.services.records import TrackUrlUpdater
from media_migrator.types import FileEntry

OLD = "https://project.supabase.co/storage/v1/object/public/tracks/a.mp3"
NEW = "https://account.r2.cloudflarestorage.com/tracks/a.mp3"


def _updater(session, table="tracks"):
    session.headers = {}
    return TrackUrlUpdater("https://project.supabase.co/", "key", table=table, session=session)


def test_patches_rows_matching_old_url():
    session = MagicMock()
    session.patch.return_value = MagicMock(status_code=204)
    updater = _updater(session)

    updater(FileEntry("a.mp3"), OLD, NEW)

    session.patch.assert_called_once_with(
        "https://project.supabase.co/rest/v1/tracks",
        params={"url": f"eq.{OLD}"},
        json={"url": NEW},
        headers={"Prefer": "return=minimal"},
        timeout=60,
    )
    assert session.headers["apikey"] == "key"
    assert session.headers["Authorization"] == "Bearer key"


def test_configured_table():
    session = MagicMock()
    session.patch.return_value = MagicMock(status_code=200)
    _updater(session, table="songs")(FileEntry("a.mp3"), OLD, NEW)
    assert session.patch.call_args[0][0].endswith("/rest/v1/songs")


def test_error_status_raises():
    session = MagicMock()
    session.patch.return_value = MagicMock(status_code=401, text="JWT expired")
    with pytest.raises(RecordUpdateError, match="401 JWT expired"):
        _updater(session)(FileEntry("a.mp3"), OLD, NEW)


def test_transport_error_raises():
    session = MagicMock()
    session.patch.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(RecordUpdateError, match="refused"):
        _updater(session)(FileEntry("a.mp3"), OLD, NEW)
