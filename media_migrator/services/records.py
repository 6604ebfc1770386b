"""Post-upload hooks that repoint backing database records at migrated objects."""

from __future__ import annotations

import logging
from typing import Protocol

import requests

from media_migrator.constants import (
    DEFAULT_RECORDS_TABLE,
    DEFAULT_REQUEST_TIMEOUT,
    HTTP_OK_MAX,
    HTTP_OK_MIN,
    REST_PATH,
)
from media_migrator.exceptions import RecordUpdateError
from media_migrator.types import FileEntry
from media_migrator.utils.logging import log_with_context


class PostUploadHook(Protocol):
    """Called once per successfully uploaded entry, before it counts as succeeded."""

    def __call__(self, entry: FileEntry, source_url: str, destination_url: str) -> None:
        ...


class TrackUrlUpdater:
    """Rewrite ``url`` on every row of a PostgREST table whose url is the old one.

    Issues ``PATCH /rest/v1/{table}?url=eq.{source_url}`` with body
    ``{"url": destination_url}``. A row count of zero is not an error.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = DEFAULT_RECORDS_TABLE,
        session: requests.Session | None = None,
        timeout: int = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.endpoint = f"{base_url.rstrip('/')}/{REST_PATH}/{table}"
        self.table = table
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {"apikey": api_key, "Authorization": f"Bearer {api_key}"}
        )

    def __call__(self, entry: FileEntry, source_url: str, destination_url: str) -> None:
        try:
            response = self.session.patch(
                self.endpoint,
                params={"url": f"eq.{source_url}"},
                json={"url": destination_url},
                headers={"Prefer": "return=minimal"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise RecordUpdateError(
                f"Updating {self.table} for {entry.name} failed: {e}"
            ) from e

        if not HTTP_OK_MIN <= response.status_code <= HTTP_OK_MAX:
            raise RecordUpdateError(
                f"Updating {self.table} for {entry.name} failed with status: "
                f"{response.status_code} {response.text}"
            )

        log_with_context(
            logging.INFO, f"Updated DB: {entry.name}", file_name=entry.name
        )
