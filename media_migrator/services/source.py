"""Supabase Storage access: bucket listing pages, public URLs and object downloads."""

from __future__ import annotations

import logging
from typing import Any, Iterator
from urllib.parse import quote

import requests

from media_migrator.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    HTTP_OK_MAX,
    HTTP_OK_MIN,
    STORAGE_LIST_PATH,
    STORAGE_PUBLIC_PATH,
    URI_COMPONENT_SAFE,
)
from media_migrator.exceptions import DownloadError, ListingError
from media_migrator.types import FileEntry
from media_migrator.utils.logging import log_with_context
from media_migrator.utils.retry import RetryPolicy, retry


def _is_success(status_code: int) -> bool:
    return HTTP_OK_MIN <= status_code <= HTTP_OK_MAX


class SupabaseStorage:
    """Thin client for the Supabase Storage REST API.

    Args:
        base_url: Project URL, e.g. ``https://abc.supabase.co``
        api_key: Service or anon key sent as both ``apikey`` and bearer token
        session: Optional pre-built ``requests.Session`` (tests inject a mock)
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: requests.Session | None = None,
        timeout: int = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {"apikey": api_key, "Authorization": f"Bearer {api_key}"}
        )

    def public_url(self, bucket: str, key: str) -> str:
        """Public download URL for ``key``; the key is encoded as a single path segment."""
        encoded = quote(key, safe=URI_COMPONENT_SAFE)
        return f"{self.base_url}/{STORAGE_PUBLIC_PATH}/{bucket}/{encoded}"

    def list_page(
        self, bucket: str, limit: int, offset: int, prefix: str = ""
    ) -> list[FileEntry]:
        """
        Fetch one page of the bucket listing, sorted by name ascending.

        Raises:
            ListingError: On a transport error, non-2xx status or malformed body
        """
        url = f"{self.base_url}/{STORAGE_LIST_PATH}/{bucket}"
        payload = {
            "prefix": prefix,
            "limit": limit,
            "offset": offset,
            "sortBy": {"column": "name", "order": "asc"},
        }
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ListingError(f"Error listing bucket {bucket}: {e}") from e

        if not _is_success(response.status_code):
            raise ListingError(
                f"Listing bucket {bucket} failed with status: "
                f"{response.status_code} {response.reason}"
            )

        try:
            rows: list[dict[str, Any]] = response.json() or []
            return [FileEntry.from_dict(row) for row in rows]
        except (ValueError, KeyError, TypeError) as e:
            raise ListingError(f"Malformed listing response for bucket {bucket}: {e}") from e

    def download(self, bucket: str, key: str) -> bytes:
        """
        Fetch the full body of ``key`` over its public URL.

        Raises:
            DownloadError: On a transport error or any non-2xx status
        """
        url = self.public_url(bucket, key)
        log_with_context(logging.DEBUG, f"Downloading file from URL: {url}", file_name=key)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise DownloadError(f"Error fetching {key}: {e}") from e

        if not _is_success(response.status_code):
            raise DownloadError(
                f"Failed to fetch with status: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        content = response.content
        log_with_context(
            logging.DEBUG,
            f"Successfully downloaded file: {key} (Size: {len(content)} bytes)",
            file_name=key,
        )
        return content


class SourceLister:
    """Restartable, finite iterator over every entry of a source bucket.

    Pages of ``page_size`` entries are requested at successive offsets until
    an empty page comes back. Each page fetch goes through :func:`retry`; an
    error that survives the retries propagates to the caller. Iterating again
    starts over from offset 0.
    """

    def __init__(
        self,
        storage: SupabaseStorage,
        bucket: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.storage = storage
        self.bucket = bucket
        self.page_size = page_size
        self.retry_policy = retry_policy or RetryPolicy()
        self.pages_requested = 0

    def __iter__(self) -> Iterator[FileEntry]:
        offset = 0
        fetched = 0
        self.pages_requested = 0

        while True:
            page = retry(
                lambda: self.storage.list_page(self.bucket, self.page_size, offset),
                f"Fetching files from bucket {self.bucket}",
                self.retry_policy,
            )
            self.pages_requested += 1

            if not page:
                break

            fetched += len(page)
            log_with_context(logging.INFO, f"Fetched {fetched} files so far...")
            yield from page
            offset += self.page_size

    def list_all(self) -> list[FileEntry]:
        """Collapse the whole listing into a list."""
        return list(self)
