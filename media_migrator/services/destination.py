"""Cloudflare R2 (S3-compatible) destination: existence probes and uploads."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from media_migrator.constants import NOT_FOUND_ERROR_CODES, URI_COMPONENT_SAFE
from media_migrator.exceptions import ExistenceCheckError, UploadError
from media_migrator.types import ExistenceResult
from media_migrator.utils.logging import log_with_context


def create_r2_client(endpoint: str, access_key: str, secret_key: str) -> Any:
    """Build a boto3 S3 client pointed at an R2 account endpoint.

    botocore's own retries are turned off; retrying is the pipeline's job.
    """
    return boto3.client(
        "s3",
        endpoint_url=endpoint,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        region_name="auto",
        config=Config(
            signature_version="s3v4",
            retries={"max_attempts": 1, "mode": "standard"},
        ),
    )


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class R2Destination:
    """Destination store wrapping an S3 client.

    Args:
        client: A boto3 S3 client (or anything with ``head_object``/``put_object``)
        endpoint: Endpoint URL, used to build object URLs
        public_url: Optional public base URL for objects; when set it replaces
            ``{endpoint}/{bucket}`` in :meth:`object_url`
    """

    def __init__(self, client: Any, endpoint: str, public_url: str | None = None) -> None:
        self.client = client
        self.endpoint = endpoint.rstrip("/")
        self.public_url = public_url.rstrip("/") if public_url else None

    def check_exists(self, bucket: str, key: str) -> ExistenceResult:
        """
        Probe ``key`` with a HEAD request, without transferring the body.

        A 404 / ``NoSuchKey`` / ``NotFound`` answer is a valid negative result;
        anything else that goes wrong is reported as an error result.
        """
        try:
            self.client.head_object(Bucket=bucket, Key=key)
            return ExistenceResult.exists()
        except ClientError as e:
            code = _error_code(e)
            if code in NOT_FOUND_ERROR_CODES:
                return ExistenceResult.not_found()
            return ExistenceResult.failed(
                ExistenceCheckError(f"HEAD {bucket}/{key} failed ({code}): {e}")
            )
        except BotoCoreError as e:
            return ExistenceResult.failed(
                ExistenceCheckError(f"HEAD {bucket}/{key} failed: {e}")
            )

    def upload(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        """
        Write ``body`` to ``key``.

        Raises:
            UploadError: When the PUT is rejected or the transport fails
        """
        try:
            self.client.put_object(
                Bucket=bucket, Key=key, Body=body, ContentType=content_type
            )
        except ClientError as e:
            raise UploadError(
                f"Uploading {key} to {bucket} failed ({_error_code(e)}): {e}"
            ) from e
        except BotoCoreError as e:
            raise UploadError(f"Uploading {key} to {bucket} failed: {e}") from e

        log_with_context(
            logging.DEBUG,
            f"PUT {bucket}/{key} ({len(body)} bytes, {content_type})",
            file_name=key,
        )

    def object_url(self, bucket: str, key: str) -> str:
        """URL the migrated object is reachable at, as stored in backing records."""
        if self.public_url:
            return f"{self.public_url}/{quote(key, safe=URI_COMPONENT_SAFE)}"
        return f"{self.endpoint}/{bucket}/{quote(key, safe=URI_COMPONENT_SAFE)}"
