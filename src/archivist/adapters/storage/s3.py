"""S3 storage adapter: delivers containers to and fetches them from buckets."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError

from archivist.core.exceptions import (
    ConfigurationError,
    StorageAccessError,
    StorageError,
    StorageNotFoundError,
)


if TYPE_CHECKING:
    from pathlib import Path

    from mypy_boto3_s3 import S3Client

    from archivist.core.ports import ProgressCallback


@dataclass(frozen=True, slots=True)
class S3Location:
    """Bucket and key of an s3:// URI."""

    bucket: str
    key: str

    @classmethod
    def parse(cls, uri: str) -> S3Location:
        """Split s3://bucket/key into its parts.

        Raises:
            ConfigurationError: If the URI is not s3:// or has no key.
        """
        if not uri.startswith("s3://"):
            raise ConfigurationError(f"Invalid S3 URI: {uri}")
        bucket, _, key = uri.removeprefix("s3://").partition("/")
        if not bucket or not key:
            raise ConfigurationError(f"Invalid S3 URI (expected s3://bucket/key): {uri}")
        return cls(bucket, key)


class _TransferProgress:
    """Turns boto3's per-chunk byte increments into (done, total) reports."""

    def __init__(self, progress: ProgressCallback | None, total: int) -> None:
        self._progress = progress
        self._total = total
        self._done = 0
        self._lock = threading.Lock()

    def __call__(self, chunk: int) -> None:
        with self._lock:
            self._done += chunk
            if self._progress:
                self._progress(self._done, self._total)


class S3Storage:
    """StoragePort for s3:// URIs using boto3 managed transfers.

    Large containers are split into multipart transfers by boto3; the
    progress callback sees the running byte count.
    """

    def __init__(self, client: S3Client | None = None) -> None:
        """Initialize S3 storage.

        Args:
            client: Optional boto3 S3 client. If not provided, creates a default client.
        """
        self._client = client or boto3.client("s3")

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        """Fetch a container object into dest.

        Raises:
            StorageNotFoundError: If the bucket or key does not exist.
            StorageAccessError: If access is denied.
            StorageError: For other S3 errors.
        """
        location = S3Location.parse(source)
        try:
            size = self._client.head_object(Bucket=location.bucket, Key=location.key)[
                "ContentLength"
            ]
            self._client.download_file(
                location.bucket,
                location.key,
                str(dest),
                Callback=_TransferProgress(progress, size),
            )
        except ClientError as e:
            raise _storage_error(e, source) from e

    def upload(
        self, local: Path, dest: str, progress: ProgressCallback | None = None
    ) -> None:
        """Deliver a local container to dest.

        Raises:
            StorageNotFoundError: If the bucket does not exist.
            StorageAccessError: If access is denied.
            StorageError: For other S3 errors.
        """
        location = S3Location.parse(dest)
        try:
            self._client.upload_file(
                str(local),
                location.bucket,
                location.key,
                Callback=_TransferProgress(progress, local.stat().st_size),
            )
        except ClientError as e:
            raise _storage_error(e, dest) from e
        except S3UploadFailedError as e:
            # boto3 re-raises the ClientError of a failed put as S3UploadFailedError
            cause = e.__cause__ or e.__context__
            if isinstance(cause, ClientError):
                raise _storage_error(cause, dest) from e
            raise StorageError(f"S3 upload failed: {e}", source=dest, cause=e) from e


def _storage_error(error: ClientError, uri: str) -> StorageError:
    """Map a botocore ClientError onto the StorageError family."""
    code = error.response.get("Error", {}).get("Code", "")
    if code in ("404", "NoSuchKey", "NoSuchBucket"):
        return StorageNotFoundError(f"Object not found: {uri}", source=uri, cause=error)
    if code in ("403", "AccessDenied"):
        return StorageAccessError(f"Access denied: {uri}", source=uri, cause=error)
    return StorageError(f"S3 error ({code}): {error}", source=uri, cause=error)
