"""RouterStorage: picks a storage backend from the URI scheme."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from archivist.core.exceptions import ConfigurationError
from archivist.core.path_utils import parse_uri_scheme, strip_file_scheme


if TYPE_CHECKING:
    from pathlib import Path

    from archivist.core.ports import ProgressCallback, StoragePort


class RouterStorage:
    """StoragePort that forwards each call to the backend for its scheme.

    Backends are keyed by scheme ("s3", "file"); the None key handles
    plain local paths. file:// URIs reach their backend as plain paths.
    """

    def __init__(self, backends: dict[str | None, StoragePort]) -> None:
        self._backends = backends

    def resolve(self, uri: str) -> tuple[StoragePort, str]:
        """Return the backend for uri and the location to hand it.

        Raises:
            ConfigurationError: If no backend handles the scheme.
        """
        scheme = parse_uri_scheme(uri)
        backend = self._backends.get(scheme)
        if backend is None:
            where = f"scheme '{scheme}'" if scheme else "local paths"
            raise ConfigurationError(f"No storage backend registered for {where}: {uri}")
        return backend, strip_file_scheme(uri) if scheme == "file" else uri

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        backend, location = self.resolve(source)
        backend.download(location, dest, progress)

    def upload(
        self, local: Path, dest: str, progress: ProgressCallback | None = None
    ) -> None:
        backend, location = self.resolve(dest)
        backend.upload(local, location, progress)


def create_router(s3_client: Any | None = None) -> RouterStorage:
    """Create a RouterStorage for local paths, file:// and s3:// URIs.

    The S3 backend is created lazily so local-only use never needs AWS
    credentials or a region.

    Args:
        s3_client: Optional boto3 S3 client, used on first s3:// access.
    """
    from archivist.adapters.storage.filesystem import FilesystemStorage

    local = FilesystemStorage()
    return RouterStorage(
        backends={"s3": _LazyS3Storage(s3_client), "file": local, None: local}
    )


class _LazyS3Storage:
    """Builds the S3Storage (and its boto3 client) on first use."""

    def __init__(self, client: Any | None) -> None:
        self._client = client
        self._storage: StoragePort | None = None

    def _get(self) -> StoragePort:
        if self._storage is None:
            from archivist.adapters.storage.s3 import S3Storage

            self._storage = S3Storage(client=self._client)
        return self._storage

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        self._get().download(source, dest, progress)

    def upload(
        self, local: Path, dest: str, progress: ProgressCallback | None = None
    ) -> None:
        self._get().upload(local, dest, progress)
