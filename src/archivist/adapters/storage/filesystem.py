"""Filesystem storage adapter for delivering and fetching containers locally."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from archivist.core.exceptions import StorageError, StorageNotFoundError


if TYPE_CHECKING:
    from archivist.core.ports import ProgressCallback


_CHUNK_SIZE = 64 * 1024


class FilesystemStorage:
    """StoragePort for plain paths, e.g. a shared drive or mounted volume.

    Delivery and fetch are both a chunked copy; missing parent
    directories of the destination are created.
    """

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        """Copy the container at source to dest."""
        _copy_container(Path(source), dest, progress)

    def upload(
        self, local: Path, dest: str, progress: ProgressCallback | None = None
    ) -> None:
        """Copy the local container to dest."""
        _copy_container(local, Path(dest), progress)


def _copy_container(
    source: Path, dest: Path, progress: ProgressCallback | None
) -> None:
    """Copy source to dest, reporting (bytes_copied, total_bytes).

    Raises:
        StorageNotFoundError: If source is not a file.
        StorageError: If reading or writing fails.
    """
    if not source.is_file():
        raise StorageNotFoundError(f"File not found: {source}", source=str(source))

    total = source.stat().st_size
    copied = 0
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with source.open("rb") as src, dest.open("wb") as dst:
            for chunk in iter(lambda: src.read(_CHUNK_SIZE), b""):
                dst.write(chunk)
                copied += len(chunk)
                if progress:
                    progress(copied, total)
    except OSError as e:
        raise StorageError(f"Failed to write {dest}: {e}", source=str(dest), cause=e) from e
