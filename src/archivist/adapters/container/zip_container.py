"""Zip container adapter implementing ContainerPort."""

from __future__ import annotations

import logging
import os
import zipfile
import zlib
from pathlib import Path, PurePosixPath

from archivist.core.exceptions import ContainerError


logger = logging.getLogger(__name__)


class ZipContainer:
    """Packs a directory into a zip file with the directory as archive root.

    Item files inside the container may already be gzip encoded, so the
    compression level is configurable.

    Attributes:
        compression: zipfile compression method.
    """

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED) -> None:
        """Initialize the packer.

        Args:
            compression: zipfile compression constant (e.g. ZIP_STORED).
        """
        self.compression = compression

    def pack(self, source_dir: Path, target_file: Path) -> None:
        """Pack every file under source_dir into target_file.

        The archive is written to a partial file first and renamed into
        place, so target_file either does not exist or is complete.

        Args:
            source_dir: Directory whose contents become the archive root.
            target_file: Container path to create (replaced if present).

        Raises:
            ContainerError: If the directory cannot be read or the file written.
        """
        partial = target_file.with_name(f"{target_file.name}.partial")
        try:
            target_file.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(partial, "w", compression=self.compression) as zf:
                for path in sorted(source_dir.rglob("*")):
                    if path.is_file():
                        zf.write(path, path.relative_to(source_dir).as_posix())
            os.replace(partial, target_file)
        except OSError as e:
            if partial.exists():
                partial.unlink()
            raise ContainerError(
                f"Failed to pack {source_dir} into {target_file}",
                path=target_file,
                cause=e,
            ) from e

        logger.debug("Packed %s into %s", source_dir, target_file)

    def unpack(self, source_file: Path, target_dir: Path) -> None:
        """Extract source_file into target_dir.

        Args:
            source_file: Zip container to read.
            target_dir: Directory to extract into (created if missing).

        Raises:
            ContainerError: If the file is missing or corrupt, or
                contains members that would land outside target_dir.
        """
        try:
            with zipfile.ZipFile(source_file) as zf:
                for name in zf.namelist():
                    if not _is_safe_member(name):
                        raise ContainerError(
                            f"Unsafe member '{name}' in {source_file}",
                            path=source_file,
                        )
                target_dir.mkdir(parents=True, exist_ok=True)
                zf.extractall(target_dir)
        except zipfile.BadZipFile as e:
            raise ContainerError(
                f"Not a valid container: {source_file}", path=source_file, cause=e
            ) from e
        except (zlib.error, EOFError, NotImplementedError, RuntimeError) as e:
            # Damaged member data, or members zipfile cannot decode (encrypted)
            raise ContainerError(
                f"Corrupt or unreadable container: {source_file} ({e})",
                path=source_file,
                cause=e,
            ) from e
        except OSError as e:
            raise ContainerError(
                f"Failed to unpack {source_file}", path=source_file, cause=e
            ) from e

        logger.debug("Unpacked %s into %s", source_file, target_dir)


def _is_safe_member(name: str) -> bool:
    """Check that an archive member stays inside the extraction directory."""
    pure = PurePosixPath(name.replace("\\", "/"))
    return not pure.is_absolute() and ".." not in pure.parts and ":" not in name
