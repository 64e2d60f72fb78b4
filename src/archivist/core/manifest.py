"""Manifest codec: builds, serializes and validates the container descriptor.

The manifest is a single JSON document at the container root. It is the
only source of truth on import for which items exist per object type.

Wire format::

    {
      "formatId": "archivist.data.archive",
      "formatVersion": "1.0",
      "timestamp": "2024-05-01T10:00:00+00:00",
      "producer": {...},
      "itemCount": 1,
      "items": [
        {"objectType": "log", "fileName": "log/log-00001.jsonl.gz",
         "contentEncoding": "gzip", "size": 120, "explodedSize": 512}
      ]
    }
"""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any

from archivist.core.exceptions import ArchiveIntegrityError, DelegateError
from archivist.core.models import (
    ArchiveManifest,
    ContentEncoding,
    ManifestItem,
    ObjectType,
)


if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from archivist.core.models import ObjectExportProgress, ProducerData


logger = logging.getLogger(__name__)

FORMAT_ID = "archivist.data.archive"
FORMAT_VERSION = "1.0"
MANIFEST_FILE_NAME = "manifest.json"

# Chunk size for measuring decompressed sizes (64KB)
_CHUNK_SIZE = 64 * 1024


def build_manifest(
    per_type: Mapping[ObjectType, ObjectExportProgress],
    workspace: Path,
    producer: ProducerData,
    timestamp: datetime,
) -> ArchiveManifest:
    """Flatten per-type export results into a manifest.

    Items keep the order of per_type, and within a type the order the
    delegate reported them in.

    Args:
        per_type: Terminal export progress of each object type.
        workspace: Workspace root the item files live under.
        producer: Producer metadata to stamp.
        timestamp: Creation time to stamp.

    Returns:
        The manifest, ready to be encoded.

    Raises:
        DelegateError: If a delegate reported a file that is not on disk or
            whose gzip content cannot be decoded.
    """
    items: list[ManifestItem] = []
    for object_type, progress in per_type.items():
        for completed in progress.completed_items:
            path = workspace / completed.file_name
            try:
                size = path.stat().st_size
            except FileNotFoundError as e:
                raise DelegateError(object_type, e) from e

            exploded_size = completed.exploded_size
            if exploded_size is None:
                try:
                    exploded_size = measure_exploded_size(path, completed.content_encoding)
                except (OSError, EOFError, zlib.error) as e:
                    # BadGzipFile is an OSError
                    raise DelegateError(object_type, e) from e

            items.append(
                ManifestItem(
                    object_type=object_type,
                    file_name=completed.file_name,
                    content_encoding=completed.content_encoding,
                    size=size,
                    exploded_size=exploded_size,
                )
            )

    return ArchiveManifest(
        format_id=FORMAT_ID,
        format_version=FORMAT_VERSION,
        timestamp=timestamp.isoformat(),
        producer=producer.to_dict(),
        items=tuple(items),
    )


def measure_exploded_size(path: Path, encoding: ContentEncoding) -> int:
    """Return the decoded size of an item file in bytes."""
    if encoding == ContentEncoding.IDENTITY:
        return path.stat().st_size

    total = 0
    with gzip.open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            total += len(chunk)
    return total


def encode_manifest(manifest: ArchiveManifest) -> str:
    """Serialize a manifest to canonical JSON.

    Keys are sorted and separators are compact, so equal manifests always
    encode to identical text.
    """
    data = {
        "formatId": manifest.format_id,
        "formatVersion": manifest.format_version,
        "timestamp": manifest.timestamp,
        "producer": manifest.producer,
        "itemCount": manifest.item_count,
        "items": [
            {
                "objectType": str(item.object_type),
                "fileName": item.file_name,
                "contentEncoding": str(item.content_encoding),
                "size": item.size,
                "explodedSize": item.exploded_size,
            }
            for item in manifest.items
        ],
    }
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def decode_manifest(text: str, path: Path | None = None) -> ArchiveManifest:
    """Parse and validate manifest text.

    Args:
        text: The manifest JSON.
        path: Manifest location, for error context.

    Returns:
        The decoded manifest.

    Raises:
        ArchiveIntegrityError: If the text is not JSON, a required field is
            missing or mistyped, the format is not ours, or itemCount does
            not match the items.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ArchiveIntegrityError(
            "Invalid manifest: not valid JSON", path=path, cause=e
        ) from e

    if not isinstance(data, dict):
        raise ArchiveIntegrityError("Invalid manifest: expected an object", path=path)

    format_id = _require(data, "formatId", str, path)
    if format_id != FORMAT_ID:
        raise ArchiveIntegrityError(
            f"Invalid manifest: unknown format '{format_id}'", path=path
        )

    format_version = _require(data, "formatVersion", str, path)
    if format_version.split(".")[0] != FORMAT_VERSION.split(".")[0]:
        raise ArchiveIntegrityError(
            f"Invalid manifest: unsupported format version '{format_version}'",
            path=path,
        )

    timestamp = _require(data, "timestamp", str, path)
    producer = _require(data, "producer", dict, path)
    item_count = _require(data, "itemCount", int, path)
    raw_items = _require(data, "items", list, path)

    items = tuple(_decode_item(raw, index, path) for index, raw in enumerate(raw_items))
    if item_count != len(items):
        raise ArchiveIntegrityError(
            f"Invalid manifest: itemCount is {item_count} but {len(items)} items are listed",
            path=path,
        )

    return ArchiveManifest(
        format_id=format_id,
        format_version=format_version,
        timestamp=timestamp,
        producer=producer,
        items=items,
    )


def _decode_item(raw: object, index: int, path: Path | None) -> ManifestItem:
    """Decode one entry of the items array."""
    if not isinstance(raw, dict):
        raise ArchiveIntegrityError(
            f"Invalid manifest: item {index} is not an object", path=path
        )

    where = f"items[{index}]."
    object_type = _require(raw, "objectType", str, path, where)
    file_name = _require(raw, "fileName", str, path, where)
    encoding = _require(raw, "contentEncoding", str, path, where)
    size = _require(raw, "size", int, path, where)
    exploded_size = _require(raw, "explodedSize", int, path, where)

    try:
        parsed_type = ObjectType(object_type)
        parsed_encoding = ContentEncoding(encoding)
    except ValueError as e:
        raise ArchiveIntegrityError(
            f"Invalid manifest: item {index}: {e}", path=path, cause=e
        ) from e

    if not _is_safe_relative(file_name):
        raise ArchiveIntegrityError(
            f"Invalid manifest: item {index} has unsafe fileName '{file_name}'",
            path=path,
        )
    if size < 0 or exploded_size < 0:
        raise ArchiveIntegrityError(
            f"Invalid manifest: item {index} has a negative size", path=path
        )

    return ManifestItem(
        object_type=parsed_type,
        file_name=file_name,
        content_encoding=parsed_encoding,
        size=size,
        exploded_size=exploded_size,
    )


def _require(
    data: dict[str, Any],
    key: str,
    expected: type,
    path: Path | None,
    where: str = "",
) -> Any:
    """Fetch a required field, checking its JSON type."""
    if key not in data:
        raise ArchiveIntegrityError(
            f"Invalid manifest: missing field '{where}{key}'", path=path
        )
    value = data[key]
    # bool is a subclass of int but never a valid count or size
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ArchiveIntegrityError(
            f"Invalid manifest: field '{where}{key}' must be {expected.__name__}",
            path=path,
        )
    return value


def _is_safe_relative(file_name: str) -> bool:
    """Check that a file name stays inside the workspace."""
    if not file_name or "\\" in file_name:
        return False
    pure = PurePosixPath(file_name)
    return not pure.is_absolute() and ".." not in pure.parts


def select_items(
    manifest: ArchiveManifest, object_types: Sequence[ObjectType]
) -> dict[ObjectType, tuple[ManifestItem, ...]]:
    """Select the manifest items of each requested object type.

    Args:
        manifest: The decoded manifest.
        object_types: Requested object types.

    Returns:
        Mapping of each requested type to its items, in request order.

    Raises:
        ArchiveIntegrityError: If a requested type has no items.
    """
    selected: dict[ObjectType, tuple[ManifestItem, ...]] = {}
    for object_type in object_types:
        items = manifest.items_for(object_type)
        if not items:
            raise ArchiveIntegrityError(
                f"Nothing to import for type '{object_type}'"
            )
        selected[object_type] = items
    return selected


def write_manifest(workspace: Path, manifest: ArchiveManifest) -> Path:
    """Write the manifest at the workspace root.

    The file is created exclusively: a workspace is sealed with exactly
    one manifest.

    Raises:
        ArchiveIntegrityError: If a manifest already exists in the workspace.
    """
    path = workspace / MANIFEST_FILE_NAME
    try:
        with path.open("x", encoding="utf-8") as f:
            f.write(encode_manifest(manifest))
    except FileExistsError as e:
        raise ArchiveIntegrityError(
            "Manifest already exists in workspace", path=path, cause=e
        ) from e

    logger.debug("Wrote manifest with %d item(s) to %s", manifest.item_count, path)
    return path


def read_manifest(workspace: Path) -> ArchiveManifest:
    """Read and decode the manifest at the workspace root.

    Raises:
        ArchiveIntegrityError: If the manifest is missing or invalid.
    """
    path = workspace / MANIFEST_FILE_NAME
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ArchiveIntegrityError(
            f"Invalid manifest: {MANIFEST_FILE_NAME} not found in container",
            path=path,
            cause=e,
        ) from e
    except UnicodeDecodeError as e:
        raise ArchiveIntegrityError(
            "Invalid manifest: not UTF-8 text", path=path, cause=e
        ) from e

    return decode_manifest(text, path=path)
