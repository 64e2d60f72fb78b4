"""Core domain models for archivist.

These models are pure Python dataclasses with no I/O dependencies.
They describe requests, manifests and the progress snapshots emitted
by the archive pipeline. Snapshots are immutable: every stage returns
a new value built from the previous one.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Self


if TYPE_CHECKING:
    from pathlib import Path


class ObjectType(StrEnum):
    """Category of records exported or imported as one unit."""

    LOG = "log"
    PROFILE = "profile"
    CONTENT = "content"


class ContentEncoding(StrEnum):
    """Encoding of an item file inside the container."""

    IDENTITY = "identity"
    GZIP = "gzip"


class ExportStage(StrEnum):
    BUILDING = "BUILDING"
    BUILDING_MANIFEST = "BUILDING_MANIFEST"
    COMPLETE = "COMPLETE"


class ImportStage(StrEnum):
    EXTRACTING = "EXTRACTING"
    VALIDATING = "VALIDATING"
    IMPORTING = "IMPORTING"
    COMPLETE = "COMPLETE"


class ObjectStage(StrEnum):
    """Stage of a single object type within a pipeline run."""

    QUEUED = "QUEUED"
    INITIALISING = "INITIALISING"
    PROCESSING = "PROCESSING"
    COMPLETE = "COMPLETE"


@dataclass(frozen=True, slots=True)
class ArchiveObject:
    """One requested object type.

    Example:
        >>> ArchiveObject(type=ObjectType.LOG)
        ArchiveObject(type=<ObjectType.LOG: 'log'>)
    """

    type: ObjectType


@dataclass(frozen=True, slots=True)
class ExportRequest:
    """Request to bundle object types into a container.

    Attributes:
        objects: Object types to export, in order.
        target_file_path: Optional destination (local path or URI) the
            finished container is delivered to.
    """

    objects: tuple[ArchiveObject, ...]
    target_file_path: str | None = None

    @property
    def object_types(self) -> list[ObjectType]:
        """Requested object types in request order."""
        return [o.type for o in self.objects]


@dataclass(frozen=True, slots=True)
class ImportRequest:
    """Request to unpack a container back into per-type data.

    Attributes:
        source_file_path: Path or URI of an existing container.
        objects: Object types to import, in order.
    """

    source_file_path: str
    objects: tuple[ArchiveObject, ...]

    @property
    def object_types(self) -> list[ObjectType]:
        """Requested object types in request order."""
        return [o.type for o in self.objects]


@dataclass(frozen=True, slots=True)
class CompletedItem:
    """A file written to the workspace by a delegate's export.

    Attributes:
        file_name: Path of the file relative to the workspace root,
            using forward slashes.
        content_encoding: How the file's bytes are encoded.
        exploded_size: Decompressed size in bytes, when the delegate knows it.
    """

    file_name: str
    content_encoding: ContentEncoding = ContentEncoding.IDENTITY
    exploded_size: int | None = None


@dataclass(frozen=True, slots=True)
class ManifestItem:
    """One item entry in the container manifest."""

    object_type: ObjectType
    file_name: str
    content_encoding: ContentEncoding
    size: int
    exploded_size: int


@dataclass(frozen=True, slots=True)
class ProducerData:
    """Metadata describing the environment that produced a container."""

    id: str
    ver: str
    pid: str = "archivist"
    platform: str = ""

    def to_dict(self) -> dict[str, str]:
        """Serialize for inclusion in the manifest."""
        return {
            "id": self.id,
            "ver": self.ver,
            "pid": self.pid,
            "platform": self.platform,
        }


@dataclass(frozen=True, slots=True)
class ArchiveManifest:
    """Descriptor sealed at the root of every container.

    Attributes:
        format_id: Identifies the container family.
        format_version: Version of the container format.
        timestamp: ISO-8601 creation time.
        producer: Opaque producer metadata.
        items: Every item in the container, grouped by object type.
    """

    format_id: str
    format_version: str
    timestamp: str
    producer: dict[str, Any]
    items: tuple[ManifestItem, ...]

    @property
    def item_count(self) -> int:
        """Number of items; always equal to len(items)."""
        return len(self.items)

    def items_for(self, object_type: ObjectType) -> tuple[ManifestItem, ...]:
        """Return the items of one object type, in manifest order."""
        return tuple(i for i in self.items if i.object_type == object_type)


@dataclass(frozen=True, slots=True)
class ObjectExportProgress:
    stage: ObjectStage = ObjectStage.INITIALISING
    completed_items: tuple[CompletedItem, ...] = ()


@dataclass(frozen=True, slots=True)
class ObjectImportProgress:
    """Import progress of a single object type.

    Items move from pending_items to applied_items as the delegate
    reports them done.
    """

    stage: ObjectStage = ObjectStage.QUEUED
    pending_items: tuple[ManifestItem, ...] = ()
    applied_items: tuple[ManifestItem, ...] = ()


@dataclass(frozen=True, slots=True)
class ExportProgress:
    """Snapshot of an export run.

    Attributes:
        stage: Current pipeline stage.
        per_type: Progress of each requested object type.
        output_file_path: Container path, set only at COMPLETE.
        target_file_path: Delivery destination from the request, if any.
    """

    stage: ExportStage
    per_type: dict[ObjectType, ObjectExportProgress] = field(default_factory=dict)
    output_file_path: Path | None = None
    target_file_path: str | None = None

    def advance(self, stage: ExportStage, **changes: Any) -> Self:
        """Return the next snapshot at the given stage."""
        return replace(self, stage=stage, **changes)


@dataclass(frozen=True, slots=True)
class ImportProgress:
    """Snapshot of an import run.

    Attributes:
        stage: Current pipeline stage.
        per_type: Progress of each requested object type.
        source_file_path: The container being imported.
    """

    stage: ImportStage
    source_file_path: str
    per_type: dict[ObjectType, ObjectImportProgress] = field(default_factory=dict)

    def advance(self, stage: ImportStage, **changes: Any) -> Self:
        """Return the next snapshot at the given stage."""
        return replace(self, stage=stage, **changes)


@dataclass(frozen=True, slots=True)
class ExportParams:
    """Request-level parameters handed to a delegate's export."""

    target_file_path: str | None = None


@dataclass(frozen=True, slots=True)
class ExportContext:
    """Run-level context handed to a delegate's export."""

    workspace_path: Path


@dataclass(frozen=True, slots=True)
class ImportParams:
    """Request-level parameters handed to a delegate's import."""

    source_file_path: str


@dataclass(frozen=True, slots=True)
class ImportContext:
    """Run-level context handed to a delegate's import.

    Attributes:
        workspace_path: Directory the container was unpacked into.
        pending_items: Manifest items of the delegate's object type.
    """

    workspace_path: Path
    pending_items: tuple[ManifestItem, ...] = ()


