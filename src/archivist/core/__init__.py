"""Core domain module for archivist.

This module contains the domain models, port definitions, the manifest
codec and the pipeline orchestration. It depends only on the ports,
never on concrete adapters.
"""

from archivist.core.models import (
    ArchiveManifest,
    ArchiveObject,
    ExportProgress,
    ExportRequest,
    ImportProgress,
    ImportRequest,
    ManifestItem,
    ObjectType,
)
from archivist.core.ports import (
    ContainerPort,
    ObjectDelegate,
    ProducerPort,
    ProgressCallback,
    StoragePort,
)


__all__ = [
    "ArchiveManifest",
    "ArchiveObject",
    "ContainerPort",
    "ExportProgress",
    "ExportRequest",
    "ImportProgress",
    "ImportRequest",
    "ManifestItem",
    "ObjectDelegate",
    "ObjectType",
    "ProducerPort",
    "ProgressCallback",
    "StoragePort",
]
