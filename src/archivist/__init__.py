"""archivist - Versioned archive containers for heterogeneous data objects.

This library bundles independently-owned object collections (event logs,
profiles, content) into one portable zip container with a manifest, and
validates and unpacks such containers back into per-type data.

Example:
    >>> from archivist import ArchiveObject, ArchiveService, ExportRequest, JsonlLogStore, ObjectType
    >>> service = ArchiveService.from_defaults(log_store=JsonlLogStore(Path("events.jsonl")))
    >>> request = ExportRequest(objects=(ArchiveObject(ObjectType.LOG),))
    >>> *_, done = service.export(request)
    >>> done.output_file_path  # doctest: +SKIP
"""

__version__ = "0.1.0"

from archivist.adapters.container import ZipContainer
from archivist.adapters.delegates import LogRecordDelegate
from archivist.adapters.executor import SynchronousExecutor, ThreadPoolExecutorAdapter
from archivist.adapters.producer import EnvironmentProducer
from archivist.adapters.storage import (
    FilesystemStorage,
    RouterStorage,
    S3Storage,
    create_router,
)
from archivist.adapters.stores import JsonlLogStore
from archivist.config import ArchiveSettings, resolve_cache_dir
from archivist.core.dispatch import DelegateRegistry
from archivist.core.exceptions import (
    ArchiveIntegrityError,
    ArchivistError,
    ConfigurationError,
    ContainerError,
    DelegateError,
    NotSupportedError,
    RequestValidationError,
    StorageAccessError,
    StorageError,
    StorageNotFoundError,
)
from archivist.core.manifest import FORMAT_ID, FORMAT_VERSION, MANIFEST_FILE_NAME
from archivist.core.models import (
    ArchiveManifest,
    ArchiveObject,
    CompletedItem,
    ContentEncoding,
    ExportProgress,
    ExportRequest,
    ExportStage,
    ImportProgress,
    ImportRequest,
    ImportStage,
    ManifestItem,
    ObjectExportProgress,
    ObjectImportProgress,
    ObjectStage,
    ObjectType,
    ProducerData,
)
from archivist.core.ports import (
    ContainerPort,
    LogStorePort,
    NullProgressReporter,
    ObjectDelegate,
    ProducerPort,
    ProgressCallback,
    ProgressReporter,
    StoragePort,
)
from archivist.core.services import ArchiveService
from archivist.progress import RichProgressReporter


__all__ = [
    "FORMAT_ID",
    "FORMAT_VERSION",
    "MANIFEST_FILE_NAME",
    "ArchiveIntegrityError",
    "ArchiveManifest",
    "ArchiveObject",
    "ArchiveService",
    "ArchiveSettings",
    "ArchivistError",
    "CompletedItem",
    "ConfigurationError",
    "ContainerError",
    "ContainerPort",
    "ContentEncoding",
    "DelegateError",
    "DelegateRegistry",
    "EnvironmentProducer",
    "ExportProgress",
    "ExportRequest",
    "ExportStage",
    "FilesystemStorage",
    "ImportProgress",
    "ImportRequest",
    "ImportStage",
    "JsonlLogStore",
    "LogRecordDelegate",
    "LogStorePort",
    "ManifestItem",
    "NotSupportedError",
    "NullProgressReporter",
    "ObjectDelegate",
    "ObjectExportProgress",
    "ObjectImportProgress",
    "ObjectStage",
    "ObjectType",
    "ProducerData",
    "ProducerPort",
    "ProgressCallback",
    "ProgressReporter",
    "RequestValidationError",
    "RichProgressReporter",
    "RouterStorage",
    "S3Storage",
    "StorageAccessError",
    "StorageError",
    "StorageNotFoundError",
    "StoragePort",
    "SynchronousExecutor",
    "ThreadPoolExecutorAdapter",
    "ZipContainer",
    "__version__",
    "create_router",
    "resolve_cache_dir",
]
