"""Core domain services for archivist."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from archivist.core.aggregation import aggregate_progress
from archivist.core.dispatch import DelegateRegistry, fan_out, object_task
from archivist.core.exceptions import ConfigurationError, RequestValidationError
from archivist.core.manifest import (
    build_manifest,
    read_manifest,
    select_items,
    write_manifest,
)
from archivist.core.models import (
    ArchiveObject,
    ExportContext,
    ExportParams,
    ExportProgress,
    ExportRequest,
    ExportStage,
    ImportContext,
    ImportParams,
    ImportProgress,
    ImportRequest,
    ImportStage,
    ManifestItem,
    ObjectImportProgress,
    ObjectStage,
    ObjectType,
)
from archivist.core.path_utils import (
    archive_file_name,
    is_remote,
    strip_file_scheme,
    uri_basename,
)
from archivist.core.ports import (
    ContainerPort,
    ExecutorPort,
    NullProgressReporter,
    ObjectDelegate,
    ProducerPort,
    ProgressReporter,
    StoragePort,
)
from archivist.core.workspace import workspace


if TYPE_CHECKING:
    from archivist.config import ArchiveSettings
    from archivist.core.ports import LogStorePort


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Run:
    """Fixed inputs shared by every stage of one pipeline run."""

    object_types: list[ObjectType]
    workspace: Path
    reporter: ProgressReporter


class ArchiveService:
    """Orchestrates exporting object types into containers and importing them back.

    Both directions run a fixed sequence of stages inside a fresh workspace
    and yield one immutable progress snapshot per stage. Each stage receives
    the previous snapshot and returns the next.

    Example:
        >>> service = ArchiveService.from_defaults(log_store=JsonlLogStore(path))
        >>> for snapshot in service.export(ExportRequest(objects=(ArchiveObject(ObjectType.LOG),))):
        ...     print(snapshot.stage)
    """

    def __init__(
        self,
        delegates: DelegateRegistry | Mapping[ObjectType, ObjectDelegate],
        container: ContainerPort,
        producer: ProducerPort,
        cache_dir: Path,
        executor: ExecutorPort | None = None,
        storage: StoragePort | None = None,
        *,
        keep_workspace: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not isinstance(delegates, DelegateRegistry):
            delegates = DelegateRegistry(delegates)
        if executor is None:
            from archivist.adapters.executor import SynchronousExecutor

            executor = SynchronousExecutor()

        self._delegates = delegates
        self._container = container
        self._producer = producer
        self._cache_dir = cache_dir
        self._executor = executor
        self._storage = storage
        self._keep_workspace = keep_workspace
        self._clock = clock or (lambda: datetime.now(UTC))

    @classmethod
    def from_defaults(
        cls,
        log_store: LogStorePort | None = None,
        settings: ArchiveSettings | None = None,
        s3_client: Any | None = None,
    ) -> ArchiveService:
        """Create an ArchiveService with default adapters.

        Args:
            log_store: Record store for the log delegate. Without one, no
                object type is supported.
            settings: Settings to apply; defaults to ArchiveSettings().
            s3_client: Optional boto3 S3 client for s3:// delivery and fetch.

        Returns:
            ArchiveService with ZipContainer, EnvironmentProducer,
            RouterStorage and an executor sized by settings.max_workers.
        """
        from archivist.adapters.container import ZipContainer
        from archivist.adapters.delegates import LogRecordDelegate
        from archivist.adapters.executor import (
            SynchronousExecutor,
            ThreadPoolExecutorAdapter,
        )
        from archivist.adapters.producer import EnvironmentProducer
        from archivist.adapters.storage import create_router
        from archivist.config import ArchiveSettings

        if settings is None:
            settings = ArchiveSettings()

        registry = DelegateRegistry()
        if log_store is not None:
            registry.register(
                ObjectType.LOG,
                LogRecordDelegate(log_store, batch_size=settings.batch_size),
            )

        executor: ExecutorPort
        if settings.max_workers > 1:
            executor = ThreadPoolExecutorAdapter(max_workers=settings.max_workers)
        else:
            executor = SynchronousExecutor()

        return cls(
            delegates=registry,
            container=ZipContainer(),
            producer=EnvironmentProducer(),
            cache_dir=settings.resolved_cache_dir(),
            executor=executor,
            storage=create_router(s3_client),
            keep_workspace=settings.keep_workspace,
        )

    @property
    def cache_dir(self) -> Path:
        """Directory holding workspaces and finished containers."""
        return self._cache_dir

    @property
    def supported_types(self) -> list[ObjectType]:
        """Object types this service has delegates for."""
        return self._delegates.supported_types

    def export(
        self,
        request: ExportRequest,
        progress: ProgressReporter | None = None,
    ) -> Iterator[ExportProgress]:
        """Export the requested object types into one container.

        The request is validated immediately; nothing touches the disk
        until the returned iterator is consumed. Closing the iterator early
        stops the pipeline after the current stage and removes the
        workspace, but delegate work already in flight is not interrupted.

        Args:
            request: Object types to export and optional delivery target.
            progress: Optional reporter for per-type delegate progress.

        Returns:
            Iterator of snapshots: BUILDING, BUILDING_MANIFEST, COMPLETE.
            The COMPLETE snapshot carries output_file_path.

        Raises:
            RequestValidationError: If no object type (or a duplicate) is requested.
        """
        object_types = _validate_objects(request.objects)
        return self._run(
            request,
            object_types,
            steps=(self._build_objects, self._build_manifest, self._pack_container),
            initial=ExportProgress(
                stage=ExportStage.BUILDING,
                target_file_path=request.target_file_path,
            ),
            reporter=progress or NullProgressReporter(),
        )

    def import_archive(
        self,
        request: ImportRequest,
        progress: ProgressReporter | None = None,
    ) -> Iterator[ImportProgress]:
        """Validate a container and import the requested object types from it.

        Args:
            request: Container location and object types to import.
            progress: Optional reporter for per-type delegate progress.

        Returns:
            Iterator of snapshots: EXTRACTING, VALIDATING, IMPORTING, COMPLETE.

        Raises:
            RequestValidationError: If no object type (or a duplicate) is requested.
        """
        object_types = _validate_objects(request.objects)
        return self._run(
            request,
            object_types,
            steps=(
                self._extract_container,
                self._validate_manifest,
                self._import_objects,
                self._complete_import,
            ),
            initial=ImportProgress(
                stage=ImportStage.EXTRACTING,
                source_file_path=request.source_file_path,
                per_type={t: ObjectImportProgress() for t in object_types},
            ),
            reporter=progress or NullProgressReporter(),
        )

    def _run(
        self,
        request: Any,
        object_types: list[ObjectType],
        steps: Sequence[Callable[[Any, Any, _Run], Any]],
        initial: Any,
        reporter: ProgressReporter,
    ) -> Iterator[Any]:
        """Run stages in order inside a fresh workspace, yielding each snapshot."""
        snapshot = initial
        with workspace(self._cache_dir, keep=self._keep_workspace) as path:
            run = _Run(object_types=object_types, workspace=path, reporter=reporter)
            for step in steps:
                snapshot = step(snapshot, request, run)
                logger.info("Stage %s reached", snapshot.stage)
                yield snapshot

    # Export stages

    def _build_objects(
        self, snapshot: ExportProgress, request: ExportRequest, run: _Run
    ) -> ExportProgress:
        params = ExportParams(target_file_path=request.target_file_path)
        context = ExportContext(workspace_path=run.workspace)
        tasks = [
            object_task(
                object_type,
                self._delegates,
                lambda delegate: delegate.export_objects(params, context),
                run.reporter,
                label="export",
                total=0,
                measure=lambda p: len(p.completed_items),
            )
            for object_type in run.object_types
        ]
        results = fan_out(tasks, self._executor)
        return snapshot.advance(
            ExportStage.BUILDING,
            per_type=aggregate_progress(results, run.object_types),
        )

    def _build_manifest(
        self, snapshot: ExportProgress, request: ExportRequest, run: _Run
    ) -> ExportProgress:
        manifest = build_manifest(
            snapshot.per_type,
            run.workspace,
            self._producer.collect(),
            self._clock(),
        )
        write_manifest(run.workspace, manifest)
        return snapshot.advance(ExportStage.BUILDING_MANIFEST)

    def _pack_container(
        self, snapshot: ExportProgress, request: ExportRequest, run: _Run
    ) -> ExportProgress:
        output = self._cache_dir / archive_file_name(self._clock())
        self._container.pack(run.workspace, output)
        logger.info("Packed container %s", output)

        if request.target_file_path:
            storage = self._require_storage(request.target_file_path)
            storage.upload(output, request.target_file_path)
            logger.info("Delivered container to %s", request.target_file_path)

        return snapshot.advance(ExportStage.COMPLETE, output_file_path=output)

    # Import stages

    def _extract_container(
        self, snapshot: ImportProgress, request: ImportRequest, run: _Run
    ) -> ImportProgress:
        source = request.source_file_path
        if is_remote(source):
            storage = self._require_storage(source)
            local = run.workspace / ".incoming" / uri_basename(source)
            local.parent.mkdir()
            storage.download(source, local, lambda _done, _total: None)
        else:
            local = Path(strip_file_scheme(source))

        self._container.unpack(local, run.workspace)
        return snapshot.advance(ImportStage.EXTRACTING)

    def _validate_manifest(
        self, snapshot: ImportProgress, request: ImportRequest, run: _Run
    ) -> ImportProgress:
        manifest = read_manifest(run.workspace)
        selected = select_items(manifest, run.object_types)
        return snapshot.advance(
            ImportStage.VALIDATING,
            per_type={
                object_type: ObjectImportProgress(
                    stage=ObjectStage.INITIALISING, pending_items=items
                )
                for object_type, items in selected.items()
            },
        )

    def _import_objects(
        self, snapshot: ImportProgress, request: ImportRequest, run: _Run
    ) -> ImportProgress:
        params = ImportParams(source_file_path=request.source_file_path)
        tasks = [
            self._import_task(
                object_type, params, snapshot.per_type[object_type].pending_items, run
            )
            for object_type in run.object_types
        ]
        results = fan_out(tasks, self._executor)
        return snapshot.advance(
            ImportStage.IMPORTING,
            per_type=aggregate_progress(results, run.object_types),
        )

    def _import_task(
        self,
        object_type: ObjectType,
        params: ImportParams,
        pending_items: tuple[ManifestItem, ...],
        run: _Run,
    ) -> Callable[[], tuple[ObjectType, ObjectImportProgress]]:
        context = ImportContext(workspace_path=run.workspace, pending_items=pending_items)
        return object_task(
            object_type,
            self._delegates,
            lambda delegate: delegate.import_objects(params, context),
            run.reporter,
            label="import",
            total=len(pending_items),
            measure=lambda p: len(p.applied_items),
        )

    def _complete_import(
        self, snapshot: ImportProgress, request: ImportRequest, run: _Run
    ) -> ImportProgress:
        return snapshot.advance(ImportStage.COMPLETE)

    def _require_storage(self, uri: str) -> StoragePort:
        if self._storage is None:
            raise ConfigurationError(f"No storage backend configured for '{uri}'")
        return self._storage


def _validate_objects(objects: Sequence[ArchiveObject]) -> list[ObjectType]:
    """Check a request's object list before any I/O.

    Raises:
        RequestValidationError: If the list is empty or repeats a type.
    """
    if not objects:
        raise RequestValidationError("No archive objects requested")

    object_types: list[ObjectType] = []
    for obj in objects:
        if obj.type in object_types:
            raise RequestValidationError(
                f"Object type '{obj.type}' requested more than once"
            )
        object_types.append(obj.type)
    return object_types
