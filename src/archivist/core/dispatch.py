"""Delegate dispatch and concurrent fan-out over object types.

Building the list of per-type tasks never fails. Resolving a delegate
happens inside each task, so an unsupported type surfaces as a task
failure through the same join as any delegate error.
"""

from __future__ import annotations

import logging
from concurrent.futures import as_completed, wait
from typing import TYPE_CHECKING, TypeVar, cast

from archivist.core.exceptions import ArchivistError, DelegateError, NotSupportedError


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping, Sequence
    from concurrent.futures import Future

    from archivist.core.models import ObjectType
    from archivist.core.ports import ExecutorPort, ObjectDelegate, ProgressReporter


logger = logging.getLogger(__name__)

P = TypeVar("P")
R = TypeVar("R")


class DelegateRegistry:
    """Maps each object type to the delegate that handles it.

    Example:
        >>> registry = DelegateRegistry({ObjectType.LOG: LogRecordDelegate(store)})
        >>> registry.resolve(ObjectType.LOG)  # doctest: +SKIP
    """

    def __init__(self, delegates: Mapping[ObjectType, ObjectDelegate] | None = None) -> None:
        self._delegates: dict[ObjectType, ObjectDelegate] = dict(delegates or {})

    def register(self, object_type: ObjectType, delegate: ObjectDelegate) -> None:
        """Register (or replace) the delegate for an object type."""
        self._delegates[object_type] = delegate

    def resolve(self, object_type: ObjectType) -> ObjectDelegate:
        """Look up the delegate for an object type.

        Raises:
            NotSupportedError: If no delegate is registered for the type.
        """
        try:
            return self._delegates[object_type]
        except KeyError:
            raise NotSupportedError(
                object_type, available=self.supported_types
            ) from None

    @property
    def supported_types(self) -> list[ObjectType]:
        """Object types with a registered delegate."""
        return list(self._delegates)

    def __contains__(self, object_type: object) -> bool:
        return object_type in self._delegates


def object_task(
    object_type: ObjectType,
    registry: DelegateRegistry,
    operation: Callable[[ObjectDelegate], Iterator[P]],
    reporter: ProgressReporter,
    *,
    label: str,
    total: int,
    measure: Callable[[P], int],
) -> Callable[[], tuple[ObjectType, P]]:
    """Build the fan-out task for one object type.

    The returned callable resolves the delegate, drains its progress
    iterator and returns the terminal snapshot.

    Args:
        object_type: The object type the task handles.
        registry: Where the delegate is resolved from.
        operation: Starts the delegate's export or import.
        reporter: Receives intermediate progress.
        label: Task name prefix, e.g. "export".
        total: Expected units for the reporter, 0 when unknown.
        measure: Counts completed units in a snapshot.

    Returns:
        A zero-argument task returning (object_type, terminal snapshot).
    """

    def run() -> tuple[ObjectType, P]:
        delegate = registry.resolve(object_type)
        task_name = f"{label} {object_type}"
        callback = reporter.start_task(task_name, total)
        last: P | None = None
        try:
            for snapshot in operation(delegate):
                last = snapshot
                callback(measure(snapshot), total)
        except ArchivistError:
            raise
        except Exception as e:
            raise DelegateError(object_type, e) from e
        finally:
            reporter.finish_task(task_name)

        if last is None:
            raise DelegateError(
                object_type, RuntimeError("Delegate finished without reporting progress")
            )
        logger.debug("%s finished", task_name)
        return object_type, last

    return run


def fan_out(tasks: Sequence[Callable[[], R]], executor: ExecutorPort) -> list[R]:
    """Run tasks concurrently and wait for all of them.

    The first task to fail aborts the join: tasks that have not started
    are cancelled (best effort; running tasks are not interrupted) and its
    exception is raised once the remaining tasks have finished. The
    executor may be shared with other fan-outs, so only this call's
    futures are waited on.

    Args:
        tasks: Zero-argument callables.
        executor: Executor to submit to; entered for the duration.

    Returns:
        Task results, in task order.
    """
    futures: list[Future[object]] = []
    with executor:
        for task in tasks:
            future = executor.submit(task)
            futures.append(future)
            # Synchronous executors complete on submit; stop at the first failure
            if future.done() and future.exception() is not None:
                break

        for future in as_completed(futures):
            error = future.exception()
            if error is not None:
                cancelled = sum(f.cancel() for f in futures)
                logger.debug("Fan-out failed; cancelled %d pending task(s)", cancelled)
                # Running siblings finish before the caller releases the workspace
                wait(futures)
                raise error

    return [cast("R", f.result()) for f in futures]
