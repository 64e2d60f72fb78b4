"""Rich-based progress reporter for terminal output."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


if TYPE_CHECKING:
    from types import TracebackType

    from rich.console import Console

    from archivist.core.ports import ProgressCallback


class RichProgressReporter:
    """Progress reporter using Rich for terminal display.

    Shows one line per object type with the number of items written or
    applied. Tasks with an unknown total show a pulsing bar. Safe to use
    from the worker threads of a parallel fan-out.

    Example:
        with RichProgressReporter() as reporter:
            for snapshot in service.export(request, progress=reporter):
                ...
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the progress display.

        Args:
            console: Optional Rich console to render to.
        """
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
        )
        self._tasks: dict[str, TaskID] = {}
        self._lock = threading.Lock()
        self._started = False

    def __enter__(self) -> RichProgressReporter:
        """Start the progress display."""
        self._progress.start()
        self._started = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Stop the progress display."""
        self._progress.stop()
        self._started = False

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking an object type.

        Args:
            name: Human-readable name for the task.
            total: Expected items, or 0 when unknown.

        Returns:
            A callback to update progress.
        """
        with self._lock:
            # Auto-start if not in context manager
            if not self._started:
                self._progress.start()
                self._started = True

            task_id = self._progress.add_task(name, total=total or None)
            self._tasks[name] = task_id

        def callback(completed: int, _total: int) -> None:
            self._progress.update(task_id, completed=completed)

        return callback

    def finish_task(self, name: str) -> None:
        """Mark a task as complete.

        Args:
            name: The task name.
        """
        with self._lock:
            task_id = self._tasks.get(name)
        if task_id is None:
            return
        task = self._progress.tasks[task_id]
        self._progress.update(task_id, total=task.completed, completed=task.completed)
