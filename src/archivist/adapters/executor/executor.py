"""Executor adapters implementing ExecutorPort."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Future


class SynchronousExecutor:
    """Synchronous executor that runs tasks immediately in the current thread.

    The default for ArchiveService: object types are handled one after
    another in request order. Implements ExecutorPort.
    """

    def submit(
        self,
        fn: Callable[..., object],
        *args: object,
        **kwargs: object,
    ) -> Future[object]:
        """Execute function immediately and return completed future.

        Args:
            fn: Function to execute.
            *args: Positional arguments to pass to fn.
            **kwargs: Keyword arguments to pass to fn.

        Returns:
            Future with result already available.
        """
        from concurrent.futures import Future

        future: Future[object] = Future()
        try:
            result = fn(*args, **kwargs)
            future.set_result(result)
        except Exception as e:
            future.set_exception(e)
        return future

    def __enter__(self) -> SynchronousExecutor:
        """Enter context manager."""
        return self

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Exit context manager (no-op for synchronous executor)."""
        return None


class ThreadPoolExecutorAdapter:
    """Adapter running fan-outs on a shared ThreadPoolExecutor.

    The pool is created when the first ``with`` block opens and shut down
    when the last one closes. Overlapping pipeline runs on one service
    therefore share a single pool, and every pool is shut down.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        """Initialize thread pool executor adapter.

        Args:
            max_workers: Maximum number of worker threads. None uses default.
        """
        self.max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None
        self._users = 0
        self._lock = threading.Lock()

    def submit(
        self,
        fn: Callable[..., object],
        *args: object,
        **kwargs: object,
    ) -> Future[object]:
        """Submit function to thread pool.

        Args:
            fn: Function to execute.
            *args: Positional arguments to pass to fn.
            **kwargs: Keyword arguments to pass to fn.

        Returns:
            Future representing the pending result.

        Raises:
            RuntimeError: If called outside a ``with`` block.
        """
        executor = self._executor
        if executor is None:
            raise RuntimeError("ThreadPoolExecutorAdapter must be entered before submit()")
        return executor.submit(fn, *args, **kwargs)

    def __enter__(self) -> ThreadPoolExecutorAdapter:
        """Start the pool, or join the one already running."""
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="archivist"
                )
            self._users += 1
        return self

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Leave the pool; the last user waits for it to shut down."""
        with self._lock:
            self._users -= 1
            if self._users:
                return None
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        return None
