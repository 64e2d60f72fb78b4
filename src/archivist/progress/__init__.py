"""Progress display adapters."""

from archivist.progress.rich_progress import RichProgressReporter


__all__ = ["RichProgressReporter"]
