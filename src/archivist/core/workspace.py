"""Staging directories for pipeline runs."""

from __future__ import annotations

import logging
import shutil
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING

from archivist.core.exceptions import ConfigurationError


if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


logger = logging.getLogger(__name__)


@contextmanager
def workspace(root: Path, *, keep: bool = False) -> Iterator[Path]:
    """Create a uniquely named staging directory under root.

    The directory is removed when the context exits, whether the run
    succeeded, failed or was abandoned, unless keep is set.

    Args:
        root: Parent directory (the cache directory).
        keep: Leave the directory on disk for inspection.

    Yields:
        Path of the new, empty workspace.

    Raises:
        ConfigurationError: If the directory cannot be created.
    """
    path = root / uuid.uuid4().hex
    try:
        path.mkdir(parents=True, exist_ok=False)
    except OSError as e:
        raise ConfigurationError(f"Cannot create workspace under {root}: {e}") from e

    logger.debug("Created workspace %s", path)
    try:
        yield path
    finally:
        if keep:
            logger.info("Keeping workspace %s", path)
        else:
            try:
                shutil.rmtree(path)
            except OSError as e:
                logger.warning("Could not remove workspace %s: %s", path, e)
