"""Configuration utilities for archivist.

This module resolves the platform cache location used for workspaces and
finished containers, and holds the settings applied by
ArchiveService.from_defaults().
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from archivist.core.exceptions import ConfigurationError


CACHE_DIR_ENV = "ARCHIVIST_CACHE_DIR"
APP_DIR_NAME = "archivist"


def resolve_cache_dir(cache_dir: Path | str | None = None) -> Path:
    """Find the directory for workspaces and containers.

    Resolution order:
    1. The explicit cache_dir argument
    2. The ARCHIVIST_CACHE_DIR environment variable
    3. XDG_CACHE_HOME/archivist
    4. The platform cache location: ~/Library/Caches/archivist (macOS),
       %LOCALAPPDATA%/archivist/Cache (Windows), ~/.cache/archivist (others)

    Args:
        cache_dir: Explicit directory, absolute or relative to the cwd.

    Returns:
        Absolute path to the cache directory (not created).

    Example:
        >>> from archivist.config import resolve_cache_dir
        >>> root = resolve_cache_dir()
        >>> root.name
        'archivist'
    """
    if cache_dir is not None:
        return Path(cache_dir).expanduser().resolve()

    from_env = os.environ.get(CACHE_DIR_ENV)
    if from_env:
        return Path(from_env).expanduser().resolve()

    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg).expanduser().resolve() / APP_DIR_NAME

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / APP_DIR_NAME
    if sys.platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if not local_app_data:
            raise ConfigurationError(
                f"LOCALAPPDATA is not set; set {CACHE_DIR_ENV} to choose a cache directory"
            )
        return Path(local_app_data) / APP_DIR_NAME / "Cache"
    return Path.home() / ".cache" / APP_DIR_NAME


@dataclass(frozen=True, slots=True)
class ArchiveSettings:
    """Settings for a default-wired ArchiveService.

    Attributes:
        cache_dir: Workspace and container directory; None resolves the
            platform default.
        keep_workspace: Leave workspaces on disk after a run, for debugging.
        max_workers: Parallel delegate runs; 1 runs object types in turn.
        batch_size: Records per file written by the log delegate.
    """

    cache_dir: Path | None = None
    keep_workspace: bool = False
    max_workers: int = 1
    batch_size: int = 1000

    def __post_init__(self) -> None:
        """Validate numeric settings."""
        if self.max_workers < 1:
            raise ConfigurationError("max_workers must be at least 1")
        if self.batch_size < 1:
            raise ConfigurationError("batch_size must be at least 1")

    def resolved_cache_dir(self) -> Path:
        """Return the cache directory these settings point at."""
        return resolve_cache_dir(self.cache_dir)
