"""Unit tests for scoped workspaces."""

from pathlib import Path

import pytest

from archivist.core.exceptions import ConfigurationError
from archivist.core.workspace import workspace


@pytest.mark.core
@pytest.mark.tier(1)
class TestWorkspace:
    """Tests for the workspace() context manager."""

    def test_creates_empty_directory_under_root(self, tmp_path: Path) -> None:
        """The workspace is a new empty child of root."""
        with workspace(tmp_path / "cache") as path:
            assert path.parent == tmp_path / "cache"
            assert path.is_dir()
            assert list(path.iterdir()) == []

    def test_removed_on_success(self, tmp_path: Path) -> None:
        """The directory and its contents are removed on exit."""
        with workspace(tmp_path) as path:
            (path / "sub").mkdir()
            (path / "sub" / "file.txt").write_text("x")

        assert not path.exists()

    def test_removed_on_error(self, tmp_path: Path) -> None:
        """Failures do not leak the workspace."""
        with pytest.raises(RuntimeError), workspace(tmp_path) as path:
            raise RuntimeError("boom")

        assert not path.exists()

    def test_keep_leaves_directory(self, tmp_path: Path) -> None:
        """keep=True leaves the directory for inspection."""
        with workspace(tmp_path, keep=True) as path:
            (path / "file.txt").write_text("x")

        assert (path / "file.txt").exists()

    def test_unique_per_run(self, tmp_path: Path) -> None:
        """Concurrent workspaces never share a directory."""
        with workspace(tmp_path) as first, workspace(tmp_path) as second:
            assert first != second

    def test_unusable_root_is_configuration_error(self, tmp_path: Path) -> None:
        """A root that cannot hold directories fails before yielding."""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(ConfigurationError, match="Cannot create workspace"):
            with workspace(blocker):
                pass
