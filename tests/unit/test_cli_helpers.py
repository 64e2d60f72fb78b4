"""Tests for shared CLI formatting helpers."""

from __future__ import annotations

import logging

import pytest
import typer


@pytest.mark.cli
@pytest.mark.tier(0)
class TestFormatStage:
    """Tests for _format_stage_with_color()."""

    def test_complete_is_green(self) -> None:
        """COMPLETE renders green."""
        from archivist.cli.formatting import _format_stage_with_color

        text = _format_stage_with_color("COMPLETE")

        assert text.plain == "COMPLETE"
        assert str(text.style) == "green"

    def test_unknown_stage_unstyled(self) -> None:
        """Unknown stages render without a style."""
        from archivist.cli.formatting import _format_stage_with_color

        assert str(_format_stage_with_color("WHATEVER").style) == ""


@pytest.mark.cli
@pytest.mark.tier(0)
class TestDescribeSnapshot:
    """Tests for _describe_snapshot()."""

    def test_lists_stage_and_each_type(self) -> None:
        """The line shows the run stage then each type's stage."""
        from archivist.cli.formatting import _describe_snapshot
        from archivist.core.models import (
            ExportProgress,
            ExportStage,
            ObjectExportProgress,
            ObjectStage,
            ObjectType,
        )

        snapshot = ExportProgress(
            stage=ExportStage.BUILDING,
            per_type={
                ObjectType.LOG: ObjectExportProgress(stage=ObjectStage.COMPLETE),
                ObjectType.PROFILE: ObjectExportProgress(stage=ObjectStage.PROCESSING),
            },
        )

        assert _describe_snapshot(snapshot).plain == (
            "BUILDING  log: COMPLETE  profile: PROCESSING"
        )


@pytest.mark.cli
@pytest.mark.tier(0)
class TestExitWithError:
    """Tests for _exit_with_error()."""

    def test_prints_error_and_hint(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The error and its hint go to stderr; an Exit(1) is returned."""
        from archivist.cli.formatting import _exit_with_error
        from archivist.core.exceptions import RequestValidationError

        result = _exit_with_error(RequestValidationError("No archive objects requested"))

        err = capsys.readouterr().err
        assert isinstance(result, typer.Exit)
        assert result.exit_code == 1
        assert "Error: No archive objects requested" in err
        assert "Hint:" in err

    def test_error_without_hint(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Errors whose recovery_hint is None print only the message."""
        from archivist.cli.formatting import _exit_with_error
        from archivist.core.exceptions import ConfigurationError

        _exit_with_error(ConfigurationError("bad scheme"))

        err = capsys.readouterr().err
        assert "Error: bad scheme" in err
        assert "Hint:" not in err


@pytest.mark.cli
@pytest.mark.tier(0)
def test_configure_logging_levels() -> None:
    """--verbose switches the root logger to DEBUG."""
    from rich.logging import RichHandler

    from archivist.cli.formatting import _configure_logging

    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    try:
        _configure_logging(verbose=True)
        assert root.level == logging.DEBUG
        assert any(isinstance(h, RichHandler) for h in root.handlers)

        _configure_logging(verbose=False)
        assert root.level == logging.WARNING
    finally:
        root.setLevel(saved[0])
        root.handlers[:] = saved[1]
