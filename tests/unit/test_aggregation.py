"""Unit tests for per-type progress aggregation."""

import pytest

from archivist.core.aggregation import aggregate_progress
from archivist.core.models import ObjectExportProgress, ObjectStage, ObjectType


DONE = ObjectExportProgress(stage=ObjectStage.COMPLETE)


@pytest.mark.core
@pytest.mark.tier(0)
class TestAggregateProgress:
    """Tests for aggregate_progress()."""

    def test_keys_follow_request_order(self) -> None:
        """Completion order does not change the key order."""
        results = [(ObjectType.PROFILE, DONE), (ObjectType.LOG, DONE)]

        merged = aggregate_progress(results, [ObjectType.LOG, ObjectType.PROFILE])

        assert list(merged) == [ObjectType.LOG, ObjectType.PROFILE]

    def test_keeps_each_progress(self) -> None:
        """Each type maps to the progress reported for it."""
        log = ObjectExportProgress(stage=ObjectStage.PROCESSING)

        merged = aggregate_progress([(ObjectType.LOG, log)], [ObjectType.LOG])

        assert merged == {ObjectType.LOG: log}

    def test_duplicate_report_rejected(self) -> None:
        """A type reported twice is an error, not an overwrite."""
        with pytest.raises(ValueError, match="Duplicate progress report for 'log'"):
            aggregate_progress(
                [(ObjectType.LOG, DONE), (ObjectType.LOG, DONE)], [ObjectType.LOG]
            )

    def test_unrequested_type_rejected(self) -> None:
        """Results may only contain requested types."""
        with pytest.raises(ValueError, match="unrequested type 'content'"):
            aggregate_progress([(ObjectType.CONTENT, DONE)], [ObjectType.LOG])

    def test_missing_type_rejected(self) -> None:
        """Every requested type must be reported."""
        with pytest.raises(ValueError, match="No progress reported for: profile"):
            aggregate_progress(
                [(ObjectType.LOG, DONE)], [ObjectType.LOG, ObjectType.PROFILE]
            )

    def test_empty(self) -> None:
        """Nothing requested, nothing reported."""
        assert aggregate_progress([], []) == {}
