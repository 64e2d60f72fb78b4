"""Merging of per-object-type progress into one keyed snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from archivist.core.models import ObjectType


P = TypeVar("P")


def aggregate_progress(
    results: Iterable[tuple[ObjectType, P]],
    requested: Sequence[ObjectType],
) -> dict[ObjectType, P]:
    """Build a mapping of object type to progress from fan-out results.

    Each requested type must be reported exactly once. Duplicates are
    rejected rather than overwritten.

    Args:
        results: (type, progress) pairs in any order.
        requested: The requested types; fixes the key order of the result.

    Returns:
        Dict keyed by every requested type, in request order.

    Raises:
        ValueError: If a type is reported twice, is not requested, or is
            missing from results.
    """
    reported: dict[ObjectType, P] = {}
    for object_type, progress in results:
        if object_type in reported:
            raise ValueError(f"Duplicate progress report for '{object_type}'")
        if object_type not in requested:
            raise ValueError(f"Progress reported for unrequested type '{object_type}'")
        reported[object_type] = progress

    missing = [t for t in requested if t not in reported]
    if missing:
        names = ", ".join(str(t) for t in missing)
        raise ValueError(f"No progress reported for: {names}")

    return {t: reported[t] for t in requested}
