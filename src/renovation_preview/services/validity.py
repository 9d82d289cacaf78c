"""Decide whether a cached composite still reflects the current masks."""

from datetime import UTC, datetime

from renovation_preview.domain.masks import Mask
from renovation_preview.domain.photos import CompositeRecord


def latest_mutation(masks: list[Mask]) -> datetime | None:
    """Return the most recent mask mutation time, if any masks exist."""
    if not masks:
        return None
    return max(_as_utc(mask.mutated_at) for mask in masks)


def is_composite_valid(
    record: CompositeRecord | None, masks: list[Mask], *, force: bool = False
) -> bool:
    """Return True when the cached composite can be served as-is.

    Mask deletions are not visible here; the mask store clears the record when
    a mask is removed.
    """
    if force or record is None:
        return False
    latest = latest_mutation(masks)
    if latest is None:
        return True
    return _as_utc(record.generated_at) >= latest


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
