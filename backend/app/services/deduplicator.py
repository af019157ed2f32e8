"""Deduplicator — collapses records describing the same place across sources."""

import logging
from collections.abc import Iterable, Sequence

from app.schemas.destination import ScrapedRecord
from app.services.source_adapter import SOURCE_PRIORITY

logger = logging.getLogger(__name__)


def _union(groups: Iterable[list[str]]) -> list[str]:
    """Order-preserving union without duplicates."""
    seen: set[str] = set()
    merged: list[str] = []
    for values in groups:
        for value in values:
            if value not in seen:
                seen.add(value)
                merged.append(value)
    return merged


def _source_rank(source: str, priority: Sequence[str]) -> int:
    try:
        return priority.index(source)
    except ValueError:
        return len(priority)


def select_winner(
    group: list[ScrapedRecord], priority: Sequence[str] = SOURCE_PRIORITY
) -> ScrapedRecord:
    """
    Pick the surviving record of a duplicate group.

    Most populated optional fields wins; ties go to the source that appears
    earliest in ``priority``, then to the record seen first.
    """
    best_idx = 0
    best_rank = (-group[0].optional_field_count(), _source_rank(group[0].source, priority))
    for idx, record in enumerate(group[1:], start=1):
        rank = (-record.optional_field_count(), _source_rank(record.source, priority))
        if rank < best_rank:
            best_idx, best_rank = idx, rank
    return group[best_idx]


def merge_records(
    records: Iterable[ScrapedRecord], priority: Sequence[str] = SOURCE_PRIORITY
) -> list[ScrapedRecord]:
    """
    Merge concatenated adapter output into one record per canonical key.

    The survivor's ``type`` and ``highlights`` are the union over every
    member of its group. Output follows first-seen key order.
    """
    groups: dict[str, list[ScrapedRecord]] = {}
    for record in records:
        groups.setdefault(record.key, []).append(record)

    merged = []
    for group in groups.values():
        if len(group) == 1:
            merged.append(group[0])
            continue
        winner = select_winner(group, priority)
        merged.append(winner.model_copy(update={
            "type": _union(r.type for r in group),
            "highlights": _union(r.highlights for r in group),
        }))

    collapsed = sum(len(g) for g in groups.values()) - len(merged)
    if collapsed:
        logger.debug(f"Deduplicator collapsed {collapsed} duplicate records")
    return merged
