"""Tag frequency counting and weighting."""

from collections import Counter
from typing import Iterable, Mapping

from catalog_discovery.core.entities import Item


def count_tags(items: Iterable[Item], exclude: Iterable[int] = ()) -> Counter:
    """Count how many items carry each tag."""
    excluded = set(exclude)
    counter: Counter = Counter()
    for item in items:
        counter.update(tag_id for tag_id in item.tag_ids if tag_id not in excluded)
    return counter


def rank_counts(counts: Mapping[int, int], limit: int) -> list[tuple[int, int]]:
    """Top `limit` (tag_id, count) pairs by count, ties broken by tag id."""
    ranked = sorted(
        ((tag_id, count) for tag_id, count in counts.items() if count > 0),
        key=lambda pair: (-pair[1], pair[0]),
    )
    return ranked[:limit]


def normalize_weights(counts: Mapping[int, int], scale: int = 10) -> dict[int, int]:
    """Map raw counts linearly onto integer weights 1..scale.

    The smallest count gets 1 and the largest gets `scale`. When every count is
    the same, all tags get `scale`.
    """
    if scale < 1:
        raise ValueError("scale must be >= 1")
    if not counts:
        return {}

    low = min(counts.values())
    high = max(counts.values())
    if high == low:
        return {tag_id: scale for tag_id in counts}

    span = high - low
    return {
        tag_id: 1 + (scale - 1) * (count - low) // span
        for tag_id, count in counts.items()
    }
