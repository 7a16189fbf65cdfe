"""Tests for tag counting primitives."""

import pytest

from catalog_discovery.core.tag_stats import count_tags, normalize_weights, rank_counts


def test_count_tags(item_factory):
    items = [
        item_factory(1, "A", tags=[1, 2]),
        item_factory(2, "B", tags=[1, 3]),
        item_factory(3, "C", tags=[1]),
    ]

    assert count_tags(items) == {1: 3, 2: 1, 3: 1}
    assert count_tags(items, exclude=[1]) == {2: 1, 3: 1}


def test_rank_counts_breaks_ties_by_id():
    counts = {5: 2, 3: 2, 9: 7, 4: 0}

    assert rank_counts(counts, 10) == [(9, 7), (3, 2), (5, 2)]
    assert rank_counts(counts, 2) == [(9, 7), (3, 2)]
    assert rank_counts(counts, 0) == []


def test_normalize_weights_linear():
    """Test counts map onto 1..scale with floor interpolation."""
    weights = normalize_weights({1: 10, 2: 5, 3: 1}, scale=10)

    assert weights == {1: 10, 2: 5, 3: 1}


def test_normalize_weights_bounds():
    counts = {tag_id: tag_id * 37 for tag_id in range(1, 30)}

    weights = normalize_weights(counts, scale=6)

    assert all(1 <= w <= 6 for w in weights.values())
    assert weights[1] == 1
    assert weights[29] == 6


def test_normalize_weights_equal_counts():
    """Test a single tag or equal counts get the top weight."""
    assert normalize_weights({1: 4}) == {1: 10}
    assert normalize_weights({1: 3, 2: 3}, scale=5) == {1: 5, 2: 5}
    assert normalize_weights({}) == {}


def test_normalize_weights_invalid_scale():
    with pytest.raises(ValueError, match="scale must be >= 1"):
        normalize_weights({1: 1}, scale=0)
