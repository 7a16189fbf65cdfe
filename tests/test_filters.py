"""Tests for search filters and argument validation."""

from datetime import datetime, timezone

import pytest

from catalog_discovery.core import InvalidArgumentError, SearchFilters
from catalog_discovery.core.filters import (
    is_version_compatible,
    parse_version,
    validate_limit,
    validate_pagination,
)


def test_parse_version():
    """Test dotted versions compare numerically."""
    assert parse_version("19") == parse_version("19.0") == (19,)
    assert parse_version("19.1") < parse_version("19.10")
    assert parse_version(" 20.0.1 ") == (20, 0, 1)

    with pytest.raises(InvalidArgumentError, match="Malformed version"):
        parse_version("nineteen")


def test_validate_pagination():
    validate_pagination(1, 1)

    with pytest.raises(InvalidArgumentError, match="page must be >= 1"):
        validate_pagination(0, 10)
    with pytest.raises(InvalidArgumentError, match="page_size must be >= 1"):
        validate_pagination(1, 0)


def test_validate_limit():
    validate_limit(0)

    with pytest.raises(InvalidArgumentError, match="max_depth must be a non-negative integer"):
        validate_limit(-1, "max_depth")
    with pytest.raises(InvalidArgumentError):
        validate_limit(True)


def test_filters_reject_bad_values():
    """Test invalid filter values fail at construction."""
    with pytest.raises(InvalidArgumentError, match="min_rating must be numeric"):
        SearchFilters(min_rating="high")
    with pytest.raises(InvalidArgumentError, match="between 0 and 5"):
        SearchFilters(max_rating=7)
    with pytest.raises(InvalidArgumentError, match="cannot be negative"):
        SearchFilters(min_downloads=-5)
    with pytest.raises(InvalidArgumentError, match="Empty rating range"):
        SearchFilters(min_rating=4, max_rating=2)
    with pytest.raises(InvalidArgumentError, match="list of integer ids"):
        SearchFilters(tag_ids=["media"])
    with pytest.raises(InvalidArgumentError, match="must be a datetime"):
        SearchFilters(created_after="last week")


def test_from_mapping():
    """Test building filters from an untyped mapping."""
    filters = SearchFilters.from_mapping({
        "category_ids": "5, 6",
        "tag_ids": [1],
        "min_rating": "3.5",
        "max_downloads": "1000",
        "version": 19,
        "created_after": "2024-01-01",
        "author_ids": None,
        "max_rating": "",
    })

    assert filters.category_ids == (5, 6)
    assert filters.tag_ids == (1,)
    assert filters.author_ids == ()
    assert filters.min_rating == 3.5
    assert filters.max_rating is None
    assert filters.max_downloads == 1000
    assert filters.version == "19"
    assert filters.created_after == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(InvalidArgumentError, match="Unknown filter keys: colour"):
        SearchFilters.from_mapping({"colour": "red"})


def test_matches_combines_keys_with_and(item_factory):
    """Test distinct keys AND together while ids within a key OR together."""
    item = item_factory(1, "Player", tags=[1, 2], category_id=5, author_id=3, rating=4.0, downloads=200)

    assert SearchFilters(category_ids=(5, 6)).matches(item)
    assert SearchFilters(tag_ids=(2, 9)).matches(item)
    assert not SearchFilters(tag_ids=(9,)).matches(item)
    assert SearchFilters(category_ids=(5,), author_ids=(3,), min_rating=4).matches(item)
    assert not SearchFilters(category_ids=(5,), author_ids=(4,)).matches(item)
    assert not SearchFilters(min_downloads=201).matches(item)
    assert not SearchFilters(max_rating=3.9).matches(item)


def test_matches_creation_bounds(item_factory):
    item = item_factory(1, "Player", created_at=datetime(2024, 3, 1, tzinfo=timezone.utc))

    assert SearchFilters(created_after=datetime(2024, 1, 1)).matches(item)
    assert not SearchFilters(created_before=datetime(2024, 2, 1, tzinfo=timezone.utc)).matches(item)


def test_version_compatibility(item_factory):
    """Test version containment with an open upper bound."""
    bounded = item_factory(1, "A", version_min="19", version_max="20.5")
    open_ended = item_factory(2, "B", version_min="18")
    unversioned = item_factory(3, "C")

    assert is_version_compatible(bounded, "19.0")
    assert is_version_compatible(bounded, "20.5")
    assert not is_version_compatible(bounded, "21")
    assert not is_version_compatible(bounded, "18.9")
    assert is_version_compatible(open_ended, "99")
    assert not is_version_compatible(unversioned, "19")
    assert SearchFilters(version="20").matches(bounded)


def test_to_params():
    filters = SearchFilters(
        category_ids=(1, 2),
        min_rating=3,
        version="19",
        created_after=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )

    assert filters.to_params() == {
        "category_ids": "1,2",
        "min_rating": "3",
        "version": "19",
        "created_after": "2024-01-01T00:00:00+00:00",
    }
