"""Shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from catalog_discovery.adapters.stores import InMemoryTaxonomyStore
from catalog_discovery.core import Author, Category, Item, Review, Tag

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_item(
    item_id: int,
    name: str,
    tags=(),
    category_id=1,
    author_id=1,
    rating=4.0,
    downloads=100,
    description="",
    created_at=None,
    version_min=None,
    version_max=None,
) -> Item:
    return Item(
        id=item_id,
        name=name,
        description=description,
        category_id=category_id,
        author_id=author_id,
        tag_ids=frozenset(tags),
        rating=rating,
        downloads_count=downloads,
        created_at=created_at or NOW - timedelta(days=1),
        version_min=version_min,
        version_max=version_max,
    )


def make_tag(tag_id: int, name: str) -> Tag:
    return Tag(id=tag_id, name=name, slug=name.lower())


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def tag_factory():
    return make_tag


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def catalog() -> InMemoryTaxonomyStore:
    """Small catalog used across service tests."""
    tags = [
        make_tag(1, "Media"),
        make_tag(2, "Network"),
        make_tag(3, "Info"),
        make_tag(4, "Streaming"),
        make_tag(5, "Subtitles"),
        make_tag(6, "Weather"),
        make_tag(7, "Unused"),
    ]
    categories = [
        Category(1, "Video"),
        Category(2, "Players", parent_id=1),
        Category(3, "Weather"),
        Category(4, "Tools"),
    ]
    authors = [
        Author(1, "Alice"),
        Author(2, "Bob"),
        Author(3, "Carol"),
        Author(4, "Dave"),
        Author(5, "Eve"),
    ]
    items = [
        make_item(
            1, "Video Player", tags=[1, 4, 5], category_id=2, author_id=1,
            rating=4.5, downloads=500, description="Plays local video files",
            created_at=NOW - timedelta(days=5), version_min="19", version_max="21",
        ),
        make_item(
            2, "Video Downloader", tags=[1, 2, 4], category_id=2, author_id=2,
            rating=3.5, downloads=900, description="Download video from network shares",
            created_at=NOW - timedelta(days=40), version_min="18",
        ),
        make_item(
            3, "Weather Widget", tags=[3, 6], category_id=3, author_id=3,
            rating=4.0, downloads=5000, description="Forecast on your home screen",
            created_at=NOW - timedelta(days=2), version_min="20", version_max="20.9",
        ),
        make_item(
            4, "Subtitle Finder", tags=[1, 5], category_id=1, author_id=2,
            rating=2.5, downloads=300, description="Finds subtitles for any video",
            created_at=NOW - timedelta(days=100),
        ),
        make_item(
            5, "Network Monitor", tags=[2], category_id=4, author_id=4,
            rating=3.0, downloads=50, description="Shows network usage",
            created_at=NOW - timedelta(days=10),
        ),
        make_item(
            6, "Clock", tags=[], category_id=4, author_id=4,
            rating=1.0, downloads=10, description="Simple clock",
            created_at=NOW - timedelta(days=400),
        ),
    ]
    reviews = [
        Review(1, 1, 5, NOW - timedelta(days=3), "Great player, great subtitles"),
        Review(2, 1, 4, NOW - timedelta(days=20), "Great video quality"),
        Review(3, 1, 2, NOW - timedelta(days=70), "Crashes with subtitles"),
        Review(4, 1, 3, NOW - timedelta(days=75), "Okay player", is_active=False),
        Review(5, 2, 1, NOW - timedelta(days=1), "Broken downloads"),
    ]
    return InMemoryTaxonomyStore(
        items=items, tags=tags, categories=categories, authors=authors, reviews=reviews
    )
