"""Tests for tag analytics."""

import logging

import pytest

from catalog_discovery.adapters.stores import InMemoryTaxonomyStore
from catalog_discovery.core import InvalidArgumentError
from catalog_discovery.use_cases import TagAnalyticsService


def _names(frequencies) -> list[str]:
    return [f.tag.name for f in frequencies]


@pytest.fixture
def service(catalog, now) -> TagAnalyticsService:
    return TagAnalyticsService(catalog, clock=lambda: now)


@pytest.mark.asyncio
async def test_tags_with_counts_skip_unused(service) -> None:
    """Test unused tags never appear."""
    frequencies = await service.get_tags_with_counts()

    assert {f.tag.name: f.count for f in frequencies} == {
        "Media": 3, "Network": 2, "Info": 1, "Streaming": 2, "Subtitles": 2, "Weather": 1,
    }


@pytest.mark.asyncio
async def test_related_tags(service) -> None:
    """Test co-occurring tags ranked by frequency, then id."""
    related = await service.find_related_tags(1)

    assert _names(related) == ["Streaming", "Subtitles", "Network"]
    assert [f.count for f in related] == [2, 2, 1]
    assert _names(await service.find_related_tags(1, limit=1)) == ["Streaming"]


@pytest.mark.asyncio
async def test_related_tags_of_unused_or_unknown_tag(service) -> None:
    assert await service.find_related_tags(7) == []
    assert await service.find_related_tags(99) == []


@pytest.mark.asyncio
async def test_trending_tags_window(service) -> None:
    """Test only items created inside the window are counted."""
    week = await service.get_trending_tags(window_days=7, limit=3)
    assert _names(week) == ["Media", "Info", "Streaming"]
    assert all(f.count == 1 for f in week)

    two_months = await service.get_trending_tags(window_days=60)
    assert [(f.tag.id, f.count) for f in two_months] == [(1, 2), (2, 2), (4, 2), (3, 1), (5, 1), (6, 1)]


@pytest.mark.asyncio
async def test_trending_tags_invalid_window(service) -> None:
    with pytest.raises(InvalidArgumentError, match="window_days must be >= 1"):
        await service.get_trending_tags(window_days=0)
    with pytest.raises(InvalidArgumentError):
        await service.get_trending_tags(limit=-3)


@pytest.mark.asyncio
async def test_trending_tags_are_deterministic(service) -> None:
    assert await service.get_trending_tags(60) == await service.get_trending_tags(60)


@pytest.mark.asyncio
async def test_tag_cloud_interpolation(item_factory, tag_factory) -> None:
    """Test counts 10, 5 and 1 map to weights 10, 5 and 1."""
    items = []
    for item_id in range(1, 11):
        tags = [1]
        if item_id <= 5:
            tags.append(2)
        if item_id == 1:
            tags.append(3)
        items.append(item_factory(item_id, f"Item {item_id}", tags=tags))
    store = InMemoryTaxonomyStore(
        items=items, tags=[tag_factory(1, "x"), tag_factory(2, "y"), tag_factory(3, "z")]
    )

    cloud = await TagAnalyticsService(store).generate_tag_cloud(limit=3)

    assert [(w.tag.name, w.weight, w.normalized_weight) for w in cloud] == [
        ("x", 10, 10),
        ("y", 5, 5),
        ("z", 1, 1),
    ]


@pytest.mark.asyncio
async def test_tag_cloud_bounds(service) -> None:
    cloud = await service.generate_tag_cloud()
    weights = [w.normalized_weight for w in cloud]

    assert all(1 <= w <= 10 for w in weights)
    assert cloud[0].tag.name == "Media" and cloud[0].normalized_weight == 10
    assert cloud[-1].weight == 1 and cloud[-1].normalized_weight == 1


@pytest.mark.asyncio
async def test_tag_cloud_scoped_to_category(service) -> None:
    cloud = await service.generate_tag_cloud(category_id=2)

    assert [(w.tag.id, w.weight, w.normalized_weight) for w in cloud] == [
        (1, 2, 10), (4, 2, 10), (2, 1, 1), (5, 1, 1),
    ]


@pytest.mark.asyncio
async def test_tag_cloud_single_tag_gets_top_weight(catalog) -> None:
    service = TagAnalyticsService(catalog, cloud_scale=5)

    cloud = await service.generate_tag_cloud(limit=1)

    assert len(cloud) == 1
    assert cloud[0].normalized_weight == 5


@pytest.mark.asyncio
async def test_tags_by_categories(service) -> None:
    """Test counting over the union of categories."""
    frequencies = await service.find_tags_by_categories([3, 4])

    assert _names(frequencies) == ["Network", "Info", "Weather"]
    assert await service.find_tags_by_categories([]) == []
    assert await service.find_tags_by_categories([99]) == []


@pytest.mark.asyncio
async def test_counted_tag_missing_from_store(item_factory, tag_factory, caplog) -> None:
    store = InMemoryTaxonomyStore(
        items=[item_factory(1, "A", tags=[1, 42])], tags=[tag_factory(1, "known")]
    )

    with caplog.at_level(logging.WARNING):
        frequencies = await TagAnalyticsService(store).generate_tag_cloud()

    assert [w.tag.name for w in frequencies] == ["known"]
    assert "Tag 42 is counted but missing" in caplog.text


def test_invalid_cloud_scale(catalog) -> None:
    with pytest.raises(InvalidArgumentError, match="cloud_scale must be >= 1"):
        TagAnalyticsService(catalog, cloud_scale=0)
