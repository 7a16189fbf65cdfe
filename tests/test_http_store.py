"""Tests for the HTTP taxonomy store."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from catalog_discovery.adapters.stores import HttpTaxonomyStore
from catalog_discovery.core import SearchFilters

ITEM_RECORD = {
    "id": 1,
    "name": "Video Player",
    "description": "Plays video",
    "category_id": 2,
    "author_id": 3,
    "tag_ids": [1, 4],
    "rating": 4.5,
    "downloads_count": 500,
    "created_at": "2024-03-01T10:00:00Z",
}


def _response(status_code: int = 200, payload=None) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.json = Mock(return_value=payload)
    response.raise_for_status = Mock()
    return response


@pytest.mark.asyncio
async def test_find_items_by_filter_sends_params() -> None:
    """Test filters are encoded as query parameters."""
    store = HttpTaxonomyStore("https://catalog.example.com/api/", token="secret")

    with patch("httpx.AsyncClient") as mock_client:
        mock_get = AsyncMock(return_value=_response(payload={"items": [ITEM_RECORD]}))
        mock_client.return_value.__aenter__.return_value.get = mock_get

        items = await store.find_items_by_filter(SearchFilters(tag_ids=(1, 4), min_rating=3))

        assert [i.name for i in items] == ["Video Player"]
        assert items[0].tag_ids == frozenset({1, 4})

        call_args = mock_get.call_args
        assert call_args.args[0] == "https://catalog.example.com/api/items"
        assert call_args.kwargs["params"] == {"tag_ids": "1,4", "min_rating": "3"}
        assert call_args.kwargs["headers"]["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_get_item_not_found() -> None:
    """Test 404 on a single entity maps to None."""
    store = HttpTaxonomyStore("https://catalog.example.com/api")

    with patch("httpx.AsyncClient") as mock_client:
        mock_get = AsyncMock(return_value=_response(404))
        mock_client.return_value.__aenter__.return_value.get = mock_get

        assert await store.get_item(99) is None
        assert "Authorization" not in mock_get.call_args.kwargs["headers"]


@pytest.mark.asyncio
async def test_server_error_propagates() -> None:
    """Test HTTP errors reach the caller unchanged."""
    store = HttpTaxonomyStore("https://catalog.example.com/api")

    with patch("httpx.AsyncClient") as mock_client:
        response = _response(500)
        response.raise_for_status = Mock(side_effect=httpx.HTTPError("Server error"))
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(return_value=response)

        with pytest.raises(httpx.HTTPError, match="Server error"):
            await store.get_authors()


@pytest.mark.asyncio
async def test_count_items_by_tag() -> None:
    store = HttpTaxonomyStore("https://catalog.example.com/api")
    since = datetime(2024, 1, 1, tzinfo=timezone.utc)

    with patch("httpx.AsyncClient") as mock_client:
        mock_get = AsyncMock(return_value=_response(payload={"counts": {"1": 3, "2": 0, "5": "2"}}))
        mock_client.return_value.__aenter__.return_value.get = mock_get

        counts = await store.count_items_by_tag(category_ids=[4], since=since)

        assert counts == {1: 3, 5: 2}
        assert mock_get.call_args.kwargs["params"] == {
            "category_ids": "4",
            "since": "2024-01-01T00:00:00+00:00",
        }


@pytest.mark.asyncio
async def test_find_authors_sharing_tags() -> None:
    store = HttpTaxonomyStore("https://catalog.example.com/api")

    with patch("httpx.AsyncClient") as mock_client:
        payload = {"authors": [{"author_id": 2, "name": "Bob", "shared_tag_count": 3}]}
        mock_get = AsyncMock(return_value=_response(payload=payload))
        mock_client.return_value.__aenter__.return_value.get = mock_get

        overlaps = await store.find_authors_sharing_tags([1, 2, 3], exclude_author_id=1)

        assert overlaps[0].author_id == 2
        assert overlaps[0].shared_tag_count == 3
        assert mock_get.call_args.args[0] == "https://catalog.example.com/api/authors/sharing-tags"
        assert mock_get.call_args.kwargs["params"] == {"tag_ids": "1,2,3", "exclude_author_id": "1"}


@pytest.mark.asyncio
async def test_item_tags_and_empty_ids() -> None:
    store = HttpTaxonomyStore("https://catalog.example.com/api")

    with patch("httpx.AsyncClient") as mock_client:
        mock_get = AsyncMock(return_value=_response(payload={"tag_ids": [4, "1"]}))
        mock_client.return_value.__aenter__.return_value.get = mock_get

        assert await store.get_item_tags(1) == {1, 4}
        assert await store.find_items_by_ids([]) == []
        assert mock_get.call_count == 1
