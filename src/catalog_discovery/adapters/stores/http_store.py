"""Taxonomy store backed by a remote catalog JSON API."""

import logging
from datetime import datetime
from typing import Any, Collection, Iterable, Optional

import httpx

from catalog_discovery.adapters.stores.records import (
    author_from_record,
    category_from_record,
    item_from_record,
    overlap_from_record,
    review_from_record,
    tag_from_record,
)
from catalog_discovery.core import (
    Author,
    AuthorOverlap,
    Category,
    Item,
    Review,
    SearchFilters,
    Tag,
    TaxonomyStore,
)

logger = logging.getLogger(__name__)


def _join_ids(ids: Iterable[int]) -> str:
    return ",".join(str(i) for i in ids)


class HttpTaxonomyStore(TaxonomyStore):
    """Query the catalog over HTTP.

    Single-entity lookups answering 404 yield None; every other HTTP error is
    raised to the caller as `httpx.HTTPStatusError`.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _get_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get(self, path: str, params: Optional[dict[str, str]] = None) -> Optional[Any]:
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(url, headers=self._get_headers(), params=params or {})

        if response.status_code == 404:
            logger.debug("GET %s -> 404", url)
            return None
        response.raise_for_status()
        return response.json()

    async def _get_list(self, path: str, key: str, params: Optional[dict[str, str]] = None) -> list:
        data = await self._get(path, params)
        if data is None:
            return []
        return data.get(key) or []

    async def find_items_by_filter(self, filters: SearchFilters) -> list[Item]:
        records = await self._get_list("/items", "items", filters.to_params())
        return [item_from_record(r) for r in records]

    async def find_items_by_ids(self, ids: Iterable[int]) -> list[Item]:
        ids = list(ids)
        if not ids:
            return []
        records = await self._get_list("/items", "items", {"ids": _join_ids(ids)})
        return [item_from_record(r) for r in records]

    async def count_items_by_tag(
        self,
        tag_ids: Optional[Collection[int]] = None,
        category_ids: Optional[Collection[int]] = None,
        since: Optional[datetime] = None,
    ) -> dict[int, int]:
        params: dict[str, str] = {}
        if tag_ids is not None:
            params["tag_ids"] = _join_ids(tag_ids)
        if category_ids is not None:
            params["category_ids"] = _join_ids(category_ids)
        if since is not None:
            params["since"] = since.isoformat()

        data = await self._get("/tags/counts", params) or {}
        counts = data.get("counts") or {}
        return {int(tag_id): int(count) for tag_id, count in counts.items() if int(count) > 0}

    async def find_authors_sharing_tags(
        self, tag_ids: Collection[int], exclude_author_id: int
    ) -> list[AuthorOverlap]:
        records = await self._get_list(
            "/authors/sharing-tags",
            "authors",
            {"tag_ids": _join_ids(tag_ids), "exclude_author_id": str(exclude_author_id)},
        )
        return [overlap_from_record(r) for r in records]

    async def get_item_tags(self, item_id: int) -> set[int]:
        tag_ids = await self._get_list(f"/items/{item_id}/tags", "tag_ids")
        return {int(tag_id) for tag_id in tag_ids}

    async def get_author_items(self, author_id: int) -> list[Item]:
        records = await self._get_list(f"/authors/{author_id}/items", "items")
        return [item_from_record(r) for r in records]

    async def get_item(self, item_id: int) -> Optional[Item]:
        record = await self._get(f"/items/{item_id}")
        return item_from_record(record) if record is not None else None

    async def get_author(self, author_id: int) -> Optional[Author]:
        record = await self._get(f"/authors/{author_id}")
        return author_from_record(record) if record is not None else None

    async def get_tags(self, tag_ids: Optional[Iterable[int]] = None) -> list[Tag]:
        params = {"ids": _join_ids(tag_ids)} if tag_ids is not None else None
        records = await self._get_list("/tags", "tags", params)
        return [tag_from_record(r) for r in records]

    async def get_authors(self) -> list[Author]:
        records = await self._get_list("/authors", "authors")
        return [author_from_record(r) for r in records]

    async def get_categories(self) -> list[Category]:
        records = await self._get_list("/categories", "categories")
        return [category_from_record(r) for r in records]

    async def get_item_reviews(self, item_id: int) -> list[Review]:
        records = await self._get_list(f"/items/{item_id}/reviews", "reviews")
        return [review_from_record(r) for r in records]
