"""Taxonomy store holding the whole catalog in memory."""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Collection, Iterable, Optional

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


class InMemoryTaxonomyStore(TaxonomyStore):
    """Serve catalog queries from in-memory collections."""

    def __init__(
        self,
        items: Iterable[Item] = (),
        tags: Iterable[Tag] = (),
        categories: Iterable[Category] = (),
        authors: Iterable[Author] = (),
        reviews: Iterable[Review] = (),
    ) -> None:
        self._items = {item.id: item for item in items}
        self._tags = {tag.id: tag for tag in tags}
        self._categories = {category.id: category for category in categories}
        self._authors = {author.id: author for author in authors}
        self._reviews: dict[int, list[Review]] = defaultdict(list)
        for review in reviews:
            self._reviews[review.item_id].append(review)

        logger.debug(
            "Loaded catalog: %d items, %d tags, %d categories, %d authors",
            len(self._items), len(self._tags), len(self._categories), len(self._authors),
        )

    def _sorted_items(self) -> list[Item]:
        return [self._items[item_id] for item_id in sorted(self._items)]

    async def find_items_by_filter(self, filters: SearchFilters) -> list[Item]:
        return [item for item in self._sorted_items() if filters.matches(item)]

    async def find_items_by_ids(self, ids: Iterable[int]) -> list[Item]:
        return [self._items[item_id] for item_id in ids if item_id in self._items]

    async def count_items_by_tag(
        self,
        tag_ids: Optional[Collection[int]] = None,
        category_ids: Optional[Collection[int]] = None,
        since: Optional[datetime] = None,
    ) -> dict[int, int]:
        wanted_tags = set(tag_ids) if tag_ids is not None else None
        wanted_categories = set(category_ids) if category_ids is not None else None

        counts: dict[int, int] = defaultdict(int)
        for item in self._items.values():
            if wanted_categories is not None and item.category_id not in wanted_categories:
                continue
            if since is not None and item.created_at < since:
                continue
            for tag_id in item.tag_ids:
                if wanted_tags is None or tag_id in wanted_tags:
                    counts[tag_id] += 1
        return dict(counts)

    async def find_authors_sharing_tags(
        self, tag_ids: Collection[int], exclude_author_id: int
    ) -> list[AuthorOverlap]:
        wanted = set(tag_ids)
        shared: dict[int, set[int]] = defaultdict(set)
        for item in self._items.values():
            if item.author_id == exclude_author_id:
                continue
            shared[item.author_id].update(item.tag_ids & wanted)

        overlaps = []
        for author_id, tags in shared.items():
            author = self._authors.get(author_id)
            if not tags or author is None:
                continue
            overlaps.append(AuthorOverlap(author_id, author.name, len(tags)))
        return overlaps

    async def get_item_tags(self, item_id: int) -> set[int]:
        item = self._items.get(item_id)
        return set(item.tag_ids) if item else set()

    async def get_author_items(self, author_id: int) -> list[Item]:
        return [item for item in self._sorted_items() if item.author_id == author_id]

    async def get_item(self, item_id: int) -> Optional[Item]:
        return self._items.get(item_id)

    async def get_author(self, author_id: int) -> Optional[Author]:
        return self._authors.get(author_id)

    async def get_tags(self, tag_ids: Optional[Iterable[int]] = None) -> list[Tag]:
        if tag_ids is None:
            return [self._tags[tag_id] for tag_id in sorted(self._tags)]
        return [self._tags[tag_id] for tag_id in tag_ids if tag_id in self._tags]

    async def get_authors(self) -> list[Author]:
        return [self._authors[author_id] for author_id in sorted(self._authors)]

    async def get_categories(self) -> list[Category]:
        return [self._categories[category_id] for category_id in sorted(self._categories)]

    async def get_item_reviews(self, item_id: int) -> list[Review]:
        return sorted(self._reviews.get(item_id, []), key=lambda r: (r.created_at, r.id))
