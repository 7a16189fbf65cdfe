"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Collection, Iterable, Optional

from catalog_discovery.core.entities import (
    Author,
    AuthorOverlap,
    Category,
    Item,
    Review,
    Tag,
)
from catalog_discovery.core.filters import SearchFilters


class TaxonomyStore(ABC):
    """Read-only query interface over the catalog."""

    @abstractmethod
    async def find_items_by_filter(self, filters: SearchFilters) -> list[Item]:
        """Find items matching all filter predicates."""
        pass

    @abstractmethod
    async def find_items_by_ids(self, ids: Iterable[int]) -> list[Item]:
        """Find items by ids, skipping unknown ids."""
        pass

    @abstractmethod
    async def count_items_by_tag(
        self,
        tag_ids: Optional[Collection[int]] = None,
        category_ids: Optional[Collection[int]] = None,
        since: Optional[datetime] = None,
    ) -> dict[int, int]:
        """Count items per tag within the given scope.

        Tags without items in scope are omitted.
        """
        pass

    @abstractmethod
    async def find_authors_sharing_tags(
        self, tag_ids: Collection[int], exclude_author_id: int
    ) -> list[AuthorOverlap]:
        """Find other authors whose items carry any of the tags."""
        pass

    @abstractmethod
    async def get_item_tags(self, item_id: int) -> set[int]:
        """Get tag ids assigned to an item."""
        pass

    @abstractmethod
    async def get_author_items(self, author_id: int) -> list[Item]:
        """Get items created by an author."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> Optional[Item]:
        """Get a single item."""
        pass

    @abstractmethod
    async def get_author(self, author_id: int) -> Optional[Author]:
        """Get a single author."""
        pass

    @abstractmethod
    async def get_tags(self, tag_ids: Optional[Iterable[int]] = None) -> list[Tag]:
        """Get tags by ids, or all tags."""
        pass

    @abstractmethod
    async def get_authors(self) -> list[Author]:
        """Get all authors."""
        pass

    @abstractmethod
    async def get_categories(self) -> list[Category]:
        """Get the whole category tree as a flat list."""
        pass

    @abstractmethod
    async def get_item_reviews(self, item_id: int) -> list[Review]:
        """Get reviews of an item."""
        pass


class TextNormalizer(ABC):
    """Strategy for preparing text before keyword matching."""

    @abstractmethod
    def normalize(self, text: str) -> str:
        """Return the normalized form of text."""
        pass
