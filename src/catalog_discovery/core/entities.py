"""Core domain entities."""

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

VERSION_PATTERN = re.compile(r"^\d+(\.\d+)*$")


def as_utc(moment: datetime) -> datetime:
    """Convert to UTC, treating naive timestamps as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class Tag:
    """Catalog tag."""

    id: int
    name: str
    slug: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tag name cannot be empty")
        if not self.slug:
            raise ValueError("Tag slug cannot be empty")


@dataclass(frozen=True)
class Category:
    """Catalog category, a node of the category tree."""

    id: int
    name: str
    parent_id: Optional[int] = None


@dataclass(frozen=True)
class Author:
    """Author of catalog items."""

    id: int
    name: str


@dataclass(frozen=True)
class Item:
    """Catalog item (addon)."""

    id: int
    name: str
    description: str
    category_id: Optional[int]
    author_id: int
    tag_ids: frozenset[int]
    rating: float
    downloads_count: int
    created_at: datetime
    version_min: Optional[str] = None
    version_max: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Name cannot be empty")
        if not 0.0 <= self.rating <= 5.0:
            raise ValueError(f"Rating must be between 0 and 5, got {self.rating}")
        if self.downloads_count < 0:
            raise ValueError("Download count cannot be negative")
        if not isinstance(self.tag_ids, frozenset):
            object.__setattr__(self, "tag_ids", frozenset(self.tag_ids))
        for key in ("version_min", "version_max"):
            value = getattr(self, key)
            if value is not None and not VERSION_PATTERN.match(value):
                raise ValueError(f"{key} must be a dotted numeric version, got {value!r}")
        object.__setattr__(self, "created_at", as_utc(self.created_at))


@dataclass(frozen=True)
class Review:
    """User review of an item."""

    id: int
    item_id: int
    rating: int
    created_at: datetime
    comment: str = ""
    is_active: bool = True

    def __post_init__(self) -> None:
        if not 1 <= self.rating <= 5:
            raise ValueError(f"Review rating must be between 1 and 5, got {self.rating}")
        object.__setattr__(self, "created_at", as_utc(self.created_at))


@dataclass
class ScoredResult:
    """Search hit. `score` is None for unscored (filter-only) listings."""

    item: Item
    score: Optional[int] = None


@dataclass
class SearchPage:
    """One page of search results."""

    results: list[ScoredResult]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0

    @property
    def items(self) -> list[Item]:
        return [result.item for result in self.results]


@dataclass
class SearchSuggestions:
    """Tags and authors whose names match a query."""

    tags: list[Tag] = field(default_factory=list)
    authors: list[Author] = field(default_factory=list)


@dataclass
class TagFrequency:
    """Tag with its usage count."""

    tag: Tag
    count: int


@dataclass
class WeightedTag:
    """Tag cloud entry."""

    tag: Tag
    weight: int
    normalized_weight: int


@dataclass
class AuthorOverlap:
    """Author sharing tags with another author."""

    author_id: int
    name: str
    shared_tag_count: int


@dataclass
class NetworkNode:
    """Author in a collaboration network."""

    author_id: int
    name: str
    level: int


@dataclass
class NetworkEdge:
    """Directed link between two collaborating authors."""

    source: int
    target: int
    strength: int


@dataclass
class CollaborationNetwork:
    """Graph of authors linked by shared tags."""

    nodes: list[NetworkNode] = field(default_factory=list)
    edges: list[NetworkEdge] = field(default_factory=list)

    @property
    def origin(self) -> NetworkNode:
        return self.nodes[0]

    def node_ids(self) -> list[int]:
        return [node.author_id for node in self.nodes]


class ActivityInterval(str, Enum):
    """Bucket size for review activity timelines."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass
class ActivityBucket:
    """Review activity within one period."""

    period: str
    review_count: int = 0
    average_rating: float = 0.0


@dataclass
class SentimentSummary:
    """Positive/neutral/negative split of an item's reviews."""

    positive: int
    neutral: int
    negative: int
    total: int
    sentiment_score: float
    average_rating: float


@dataclass
class KeywordFrequency:
    """Keyword found in review comments."""

    keyword: str
    count: int
