"""Core domain layer."""

from catalog_discovery.core.entities import (
    ActivityBucket,
    ActivityInterval,
    Author,
    AuthorOverlap,
    Category,
    CollaborationNetwork,
    Item,
    KeywordFrequency,
    NetworkEdge,
    NetworkNode,
    Review,
    ScoredResult,
    SearchPage,
    SearchSuggestions,
    SentimentSummary,
    Tag,
    TagFrequency,
    WeightedTag,
)
from catalog_discovery.core.errors import (
    DeadlineExceededError,
    DiscoveryError,
    InvalidArgumentError,
    NotFoundError,
)
from catalog_discovery.core.filters import SearchField, SearchFilters
from catalog_discovery.core.interfaces import TaxonomyStore, TextNormalizer
from catalog_discovery.core.normalization import CaseFoldNormalizer, StopWordNormalizer
from catalog_discovery.core.scoring import RelevanceScorer, ScoringWeights

__all__ = [
    "ActivityBucket",
    "ActivityInterval",
    "Author",
    "AuthorOverlap",
    "Category",
    "CollaborationNetwork",
    "Item",
    "KeywordFrequency",
    "NetworkEdge",
    "NetworkNode",
    "Review",
    "ScoredResult",
    "SearchPage",
    "SearchSuggestions",
    "SentimentSummary",
    "Tag",
    "TagFrequency",
    "WeightedTag",
    "DeadlineExceededError",
    "DiscoveryError",
    "InvalidArgumentError",
    "NotFoundError",
    "SearchField",
    "SearchFilters",
    "TaxonomyStore",
    "TextNormalizer",
    "CaseFoldNormalizer",
    "StopWordNormalizer",
    "RelevanceScorer",
    "ScoringWeights",
]
