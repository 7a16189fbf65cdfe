"""Keyword relevance scoring."""

from dataclasses import dataclass
from typing import Iterable, Optional

from catalog_discovery.core.entities import Item, ScoredResult
from catalog_discovery.core.errors import InvalidArgumentError
from catalog_discovery.core.filters import PRIMARY_FIELD, SearchField
from catalog_discovery.core.interfaces import TextNormalizer
from catalog_discovery.core.normalization import CaseFoldNormalizer


@dataclass(frozen=True)
class ScoringWeights:
    """Points awarded per keyword/field match."""

    field_match: int = 1
    prefix_bonus: int = 2

    def __post_init__(self) -> None:
        if self.field_match <= 0:
            raise InvalidArgumentError("field_match must be positive")
        if self.prefix_bonus <= 0:
            raise InvalidArgumentError("prefix_bonus must be positive")


class RelevanceScorer:
    """Match and score items against query keywords."""

    def __init__(
        self,
        fields: Iterable[SearchField],
        weights: Optional[ScoringWeights] = None,
        normalizer: Optional[TextNormalizer] = None,
    ) -> None:
        try:
            chosen = {SearchField(f) for f in fields}
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from None
        # Stable field order
        self.fields = sorted(chosen, key=lambda f: f.value)
        if not self.fields:
            raise InvalidArgumentError("At least one search field is required")
        self.weights = weights or ScoringWeights()
        self.normalizer = normalizer or CaseFoldNormalizer()

    def keywords(self, query: str) -> list[str]:
        """Split a query into normalized keywords."""
        return self.normalizer.normalize(query or "").split()

    def _field_values(self, item: Item) -> list[tuple[SearchField, str]]:
        return [
            (field, self.normalizer.normalize(getattr(item, field.value) or ""))
            for field in self.fields
        ]

    def score(self, item: Item, keywords: list[str]) -> int:
        """Sum points over every keyword/field pair. Zero means no match."""
        total = 0
        values = self._field_values(item)
        for keyword in keywords:
            for field, value in values:
                position = value.find(keyword)
                if position < 0:
                    continue
                total += self.weights.field_match
                if field == PRIMARY_FIELD and position == 0:
                    total += self.weights.prefix_bonus
        return total

    def rank(self, items: Iterable[Item], keywords: list[str]) -> list[ScoredResult]:
        """Keep matching items, sorted by score descending then id."""
        results = []
        for item in items:
            points = self.score(item, keywords)
            if points > 0:
                results.append(ScoredResult(item=item, score=points))

        results.sort(key=lambda r: (-r.score, r.item.id))
        return results
