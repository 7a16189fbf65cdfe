"""Discovery use cases."""

import asyncio
import logging
import time
from collections import defaultdict, deque
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from catalog_discovery.core import (
    ActivityBucket,
    ActivityInterval,
    AuthorOverlap,
    CaseFoldNormalizer,
    CollaborationNetwork,
    DeadlineExceededError,
    InvalidArgumentError,
    Item,
    KeywordFrequency,
    NetworkEdge,
    NetworkNode,
    NotFoundError,
    RelevanceScorer,
    Review,
    ScoredResult,
    ScoringWeights,
    SearchField,
    SearchFilters,
    SearchPage,
    SearchSuggestions,
    SentimentSummary,
    TagFrequency,
    TaxonomyStore,
    TextNormalizer,
    WeightedTag,
)
from catalog_discovery.core.activity import build_timeline, count_keywords, summarize_sentiment
from catalog_discovery.core.filters import validate_limit, validate_pagination
from catalog_discovery.core.normalization import StopWordNormalizer, stop_words_for
from catalog_discovery.core.tag_stats import count_tags, normalize_weights, rank_counts

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DEFAULT_SEARCH_FIELDS = (SearchField.NAME, SearchField.DESCRIPTION)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


async def expand_subcategories(store: TaxonomyStore, category_ids: Iterable[int]) -> tuple[int, ...]:
    """Add every descendant category to the given ids, parents first."""
    children: dict[int, list[int]] = defaultdict(list)
    for category in await store.get_categories():
        if category.parent_id is not None:
            children[category.parent_id].append(category.id)

    expanded = list(dict.fromkeys(category_ids))
    seen = set(expanded)
    queue = deque(expanded)
    while queue:
        for child_id in sorted(children.get(queue.popleft(), ())):
            if child_id not in seen:
                seen.add(child_id)
                expanded.append(child_id)
                queue.append(child_id)
    return tuple(expanded)


class SearchService:
    """Full-text relevance search over catalog items."""

    def __init__(
        self,
        store: TaxonomyStore,
        normalizer: Optional[TextNormalizer] = None,
        weights: Optional[ScoringWeights] = None,
        default_fields: Iterable[SearchField] = DEFAULT_SEARCH_FIELDS,
    ) -> None:
        self.store = store
        self.normalizer = normalizer or CaseFoldNormalizer()
        self.weights = weights or ScoringWeights()
        self.default_fields = tuple(default_fields)

    async def search(
        self,
        query: str,
        fields: Optional[Iterable[SearchField]] = None,
        filters: Optional[SearchFilters] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> SearchPage:
        """Search items matching any keyword in any of the fields.

        Items are pre-filtered by `filters`, scored, sorted by score (then id)
        and paginated. An empty query skips scoring and lists the filtered
        items by name.

        Raises:
            InvalidArgumentError: On bad pagination or an empty field set.
        """
        validate_pagination(page, page_size)
        scorer = RelevanceScorer(
            fields if fields is not None else self.default_fields,
            weights=self.weights,
            normalizer=self.normalizer,
        )
        filters = filters or SearchFilters()
        if filters.include_subcategories and filters.category_ids:
            expanded = await expand_subcategories(self.store, filters.category_ids)
            filters = replace(filters, category_ids=expanded)

        candidates = await self.store.find_items_by_filter(filters)
        keywords = scorer.keywords(query)

        if keywords:
            results = scorer.rank(candidates, keywords)
        else:
            results = self._list_unscored(candidates)

        logger.debug(
            "Search %r: %d candidates, %d results", query, len(candidates), len(results)
        )

        start = (page - 1) * page_size
        return SearchPage(
            results=results[start:start + page_size],
            total=len(results),
            page=page,
            page_size=page_size,
        )

    def _list_unscored(self, items: list[Item]) -> list[ScoredResult]:
        ordered = sorted(items, key=lambda item: (self.normalizer.normalize(item.name), item.id))
        return [ScoredResult(item=item) for item in ordered]

    async def suggest(self, query: str, limit: int = 5) -> SearchSuggestions:
        """Find tags and authors whose names contain the query."""
        validate_limit(limit)
        needle = self.normalizer.normalize(query or "").strip()
        if not needle or limit == 0:
            return SearchSuggestions()

        def by_name(entity) -> tuple:
            return (self.normalizer.normalize(entity.name), entity.id)

        tags = [t for t in await self.store.get_tags() if needle in self.normalizer.normalize(t.name)]
        authors = [
            a for a in await self.store.get_authors() if needle in self.normalizer.normalize(a.name)
        ]
        return SearchSuggestions(
            tags=sorted(tags, key=by_name)[:limit],
            authors=sorted(authors, key=by_name)[:limit],
        )


class SimilarityService:
    """Recommend items similar to a given item."""

    def __init__(self, store: TaxonomyStore) -> None:
        self.store = store

    async def find_similar(self, item_id: int, limit: int = 5) -> list[Item]:
        """Find the most downloaded items sharing taxonomy with an item.

        Items sharing at least one tag are used when the item has tags;
        otherwise items from the same category.

        Raises:
            NotFoundError: If the item does not exist.
            InvalidArgumentError: If limit is negative.
        """
        validate_limit(limit)
        source = await self.store.get_item(item_id)
        if source is None:
            raise NotFoundError("Item", item_id)
        if limit == 0:
            return []

        tag_ids = await self.store.get_item_tags(item_id)
        if tag_ids:
            filters = SearchFilters(tag_ids=tuple(sorted(tag_ids)))
        elif source.category_id is not None:
            filters = SearchFilters(category_ids=(source.category_id,))
        else:
            logger.debug("Item %d has neither tags nor category", item_id)
            return []

        candidates = [c for c in await self.store.find_items_by_filter(filters) if c.id != item_id]
        candidates.sort(key=lambda c: (-c.downloads_count, c.id))
        return candidates[:limit]


class TagAnalyticsService:
    """Tag usage statistics: related, trending and weighted cloud."""

    def __init__(
        self,
        store: TaxonomyStore,
        clock: Clock = utc_now,
        cloud_scale: int = 10,
    ) -> None:
        if cloud_scale < 1:
            raise InvalidArgumentError("cloud_scale must be >= 1")
        self.store = store
        self.clock = clock
        self.cloud_scale = cloud_scale

    async def _resolve(self, ranked: list[tuple[int, int]]) -> list[TagFrequency]:
        if not ranked:
            return []

        tags = {tag.id: tag for tag in await self.store.get_tags([tag_id for tag_id, _ in ranked])}
        frequencies = []
        for tag_id, count in ranked:
            tag = tags.get(tag_id)
            if tag is None:
                logger.warning("Tag %d is counted but missing from the store", tag_id)
                continue
            frequencies.append(TagFrequency(tag=tag, count=count))
        return frequencies

    async def get_tags_with_counts(self) -> list[TagFrequency]:
        """Usage count of every tag that is used at least once."""
        counts = await self.store.count_items_by_tag()
        return [
            TagFrequency(tag=tag, count=counts[tag.id])
            for tag in await self.store.get_tags()
            if counts.get(tag.id, 0) > 0
        ]

    async def find_related_tags(self, tag_id: int, limit: int = 10) -> list[TagFrequency]:
        """Tags co-occurring with `tag_id`, most frequent first."""
        validate_limit(limit)
        if limit == 0:
            return []

        items = await self.store.find_items_by_filter(SearchFilters(tag_ids=(tag_id,)))
        counts = count_tags(items, exclude=[tag_id])
        return await self._resolve(rank_counts(counts, limit))

    async def get_trending_tags(self, window_days: int = 30, limit: int = 10) -> list[TagFrequency]:
        """Tags most used by items created within the last `window_days` days."""
        validate_limit(limit)
        if not isinstance(window_days, int) or window_days < 1:
            raise InvalidArgumentError(f"window_days must be >= 1, got {window_days!r}")
        if limit == 0:
            return []

        since = self.clock() - timedelta(days=window_days)
        counts = await self.store.count_items_by_tag(since=since)
        return await self._resolve(rank_counts(counts, limit))

    async def generate_tag_cloud(
        self, limit: int = 50, category_id: Optional[int] = None
    ) -> list[WeightedTag]:
        """Top tags with weights normalized to 1..cloud_scale."""
        validate_limit(limit)
        if limit == 0:
            return []

        scope = [category_id] if category_id is not None else None
        counts = await self.store.count_items_by_tag(category_ids=scope)
        frequencies = await self._resolve(rank_counts(counts, limit))

        weights = normalize_weights({f.tag.id: f.count for f in frequencies}, self.cloud_scale)
        return [
            WeightedTag(tag=f.tag, weight=f.count, normalized_weight=weights[f.tag.id])
            for f in frequencies
        ]

    async def find_tags_by_categories(
        self, category_ids: Iterable[int], limit: int = 20
    ) -> list[TagFrequency]:
        """Most used tags among items of the given categories."""
        validate_limit(limit)
        category_ids = list(dict.fromkeys(category_ids))
        if not category_ids or limit == 0:
            return []

        counts = await self.store.count_items_by_tag(category_ids=category_ids)
        return await self._resolve(rank_counts(counts, limit))


class CollaborationNetworkService:
    """Build networks of authors working with the same tags."""

    def __init__(
        self,
        store: TaxonomyStore,
        min_strength: int = 2,
        timeout: Optional[float] = None,
        parallel: bool = True,
    ) -> None:
        if min_strength < 1:
            raise InvalidArgumentError("min_strength must be >= 1")
        self.store = store
        self.min_strength = min_strength
        self.timeout = timeout
        self.parallel = parallel

    async def build_network(
        self,
        author_id: int,
        max_depth: int = 2,
        deadline: Optional[float] = None,
    ) -> CollaborationNetwork:
        """Expand the network breadth-first from an author.

        Args:
            author_id: Origin author, the only node at level 0.
            max_depth: Deepest level a node can be discovered at.
            deadline: Absolute `time.monotonic()` value; defaults to now + timeout.

        Raises:
            NotFoundError: If the author does not exist.
            InvalidArgumentError: If max_depth is negative.
            DeadlineExceededError: If the deadline passes during expansion.
        """
        validate_limit(max_depth, "max_depth")
        origin = await self.store.get_author(author_id)
        if origin is None:
            raise NotFoundError("Author", author_id)
        if deadline is None and self.timeout is not None:
            deadline = time.monotonic() + self.timeout

        network = CollaborationNetwork(nodes=[NetworkNode(origin.id, origin.name, 0)])
        visited = {origin.id}
        frontier = [origin.id]
        level = 0

        while frontier and level < max_depth:
            if self.parallel:
                collaborators = await asyncio.gather(
                    *(self._find_collaborators(source_id, deadline) for source_id in frontier)
                )
            else:
                collaborators = [
                    await self._find_collaborators(source_id, deadline) for source_id in frontier
                ]

            # Merged in frontier order, whatever order the queries finished in
            next_frontier = []
            for source_id, overlaps in zip(frontier, collaborators):
                for overlap in overlaps:
                    network.edges.append(
                        NetworkEdge(source_id, overlap.author_id, overlap.shared_tag_count)
                    )
                    if overlap.author_id in visited:
                        continue
                    visited.add(overlap.author_id)
                    network.nodes.append(NetworkNode(overlap.author_id, overlap.name, level + 1))
                    next_frontier.append(overlap.author_id)

            level += 1
            logger.debug(
                "Network of author %d: level %d discovered %d authors",
                author_id, level, len(next_frontier),
            )
            frontier = next_frontier

        return network

    async def _find_collaborators(
        self, author_id: int, deadline: Optional[float]
    ) -> list[AuthorOverlap]:
        if deadline is not None and time.monotonic() >= deadline:
            raise DeadlineExceededError(f"Deadline exceeded while expanding author {author_id}")

        tag_ids: set[int] = set()
        for item in await self.store.get_author_items(author_id):
            tag_ids.update(item.tag_ids)
        if not tag_ids:
            return []

        overlaps = await self.store.find_authors_sharing_tags(sorted(tag_ids), author_id)
        strong = [
            o for o in overlaps
            if o.shared_tag_count >= self.min_strength and o.author_id != author_id
        ]
        strong.sort(key=lambda o: (-o.shared_tag_count, o.author_id))
        return strong


class ReviewAnalyticsService:
    """Review activity, sentiment and keyword statistics for an item."""

    def __init__(
        self,
        store: TaxonomyStore,
        clock: Clock = utc_now,
        keyword_language: str = "en",
    ) -> None:
        self.store = store
        self.clock = clock
        self.keyword_language = keyword_language

    async def _reviews(self, item_id: int, active_only: bool) -> list[Review]:
        if await self.store.get_item(item_id) is None:
            raise NotFoundError("Item", item_id)
        reviews = await self.store.get_item_reviews(item_id)
        return [r for r in reviews if r.is_active or not active_only]

    async def get_review_activity_over_time(
        self,
        item_id: int,
        interval: str = "month",
        periods: int = 12,
        active_only: bool = True,
    ) -> list[ActivityBucket]:
        """Review count and average rating for each of the last `periods` periods."""
        try:
            bucket = ActivityInterval(interval)
        except ValueError:
            raise InvalidArgumentError(f"Unknown interval: {interval!r}") from None
        validate_limit(periods, "periods")

        reviews = await self._reviews(item_id, active_only)
        return build_timeline(reviews, bucket, periods, self.clock())

    async def get_sentiment(self, item_id: int, active_only: bool = True) -> SentimentSummary:
        return summarize_sentiment(await self._reviews(item_id, active_only))

    async def find_common_keywords(
        self,
        item_id: int,
        limit: int = 10,
        language: Optional[str] = None,
    ) -> list[KeywordFrequency]:
        """Most frequent non-stop-words in review comments."""
        validate_limit(limit)
        normalizer = StopWordNormalizer(stop_words_for(language or self.keyword_language))
        reviews = await self._reviews(item_id, active_only=True)
        return count_keywords((r.comment for r in reviews if r.comment), normalizer, limit)
