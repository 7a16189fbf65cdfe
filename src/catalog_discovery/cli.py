"""CLI entry point for catalog discovery."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

import httpx
import typer
import yaml

from catalog_discovery.adapters.reports import MarkdownReportGenerator
from catalog_discovery.adapters.stores import HttpTaxonomyStore, load_catalog
from catalog_discovery.config import Settings, get_settings
from catalog_discovery.core import DiscoveryError, InvalidArgumentError, SearchFilters, TaxonomyStore
from catalog_discovery.logging_config import setup_logging
from catalog_discovery.use_cases import (
    CollaborationNetworkService,
    ReviewAnalyticsService,
    SearchService,
    SimilarityService,
    TagAnalyticsService,
)

app = typer.Typer(help="Search, recommend and analyze addons of a catalog.", no_args_is_help=True)

Report = Callable[[TaxonomyStore, MarkdownReportGenerator], Awaitable[str]]


@dataclass
class CliState:
    settings: Settings
    catalog: Optional[Path] = None


def open_store(state: CliState) -> TaxonomyStore:
    """Pick the catalog source: explicit file, catalog API, then configured file."""
    settings = state.settings
    if state.catalog is not None:
        return load_catalog(state.catalog)
    if settings.uses_catalog_api:
        return HttpTaxonomyStore(settings.catalog_api_url, token=settings.catalog_api_token)
    return load_catalog(settings.catalog_file)


def _run(ctx: typer.Context, title: str, report: Report, output: Optional[Path]) -> None:
    state: CliState = ctx.obj

    print("\n" + "=" * 70)
    print(f"🔎 {title}")
    print("=" * 70)

    try:
        store = open_store(state)
        text = asyncio.run(report(store, MarkdownReportGenerator()))
    except InvalidArgumentError as e:
        print(f"❌ Invalid argument: {e}")
        raise typer.Exit(code=2)
    except (DiscoveryError, OSError, ValueError, yaml.YAMLError, httpx.HTTPError) as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)

    if output is None:
        print(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    print(f"✓ Report saved: {output}")


def _search_service(store: TaxonomyStore, settings: Settings) -> SearchService:
    return SearchService(
        store,
        weights=settings.scoring_weights,
        default_fields=settings.search_fields,
    )


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(Path("config.yaml"), "--config", help="YAML settings file"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="YAML catalog file"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Content discovery over an addon catalog."""
    settings = get_settings(config)
    setup_logging(debug or settings.debug)
    ctx.obj = CliState(settings=settings, catalog=catalog)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument("", help="Keywords; empty lists items by name"),
    field: Optional[List[str]] = typer.Option(None, "--field", help="Field to search (repeatable)"),
    category: Optional[List[int]] = typer.Option(None, "--category"),
    author: Optional[List[int]] = typer.Option(None, "--author"),
    tag: Optional[List[int]] = typer.Option(None, "--tag"),
    min_rating: Optional[float] = typer.Option(None, "--min-rating"),
    max_rating: Optional[float] = typer.Option(None, "--max-rating"),
    min_downloads: Optional[int] = typer.Option(None, "--min-downloads"),
    max_downloads: Optional[int] = typer.Option(None, "--max-downloads"),
    version: Optional[str] = typer.Option(None, "--version", help="Required compatible version"),
    created_after: Optional[str] = typer.Option(None, "--created-after", help="ISO date"),
    created_before: Optional[str] = typer.Option(None, "--created-before", help="ISO date"),
    subcategories: bool = typer.Option(False, "--subcategories", help="Include subcategories"),
    page: int = typer.Option(1, "--page"),
    page_size: Optional[int] = typer.Option(None, "--page-size"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Relevance search with structural filters."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        filters = SearchFilters.from_mapping({
            "category_ids": category,
            "author_ids": author,
            "tag_ids": tag,
            "min_rating": min_rating,
            "max_rating": max_rating,
            "min_downloads": min_downloads,
            "max_downloads": max_downloads,
            "version": version,
            "created_after": created_after,
            "created_before": created_before,
            "include_subcategories": subcategories or None,
        })
        service = _search_service(store, settings)
        result = await service.search(
            query,
            fields=field or None,
            filters=filters,
            page=page,
            page_size=page_size if page_size is not None else settings.search.page_size,
        )
        return generator.search_page(query, result)

    _run(ctx, "SEARCH", report, output)


@app.command()
def suggest(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Part of a tag or author name"),
    limit: Optional[int] = typer.Option(None, "--limit"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Tags and authors matching a query."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        service = _search_service(store, settings)
        found = await service.suggest(query, limit if limit is not None else settings.search.suggestion_limit)
        return generator.suggestions(query, found)

    _run(ctx, "SUGGESTIONS", report, output)


@app.command()
def similar(
    ctx: typer.Context,
    item_id: int = typer.Argument(..., help="Source item id"),
    limit: Optional[int] = typer.Option(None, "--limit"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Items similar to a given item."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        items = await SimilarityService(store).find_similar(
            item_id, limit if limit is not None else settings.similarity.limit
        )
        return generator.similar_items(item_id, items)

    _run(ctx, "SIMILAR ITEMS", report, output)


def _tag_service(store: TaxonomyStore, settings: Settings) -> TagAnalyticsService:
    return TagAnalyticsService(store, cloud_scale=settings.tags.cloud_scale)


@app.command()
def tags(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Usage count of every tag."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        frequencies = await _tag_service(store, settings).get_tags_with_counts()
        frequencies.sort(key=lambda f: (-f.count, f.tag.name))
        return generator.tag_frequencies("Tags", frequencies)

    _run(ctx, "TAGS", report, output)


@app.command("related-tags")
def related_tags(
    ctx: typer.Context,
    tag_id: int = typer.Argument(..., help="Tag id"),
    limit: Optional[int] = typer.Option(None, "--limit"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Tags most often used together with a tag."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        related = await _tag_service(store, settings).find_related_tags(
            tag_id, limit if limit is not None else settings.tags.related_limit
        )
        return generator.tag_frequencies(f"Tags related to #{tag_id}", related)

    _run(ctx, "RELATED TAGS", report, output)


@app.command()
def trending(
    ctx: typer.Context,
    days: Optional[int] = typer.Option(None, "--days", help="Window of recent days"),
    limit: Optional[int] = typer.Option(None, "--limit"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Tags most used by recently created items."""
    settings: Settings = ctx.obj.settings
    window = days if days is not None else settings.tags.trending_window_days

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        frequencies = await _tag_service(store, settings).get_trending_tags(
            window, limit if limit is not None else settings.tags.trending_limit
        )
        return generator.tag_frequencies(f"Trending tags, last {window} days", frequencies)

    _run(ctx, "TRENDING TAGS", report, output)


@app.command()
def cloud(
    ctx: typer.Context,
    category: Optional[int] = typer.Option(None, "--category", help="Limit to one category"),
    limit: Optional[int] = typer.Option(None, "--limit"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Weighted tag cloud."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        weighted = await _tag_service(store, settings).generate_tag_cloud(
            limit if limit is not None else settings.tags.cloud_limit, category
        )
        return generator.tag_cloud(weighted)

    _run(ctx, "TAG CLOUD", report, output)


@app.command("tags-by-category")
def tags_by_category(
    ctx: typer.Context,
    category_ids: List[int] = typer.Argument(..., help="Category ids"),
    limit: Optional[int] = typer.Option(None, "--limit"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Most used tags within categories."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        frequencies = await _tag_service(store, settings).find_tags_by_categories(
            category_ids, limit if limit is not None else settings.tags.category_limit
        )
        title = "Tags in categories " + ", ".join(f"#{c}" for c in category_ids)
        return generator.tag_frequencies(title, frequencies)

    _run(ctx, "TAGS BY CATEGORY", report, output)


@app.command()
def network(
    ctx: typer.Context,
    author_id: int = typer.Argument(..., help="Origin author id"),
    depth: Optional[int] = typer.Option(None, "--depth"),
    min_strength: Optional[int] = typer.Option(None, "--min-strength", help="Shared tags per link"),
    sequential: bool = typer.Option(False, "--sequential", help="Expand one author at a time"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Collaboration network of an author."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        service = CollaborationNetworkService(
            store,
            min_strength=min_strength if min_strength is not None else settings.network.min_strength,
            timeout=settings.network_timeout,
            parallel=settings.network.parallel and not sequential,
        )
        graph = await service.build_network(
            author_id, depth if depth is not None else settings.network.max_depth
        )
        return generator.network(graph)

    _run(ctx, "COLLABORATION NETWORK", report, output)


def _review_service(store: TaxonomyStore, settings: Settings) -> ReviewAnalyticsService:
    return ReviewAnalyticsService(store, keyword_language=settings.reviews.keyword_language)


@app.command("review-activity")
def review_activity(
    ctx: typer.Context,
    item_id: int = typer.Argument(..., help="Item id"),
    interval: Optional[str] = typer.Option(None, "--interval", help="day, week, month or year"),
    periods: Optional[int] = typer.Option(None, "--periods"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Review counts over time."""
    settings: Settings = ctx.obj.settings
    bucket = interval or settings.reviews.activity_interval

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        timeline = await _review_service(store, settings).get_review_activity_over_time(
            item_id, bucket, periods if periods is not None else settings.reviews.activity_periods
        )
        return generator.activity(item_id, bucket, timeline)

    _run(ctx, "REVIEW ACTIVITY", report, output)


@app.command()
def sentiment(
    ctx: typer.Context,
    item_id: int = typer.Argument(..., help="Item id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Positive, neutral and negative review split."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        summary = await _review_service(store, settings).get_sentiment(item_id)
        return generator.sentiment(item_id, summary)

    _run(ctx, "REVIEW SENTIMENT", report, output)


@app.command()
def keywords(
    ctx: typer.Context,
    item_id: int = typer.Argument(..., help="Item id"),
    language: Optional[str] = typer.Option(None, "--language", help="Stop word language (en, cs)"),
    limit: Optional[int] = typer.Option(None, "--limit"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Most common words in review comments."""
    settings: Settings = ctx.obj.settings

    async def report(store: TaxonomyStore, generator: MarkdownReportGenerator) -> str:
        found = await _review_service(store, settings).find_common_keywords(
            item_id, limit if limit is not None else settings.reviews.keyword_limit, language
        )
        return generator.keywords(item_id, found)

    _run(ctx, "REVIEW KEYWORDS", report, output)


if __name__ == "__main__":
    app()
