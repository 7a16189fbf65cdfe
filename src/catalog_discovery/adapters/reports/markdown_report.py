"""Markdown report generator."""

from typing import Optional

from catalog_discovery.core import (
    ActivityBucket,
    CollaborationNetwork,
    Item,
    KeywordFrequency,
    SearchPage,
    SearchSuggestions,
    SentimentSummary,
    TagFrequency,
    WeightedTag,
)


def _escape(text: str) -> str:
    return text.replace("|", "\\|")


class MarkdownReportGenerator:
    """Render discovery results as markdown."""

    def _item_rows(self, items: list[Item], scores: Optional[list[Optional[int]]] = None) -> list[str]:
        header = "| # | Item | Rating | Downloads |"
        divider = "|---|------|--------|-----------|"
        if scores is not None:
            header += " Score |"
            divider += "-------|"

        lines = [header, divider]
        for position, item in enumerate(items, start=1):
            row = f"| {position} | {_escape(item.name)} (#{item.id}) | {item.rating:.1f} | {item.downloads_count} |"
            if scores is not None:
                score = scores[position - 1]
                row += f" {score if score is not None else '-'} |"
            lines.append(row)
        lines.append("")
        return lines

    def search_page(self, query: str, page: SearchPage) -> str:
        title = f'# Search: "{query}"' if query.strip() else "# Catalog listing"
        lines = [
            title,
            "",
            f"Found {page.total} items, page {page.page} of {max(page.pages, 1)}.",
            "",
        ]
        if not page.results:
            lines.append("No matching items.")
            return "\n".join(lines)

        lines.extend(self._item_rows(page.items, [r.score for r in page.results]))
        return "\n".join(lines)

    def suggestions(self, query: str, suggestions: SearchSuggestions) -> str:
        lines = [f'# Suggestions for "{query}"', ""]
        if not suggestions.tags and not suggestions.authors:
            lines.append("No matching tags or authors.")
            return "\n".join(lines)

        if suggestions.tags:
            lines.extend(["## Tags", ""])
            lines.extend(f"- {tag.name} (`{tag.slug}`)" for tag in suggestions.tags)
            lines.append("")
        if suggestions.authors:
            lines.extend(["## Authors", ""])
            lines.extend(f"- {author.name} (#{author.id})" for author in suggestions.authors)
            lines.append("")
        return "\n".join(lines)

    def similar_items(self, item_id: int, items: list[Item]) -> str:
        lines = [f"# Items similar to #{item_id}", ""]
        if not items:
            lines.append("No similar items.")
            return "\n".join(lines)

        lines.extend(self._item_rows(items))
        return "\n".join(lines)

    def tag_frequencies(self, title: str, frequencies: list[TagFrequency]) -> str:
        lines = [f"# {title}", ""]
        if not frequencies:
            lines.append("No tags.")
            return "\n".join(lines)

        lines.extend(["| Tag | Items |", "|-----|-------|"])
        for frequency in frequencies:
            lines.append(f"| {_escape(frequency.tag.name)} | {frequency.count} |")
        lines.append("")
        return "\n".join(lines)

    def tag_cloud(self, weighted: list[WeightedTag]) -> str:
        """Tag cloud with a bar per tag sized by its normalized weight."""
        lines = ["# Tag cloud", ""]
        if not weighted:
            lines.append("No tags.")
            return "\n".join(lines)

        lines.extend(["| Tag | Items | Weight |", "|-----|-------|--------|"])
        for entry in weighted:
            bar = "#" * entry.normalized_weight
            lines.append(f"| {_escape(entry.tag.name)} | {entry.weight} | `{bar}` {entry.normalized_weight} |")
        lines.append("")
        return "\n".join(lines)

    def network(self, network: CollaborationNetwork) -> str:
        names = {node.author_id: node.name for node in network.nodes}
        origin = network.origin
        lines = [
            f"# Collaboration network of {origin.name}",
            "",
            f"Authors: {len(network.nodes)}, links: {len(network.edges)}",
            "",
            "## Authors",
            "",
        ]
        for node in network.nodes:
            indent = "  " * node.level
            lines.append(f"{indent}- {node.name} (#{node.author_id}, level {node.level})")
        lines.append("")

        if network.edges:
            lines.extend(["## Links", "", "| From | To | Shared tags |", "|------|----|-------------|"])
            for edge in network.edges:
                lines.append(
                    f"| {_escape(names.get(edge.source, str(edge.source)))} "
                    f"| {_escape(names.get(edge.target, str(edge.target)))} | {edge.strength} |"
                )
            lines.append("")
        return "\n".join(lines)

    def activity(self, item_id: int, interval: str, buckets: list[ActivityBucket]) -> str:
        lines = [
            f"# Review activity of #{item_id} by {interval}",
            "",
            "| Period | Reviews | Average rating |",
            "|--------|---------|----------------|",
        ]
        for bucket in buckets:
            average = f"{bucket.average_rating:.2f}" if bucket.review_count else "-"
            lines.append(f"| {bucket.period} | {bucket.review_count} | {average} |")
        lines.append("")
        return "\n".join(lines)

    def sentiment(self, item_id: int, summary: SentimentSummary) -> str:
        lines = [f"# Review sentiment of #{item_id}", ""]
        if not summary.total:
            lines.append("No reviews.")
            return "\n".join(lines)

        lines.extend([
            f"- Positive: {summary.positive}",
            f"- Neutral: {summary.neutral}",
            f"- Negative: {summary.negative}",
            f"- Score: {summary.sentiment_score:+.2f}",
            f"- Average rating: {summary.average_rating:.2f} from {summary.total} reviews",
            "",
        ])
        return "\n".join(lines)

    def keywords(self, item_id: int, keywords: list[KeywordFrequency]) -> str:
        lines = [f"# Review keywords of #{item_id}", ""]
        if not keywords:
            lines.append("No keywords.")
            return "\n".join(lines)

        lines.extend(f"- {k.keyword}: {k.count}" for k in keywords)
        lines.append("")
        return "\n".join(lines)
