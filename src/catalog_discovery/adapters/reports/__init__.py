"""Report renderers."""

from catalog_discovery.adapters.reports.markdown_report import MarkdownReportGenerator

__all__ = ["MarkdownReportGenerator"]
