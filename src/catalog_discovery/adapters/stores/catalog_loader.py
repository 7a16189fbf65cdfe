"""Load a catalog snapshot from a YAML document."""

import logging
from pathlib import Path

import yaml

from catalog_discovery.adapters.stores.in_memory_store import InMemoryTaxonomyStore
from catalog_discovery.adapters.stores.records import (
    author_from_record,
    category_from_record,
    item_from_record,
    review_from_record,
    tag_from_record,
)

logger = logging.getLogger(__name__)


def load_catalog(path: Path) -> InMemoryTaxonomyStore:
    """Read a YAML catalog file into an in-memory store.

    The document is a mapping with optional `tags`, `categories`, `authors`,
    `items` and `reviews` lists of records.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document or one of its records is malformed.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Catalog {path} must be a mapping, got {type(data).__name__}")

    store = InMemoryTaxonomyStore(
        items=[item_from_record(r) for r in data.get("items") or []],
        tags=[tag_from_record(r) for r in data.get("tags") or []],
        categories=[category_from_record(r) for r in data.get("categories") or []],
        authors=[author_from_record(r) for r in data.get("authors") or []],
        reviews=[review_from_record(r) for r in data.get("reviews") or []],
    )
    logger.info("Catalog loaded from %s", path)
    return store
