"""Taxonomy store adapters."""

from catalog_discovery.adapters.stores.catalog_loader import load_catalog
from catalog_discovery.adapters.stores.http_store import HttpTaxonomyStore
from catalog_discovery.adapters.stores.in_memory_store import InMemoryTaxonomyStore

__all__ = ["HttpTaxonomyStore", "InMemoryTaxonomyStore", "load_catalog"]
