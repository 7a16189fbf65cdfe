"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from catalog_discovery.core import ScoringWeights, SearchField


@dataclass
class SearchConfig:
    """Relevance search settings."""
    page_size: int = 10
    fields: list = field(default_factory=lambda: ["name", "description"])
    field_match_points: int = 1
    prefix_bonus_points: int = 2
    suggestion_limit: int = 5


@dataclass
class SimilarityConfig:
    """Similar items settings."""
    limit: int = 5


@dataclass
class TagsConfig:
    """Tag analytics settings."""
    related_limit: int = 10
    trending_window_days: int = 30
    trending_limit: int = 10
    cloud_limit: int = 50
    cloud_scale: int = 10
    category_limit: int = 20


@dataclass
class NetworkConfig:
    """Collaboration network settings."""
    max_depth: int = 2
    min_strength: int = 2
    timeout_seconds: Optional[float] = 10.0
    parallel: bool = True


@dataclass
class ReviewsConfig:
    """Review analytics settings."""
    activity_interval: str = "month"
    activity_periods: int = 12
    keyword_language: str = "en"
    keyword_limit: int = 10


@dataclass
class PathsConfig:
    """Path settings."""
    catalog_file: Path = Path("catalog.yaml")


@dataclass
class Settings:
    """Application settings."""

    # Catalog API (from environment only)
    catalog_api_url: Optional[str] = None
    catalog_api_token: Optional[str] = None
    debug: bool = False

    # Config sections
    search: SearchConfig = field(default_factory=SearchConfig)
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)
    tags: TagsConfig = field(default_factory=TagsConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    reviews: ReviewsConfig = field(default_factory=ReviewsConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    @property
    def catalog_file(self) -> Path:
        return self.paths.catalog_file

    @property
    def search_fields(self) -> list[SearchField]:
        return [SearchField(name) for name in self.search.fields]

    @property
    def scoring_weights(self) -> ScoringWeights:
        return ScoringWeights(
            field_match=self.search.field_match_points,
            prefix_bonus=self.search.prefix_bonus_points,
        )

    @property
    def network_timeout(self) -> Optional[float]:
        return self.network.timeout_seconds

    @property
    def uses_catalog_api(self) -> bool:
        return bool(self.catalog_api_url)


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def _apply_section(section: object, values: dict, name: str) -> None:
    for key, value in values.items():
        if not hasattr(section, key):
            raise ValueError(f"Unknown setting {name}.{key}")
        setattr(section, key, value)


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings(
        catalog_api_url=os.getenv("CATALOG_API_URL") or None,
        catalog_api_token=os.getenv("CATALOG_API_TOKEN") or None,
        debug=_env_flag("CATALOG_DISCOVERY_DEBUG"),
    )

    for name in ("search", "similarity", "tags", "network", "reviews"):
        if name in config:
            _apply_section(getattr(settings, name), config[name] or {}, name)

    if "paths" in config:
        for key, value in (config["paths"] or {}).items():
            if not hasattr(settings.paths, key):
                raise ValueError(f"Unknown setting paths.{key}")
            setattr(settings.paths, key, Path(value))

    return settings
