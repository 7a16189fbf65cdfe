"""Structured search filters and argument validation."""

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from catalog_discovery.core.entities import VERSION_PATTERN, Item, as_utc
from catalog_discovery.core.errors import InvalidArgumentError


class SearchField(str, Enum):
    """Item fields that free-text search can look into."""

    NAME = "name"
    DESCRIPTION = "description"


PRIMARY_FIELD = SearchField.NAME


def parse_version(value: str) -> tuple[int, ...]:
    """Parse a dotted version string into a comparable tuple.

    Trailing zero components are dropped so that "19" and "19.0" compare equal.
    """
    text = str(value).strip()
    if not VERSION_PATTERN.match(text):
        raise InvalidArgumentError(f"Malformed version: {value!r}")

    parts = [int(part) for part in text.split(".")]
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def validate_pagination(page: int, page_size: int) -> None:
    """Reject page numbers and sizes below 1."""
    if not isinstance(page, int) or page < 1:
        raise InvalidArgumentError(f"page must be >= 1, got {page!r}")
    if not isinstance(page_size, int) or page_size < 1:
        raise InvalidArgumentError(f"page_size must be >= 1, got {page_size!r}")


def validate_limit(value: int, name: str = "limit") -> None:
    """Reject negative limits and depths."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidArgumentError(f"{name} must be a non-negative integer, got {value!r}")


def _to_number(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{key} must be numeric, got {value!r}")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value) if "." in value else int(value)
        except ValueError:
            pass
    raise InvalidArgumentError(f"{key} must be numeric, got {value!r}")


def _to_ids(key: str, value: Any) -> tuple[int, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [part for part in value.split(",") if part.strip()]
    elif isinstance(value, int) and not isinstance(value, bool):
        value = [value]
    try:
        return tuple(int(v) for v in value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{key} must be a list of integer ids, got {value!r}") from None


def _to_datetime(key: str, value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, str):
        try:
            return as_utc(datetime.fromisoformat(value))
        except ValueError:
            pass
    raise InvalidArgumentError(f"{key} must be a datetime, got {value!r}")


@dataclass(frozen=True)
class SearchFilters:
    """Structural pre-filter for catalog items.

    Distinct keys combine with AND; ids listed within one key combine with OR.
    """

    category_ids: tuple[int, ...] = ()
    author_ids: tuple[int, ...] = ()
    tag_ids: tuple[int, ...] = ()
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None
    min_downloads: Optional[int] = None
    max_downloads: Optional[int] = None
    version: Optional[str] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    include_subcategories: bool = False

    def __post_init__(self) -> None:
        for key in ("category_ids", "author_ids", "tag_ids"):
            object.__setattr__(self, key, _to_ids(key, getattr(self, key)))

        for key in ("min_rating", "max_rating"):
            value = getattr(self, key)
            if value is None:
                continue
            number = _to_number(key, value)
            if not 0 <= number <= 5:
                raise InvalidArgumentError(f"{key} must be between 0 and 5, got {value!r}")
            object.__setattr__(self, key, number)

        for key in ("min_downloads", "max_downloads"):
            value = getattr(self, key)
            if value is None:
                continue
            number = _to_number(key, value)
            if number < 0:
                raise InvalidArgumentError(f"{key} cannot be negative, got {value!r}")
            object.__setattr__(self, key, number)

        for key in ("created_after", "created_before"):
            object.__setattr__(self, key, _to_datetime(key, getattr(self, key)))

        if self.version is not None:
            parse_version(self.version)
            object.__setattr__(self, "version", str(self.version).strip())

        self._check_range("rating", self.min_rating, self.max_rating)
        self._check_range("downloads", self.min_downloads, self.max_downloads)
        self._check_range("created", self.created_after, self.created_before)

    @staticmethod
    def _check_range(name: str, low: Any, high: Any) -> None:
        if low is not None and high is not None and low > high:
            raise InvalidArgumentError(f"Empty {name} range: {low!r} > {high!r}")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "SearchFilters":
        """Build filters from an untyped mapping, rejecting unknown keys.

        None and empty-string values are treated as absent.
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidArgumentError(f"Unknown filter keys: {', '.join(unknown)}")

        values = {key: value for key, value in data.items() if value is not None and value != ""}
        return cls(**values)

    def matches(self, item: Item) -> bool:
        """Check all filter predicates against an item."""
        if self.category_ids and item.category_id not in self.category_ids:
            return False
        if self.author_ids and item.author_id not in self.author_ids:
            return False
        if self.tag_ids and item.tag_ids.isdisjoint(self.tag_ids):
            return False
        if self.min_rating is not None and item.rating < self.min_rating:
            return False
        if self.max_rating is not None and item.rating > self.max_rating:
            return False
        if self.min_downloads is not None and item.downloads_count < self.min_downloads:
            return False
        if self.max_downloads is not None and item.downloads_count > self.max_downloads:
            return False
        if self.created_after is not None and item.created_at < self.created_after:
            return False
        if self.created_before is not None and item.created_at > self.created_before:
            return False
        if self.version is not None and not is_version_compatible(item, self.version):
            return False
        return True

    def to_params(self) -> dict[str, str]:
        """Encode filters as query string parameters."""
        params: dict[str, str] = {}
        for key in ("category_ids", "author_ids", "tag_ids"):
            ids = getattr(self, key)
            if ids:
                params[key] = ",".join(str(i) for i in ids)
        for key in ("min_rating", "max_rating", "min_downloads", "max_downloads", "version"):
            value = getattr(self, key)
            if value is not None:
                params[key] = str(value)
        for key in ("created_after", "created_before"):
            value = getattr(self, key)
            if value is not None:
                params[key] = value.isoformat()
        return params


def is_version_compatible(item: Item, version: str) -> bool:
    """Check that `version` lies within the item's supported version range."""
    if item.version_min is None:
        return False

    requested = parse_version(version)
    if parse_version(item.version_min) > requested:
        return False
    if item.version_max is not None and parse_version(item.version_max) < requested:
        return False
    return True
