"""Conversion of plain records (YAML or JSON) into core entities."""

from datetime import date, datetime
from typing import Any, Callable, Mapping, TypeVar

from catalog_discovery.core import Author, AuthorOverlap, Category, Item, Review, Tag
from catalog_discovery.core.entities import as_utc

T = TypeVar("T")


def parse_datetime(value: Any) -> datetime:
    """Parse ISO strings, dates and datetimes into aware datetimes."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return as_utc(datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    raise ValueError(f"Not a timestamp: {value!r}")


def _optional_str(value: Any) -> Any:
    return None if value is None else str(value)


def _parse(kind: str, builder: Callable[[Mapping[str, Any]], T], record: Mapping[str, Any]) -> T:
    try:
        return builder(record)
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed {kind} record {record!r}: {e}") from e


def tag_from_record(record: Mapping[str, Any]) -> Tag:
    return _parse("tag", lambda r: Tag(
        id=int(r["id"]),
        name=str(r["name"]),
        slug=str(r.get("slug") or r["name"]).lower().replace(" ", "-"),
    ), record)


def category_from_record(record: Mapping[str, Any]) -> Category:
    return _parse("category", lambda r: Category(
        id=int(r["id"]),
        name=str(r["name"]),
        parent_id=int(r["parent_id"]) if r.get("parent_id") is not None else None,
    ), record)


def author_from_record(record: Mapping[str, Any]) -> Author:
    return _parse("author", lambda r: Author(id=int(r["id"]), name=str(r["name"])), record)


def item_from_record(record: Mapping[str, Any]) -> Item:
    return _parse("item", lambda r: Item(
        id=int(r["id"]),
        name=str(r["name"]),
        description=str(r.get("description") or ""),
        category_id=int(r["category_id"]) if r.get("category_id") is not None else None,
        author_id=int(r["author_id"]),
        tag_ids=frozenset(int(t) for t in r.get("tag_ids") or ()),
        rating=float(r.get("rating", 0.0)),
        downloads_count=int(r.get("downloads_count", 0)),
        created_at=parse_datetime(r["created_at"]),
        version_min=_optional_str(r.get("version_min")),
        version_max=_optional_str(r.get("version_max")),
    ), record)


def review_from_record(record: Mapping[str, Any]) -> Review:
    return _parse("review", lambda r: Review(
        id=int(r["id"]),
        item_id=int(r["item_id"]),
        rating=int(r["rating"]),
        created_at=parse_datetime(r["created_at"]),
        comment=str(r.get("comment") or ""),
        is_active=bool(r.get("is_active", True)),
    ), record)


def overlap_from_record(record: Mapping[str, Any]) -> AuthorOverlap:
    return _parse("author overlap", lambda r: AuthorOverlap(
        author_id=int(r["author_id"]),
        name=str(r["name"]),
        shared_tag_count=int(r["shared_tag_count"]),
    ), record)
