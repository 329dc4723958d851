"""Merchant listing pipeline: filter, then sort, then paginate.

Totals are computed on the filtered set so that pagination metadata always
describes the full result, whatever page is requested.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from shared.models import Merchant


_STRING_SORT_FIELDS = {"name", "email", "status"}
_TIMESTAMP_SORT_FIELDS = {
    "createdat": "created_at",
    "created_at": "created_at",
    "updatedat": "updated_at",
    "updated_at": "updated_at",
}
DEFAULT_SORT_FIELD = "name"


@dataclass(frozen=True, slots=True)
class ListingPage:
    items: list[Merchant]
    total_count: int
    total_pages: int


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(getattr(value, "value", value)).lower()


def filter_merchants(
    merchants: Sequence[Merchant],
    *,
    search: str | None = None,
    status: str | None = None,
) -> list[Merchant]:
    """Keep merchants matching the exact status and the case-insensitive search term."""

    rows = list(merchants)
    if status is not None and status.strip():
        rows = [merchant for merchant in rows if merchant.status == status]

    if search is not None and search.strip():
        needle = search.lower()
        rows = [
            merchant
            for merchant in rows
            if any(
                value is not None and needle in value.lower()
                for value in (merchant.name, merchant.id, merchant.email)
            )
        ]
    return rows


def _timestamp_key(field_name: str) -> Callable[[Merchant], tuple[Any, ...]]:
    def key(merchant: Merchant) -> tuple[Any, ...]:
        value: datetime | None = getattr(merchant, field_name)
        if value is None:
            return (0,)
        return (1, value)

    return key


def sort_key_for(sort_field: str | None) -> Callable[[Merchant], tuple[Any, ...]]:
    """Return the comparison key for a sort field, falling back to name."""

    normalized = (sort_field or "").strip().lower()
    if normalized in _TIMESTAMP_SORT_FIELDS:
        return _timestamp_key(_TIMESTAMP_SORT_FIELDS[normalized])
    if normalized not in _STRING_SORT_FIELDS:
        normalized = DEFAULT_SORT_FIELD
    return lambda merchant: (_text(getattr(merchant, normalized)),)


def sort_merchants(
    merchants: Sequence[Merchant],
    *,
    sort_field: str | None = DEFAULT_SORT_FIELD,
    sort_direction: str | None = "asc",
) -> list[Merchant]:
    """Stable sort; ties keep their input order in both directions."""

    descending = (sort_direction or "").strip().lower() == "desc"
    return sorted(merchants, key=sort_key_for(sort_field), reverse=descending)


def total_pages_for(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size)


def paginate(items: Sequence[Merchant], *, page: int, page_size: int) -> list[Merchant]:
    """Slice a 1-based page; pages past the end are empty rather than an error."""

    if page_size < 1:
        raise ValueError("page size must be >= 1")
    offset = max(0, page - 1) * page_size
    return list(items[offset : offset + page_size])


def list_merchants(
    merchants: Sequence[Merchant],
    *,
    search: str | None = None,
    status: str | None = None,
    sort_field: str | None = DEFAULT_SORT_FIELD,
    sort_direction: str | None = "asc",
    page: int = 1,
    page_size: int = 20,
) -> ListingPage:
    filtered = filter_merchants(merchants, search=search, status=status)
    ordered = sort_merchants(filtered, sort_field=sort_field, sort_direction=sort_direction)
    return ListingPage(
        items=paginate(ordered, page=page, page_size=page_size),
        total_count=len(filtered),
        total_pages=total_pages_for(len(filtered), page_size),
    )
