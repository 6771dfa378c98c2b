"""Filter and sort engine for canonical property records.

Everything here is pure: records and criteria go in, a new list comes out,
and nothing raises for odd criteria values.
"""

from __future__ import annotations

import locale
import unicodedata
from typing import Callable, Dict, Iterable, List, Sequence, Tuple, TypeVar

from ..models.property import PROPERTY_TYPES, STATUS_TYPES, PropertyRecord
from ..models.search import DEFAULT_SORT, SearchCriteria

R = TypeVar("R", bound=PropertyRecord)

Predicate = Callable[[PropertyRecord], bool]

SORT_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("newest", "Newest First"),
    ("price-low", "Price: Low to High"),
    ("price-high", "Price: High to Low"),
    ("square-feet", "Largest First"),
)

FAVORITE_SORT_OPTIONS: Tuple[Tuple[str, str], ...] = SORT_OPTIONS + (("alphabetical", "A-Z"),)


def _title_key(record: PropertyRecord) -> Tuple[str, str]:
    """Accent- and case-insensitive title order: "Éclair" sorts with the E's."""
    title = record.title.casefold()
    folded = "".join(ch for ch in unicodedata.normalize("NFKD", title) if not unicodedata.combining(ch))
    try:
        return locale.strxfrm(folded), title
    except (ValueError, OSError):
        return folded, title


# sort key -> (key function, descending)
SORT_KEYS: Dict[str, Tuple[Callable[[PropertyRecord], object], bool]] = {
    "price-low": (lambda r: r.price, False),
    "price-high": (lambda r: r.price, True),
    "newest": (lambda r: r.listing_date, True),
    "square-feet": (lambda r: r.square_feet, True),
    "alphabetical": (_title_key, False),
}


def matches_query(record: PropertyRecord, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    haystack = (
        record.title,
        record.location.city,
        record.location.state,
        record.location.address,
    )
    return any(needle in (value or "").lower() for value in haystack)


def build_predicates(criteria: SearchCriteria) -> List[Predicate]:
    """Return one predicate per active criterion; inactive ones are skipped."""

    predicates: List[Predicate] = []
    if criteria.search_query:
        predicates.append(lambda r: matches_query(r, criteria.search_query))
    if criteria.price_min is not None:
        predicates.append(lambda r: r.price >= criteria.price_min)
    if criteria.price_max is not None:
        predicates.append(lambda r: r.price <= criteria.price_max)
    if criteria.bedrooms is not None:
        predicates.append(lambda r: r.bedrooms >= criteria.bedrooms)
    if criteria.bathrooms is not None:
        predicates.append(lambda r: r.bathrooms >= criteria.bathrooms)
    if criteria.property_type:
        predicates.append(lambda r: r.property_type in criteria.property_type)
    if criteria.status:
        predicates.append(lambda r: r.status in criteria.status)
    return predicates


def filter_records(records: Iterable[R], criteria: SearchCriteria) -> List[R]:
    predicates = build_predicates(criteria)
    return [record for record in records if all(check(record) for check in predicates)]


def sort_records(records: Iterable[R], sort_by: str = DEFAULT_SORT) -> List[R]:
    """Stable sort; unknown keys fall back to newest first."""

    key, descending = SORT_KEYS.get(sort_by, SORT_KEYS[DEFAULT_SORT])
    return sorted(records, key=key, reverse=descending)


def search(records: Sequence[R], criteria: SearchCriteria) -> List[R]:
    return sort_records(filter_records(records, criteria), criteria.sort_by)


__all__ = [
    "SORT_OPTIONS",
    "FAVORITE_SORT_OPTIONS",
    "PROPERTY_TYPES",
    "STATUS_TYPES",
    "SORT_KEYS",
    "matches_query",
    "build_predicates",
    "filter_records",
    "sort_records",
    "search",
]
