"""Search criteria passed from the presentation layer into the search pipeline."""

from __future__ import annotations

from typing import Any, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..utils.coerce import enum_token, to_float

DEFAULT_SORT = "newest"


def _as_set(value: Any) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = []
        for item in value:
            items.extend(str(item).split(",") if item is not None else [])
    else:
        return frozenset()
    return frozenset(enum_token(item) for item in items if item and item.strip())


class SearchCriteria(BaseModel):
    """Filter and sort request.

    Numeric fields accept numbers or numeric strings; blank or unparseable
    values mean "no constraint" rather than a validation error.
    """

    model_config = ConfigDict(frozen=True)

    price_min: Optional[float] = None
    price_max: Optional[float] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    property_type: FrozenSet[str] = frozenset()
    status: FrozenSet[str] = frozenset()
    search_query: str = ""
    sort_by: str = DEFAULT_SORT

    @field_validator("price_min", "price_max", "bedrooms", "bathrooms", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Optional[float]:
        return to_float(value)

    @field_validator("property_type", "status", mode="before")
    @classmethod
    def _coerce_set(cls, value: Any) -> FrozenSet[str]:
        return _as_set(value)

    @field_validator("search_query", mode="before")
    @classmethod
    def _coerce_query(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("sort_by", mode="before")
    @classmethod
    def _coerce_sort(cls, value: Any) -> str:
        text = "" if value is None else str(value).strip()
        return text or DEFAULT_SORT
