"""Map raw rows from any record source into the canonical property shape.

Every canonical field has an explicit list of source keys, consulted in
order: canonical names first, then the bundled dataset's flat columns, the
camelCase names of the original mock data, and the remote service's ``*_c``
columns. Each field degrades to its own default independently, so a
malformed row still produces a complete record.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd
from pydantic import BaseModel

from ..models.property import (
    DEFAULT_LAT,
    DEFAULT_LISTING_DATE,
    DEFAULT_LNG,
    DEFAULT_PROPERTY_TYPE,
    DEFAULT_STATUS,
    DEFAULT_TITLE,
    DEFAULT_YEAR_BUILT,
    PLACEHOLDER_IMAGE,
    PROPERTY_TYPES,
    STATUS_TYPES,
    Coordinates,
    Location,
    PropertyRecord,
)
from ..utils.coerce import enum_token, parse_json, to_float, to_int, to_str

FIELD_MAP: Dict[str, Sequence[str]] = {
    "id": ("id", "Id", "ID"),
    "title": ("title", "Name", "title_c", "name"),
    "price": ("price", "price_c"),
    "bedrooms": ("bedrooms", "bedrooms_c", "beds"),
    "bathrooms": ("bathrooms", "bathrooms_c", "baths"),
    "square_feet": ("square_feet", "squareFeet", "square_feet_c", "sqft"),
    "property_type": ("property_type", "propertyType", "property_type_c", "type"),
    "status": ("status", "status_c"),
    "images": ("images", "images_c", "image_url"),
    "description": ("description", "description_c"),
    "features": ("features", "features_c"),
    "year_built": ("year_built", "yearBuilt", "year_built_c"),
    "lot_size": ("lot_size", "lotSize", "lot_size_c"),
    "garage": ("garage", "garage_c"),
    "listing_date": ("listing_date", "listingDate", "listing_date_c"),
}

LOCATION_MAP: Dict[str, Sequence[str]] = {
    "address": ("address", "address_c", "street"),
    "city": ("city", "city_c"),
    "state": ("state", "state_c"),
    "zip": ("zip", "zipCode", "zip_code", "zip_code_c", "zipcode"),
}

COORDINATE_KEYS: Sequence[str] = ("coordinates", "coordinates_c")
LAT_KEYS: Sequence[str] = ("lat", "latitude", "latitude_c")
LNG_KEYS: Sequence[str] = ("lng", "lon", "longitude", "longitude_c")

# Canonical field -> remote column, used when pushing criteria down to the
# record service.
REMOTE_FIELD_NAMES: Dict[str, str] = {
    "id": "Id",
    "title": "title_c",
    "price": "price_c",
    "bedrooms": "bedrooms_c",
    "bathrooms": "bathrooms_c",
    "square_feet": "square_feet_c",
    "property_type": "property_type_c",
    "status": "status_c",
    "images": "images_c",
    "description": "description_c",
    "features": "features_c",
    "year_built": "year_built_c",
    "lot_size": "lot_size_c",
    "garage": "garage_c",
    "listing_date": "listing_date_c",
    "address": "address_c",
    "city": "city_c",
    "state": "state_c",
    "zip": "zip_code_c",
    "coordinates": "coordinates_c",
}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _pick(row: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = row.get(key)
        if not _is_blank(value):
            return value
    return None


def _non_negative(value: Any, default: float = 0.0) -> float:
    number = to_float(value)
    if number is None or not math.isfinite(number):
        return default
    return max(0.0, number)


def _as_list(value: Any, split_plain: bool) -> List[Any]:
    """Lists pass through, JSON strings are decoded, plain strings are wrapped.

    Strings that look like broken JSON (leading ``[`` or ``{``) yield nothing.
    """
    if isinstance(value, (list, tuple)):
        return list(value)
    if not isinstance(value, str):
        return []
    text = value.strip()
    decoded = parse_json(text)
    if isinstance(decoded, list):
        return decoded
    if isinstance(decoded, str):
        return [decoded]
    if decoded is None and text and text[0] not in "[{":
        return text.split(",") if split_plain else [text]
    return []


def _clean_strings(items: Iterable[Any]) -> List[str]:
    cleaned: List[str] = []
    for item in items:
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            continue
        if not _is_blank(item):
            cleaned.append(str(item).strip())
    return cleaned


def parse_images(value: Any) -> List[str]:
    """Images arrive as a URL, a JSON array string or a list."""
    images = _clean_strings(_as_list(value, split_plain=False))
    return images or [PLACEHOLDER_IMAGE]


def parse_features(value: Any) -> List[str]:
    items = _as_list(value, split_plain=True)
    features: List[str] = []
    for feature in _clean_strings(items):
        if feature not in features:
            features.append(feature)
    return features


def _valid_pair(lat: Any, lng: Any) -> Optional[Coordinates]:
    lat_f, lng_f = to_float(lat), to_float(lng)
    if lat_f is None or lng_f is None:
        return None
    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        return None
    if not (-90 <= lat_f <= 90 and -180 <= lng_f <= 180):
        return None
    return Coordinates(lat=lat_f, lng=lng_f)


def parse_coordinates(value: Any, row: Optional[Mapping[str, Any]] = None) -> Coordinates:
    candidate = value
    if isinstance(candidate, str):
        candidate = parse_json(candidate)
    if isinstance(candidate, BaseModel):
        candidate = candidate.model_dump()
    coords: Optional[Coordinates] = None
    if isinstance(candidate, Mapping):
        coords = _valid_pair(_pick(candidate, LAT_KEYS), _pick(candidate, LNG_KEYS))
    elif isinstance(candidate, (list, tuple)) and len(candidate) == 2:
        coords = _valid_pair(candidate[0], candidate[1])
    if coords is None and row is not None:
        coords = _valid_pair(_pick(row, LAT_KEYS), _pick(row, LNG_KEYS))
    return coords or Coordinates(lat=DEFAULT_LAT, lng=DEFAULT_LNG)


def parse_listing_date(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            stamp = pd.to_datetime(value, unit="ms", utc=True, errors="coerce")
        elif isinstance(value, str) and value.strip():
            stamp = pd.to_datetime(value.strip(), utc=True, errors="coerce")
        else:
            return DEFAULT_LISTING_DATE
    except (ValueError, TypeError, OverflowError):
        return DEFAULT_LISTING_DATE
    if stamp is None or pd.isna(stamp):
        return DEFAULT_LISTING_DATE
    return stamp.to_pydatetime()


def enum_value(value: Any, allowed: Sequence[str], default: str) -> str:
    """Canonical enum member for ``value``, or ``default`` when it is not one."""
    text = enum_token(value)
    return text if text in allowed else default


def _location(row: Mapping[str, Any]) -> Location:
    nested = row.get("location")
    if isinstance(nested, str):
        nested = parse_json(nested)
    if isinstance(nested, BaseModel):
        nested = nested.model_dump()
    if not isinstance(nested, Mapping):
        nested = {}

    values = {}
    for field, keys in LOCATION_MAP.items():
        raw = _pick(nested, keys)
        if raw is None:
            raw = _pick(row, keys)
        if field == "zip":
            as_int = to_int(raw) if isinstance(raw, float) else None
            raw = as_int if as_int is not None else raw
        values[field] = to_str(raw).strip()

    coordinates_raw = _pick(nested, COORDINATE_KEYS)
    if coordinates_raw is None:
        coordinates_raw = _pick(row, COORDINATE_KEYS)
    coordinates = parse_coordinates(coordinates_raw, {**row, **nested})
    return Location(coordinates=coordinates, **values)


def normalize(raw: Any) -> PropertyRecord:
    """Return a fully populated canonical record for any raw input."""

    if isinstance(raw, BaseModel):
        row: Mapping[str, Any] = raw.model_dump()
    elif isinstance(raw, Mapping):
        row = raw
    else:
        row = {}

    def field(name: str) -> Any:
        return _pick(row, FIELD_MAP[name])

    record_id = to_int(field("id"))
    year_built = to_int(field("year_built"))
    square_feet = to_int(field("square_feet"))
    title = to_str(field("title")).strip()

    return PropertyRecord(
        id=record_id if record_id and record_id > 0 else 0,
        title=title or DEFAULT_TITLE,
        price=_non_negative(field("price")),
        location=_location(row),
        bedrooms=_non_negative(field("bedrooms")),
        bathrooms=_non_negative(field("bathrooms")),
        square_feet=max(0, square_feet) if square_feet is not None else 0,
        property_type=enum_value(field("property_type"), PROPERTY_TYPES, DEFAULT_PROPERTY_TYPE),
        status=enum_value(field("status"), STATUS_TYPES, DEFAULT_STATUS),
        images=parse_images(field("images")),
        description=to_str(field("description")).strip(),
        features=parse_features(field("features")),
        year_built=year_built if year_built is not None else DEFAULT_YEAR_BUILT,
        lot_size=_non_negative(field("lot_size")),
        garage=_non_negative(field("garage")),
        listing_date=parse_listing_date(field("listing_date")),
    )


def normalize_many(rows: Iterable[Any]) -> List[PropertyRecord]:
    """Normalize a batch, dropping rows that carry no usable identifier."""

    records = []
    for row in rows:
        record = normalize(row)
        if record.id > 0:
            records.append(record)
    return records


__all__ = [
    "FIELD_MAP",
    "LOCATION_MAP",
    "REMOTE_FIELD_NAMES",
    "normalize",
    "normalize_many",
    "enum_value",
    "parse_images",
    "parse_features",
    "parse_coordinates",
    "parse_listing_date",
]
