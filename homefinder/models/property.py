"""Pydantic models representing property domain objects."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

PropertyType = Literal["house", "condo", "townhouse", "apartment"]
ListingStatus = Literal["for-sale", "for-rent", "sold", "pending"]

PROPERTY_TYPES: tuple = ("house", "condo", "townhouse", "apartment")
STATUS_TYPES: tuple = ("for-sale", "for-rent", "sold", "pending")

DEFAULT_LAT = 47.6062
DEFAULT_LNG = -122.3321
DEFAULT_TITLE = "Untitled Property"
DEFAULT_YEAR_BUILT = 2000
DEFAULT_LISTING_DATE = datetime(1970, 1, 1, tzinfo=timezone.utc)
DEFAULT_PROPERTY_TYPE = "house"
DEFAULT_STATUS = "for-sale"
PLACEHOLDER_IMAGE = "https://images.unsplash.com/photo-1560518883-ce09059eeffa?w=800"


class Coordinates(BaseModel):
    lat: float = DEFAULT_LAT
    lng: float = DEFAULT_LNG


class Location(BaseModel):
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    coordinates: Coordinates = Field(default_factory=Coordinates)


class PropertyRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str = DEFAULT_TITLE
    price: float = Field(0, ge=0)
    location: Location = Field(default_factory=Location)
    bedrooms: float = Field(0, ge=0)
    bathrooms: float = Field(0, ge=0)
    square_feet: int = Field(0, ge=0)
    property_type: PropertyType = "house"
    status: ListingStatus = "for-sale"
    images: List[str] = Field(default_factory=lambda: [PLACEHOLDER_IMAGE], min_length=1)
    description: str = ""
    features: List[str] = Field(default_factory=list)
    year_built: int = DEFAULT_YEAR_BUILT
    lot_size: float = Field(0, ge=0)
    garage: float = Field(0, ge=0)
    listing_date: datetime = DEFAULT_LISTING_DATE


class PropertyListing(PropertyRecord):
    """A canonical record annotated with the caller's favorite state."""

    is_favorite: bool = False


class PropertyListResponse(BaseModel):
    items: List[PropertyListing]
    total: int


class FavoriteToggleResponse(BaseModel):
    id: int
    is_favorite: bool


class FavoriteIdsResponse(BaseModel):
    ids: List[int]


class ComparisonRow(BaseModel):
    label: str
    values: List[str]


class ComparisonResponse(BaseModel):
    items: List[PropertyListing]
    rows: List[ComparisonRow]
