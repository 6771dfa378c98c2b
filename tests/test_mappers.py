from datetime import datetime, timezone

from homefinder.db.mappers import normalize, normalize_many, parse_features, parse_images
from homefinder.models.property import (
    DEFAULT_LAT,
    DEFAULT_LISTING_DATE,
    DEFAULT_LNG,
    DEFAULT_TITLE,
    DEFAULT_YEAR_BUILT,
    PLACEHOLDER_IMAGE,
)


def test_image_field_shapes():
    assert normalize({"id": 1, "images": '["a.jpg","b.jpg"]'}).images == ["a.jpg", "b.jpg"]
    assert normalize({"id": 1, "images": "single.jpg"}).images == ["single.jpg"]
    assert normalize({"id": 1}).images == [PLACEHOLDER_IMAGE]
    assert normalize({"id": 1, "images": ["x.jpg", "", None, "y.jpg"]}).images == ["x.jpg", "y.jpg"]


def test_unparseable_images_fall_back_to_placeholder():
    assert parse_images('["broken"') == [PLACEHOLDER_IMAGE]
    assert parse_images("[]") == [PLACEHOLDER_IMAGE]
    assert parse_images(42) == [PLACEHOLDER_IMAGE]


def test_features_default_and_dedupe():
    assert normalize({"id": 1}).features == []
    assert normalize({"id": 1, "features": "{not json"}).features == []
    assert parse_features('["Pool", "Gym", "Pool"]') == ["Pool", "Gym"]
    assert parse_features("Pool, Gym") == ["Pool", "Gym"]


def test_coordinates_from_json_string_dict_and_flat_columns():
    assert normalize({"id": 1, "coordinates_c": '{"lat": 40.7, "lng": -74.0}'}).location.coordinates.lat == 40.7
    nested = normalize({"id": 1, "location": {"city": "Austin", "coordinates": {"lat": 30.27, "lng": -97.74}}})
    assert nested.location.city == "Austin"
    assert nested.location.coordinates.lng == -97.74
    flat = normalize({"id": 1, "lat": 47.5, "lng": -122.1})
    assert (flat.location.coordinates.lat, flat.location.coordinates.lng) == (47.5, -122.1)


def test_bad_coordinates_use_default_point():
    for value in ("not json", '{"lat": "x"}', {"lat": 200, "lng": 0}, None):
        coords = normalize({"id": 1, "coordinates": value}).location.coordinates
        assert (coords.lat, coords.lng) == (DEFAULT_LAT, DEFAULT_LNG)


def test_every_field_defaults_on_empty_input():
    rec = normalize({})
    assert rec.id == 0
    assert rec.title == DEFAULT_TITLE
    assert rec.price == 0
    assert rec.bedrooms == 0 and rec.bathrooms == 0
    assert rec.square_feet == 0
    assert rec.property_type == "house"
    assert rec.status == "for-sale"
    assert rec.images == [PLACEHOLDER_IMAGE]
    assert rec.features == []
    assert rec.year_built == DEFAULT_YEAR_BUILT
    assert rec.lot_size == 0 and rec.garage == 0
    assert rec.listing_date == DEFAULT_LISTING_DATE
    assert rec.location.address == ""


def test_malformed_values_never_raise():
    rec = normalize(
        {
            "Id": "7",
            "price": "abc",
            "bedrooms": -2,
            "bathrooms": "1.5",
            "square_feet": "inf",
            "property_type": "castle",
            "status": "For Rent",
            "year_built": "unknown",
            "listing_date": "not a date",
        }
    )
    assert rec.id == 7
    assert rec.price == 0
    assert rec.bedrooms == 0
    assert rec.bathrooms == 1.5
    assert rec.square_feet == 0
    assert rec.property_type == "house"
    assert rec.status == "for-rent"
    assert rec.year_built == DEFAULT_YEAR_BUILT
    assert rec.listing_date == DEFAULT_LISTING_DATE


def test_non_mapping_input_yields_defaults():
    assert normalize(None).title == DEFAULT_TITLE
    assert normalize("garbage").images == [PLACEHOLDER_IMAGE]


def test_remote_field_names_are_mapped():
    rec = normalize(
        {
            "Id": 12,
            "Name": "Lake House",
            "price_c": 1200000,
            "bedrooms_c": 4,
            "bathrooms_c": 3,
            "square_feet_c": 3100,
            "property_type_c": "house",
            "status_c": "sold",
            "images_c": '["h.jpg"]',
            "address_c": "1 Shore Rd",
            "city_c": "Kirkland",
            "state_c": "WA",
            "zip_code_c": "98033",
            "features_c": "Dock,Pool",
            "listing_date_c": "2024-02-01",
        }
    )
    assert rec.id == 12
    assert rec.title == "Lake House"
    assert rec.square_feet == 3100
    assert rec.status == "sold"
    assert rec.location.city == "Kirkland"
    assert rec.location.zip == "98033"
    assert rec.features == ["Dock", "Pool"]
    assert rec.listing_date == datetime(2024, 2, 1, tzinfo=timezone.utc)


def test_camel_case_mock_rows_are_mapped():
    rec = normalize(
        {
            "Id": 3,
            "title": "Mock",
            "squareFeet": 900,
            "propertyType": "condo",
            "yearBuilt": 1999,
            "lotSize": 0.25,
            "listingDate": "2024-01-15T10:00:00Z",
            "location": {"address": "9 Elm", "city": "Seattle", "state": "WA", "zipCode": "98101"},
        }
    )
    assert (rec.square_feet, rec.property_type, rec.year_built, rec.lot_size) == (900, "condo", 1999, 0.25)
    assert rec.location.zip == "98101"


def test_normalize_is_idempotent():
    samples = [
        {},
        {"id": 4, "images": "one.jpg", "features": "A,B,A", "coordinates": '{"lat": 1, "lng": 2}'},
        {"Id": "9", "Name": "X", "price_c": "1000", "listing_date_c": 1700000000000},
    ]
    for raw in samples:
        once = normalize(raw)
        assert normalize(once) == once
        assert normalize(once.model_dump()) == once


def test_normalize_many_drops_rows_without_id():
    records = normalize_many([{"id": 1}, {"title": "no id"}, {"id": -3}, {"id": "2"}])
    assert [r.id for r in records] == [1, 2]
