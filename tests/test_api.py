from fastapi.testclient import TestClient

from homefinder.api import app, get_property_service
from homefinder.errors import DataSourceUnavailable
from homefinder.services.property_service import PropertyService

from helpers import FakeStore, make_service, memory_ledger, raw_row

client = TestClient(app)

ROWS = [
    raw_row(1, price=600000, bedrooms=3, title="Maple House"),
    raw_row(2, price=1200000, bedrooms=4, title="Cedar House"),
    raw_row(3, price=2200, status="for-rent", property_type="apartment", title="Elm Apartment"),
    raw_row(4, price=450000, property_type="condo", title="Birch Condo"),
]


def _use(service):
    app.dependency_overrides[get_property_service] = lambda: service
    return service


def teardown_function():
    app.dependency_overrides.clear()


def test_health():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_properties_endpoint_filters_and_sorts():
    _use(make_service(ROWS))
    resp = client.get(
        "/api/properties",
        params={"price_min": 500000, "price_max": 900000, "bedrooms": "3", "status": "for-sale"},
    )
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["total"] == 1
    assert payload["items"][0]["id"] == 1
    assert payload["items"][0]["is_favorite"] is False


def test_properties_endpoint_repeatable_and_comma_lists():
    _use(make_service(ROWS))
    resp = client.get("/api/properties", params=[("property_type", "condo"), ("property_type", "apartment"), ("sort_by", "price-low")])
    assert [item["id"] for item in resp.json()["items"]] == [3, 4]
    resp = client.get("/api/properties", params={"property_type": "condo,apartment", "sort_by": "price-high"})
    assert [item["id"] for item in resp.json()["items"]] == [4, 3]


def test_property_detail_and_404():
    _use(make_service(ROWS))
    resp = client.get("/api/properties/2")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Cedar House"
    assert client.get("/api/properties/999").status_code == 404


def test_favorite_toggle_round_trip():
    service = _use(make_service(ROWS, memory_ledger()))
    first = client.post("/api/favorites/2/toggle").json()
    assert first == {"id": 2, "is_favorite": True}
    assert client.get("/api/favorites/ids").json() == {"ids": [2]}
    favorites = client.get("/api/favorites").json()
    assert [item["id"] for item in favorites["items"]] == [2]
    second = client.post("/api/favorites/2/toggle").json()
    assert second["is_favorite"] is False
    assert service.ledger.list_favorite_ids() == set()


def test_compare_endpoint():
    _use(make_service(ROWS))
    resp = client.get("/api/compare", params={"ids": "3,1"})
    assert resp.status_code == 200
    payload = resp.json()
    assert [item["id"] for item in payload["items"]] == [3, 1]
    price_row = next(row for row in payload["rows"] if row["label"] == "Price")
    assert price_row["values"] == ["$2,200/mo", "$600,000"]


def test_compare_rejects_overflow_and_duplicates():
    _use(make_service(ROWS))
    assert client.get("/api/compare", params={"ids": "1,2,3,4"}).status_code == 409
    assert client.get("/api/compare", params={"ids": "1,1"}).status_code == 409


def test_data_source_failure_maps_to_503():
    store = FakeStore(ROWS, fail=DataSourceUnavailable("down"))
    _use(PropertyService(store, memory_ledger()))
    resp = client.get("/api/properties")
    assert resp.status_code == 503
    assert resp.json()["retryable"] is True


def test_meta_lists_reference_values():
    payload = client.get("/api/meta").json()
    assert payload["property_types"] == ["house", "condo", "townhouse", "apartment"]
    assert payload["statuses"] == ["for-sale", "for-rent", "sold", "pending"]
    assert payload["max_compare"] == 3
    assert payload["favorite_sort_options"][-1] == {"value": "alphabetical", "label": "A-Z"}
