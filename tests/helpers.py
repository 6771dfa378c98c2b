"""Shared builders for the test suite."""

from __future__ import annotations

from typing import Dict, List, Optional

from homefinder.db.kv import MemoryStore
from homefinder.db.mappers import normalize
from homefinder.models.property import PropertyRecord
from homefinder.models.search import SearchCriteria
from homefinder.services.favorites import FavoritesLedger
from homefinder.services.property_service import PropertyService


def raw_row(property_id: int, **overrides) -> Dict:
    row = {
        "id": property_id,
        "title": f"Listing {property_id}",
        "price": 500000,
        "address": f"{property_id} Main St",
        "city": "Seattle",
        "state": "WA",
        "zip": "98101",
        "bedrooms": 3,
        "bathrooms": 2,
        "square_feet": 1800,
        "property_type": "house",
        "status": "for-sale",
        "images": '["a.jpg"]',
        "features": '["Garden"]',
        "listing_date": f"2024-01-{property_id:02d}T00:00:00Z",
    }
    row.update(overrides)
    return row


def record(property_id: int, **overrides) -> PropertyRecord:
    return normalize(raw_row(property_id, **overrides))


class FakeStore:
    """In-memory record store that applies no criteria itself."""

    name = "fake"

    def __init__(self, rows: List[Dict], fail: Optional[Exception] = None) -> None:
        self.rows = rows
        self.fail = fail
        self.queries: List[SearchCriteria] = []

    def fetch_all(self) -> List[Dict]:
        if self.fail:
            raise self.fail
        return [dict(row) for row in self.rows]

    def fetch_by_id(self, property_id: int) -> Optional[Dict]:
        if self.fail:
            raise self.fail
        for row in self.rows:
            if row.get("id") == property_id:
                return dict(row)
        return None

    def query(self, criteria: SearchCriteria) -> List[Dict]:
        self.queries.append(criteria)
        return self.fetch_all()


def memory_ledger(initial: Optional[str] = None) -> FavoritesLedger:
    store = MemoryStore({"homefinder_favorites": initial} if initial is not None else None)
    return FavoritesLedger(store)


def make_service(rows: List[Dict], ledger: Optional[FavoritesLedger] = None) -> PropertyService:
    return PropertyService(FakeStore(rows), ledger or memory_ledger())
