"""Query orchestration tying the record store, normalizer and search engine."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..db.mappers import normalize, normalize_many
from ..db.repo import RecordStore
from ..models.property import Coordinates, PropertyListing, PropertyRecord
from ..models.search import DEFAULT_SORT, SearchCriteria
from ..utils.coerce import to_int
from ..utils.logging import get_logger
from .comparison import AlreadyPresent, ComparisonSet
from .favorites import FavoritesLedger
from .search import search, sort_records

LOGGER = get_logger("services.properties")


class PropertyService:
    def __init__(self, repository: RecordStore, ledger: FavoritesLedger) -> None:
        self.repository = repository
        self.ledger = ledger

    def search_properties(self, criteria: Optional[SearchCriteria] = None) -> List[PropertyListing]:
        """Return normalized, filtered and sorted listings for ``criteria``.

        The store may honour part of the criteria itself; the full local
        search always runs afterwards. ``search`` is idempotent, so criteria
        the store already applied are re-checked without changing the result,
        and text matching has the same semantics for every store.
        """

        criteria = criteria or SearchCriteria()
        rows = self.repository.query(criteria)
        records = search(normalize_many(rows), criteria)
        LOGGER.debug("search rows=%d results=%d sort_by=%s", len(rows), len(records), criteria.sort_by)
        return self._annotate(records)

    def list_all(self) -> List[PropertyListing]:
        return self._annotate(normalize_many(self.repository.fetch_all()))

    def get_property(self, property_id) -> Optional[PropertyListing]:
        key = to_int(property_id)
        if key is None or key <= 0:
            return None
        row = self.repository.fetch_by_id(key)
        if row is None:
            LOGGER.info("property_not_found id=%s", key)
            return None
        record = normalize(row)
        if record.id <= 0:
            return None
        return self._annotate([record])[0]

    def list_favorites(self, sort_by: str = DEFAULT_SORT) -> List[PropertyListing]:
        favorite_ids = self.ledger.list_favorite_ids()
        if not favorite_ids:
            return []
        records = [r for r in normalize_many(self.repository.fetch_all()) if r.id in favorite_ids]
        return self._annotate(sort_records(records, sort_by))

    def toggle_favorite(self, property_id) -> bool:
        return self.ledger.toggle_favorite(property_id)

    def compare(self, property_ids: Sequence) -> List[PropertyListing]:
        """Resolve ids into a comparison selection.

        Duplicate ids and ids past capacity raise the comparison errors;
        ids with no matching record are skipped.
        """

        selection: ComparisonSet[PropertyListing] = ComparisonSet()
        for raw_id in property_ids:
            key = to_int(raw_id)
            if key is not None and selection.contains(key):
                raise AlreadyPresent(key)
            listing = self.get_property(raw_id)
            if listing is None:
                continue
            selection.add(listing)
        return list(selection.records)

    def _annotate(self, records: Iterable[PropertyRecord]) -> List[PropertyListing]:
        favorite_ids = self.ledger.list_favorite_ids()
        listings = []
        for record in records:
            payload = record.model_dump()
            payload["is_favorite"] = record.id in favorite_ids
            listings.append(PropertyListing(**payload))
        return listings


def map_center(records: Sequence[PropertyRecord]) -> Coordinates:
    """Centre on the first listing, or the default point when there is none."""
    if not records:
        return Coordinates()
    return records[0].location.coordinates


__all__ = ["PropertyService", "map_center"]
