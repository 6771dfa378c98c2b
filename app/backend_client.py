"""Helper client used by the Streamlit app to talk to the API or fall back to local services."""

from __future__ import annotations

import os
import threading
from typing import Callable, Dict, List, Optional, Sequence

import requests

from homefinder.db.mappers import normalize
from homefinder.db.repo import get_repository
from homefinder.errors import DataSourceUnavailable
from homefinder.models.property import PropertyListing
from homefinder.models.search import DEFAULT_SORT, SearchCriteria
from homefinder.services.debounce import DEFAULT_DELAY, DebouncedQuery
from homefinder.services.favorites import FavoritesLedger, get_ledger
from homefinder.services.property_service import PropertyService
from homefinder.utils.logging import fields, get_logger

LOGGER = get_logger("app.backend_client")

FavoriteListener = Callable[[int, bool], None]


class BackendClient:
    """Shared by every Streamlit session, so it holds no per-session state."""

    def __init__(self) -> None:
        self.base_url = os.getenv("API_BASE_URL", "http://localhost:8000")
        self.session = requests.Session()
        self.use_api = self._ping_api()
        self.service: Optional[PropertyService] = None
        self.ledger: FavoritesLedger = get_ledger()
        self._listeners: List[FavoriteListener] = []
        self._listeners_lock = threading.Lock()
        self.ledger.subscribe(self._notify)
        if not self.use_api:
            self._enable_local_mode()

    def _ping_api(self) -> bool:
        try:
            resp = self.session.get(f"{self.base_url}/api/health", timeout=2)
            return resp.status_code == 200
        except requests.RequestException:
            return False

    def search_properties(self, criteria: SearchCriteria) -> List[PropertyListing]:
        if self.use_api:
            params = self._criteria_params(criteria)
            try:
                data = self._get_json("/api/properties", params=params)
                return [self._listing(item) for item in data["items"]]
            except requests.RequestException as exc:
                self._fall_back(exc)
        return self.service.search_properties(criteria)

    def live_search(
        self,
        on_result: Callable[[List[PropertyListing]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        delay: float = DEFAULT_DELAY,
    ) -> DebouncedQuery:
        """Debounced search; results superseded by a newer submission never reach ``on_result``."""
        return DebouncedQuery(self.search_properties, on_result, delay=delay, on_error=on_error)

    def get_property(self, property_id) -> Optional[PropertyListing]:
        if self.use_api:
            try:
                resp = self.session.get(f"{self.base_url}/api/properties/{property_id}", timeout=10)
                # 404 for a missing record, 422 for an id that is not a number.
                if 400 <= resp.status_code < 500:
                    return None
                resp.raise_for_status()
                return self._listing(resp.json())
            except requests.RequestException as exc:
                self._fall_back(exc)
        return self.service.get_property(property_id)

    def list_all(self) -> List[PropertyListing]:
        return self.search_properties(SearchCriteria())

    def list_favorites(self, sort_by: str = DEFAULT_SORT) -> List[PropertyListing]:
        if self.use_api:
            try:
                data = self._get_json("/api/favorites", params={"sort_by": sort_by})
                return [self._listing(item) for item in data["items"]]
            except requests.RequestException as exc:
                self._fall_back(exc)
        return self.service.list_favorites(sort_by=sort_by)

    def favorite_count(self) -> int:
        if self.use_api:
            try:
                return len(self._get_json("/api/favorites/ids")["ids"])
            except requests.RequestException as exc:
                self._fall_back(exc)
        return len(self.ledger.list_favorite_ids())

    def toggle_favorite(self, property_id: int, on_change: Optional[FavoriteListener] = None) -> bool:
        """Toggle a favorite; ``on_change`` hears about this toggle only.

        It is subscribed for the duration of the call and ignores
        notifications raised on other threads, i.e. other sessions' toggles.
        """
        if on_change is None:
            return self._toggle(property_id)
        owner = threading.get_ident()

        def scoped(changed_id: int, state: bool) -> None:
            if threading.get_ident() == owner:
                on_change(changed_id, state)

        unsubscribe = self.subscribe(scoped)
        try:
            return self._toggle(property_id)
        finally:
            unsubscribe()

    def _toggle(self, property_id: int) -> bool:
        if self.use_api:
            try:
                resp = self.session.post(f"{self.base_url}/api/favorites/{property_id}/toggle", timeout=10)
                resp.raise_for_status()
                state = bool(resp.json()["is_favorite"])
                self._notify(property_id, state)
                return state
            except requests.RequestException as exc:
                self._fall_back(exc)
        return self.ledger.toggle_favorite(property_id)

    def subscribe(self, listener: FavoriteListener) -> Callable[[], None]:
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, property_id: int, state: bool) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(property_id, state)

    def _get_json(self, path: str, params: Optional[Dict] = None) -> Dict:
        resp = self.session.get(f"{self.base_url}{path}", params=params, timeout=10)
        if resp.status_code == 503:
            raise DataSourceUnavailable(resp.json().get("detail", "Record store unavailable"), source="api")
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _listing(payload: Dict) -> PropertyListing:
        record = normalize(payload)
        data = record.model_dump()
        data["is_favorite"] = bool(payload.get("is_favorite"))
        return PropertyListing(**data)

    @staticmethod
    def _criteria_params(criteria: SearchCriteria) -> List[tuple]:
        params: List[tuple] = [("sort_by", criteria.sort_by)]
        if criteria.search_query:
            params.append(("search", criteria.search_query))
        for name in ("price_min", "price_max", "bedrooms", "bathrooms"):
            value = getattr(criteria, name)
            if value is not None:
                params.append((name, value))
        for name in ("property_type", "status"):
            values: Sequence[str] = sorted(getattr(criteria, name))
            params.extend((name, value) for value in values)
        return params

    def _enable_local_mode(self) -> None:
        if self.service is None:
            self.service = PropertyService(get_repository(), self.ledger)
        self.use_api = False

    def _fall_back(self, exc: requests.RequestException) -> None:
        """Switch to local services when the API is down; re-raise client errors."""
        response = getattr(exc, "response", None)
        if response is not None and response.status_code < 500:
            raise exc
        LOGGER.warning(fields("api_unavailable", base_url=self.base_url, error=exc))
        self._enable_local_mode()
