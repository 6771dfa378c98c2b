"""Persisted set of favorited listing ids with change notification."""

from __future__ import annotations

import json
import threading
from typing import Callable, List, Optional, Set

from ..db.kv import JsonFileStore, KeyValueStore
from ..utils.coerce import to_int
from ..utils.logging import fields, get_logger

LOGGER = get_logger("services.favorites")

FAVORITES_KEY = "homefinder_favorites"

FavoriteListener = Callable[[int, bool], None]


class FavoritesLedger:
    def __init__(self, store: KeyValueStore, key: str = FAVORITES_KEY) -> None:
        self.store = store
        self.key = key
        self._listeners: List[FavoriteListener] = []
        self._lock = threading.RLock()

    def _read(self) -> List[int]:
        try:
            raw = self.store.get(self.key)
        except OSError as exc:
            LOGGER.warning("favorites_read_failed key=%s error=%s", self.key, exc)
            return []
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except (TypeError, ValueError):
            LOGGER.warning("favorites_corrupt key=%s; treating as empty", self.key)
            return []
        if not isinstance(decoded, list):
            return []
        ids: List[int] = []
        for item in decoded:
            if isinstance(item, bool):
                continue
            value = to_int(item)
            if value is not None and value not in ids:
                ids.append(value)
        return ids

    def _write(self, ids: List[int]) -> None:
        self.store.set(self.key, json.dumps(ids))

    def list_favorite_ids(self) -> Set[int]:
        with self._lock:
            return set(self._read())

    def is_favorite(self, property_id) -> bool:
        key = to_int(property_id)
        if key is None:
            return False
        return key in self.list_favorite_ids()

    def toggle_favorite(self, property_id) -> bool:
        """Flip membership, persist immediately and return the new state."""

        key = to_int(property_id)
        if key is None:
            raise ValueError(f"Invalid property id: {property_id!r}")
        with self._lock:
            ids = self._read()
            if key in ids:
                ids = [fid for fid in ids if fid != key]
                state = False
            else:
                ids.append(key)
                state = True
            self._write(ids)
        LOGGER.info(fields("favorite_toggled", id=key, is_favorite=state))
        self._notify(key, state)
        return state

    def subscribe(self, listener: FavoriteListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, property_id: int, state: bool) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(property_id, state)
            except Exception:
                LOGGER.exception("favorite_listener_failed id=%s", property_id)


_ledger_singleton: Optional[FavoritesLedger] = None


def get_ledger() -> FavoritesLedger:
    global _ledger_singleton
    if _ledger_singleton is None:
        _ledger_singleton = FavoritesLedger(JsonFileStore())
    return _ledger_singleton


def reset_ledger() -> None:
    global _ledger_singleton
    _ledger_singleton = None


__all__ = ["FAVORITES_KEY", "FavoritesLedger", "get_ledger", "reset_ledger"]
