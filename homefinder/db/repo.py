"""Repository abstraction over the static dataset or the remote record service."""

from __future__ import annotations

import os
from typing import Dict, List, Optional, Protocol

from ..models.search import SearchCriteria
from ..utils.coerce import to_int
from ..utils.logging import get_logger
from .record_service_client import RecordServiceClient, RemoteRepository
from .static_repo import StaticRepository

LOGGER = get_logger("db.repo")

RECORD_SOURCE = os.getenv("RECORD_SOURCE", "static").lower()


class RecordStore(Protocol):
    name: str

    def fetch_all(self) -> List[Dict]:
        ...

    def fetch_by_id(self, property_id: int) -> Optional[Dict]:
        ...

    def query(self, criteria: SearchCriteria) -> List[Dict]:
        ...


class Repo:
    def __init__(self, mode: Optional[str] = None) -> None:
        self.mode = (mode or RECORD_SOURCE).lower()
        self._backend: Optional[RecordStore] = None
        if self.mode == "remote":
            try:
                self._backend = RemoteRepository(RecordServiceClient())
                LOGGER.info("Repository running in remote record-service mode")
            except RuntimeError as exc:
                LOGGER.warning("Failed to initialise record service client (%s); falling back to static data", exc)
                self.mode = "static"
        if self.mode != "remote":
            self.mode = "static"
            LOGGER.info("Repository running in static dataset mode")

    @property
    def backend(self) -> RecordStore:
        if self._backend is None:
            self._backend = StaticRepository()
        return self._backend

    # ------------------------------------------------------------------
    # Listings
    def fetch_all(self) -> List[Dict]:
        return self.backend.fetch_all()

    def query(self, criteria: SearchCriteria) -> List[Dict]:
        return self.backend.query(criteria)

    # ------------------------------------------------------------------
    # Property detail helpers
    def fetch_by_id(self, property_id) -> Optional[Dict]:
        key = to_int(property_id)
        if key is None or key <= 0:
            return None
        return self.backend.fetch_by_id(key)


_repo_singleton: Repo | None = None


def get_repository() -> Repo:
    global _repo_singleton
    if _repo_singleton is None:
        _repo_singleton = Repo()
    return _repo_singleton


def reset_repository() -> None:
    global _repo_singleton
    _repo_singleton = None
