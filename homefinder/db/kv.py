"""Key-value slots backing browser-style local state such as favorites."""

from __future__ import annotations

import os
import threading
from typing import Dict, Optional, Protocol

from ..utils.io import data_path, read_json_object, write_json_object
from ..utils.logging import get_logger

LOGGER = get_logger("db.kv")

FAVORITES_PATH = os.getenv("FAVORITES_PATH", data_path("favorites.json"))


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Process-local store, used by tests and as a scratch backend."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStore:
    """Durable store keeping every slot as a string in one JSON object file."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or FAVORITES_PATH
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        value = read_json_object(self.path).get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            payload = read_json_object(self.path)
            payload[key] = value
            write_json_object(self.path, payload)
        LOGGER.debug("kv_write path=%s key=%s", self.path, key)


__all__ = ["KeyValueStore", "MemoryStore", "JsonFileStore", "FAVORITES_PATH"]
