"""IO helpers for the bundled dataset and the local key-value file."""

from __future__ import annotations

import json
import os
import tempfile
from functools import lru_cache
from typing import Any, Dict

import pandas as pd

from .logging import get_logger

LOGGER = get_logger("utils.io")

DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data"))


def data_path(name: str) -> str:
    return name if os.path.isabs(name) else os.path.join(DATA_DIR, name)


@lru_cache(maxsize=16)
def load_csv(name: str) -> pd.DataFrame:
    """Load a CSV by filename from the data directory."""

    path = data_path(name)
    if not os.path.exists(path):
        raise FileNotFoundError(f"CSV not found: {path}")
    LOGGER.debug("loading_csv path=%s", path)
    df = pd.read_csv(path)
    return df


def read_json_object(path: str) -> Dict[str, Any]:
    """Read a JSON object from disk; missing or unreadable files read as empty."""

    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as infile:
            payload = json.load(infile)
    except (OSError, ValueError) as exc:
        LOGGER.warning("json_read_failed path=%s error=%s", path, exc)
        return {}
    if not isinstance(payload, dict):
        LOGGER.warning("json_not_object path=%s", path)
        return {}
    return payload


def write_json_object(path: str, payload: Dict[str, Any]) -> None:
    """Write a JSON object via a temp file so readers never see a partial write."""

    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as outfile:
            json.dump(payload, outfile, indent=2, sort_keys=True)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


__all__ = ["load_csv", "data_path", "read_json_object", "write_json_object", "DATA_DIR"]
