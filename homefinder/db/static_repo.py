"""Record store backed by the bundled CSV dataset."""

from __future__ import annotations

import os
from typing import Dict, List, Optional

import pandas as pd

from ..errors import DataSourceUnavailable
from ..models.property import DEFAULT_PROPERTY_TYPE, DEFAULT_STATUS, PROPERTY_TYPES, STATUS_TYPES
from ..models.search import SearchCriteria
from ..utils.coerce import to_int
from ..utils.io import load_csv
from ..utils.logging import fields, get_logger
from .mappers import enum_value

LOGGER = get_logger("db.static")

PROPERTIES_FILE = os.getenv("PROPERTIES_FILE", "properties.csv")


class StaticRepository:
    """Serve raw rows from a CSV file.

    Rows keep the dataset's own column names; list-valued columns (images,
    features) are JSON strings in the file and are decoded by the mappers.
    Numeric and membership criteria are applied here with pandas; free text
    and ordering are left to the local search engine.
    """

    name = "static"

    def __init__(self, filename: Optional[str] = None) -> None:
        self.filename = filename or PROPERTIES_FILE
        try:
            frame = load_csv(self.filename)
        except (FileNotFoundError, pd.errors.ParserError) as exc:
            LOGGER.error(fields("static_load_failed", file=self.filename, error=exc))
            raise DataSourceUnavailable(str(exc), source=self.name) from exc
        self._properties = self._prepare(frame)
        LOGGER.info(fields("static_loaded", file=self.filename, rows=len(self._properties.index)))

    def fetch_all(self) -> List[Dict]:
        return self._records(self._properties)

    def fetch_by_id(self, property_id: int) -> Optional[Dict]:
        key = to_int(property_id)
        if key is None:
            return None
        df = self._properties
        row = df[df["_id"] == key]
        if row.empty:
            return None
        return self._records(row.head(1))[0]

    def query(self, criteria: SearchCriteria) -> List[Dict]:
        df = self._properties
        mask = pd.Series(True, index=df.index)
        if criteria.price_min is not None:
            mask &= df["_price"] >= criteria.price_min
        if criteria.price_max is not None:
            mask &= df["_price"] <= criteria.price_max
        if criteria.bedrooms is not None:
            mask &= df["_bedrooms"] >= criteria.bedrooms
        if criteria.bathrooms is not None:
            mask &= df["_bathrooms"] >= criteria.bathrooms
        if criteria.property_type:
            mask &= df["_type"].isin(criteria.property_type)
        if criteria.status:
            mask &= df["_status"].isin(criteria.status)
        return self._records(df[mask])

    @staticmethod
    def _prepare(frame: pd.DataFrame) -> pd.DataFrame:
        df = frame.copy()

        def _numeric(column: str) -> pd.Series:
            if column not in df.columns:
                return pd.Series([0.0] * len(df.index), index=df.index, dtype="float64")
            return pd.to_numeric(df[column], errors="coerce").fillna(0).clip(lower=0)

        def _enum(column: str, allowed, default: str) -> pd.Series:
            # Must match what normalize() assigns for the same cell.
            if column not in df.columns:
                return pd.Series([default] * len(df.index), index=df.index, dtype="object")
            return df[column].map(lambda value: enum_value(value, allowed, default))

        df["_id"] = _numeric("id").astype(int)
        df["_price"] = _numeric("price")
        df["_bedrooms"] = _numeric("bedrooms")
        df["_bathrooms"] = _numeric("bathrooms")
        df["_type"] = _enum("property_type", PROPERTY_TYPES, DEFAULT_PROPERTY_TYPE)
        df["_status"] = _enum("status", STATUS_TYPES, DEFAULT_STATUS)
        if "zip" in df.columns:
            df["zip"] = df["zip"].apply(_zip_text)
        return df

    @staticmethod
    def _records(df: pd.DataFrame) -> List[Dict]:
        helper_cols = [col for col in df.columns if col.startswith("_")]
        cleaned = df.drop(columns=helper_cols).astype(object)
        cleaned = cleaned.where(pd.notnull(cleaned), None)
        return cleaned.to_dict("records")


def _zip_text(value) -> Optional[str]:
    if value is None or (isinstance(value, float) and value != value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


__all__ = ["StaticRepository", "PROPERTIES_FILE"]
