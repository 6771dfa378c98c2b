import json
from typing import Any, Optional


def to_int(v) -> Optional[int]:
    try:
        if v is None or v == "" or str(v).lower() in ("null", "nan"):
            return None
        return int(float(v))
    except Exception:
        return None


def to_float(v) -> Optional[float]:
    try:
        if v is None or v == "" or str(v).lower() in ("null", "nan"):
            return None
        value = float(v)
    except Exception:
        return None
    if value != value:  # NaN from pandas cells
        return None
    return value


def to_str(v) -> str:
    if v is None or (isinstance(v, float) and v != v):
        return ""
    return str(v)


def parse_json(v) -> Optional[Any]:
    """Decode a JSON string, returning None for anything that is not valid JSON."""
    if not isinstance(v, str):
        return None
    text = v.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def enum_token(v) -> str:
    """Canonical spelling for enum-like text: ``"For Rent"`` and ``for_rent`` become ``for-rent``."""
    return "-".join(to_str(v).replace("_", " ").replace("-", " ").lower().split())
