"""Display formatting shared by the API payloads and the Streamlit views."""

from __future__ import annotations

from typing import Optional

STATUS_LABELS = {
    "for-sale": "For Sale",
    "for-rent": "For Rent",
    "sold": "Sold",
    "pending": "Pending",
}


def _fmt_number(value: float) -> str:
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_price(price: Optional[float], status: Optional[str] = None) -> str:
    amount = _fmt_number(price or 0)
    if status == "for-rent":
        return f"${amount}/mo"
    return f"${amount}"


def status_label(status: Optional[str]) -> str:
    return STATUS_LABELS.get(status or "", STATUS_LABELS["for-sale"])


def type_label(property_type: Optional[str]) -> str:
    text = property_type or ""
    return text[:1].upper() + text[1:]


def format_number(value: Optional[float]) -> str:
    return _fmt_number(value or 0)


def results_text(count: int, noun: str = "property", suffix: str = "found") -> str:
    """Mirror the result headline used above listing grids."""

    plural = "properties" if noun == "property" else f"{noun}s"
    if noun.endswith(" property"):
        plural = noun[: -len("property")] + "properties"
    if count == 0:
        return f"No {plural} {suffix}".strip()
    if count == 1:
        return f"1 {noun} {suffix}".strip()
    return f"{count:,} {plural} {suffix}".strip()


__all__ = ["STATUS_LABELS", "format_price", "status_label", "type_label", "format_number", "results_text"]
