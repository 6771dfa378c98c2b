"""Tabular components for listing specs and side-by-side comparison."""

from __future__ import annotations

from typing import List, Sequence

import pandas as pd
import streamlit as st

from homefinder.models.property import ComparisonRow, PropertyListing
from homefinder.utils.formatting import format_number, format_price, status_label, type_label


def render_specs_table(listing: PropertyListing) -> None:
    data = [
        {"Spec": "Price", "Value": format_price(listing.price, listing.status)},
        {"Spec": "Status", "Value": status_label(listing.status)},
        {"Spec": "Property Type", "Value": type_label(listing.property_type)},
        {"Spec": "Bedrooms", "Value": format_number(listing.bedrooms)},
        {"Spec": "Bathrooms", "Value": format_number(listing.bathrooms)},
        {"Spec": "Square Feet", "Value": format_number(listing.square_feet)},
        {"Spec": "Year Built", "Value": str(listing.year_built)},
        {"Spec": "Lot Size", "Value": f"{format_number(listing.lot_size)} acres" if listing.lot_size > 0 else "N/A"},
        {"Spec": "Garage", "Value": f"{format_number(listing.garage)} cars" if listing.garage > 0 else "None"},
        {"Spec": "Listed", "Value": listing.listing_date.date().isoformat()},
    ]
    df = pd.DataFrame(data)
    st.dataframe(df, hide_index=True, width="stretch")


def render_comparison_table(listings: Sequence[PropertyListing], rows: List[ComparisonRow]) -> None:
    if not listings:
        st.info("No properties selected for comparison.")
        return
    headers = [f"Property {idx + 1}" for idx in range(len(listings))]
    df = pd.DataFrame([row.values for row in rows], columns=headers)
    df.insert(0, "Feature", [row.label for row in rows])
    df.loc[-1] = ["Title"] + [listing.title for listing in listings]
    df = df.sort_index().reset_index(drop=True)
    st.dataframe(df, hide_index=True, width="stretch")
