"""Streamlit components for property listing cards."""

from __future__ import annotations

from typing import Callable, Optional

import streamlit as st

from homefinder.models.property import PropertyListing
from homefinder.utils.formatting import format_number, format_price, status_label, type_label


def status_pill(status: Optional[str]) -> str:
    tone = {
        "for-sale": "success",
        "for-rent": "info",
        "sold": "default",
        "pending": "warning",
    }.get(status or "", "success")
    return f"status-pill status-{tone}"


def render_property_card(
    listing: PropertyListing,
    on_open: Callable[[], None],
    on_favorite: Callable[[], None],
    on_compare: Optional[Callable[[], None]] = None,
    in_comparison: bool = False,
    key: Optional[str] = None,
) -> None:
    key = key or str(listing.id)
    location = listing.location
    card_html = f"""
        <div class="property-card">
            <img class="property-card__image" src="{listing.images[0]}" alt="{listing.title}"/>
            <div class="property-card__header">
                <span class="{status_pill(listing.status)}">{status_label(listing.status)}</span>
                <span class="property-card__type">{type_label(listing.property_type)}</span>
            </div>
            <h3>{listing.title}</h3>
            <p class="property-card__meta">{location.address}, {location.city}, {location.state}</p>
            <p class="property-card__meta">{format_number(listing.bedrooms)} bd · {format_number(listing.bathrooms)} ba · {format_number(listing.square_feet)} sqft</p>
            <p class="property-card__value">{format_price(listing.price, listing.status)}</p>
        </div>
    """
    with st.container():
        st.markdown(card_html, unsafe_allow_html=True)
        cols = st.columns(3 if on_compare else 2)
        cols[0].button("Details", key=f"open-{key}", on_click=on_open)
        heart = "♥ Saved" if listing.is_favorite else "♡ Save"
        cols[1].button(heart, key=f"fav-{key}", on_click=on_favorite)
        if on_compare:
            label = "✓ Comparing" if in_comparison else "Compare"
            cols[2].button(label, key=f"cmp-{key}", on_click=on_compare)
