"""Plotly chart helpers for Streamlit UI."""

from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go

from homefinder.models.property import Coordinates, PropertyListing
from homefinder.utils.formatting import format_price


def render_price_chart(listings: Sequence[PropertyListing], title: str = "Price Comparison") -> go.Figure:
    names = [f"{idx + 1}. {listing.title}" for idx, listing in enumerate(listings)]
    prices = [listing.price for listing in listings]
    labels = [format_price(listing.price, listing.status) for listing in listings]
    fig = go.Figure(
        go.Bar(
            x=names,
            y=prices,
            text=labels,
            textposition="auto",
            marker_color="#1565C0",
        )
    )
    fig.update_layout(
        title=title,
        margin=dict(l=10, r=10, t=40, b=30),
        height=320,
        yaxis_title="Price ($)",
        template="plotly_white",
    )
    return fig


def render_size_chart(listings: Sequence[PropertyListing]) -> go.Figure:
    names = [f"{idx + 1}. {listing.title}" for idx, listing in enumerate(listings)]
    fig = go.Figure()
    fig.add_trace(go.Bar(x=names, y=[listing.square_feet for listing in listings], name="Square Feet", marker_color="#42A5F5"))
    fig.update_layout(
        title="Square Footage",
        margin=dict(l=10, r=10, t=40, b=30),
        height=320,
        template="plotly_white",
    )
    return fig


def render_location_chart(listings: Sequence[PropertyListing], center: Coordinates) -> go.Figure:
    """Listings plotted by longitude/latitude; a stand-in for a real map."""
    fig = go.Figure(
        go.Scatter(
            x=[listing.location.coordinates.lng for listing in listings],
            y=[listing.location.coordinates.lat for listing in listings],
            mode="markers+text",
            text=[format_price(listing.price, listing.status) for listing in listings],
            textposition="top center",
            hovertext=[listing.title for listing in listings],
            marker=dict(size=12, color="#F4511E"),
        )
    )
    fig.add_trace(
        go.Scatter(x=[center.lng], y=[center.lat], mode="markers", name="Center", marker=dict(symbol="x", size=10, color="#1565C0"))
    )
    fig.update_layout(
        title="Listing Locations",
        margin=dict(l=10, r=10, t=40, b=30),
        height=480,
        xaxis_title="Longitude",
        yaxis_title="Latitude",
        showlegend=False,
        template="plotly_white",
    )
    return fig
