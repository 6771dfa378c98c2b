"""Streamlit UI for the HomeFinder listing browser."""

from __future__ import annotations

from pathlib import Path
from typing import List

import sys

import streamlit as st
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

load_dotenv(dotenv_path=ROOT_DIR / ".env", override=False)

from app.backend_client import BackendClient
from app.components.cards import render_property_card
from app.components.charts import render_location_chart, render_price_chart, render_size_chart
from app.components.tables import render_comparison_table, render_specs_table
from homefinder.errors import DataSourceUnavailable
from homefinder.models.property import PROPERTY_TYPES, STATUS_TYPES, PropertyListing
from homefinder.models.search import SearchCriteria
from homefinder.services.comparison import ComparisonError, ComparisonSet, comparison_rows
from homefinder.services.property_service import map_center
from homefinder.services.search import FAVORITE_SORT_OPTIONS, SORT_OPTIONS
from homefinder.utils.formatting import format_price, results_text, status_label, type_label

st.set_page_config(page_title="HomeFinder", layout="wide", page_icon="🏡")

PRICE_CEILING = 2_000_000
DEFAULT_STATUS = ["for-sale", "for-rent"]
ROOM_OPTIONS = ["", "1", "2", "3", "4", "5"]
PAGES = ["Browse", "Map", "Favorites", "Compare"]


@st.cache_resource(show_spinner=False)
def get_backend_client() -> BackendClient:
    return BackendClient()


def load_styles() -> None:
    css_path = Path(__file__).resolve().parent / "assets" / "styles.css"
    if css_path.exists():
        st.markdown(f"<style>{css_path.read_text()}</style>", unsafe_allow_html=True)


def comparison() -> ComparisonSet:
    if "comparison" not in st.session_state:
        st.session_state["comparison"] = ComparisonSet()
    return st.session_state["comparison"]


def navigate_to(property_id: int) -> None:
    st.query_params["property_id"] = str(property_id)


def navigate_home() -> None:
    st.query_params.clear()


def on_favorite_changed(property_id: int, is_favorite: bool) -> None:
    st.session_state["favorite_count"] = get_backend_client().favorite_count()
    st.session_state["favorite_notice"] = "Added to favorites" if is_favorite else "Removed from favorites"


def toggle_favorite(property_id: int) -> None:
    get_backend_client().toggle_favorite(property_id, on_change=on_favorite_changed)


def browse_search(backend: BackendClient):
    """Per-session debounced search and the box its current result lands in."""
    state = st.session_state
    if "browse_search" not in state:
        box = {"listings": [], "error": None}

        def on_result(listings: List[PropertyListing]) -> None:
            box.update(listings=listings, error=None)

        def on_error(exc: Exception) -> None:
            box.update(listings=[], error=exc)

        state["browse_results"] = box
        state["browse_search"] = backend.live_search(on_result, on_error=on_error)
    return state["browse_search"], state["browse_results"]


def toggle_compare(listing: PropertyListing) -> None:
    selection = comparison()
    try:
        added = selection.toggle(listing)
    except ComparisonError as exc:
        st.session_state["compare_notice"] = ("warning", str(exc))
        return
    verb = "added to" if added else "removed from"
    st.session_state["compare_notice"] = ("success" if added else "info", f"{listing.title} {verb} comparison")


def add_to_compare(listing: PropertyListing) -> None:
    try:
        comparison().add(listing)
    except ComparisonError as exc:
        st.session_state["compare_notice"] = ("warning", str(exc))
        return
    st.session_state["compare_notice"] = ("success", f"{listing.title} added to comparison")


def show_notices() -> None:
    notice = st.session_state.pop("compare_notice", None)
    if notice:
        level, message = notice
        getattr(st, level)(message)
    favorite_notice = st.session_state.pop("favorite_notice", None)
    if favorite_notice:
        st.toast(favorite_notice)


def render_error(message: str) -> None:
    st.error(message)
    st.button("Try Again", key="retry")


def render_filters() -> SearchCriteria:
    sidebar = st.sidebar
    sidebar.markdown("### Filters & Search")
    query = sidebar.text_input("Search", placeholder="Search by location, property type, or keywords...")
    price_min, price_max = sidebar.slider(
        "Price range", min_value=0, max_value=PRICE_CEILING, value=(0, PRICE_CEILING), step=25_000, format="$%d"
    )
    bedrooms = sidebar.selectbox("Min bedrooms", ROOM_OPTIONS, format_func=lambda v: f"{v}+" if v else "Any")
    bathrooms = sidebar.selectbox("Min bathrooms", ROOM_OPTIONS[:5], format_func=lambda v: f"{v}+" if v else "Any")
    property_type = sidebar.multiselect("Property type", PROPERTY_TYPES, format_func=type_label)
    status = sidebar.multiselect("Status", STATUS_TYPES, default=DEFAULT_STATUS, format_func=status_label)
    return SearchCriteria(
        search_query=query,
        price_min=price_min or None,
        # The top of the slider means "no upper bound".
        price_max=price_max if price_max < PRICE_CEILING else None,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        property_type=property_type,
        status=status,
    )


def render_grid(listings: List[PropertyListing], show_compare: bool) -> None:
    selection = comparison()
    columns = st.columns(3)
    for idx, listing in enumerate(listings):
        with columns[idx % 3]:
            render_property_card(
                listing,
                on_open=lambda pid=listing.id: navigate_to(pid),
                on_favorite=lambda pid=listing.id: toggle_favorite(pid),
                on_compare=(lambda item=listing: toggle_compare(item)) if show_compare else None,
                in_comparison=selection.contains(listing.id),
                key=str(listing.id),
            )


def render_browse_page(backend: BackendClient) -> None:
    criteria = render_filters()
    header, sort_col = st.columns([3, 1])
    labels = dict(SORT_OPTIONS)
    sort_by = sort_col.selectbox("Sort by", list(labels), format_func=labels.get, key="browse_sort")
    criteria = criteria.model_copy(update={"sort_by": sort_by})

    search, box = browse_search(backend)
    with st.spinner("Loading properties..."):
        # A rerun that starts mid-query supersedes it; the older result is dropped.
        search.submit(criteria)
        search.flush()
    error = box["error"]
    if isinstance(error, DataSourceUnavailable):
        render_error("Failed to load properties. Please try again.")
        return
    if error is not None:
        raise error
    listings = box["listings"]

    header.markdown(f"#### {results_text(len(listings))}")
    selection = comparison()
    if len(selection):
        tray_label, tray_clear = st.columns([4, 1])
        tray_label.caption("Comparing: " + ", ".join(r.title for r in selection.records))
        tray_clear.button("Clear comparison", on_click=selection.clear)

    if not listings:
        st.info("No properties found. Try adjusting your search criteria or explore different areas.")
        return
    render_grid(listings, show_compare=True)


def render_favorites_page(backend: BackendClient) -> None:
    st.title("My Favorites")
    st.caption("Keep track of properties you're interested in and compare them side by side.")
    labels = dict(FAVORITE_SORT_OPTIONS)
    sort_by = st.selectbox("Sort by", list(labels), format_func=labels.get, key="favorites_sort")
    try:
        favorites = backend.list_favorites(sort_by=sort_by)
    except DataSourceUnavailable:
        render_error("Failed to load favorite properties. Please try again.")
        return
    if not favorites:
        st.info("No favorite properties yet. Start browsing and save properties to see them here.")
        return
    st.markdown(f"#### {results_text(len(favorites), 'favorite property', '')}")
    render_grid(favorites, show_compare=False)


def render_compare_page(backend: BackendClient) -> None:
    st.title("Compare Properties")
    st.caption("Compare up to 3 properties side by side to make an informed decision.")
    selection = comparison()
    try:
        all_listings = backend.list_all()
    except DataSourceUnavailable:
        render_error("Failed to load properties. Please try again.")
        return

    selected = list(selection.records)
    if selected:
        remove_cols = st.columns(len(selected) + 1)
        for idx, listing in enumerate(selected):
            remove_cols[idx].button(
                f"Remove Property {idx + 1}",
                key=f"remove-{listing.id}",
                on_click=selection.remove,
                args=(listing.id,),
            )
        remove_cols[-1].button("Clear all", on_click=selection.clear)
        render_comparison_table(selected, comparison_rows(selected))
        chart_col1, chart_col2 = st.columns(2)
        with chart_col1:
            st.plotly_chart(render_price_chart(selected), use_container_width=True)
        with chart_col2:
            st.plotly_chart(render_size_chart(selected), use_container_width=True)
    else:
        st.info("No properties selected for comparison. Pick properties below to start comparing.")

    if selection.is_full:
        return
    st.subheader("Add a property")
    candidates = [listing for listing in all_listings if not selection.contains(listing.id)]
    for listing in candidates:
        name_col, price_col, add_col = st.columns([3, 1, 1])
        name_col.write(f"**{listing.title}** · {listing.location.city}, {listing.location.state}")
        price_col.write(format_price(listing.price, listing.status))
        add_col.button("Add", key=f"add-{listing.id}", on_click=add_to_compare, args=(listing,))


def render_map_page(backend: BackendClient) -> None:
    st.title("Map View")
    st.caption("Property locations by coordinates. Select a listing to open its details.")
    query = st.text_input("Search", placeholder="Search by location or keywords...", key="map_search")
    try:
        listings = backend.search_properties(SearchCriteria(search_query=query))
    except DataSourceUnavailable:
        render_error("Failed to load properties. Please try again.")
        return
    st.markdown(f"#### {results_text(len(listings))}")
    if not listings:
        return
    center = map_center(listings)
    map_col, list_col = st.columns([3, 2])
    with map_col:
        st.plotly_chart(render_location_chart(listings, center), use_container_width=True)
    with list_col:
        for listing in listings:
            coords = listing.location.coordinates
            st.button(
                f"{format_price(listing.price, listing.status)} · {listing.title} ({coords.lat:.4f}, {coords.lng:.4f})",
                key=f"map-{listing.id}",
                on_click=navigate_to,
                args=(listing.id,),
            )


def render_detail_page(backend: BackendClient, property_id: str) -> None:
    st.button("← Back to listings", on_click=navigate_home)
    try:
        listing = backend.get_property(property_id)
    except DataSourceUnavailable:
        render_error("Failed to load property details. Please try again.")
        return
    if listing is None:
        st.warning("Property not found.")
        return

    header_col, price_col = st.columns([3, 1])
    with header_col:
        st.markdown(f"## {listing.title}")
        st.caption(f"{listing.location.address}, {listing.location.city}, {listing.location.state} {listing.location.zip}")
    with price_col:
        st.metric(status_label(listing.status), format_price(listing.price, listing.status))
        label = "♥ Remove from favorites" if listing.is_favorite else "♡ Add to favorites"
        st.button(label, on_click=toggle_favorite, args=(listing.id,))

    image_idx = st.session_state.setdefault(f"image_{listing.id}", 0) % len(listing.images)
    st.image(listing.images[image_idx], use_container_width=True)
    if len(listing.images) > 1:
        prev_col, _, next_col = st.columns([1, 4, 1])
        prev_col.button("‹ Previous", on_click=lambda: _step_image(listing, -1))
        next_col.button("Next ›", on_click=lambda: _step_image(listing, 1))

    st.subheader("Overview")
    st.write(listing.description or "No description available.")
    st.subheader("Specs")
    render_specs_table(listing)
    if listing.features:
        st.subheader("Features")
        st.markdown("\n".join(f"- {feature}" for feature in listing.features))
    coords = listing.location.coordinates
    st.caption(f"Map location: {coords.lat:.4f}, {coords.lng:.4f}")
    st.button("Add to comparison", on_click=add_to_compare, args=(listing,))


def _step_image(listing: PropertyListing, step: int) -> None:
    key = f"image_{listing.id}"
    st.session_state[key] = (st.session_state.get(key, 0) + step) % len(listing.images)


def main() -> None:
    load_styles()
    backend = get_backend_client()
    if "favorite_count" not in st.session_state:
        st.session_state["favorite_count"] = backend.favorite_count()

    st.sidebar.title("HomeFinder")
    page = st.sidebar.radio("Navigate", PAGES, key="page")
    st.sidebar.caption(f"♥ Favorites: {st.session_state['favorite_count']}")
    st.sidebar.caption(f"Comparing {len(comparison())} of {comparison().capacity}")
    show_notices()

    property_id = st.query_params.get("property_id")
    if property_id:
        render_detail_page(backend, property_id)
    elif page == "Map":
        render_map_page(backend)
    elif page == "Favorites":
        render_favorites_page(backend)
    elif page == "Compare":
        render_compare_page(backend)
    else:
        render_browse_page(backend)


main()
