from __future__ import annotations

import streamlit as st

from meet_tracker.config import load_config
from meet_tracker.contacts import add_contact, delete_contacts
from meet_tracker.errors import ParseError, StorageError
from meet_tracker.interchange import commit_import, export_store, preview_import
from meet_tracker.location import FixedLocationSource, location_status
from meet_tracker.models import Coordinate, PlacedContact
from meet_tracker.session import MapSession
from meet_tracker.store import JsonFileContactStore
from meet_tracker.timeutils import local_display


def _rows(placed: list[PlacedContact], tz_name: str) -> list[dict[str, object]]:
    return [
        {
            "name": p.contact.name,
            "description": p.contact.description or "",
            "met": local_display(p.contact.timestamp, tz_name),
            "latitude": round(p.contact.latitude, 6),
            "longitude": round(p.contact.longitude, 6),
            "offset_dx": round(p.offset.dx, 1),
            "offset_dy": round(p.offset.dy, 1),
            "id": p.contact.id,
        }
        for p in placed
    ]


def main() -> None:
    st.set_page_config(page_title="Meet Tracker", layout="wide")
    st.title("Meet Tracker")

    cfg = load_config()
    with st.sidebar:
        st.subheader("Data")
        store_path = st.text_input("Contact store", value=str(cfg.store_path))
        tz_name = st.text_input("Time zone (IANA)", value=cfg.tz_name)

        st.subheader("My location")
        has_fix = st.checkbox("Location available", value=True)
        my_lat = st.number_input("Latitude", value=48.1371540, format="%.7f")
        my_lon = st.number_input("Longitude", value=11.5761240, format="%.7f")

        st.subheader("Map")
        mode = st.radio("Show", ["Viewport", "Near me"], horizontal=True)
        if mode == "Viewport":
            view_lat = st.number_input("Center latitude", value=float(my_lat), format="%.7f")
            view_lon = st.number_input("Center longitude", value=float(my_lon), format="%.7f")
            lat_span = st.number_input("Latitude span (deg)", value=cfg.default_span_deg, format="%.4f")
            lon_span = st.number_input("Longitude span (deg)", value=cfg.default_span_deg, format="%.4f")
        else:
            radius_m = st.number_input("Radius (m)", value=cfg.nearby_radius_m, step=50.0)

    try:
        store = JsonFileContactStore(store_path)
    except StorageError as exc:
        st.error(f"Cannot open contact store: {exc}")
        return

    location = FixedLocationSource(Coordinate(float(my_lat), float(my_lon)) if has_fix else None)
    session = MapSession(store, location, epsilon=cfg.overlap_epsilon_deg, fan_radius=cfg.fan_radius)
    if mode == "Viewport":
        session.show_region(Coordinate(float(view_lat), float(view_lon)), float(lat_span), float(lon_span))
    else:
        session.show_nearby(float(radius_m))
        status = location_status(location.authorization_state())
        if status:
            st.warning(status)
        elif location.current_coordinate() is None:
            st.info("Location unavailable.")

    placed = session.placements()

    c1, c2 = st.columns(2)
    c1.metric("Visible contacts", str(len(placed)))
    c2.metric("Stored contacts", str(store.count()))

    if placed:
        st.map(
            {
                "lat": [p.contact.latitude for p in placed],
                "lon": [p.contact.longitude for p in placed],
            }
        )
        st.dataframe(_rows(placed, tz_name), use_container_width=True, height=360)
        to_delete = st.multiselect(
            "Delete contacts",
            options=[p.contact.id for p in placed],
            format_func=lambda cid: store.get(cid).name or cid,
        )
        if to_delete and st.button("Delete selected"):
            try:
                delete_contacts(store, to_delete)
            except StorageError:
                st.error("Deleting failed.")
            else:
                st.rerun()
    else:
        st.info("No contacts in this area.")

    st.subheader("Add contact")
    with st.form("add_contact", clear_on_submit=True):
        name = st.text_input("Name")
        description = st.text_input("Description (optional)")
        submitted = st.form_submit_button("Save")
    if submitted:
        try:
            add_contact(store, name=name, description=description, location=location)
        except ValueError as exc:
            st.error(str(exc))
        except StorageError:
            st.error("Saving failed.")
        else:
            st.rerun()

    st.subheader("Export / import")
    st.download_button(
        "Download contacts.json",
        data=export_store(store),
        file_name="contacts.json",
        mime="application/json",
    )
    uploaded = st.file_uploader("Import contacts (replaces all stored contacts)", type=["json"])
    if uploaded is not None:
        raw = uploaded.getvalue()
        try:
            preview = preview_import(raw, store)
        except ParseError as exc:
            st.error(f"Invalid contacts document: {exc}")
            return
        st.warning(
            f"This will replace {preview.existing_count} existing contact(s) "
            f"with {preview.import_count} imported."
        )
        if st.button("Replace all contacts", type="primary"):
            try:
                n = commit_import(raw, store)
            except StorageError:
                st.error("Import failed; stored contacts were not changed.")
            else:
                st.success(f"Imported {n} contact(s).")


if __name__ == "__main__":
    main()
