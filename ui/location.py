# ui/location.py
from __future__ import annotations

from typing import List, Tuple

import streamlit as st

from estimator.assumptions import default_assumptions
from estimator.cities import all_cities, cities_by_region, find_city_by_id, find_nearest_city
from ui.adapters import step_errors


def _label(city_id: str) -> str:
    c = find_city_by_id(city_id)
    return f"{c.name_en} ({c.name_ar}) · {c.region}" if c else city_id


def render(ctx) -> None:
    st.markdown("### Where is the house?")

    loc = ctx.location
    ids = [c.id for regions in cities_by_region().values() for c in regions]
    current = loc.get("city_id") if loc.get("city_id") in ids else ids[0]

    loc["city_id"] = st.selectbox(
        "City",
        options=ids,
        index=ids.index(current),
        format_func=_label,
    )

    with st.expander("I know my coordinates"):
        c1, c2, c3 = st.columns([1, 1, 1])
        with c1:
            lat = st.number_input("Latitude", value=float(find_city_by_id(loc["city_id"]).lat), format="%.4f")
        with c2:
            lon = st.number_input("Longitude", value=float(find_city_by_id(loc["city_id"]).lon), format="%.4f")
        with c3:
            st.write("")
            if st.button("Use nearest city"):
                loc["city_id"] = find_nearest_city(lat, lon).id
                st.rerun()

    city = find_city_by_id(loc["city_id"])
    if city:
        st.caption(
            f"{city.name_en}: {city.lat:.4f}, {city.lon:.4f} · typical DNI {city.avg_dni} kWh/m²/day "
            f"(informational; production comes from PVGIS). {len(all_cities())} cities available."
        )

    ctx.location = loc


def validate(ctx) -> Tuple[bool, List[str]]:
    errors = step_errors(ctx, default_assumptions(), ("Location:",))
    return (len(errors) == 0), errors
