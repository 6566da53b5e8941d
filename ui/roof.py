# ui/roof.py
from __future__ import annotations

from typing import List, Tuple

import streamlit as st

from estimator.assumptions import default_assumptions
from estimator.formatting import format_kwp, format_pct
from estimator.sizing import size
from ui.adapters import inputs_from_ctx, step_errors


def render(ctx) -> None:
    st.markdown("### Roof")

    a = default_assumptions()
    r = ctx.roof
    area_lo = float(a.value("inputs.usable_area_min_m2"))
    area_hi = float(a.value("inputs.usable_area_max_m2"))

    r["usable_area_m2"] = st.number_input(
        "Usable roof area (m²)",
        min_value=area_lo,
        max_value=area_hi,
        step=5.0,
        value=min(max(float(r["usable_area_m2"]), area_lo), area_hi),
        help="After parapets, AC units, water tanks and walkways.",
    )

    r["use_optimal_angles"] = st.checkbox(
        "I don't know the tilt/orientation (let PVGIS choose the optimum)",
        value=bool(r["use_optimal_angles"]),
    )

    col1, col2 = st.columns(2)
    with col1:
        r["tilt_deg"] = st.slider(
            "Tilt (°)",
            min_value=0,
            max_value=int(a.pvgis.angle_max_deg),
            value=int(r["tilt_deg"]),
            disabled=bool(r["use_optimal_angles"]),
        )
    with col2:
        r["azimuth_deg"] = st.number_input(
            "Azimuth (° from North, 180 = South)",
            min_value=0.0,
            max_value=359.0,
            step=5.0,
            value=float(r["azimuth_deg"]),
            disabled=bool(r["use_optimal_angles"]),
        )
        st.caption("North 0 · East 90 · South 180 · West 270")

    r["shading_loss_pct"] = st.slider(
        "Shading loss (%)",
        min_value=0,
        max_value=int(a.value("inputs.shading_loss_max_pct")),
        value=int(r["shading_loss_pct"]),
    )

    ctx.roof = r

    # Preview (sizing is pure and instant)
    inputs = inputs_from_ctx(ctx, a)
    sizing = size(inputs.roof, inputs.advanced.pv_defaults(a.pv_defaults))
    c1, c2, c3 = st.columns(3)
    c1.metric("System size", format_kwp(sizing.system_kwp))
    c2.metric("Panels", f"{sizing.panel_count}")
    c3.metric("Roof coverage", format_pct(sizing.roof_coverage_pct))


def validate(ctx) -> Tuple[bool, List[str]]:
    errors = step_errors(ctx, default_assumptions(), ("Roof:",))
    return (len(errors) == 0), errors
