# ui/consumption.py
from __future__ import annotations

from typing import List, Tuple

import streamlit as st

from estimator.assumptions import default_assumptions
from estimator.contract import MONTH_NAMES
from estimator.formatting import format_kwh, format_sar
from estimator.seasonal import distribute
from estimator.tariff import bill
from ui.adapters import monthly_kwh_from_ctx, step_errors


def render(ctx) -> None:
    st.markdown("### Electricity consumption")

    a = default_assumptions()
    c = ctx.consumption

    modes = ["kwh", "bill"]
    c["input_mode"] = st.radio(
        "I know my…",
        options=modes,
        index=modes.index(c.get("input_mode", "kwh")),
        format_func=lambda m: "average monthly kWh" if m == "kwh" else "average monthly bill (SAR)",
        horizontal=True,
    )

    if c["input_mode"] == "kwh":
        c["monthly_kwh"] = st.number_input(
            "Average monthly consumption (kWh)",
            min_value=0.0,
            step=100.0,
            value=float(c["monthly_kwh"]),
        )
    else:
        c["monthly_bill_sar"] = st.number_input(
            "Average monthly bill (SAR)",
            min_value=0.0,
            step=50.0,
            value=float(c["monthly_bill_sar"]),
        )
        kwh = monthly_kwh_from_ctx(ctx, a)
        if kwh > 0:
            st.info(f"Estimated consumption: **{format_kwh(kwh)} / month** (from the SEC residential tariff; an estimate).")

    ctx.consumption = c

    kwh = monthly_kwh_from_ctx(ctx, a)
    if kwh > 0:
        t = bill(kwh, a.tariff)
        c1, c2 = st.columns(2)
        c1.metric("Monthly bill", format_sar(t.monthly_bill_sar, 2))
        c2.metric("Blended rate", f"{t.blended_rate_sar_per_kwh:.4f} SAR/kWh")

        with st.expander("Seasonal profile used"):
            months = distribute(kwh, a.seasonal_weights)
            st.bar_chart({"kWh": months})
            st.caption(" · ".join(f"{m} {v:,.0f}" for m, v in zip(MONTH_NAMES, months)))
            st.caption(a.section_meta("seasonal").get("source", ""))


def validate(ctx) -> Tuple[bool, List[str]]:
    errors = step_errors(ctx, default_assumptions(), ("Consumption:",))
    return (len(errors) == 0), errors
