# ui/options.py
from __future__ import annotations

from typing import List, Tuple

import streamlit as st

from estimator.assumptions import default_assumptions
from estimator.models import SavingsMode
from ui.adapters import step_errors


def _mode_label(mode: str) -> str:
    p = default_assumptions().self_consumption
    if mode == SavingsMode.PROFILE.value:
        return f"Daytime-heavy household ({p.profile_low:.0%}–{p.profile_high:.0%} self-consumption)"
    if mode == SavingsMode.NET_BILLING.value:
        return "Net billing (export credit, only with a confirmed rate)"
    return f"Conservative ({p.conservative_low:.0%}–{p.conservative_high:.0%} self-consumption)"


def _render_export(o) -> None:
    a = default_assumptions()
    st.markdown("#### Export to the grid")

    o["export_enabled"] = st.checkbox("I have (or will sign) an SEC net-billing agreement", value=bool(o["export_enabled"]))
    if not o["export_enabled"]:
        return

    o["credit_rate_per_kwh"] = st.number_input(
        "Export credit rate (SAR/kWh)",
        min_value=0.0,
        step=0.01,
        format="%.3f",
        value=o.get("credit_rate_per_kwh"),
        placeholder="unset",
        help="Leave blank unless the rate is confirmed in your agreement.",
    )
    o["utility_program"] = st.text_input("Agreement / program (optional)", value=str(o.get("utility_program", "")))
    if o["credit_rate_per_kwh"] is None:
        st.warning(a.export_credit_notice or "No export credit is applied without a confirmed rate.")


def _render_advanced(o) -> None:
    with st.expander("Advanced settings"):
        c1, c2 = st.columns(2)
        with c1:
            o["w_per_m2"] = st.number_input("Panel density (W/m²)", min_value=50.0, max_value=300.0, step=1.0, value=float(o["w_per_m2"]))
            o["packing_factor"] = st.number_input("Packing factor", min_value=0.1, max_value=1.0, step=0.05, value=float(o["packing_factor"]))
            o["system_loss_pct"] = st.number_input("System loss (%)", min_value=0.0, max_value=40.0, step=0.5, value=float(o["system_loss_pct"]))
            o["inverter_eff_pct"] = st.number_input(
                "Inverter efficiency (%, informational)",
                min_value=80.0,
                max_value=100.0,
                step=0.5,
                value=float(o["inverter_eff_pct"]),
                help="Shown in the report only. Inverter losses are already part of the system loss sent to PVGIS.",
            )
            o["degradation_pct"] = st.number_input("Degradation (%/year)", min_value=0.0, max_value=3.0, step=0.1, value=float(o["degradation_pct"]))
        with c2:
            o["project_life_years"] = st.number_input("Project life (years)", min_value=1, max_value=40, step=1, value=int(o["project_life_years"]))
            o["install_cost_sar_per_kwp"] = st.number_input(
                "Install cost (SAR/kWp)",
                min_value=0.0,
                step=100.0,
                value=float(o["install_cost_sar_per_kwp"]),
                help="0 hides the investment metrics.",
            )
            o["om_cost_sar_per_kwp_year"] = st.number_input("O&M (SAR/kWp/year)", min_value=0.0, step=5.0, value=float(o["om_cost_sar_per_kwp_year"]))

            use_override = st.checkbox("Fix self-consumption to one value", value=o.get("self_consumption_override") is not None)
            if use_override:
                p = default_assumptions().self_consumption
                current = o.get("self_consumption_override") or round((p.conservative_low + p.conservative_high) / 2, 2)
                o["self_consumption_override"] = st.slider("Self-consumption (fraction)", 0.05, 1.0, float(current), 0.05)
            else:
                o["self_consumption_override"] = None


def render(ctx) -> None:
    st.markdown("### Savings assumptions")

    o = ctx.options
    modes = [m.value for m in SavingsMode]
    o["mode"] = st.radio(
        "Savings mode",
        options=modes,
        index=modes.index(o.get("mode", SavingsMode.CONSERVATIVE.value)),
        format_func=_mode_label,
    )
    if o["mode"] == SavingsMode.PROFILE.value:
        st.caption("A wider fixed range, not an hourly load simulation.")

    _render_export(o)
    _render_advanced(o)

    ctx.options = o


def validate(ctx) -> Tuple[bool, List[str]]:
    errors = step_errors(ctx, default_assumptions(), ("Export:", "Advanced:"))
    return (len(errors) == 0), errors
