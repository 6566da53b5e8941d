# ui/results.py
from __future__ import annotations

import logging
from dataclasses import asdict, replace
from typing import Any, Dict, List, Optional

import streamlit as st

from estimator.assumptions import AssumptionSet
from estimator.contract import EstimationResult
from estimator.formatting import (
    format_co2,
    format_kwh,
    format_kwp,
    format_number,
    format_optional,
    format_payback,
    format_pct,
    format_sar,
    format_sar_range,
)
from estimator.models import EstimatorInputs, SavingsMode
from estimator.orchestrator import estimate
from estimator.ports import YieldProvider
from pvgis.client import PvgisError
from reports import generate_charts, generate_pdf_report, prepare_output
from ui.adapters import inputs_from_ctx
from ui.state_helpers import is_result_stale, save_result_fingerprint

logger = logging.getLogger(__name__)


# ==========================================================
# Cálculo
# ==========================================================
def _run(ctx, provider: YieldProvider, a: AssumptionSet) -> None:
    inputs = inputs_from_ctx(ctx, a)
    try:
        with st.spinner("Fetching solar yield from PVGIS…"):
            ctx.result = estimate(inputs, provider, a)
        ctx.result_error = ""
    except PvgisError as e:
        ctx.result = None
        ctx.result_error = f"Solar data unavailable: {e}"
    # the session keeps its private output folder across recalculations
    out_dir = ctx.artifacts.get("out_dir")
    ctx.artifacts = {"out_dir": out_dir} if out_dir else {}
    save_result_fingerprint(ctx)


# ==========================================================
# Bloques de la vista
# ==========================================================
def _render_kpis(res: EstimationResult) -> None:
    e = res.economics
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("System size", format_kwp(res.sizing.system_kwp), f"{res.sizing.panel_count} panels", delta_color="off")
    c2.metric("Annual production", format_kwh(res.annual_production_kwh))
    c3.metric("Annual savings", format_sar_range(res.savings.min_sar_per_year, res.savings.max_sar_per_year))
    c4.metric("Payback", format_payback(e.simple_payback_years) if e else "N/A")
    st.caption(f"Roof coverage {format_pct(res.sizing.roof_coverage_pct)} · current bill {format_sar(res.tariff.monthly_bill_sar, 2)}/month")


def _render_economics(res: EstimationResult) -> None:
    e = res.economics
    if e is None:
        st.info("Enter an install cost in Options to see payback, NPV and IRR.")
        return

    st.markdown("#### Investment")
    if not e.is_viable:
        st.warning("At these assumptions the savings do not cover operation and maintenance: payback is not viable.")

    c1, c2, c3 = st.columns(3)
    c1.metric("Installed cost", format_sar(e.total_install_cost_sar))
    c1.metric("Cost per kWp", format_sar(e.cost_per_kwp))
    c2.metric("NPV", format_sar(e.npv))
    c2.metric("IRR", f"{format_number(e.irr_pct, 1)}%" + ("" if e.irr_converged else " ≈"))
    c3.metric("LCOE", format_optional(e.lcoe_sar_per_kwh, 3, "SAR/kWh"))
    c3.metric("25-year net savings", format_sar(e.cumulative_savings_25yr))
    if not e.irr_converged:
        st.caption("IRR is approximate: the solver stopped at its iteration limit.")

    c = res.citizen
    if c is not None:
        st.markdown("#### In everyday terms")
        k1, k2, k3, k4 = st.columns(4)
        k1.metric("Free months / year", format_number(c.months_free_per_year, 1))
        k2.metric("Trees (equivalent)", format_number(c.trees_equivalent_per_year))
        k3.metric("Car trips avoided", format_number(c.car_trips_avoided))
        k4.metric("CO₂ avoided", format_co2(e.co2_offset_tons_per_year))


def _breakdown_rows(res: EstimationResult) -> List[Dict[str, Any]]:
    out = []
    for r in res.monthly_breakdown:
        d = asdict(r)
        d.pop("month_num", None)
        out.append({k: (round(v, 1) if isinstance(v, float) else v) for k, v in d.items()})
    return out


def _render_monthly(res: EstimationResult) -> None:
    st.markdown("#### Month by month")
    st.bar_chart(
        {
            "Production (kWh)": [r.production_kwh for r in res.monthly_breakdown],
            "Consumption (kWh)": [r.consumption_kwh for r in res.monthly_breakdown],
        }
    )
    st.dataframe(_breakdown_rows(res), use_container_width=True, hide_index=True)


def _render_sensitivity(ctx, res: EstimationResult, provider: YieldProvider, a: AssumptionSet) -> None:
    with st.expander("What if…", expanded=False):
        base = inputs_from_ctx(ctx, a)
        adv = base.advanced

        c1, c2, c3 = st.columns(3)
        with c1:
            loss = st.slider("System loss (%)", 5.0, 30.0, float(adv.system_loss_pct), 0.5)
        with c2:
            wpm2 = st.slider("Panel density (W/m²)", 150.0, 250.0, float(adv.w_per_m2), 1.0)
        with c3:
            credit: Optional[float] = st.number_input(
                "Export credit (SAR/kWh)", min_value=0.0, step=0.01, value=None, placeholder="unset"
            )

        if not st.button("Recalculate scenario"):
            return

        export = base.export
        mode = base.mode
        if credit is not None:
            export = replace(base.export, enabled=True, credit_rate_per_kwh=credit)
            mode = SavingsMode.NET_BILLING

        scenario: EstimatorInputs = replace(
            base,
            advanced=replace(adv, system_loss_pct=loss, w_per_m2=wpm2),
            export=export,
            mode=mode,
        )
        try:
            alt = estimate(scenario, provider, a)
        except PvgisError as e:
            st.error(f"Solar data unavailable: {e}")
            return

        st.metric(
            "Scenario savings",
            format_sar_range(alt.savings.min_sar_per_year, alt.savings.max_sar_per_year),
            f"{format_number(alt.savings.mid_sar_per_year - res.savings.mid_sar_per_year)} SAR/yr vs. base",
        )


def _render_methodology(res: EstimationResult, a: AssumptionSet) -> None:
    with st.expander("Methodology and sources"):
        lo, hi = res.savings.self_consumption_pct_range
        st.markdown(
            f"- Savings assume **{format_pct(lo)}–{format_pct(hi)}** of solar output is used at home; "
            "the rest is exported and earns nothing unless an export credit rate is set.\n"
            "- The SEC tariff tiers are applied to each month separately.\n"
            "- Losses are applied once, in the PVGIS request."
        )
        for section, source in a.citations():
            st.markdown(f"- **{section}**: {source}")
        st.caption(f"Assumptions registry {a.version} · computed {res.computed_at:%Y-%m-%d %H:%M} UTC")
        if a.export_credit_notice:
            st.info(a.export_credit_notice)


def _render_pdf(ctx, res: EstimationResult, a: AssumptionSet) -> None:
    if st.button("Prepare PDF report"):
        paths = prepare_output(ctx.artifacts.get("out_dir"))
        ctx.artifacts["out_dir"] = paths["out_dir"]
        try:
            paths.update(generate_charts(res.monthly_breakdown, paths["charts_dir"]))
        except (OSError, ValueError, RuntimeError) as e:
            st.warning(f"Charts could not be generated: {e}")
        try:
            ctx.artifacts["pdf"] = generate_pdf_report(res, inputs_from_ctx(ctx, a), paths, a)
        except (OSError, ValueError, KeyError) as e:
            logger.exception("PDF generation failed")
            st.warning(f"PDF could not be generated: {e}")

    pdf = ctx.artifacts.get("pdf")
    if pdf:
        with open(pdf, "rb") as f:
            st.download_button("Download PDF", data=f, file_name="solar_estimate.pdf", mime="application/pdf")


# ==========================================================
# Vista principal
# ==========================================================
def render_results(ctx, provider: YieldProvider, a: AssumptionSet) -> None:
    st.markdown("### Results")

    stale = is_result_stale(ctx)
    if ctx.result is None or stale:
        if stale:
            st.warning("Inputs changed since the last calculation.")
        if st.button("Calculate", type="primary"):
            _run(ctx, provider, a)
            st.rerun()

    if ctx.result_error:
        st.error(ctx.result_error)

    res: Optional[EstimationResult] = ctx.result
    if res is None:
        return

    _render_kpis(res)
    lo, hi = res.savings.self_consumption_pct_range
    if lo == hi:
        st.caption("Self-consumption is fixed to a single value, so the range collapses to one figure.")
    _render_economics(res)
    _render_monthly(res)
    _render_sensitivity(ctx, res, provider, a)
    _render_methodology(res, a)
    _render_pdf(ctx, res, a)


def validate(ctx):
    return True, []
