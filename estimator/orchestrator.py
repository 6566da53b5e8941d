# estimator/orchestrator.py
from __future__ import annotations

import logging
from typing import Optional

from .assumptions import AssumptionSet, PvgisSettings, default_assumptions
from .contract import EstimationResult, MonthlyYield, PVSizingResult
from .economics import compare, evaluate
from .models import EstimatorInputs
from .ports import YieldProvider, YieldQuery
from .savings import compute_savings
from .sizing import display_to_pvgis_aspect, size, tilt_deg
from .tariff import bill

logger = logging.getLogger(__name__)


# ==========================================================
# Query para el proveedor de rendimiento
# ==========================================================
def combined_loss_pct(system_loss_pct: float, shading_loss_pct: float, loss_max_pct: float) -> float:
    """System and shading losses compound multiplicatively; sent once, as the provider's loss."""
    sys_f = max(0.0, min(1.0, system_loss_pct / 100.0))
    shade_f = max(0.0, min(1.0, shading_loss_pct / 100.0))
    loss = (1.0 - (1.0 - sys_f) * (1.0 - shade_f)) * 100.0
    return round(min(loss, loss_max_pct), 1)


def build_yield_query(inputs: EstimatorInputs, sizing: PVSizingResult, settings: PvgisSettings) -> YieldQuery:
    if inputs.city is None:
        raise ValueError("A city is required to query the yield provider")
    roof = inputs.roof
    return YieldQuery(
        lat=inputs.city.lat,
        lon=inputs.city.lon,
        peakpower=round(sizing.system_kwp, settings.capacity_decimals),
        loss=combined_loss_pct(inputs.advanced.system_loss_pct, roof.shading_loss_pct, settings.loss_max_pct),
        angle=tilt_deg(roof, settings.angle_max_deg),
        aspect=display_to_pvgis_aspect(roof.azimuth_deg),
        optimal_angles=bool(roof.use_optimal_angles),
    )


# ==========================================================
# ENTRYPOINT (sin I/O)
# ==========================================================
def run_estimation(
    inputs: EstimatorInputs,
    monthly_yield: MonthlyYield,
    assumptions: Optional[AssumptionSet] = None,
) -> EstimationResult:
    """
    sizing -> baseline tariff -> savings range -> economics, from an already-fetched yield.

    Economics (and the citizen comparisons built on them) are skipped when the install
    cost per kWp is not positive.
    """
    a = assumptions or default_assumptions()
    adv = inputs.advanced

    sizing = size(inputs.roof, adv.pv_defaults(a.pv_defaults))
    tariff = a.tariff
    baseline = bill(inputs.consumption.monthly_avg_kwh, tariff)

    savings, breakdown = compute_savings(
        monthly_yield.monthly_kwh,
        inputs.consumption,
        inputs.export,
        inputs.mode,
        tariff,
        a.self_consumption,
        a.seasonal_weights,
        adv.self_consumption_override,
    )
    logger.debug(
        "Sizing %.2f kWp / %d panels; savings %.2f-%.2f SAR/yr",
        sizing.system_kwp, sizing.panel_count, savings.min_sar_per_year, savings.max_sar_per_year,
    )

    economics = None
    citizen = None
    if adv.install_cost_sar_per_kwp > 0:
        economics = evaluate(
            sizing,
            adv.economic_defaults(a.economics),
            monthly_yield.annual_kwh,
            savings.min_sar_per_year,
            savings.max_sar_per_year,
            a.citizen,
        )
        citizen = compare(
            savings.mid_sar_per_year,
            baseline.monthly_bill_sar,
            economics.co2_offset_tons_per_year,
            monthly_yield.annual_kwh,
            a.citizen,
        )

    return EstimationResult(
        sizing=sizing,
        monthly_yield=monthly_yield,
        tariff=baseline,
        savings=savings,
        monthly_breakdown=breakdown,
        economics=economics,
        citizen=citizen,
        mode=inputs.mode,
        annual_production_kwh=monthly_yield.annual_kwh,
        assumptions_version=a.version,
    )


# ==========================================================
# ENTRYPOINT con proveedor externo
# ==========================================================
def estimate(
    inputs: EstimatorInputs,
    provider: YieldProvider,
    assumptions: Optional[AssumptionSet] = None,
) -> EstimationResult:
    """Sizes the roof, asks the provider for the yield, then runs the pure pipeline."""
    a = assumptions or default_assumptions()
    sizing = size(inputs.roof, inputs.advanced.pv_defaults(a.pv_defaults))

    if sizing.system_kwp <= 0:
        logger.info("Zero capacity; skipping the yield provider")
        monthly_yield = MonthlyYield.zero()
    else:
        query = build_yield_query(inputs, sizing, a.pvgis)
        logger.debug("Yield query: %s", query)
        monthly_yield = provider.fetch(query)

    return run_estimation(inputs, monthly_yield, a)
