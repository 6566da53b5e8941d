# ui/adapters.py
from __future__ import annotations

from typing import Any, List, Optional, Sequence

from estimator.assumptions import AssumptionSet
from estimator.cities import find_city_by_id
from estimator.models import (
    AdvancedConfig,
    ConsumptionSpec,
    EstimatorInputs,
    ExportSpec,
    RoofSpec,
    SavingsMode,
)
from estimator.tariff import kwh_from_bill
from estimator.validation import validate_inputs


def _opt_float(x: Any) -> Optional[float]:
    if x is None or (isinstance(x, str) and not x.strip()):
        return None
    return float(x)


def monthly_kwh_from_ctx(ctx, a: AssumptionSet) -> float:
    """kWh typed directly, or estimated from the SAR bill through the tariff inverse."""
    c = ctx.consumption
    if c.get("input_mode") == "bill":
        kwh = kwh_from_bill(float(c.get("monthly_bill_sar") or 0.0), a.tariff)
        return float(kwh) if kwh is not None else 0.0
    return float(c.get("monthly_kwh") or 0.0)


def inputs_from_ctx(ctx, a: AssumptionSet) -> EstimatorInputs:
    """
    WizardCtx -> EstimatorInputs.
    app.py and the step modules never map fields one by one.
    """
    r = ctx.roof
    o = ctx.options

    return EstimatorInputs(
        city=find_city_by_id(str(ctx.location.get("city_id", ""))),
        roof=RoofSpec(
            usable_area_m2=float(r.get("usable_area_m2", 0.0)),
            tilt_deg=float(r.get("tilt_deg", 0.0)),
            azimuth_deg=float(r.get("azimuth_deg", 0.0)),
            shading_loss_pct=float(r.get("shading_loss_pct", 0.0)),
            use_optimal_angles=bool(r.get("use_optimal_angles", False)),
        ),
        consumption=ConsumptionSpec(monthly_avg_kwh=monthly_kwh_from_ctx(ctx, a)),
        advanced=AdvancedConfig(
            w_per_m2=float(o["w_per_m2"]),
            packing_factor=float(o["packing_factor"]),
            system_loss_pct=float(o["system_loss_pct"]),
            inverter_eff_pct=float(o["inverter_eff_pct"]),
            degradation_pct=float(o["degradation_pct"]),
            project_life_years=int(o["project_life_years"]),
            install_cost_sar_per_kwp=float(o["install_cost_sar_per_kwp"]),
            om_cost_sar_per_kwp_year=float(o["om_cost_sar_per_kwp_year"]),
            self_consumption_override=_opt_float(o.get("self_consumption_override")),
        ),
        export=ExportSpec(
            enabled=bool(o.get("export_enabled", False)),
            credit_rate_per_kwh=_opt_float(o.get("credit_rate_per_kwh")),
            utility_program=str(o.get("utility_program", "")),
        ),
        mode=SavingsMode(o.get("mode", SavingsMode.CONSERVATIVE.value)),
    )


def step_errors(ctx, a: AssumptionSet, prefixes: Sequence[str]) -> List[str]:
    """Validation messages that belong to one wizard step (matched by their prefix)."""
    errors = validate_inputs(inputs_from_ctx(ctx, a), a)
    return [e for e in errors if any(e.startswith(p) for p in prefixes)]
