# ui/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from estimator.assumptions import AssumptionSet
from estimator.cities import DEFAULT_CITY_ID
from estimator.models import SavingsMode


# ==========================================================
# Contexto global del Wizard
# ==========================================================
@dataclass
class WizardCtx:
    # ------------------------------------------------------
    # Navegación
    # ------------------------------------------------------
    current_step: int = 1
    completed: Dict[int, bool] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    # ------------------------------------------------------
    # Inputs (plain dicts; estimator dataclasses are built on demand)
    # ------------------------------------------------------
    location: Dict[str, Any] = field(default_factory=dict)
    roof: Dict[str, Any] = field(default_factory=dict)
    consumption: Dict[str, Any] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)

    # ------------------------------------------------------
    # Resultado
    # ------------------------------------------------------
    result: Optional[Any] = None
    result_error: str = ""
    result_inputs_fingerprint: str = ""
    artifacts: Dict[str, str] = field(default_factory=dict)


def seed_defaults(ctx: WizardCtx, a: AssumptionSet) -> WizardCtx:
    """Fills missing input fields from the registry; never overwrites what the user typed."""
    pv = a.pv_defaults
    eco = a.economics

    ctx.location.setdefault("city_id", DEFAULT_CITY_ID)

    ctx.roof.setdefault("usable_area_m2", a.value("inputs.default_usable_area_m2"))
    ctx.roof.setdefault("tilt_deg", pv.tilt_deg)
    ctx.roof.setdefault("azimuth_deg", pv.azimuth_deg)
    ctx.roof.setdefault("shading_loss_pct", pv.shading_loss_pct)
    ctx.roof.setdefault("use_optimal_angles", False)

    ctx.consumption.setdefault("input_mode", "kwh")          # kwh | bill
    ctx.consumption.setdefault("monthly_kwh", a.value("inputs.default_monthly_kwh"))
    ctx.consumption.setdefault("monthly_bill_sar", 0.0)

    ctx.options.setdefault("mode", SavingsMode.CONSERVATIVE.value)
    ctx.options.setdefault("export_enabled", False)
    ctx.options.setdefault("credit_rate_per_kwh", None)      # None = unset
    ctx.options.setdefault("utility_program", "")
    ctx.options.setdefault("w_per_m2", pv.w_per_m2)
    ctx.options.setdefault("packing_factor", pv.packing_factor)
    ctx.options.setdefault("system_loss_pct", pv.system_loss_pct)
    ctx.options.setdefault("inverter_eff_pct", pv.inverter_eff_pct)
    ctx.options.setdefault("degradation_pct", pv.degradation_pct)
    ctx.options.setdefault("project_life_years", eco.project_life_years)
    ctx.options.setdefault("install_cost_sar_per_kwp", eco.install_cost_sar_per_kwp)
    ctx.options.setdefault("om_cost_sar_per_kwp_year", eco.om_cost_sar_per_kwp_year)
    ctx.options.setdefault("self_consumption_override", None)
    return ctx


# ==========================================================
# Obtener contexto
# ==========================================================
def ctx_get(st) -> WizardCtx:
    if "wizard_ctx" not in st.session_state:
        st.session_state["wizard_ctx"] = WizardCtx()
    return st.session_state["wizard_ctx"]


def ctx_set_step(st, step: int) -> None:
    ctx = ctx_get(st)
    ctx.current_step = int(step)


def ctx_invalidate_from(ctx: WizardCtx, step_from: int) -> None:
    """Marks steps >= step_from as not completed and drops the computed result."""
    for k in list(ctx.completed.keys()):
        if int(k) >= int(step_from):
            ctx.completed[k] = False
    ctx.result = None
    ctx.result_error = ""
    ctx.result_inputs_fingerprint = ""
    ctx.artifacts = {}
