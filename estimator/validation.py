# estimator/validation.py
from __future__ import annotations

from typing import List

from .assumptions import AssumptionSet
from .models import EstimatorInputs
from .sizing import system_kwp


def validate_inputs(inputs: EstimatorInputs, a: AssumptionSet) -> List[str]:
    """
    Human-readable problems for the form. The engine itself never raises on these;
    it clamps, so this list only decides whether the UI lets the user continue.
    """
    errors: List[str] = []
    roof = inputs.roof
    angle_max = a.pvgis.angle_max_deg
    shading_max = a.value("inputs.shading_loss_max_pct")

    if inputs.city is None:
        errors.append("Location: choose a city")

    pv = a.pvgis
    if roof.usable_area_m2 <= 0:
        errors.append("Roof: usable area must be > 0 m²")
    else:
        kwp = system_kwp(roof.usable_area_m2, inputs.advanced.pv_defaults(a.pv_defaults))
        if not (pv.peakpower_min_kwp <= kwp <= pv.peakpower_max_kwp):
            errors.append(
                f"Roof: system size {kwp:g} kWp is outside the {pv.peakpower_min_kwp:g}-{pv.peakpower_max_kwp:g} kWp "
                "range PVGIS can simulate; adjust the roof area"
            )
    if not roof.use_optimal_angles:
        if not (0 <= roof.tilt_deg <= angle_max):
            errors.append(f"Roof: tilt must be between 0 and {angle_max:g}°")
        if not (0 <= roof.azimuth_deg < 360):
            errors.append("Roof: azimuth must be in [0, 360)°")
    if not (0 <= roof.shading_loss_pct <= shading_max):
        errors.append(f"Roof: shading loss must be between 0 and {shading_max:g}%")

    if inputs.consumption.monthly_avg_kwh <= 0:
        errors.append("Consumption: monthly average must be > 0 kWh")

    rate = inputs.export.credit_rate_per_kwh
    if inputs.export.enabled and rate is not None and rate < 0:
        errors.append("Export: credit rate cannot be negative")

    override = inputs.advanced.self_consumption_override
    if override is not None and not (0 < override <= 1):
        errors.append("Advanced: self-consumption override must be in (0, 1]")

    return errors
