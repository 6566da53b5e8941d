# estimator/sizing.py
from __future__ import annotations

import math

from .assumptions import PVDefaults
from .contract import PVSizingResult
from .models import RoofSpec


# ==========================================================
# Utilitarios
# ==========================================================
def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(x)))


def _kw_per_m2(pv: PVDefaults) -> float:
    return (float(pv.w_per_m2) / 1000.0) * float(pv.packing_factor)


# ==========================================================
# Sizing por área de techo
#   Losses are NOT applied here; the yield provider applies them from the
#   request's loss parameter.
# ==========================================================
def system_kwp(usable_area_m2: float, pv: PVDefaults) -> float:
    area = max(0.0, float(usable_area_m2))
    return round(area * _kw_per_m2(pv), 2)


def panel_count(kwp: float, reference_panel_watts: float) -> int:
    if reference_panel_watts <= 0 or kwp <= 0:
        return 0
    return int(math.floor((float(kwp) * 1000.0) / float(reference_panel_watts)))


def roof_coverage_pct(n_panels: int, usable_area_m2: float, pv: PVDefaults) -> float:
    density = _kw_per_m2(pv)
    if usable_area_m2 <= 0 or density <= 0:
        return 0.0
    actual_kwp = (int(n_panels) * float(pv.reference_panel_watts)) / 1000.0
    area_used = actual_kwp / density
    return float(min(100, round((area_used / float(usable_area_m2)) * 100.0)))


def size(roof: RoofSpec, pv: PVDefaults) -> PVSizingResult:
    """
    kWp = usable area x (W/m2 / 1000) x packing factor, rounded to 2 decimals.

    Panel count is the floor at the reference wattage; coverage is the area those
    whole panels occupy as a % of usable area. Zero or negative area gives zeros.
    """
    kwp = system_kwp(roof.usable_area_m2, pv)
    n = panel_count(kwp, pv.reference_panel_watts)
    return PVSizingResult(
        system_kwp=kwp,
        panel_count=n,
        roof_coverage_pct=roof_coverage_pct(n, roof.usable_area_m2, pv),
    )


# ==========================================================
# Convención de azimut
#   Display:  0=N, 90=E, 180=S, 270=W
#   Provider: 0=S, 90=W, -90=E, +-180=N
# ==========================================================
def display_to_pvgis_aspect(display_azimuth: float) -> float:
    aspect = float(display_azimuth) - 180.0
    if aspect > 180.0:
        aspect -= 360.0
    if aspect < -180.0:
        aspect += 360.0
    return aspect


def pvgis_aspect_to_display(pvgis_aspect: float) -> float:
    azimuth = float(pvgis_aspect) + 180.0
    if azimuth >= 360.0:
        azimuth -= 360.0
    if azimuth < 0.0:
        azimuth += 360.0
    return azimuth


def tilt_deg(roof: RoofSpec, angle_max_deg: float) -> float:
    return _clamp(roof.tilt_deg, 0.0, angle_max_deg)
