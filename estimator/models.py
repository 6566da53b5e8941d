# estimator/models.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .assumptions import AssumptionSet, EconomicDefaults, PVDefaults


class SavingsMode(str, Enum):
    """Named self-consumption presets. PROFILE is a fixed placeholder range, not a simulation."""

    CONSERVATIVE = "conservative"
    PROFILE = "profile"
    NET_BILLING = "net-billing"


@dataclass(frozen=True)
class City:
    id: str
    name_en: str
    name_ar: str
    lat: float
    lon: float
    region: str
    avg_dni: float                    # kWh/m2/day, informational only


@dataclass(frozen=True)
class RoofSpec:
    usable_area_m2: float             # after parapets, AC units, walkways
    tilt_deg: float = 22.0            # 0..45
    azimuth_deg: float = 180.0        # 0=N, 90=E, 180=S, 270=W
    shading_loss_pct: float = 5.0     # 0..25
    use_optimal_angles: bool = False


@dataclass(frozen=True)
class ConsumptionSpec:
    monthly_avg_kwh: float


@dataclass(frozen=True)
class ExportSpec:
    enabled: bool = False
    credit_rate_per_kwh: Optional[float] = None   # None = unset, never defaulted
    utility_program: str = ""

    @property
    def has_credit_rate(self) -> bool:
        return self.credit_rate_per_kwh is not None


@dataclass(frozen=True)
class AdvancedConfig:
    w_per_m2: float
    packing_factor: float
    system_loss_pct: float
    inverter_eff_pct: float
    degradation_pct: float
    project_life_years: int
    install_cost_sar_per_kwp: float
    om_cost_sar_per_kwp_year: float
    self_consumption_override: Optional[float] = None   # 0..1 fraction; None = preset range

    @classmethod
    def from_assumptions(cls, a: AssumptionSet) -> "AdvancedConfig":
        pv = a.pv_defaults
        eco = a.economics
        return cls(
            w_per_m2=pv.w_per_m2,
            packing_factor=pv.packing_factor,
            system_loss_pct=pv.system_loss_pct,
            inverter_eff_pct=pv.inverter_eff_pct,
            degradation_pct=pv.degradation_pct,
            project_life_years=eco.project_life_years,
            install_cost_sar_per_kwp=eco.install_cost_sar_per_kwp,
            om_cost_sar_per_kwp_year=eco.om_cost_sar_per_kwp_year,
        )

    def pv_defaults(self, base: PVDefaults) -> PVDefaults:
        return replace(
            base,
            w_per_m2=float(self.w_per_m2),
            packing_factor=float(self.packing_factor),
            system_loss_pct=float(self.system_loss_pct),
            inverter_eff_pct=float(self.inverter_eff_pct),
            degradation_pct=float(self.degradation_pct),
        )

    def economic_defaults(self, base: EconomicDefaults) -> EconomicDefaults:
        return replace(
            base,
            install_cost_sar_per_kwp=float(self.install_cost_sar_per_kwp),
            om_cost_sar_per_kwp_year=float(self.om_cost_sar_per_kwp_year),
            project_life_years=int(self.project_life_years),
            degradation_pct=float(self.degradation_pct),
        )


@dataclass(frozen=True)
class EstimatorInputs:
    city: Optional[City]
    roof: RoofSpec
    consumption: ConsumptionSpec
    advanced: AdvancedConfig
    export: ExportSpec = field(default_factory=ExportSpec)
    mode: SavingsMode = SavingsMode.CONSERVATIVE


def default_inputs(a: AssumptionSet, city: Optional[City] = None) -> EstimatorInputs:
    pv = a.pv_defaults
    return EstimatorInputs(
        city=city,
        roof=RoofSpec(
            usable_area_m2=a.value("inputs.default_usable_area_m2"),
            tilt_deg=pv.tilt_deg,
            azimuth_deg=pv.azimuth_deg,
            shading_loss_pct=pv.shading_loss_pct,
        ),
        consumption=ConsumptionSpec(monthly_avg_kwh=a.value("inputs.default_monthly_kwh")),
        advanced=AdvancedConfig.from_assumptions(a),
    )
