# estimator/contract.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .models import SavingsMode

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


# =============================
# Sizing
# =============================

@dataclass(frozen=True)
class PVSizingResult:
    system_kwp: float                 # DC nameplate, 2 decimals
    panel_count: int                  # floor at the reference panel wattage
    roof_coverage_pct: float          # 0..100


# =============================
# Yield (from the external provider)
# =============================

@dataclass(frozen=True)
class MonthlyYield:
    monthly_kwh: Tuple[float, ...]    # 12 values, Jan..Dec
    annual_kwh: float

    @classmethod
    def zero(cls) -> "MonthlyYield":
        return cls(monthly_kwh=(0.0,) * 12, annual_kwh=0.0)


# =============================
# Tariff
# =============================

@dataclass(frozen=True)
class TariffResult:
    monthly_bill_sar: float
    annual_bill_sar: float
    tier1_kwh: float
    tier2_kwh: float
    blended_rate_sar_per_kwh: float


# =============================
# Savings
# =============================

@dataclass(frozen=True)
class MonthlySavingsRow:
    month: str
    month_num: int
    production_kwh: float
    consumption_kwh: float
    self_consumed_min_kwh: float
    self_consumed_max_kwh: float
    exported_min_kwh: float
    exported_max_kwh: float
    savings_min_sar: float
    savings_max_sar: float


@dataclass(frozen=True)
class SavingsRange:
    min_sar_per_year: float
    max_sar_per_year: float
    min_kwh_self_consumed: float
    max_kwh_self_consumed: float
    self_consumption_pct_range: Tuple[float, float]

    @property
    def mid_sar_per_year(self) -> float:
        return (self.min_sar_per_year + self.max_sar_per_year) / 2.0


# =============================
# Economics
# =============================

@dataclass(frozen=True)
class IrrSolution:
    rate: float                       # fraction, after clamping
    iterations: int
    converged: bool


@dataclass(frozen=True)
class EconomicsResult:
    simple_payback_years: Optional[float]     # None = not viable
    npv: float
    irr_pct: float                            # 0.0 = not profitable
    irr_converged: bool
    lcoe_sar_per_kwh: Optional[float]         # None = no discounted energy
    total_install_cost_sar: float
    annual_om_sar: float
    annual_savings_min_sar: float
    annual_savings_max_sar: float
    monthly_savings_min_sar: float
    monthly_savings_max_sar: float
    co2_offset_tons_per_year: float
    cost_per_panel: float
    cost_per_kwp: float
    cumulative_savings_25yr: float

    @property
    def is_viable(self) -> bool:
        return self.simple_payback_years is not None


@dataclass(frozen=True)
class CitizenComparisons:
    months_free_per_year: float
    trees_equivalent_per_year: int
    car_trips_avoided: int
    households_equivalent: float


# =============================
# End-to-end run
# =============================

@dataclass(frozen=True)
class EstimationResult:
    sizing: PVSizingResult
    monthly_yield: MonthlyYield
    tariff: TariffResult
    savings: SavingsRange
    monthly_breakdown: List[MonthlySavingsRow]
    economics: Optional[EconomicsResult]
    citizen: Optional[CitizenComparisons]
    mode: SavingsMode
    annual_production_kwh: float
    assumptions_version: str = ""
    computed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["mode"] = self.mode.value
        d["computed_at"] = self.computed_at.isoformat()
        return d
