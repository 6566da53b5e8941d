# estimator/savings.py
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .assumptions import SelfConsumptionPresets, TariffSchedule
from .contract import MONTH_NAMES, MonthlySavingsRow, SavingsRange
from .models import ConsumptionSpec, ExportSpec, SavingsMode
from .seasonal import distribute
from .tariff import bill


# ==========================================================
# Límites de autoconsumo
# ==========================================================
def self_consumption_bounds(
    mode: SavingsMode,
    presets: SelfConsumptionPresets,
    override: Optional[float] = None,
) -> Tuple[float, float]:
    """
    (low, high) fractions for the mode. A positive override collapses the range to one point.
    NET_BILLING uses the conservative bounds; only the export credit differs.
    """
    if override is not None and override > 0:
        sc = min(1.0, float(override))
        return sc, sc

    if mode == SavingsMode.PROFILE:
        return presets.profile_low, presets.profile_high
    return presets.conservative_low, presets.conservative_high


def export_credit_applies(mode: SavingsMode, export: ExportSpec) -> bool:
    return mode == SavingsMode.NET_BILLING and export.enabled and export.credit_rate_per_kwh is not None


# ==========================================================
# Cálculo por mes
# ==========================================================
def self_consumed(production_kwh: float, consumption_kwh: float, fraction: float) -> float:
    return min(production_kwh * fraction, consumption_kwh)


def exported(production_kwh: float, self_consumed_kwh: float) -> float:
    return max(0.0, production_kwh - self_consumed_kwh)


def _month_row(
    i: int,
    production: float,
    consumption: float,
    sc_low: float,
    sc_high: float,
    tariff: TariffSchedule,
    credit_rate: Optional[float],
) -> MonthlySavingsRow:
    sc_min = self_consumed(production, consumption, sc_low)
    sc_max = self_consumed(production, consumption, sc_high)

    # paired inversely: least self-consumption leaves the most to export
    exp_min = exported(production, sc_max)
    exp_max = exported(production, sc_min)

    base = bill(consumption, tariff).monthly_bill_sar
    s_min = base - bill(consumption - sc_min, tariff).monthly_bill_sar
    s_max = base - bill(consumption - sc_max, tariff).monthly_bill_sar

    if credit_rate is not None:
        s_min += exp_min * credit_rate
        s_max += exp_max * credit_rate

    return MonthlySavingsRow(
        month=MONTH_NAMES[i],
        month_num=i + 1,
        production_kwh=production,
        consumption_kwh=consumption,
        self_consumed_min_kwh=sc_min,
        self_consumed_max_kwh=sc_max,
        exported_min_kwh=exp_min,
        exported_max_kwh=exp_max,
        savings_min_sar=max(0.0, s_min),
        savings_max_sar=max(0.0, s_max),
    )


def compute_savings(
    monthly_production: Sequence[float],
    consumption: ConsumptionSpec,
    export: ExportSpec,
    mode: SavingsMode,
    tariff: TariffSchedule,
    presets: SelfConsumptionPresets,
    seasonal_weights: Sequence[float],
    self_consumption_override: Optional[float] = None,
) -> Tuple[SavingsRange, List[MonthlySavingsRow]]:
    """
    A year of (min, max) bill savings. Never a point estimate, except when an override
    collapses the bounds.

    Export revenue is added only in net-billing mode, with export enabled AND an explicit
    credit rate. An enabled export with no rate earns nothing.
    """
    production = [max(0.0, float(x)) for x in monthly_production]
    if len(production) != 12:
        raise ValueError(f"Monthly production must hold 12 values, got {len(production)}")

    demand = distribute(consumption.monthly_avg_kwh, seasonal_weights)
    sc_low, sc_high = self_consumption_bounds(mode, presets, self_consumption_override)
    credit_rate = export.credit_rate_per_kwh if export_credit_applies(mode, export) else None

    rows = [
        _month_row(i, production[i], demand[i], sc_low, sc_high, tariff, credit_rate)
        for i in range(12)
    ]

    savings = SavingsRange(
        min_sar_per_year=sum(r.savings_min_sar for r in rows),
        max_sar_per_year=sum(r.savings_max_sar for r in rows),
        min_kwh_self_consumed=sum(r.self_consumed_min_kwh for r in rows),
        max_kwh_self_consumed=sum(r.self_consumed_max_kwh for r in rows),
        self_consumption_pct_range=(sc_low * 100.0, sc_high * 100.0),
    )
    return savings, rows
