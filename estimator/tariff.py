# estimator/tariff.py
from __future__ import annotations

from typing import Optional

from .assumptions import TariffSchedule
from .contract import TariffResult


# ==========================================================
# Tarifa escalonada (por mes)
#   Tiers apply to ONE month of consumption. Never bill an annual sum.
# ==========================================================
def _tiers(kwh: float, tariff: TariffSchedule) -> tuple[float, float]:
    k = max(0.0, float(kwh))
    t1 = min(k, tariff.tier1_max_kwh)
    t2 = max(0.0, k - tariff.tier1_max_kwh)
    return t1, t2


def bill(monthly_kwh: float, tariff: TariffSchedule) -> TariffResult:
    t1, t2 = _tiers(monthly_kwh, tariff)
    monthly = round(t1 * tariff.tier1_rate + t2 * tariff.tier2_rate, 2)
    kwh = t1 + t2
    blended = round(monthly / kwh, 4) if kwh > 0 else tariff.tier1_rate
    return TariffResult(
        monthly_bill_sar=monthly,
        annual_bill_sar=round(monthly * 12, 2),
        tier1_kwh=t1,
        tier2_kwh=t2,
        blended_rate_sar_per_kwh=blended,
    )


def reduced_bill(base_monthly_kwh: float, self_consumed_kwh: float, tariff: TariffSchedule) -> TariffResult:
    """Bill after self-consumption; the displaced kWh come off the top tier first."""
    return bill(max(0.0, float(base_monthly_kwh) - float(self_consumed_kwh)), tariff)


def kwh_from_bill(monthly_sar: float, tariff: TariffSchedule) -> Optional[float]:
    """Inverse of bill(). None for a non-positive bill."""
    sar = float(monthly_sar)
    if sar <= 0:
        return None

    block = tariff.tier1_block_cost
    if sar <= block:
        if tariff.tier1_rate <= 0:
            return None
        return sar / tariff.tier1_rate

    if tariff.tier2_rate <= 0:
        return None
    return tariff.tier1_max_kwh + (sar - block) / tariff.tier2_rate
