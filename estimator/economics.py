# estimator/economics.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .assumptions import CitizenFactors, EconomicDefaults
from .contract import CitizenComparisons, EconomicsResult, IrrSolution, PVSizingResult

logger = logging.getLogger(__name__)


# ==========================================================
# Utilidades matemáticas base
# ==========================================================
def _degradation_factor(degradation: float, years_elapsed: int) -> float:
    return (1.0 - degradation) ** years_elapsed


def annual_cashflows(mid_savings: float, annual_om: float, degradation: float, life_years: int) -> List[float]:
    """Net cash flow for years 1..life: savings degrade, O&M does not."""
    return [
        mid_savings * _degradation_factor(degradation, year - 1) - annual_om
        for year in range(1, int(life_years) + 1)
    ]


def npv(rate: float, initial_cost: float, cashflows: Sequence[float]) -> float:
    return -initial_cost + sum(cf / ((1.0 + rate) ** year) for year, cf in enumerate(cashflows, start=1))


def _npv_derivative(rate: float, cashflows: Sequence[float]) -> float:
    return -sum(year * cf / ((1.0 + rate) ** (year + 1)) for year, cf in enumerate(cashflows, start=1))


def discounted_energy(annual_kwh: float, degradation: float, discount_rate: float, life_years: int) -> float:
    return sum(
        annual_kwh * _degradation_factor(degradation, year - 1) / ((1.0 + discount_rate) ** year)
        for year in range(1, int(life_years) + 1)
    )


def payback_simple(initial_cost: float, net_first_year: float, min_net_savings: float) -> Optional[float]:
    if net_first_year <= min_net_savings:
        return None
    return initial_cost / net_first_year


# ==========================================================
# TIR (Newton-Raphson)
# ==========================================================
def solve_irr(initial_cost: float, cashflows: Sequence[float], eco: EconomicDefaults) -> IrrSolution:
    """
    Root of NPV(rate) by Newton-Raphson with the analytic derivative.

    The rate is clamped to [floor, ceiling] after each step. Stops on |NPV| < tolerance or
    after the iteration limit; a non-converged run returns the last iterate with
    converged=False. Cash flows that are never positive have no root: the floor is returned.
    """
    floor, ceiling = eco.irr_rate_floor, eco.irr_rate_ceiling
    if not any(cf > 0 for cf in cashflows):
        return IrrSolution(rate=floor, iterations=0, converged=False)

    rate = eco.irr_initial_guess
    for it in range(1, eco.irr_max_iterations + 1):
        f = npv(rate, initial_cost, cashflows)
        if abs(f) < eco.irr_tolerance_sar:
            return IrrSolution(rate=rate, iterations=it - 1, converged=True)

        df = _npv_derivative(rate, cashflows)
        if df == 0:
            return IrrSolution(rate=rate, iterations=it, converged=False)

        rate = max(floor, min(ceiling, rate - f / df))

    converged = abs(npv(rate, initial_cost, cashflows)) < eco.irr_tolerance_sar
    return IrrSolution(rate=rate, iterations=eco.irr_max_iterations, converged=converged)


def irr_pct(solution: IrrSolution, eco: EconomicDefaults) -> float:
    if solution.rate <= eco.irr_rate_floor:
        return 0.0
    return solution.rate * 100.0


# ==========================================================
# Evaluación económica
# ==========================================================
def cumulative_net_savings(
    initial_cost: float, mid_savings: float, annual_om: float, degradation: float, years: int
) -> float:
    return -initial_cost + sum(annual_cashflows(mid_savings, annual_om, degradation, years))


def evaluate(
    sizing: PVSizingResult,
    eco: EconomicDefaults,
    annual_production_kwh: float,
    savings_min: float,
    savings_max: float,
    factors: CitizenFactors,
) -> EconomicsResult:
    """
    Investment metrics from the mid-point of the savings range.

    Callers gate on install cost > 0. Payback is None when net first-year savings do not
    clear the registry threshold; LCOE is None when there is no discounted energy.
    """
    kwp = max(0.0, sizing.system_kwp)
    total_cost = kwp * eco.install_cost_sar_per_kwp
    annual_om = kwp * eco.om_cost_sar_per_kwp_year
    mid = (savings_min + savings_max) / 2.0
    rate = eco.discount_rate_pct / 100.0
    deg = eco.degradation_pct / 100.0
    life = eco.project_life_years
    production = max(0.0, float(annual_production_kwh))

    cashflows = annual_cashflows(mid, annual_om, deg, life)

    payback = payback_simple(total_cost, mid - annual_om, eco.payback_min_net_savings_sar)
    if payback is None:
        logger.warning("Payback not viable: mid savings %.2f SAR vs O&M %.2f SAR", mid, annual_om)

    energy = discounted_energy(production, deg, rate, life)
    lcoe = total_cost / energy if energy > 0 else None

    irr = solve_irr(total_cost, cashflows, eco)
    if not irr.converged and irr.iterations == 0:
        logger.info("IRR not computed: no year has a positive net cash flow")
    elif not irr.converged:
        logger.warning("IRR did not converge after %d iterations (rate=%.4f)", irr.iterations, irr.rate)

    co2 = production * eco.grid_co2_kg_per_kwh / 1000.0
    cumulative = cumulative_net_savings(total_cost, mid, annual_om, deg, factors.cumulative_horizon_years)

    logger.debug("Economics: cost=%.0f mid=%.2f npv=%.2f irr=%.4f", total_cost, mid, npv(rate, total_cost, cashflows), irr.rate)

    return EconomicsResult(
        simple_payback_years=round(payback, 1) if payback is not None else None,
        npv=round(npv(rate, total_cost, cashflows), 0),
        irr_pct=round(irr_pct(irr, eco), 1),
        irr_converged=irr.converged,
        lcoe_sar_per_kwh=round(lcoe, 3) if lcoe is not None else None,
        total_install_cost_sar=round(total_cost, 0),
        annual_om_sar=round(annual_om, 2),
        annual_savings_min_sar=savings_min,
        annual_savings_max_sar=savings_max,
        monthly_savings_min_sar=round(savings_min / 12.0, 2),
        monthly_savings_max_sar=round(savings_max / 12.0, 2),
        co2_offset_tons_per_year=round(co2, 2),
        cost_per_panel=round(total_cost / sizing.panel_count, 0) if sizing.panel_count > 0 else 0.0,
        cost_per_kwp=round(total_cost / kwp, 0) if kwp > 0 else 0.0,
        cumulative_savings_25yr=round(cumulative, 0),
    )


# ==========================================================
# Comparaciones para el ciudadano
# ==========================================================
def compare(
    annual_savings_mid: float,
    monthly_bill_before: float,
    co2_tons_per_year: float,
    annual_production_kwh: float,
    factors: CitizenFactors,
) -> CitizenComparisons:
    co2_kg = co2_tons_per_year * 1000.0
    return CitizenComparisons(
        months_free_per_year=annual_savings_mid / monthly_bill_before if monthly_bill_before > 0 else 0.0,
        trees_equivalent_per_year=int(round(co2_kg / factors.co2_kg_per_tree_year)),
        car_trips_avoided=int(round(co2_kg / factors.co2_kg_per_car_trip)),
        households_equivalent=round(annual_production_kwh / factors.household_kwh_per_year, 1),
    )
