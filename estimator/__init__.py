"""
Rooftop solar estimator for Saudi households.

Public API of the engine:
- Assumptions registry (versioned constants with sources)
- PV sizing, tiered tariff, seasonal load, savings range, economics
- Orchestrator: run_estimation (pure) / estimate (with a yield provider)
"""
from __future__ import annotations

# ===============================
# Registry
# ===============================
from .assumptions import (
    Assumption,
    AssumptionSet,
    CitizenFactors,
    EconomicDefaults,
    PVDefaults,
    PvgisSettings,
    SelfConsumptionPresets,
    TariffSchedule,
    default_assumptions,
    load_assumptions,
    with_overrides,
)

# ===============================
# Inputs / results
# ===============================
from .models import (
    AdvancedConfig,
    City,
    ConsumptionSpec,
    EstimatorInputs,
    ExportSpec,
    RoofSpec,
    SavingsMode,
    default_inputs,
)
from .contract import (
    MONTH_NAMES,
    CitizenComparisons,
    EconomicsResult,
    EstimationResult,
    IrrSolution,
    MonthlySavingsRow,
    MonthlyYield,
    PVSizingResult,
    SavingsRange,
    TariffResult,
)
from .ports import YieldProvider, YieldQuery

# ===============================
# Engine
# ===============================
from .sizing import display_to_pvgis_aspect, pvgis_aspect_to_display, size
from .tariff import bill, kwh_from_bill, reduced_bill
from .seasonal import distribute, normalized_weights
from .savings import compute_savings, self_consumption_bounds
from .economics import compare, evaluate, solve_irr
from .orchestrator import build_yield_query, estimate, run_estimation

# ===============================
# Support
# ===============================
from .cities import all_cities, cities_by_region, default_city, find_city_by_id, find_nearest_city
from .validation import validate_inputs

__all__ = [
    # registry
    "Assumption",
    "AssumptionSet",
    "CitizenFactors",
    "EconomicDefaults",
    "PVDefaults",
    "PvgisSettings",
    "SelfConsumptionPresets",
    "TariffSchedule",
    "default_assumptions",
    "load_assumptions",
    "with_overrides",

    # inputs
    "AdvancedConfig",
    "City",
    "ConsumptionSpec",
    "EstimatorInputs",
    "ExportSpec",
    "RoofSpec",
    "SavingsMode",
    "default_inputs",

    # results
    "MONTH_NAMES",
    "CitizenComparisons",
    "EconomicsResult",
    "EstimationResult",
    "IrrSolution",
    "MonthlySavingsRow",
    "MonthlyYield",
    "PVSizingResult",
    "SavingsRange",
    "TariffResult",
    "YieldProvider",
    "YieldQuery",

    # engine
    "size",
    "display_to_pvgis_aspect",
    "pvgis_aspect_to_display",
    "bill",
    "reduced_bill",
    "kwh_from_bill",
    "distribute",
    "normalized_weights",
    "compute_savings",
    "self_consumption_bounds",
    "evaluate",
    "solve_irr",
    "compare",
    "build_yield_query",
    "run_estimation",
    "estimate",

    # support
    "all_cities",
    "cities_by_region",
    "default_city",
    "find_city_by_id",
    "find_nearest_city",
    "validate_inputs",
]
