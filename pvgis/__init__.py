# PVGIS (EU JRC) yield provider: HTTP client + TTL cache.
from __future__ import annotations

from estimator.ports import YieldProvider

from .cache import TTLCache, make_cache_key
from .client import (
    PvgisClient,
    PvgisError,
    PvgisQuery,
    build_params,
    parse_monthly_yield,
    validate_query,
)

__all__ = [
    "YieldProvider",
    "TTLCache",
    "make_cache_key",
    "PvgisClient",
    "PvgisError",
    "PvgisQuery",
    "build_params",
    "parse_monthly_yield",
    "validate_query",
]
