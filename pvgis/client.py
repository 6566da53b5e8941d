# pvgis/client.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from estimator.assumptions import PvgisSettings
from estimator.contract import MonthlyYield
from estimator.ports import YieldQuery

from .cache import TTLCache, make_cache_key

logger = logging.getLogger(__name__)

PvgisQuery = YieldQuery


class PvgisError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


# ==========================================================
# Validación (caja geográfica de Arabia Saudita)
# ==========================================================
def _check(ok: bool, msg: str) -> None:
    if not ok:
        raise PvgisError(msg, status=400)


def validate_query(query: PvgisQuery, settings: PvgisSettings) -> None:
    _check(settings.lat_min <= query.lat <= settings.lat_max, f"Latitude {query.lat} outside {settings.lat_min}..{settings.lat_max}")
    _check(settings.lon_min <= query.lon <= settings.lon_max, f"Longitude {query.lon} outside {settings.lon_min}..{settings.lon_max}")
    _check(
        settings.peakpower_min_kwp <= query.peakpower <= settings.peakpower_max_kwp,
        f"System size {query.peakpower} kWp outside {settings.peakpower_min_kwp}..{settings.peakpower_max_kwp}",
    )
    _check(0 <= query.loss <= settings.loss_max_pct, f"Loss {query.loss}% outside 0..{settings.loss_max_pct}")
    _check(0 <= query.angle <= settings.angle_max_deg, f"Tilt {query.angle} outside 0..{settings.angle_max_deg}")
    _check(-180 <= query.aspect <= 180, f"Aspect {query.aspect} outside -180..180")


def build_params(query: PvgisQuery, settings: PvgisSettings) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "lat": query.lat,
        "lon": query.lon,
        "peakpower": query.peakpower,
        "loss": query.loss,
        "pvtechchoice": settings.pv_technology,
        "mountingplace": settings.mounting_place,
        "outputformat": settings.output_format,
        "browser": 0,
    }
    if query.optimal_angles:
        params["optimalangles"] = 1
    elif query.optimal_inclination:
        params["optimalinclination"] = 1
        params["aspect"] = query.aspect
    else:
        params["angle"] = query.angle
        params["aspect"] = query.aspect
    return params


def parse_monthly_yield(payload: Dict[str, Any]) -> MonthlyYield:
    """outputs.monthly.fixed[*].E_m (Jan..Dec) and outputs.totals.fixed.E_y."""
    try:
        outputs = payload["outputs"]
        rows: List[Dict[str, Any]] = sorted(outputs["monthly"]["fixed"], key=lambda r: int(r["month"]))
        monthly = tuple(float(r["E_m"]) for r in rows)
        annual = float(outputs["totals"]["fixed"]["E_y"])
    except (KeyError, TypeError, ValueError) as e:
        raise PvgisError(f"Malformed PVGIS response: {e!r}") from e

    if len(monthly) != 12:
        raise PvgisError(f"PVGIS returned {len(monthly)} months, expected 12")
    return MonthlyYield(monthly_kwh=monthly, annual_kwh=annual)


# ==========================================================
# Cliente HTTP
# ==========================================================
class PvgisClient:
    """
    Yield provider backed by the PVGIS PVcalc endpoint.

    Successful responses are cached by make_cache_key(); errors are never cached.
    """

    def __init__(
        self,
        settings: PvgisSettings,
        session: Optional[requests.Session] = None,
        cache: Optional[TTLCache] = None,
    ):
        self.settings = settings
        self.session = session or requests.Session()
        self.cache = cache if cache is not None else TTLCache(settings.cache_ttl_seconds, max_entries=settings.cache_max_entries)

    def fetch(self, query: PvgisQuery) -> MonthlyYield:
        validate_query(query, self.settings)

        key = make_cache_key(query)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        params = build_params(query, self.settings)
        try:
            resp = self.session.get(
                self.settings.base_url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=self.settings.request_timeout_seconds,
            )
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning("PVGIS HTTP %s for %s", status, key)
            raise PvgisError(f"PVGIS request failed ({status})", status=status) from e
        except requests.RequestException as e:
            logger.warning("PVGIS unreachable for %s: %s", key, e)
            raise PvgisError(f"PVGIS unreachable: {e}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise PvgisError("PVGIS returned a non-JSON body", status=resp.status_code) from e

        result = parse_monthly_yield(payload)
        self.cache.set(key, result)
        logger.debug("PVGIS %s -> %.1f kWh/yr", key, result.annual_kwh)
        return result
