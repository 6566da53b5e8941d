# estimator/cities.py
from __future__ import annotations

import math
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .assumptions import CONFIG_DIR, _read_yaml, _req, _req_num
from .models import City

CITIES_FILE = CONFIG_DIR / "cities.yaml"
DEFAULT_CITY_ID = "riyadh"
EARTH_RADIUS_KM = 6371.0


def _parse_city(cid: str, raw: Dict[str, Any]) -> City:
    ctx = f"cities.{cid}"
    return City(
        id=cid,
        name_en=str(_req(raw, "name_en", ctx)),
        name_ar=str(_req(raw, "name_ar", ctx)),
        lat=float(_req_num(raw, "lat", ctx)),
        lon=float(_req_num(raw, "lon", ctx)),
        region=str(_req(raw, "region", ctx)),
        avg_dni=float(_req_num(raw, "avg_dni", ctx)),
    )


def load_cities(path: Optional[Path] = None) -> Tuple[City, ...]:
    doc = _read_yaml(Path(path) if path else CITIES_FILE)
    raw = doc.get("cities") or {}
    if not isinstance(raw, dict) or not raw:
        raise ValueError("cities.yaml has no 'cities' mapping")
    return tuple(_parse_city(str(cid), c) for cid, c in raw.items())


@lru_cache(maxsize=1)
def all_cities() -> Tuple[City, ...]:
    return load_cities()


def find_city_by_id(city_id: str, cities: Optional[Tuple[City, ...]] = None) -> Optional[City]:
    for c in cities or all_cities():
        if c.id == city_id:
            return c
    return None


def default_city() -> City:
    c = find_city_by_id(DEFAULT_CITY_ID)
    return c if c is not None else all_cities()[0]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def find_nearest_city(lat: float, lon: float, cities: Optional[Tuple[City, ...]] = None) -> City:
    """Closest city by great-circle distance; the first one wins ties."""
    pool = cities or all_cities()
    return min(pool, key=lambda c: haversine_km(lat, lon, c.lat, c.lon))


def cities_by_region(cities: Optional[Tuple[City, ...]] = None) -> Dict[str, List[City]]:
    out: Dict[str, List[City]] = {}
    for c in cities or all_cities():
        out.setdefault(c.region, []).append(c)
    return out
