# estimator/assumptions.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
CONFIG_DIR = BASE_DIR / "config"
DEFAULT_ASSUMPTIONS_FILE = CONFIG_DIR / "assumptions.yaml"
ENV_ASSUMPTIONS_FILE = "SOLAR_ASSUMPTIONS_FILE"

OVERRIDE_SOURCE = "user override"

Number = Union[float, Tuple[float, ...]]


# ==========================================================
# Registry entries
# ==========================================================
@dataclass(frozen=True)
class Assumption:
    key: str
    value: Number
    unit: str
    source: str
    note: str = ""


@dataclass(frozen=True)
class TariffSchedule:
    tier1_max_kwh: float
    tier1_rate: float
    tier2_rate: float

    @property
    def tier1_block_cost(self) -> float:
        return self.tier1_max_kwh * self.tier1_rate


@dataclass(frozen=True)
class PVDefaults:
    w_per_m2: float
    packing_factor: float
    system_loss_pct: float
    inverter_eff_pct: float
    degradation_pct: float
    reference_panel_watts: float
    tilt_deg: float
    azimuth_deg: float
    shading_loss_pct: float


@dataclass(frozen=True)
class SelfConsumptionPresets:
    conservative_low: float
    conservative_high: float
    profile_low: float
    profile_high: float


@dataclass(frozen=True)
class EconomicDefaults:
    install_cost_sar_per_kwp: float
    om_cost_sar_per_kwp_year: float
    discount_rate_pct: float
    project_life_years: int
    degradation_pct: float
    grid_co2_kg_per_kwh: float
    irr_initial_guess: float
    irr_tolerance_sar: float
    irr_max_iterations: int
    irr_rate_floor: float
    irr_rate_ceiling: float
    payback_min_net_savings_sar: float


@dataclass(frozen=True)
class CitizenFactors:
    co2_kg_per_tree_year: float
    co2_kg_per_car_trip: float
    household_kwh_per_year: float
    cumulative_horizon_years: int


@dataclass(frozen=True)
class PvgisSettings:
    base_url: str
    pv_technology: str
    mounting_place: str
    output_format: str
    cache_ttl_seconds: float
    cache_max_entries: int
    request_timeout_seconds: float
    capacity_decimals: int
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float
    peakpower_min_kwp: float
    peakpower_max_kwp: float
    loss_max_pct: float
    angle_max_deg: float


@dataclass(frozen=True)
class AssumptionSet:
    """
    Versioned, read-only table of every constant the estimator uses.

    Keys are dotted ("tariff.tier1_rate_sar_per_kwh"). The typed views below are what
    the engine functions receive; nothing in the engine reads a module-level constant.
    """

    version: str
    entries: Mapping[str, Assumption]
    meta: Mapping[str, Mapping[str, Any]] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, key: str) -> Assumption:
        if key not in self.entries:
            raise KeyError(f"Unknown assumption: {key}")
        return self.entries[key]

    def value(self, key: str) -> float:
        v = self.get(key).value
        if isinstance(v, tuple):
            raise TypeError(f"Assumption '{key}' is a list; use values()")
        return float(v)

    def values(self, key: str) -> Tuple[float, ...]:
        v = self.get(key).value
        return tuple(v) if isinstance(v, tuple) else (float(v),)

    def section(self, name: str) -> Dict[str, Assumption]:
        prefix = f"{name}."
        return {k[len(prefix):]: a for k, a in self.entries.items() if k.startswith(prefix)}

    def section_meta(self, name: str) -> Mapping[str, Any]:
        return self.meta.get(name, MappingProxyType({}))

    def citations(self) -> List[Tuple[str, str]]:
        """(section, source) pairs in registry order, for methodology panels."""
        out: List[Tuple[str, str]] = []
        for name, m in self.meta.items():
            src = str(m.get("source", "")).strip()
            if src:
                out.append((name, src))
        return out

    # ------------------------------------------------------
    # Typed views
    # ------------------------------------------------------
    @property
    def tariff(self) -> TariffSchedule:
        return TariffSchedule(
            tier1_max_kwh=self.value("tariff.tier1_max_kwh_per_month"),
            tier1_rate=self.value("tariff.tier1_rate_sar_per_kwh"),
            tier2_rate=self.value("tariff.tier2_rate_sar_per_kwh"),
        )

    @property
    def pv_defaults(self) -> PVDefaults:
        return PVDefaults(
            w_per_m2=self.value("pv_system.default_w_per_m2"),
            packing_factor=self.value("pv_system.default_packing_factor"),
            system_loss_pct=self.value("pv_system.default_system_loss_pct"),
            inverter_eff_pct=self.value("pv_system.default_inverter_eff_pct"),
            degradation_pct=self.value("pv_system.default_degradation_pct_per_year"),
            reference_panel_watts=self.value("pv_system.reference_panel_watts"),
            tilt_deg=self.value("pv_system.default_tilt_deg"),
            azimuth_deg=self.value("pv_system.default_azimuth_deg"),
            shading_loss_pct=self.value("pv_system.default_shading_loss_pct"),
        )

    @property
    def self_consumption(self) -> SelfConsumptionPresets:
        return SelfConsumptionPresets(
            conservative_low=self.value("self_consumption.conservative_low"),
            conservative_high=self.value("self_consumption.conservative_high"),
            profile_low=self.value("self_consumption.profile_low"),
            profile_high=self.value("self_consumption.profile_high"),
        )

    @property
    def seasonal_weights(self) -> Tuple[float, ...]:
        return self.values("seasonal.weights_raw")

    @property
    def economics(self) -> EconomicDefaults:
        return EconomicDefaults(
            install_cost_sar_per_kwp=self.value("economics.default_install_cost_sar_per_kwp"),
            om_cost_sar_per_kwp_year=self.value("economics.default_om_cost_sar_per_kwp_per_year"),
            discount_rate_pct=self.value("economics.discount_rate_pct"),
            project_life_years=int(self.value("economics.project_life_years")),
            degradation_pct=self.value("pv_system.default_degradation_pct_per_year"),
            grid_co2_kg_per_kwh=self.value("economics.grid_co2_kg_per_kwh"),
            irr_initial_guess=self.value("economics.irr_initial_guess"),
            irr_tolerance_sar=self.value("economics.irr_tolerance_sar"),
            irr_max_iterations=int(self.value("economics.irr_max_iterations")),
            irr_rate_floor=self.value("economics.irr_rate_floor"),
            irr_rate_ceiling=self.value("economics.irr_rate_ceiling"),
            payback_min_net_savings_sar=self.value("economics.payback_min_net_savings_sar"),
        )

    @property
    def citizen(self) -> CitizenFactors:
        return CitizenFactors(
            co2_kg_per_tree_year=self.value("citizen.co2_kg_per_tree_year"),
            co2_kg_per_car_trip=self.value("citizen.co2_kg_per_car_trip"),
            household_kwh_per_year=self.value("citizen.household_kwh_per_year"),
            cumulative_horizon_years=int(self.value("citizen.cumulative_horizon_years")),
        )

    @property
    def pvgis(self) -> PvgisSettings:
        m = self.section_meta("pvgis")
        return PvgisSettings(
            base_url=str(m.get("base_url", "")),
            pv_technology=str(m.get("pv_technology", "crystSi")),
            mounting_place=str(m.get("mounting_place", "building")),
            output_format=str(m.get("output_format", "json")),
            cache_ttl_seconds=self.value("pvgis.cache_ttl_seconds"),
            cache_max_entries=int(self.value("pvgis.cache_max_entries")),
            request_timeout_seconds=self.value("pvgis.request_timeout_seconds"),
            capacity_decimals=int(self.value("pvgis.capacity_decimals")),
            lat_min=self.value("pvgis.lat_min"),
            lat_max=self.value("pvgis.lat_max"),
            lon_min=self.value("pvgis.lon_min"),
            lon_max=self.value("pvgis.lon_max"),
            peakpower_min_kwp=self.value("pvgis.peakpower_min_kwp"),
            peakpower_max_kwp=self.value("pvgis.peakpower_max_kwp"),
            loss_max_pct=self.value("pvgis.loss_max_pct"),
            angle_max_deg=self.value("pvgis.angle_max_deg"),
        )

    @property
    def export_credit_notice(self) -> str:
        return str(self.section_meta("net_billing").get("note", ""))


# ==========================================================
# YAML loading / validation
# ==========================================================
def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Assumptions file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid assumptions file (must be a mapping): {path}")
    return data


def _req(d: Dict[str, Any], k: str, ctx: str) -> Any:
    if k not in d or d[k] is None:
        raise ValueError(f"Missing '{k}' in {ctx}")
    return d[k]


def _req_num(d: Dict[str, Any], k: str, ctx: str) -> Number:
    v = _req(d, k, ctx)
    try:
        if isinstance(v, (list, tuple)):
            return tuple(float(x) for x in v)
        return float(v)
    except (TypeError, ValueError) as e:
        raise ValueError(f"'{k}' must be numeric in {ctx}. Value={v!r}") from e


def _parse_entry(section: str, name: str, raw: Any, section_source: str) -> Assumption:
    ctx = f"{section}.{name}"
    if not isinstance(raw, dict):
        raise ValueError(f"Entry {ctx} must be a mapping with value/unit/source")
    source = str(raw.get("source") or section_source).strip()
    if not source:
        raise ValueError(f"Missing 'source' in {ctx}")
    return Assumption(
        key=ctx,
        value=_req_num(raw, "value", ctx),
        unit=str(_req(raw, "unit", ctx)),
        source=source,
        note=str(raw.get("note") or ""),
    )


def _parse_document(doc: Dict[str, Any]) -> AssumptionSet:
    version = str(_req(doc, "version", "assumptions"))
    entries: Dict[str, Assumption] = {}
    meta: Dict[str, Mapping[str, Any]] = {}

    for section, body in doc.items():
        if section == "version":
            continue
        if not isinstance(body, dict):
            raise ValueError(f"Section '{section}' must be a mapping")
        section_meta = {k: v for k, v in body.items() if k != "entries"}
        meta[section] = MappingProxyType(section_meta)
        section_source = str(section_meta.get("source") or "")
        for name, raw in (body.get("entries") or {}).items():
            a = _parse_entry(section, str(name), raw, section_source)
            entries[a.key] = a

    return AssumptionSet(
        version=version,
        entries=MappingProxyType(entries),
        meta=MappingProxyType(meta),
    )


def _resolve_path(path: Optional[Union[str, Path]]) -> Path:
    if path:
        return Path(path)
    env = os.getenv(ENV_ASSUMPTIONS_FILE)
    return Path(env) if env else DEFAULT_ASSUMPTIONS_FILE


def load_assumptions(path: Optional[Union[str, Path]] = None) -> AssumptionSet:
    p = _resolve_path(path)
    aset = _parse_document(_read_yaml(p))
    logger.debug("Assumptions %s loaded from %s (%d entries)", aset.version, p, len(aset.entries))
    return aset


@lru_cache(maxsize=1)
def default_assumptions() -> AssumptionSet:
    return load_assumptions()


def with_overrides(base: AssumptionSet, overrides: Optional[Dict[str, Any]]) -> AssumptionSet:
    """New set with some values replaced; unit is kept and the source marks the override."""
    if not overrides:
        return base

    entries = dict(base.entries)
    for key, value in overrides.items():
        old = base.get(key)
        entries[key] = Assumption(
            key=key,
            value=_req_num({"value": value}, "value", key),
            unit=old.unit,
            source=OVERRIDE_SOURCE,
            note=old.note,
        )
    return AssumptionSet(version=base.version, entries=MappingProxyType(entries), meta=base.meta)
