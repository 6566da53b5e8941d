# estimator/formatting.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

EN_DASH = "–"


def format_number(x: float, nd: int = 0) -> str:
    """Thousands separators, half-up rounding (1234.5 -> "1,235")."""
    q = Decimal(str(float(x))).quantize(Decimal(1).scaleb(-nd), rounding=ROUND_HALF_UP)
    return f"{q:,.{nd}f}"


def format_sar(x: float, nd: int = 0) -> str:
    return f"SAR {format_number(x, nd)}"


def format_sar_range(lo: float, hi: float, suffix: str = "") -> str:
    """format_sar_range(1200, 2400, "SAR/yr") -> "SAR 1,200 – 2,400 /yr"."""
    out = f"SAR {format_number(lo)} {EN_DASH} {format_number(hi)}"
    if not suffix:
        return out
    tail = suffix[3:] if suffix.startswith("SAR") else f" {suffix}"
    return f"{out} {tail}"


def format_kwh(x: float) -> str:
    return f"{format_number(x)} kWh"


def _trim(x: float, nd: int) -> str:
    s = f"{x:,.{nd}f}"
    return s.rstrip("0").rstrip(".") if "." in s else s


def format_kwp(x: float) -> str:
    return f"{_trim(x, 3)} kWp"


def format_pct(x: float, nd: int = 0) -> str:
    return f"{format_number(x, nd)}%"


def format_years(x: float) -> str:
    v = int(x) if float(x).is_integer() else x
    return f"{v} {'year' if v == 1 else 'years'}"


def format_payback(years: Optional[float]) -> str:
    if years is None:
        return "Not viable"
    return format_years(years)


def format_co2(tonnes: float) -> str:
    return f"{_trim(tonnes, 1)} tonnes CO₂/yr"


def format_optional(x: Optional[float], nd: int = 2, unit: str = "") -> str:
    if x is None:
        return "N/A"
    return f"{format_number(x, nd)}{(' ' + unit) if unit else ''}"
