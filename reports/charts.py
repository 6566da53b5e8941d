# reports/charts.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

logger = logging.getLogger(__name__)


def get_field(x: Any, key: str, default: Any = 0.0) -> Any:
    if isinstance(x, dict):
        return x.get(key, default)
    return getattr(x, key, default)


def _mkdir_charts(out_dir: Optional[str]) -> Path:
    base = Path(out_dir) if out_dir else Path("output") / "charts"
    base.mkdir(parents=True, exist_ok=True)
    return base


def _col(rows: Sequence[Any], key: str) -> List[float]:
    return [float(get_field(r, key, 0.0) or 0.0) for r in rows]


def _plot_production_vs_consumption(months: List[str], prod: List[float], cons: List[float], out_path: Path) -> None:
    x = list(range(len(months)))
    w = 0.4
    plt.figure(figsize=(8, 4))
    plt.bar([i - w / 2 for i in x], prod, width=w, label="Solar production", color="#F2A900")
    plt.bar([i + w / 2 for i in x], cons, width=w, label="Consumption", color="#0F5132")
    plt.xticks(x, months)
    plt.ylabel("kWh")
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_path, dpi=160)
    plt.close()


def _plot_savings_range(months: List[str], s_min: List[float], s_max: List[float], out_path: Path) -> None:
    plt.figure(figsize=(8, 4))
    plt.bar(months, s_max, label="Savings (max)", color="#9BD3AE")
    plt.bar(months, s_min, label="Savings (min)", color="#1B7F3A")
    plt.ylabel("SAR / month")
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_path, dpi=160)
    plt.close()


def generate_charts(breakdown: Optional[Sequence[Any]], out_dir: Optional[str] = None) -> Dict[str, str]:
    """
    Two PNGs from the monthly breakdown (MonthlySavingsRow or their dict form):
      - chart_energy.png  (production vs consumption)
      - chart_savings.png (min/max savings)
    Empty breakdown -> {}.
    """
    rows = list(breakdown or [])
    if not rows:
        return {}

    base = _mkdir_charts(out_dir)
    months = [str(get_field(r, "month", i + 1)) for i, r in enumerate(rows)]

    p1 = base / "chart_energy.png"
    _plot_production_vs_consumption(months, _col(rows, "production_kwh"), _col(rows, "consumption_kwh"), p1)

    p2 = base / "chart_savings.png"
    _plot_savings_range(months, _col(rows, "savings_min_sar"), _col(rows, "savings_max_sar"), p2)

    logger.debug("Charts written to %s", base)
    return {"chart_energy": str(p1), "chart_savings": str(p2)}
