# estimator/seasonal.py
"""
Seasonal load distribution.

A static 12-month lookup table (cooling load peaks Jun-Aug), not a model. The raw weights
come from the registry and are normalized here so they sum to 12, which keeps the yearly
total equal to 12 x the monthly average.
"""
from __future__ import annotations

from typing import List, Sequence, Tuple


def normalized_weights(raw: Sequence[float]) -> Tuple[float, ...]:
    w = [float(x) for x in raw]
    if len(w) != 12:
        raise ValueError(f"Seasonal weights must hold 12 values, got {len(w)}")
    total = sum(w)
    if total <= 0:
        return (1.0,) * 12
    return tuple(x * 12.0 / total for x in w)


def distribute(monthly_avg_kwh: float, raw_weights: Sequence[float]) -> List[float]:
    avg = max(0.0, float(monthly_avg_kwh))
    return [avg * w for w in normalized_weights(raw_weights)]
