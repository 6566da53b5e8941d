# estimator/ports.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .contract import MonthlyYield


@dataclass(frozen=True)
class YieldQuery:
    lat: float
    lon: float
    peakpower: float                  # kWp, provider resolution (2 decimals)
    loss: float                       # %, system + shading
    angle: float                      # tilt, degrees
    aspect: float                     # provider convention: 0=S, 90=W, -90=E
    optimal_angles: bool = False
    optimal_inclination: bool = False


class YieldProvider(Protocol):
    def fetch(self, query: YieldQuery) -> MonthlyYield: ...
