# app.py
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import streamlit as st

# === asegurar imports del repo ===
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from estimator.assumptions import default_assumptions  # noqa: E402
from estimator.contract import MonthlyYield  # noqa: E402
from estimator.ports import YieldQuery  # noqa: E402
from pvgis.client import PvgisClient  # noqa: E402
from ui import consumption, location, options, results, roof  # noqa: E402
from ui.router import WizardStep, render_wizard  # noqa: E402
from ui.state import ctx_get, seed_defaults  # noqa: E402

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

A = default_assumptions()


@st.cache_resource
def _client() -> PvgisClient:
    return PvgisClient(A.pvgis)


@st.cache_data(ttl=int(A.pvgis.cache_ttl_seconds), show_spinner=False)
def _fetch_yield(query: YieldQuery) -> MonthlyYield:
    return _client().fetch(query)


class CachedProvider:
    """Yield provider memoized across sessions by streamlit's data cache."""

    def fetch(self, query: YieldQuery) -> MonthlyYield:
        return _fetch_yield(query)


def main() -> None:
    st.set_page_config(page_title="Rooftop Solar Estimator", page_icon="☀️", layout="wide")
    st.title("Rooftop Solar Estimator · Saudi Arabia")
    st.caption("Savings are always shown as a range. Export credit is never assumed.")

    seed_defaults(ctx_get(st), A)
    provider = CachedProvider()

    steps = [
        WizardStep(1, "Location", location.render, location.validate, requires=[]),
        WizardStep(2, "Roof", roof.render, roof.validate, requires=[1]),
        WizardStep(3, "Consumption", consumption.render, consumption.validate, requires=[1, 2]),
        WizardStep(4, "Options", options.render, options.validate, requires=[1, 2, 3]),
        WizardStep(5, "Results", lambda ctx: results.render_results(ctx, provider, A), results.validate, requires=[1, 2, 3, 4]),
    ]
    render_wizard(steps)


if __name__ == "__main__":
    main()
