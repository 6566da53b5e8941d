# reports/paths.py
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Dict, Optional


def safe_base_dir() -> Path:
    """Project root when run from source; the working directory otherwise."""
    try:
        return Path(__file__).resolve().parents[1]
    except OSError:
        return Path(os.getcwd()).resolve()


def prepare_output(folder: Optional[str] = None) -> Dict[str, str]:
    """
    Output paths for one report. With no folder, a fresh private temp directory is
    created, so concurrent sessions never share a file.
    """
    if folder is None:
        out_dir = Path(tempfile.mkdtemp(prefix="solar_estimate_"))
    else:
        out_dir = Path(folder) if Path(folder).is_absolute() else safe_base_dir() / folder
        out_dir.mkdir(parents=True, exist_ok=True)

    return {
        "out_dir": str(out_dir),
        "charts_dir": str(out_dir / "charts"),
        "chart_energy": str(out_dir / "charts" / "chart_energy.png"),
        "chart_savings": str(out_dir / "charts" / "chart_savings.png"),
        "pdf_path": str(out_dir / "solar_estimate.pdf"),
    }
