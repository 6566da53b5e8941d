# reports/pdf_report.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.platypus import Image, PageBreak, Paragraph, SimpleDocTemplate, Spacer

from estimator.assumptions import AssumptionSet
from estimator.contract import EstimationResult
from estimator.formatting import (
    format_kwh,
    format_kwp,
    format_number,
    format_optional,
    format_payback,
    format_pct,
    format_sar,
    format_sar_range,
)
from estimator.models import EstimatorInputs

from .pdf_utils import box_paragraph, kv_table, make_table, section_bar, table_style_uniform
from .styles import pdf_palette, pdf_styles

logger = logging.getLogger(__name__)


def _ensure_pdf_path(paths: Dict[str, Any]) -> str:
    if not isinstance(paths, dict):
        raise TypeError("`paths` must be a dict containing 'pdf_path'.")

    pdf_path = paths.get("pdf_path")
    if not pdf_path:
        out_dir = paths.get("out_dir") or "output"
        pdf_path = str(Path(out_dir) / "solar_estimate.pdf")
        paths["pdf_path"] = pdf_path

    p = Path(str(pdf_path))
    p.parent.mkdir(parents=True, exist_ok=True)
    return str(p)


# ---------------------------
# Bloques
# ---------------------------
def _summary_block(result: EstimationResult, inputs: EstimatorInputs, pal, content_w) -> List[Any]:
    city = inputs.city.name_en if inputs.city else "-"
    s = result.sizing
    sv = result.savings
    rows = [
        ["City", city],
        ["Usable roof area", f"{format_number(inputs.roof.usable_area_m2)} m²"],
        ["System size", format_kwp(s.system_kwp)],
        ["Panels (reference size)", str(s.panel_count)],
        ["Roof coverage", format_pct(s.roof_coverage_pct)],
        ["Annual production", format_kwh(result.annual_production_kwh)],
        ["Current monthly bill", format_sar(result.tariff.monthly_bill_sar, 2)],
        ["Annual savings", format_sar_range(sv.min_sar_per_year, sv.max_sar_per_year, "SAR/yr")],
        [
            "Self-consumption assumed",
            f"{format_pct(sv.self_consumption_pct_range[0])} – {format_pct(sv.self_consumption_pct_range[1])}",
        ],
        ["Savings mode", result.mode.value],
        ["Inverter efficiency (informational)", format_pct(inputs.advanced.inverter_eff_pct, 1)],
    ]
    return [
        section_bar("System and savings summary", pal, content_w),
        Spacer(1, 6),
        kv_table(rows, content_w, pal, highlight_row=7),
        Spacer(1, 12),
    ]


def _economics_block(result: EstimationResult, pal, content_w) -> List[Any]:
    e = result.economics
    if e is None:
        return []
    irr = f"{format_number(e.irr_pct, 1)}%" + ("" if e.irr_converged else " (approx.)")
    rows = [
        ["Installed cost", format_sar(e.total_install_cost_sar)],
        ["Annual O&M", format_sar(e.annual_om_sar)],
        ["Simple payback", format_payback(e.simple_payback_years)],
        ["NPV", format_sar(e.npv)],
        ["IRR", irr],
        ["LCOE", format_optional(e.lcoe_sar_per_kwh, 3, "SAR/kWh")],
        ["Cost per kWp", format_sar(e.cost_per_kwp)],
        ["Cost per panel", format_sar(e.cost_per_panel)],
        ["25-year cumulative net savings", format_sar(e.cumulative_savings_25yr)],
        ["CO2 avoided", f"{format_number(e.co2_offset_tons_per_year, 1)} tonnes/yr"],
    ]
    out = [
        section_bar("Investment metrics", pal, content_w),
        Spacer(1, 6),
        kv_table(rows, content_w, pal),
        Spacer(1, 12),
    ]
    c = result.citizen
    if c is not None:
        out += [
            kv_table(
                [
                    ["Months of free electricity per year", format_number(c.months_free_per_year, 1)],
                    ["Trees planted (equivalent)", format_number(c.trees_equivalent_per_year)],
                    ["Car trips avoided", format_number(c.car_trips_avoided)],
                    ["Households powered", format_number(c.households_equivalent, 1)],
                ],
                content_w,
                pal,
                header=["In everyday terms", ""],
            ),
            Spacer(1, 12),
        ]
    return out


def _monthly_block(result: EstimationResult, pal, content_w) -> List[Any]:
    header = ["Month", "Production kWh", "Consumption kWh", "Self-used kWh", "Exported kWh", "Savings SAR"]
    data = [header]
    for r in result.monthly_breakdown:
        data.append([
            r.month,
            format_number(r.production_kwh),
            format_number(r.consumption_kwh),
            f"{format_number(r.self_consumed_min_kwh)}–{format_number(r.self_consumed_max_kwh)}",
            f"{format_number(r.exported_min_kwh)}–{format_number(r.exported_max_kwh)}",
            f"{format_number(r.savings_min_sar)}–{format_number(r.savings_max_sar)}",
        ])
    t = make_table(data, content_w, ratios=[0.8, 1.3, 1.4, 1.5, 1.5, 1.5], repeatRows=1)
    t.setStyle(table_style_uniform(pal, font_header=8, font_body=8))
    return [section_bar("Monthly breakdown", pal, content_w), Spacer(1, 6), t, Spacer(1, 12)]


def _charts_block(paths: Dict[str, Any], content_w) -> List[Any]:
    out: List[Any] = []
    for key in ("chart_energy", "chart_savings"):
        p = paths.get(key)
        if p and Path(p).exists():
            out += [Image(p, width=content_w, height=content_w * 0.5), Spacer(1, 8)]
    return out


def _assumptions_block(assumptions: AssumptionSet, styles, pal, content_w) -> List[Any]:
    data: List[List[Any]] = [["Section", "Source"]]
    for section, source in assumptions.citations():
        data.append([section, Paragraph(escape(source), styles["Small"])])
    t = make_table(data, content_w, ratios=[1, 4], repeatRows=1)
    t.setStyle(table_style_uniform(pal, font_header=8, font_body=8))
    out = [
        section_bar(f"Assumptions (registry {assumptions.version})", pal, content_w),
        Spacer(1, 6),
        t,
        Spacer(1, 8),
    ]
    notice = assumptions.export_credit_notice
    if notice:
        out.append(box_paragraph(f"<b>Export credit:</b> {escape(notice)}", pal, content_w))
    return out


def generate_pdf_report(
    result: EstimationResult,
    inputs: EstimatorInputs,
    paths: Dict[str, Any],
    assumptions: AssumptionSet,
) -> str:
    pal = pdf_palette()
    styles = pdf_styles()
    pdf_path = _ensure_pdf_path(paths)

    doc = SimpleDocTemplate(pdf_path, pagesize=A4, title="Rooftop solar estimate")
    content_w = doc.width

    story: List[Any] = [
        Paragraph("Rooftop Solar Estimate", styles["H1b"]),
        Paragraph(f"Generated {result.computed_at:%Y-%m-%d %H:%M} UTC. Savings are shown as a range, never a single figure.", styles["Small"]),
        Spacer(1, 10),
    ]
    story += _summary_block(result, inputs, pal, content_w)
    story += _economics_block(result, pal, content_w)
    story += _charts_block(paths, content_w)
    story.append(PageBreak())
    story += _monthly_block(result, pal, content_w)
    story += _assumptions_block(assumptions, styles, pal, content_w)

    doc.build(story)
    logger.debug("PDF written to %s", pdf_path)
    return pdf_path
