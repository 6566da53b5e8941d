# reports/pdf_utils.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, Table, TableStyle

Palette = Dict[str, Any]


def _pad(top: float, side: float) -> List[tuple]:
    return [
        ("TOPPADDING", (0, 0), (-1, -1), top),
        ("BOTTOMPADDING", (0, 0), (-1, -1), top),
        ("LEFTPADDING", (0, 0), (-1, -1), side),
        ("RIGHTPADDING", (0, 0), (-1, -1), side),
    ]


def section_bar(text: str, pal: Palette, content_w: float) -> Table:
    """Full-width green title strip with an amber rule underneath."""
    title = ParagraphStyle("section_bar", fontName="Helvetica-Bold", fontSize=10.5, textColor=colors.white)
    bar = Table([[Paragraph(text, title)]], colWidths=[content_w])
    bar.setStyle(TableStyle(
        [("BACKGROUND", (0, 0), (-1, -1), pal["PRIMARY"]), ("LINEBELOW", (0, 0), (-1, -1), 2, pal["ACCENT"])]
        + _pad(5, 8)
    ))
    return bar


def make_table(data: List[List[Any]], content_w: float, *, ratios: Optional[Sequence[float]] = None, repeatRows: int = 0) -> Table:
    ncols = len(data[0]) if data else 1
    weights = list(ratios) if ratios else [1.0] * ncols
    total = float(sum(weights))
    return Table(data, colWidths=[content_w * w / total for w in weights], repeatRows=repeatRows)


def table_style_uniform(pal: Palette, *, font_header=9, font_body=9) -> TableStyle:
    """Header row on PRIMARY, zebra body rows, hairlines between rows."""
    return TableStyle([
        ("FONT", (0, 0), (-1, 0), "Helvetica-Bold", font_header),
        ("FONT", (0, 1), (-1, -1), "Helvetica", font_body),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("BACKGROUND", (0, 0), (-1, 0), pal["PRIMARY"]),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, pal["SOFT"]]),
        ("LINEBELOW", (0, 0), (-1, -1), 0.4, pal["BORDER"]),
        ("BOX", (0, 0), (-1, -1), 0.6, pal["BORDER"]),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ])


def kv_table(rows: List[List[str]], content_w: float, pal: Palette, *, header=None, highlight_row: Optional[int] = None) -> Table:
    """label | value; highlight_row indexes into rows (the header is not counted)."""
    t = make_table([header or ["Item", "Value"]] + rows, content_w, ratios=[3, 2], repeatRows=1)
    extra = [("ALIGN", (1, 1), (1, -1), "RIGHT")]
    if highlight_row is not None:
        r = highlight_row + 1
        extra += [
            ("BACKGROUND", (0, r), (-1, r), pal["OK"]),
            ("TEXTCOLOR", (0, r), (-1, r), colors.white),
            ("FONT", (0, r), (-1, r), "Helvetica-Bold", 9),
        ]
    t.setStyle(table_style_uniform(pal))
    t.setStyle(TableStyle(extra))
    return t


def box_paragraph(html_text: str, pal: Palette, content_w: float, *, font_size=9) -> Table:
    """Framed note (amber border) for caveats such as the export-credit notice."""
    body = ParagraphStyle("box", fontName="Helvetica", fontSize=font_size, leading=font_size * 1.25)
    t = Table([[Paragraph(html_text, body)]], colWidths=[content_w])
    t.setStyle(TableStyle(
        [("BACKGROUND", (0, 0), (-1, -1), pal["SOFT"]), ("BOX", (0, 0), (-1, -1), 1, pal["WARN"])]
        + _pad(6, 9)
    ))
    return t
