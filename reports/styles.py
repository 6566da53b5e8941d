# reports/styles.py
from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet

_PALETTE = {
    "PRIMARY": "#0F5132",     # deep green
    "ACCENT": "#F2A900",      # sun amber
    "BORDER": "#D7DCE3",
    "SOFT": "#F4F8F5",
    "OK": "#1B7F3A",
    "WARN": "#E0A100",
    "BAD": "#B42318",
}


def pdf_palette():
    return {k: colors.HexColor(v) for k, v in _PALETTE.items()}


def pdf_styles():
    """Sample stylesheet plus the report's own H1b / H2b / Small."""
    styles = getSampleStyleSheet()
    styles["BodyText"].fontName = "Helvetica"
    styles["BodyText"].fontSize = 10
    styles["BodyText"].leading = 13

    green = pdf_palette()["PRIMARY"]
    own = (
        ParagraphStyle("H1b", parent=styles["Heading1"], fontName="Helvetica-Bold", fontSize=17, leading=21, spaceAfter=4, textColor=green),
        ParagraphStyle("H2b", parent=styles["Heading2"], fontName="Helvetica-Bold", fontSize=11.5, leading=14, spaceBefore=8, spaceAfter=3),
        ParagraphStyle("Small", parent=styles["BodyText"], fontSize=8, leading=10, textColor=colors.HexColor("#5B6470")),
    )
    for s in own:
        if s.name not in styles.byName:
            styles.add(s)

    _assert_required(styles, [s.name for s in own])
    return styles


def _assert_required(styles, names):
    missing = [k for k in names if k not in styles.byName]
    if missing:
        raise KeyError(f"PDF styles missing: {missing}")
