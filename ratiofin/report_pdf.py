from __future__ import annotations

from datetime import datetime
from io import BytesIO
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib.colors import HexColor, white
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .config import AMOUNT_FIELDS, RATIO_KINDS, RATIO_SUFFIXES, RATIO_TITLES, setup_logger
from .models import RatioReport
from .ratios import format_amount, is_positive_label

logger = setup_logger(__name__)

NAVY = HexColor("#0f172a")
LIGHT = HexColor("#f1f5f9")
BORDER = HexColor("#cbd5e1")
TEXT = HexColor("#1e293b")
MUTED = HexColor("#64748b")
GREEN = HexColor("#059669")
AMBER = HexColor("#d97706")

_TITLE = ParagraphStyle("Title", fontSize=20, textColor=NAVY, alignment=TA_CENTER, fontName="Helvetica-Bold", leading=24, spaceAfter=4)
_SUBTITLE = ParagraphStyle("Subtitle", fontSize=11, textColor=MUTED, alignment=TA_CENTER, leading=14, spaceAfter=12)
_H1 = ParagraphStyle("H1", fontSize=12, textColor=NAVY, fontName="Helvetica-Bold", spaceBefore=10, spaceAfter=6, leading=14)
_CELL = ParagraphStyle("Cell", fontSize=8, textColor=TEXT, leading=10)
_SMALL = ParagraphStyle("Small", fontSize=7, textColor=MUTED, leading=9)


def _make_table(data: list[list], widths: list[float]) -> Table:
    t = Table(data, colWidths=widths)
    t.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("BACKGROUND", (0, 0), (-1, 0), NAVY),
                ("TEXTCOLOR", (0, 0), (-1, 0), white),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ("GRID", (0, 0), (-1, -1), 0.5, BORDER),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [white, LIGHT]),
            ]
        )
    )
    return t


def _input_table(report: RatioReport) -> Table:
    rows = [["Figure", "Amount"]]
    for name, (title, _) in AMOUNT_FIELDS.items():
        rows.append([title, format_amount(getattr(report.data, name))])
    t = _make_table(rows, [2.2 * inch, 2.2 * inch])
    t.setStyle(TableStyle([("ALIGN", (1, 0), (1, -1), "RIGHT")]))
    return t


def _ratio_table(report: RatioReport) -> Table:
    rows: list[list] = [["Ratio", "Value", "Status", "Insight"]]
    styles = []
    for i, item in enumerate(report.classifications, start=1):
        rows.append(
            [
                RATIO_TITLES.get(item.kind, item.kind),
                f"{item.value:.2f}{RATIO_SUFFIXES.get(item.kind, '')}",
                item.label,
                Paragraph(escape(item.insight), _CELL),
            ]
        )
        color = GREEN if is_positive_label(item.label) else AMBER
        styles.append(("TEXTCOLOR", (2, i), (2, i), color))
        styles.append(("FONTNAME", (2, i), (2, i), "Helvetica-Bold"))
    t = _make_table(rows, [1.4 * inch, 0.8 * inch, 1.1 * inch, 3.4 * inch])
    t.setStyle(TableStyle(styles))
    return t


def _history_table(history: pd.DataFrame) -> Table:
    header = ["Company", "Year", *[RATIO_TITLES[k] for k in RATIO_KINDS], "Score"]
    rows: list[list] = [header]
    for _, row in history.iterrows():
        rows.append(
            [
                str(row["company_name"]),
                str(int(row["period_year"])),
                *[f"{float(row[k]):.2f}{RATIO_SUFFIXES[k]}" for k in RATIO_KINDS],
                str(int(row["health_score"])),
            ]
        )
    return _make_table(rows, [2.0 * inch, 0.6 * inch, 1.1 * inch, 1.2 * inch, 1.2 * inch, 0.6 * inch])


def build_report_pdf(report: RatioReport, history: pd.DataFrame | None = None) -> bytes:
    """Render a ratio report, and optionally the saved history, as PDF bytes."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.65 * inch,
        leftMargin=0.65 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        title=f"Financial Ratio Analysis - {report.data.company_name}",
    )

    story = [
        Paragraph("Financial Ratio Analysis", _TITLE),
        Paragraph(f"{escape(report.data.company_name) or '-'} | Period {report.data.period_year}", _SUBTITLE),
        Paragraph("Input Figures", _H1),
        _input_table(report),
        Paragraph("Ratios", _H1),
        _ratio_table(report),
        Paragraph("Health Score", _H1),
    ]

    score_color = GREEN if report.health_score >= 50 else AMBER
    score_box = Table([[f"{report.health_score} / 100  ({report.health_grade})"]], colWidths=[3.0 * inch])
    score_box.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (0, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (0, 0), 16),
                ("TEXTCOLOR", (0, 0), (0, 0), score_color),
                ("BACKGROUND", (0, 0), (-1, -1), LIGHT),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                ("TOPPADDING", (0, 0), (-1, -1), 8),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
                ("BOX", (0, 0), (-1, -1), 1.5, score_color),
            ]
        )
    )
    story.append(score_box)

    if history is not None and not history.empty:
        story.append(Paragraph("Saved Records", _H1))
        story.append(_history_table(history))

    story.append(Spacer(1, 0.3 * inch))
    story.append(Paragraph(f"Generated {datetime.now():%Y-%m-%d %H:%M}", _SMALL))

    doc.build(story)
    logger.info("Built PDF report for %s (%s)", report.data.company_name, report.data.period_year)
    return buffer.getvalue()
