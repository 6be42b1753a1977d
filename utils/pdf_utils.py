import logging
import os

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from domain.aggregates import MonthSummary

logger = logging.getLogger(__name__)

FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "DejaVuSans.ttf",
]


def _safe_str(value):
    return "" if value is None else str(value)


def _register_unicode_font() -> str:
    """Register a TTF font able to render non-Latin titles; Helvetica otherwise."""
    windir = os.environ.get("WINDIR") or os.environ.get("SystemRoot")
    candidates = list(FONT_CANDIDATES)
    if windir:
        candidates.append(os.path.join(windir, "Fonts", "DejaVuSans.ttf"))
        candidates.append(os.path.join(windir, "Fonts", "Arial.ttf"))

    for path in candidates:
        if not os.path.exists(path):
            continue
        name = os.path.splitext(os.path.basename(path))[0]
        try:
            pdfmetrics.registerFont(TTFont(name, path))
        except Exception:
            logger.debug("Failed to register font %s at %s", name, path, exc_info=True)
            continue
        logger.debug("Registered font %s from %s", name, path)
        return name

    logger.warning("No suitable TTF font found; falling back to Helvetica")
    return "Helvetica"


def _format_amount(value: float) -> str:
    return f"{value:.2f}"


def bill_to_pdf(summary: MonthSummary, filepath: str) -> None:
    """Export the monthly bill: totals header followed by the expense table."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    doc = SimpleDocTemplate(
        filepath,
        pagesize=A4,
        leftMargin=30,
        rightMargin=30,
        topMargin=30,
        bottomMargin=30,
        title=f"Expense Bill - {summary.month_key}",
    )
    available_width = A4[0] - 60
    font_name = _register_unicode_font()

    styles = getSampleStyleSheet()
    for style_name in ("Title", "Heading2", "Heading3", "Normal"):
        styles[style_name].fontName = font_name

    elems = [
        Paragraph("Monthly Expense Bill", styles["Title"]),
        Paragraph(f"Month: {summary.month_key}", styles["Heading2"]),
        Paragraph(f"Income: {_format_amount(summary.income)}", styles["Normal"]),
        Paragraph(f"Total Expense: {_format_amount(summary.total)}", styles["Normal"]),
        Paragraph(f"Balance: {_format_amount(summary.balance)}", styles["Normal"]),
        Spacer(1, 14),
        Paragraph("Expense Details", styles["Heading3"]),
    ]

    if not summary.expenses:
        elems.append(Paragraph("No expenses for this month.", styles["Normal"]))
        doc.build(elems)
        return

    data = [["Date", "Title", "Category", "Amount"]]
    for record in summary.expenses:
        data.append(
            [
                _safe_str(record.date),
                _safe_str(record.title),
                _safe_str(record.category),
                _format_amount(record.amount),
            ]
        )
    data.append(["", "", "Total", _format_amount(summary.total)])

    col_widths = [
        available_width * 0.18,
        available_width * 0.42,
        available_width * 0.20,
        available_width * 0.20,
    ]
    table = Table(data, colWidths=col_widths, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("FONT", (0, 0), (-1, -1), font_name),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("ALIGN", (3, 0), (3, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("LEFTPADDING", (0, 0), (-1, -1), 6),
                ("RIGHTPADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    elems.append(table)
    doc.build(elems)
