from __future__ import annotations

import csv
import io
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..attendance.model import status_label
from ..common.datetime_utils import format_date, format_datetime, format_time
from .service import SessionReport

CSV_HEADERS = ["Student Name", "Student Email", "Student ID", "Marked At", "Status"]
PDF_HEADERS = ["#", "Name", "Email", "Student ID", "Time Marked", "Status"]

# Unicode TrueType fonts shipped by common Linux distributions.
FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
)

logger = logging.getLogger(__name__)


def render_report_csv(report: SessionReport) -> bytes:
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL)
    writer.writerow(CSV_HEADERS)
    for r in report.records:
        writer.writerow(
            [
                r.student_name,
                r.student_email or "",
                r.student_id or "",
                format_datetime(r.marked_at),
                r.status,
            ]
        )
    return out.getvalue().encode("utf-8-sig")


@lru_cache(maxsize=None)
def resolve_pdf_font(font_path: Optional[str] = None) -> str:
    """Register a Unicode TrueType font and return its name.

    ``font_path`` is tried first, then FONT_CANDIDATES. Without any of them the
    built-in Helvetica is used, which only covers Latin-1.
    """

    candidates = ([font_path] if font_path else []) + list(FONT_CANDIDATES)
    for candidate in candidates:
        path = Path(candidate)
        if not path.is_file():
            continue
        name = f"Report-{path.stem.replace(' ', '-')}"
        try:
            pdfmetrics.registerFont(TTFont(name, str(path)))
        except TTFError as e:
            logger.warning("cannot load PDF font %s: %s", path, e)
            continue
        return name

    logger.warning("no TrueType font found (PDF_FONT_PATH=%s); non-Latin text will not render", font_path)
    return "Helvetica"


def render_report_pdf(report: SessionReport, *, font_path: Optional[str] = None) -> bytes:
    """Printable report: session header, statistics and one row per record."""

    font = resolve_pdf_font(font_path)
    header_font = "Helvetica-Bold" if font == "Helvetica" else font

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=18 * mm,
        title="Attendance Report",
    )
    base = getSampleStyleSheet()
    styles = {
        "Title": ParagraphStyle("ReportTitle", parent=base["Title"], fontName=font),
        "Normal": ParagraphStyle("ReportNormal", parent=base["Normal"], fontName=font),
    }
    s = report.session
    summary = report.summary

    elements = [
        Paragraph("Attendance Report", styles["Title"]),
        Spacer(1, 4 * mm),
        Paragraph(f"Session: {_escape(s.title)}", styles["Normal"]),
        Paragraph(f"Course: {_escape(s.course_code)}", styles["Normal"]),
        Paragraph(f"Date: {format_date(s.session_date)}", styles["Normal"]),
        Paragraph(f"Time: {format_time(s.start_time)} - {format_time(s.end_time)}", styles["Normal"]),
    ]
    if s.description:
        elements.append(Paragraph(f"Description: {_escape(s.description)}", styles["Normal"]))

    elements += [
        Spacer(1, 4 * mm),
        Paragraph(f"Total Students: {summary.total}", styles["Normal"]),
        Paragraph(f"On Time: {summary.on_time}", styles["Normal"]),
        Paragraph(f"Late: {summary.late}", styles["Normal"]),
        Paragraph(f"Attendance Rate: {summary.attendance_rate}%", styles["Normal"]),
        Spacer(1, 6 * mm),
    ]

    if report.records:
        table_data = [PDF_HEADERS]
        for idx, r in enumerate(report.records, start=1):
            table_data.append(
                [
                    idx,
                    r.student_name,
                    r.student_email or "-",
                    r.student_id or "-",
                    format_datetime(r.marked_at),
                    status_label(r.is_late, r.late_by_minutes, short=True),
                ]
            )

        table = Table(table_data, repeatRows=1, colWidths=[12 * mm, 40 * mm, 48 * mm, 25 * mm, 35 * mm, 25 * mm])
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2563EB")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, -1), font),
                    ("FONTNAME", (0, 0), (-1, 0), header_font),
                    ("FONTSIZE", (0, 0), (-1, -1), 8),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F0F4FF")]),
                ]
            )
        )
        elements.append(table)
    else:
        elements.append(Paragraph("No attendance records found.", styles["Normal"]))

    generated = format_datetime(report.generated_at)

    def add_footer(canvas, doc_):
        canvas.saveState()
        canvas.setFont(font, 8)
        canvas.drawString(15 * mm, 10 * mm, f"Generated on {generated} - Page {canvas.getPageNumber()}")
        canvas.restoreState()

    doc.build(elements, onFirstPage=add_footer, onLaterPages=add_footer)
    return buffer.getvalue()


def _escape(text: str) -> str:
    # Paragraph parses a mini-markup language.
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
