"""PDF export of the daily meal print sheet."""

from __future__ import annotations

from io import BytesIO
from typing import Any

from app.services import order_status
from app.services.reconciliation_service import PrintEntry, PrintView
from app.utils.pdf_fonts import register_pdf_font

SLOT_TITLES = {"LUNCH": "점심 (LUNCH)", "DINNER": "저녁 (DINNER)"}


def _reportlab():
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    return {
        "colors": colors,
        "A4": A4,
        "ParagraphStyle": ParagraphStyle,
        "getSampleStyleSheet": getSampleStyleSheet,
        "Paragraph": Paragraph,
        "SimpleDocTemplate": SimpleDocTemplate,
        "Spacer": Spacer,
        "Table": Table,
        "TableStyle": TableStyle,
    }


def _build_styles() -> dict[str, Any]:
    font_name = register_pdf_font()
    rl = _reportlab()
    styles = rl["getSampleStyleSheet"]()
    return {
        "font_name": font_name,  # type: ignore[dict-item]
        "title": rl["ParagraphStyle"]("PdfTitle", parent=styles["Title"], fontName=font_name),
        "heading": rl["ParagraphStyle"]("PdfHeading2", parent=styles["Heading2"], fontName=font_name),
        "normal": rl["ParagraphStyle"]("PdfNormal", parent=styles["Normal"], fontName=font_name),
    }


def _slot_section_story(slot: str, entries: list[PrintEntry], styles: dict[str, Any]) -> list[Any]:
    rl = _reportlab()
    paid = sum(1 for entry in entries if entry.status == order_status.PAID)
    story: list[Any] = [
        rl["Paragraph"](f"{SLOT_TITLES[slot]}: {len(entries)} (paid {paid})", styles["heading"]),
    ]
    if not entries:
        story.append(rl["Paragraph"]("-", styles["normal"]))
        return story

    rows = [["#", "Name", "Code", "Status", "Check"]]
    rows.extend([str(index), entry.name, entry.code, entry.status, ""] for index, entry in enumerate(entries, start=1))
    table = rl["Table"](rows, colWidths=[30, 180, 110, 90, 60], repeatRows=1)
    table.setStyle(
        rl["TableStyle"](
            [
                ("BACKGROUND", (0, 0), (-1, 0), rl["colors"].lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.5, rl["colors"].black),
                ("FONTNAME", (0, 0), (-1, -1), styles["font_name"]),
            ]
        )
    )
    story.append(table)
    story.append(rl["Spacer"](1, 14))
    return story


def render_print_sheet_pdf(view: PrintView) -> bytes:
    """Render lunch and dinner lists for one day as an A4 PDF."""
    styles = _build_styles()
    rl = _reportlab()
    story: list[Any] = [
        rl["Paragraph"](f"도시락 명단 {view.date.isoformat()}", styles["title"]),
        rl["Spacer"](1, 10),
    ]
    story.extend(_slot_section_story("LUNCH", view.lunch, styles))
    story.extend(_slot_section_story("DINNER", view.dinner, styles))

    buffer = BytesIO()
    rl["SimpleDocTemplate"](buffer, pagesize=rl["A4"]).build(story)
    return buffer.getvalue()
