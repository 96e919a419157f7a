"""Helpers for configuring Hangul-capable fonts in ReportLab PDFs."""

from __future__ import annotations

import logging
from os import getenv
from pathlib import Path

logger = logging.getLogger(__name__)

_FALLBACK_WARNING_EMITTED = False

FONT_NAME = "AppHangul"


def find_hangul_ttf() -> str | None:
    """Return the first available font file able to render Hangul."""
    candidates = [
        getenv("PDF_FONT_PATH", ""),
        # Windows
        r"C:\Windows\Fonts\malgun.ttf",
        r"C:\Windows\Fonts\gulim.ttc",
        # Linux
        "/usr/share/fonts/truetype/nanum/NanumGothic.ttf",
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
        "/usr/share/fonts/truetype/unfonts-core/UnDotum.ttf",
        # macOS
        "/System/Library/Fonts/Supplemental/AppleGothic.ttf",
        "/Library/Fonts/NanumGothic.ttf",
    ]

    for candidate in candidates:
        if candidate and Path(candidate).exists():
            return candidate
    return None


def register_pdf_font() -> str:
    """Register a Hangul font for ReportLab and return the font name to use."""
    global _FALLBACK_WARNING_EMITTED

    font_path = find_hangul_ttf()
    if font_path:
        from reportlab.pdfbase import pdfmetrics
        from reportlab.pdfbase.ttfonts import TTFont

        if FONT_NAME not in set(pdfmetrics.getRegisteredFontNames()):
            pdfmetrics.registerFont(TTFont(FONT_NAME, font_path))
        return FONT_NAME

    if not _FALLBACK_WARNING_EMITTED:
        logger.warning("No Hangul TTF font found; set PDF_FONT_PATH or Korean names will not render.")
        _FALLBACK_WARNING_EMITTED = True
    return "Helvetica"
