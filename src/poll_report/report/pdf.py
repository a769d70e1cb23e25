"""PDF output for laid-out report pages, using PyMuPDF.

Pages arrive as lists of draw instructions with page coordinates already
resolved; this module only replays them onto PyMuPDF pages and serialises
the document.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

import fitz  # PyMuPDF

from ..fonts import FONT_RTL, RenderResources
from ..layout import PageGeometry
from ..models import LineOp, Page, RectOp, TextOp

logger = logging.getLogger("poll_report.report.pdf")


def _register_fonts(pdf_page: fitz.Page, page: Page, resources: RenderResources) -> None:
    """Embed the RTL font on pages that draw RTL text."""
    if not any(isinstance(op, TextOp) and op.font == FONT_RTL for op in page.instructions):
        return
    for face in resources.embedded:
        pdf_page.insert_font(fontname=face.alias, fontbuffer=face.buffer)


def _write_page(
    doc: fitz.Document,
    page: Page,
    geometry: PageGeometry,
    resources: RenderResources,
) -> None:
    pdf_page = doc.new_page(width=geometry.width, height=geometry.height)
    _register_fonts(pdf_page, page, resources)

    for op in page.instructions:
        if isinstance(op, RectOp):
            pdf_page.draw_rect(
                fitz.Rect(op.x0, op.y0, op.x1, op.y1),
                color=op.stroke,
                fill=op.fill,
                width=op.width,
            )
        elif isinstance(op, LineOp):
            pdf_page.draw_line(
                fitz.Point(op.x0, op.y0),
                fitz.Point(op.x1, op.y1),
                color=op.color,
                width=op.width,
            )
        elif isinstance(op, TextOp):
            if not op.text:
                continue
            x = op.x
            for run, key in resources.runs(op.text, op.font):
                face = resources.face(key)
                pdf_page.insert_text(
                    fitz.Point(x, op.y),
                    run,
                    fontsize=op.size,
                    fontname=face.alias,
                    color=op.color,
                )
                x += face.text_width(run, op.size)


def write_pdf(
    pages: Sequence[Page],
    geometry: PageGeometry,
    resources: RenderResources,
    title: str = "",
    generated_at: datetime | None = None,
) -> bytes:
    """Serialise *pages* to PDF bytes."""
    doc = fitz.open()
    try:
        for page in pages:
            _write_page(doc, page, geometry, resources)
        metadata = {
            "title": title,
            "creator": "poll-report",
            "producer": f"PyMuPDF {fitz.VersionBind}",
        }
        if generated_at is not None:
            stamp = generated_at.strftime("D:%Y%m%d%H%M%S")
            metadata["creationDate"] = stamp
            metadata["modDate"] = stamp
        doc.set_metadata(metadata)
        data = doc.tobytes(garbage=3, deflate=True)
    finally:
        doc.close()
    logger.debug("Wrote %d page(s), %d bytes", len(pages), len(data))
    return data
