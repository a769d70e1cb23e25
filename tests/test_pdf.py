"""Tests for PDF serialisation of laid-out pages."""

from __future__ import annotations

import fitz

from conftest import NOW
from poll_report.layout import LayoutContext, PageGeometry, writing_system_for
from poll_report.report.pdf import write_pdf


def _ctx(resources, geometry=None) -> LayoutContext:
    geometry = geometry or PageGeometry()
    return LayoutContext(geometry, writing_system_for("en", geometry), resources)


def test_empty_page_is_valid_pdf(resources):
    ctx = _ctx(resources)
    data = write_pdf(ctx.pages, ctx.geometry, resources)
    assert data[:5] == b"%PDF-"
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc.page_count == 1


def test_instructions_are_replayed(resources):
    ctx = _ctx(resources)
    ctx.rect(50, 50, 200, 80, fill=(0.1, 0.2, 0.3))
    ctx.line(50, 90, 545, 90, color=(0.5, 0.5, 0.5))
    ctx.text("Hello report", 120)
    ctx.new_page()
    ctx.text("Second page", 120)
    data = write_pdf(ctx.pages, ctx.geometry, resources, title="Poll Results", generated_at=NOW)

    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc.page_count == 2
        assert "Hello report" in doc[0].get_text()
        assert "Second page" in doc[1].get_text()
        assert doc[0].get_drawings()
        assert doc.metadata["title"] == "Poll Results"
        assert doc.metadata["creator"] == "poll-report"


def test_page_size_follows_geometry(resources):
    ctx = _ctx(resources, PageGeometry(width=612, height=792))
    data = write_pdf(ctx.pages, ctx.geometry, resources)
    with fitz.open(stream=data, filetype="pdf") as doc:
        assert doc[0].rect.width == 612
        assert doc[0].rect.height == 792


def test_rtl_text_keeps_its_glyphs(resources):
    ctx = _ctx(resources)
    ctx.text("أحمد علي", 120)
    ctx.text("الاسم (Alice)", 140)
    ctx.text("Alice", 160)
    data = write_pdf(ctx.pages, ctx.geometry, resources)
    with fitz.open(stream=data, filetype="pdf") as doc:
        text = doc[0].get_text()
    assert "Alice" in text
    assert any(0xFE70 <= ord(c) <= 0xFEFF or 0x0600 <= ord(c) <= 0x06FF for c in text)


def test_unicode_latin_text(resources):
    ctx = _ctx(resources)
    ctx.text("Zoë Müller", 120)
    data = write_pdf(ctx.pages, ctx.geometry, resources)
    assert data[:5] == b"%PDF-"
