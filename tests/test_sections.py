"""Tests for the individual section renderers."""

from __future__ import annotations

import pytest

from conftest import NOW, vote
from poll_report.i18n import Labels
from poll_report.layout import LayoutContext, PageGeometry, writing_system_for
from poll_report.models import Language, ReportFilters, ReportRequest
from poll_report.paginator import Paginator
from poll_report.report.composer import layout
from poll_report.report.sections import (
    BAR_MAX_WIDTH,
    ReportView,
    answer_colour,
    compute_breakdown,
    render_filters,
)


def _votes(yes: int, no: int) -> tuple:
    return tuple(vote(name=f"Yes voter {i}") for i in range(yes)) + tuple(
        vote(name=f"No voter {i}", answer="No") for i in range(no)
    )


def _layout(resources, records, language="en", filters=None, **kwargs):
    request = ReportRequest(language=language, records=records, filters=filters or ReportFilters())
    return layout(request, resources, now=NOW, **kwargs)


# -- breakdown ---------------------------------------------------------------

def test_breakdown_counts_and_percentages():
    items = compute_breakdown(["Yes", "Yes", "No", "Yes", "No"])
    assert [(i.answer, i.count, i.percentage) for i in items] == [("Yes", 3, 60.0), ("No", 2, 40.0)]


@pytest.mark.parametrize("yes, no", [(1, 2), (2, 1), (1, 6), (333, 667), (7, 0), (1, 1)])
def test_breakdown_percentages_sum_to_100(yes, no):
    items = compute_breakdown(["Yes"] * yes + ["No"] * no)
    assert sum(i.percentage for i in items) == pytest.approx(100, abs=0.1)


def test_breakdown_canonical_answers_first_then_first_seen():
    items = compute_breakdown(["Maybe", "No", "Later", "Yes", "Maybe"])
    assert [i.answer for i in items] == ["Yes", "No", "Maybe", "Later"]


def test_breakdown_empty():
    assert compute_breakdown([]) == []


def test_answer_colours():
    assert answer_colour("Yes") != answer_colour("No")
    assert answer_colour("Maybe", 0) == answer_colour("Other", 4)


def test_breakdown_lines_and_bar_widths(resources):
    page = _layout(resources, _votes(3, 2))[0]
    lines = [op.source for op in page.texts("breakdown")]
    assert lines == ["Yes: 3 votes (60.0%)", "No: 2 votes (40.0%)"]
    bars = [op for op in page.instructions if getattr(op, "role", "") == "bar"]
    assert [b.x1 - b.x0 for b in bars] == [pytest.approx(0.6 * BAR_MAX_WIDTH), pytest.approx(0.4 * BAR_MAX_WIDTH)]
    assert all(b.x0 == pytest.approx(50) for b in bars)


def test_rtl_bars_grow_from_right_edge(resources):
    page = _layout(resources, _votes(1, 3), language="ar")[0]
    bars = [op for op in page.instructions if getattr(op, "role", "") == "bar"]
    assert len(bars) == 2
    assert all(b.x1 == pytest.approx(545) for b in bars)


def test_arabic_breakdown_labels(resources):
    page = _layout(resources, _votes(3, 2), language="ar")[0]
    lines = [op.source for op in page.texts("breakdown")]
    assert lines == ["نعم: 3 صوت (60.0%)", "لا: 2 صوت (40.0%)"]


def test_empty_report_has_placeholders(resources):
    pages = _layout(resources, ())
    assert len(pages) == 1
    assert pages[0].texts("empty")
    assert pages[0].rows() == []


# -- header ------------------------------------------------------------------

@pytest.mark.parametrize("language", ["en", "ar"])
def test_header_is_centred_in_both_directions(resources, language):
    page = _layout(resources, _votes(1, 1), language=language)[0]
    (title,) = page.texts("title")
    width = resources.text_width(title.text, title.font, title.size)
    assert title.x + width / 2 == pytest.approx(595 / 2)


def test_header_title_is_shaped_for_arabic(resources):
    page = _layout(resources, _votes(1, 1), language="ar")[0]
    (title,) = page.texts("title")
    assert title.source == "نتائج التصويت"
    assert title.rtl is True
    assert title.text == resources.shaper.to_visual_order(title.source)


# -- filters summary ---------------------------------------------------------

def _view(filters: ReportFilters) -> ReportView:
    return ReportView(
        labels=Labels(Language.EN), answers=(), rows=(), filters=filters,
        total_count=0, filtered_count=0, generated_at=NOW,
    )


@pytest.mark.parametrize(
    "filters",
    [ReportFilters(), ReportFilters(answer="all"), ReportFilters(answer="الكل", search="   ")],
)
def test_default_filters_take_no_space(resources, filters):
    geometry = PageGeometry()
    ctx = LayoutContext(geometry, writing_system_for("en", geometry), resources)
    before = ctx.y
    assert render_filters(ctx, Paginator(ctx), _view(filters)) == before
    assert ctx.page.instructions == []


def test_active_filters_are_listed(resources):
    page = _layout(resources, _votes(1, 0), filters=ReportFilters(answer="Yes", search="ali"))[0]
    assert [op.source for op in page.texts("filter")] == ["Answer: Yes", "Search: ali"]


def test_long_search_term_bounded_in_summary(resources):
    page = _layout(resources, _votes(1, 0), filters=ReportFilters(search="q" * 120))[0]
    (line,) = page.texts("filter")
    assert line.source == "Search: " + "q" * 50 + "..."


# -- table -------------------------------------------------------------------

def _header_order(page) -> list[str]:
    return [op.column for op in sorted(page.texts("table-header"), key=lambda op: op.x)]


def test_table_column_order_en(resources):
    page = _layout(resources, _votes(2, 1))[0]
    assert _header_order(page) == ["name", "phone", "answer", "date"]


def test_table_column_order_ar(resources):
    page = _layout(resources, _votes(2, 1), language="ar")[0]
    assert _header_order(page) == ["date", "answer", "phone", "name"]


def _row_data(pages) -> dict[int, dict[str, str]]:
    rows: dict[int, dict[str, str]] = {}
    for page in pages:
        for op in page.texts("cell"):
            rows.setdefault(op.row, {})[op.column] = op.source
    return rows


def test_row_data_identical_across_languages(resources):
    records = _votes(3, 2) + (vote(name="أحمد علي", phone="0100 123 4567"),)
    en = _row_data(_layout(resources, records, language="en"))
    ar = _row_data(_layout(resources, records, language="ar"))
    assert en == ar
    assert en[0] == {"name": "Yes voter 0", "phone": "+1 555 0100", "answer": "Yes", "date": "2024-05-01"}


def test_cells_follow_their_own_script(resources):
    records = (vote(name="أحمد علي"), vote(name="Alice"))
    page = _layout(resources, records, language="en")[0]
    cells = {(op.row, op.column): op for op in page.texts("cell")}
    header_x = {op.column: op.x for op in page.texts("table-header")}

    arabic = cells[(0, "name")]
    width = resources.text_width(arabic.text, arabic.font, arabic.size)
    assert arabic.rtl is True
    # name column is 170 pt wide with 5 pt padding on each side
    assert arabic.x + width == pytest.approx(header_x["name"] + 160)

    latin = cells[(1, "name")]
    assert latin.rtl is False
    assert latin.x == pytest.approx(header_x["name"])


def test_alternating_row_backgrounds(resources):
    page = _layout(resources, _votes(4, 0))[0]
    fills = [op.fill for op in page.instructions if getattr(op, "role", "") == "row"]
    assert len(fills) == 4
    assert fills[0] == fills[2]
    assert fills[1] == fills[3]
    assert fills[0] != fills[1]


def test_header_row_has_inverted_colours(resources):
    page = _layout(resources, _votes(1, 0))[0]
    headers = page.texts("table-header")
    assert {op.color for op in headers} == {(1.0, 1.0, 1.0)}
    cells = page.texts("cell")
    assert all(op.color != (1.0, 1.0, 1.0) for op in cells)


def test_long_names_fit_their_column(resources):
    page = _layout(resources, (vote(name="Maximilian " * 9),))[0]
    cell = next(op for op in page.texts("cell") if op.column == "name")
    assert cell.source.endswith("...")
    assert resources.text_width(cell.text, cell.font, cell.size) <= 160


# -- footer ------------------------------------------------------------------

def test_footer_on_every_page(resources):
    pages = _layout(resources, _votes(60, 20))
    assert len(pages) > 1
    n = len(pages)
    for page in pages:
        (number,) = page.texts("footer-page")
        assert number.source == f"Page {page.number} of {n}"
        (generated,) = page.texts("footer")
        assert generated.source == "Generated on 2024-05-02 12:00"
        assert number.y > 792   # below the content area


def test_arabic_footer(resources):
    pages = _layout(resources, _votes(1, 1), language="ar")
    (number,) = pages[0].texts("footer-page")
    assert number.source == "صفحة 1 من 1"
    assert number.x < 297   # end edge is the left in RTL
