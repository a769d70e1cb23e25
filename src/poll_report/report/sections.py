"""Section renderers for the poll report.

Each renderer takes the render's :class:`LayoutContext`, queues its draw
instructions, advances the cursor and returns the new cursor position.
Direction-specific decisions (column order, start edge, bar anchoring) are
asked of ``ctx.writing``; nothing here tests the language directly.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from ..i18n import Labels
from ..layout import Align, Column, LayoutContext
from ..models import Answer, Page, ReportFilters
from ..paginator import FooterStamp, Paginator
from ..sanitize import CleanRecord, sanitize
from ..text import is_right_to_left

logger = logging.getLogger("poll_report.report.sections")

# ---------------------------------------------------------------------------
# Colour palette
# ---------------------------------------------------------------------------

_COLOURS = {
    "navy": (0.106, 0.157, 0.220),       # #1B2838
    "white": (1.0, 1.0, 1.0),
    "dark_text": (0.15, 0.15, 0.15),
    "mid_text": (0.35, 0.35, 0.35),
    "light_text": (0.55, 0.55, 0.55),
    "subtitle": (0.7, 0.75, 0.82),
    "rule": (0.78, 0.78, 0.82),
    "row_alt": (0.96, 0.96, 0.97),
    "bar_track": (0.92, 0.92, 0.94),
}

_ANSWER_COLOURS = {
    Answer.YES.value: (0.157, 0.655, 0.271),   # #28A745
    Answer.NO.value: (0.863, 0.208, 0.271),    # #DC3545
}

# Cycled for answers beyond the two canonical ones
_NEUTRAL_PALETTE = (
    (0.424, 0.459, 0.490),   # #6C757D
    (0.251, 0.392, 0.573),
    (0.561, 0.482, 0.357),
    (0.427, 0.333, 0.565),
)

# ---------------------------------------------------------------------------
# Layout constants
# ---------------------------------------------------------------------------

BANNER_HEIGHT = 90
HEADING_HEIGHT = 30
BREAKDOWN_ITEM_HEIGHT = 32
BAR_HEIGHT = 10
BAR_MAX_WIDTH = 360
FILTER_LINE_HEIGHT = 16
HEADER_ROW_HEIGHT = 20
ROW_HEIGHT = 20
CELL_PAD = 5
TABLE_FONT_SIZE = 9

# Semantic column order; widths are for a 495 pt content area (A4)
TABLE_COLUMNS = (
    Column("name", 170),
    Column("phone", 120),
    Column("answer", 80),
    Column("date", 125),
)
_BASE_TABLE_WIDTH = sum(c.width for c in TABLE_COLUMNS)


@dataclass(frozen=True)
class ReportView:
    """Sanitised, render-ready data for one report."""

    labels: Labels
    answers: tuple[str, ...]        # every record's answer, for the breakdown
    rows: tuple[CleanRecord, ...]   # table rows, already capped
    filters: ReportFilters
    total_count: int
    filtered_count: int
    generated_at: datetime


@dataclass(frozen=True)
class BreakdownItem:
    answer: str
    count: int
    percentage: float


def compute_breakdown(answers: Sequence[str]) -> list[BreakdownItem]:
    """Count answers and their share of all *answers*, to one decimal place.

    Yes and No come first, other answers follow in first-seen order.
    """
    counts = Counter(answers)
    total = len(answers)
    if not total:
        return []
    canonical = [a.value for a in Answer if a.value in counts]
    extra = [a for a in counts if a not in canonical]
    return [
        BreakdownItem(a, counts[a], round(counts[a] / total * 100, 1))
        for a in canonical + extra
    ]


def answer_colour(answer: str, extra_index: int = 0) -> tuple[float, float, float]:
    if answer in _ANSWER_COLOURS:
        return _ANSWER_COLOURS[answer]
    return _NEUTRAL_PALETTE[extra_index % len(_NEUTRAL_PALETTE)]


def _heading(ctx: LayoutContext, paginator: Paginator, title: str, keep_with: float) -> None:
    """Section heading with a rule, kept on the page with *keep_with* points."""
    paginator.reserve(HEADING_HEIGHT + keep_with)
    ctx.text(
        title, ctx.y + 14, size=14, bold=True,
        color=_COLOURS["dark_text"], role="heading",
    )
    ctx.line(
        ctx.content_left, ctx.y + 20, ctx.content_right, ctx.y + 20,
        color=_COLOURS["rule"], width=0.8,
    )
    ctx.advance(HEADING_HEIGHT)


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

def render_header(ctx: LayoutContext, view: ReportView) -> float:
    """Navy banner with title and subtitle, centred in either direction."""
    labels = view.labels
    ctx.rect(0, 0, ctx.page_width, BANNER_HEIGHT, fill=_COLOURS["navy"], role="banner")
    ctx.text(
        labels("title"), 44, x=0, width=ctx.page_width, align=Align.CENTER,
        size=22, bold=True, color=_COLOURS["white"], role="title",
    )
    ctx.text(
        labels("subtitle", total=view.total_count, filtered=view.filtered_count),
        68, x=0, width=ctx.page_width, align=Align.CENTER,
        size=11, color=_COLOURS["subtitle"], role="subtitle",
    )
    return ctx.move_to(BANNER_HEIGHT + 25)


# ---------------------------------------------------------------------------
# Breakdown
# ---------------------------------------------------------------------------

def render_breakdown(ctx: LayoutContext, paginator: Paginator, view: ReportView) -> float:
    labels = view.labels
    items = compute_breakdown(view.answers)
    _heading(ctx, paginator, labels("breakdown"), BREAKDOWN_ITEM_HEIGHT)

    if not items:
        ctx.text(labels("no_votes"), ctx.y + 10, size=10, color=_COLOURS["mid_text"], role="breakdown")
        return ctx.advance(BREAKDOWN_ITEM_HEIGHT)

    bar_max = min(BAR_MAX_WIDTH, ctx.content_width)
    extra_index = 0
    for item in items:
        colour = answer_colour(item.answer, extra_index)
        if item.answer not in _ANSWER_COLOURS:
            extra_index += 1

        paginator.reserve(BREAKDOWN_ITEM_HEIGHT)
        line = labels(
            "breakdown_line",
            answer=labels.answer(item.answer),
            count=item.count,
            pct=f"{item.percentage:.1f}",
        )
        ctx.text(line, ctx.y + 10, size=11, color=_COLOURS["dark_text"], role="breakdown")

        bar_top = ctx.y + 15
        fill_w = item.percentage / 100 * bar_max
        track_x = ctx.writing.mirror_x(ctx.content_left, bar_max)
        ctx.rect(
            track_x, bar_top, track_x + bar_max, bar_top + BAR_HEIGHT,
            fill=_COLOURS["bar_track"], role="bar-track",
        )
        if fill_w > 0:
            fill_x = ctx.writing.mirror_x(ctx.content_left, fill_w)
            ctx.rect(
                fill_x, bar_top, fill_x + fill_w, bar_top + BAR_HEIGHT,
                fill=colour, role="bar",
            )
        ctx.advance(BREAKDOWN_ITEM_HEIGHT)

    return ctx.advance(8)


# ---------------------------------------------------------------------------
# Filters summary
# ---------------------------------------------------------------------------

def render_filters(ctx: LayoutContext, paginator: Paginator, view: ReportView) -> float:
    """List the active filters; contributes nothing when none is active."""
    filters = view.filters
    if filters.is_default():
        return ctx.y

    labels = view.labels
    lines = []
    answer = sanitize(filters.answer_text, "text")
    if answer and not ReportFilters(answer=answer).is_default():
        lines.append(labels("filter_answer", answer=labels.answer(answer)))
    term = sanitize(filters.search_text, "search", max_length=50)
    if term:
        lines.append(labels("filter_search", term=term))
    if not lines:
        return ctx.y

    _heading(ctx, paginator, labels("filters"), FILTER_LINE_HEIGHT)
    for line in lines:
        paginator.reserve(FILTER_LINE_HEIGHT)
        ctx.text(line, ctx.y + 11, size=10, color=_COLOURS["mid_text"], role="filter")
        ctx.advance(FILTER_LINE_HEIGHT)
    return ctx.advance(10)


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

def table_columns(ctx: LayoutContext) -> list[Column]:
    """The fixed columns, scaled to the page's content width."""
    scale = ctx.content_width / _BASE_TABLE_WIDTH
    return [Column(c.key, c.width * scale) for c in TABLE_COLUMNS]


def _cell_values(row: CleanRecord) -> dict[str, str]:
    return {
        "name": row.name,
        "phone": row.phone,
        "answer": row.answer,
        "date": row.created_at.strftime("%Y-%m-%d"),
    }


def _draw_table_header_row(ctx: LayoutContext, boxes: list[tuple[Column, float]], labels: Labels) -> None:
    top = ctx.y
    ctx.rect(
        ctx.content_left, top, ctx.content_right, top + HEADER_ROW_HEIGHT,
        fill=_COLOURS["navy"], role="table-header",
    )
    for column, x in boxes:
        ctx.text(
            labels(f"col_{column.key}"), top + 13,
            x=x + CELL_PAD, width=column.width - 2 * CELL_PAD,
            size=TABLE_FONT_SIZE, bold=True, color=_COLOURS["white"],
            role="table-header", column=column.key,
        )
    ctx.advance(HEADER_ROW_HEIGHT)


def _draw_row(ctx: LayoutContext, boxes: list[tuple[Column, float]], idx: int, row: CleanRecord) -> None:
    top = ctx.y
    # Every row gets a background so it can be located; odd rows stay white
    fill = _COLOURS["row_alt"] if idx % 2 == 0 else _COLOURS["white"]
    ctx.rect(ctx.content_left, top, ctx.content_right, top + ROW_HEIGHT, fill=fill, role="row", row=idx)

    values = _cell_values(row)
    for column, x in boxes:
        inner_w = column.width - 2 * CELL_PAD
        value = ctx.fit(values[column.key], inner_w, TABLE_FONT_SIZE)
        # The cell's own script decides its alignment, not the document's
        align = Align.RIGHT if is_right_to_left(value) else Align.LEFT
        ctx.text(
            value, top + 13, x=x + CELL_PAD, width=inner_w, align=align,
            size=TABLE_FONT_SIZE, color=_COLOURS["dark_text"],
            role="cell", row=idx, column=column.key,
        )
    ctx.line(
        ctx.content_left, top + ROW_HEIGHT, ctx.content_right, top + ROW_HEIGHT,
        color=_COLOURS["rule"], width=0.2,
    )
    ctx.advance(ROW_HEIGHT)


def render_table(
    ctx: LayoutContext,
    paginator: Paginator,
    view: ReportView,
    repeat_header: bool = False,
) -> float:
    """Voter table.  The header row is drawn once unless *repeat_header*."""
    labels = view.labels
    _heading(ctx, paginator, labels("table"), HEADER_ROW_HEIGHT + ROW_HEIGHT)

    if not view.rows:
        ctx.text(labels("no_rows"), ctx.y + 12, size=TABLE_FONT_SIZE, color=_COLOURS["mid_text"], role="empty")
        return ctx.advance(ROW_HEIGHT)

    boxes = ctx.column_boxes(table_columns(ctx))
    _draw_table_header_row(ctx, boxes, labels)
    for idx, row in enumerate(view.rows):
        if paginator.reserve(ROW_HEIGHT) and repeat_header:
            _draw_table_header_row(ctx, boxes, labels)
        _draw_row(ctx, boxes, idx, row)
    logger.debug("Table: %d rows on %d page(s)", len(view.rows), len(ctx.pages))
    return ctx.y


# ---------------------------------------------------------------------------
# Footer
# ---------------------------------------------------------------------------

def footer_stamp(view: ReportView) -> FooterStamp:
    """Footer drawer for :meth:`Paginator.finalize`."""
    labels = view.labels
    generated = labels("generated", date=view.generated_at.strftime("%Y-%m-%d %H:%M"))

    def stamp(ctx: LayoutContext, page: Page, number: int, total: int) -> None:
        y = ctx.page_height - 25
        ctx.line(
            ctx.content_left, y - 12, ctx.content_right, y - 12,
            color=_COLOURS["rule"], width=0.5, page=page,
        )
        ctx.text(
            generated, y, align=ctx.writing.align(), size=8,
            color=_COLOURS["light_text"], role="footer", page=page,
        )
        ctx.text(
            labels("page", page=number, pages=total), y, align=ctx.writing.end_align(),
            size=8, color=_COLOURS["light_text"], role="footer-page", page=page,
        )

    return stamp
