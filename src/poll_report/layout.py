"""Page geometry, direction-aware placement, and the vertical cursor.

The :class:`LayoutContext` is the only place that turns section-relative
requests ("this text, right-aligned in that column, on the current line")
into page coordinates.  Direction-specific choices are delegated to one
:class:`WritingSystem` resolved per render.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidInput
from .fonts import FONT_BOLD, FONT_REGULAR, FONT_RTL, RenderResources
from .models import Color, DrawInstruction, Language, LineOp, Page, RectOp, TextOp
from .text import is_right_to_left

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PageGeometry:
    width: float = 595.0   # A4
    height: float = 842.0
    margin_left: float = 50.0
    margin_right: float = 50.0
    margin_top: float = 50.0
    margin_bottom: float = 50.0

    @property
    def content_left(self) -> float:
        return self.margin_left

    @property
    def content_right(self) -> float:
        return self.width - self.margin_right

    @property
    def content_width(self) -> float:
        return self.content_right - self.content_left

    @property
    def bottom(self) -> float:
        """Lowest y content may reach; the footer lives below it."""
        return self.height - self.margin_bottom

    @property
    def usable_height(self) -> float:
        return self.bottom - self.margin_top


@dataclass(frozen=True)
class Column:
    key: str
    width: float


class Align(Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


# ---------------------------------------------------------------------------
# Writing systems
# ---------------------------------------------------------------------------


class WritingSystem:
    """Direction policy shared by every section renderer."""

    rtl = False

    def __init__(self, geometry: PageGeometry) -> None:
        self.geometry = geometry

    def column_order(self, columns: Sequence[Column]) -> list[Column]:
        return list(columns)

    def align(self) -> Align:
        """The physical edge text starts from."""
        return Align.LEFT

    def end_align(self) -> Align:
        return Align.RIGHT

    def mirror_x(self, x: float, width: float) -> float:
        """Map a start-relative box at *x* to its physical left edge."""
        return x


class LeftToRight(WritingSystem):
    pass


class RightToLeft(WritingSystem):
    rtl = True

    def column_order(self, columns: Sequence[Column]) -> list[Column]:
        return list(reversed(columns))

    def align(self) -> Align:
        return Align.RIGHT

    def end_align(self) -> Align:
        return Align.LEFT

    def mirror_x(self, x: float, width: float) -> float:
        g = self.geometry
        return g.content_left + g.content_right - x - width


def writing_system_for(language: Language | str, geometry: PageGeometry) -> WritingSystem:
    try:
        lang = Language(language)
    except ValueError:
        raise InvalidInput(f"Unsupported language: {language!r}") from None
    return RightToLeft(geometry) if lang is Language.AR else LeftToRight(geometry)


# ---------------------------------------------------------------------------
# Layout context
# ---------------------------------------------------------------------------


class LayoutContext:
    """Geometry, cursor, and pages for exactly one render call."""

    def __init__(
        self,
        geometry: PageGeometry,
        writing: WritingSystem,
        resources: RenderResources,
    ) -> None:
        self.geometry = geometry
        self.writing = writing
        self.resources = resources
        self.pages: list[Page] = []
        self.y = geometry.margin_top
        self.new_page()

    # -- bounds -------------------------------------------------------------

    @property
    def page(self) -> Page:
        return self.pages[-1]

    @property
    def page_index(self) -> int:
        return len(self.pages) - 1

    @property
    def page_width(self) -> float:
        return self.geometry.width

    @property
    def page_height(self) -> float:
        return self.geometry.height

    @property
    def content_left(self) -> float:
        return self.geometry.content_left

    @property
    def content_right(self) -> float:
        return self.geometry.content_right

    @property
    def content_width(self) -> float:
        return self.geometry.content_width

    @property
    def bottom(self) -> float:
        return self.geometry.bottom

    def remaining(self) -> float:
        """Vertical space left on the current page."""
        return self.bottom - self.y

    def column_boxes(self, columns: Sequence[Column]) -> list[tuple[Column, float]]:
        """Columns in visual order with the physical x of each left edge."""
        x = self.content_left
        boxes = []
        for column in self.writing.column_order(columns):
            boxes.append((column, x))
            x += column.width
        return boxes

    # -- cursor -------------------------------------------------------------

    def new_page(self) -> Page:
        """Start a new page and reset the cursor to the top margin."""
        page = Page(index=len(self.pages))
        self.pages.append(page)
        self.y = self.geometry.margin_top
        return page

    def advance(self, dy: float) -> float:
        if dy < 0:
            raise ValueError(f"cursor cannot move up within a page (dy={dy})")
        self.y += dy
        return self.y

    def move_to(self, y: float) -> float:
        """Move the cursor down to *y*; a position above the cursor is ignored."""
        if y > self.y:
            self.y = y
        return self.y

    # -- text helpers -------------------------------------------------------

    def visual(self, text: str) -> tuple[str, bool]:
        """Return *text* in drawing order and whether it was shaped as RTL."""
        if is_right_to_left(text):
            return self.resources.shaper.to_visual_order(text), True
        return text, False

    def measure(self, text: str, size: float, bold: bool = False) -> float:
        visual, rtl = self.visual(text)
        return self.resources.text_width(visual, _font_key(rtl, bold), size)

    def fit(self, text: str, width: float, size: float, bold: bool = False) -> str:
        """Trim logical *text* with ``...`` until it fits in *width* points."""
        if self.measure(text, size, bold) <= width:
            return text
        trimmed = text
        while trimmed and self.measure(trimmed.rstrip() + "...", size, bold) > width:
            trimmed = trimmed[:-1]
        return trimmed.rstrip() + "..." if trimmed else ""

    # -- drawing ------------------------------------------------------------

    def add(self, op: DrawInstruction, page: Page | None = None) -> None:
        (page or self.page).instructions.append(op)

    def text(
        self,
        text: str,
        y: float,
        *,
        x: float | None = None,
        width: float | None = None,
        align: Align | None = None,
        size: float = 10,
        bold: bool = False,
        color: Color = (0.15, 0.15, 0.15),
        role: str = "text",
        row: int | None = None,
        column: str | None = None,
        page: Page | None = None,
    ) -> TextOp:
        """Queue *text* with its baseline at *y* inside the box (*x*, *width*).

        The box defaults to the content area and *align* to the writing
        system's start edge.
        """
        visual, rtl = self.visual(text)
        font = _font_key(rtl, bold)
        text_w = self.resources.text_width(visual, font, size)
        box_x = self.content_left if x is None else x
        box_w = self.content_width if width is None else width
        align = align or self.writing.align()
        if align is Align.RIGHT:
            tx = box_x + box_w - text_w
        elif align is Align.CENTER:
            tx = box_x + (box_w - text_w) / 2
        else:
            tx = box_x
        op = TextOp(
            x=tx, y=y, text=visual, source=text, font=font, size=size,
            color=color, rtl=rtl, role=role, row=row, column=column,
        )
        self.add(op, page)
        return op

    def rect(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        *,
        fill: Color | None = None,
        stroke: Color | None = None,
        role: str = "",
        row: int | None = None,
        page: Page | None = None,
    ) -> RectOp:
        op = RectOp(x0, y0, x1, y1, fill=fill, stroke=stroke, role=role, row=row)
        self.add(op, page)
        return op

    def line(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        *,
        color: Color,
        width: float = 0.5,
        role: str = "",
        page: Page | None = None,
    ) -> LineOp:
        op = LineOp(x0, y0, x1, y1, color=color, width=width, role=role)
        self.add(op, page)
        return op


def _font_key(rtl: bool, bold: bool) -> str:
    if rtl:
        return FONT_RTL
    return FONT_BOLD if bold else FONT_REGULAR
