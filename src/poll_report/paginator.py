"""Page breaks and the final page-numbering pass."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from .layout import LayoutContext
from .models import Page

logger = logging.getLogger("poll_report.paginator")


class PaginatorState(Enum):
    ACCUMULATING = "accumulating"
    PAGE_BREAK = "page_break"
    FINALIZE = "finalize"


FooterStamp = Callable[[LayoutContext, Page, int, int], None]


class Paginator:
    """Breaks pages on cursor overflow and numbers them once all are known.

    A block of height *h* starting at the cursor fits when
    ``cursor + h <= bottom``; otherwise a new page is started and the
    cursor goes back to the top margin.  For table rows of height R placed
    after S points of earlier content on a page of usable height H, row N
    is therefore the first row on a new page exactly when ``S + N*R > H``.
    """

    def __init__(self, ctx: LayoutContext) -> None:
        self.ctx = ctx
        self.state = PaginatorState.ACCUMULATING
        self.breaks = 0

    def reserve(self, height: float) -> bool:
        """Make room for *height* points.  Returns *True* if the page broke."""
        if self.state is PaginatorState.FINALIZE:
            raise RuntimeError("cannot lay out content after the report is finalized")
        if self.ctx.y + height <= self.ctx.bottom:
            return False
        self.state = PaginatorState.PAGE_BREAK
        self.ctx.new_page()
        self.breaks += 1
        logger.debug("Page break -> page %d", self.ctx.page_index + 1)
        self.state = PaginatorState.ACCUMULATING
        return True

    def finalize(self, stamp: FooterStamp | None = None) -> list[Page]:
        """Number every page and stamp its footer.

        This is a second pass: "page X of N" needs N, which is only known
        after all content has been laid out.
        """
        if self.state is PaginatorState.FINALIZE:
            return self.ctx.pages
        self.state = PaginatorState.FINALIZE
        total = len(self.ctx.pages)
        for page in self.ctx.pages:
            page.number = page.index + 1
            if stamp is not None:
                stamp(self.ctx, page, page.number, total)
        return self.ctx.pages
