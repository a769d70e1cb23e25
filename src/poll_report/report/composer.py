"""Report composition: validate, lay out the sections, paginate, serialise."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from ..errors import InvalidInput, TooManyRecords
from ..fonts import RenderResources
from ..i18n import Labels
from ..layout import LayoutContext, PageGeometry, writing_system_for
from ..models import Language, Page, RenderResult, ReportRequest, VoteRecord
from ..paginator import Paginator
from ..sanitize import sanitize, sanitize_record
from ..settings import Settings
from .pdf import write_pdf
from .sections import (
    ReportView,
    footer_stamp,
    render_breakdown,
    render_filters,
    render_header,
    render_table,
)

logger = logging.getLogger("poll_report.report.composer")


def _validate(request: ReportRequest, settings: Settings) -> tuple[Language, tuple[VoteRecord, ...]]:
    """Reject bad requests before anything is drawn."""
    records = request.records
    if not isinstance(records, (list, tuple)):
        raise InvalidInput(f"records must be a list, got {type(records).__name__}")
    try:
        language = Language(request.language)
    except ValueError:
        raise InvalidInput(f"Unsupported language: {request.language!r}") from None
    if len(records) > settings.max_records:
        raise TooManyRecords(len(records), settings.max_records)
    for i, record in enumerate(records):
        if not isinstance(record, VoteRecord):
            raise InvalidInput(f"records[{i}] is not a vote record")
    return language, tuple(records)


def _geometry(settings: Settings) -> PageGeometry:
    width, height = settings.page_dimensions
    return PageGeometry(width=width, height=height)


def layout(
    request: ReportRequest,
    resources: RenderResources,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> list[Page]:
    """Lay out *request* into numbered pages of draw instructions.

    Sections are rendered in a fixed order: header, breakdown, filters
    summary, table; the footer is stamped last, once the page count is known.
    """
    settings = settings or Settings()
    language, records = _validate(request, settings)
    now = now or datetime.now(timezone.utc)

    clean = [sanitize_record(r, now=now) for r in records]
    table_rows = clean[: settings.max_table_rows]
    if len(clean) > len(table_rows):
        logger.info("Table capped at %d of %d records", len(table_rows), len(clean))

    view = ReportView(
        labels=Labels(language),
        answers=tuple(r.answer for r in clean),
        rows=tuple(table_rows),
        filters=request.filters,
        total_count=request.total_count if request.total_count is not None else len(clean),
        filtered_count=request.filtered_count if request.filtered_count is not None else len(clean),
        generated_at=now,
    )

    geometry = _geometry(settings)
    ctx = LayoutContext(geometry, writing_system_for(language, geometry), resources)
    paginator = Paginator(ctx)

    render_header(ctx, view)
    render_breakdown(ctx, paginator, view)
    render_filters(ctx, paginator, view)
    render_table(ctx, paginator, view, repeat_header=settings.repeat_table_header)
    return paginator.finalize(footer_stamp(view))


def compose(
    request: ReportRequest,
    resources: RenderResources,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> RenderResult:
    """Render *request* to PDF bytes.

    Raises :class:`InvalidInput` or :class:`TooManyRecords` before any
    output is produced.
    """
    settings = settings or Settings()
    now = now or datetime.now(timezone.utc)
    pages = layout(request, resources, settings, now)
    title = Labels(Language(request.language))("title")
    data = write_pdf(pages, _geometry(settings), resources, title=title, generated_at=now)
    logger.info("Rendered %d record(s) into %d page(s), %d bytes", len(request.records), len(pages), len(data))
    return RenderResult(data=data, page_count=len(pages), generated_at=now)


def suggest_filename(request: ReportRequest, today: date | None = None) -> str:
    """Download file name, e.g. ``poll-results-2024-05-01-filtered.pdf``."""
    try:
        language = Language(request.language)
    except ValueError:
        language = Language.EN
    today = today or date.today()
    name = f"{Labels(language)('filename')}-{today.isoformat()}"
    if not request.filters.is_default():
        name += "-filtered"
    return sanitize(name, "text") + ".pdf"
