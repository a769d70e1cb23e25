"""Bilingual, direction-aware PDF reports of poll results."""

from .errors import InvalidInput, ReportError, ResourceUnavailable, TooManyRecords
from .fonts import RenderResources, load_resources
from .models import Answer, Language, RenderResult, ReportFilters, ReportRequest, VoteRecord
from .report.composer import compose, layout, suggest_filename

__all__ = [
    "Answer",
    "InvalidInput",
    "Language",
    "RenderResources",
    "RenderResult",
    "ReportError",
    "ReportFilters",
    "ReportRequest",
    "ResourceUnavailable",
    "TooManyRecords",
    "VoteRecord",
    "compose",
    "layout",
    "load_resources",
    "suggest_filename",
]
