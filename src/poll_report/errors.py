"""Exceptions surfaced to callers of the report renderer."""

from __future__ import annotations


class ReportError(Exception):
    """Base class for every error the renderer reports to its caller."""


class InvalidInput(ReportError):
    """The request is malformed (records not a sequence, unknown language)."""


class TooManyRecords(ReportError):
    """The request carries more records than the renderer accepts."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"Report has {count} records; the limit is {limit}")
        self.count = count
        self.limit = limit


class ResourceUnavailable(ReportError):
    """Fonts or shaping data could not be loaded at startup."""
