"""Data models for poll report requests and rendered pages."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union


class Language(str, Enum):
    """Report language; also selects the document direction."""

    EN = "en"
    AR = "ar"


class Answer(str, Enum):
    """Canonical poll answers."""

    YES = "Yes"
    NO = "No"


# Filter values the export route treats as "no answer filter"
DEFAULT_ANSWER_FILTERS = frozenset({"", "all", "الكل"})

Color = tuple[float, float, float]


@dataclass(frozen=True)
class VoteRecord:
    name: Any
    phone: Any
    answer: Any
    created_at: Any = None

    @classmethod
    def from_dict(cls, data: dict) -> VoteRecord:
        """Build a record from the wire format (``createdAt`` or snake_case keys)."""
        created = data.get("createdAt", data.get("created_at", data.get("timestamp")))
        return cls(
            name=data.get("name"),
            phone=data.get("phone"),
            answer=data.get("answer"),
            created_at=created,
        )


@dataclass(frozen=True)
class ReportFilters:
    answer: str | None = None
    search: str | None = None

    # Non-string values from a malformed payload count as no filter

    @property
    def answer_text(self) -> str:
        return self.answer.strip() if isinstance(self.answer, str) else ""

    @property
    def search_text(self) -> str:
        return self.search.strip() if isinstance(self.search, str) else ""

    def is_default(self) -> bool:
        """True when neither an answer filter nor a search term is active."""
        return self.answer_text in DEFAULT_ANSWER_FILTERS and not self.search_text


@dataclass(frozen=True)
class ReportRequest:
    """Everything the renderer needs; already filtered and ordered by the caller."""

    language: Language | str
    records: Sequence[VoteRecord]
    filters: ReportFilters = field(default_factory=ReportFilters)
    total_count: int | None = None
    filtered_count: int | None = None

    @classmethod
    def from_dict(cls, payload: dict) -> ReportRequest:
        """Build a request from the JSON interface payload.

        ``records`` is passed through as given when it is not a list so that
        the composer can reject it with a typed error.
        """
        raw = payload.get("records")
        records: Any = raw
        if isinstance(raw, list):
            records = tuple(
                VoteRecord.from_dict(r) if isinstance(r, dict) else r for r in raw
            )
        return cls(
            language=payload.get("language", Language.EN.value),
            records=records,
            filters=ReportFilters(
                answer=payload.get("answerFilter"),
                search=payload.get("searchTerm"),
            ),
            total_count=payload.get("totalCount"),
            filtered_count=payload.get("filteredCount"),
        )


# ---------------------------------------------------------------------------
# Draw instructions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextOp:
    """Text placed with its baseline at (x, y); ``text`` is in visual order."""

    x: float
    y: float
    text: str
    source: str
    font: str
    size: float
    color: Color
    rtl: bool = False
    role: str = ""
    row: int | None = None
    column: str | None = None


@dataclass(frozen=True)
class RectOp:
    x0: float
    y0: float
    x1: float
    y1: float
    fill: Color | None = None
    stroke: Color | None = None
    width: float = 0.5
    role: str = ""
    row: int | None = None


@dataclass(frozen=True)
class LineOp:
    x0: float
    y0: float
    x1: float
    y1: float
    color: Color
    width: float = 0.5
    role: str = ""


DrawInstruction = Union[TextOp, RectOp, LineOp]


@dataclass
class Page:
    index: int
    instructions: list[DrawInstruction] = field(default_factory=list)
    number: int | None = None

    def texts(self, role: str | None = None) -> list[TextOp]:
        """Text instructions on this page, optionally restricted to *role*."""
        return [
            op for op in self.instructions
            if isinstance(op, TextOp) and (role is None or op.role == role)
        ]

    def rows(self) -> list[int]:
        """Table row indices drawn on this page, in drawing order."""
        seen: list[int] = []
        for op in self.instructions:
            if isinstance(op, RectOp) and op.role == "row" and op.row is not None:
                seen.append(op.row)
        return seen


@dataclass(frozen=True)
class RenderResult:
    data: bytes
    page_count: int
    generated_at: datetime

    @property
    def byte_size(self) -> int:
        return len(self.data)
