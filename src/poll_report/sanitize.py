"""Cleaning and bounding of per-record text fields.

Every function here returns a best-effort value; malformed input is
degraded (and logged where it matters), never raised.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from .models import VoteRecord

logger = logging.getLogger("poll_report.sanitize")

ELLIPSIS = "..."
PHONE_PLACEHOLDER = "N/A"

MAX_LENGTHS = {
    "name": 100,
    "phone": 20,
    "search": 100,
    "text": 200,
}

# Tab, LF and CR survive this pass and are folded by the whitespace collapse
_RE_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_RE_SPACES = re.compile(r"\s+")
_RE_PHONE_JUNK = re.compile(r"[^0-9+\-() ]")

# Epoch values above this are taken to be milliseconds (JavaScript Date)
_EPOCH_MS_THRESHOLD = 1e11


def sanitize(value: object, kind: str = "text", max_length: int | None = None) -> str:
    """Clean *value* and truncate it to the limit for *kind*."""
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    text = _RE_CONTROL.sub("", text)
    text = _RE_SPACES.sub(" ", text).strip()
    limit = max_length if max_length is not None else MAX_LENGTHS.get(kind, MAX_LENGTHS["text"])
    if len(text) > limit:
        text = text[:limit] + ELLIPSIS
    return text


def sanitize_phone(value: object) -> str:
    """Keep only digits, ``+``, ``-``, parentheses and spaces."""
    if not isinstance(value, str):
        return PHONE_PLACEHOLDER
    cleaned = sanitize(_RE_PHONE_JUNK.sub("", value), "phone")
    return cleaned or PHONE_PLACEHOLDER


def sanitize_date(value: object, now: datetime | None = None) -> datetime:
    """Parse a timestamp; substitute *now* (or the current time) on failure."""
    if isinstance(value, datetime):
        return value
    try:
        if isinstance(value, bool):
            raise TypeError("boolean is not a timestamp")
        if isinstance(value, (int, float)):
            seconds = value / 1000 if abs(value) > _EPOCH_MS_THRESHOLD else value
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        if isinstance(value, str):
            text = value.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            return datetime.fromisoformat(text)
        raise TypeError(f"unsupported timestamp type {type(value).__name__}")
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        fallback = now or datetime.now(timezone.utc)
        logger.warning("Unparseable timestamp %r (%s); using %s", value, exc, fallback.isoformat())
        return fallback


@dataclass(frozen=True)
class CleanRecord:
    name: str
    phone: str
    answer: str
    created_at: datetime


def sanitize_record(record: VoteRecord, now: datetime | None = None) -> CleanRecord:
    answer = record.answer.value if hasattr(record.answer, "value") else record.answer
    return CleanRecord(
        name=sanitize(record.name, "name"),
        phone=sanitize_phone(record.phone),
        answer=sanitize(answer, "text"),
        created_at=sanitize_date(record.created_at, now=now),
    )
