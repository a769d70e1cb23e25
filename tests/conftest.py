"""Shared fixtures: render resources are loaded once per test session."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from poll_report.fonts import load_resources
from poll_report.models import VoteRecord

NOW = datetime(2024, 5, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def resources():
    return load_resources()


def vote(
    name="Alice Smith",
    phone="+1 555 0100",
    answer="Yes",
    created="2024-05-01T10:00:00Z",
) -> VoteRecord:
    return VoteRecord(name=name, phone=phone, answer=answer, created_at=created)
