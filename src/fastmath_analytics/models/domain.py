"""Domain models for FastMath session analytics.

Pure Python dataclasses used between the store layer and the
aggregation code. Independent of boto3 and SQLAlchemy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ============================================================================
# Store Domain
# ============================================================================


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive [start, end] range of ISO-8601 UTC timestamps.

    ISO-8601 strings in the same format sort chronologically, so stores
    compare them lexically.
    """

    start: str
    end: str


@dataclass
class SessionPage:
    """One page of raw session items plus the cursor for the next page.

    cursor is None on the last page.
    """

    items: list[dict[str, Any]]
    cursor: dict[str, Any] | None = None


# ============================================================================
# Aggregation Domain
# ============================================================================


@dataclass
class UserDayAggregate:
    """All sessions of one user on one calendar date, folded together."""

    user_id: str
    date: str
    total_time: float = 0.0
    learning_time: float = 0.0
    accuracy_practice_time: float = 0.0
    fluency6_practice_time: float = 0.0
    fluency3_practice_time: float = 0.0
    fluency2_practice_time: float = 0.0
    fluency1_5_practice_time: float = 0.0
    fluency1_practice_time: float = 0.0
    assessment_time: float = 0.0
    other_time: float = 0.0
    pages: int = 0
    facts: set[str] = field(default_factory=set)
