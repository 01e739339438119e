"""Session metrics aggregation.

Folds session items into per user-day aggregates, then averages every
metric across user-days. Domain logic is pure: items come from a
SessionStore scan and nothing is written back.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

import numpy as np
from pydantic import ValidationError

from fastmath_analytics.models.domain import TimeWindow, UserDayAggregate
from fastmath_analytics.models.types import MetricAverages, SessionRecord, SummaryReport
from fastmath_analytics.store.base import SessionStore

logger = logging.getLogger(__name__)

# (SessionRecord field, UserDayAggregate field)
DURATION_BUCKETS = (
    ("total_duration", "total_time"),
    ("learning_time", "learning_time"),
    ("accuracy_practice_time", "accuracy_practice_time"),
    ("fluency6_practice_time", "fluency6_practice_time"),
    ("fluency3_practice_time", "fluency3_practice_time"),
    ("fluency2_practice_time", "fluency2_practice_time"),
    ("fluency1_5_practice_time", "fluency1_5_practice_time"),
    ("fluency1_practice_time", "fluency1_practice_time"),
    ("assessment_time", "assessment_time"),
    ("other_time", "other_time"),
)

# Column order of the reduce matrix; matches MetricAverages fields
METRIC_NAMES = tuple(bucket for _, bucket in DURATION_BUCKETS) + ("pages", "facts")

REPORT_LABELS = {
    "total_time": "Total",
    "learning_time": "Learning",
    "accuracy_practice_time": "Accuracy Practice",
    "fluency6_practice_time": "Fluency 6s",
    "fluency3_practice_time": "Fluency 3s",
    "fluency2_practice_time": "Fluency 2s",
    "fluency1_5_practice_time": "Fluency 1.5s",
    "fluency1_practice_time": "Fluency 1s",
    "assessment_time": "Assessment",
    "other_time": "Other",
}

NO_DATA_MESSAGE = "No data found"


def to_fixed(value: float, places: int = 1) -> str:
    """Format with a fixed number of decimals, rounding exact ties up.

    Decimal(float) is exact, so ties are judged on the binary value
    (100.25 -> "100.3", 0.125 -> "0.13").
    """
    return str(Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def parse_session(item: dict[str, Any]) -> SessionRecord | None:
    """Validate a raw item, or return None if it is malformed.

    Malformed items (no user in PK, no startTime, negative durations)
    are skipped with a warning rather than aborting the run.
    """
    try:
        return SessionRecord.model_validate(item)
    except ValidationError as e:
        key = (item.get("PK"), item.get("SK"), item.get("startTime"))
        logger.warning(f"Skipping malformed session item {key}: {e.error_count()} errors")
        return None


def session_fact_ids(record: SessionRecord) -> set[str]:
    """Every fact id a session touched, from factsCovered and page transitions."""
    facts: set[str] = set()
    for fact_ids in record.facts_covered.values():
        facts.update(fact_ids)
    for transition in record.page_transitions:
        for fact_ids in transition.facts_by_stage.values():
            facts.update(fact_ids)
    return facts


class SessionAggregator:
    """Accumulates sessions into user-day aggregates.

    One aggregate exists per (user_id, date) key, created on the first
    session that maps to it.
    """

    def __init__(self) -> None:
        self.user_days: dict[tuple[str, str], UserDayAggregate] = {}
        self.sessions = 0
        self.skipped = 0

    def add_item(self, item: dict[str, Any]) -> SessionRecord | None:
        """Parse and fold a raw store item.

        Malformed items are counted in skipped and dropped.

        Returns:
            The parsed record, or None if the item was skipped.
        """
        record = parse_session(item)
        if record is None:
            self.skipped += 1
            return None
        self.add(record)
        return record

    def add(self, record: SessionRecord) -> UserDayAggregate:
        """Fold one session into its user-day aggregate.

        Returns:
            The aggregate the session was folded into.
        """
        key = (record.user_id, record.date)
        day = self.user_days.get(key)
        if day is None:
            day = UserDayAggregate(user_id=record.user_id, date=record.date)
            self.user_days[key] = day

        for record_field, bucket in DURATION_BUCKETS:
            setattr(day, bucket, getattr(day, bucket) + getattr(record, record_field))

        day.pages += len(record.page_transitions)
        day.facts.update(session_fact_ids(record))

        self.sessions += 1
        return day

    def averages(self) -> MetricAverages | None:
        """Mean of every metric across user-days, or None if there are none."""
        return average_user_days(list(self.user_days.values()))

    def report(self, window: TimeWindow) -> SummaryReport:
        """Build the summary report for everything folded so far."""
        return SummaryReport(
            window_start=window.start,
            window_end=window.end,
            sessions=self.sessions,
            skipped_records=self.skipped,
            user_days=len(self.user_days),
            averages=self.averages(),
        )


def average_user_days(days: list[UserDayAggregate]) -> MetricAverages | None:
    """Average each metric over user-day aggregates.

    Args:
        days: Aggregates to reduce.

    Returns:
        MetricAverages, or None when days is empty.
    """
    if not days:
        return None

    matrix = np.array(
        [
            [getattr(day, bucket) for _, bucket in DURATION_BUCKETS] + [day.pages, len(day.facts)]
            for day in days
        ],
        dtype=np.float64,
    )
    means = matrix.mean(axis=0)

    return MetricAverages(**{name: float(value) for name, value in zip(METRIC_NAMES, means)})


def aggregate_sessions(items: Iterable[dict[str, Any]], window: TimeWindow) -> SummaryReport:
    """Fold raw session items and reduce them to a summary report."""
    aggregator = SessionAggregator()
    for item in items:
        aggregator.add_item(item)

    logger.info(
        f"Folded {aggregator.sessions} sessions into {len(aggregator.user_days)} user-days "
        f"({aggregator.skipped} skipped)"
    )
    return aggregator.report(window)


def compute_session_metrics(store: SessionStore, window: TimeWindow) -> SummaryReport:
    """Scan the store over a window and summarize it.

    Raises:
        StoreError: If any page fetch fails. No partial report is built.
    """
    return aggregate_sessions(store.scan(window), window)


def format_report(report: SummaryReport) -> list[str]:
    """Render a report as the lines the job prints.

    Every average has one decimal place, exact ties rounded up.
    """
    averages = report.averages
    if averages is None:
        return [NO_DATA_MESSAGE]

    lines = ["Average time per user per day (seconds):"]
    for name, label in REPORT_LABELS.items():
        lines.append(f"{label}: {to_fixed(getattr(averages, name))}")

    lines.append("")
    lines.append(f"Average pages per user per day: {to_fixed(averages.pages)}")
    lines.append("")
    lines.append(f"Average facts per user per day: {to_fixed(averages.facts)}")
    return lines
