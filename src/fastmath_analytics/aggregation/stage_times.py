"""Per-fact time distribution by learning stage.

A session that spent t seconds in a stage and covered n facts of that
stage contributes n data points of t / n seconds. Percentiles use the
nearest-rank method.
"""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from fastmath_analytics.aggregation.session_metrics import to_fixed
from fastmath_analytics.models.types import SessionRecord, StageTimeStats

# factsCovered category -> SessionRecord duration field
STAGE_TIME_FIELDS = {
    "learning": "learning_time",
    "accuracyPractice": "accuracy_practice_time",
    "fluency6Practice": "fluency6_practice_time",
    "fluency3Practice": "fluency3_practice_time",
    "fluency2Practice": "fluency2_practice_time",
    "fluency1_5Practice": "fluency1_5_practice_time",
    "fluency1Practice": "fluency1_practice_time",
}

STAGE_LABELS = {
    "learning": "Learning",
    "accuracyPractice": "Accuracy Practice",
    "fluency6Practice": "Fluency 6s Practice",
    "fluency3Practice": "Fluency 3s Practice",
    "fluency2Practice": "Fluency 2s Practice",
    "fluency1_5Practice": "Fluency 1.5s Practice",
    "fluency1Practice": "Fluency 1s Practice",
}


def nearest_rank_percentile(sorted_values: np.ndarray, fraction: float) -> float:
    """Nearest-rank percentile of an ascending, non-empty array.

    Args:
        sorted_values: Values sorted ascending.
        fraction: Percentile as a fraction in (0, 1].

    Returns:
        The value at rank ceil(N * fraction).
    """
    index = max(0, math.ceil(len(sorted_values) * fraction) - 1)
    return float(sorted_values[index])


def collect_stage_times(records: Iterable[SessionRecord]) -> dict[str, list[float]]:
    """Seconds-per-fact data points for every stage."""
    times: dict[str, list[float]] = {stage: [] for stage in STAGE_TIME_FIELDS}

    for record in records:
        for stage, time_field in STAGE_TIME_FIELDS.items():
            fact_count = len(record.facts_covered.get(stage, []))
            stage_time = getattr(record, time_field)
            if fact_count > 0 and stage_time > 0:
                times[stage].extend([stage_time / fact_count] * fact_count)

    return times


def stage_time_stats(records: Iterable[SessionRecord]) -> list[StageTimeStats]:
    """Compute p25/p50/p75 seconds-per-fact for every stage.

    Stages without data points report None percentiles.
    """
    stats = []
    for stage, values in collect_stage_times(records).items():
        if not values:
            stats.append(StageTimeStats(stage=stage, data_points=0, p25=None, p50=None, p75=None))
            continue

        ordered = np.sort(np.asarray(values, dtype=np.float64))
        stats.append(
            StageTimeStats(
                stage=stage,
                data_points=len(values),
                p25=nearest_rank_percentile(ordered, 0.25),
                p50=nearest_rank_percentile(ordered, 0.50),
                p75=nearest_rank_percentile(ordered, 0.75),
            )
        )
    return stats


def format_stage_times(stats: list[StageTimeStats]) -> list[str]:
    """Render stage statistics as printable lines, two decimals each."""
    lines = ["Seconds per fact by stage:"]
    for stat in stats:
        label = STAGE_LABELS.get(stat.stage, stat.stage)
        lines.append("")
        if stat.data_points == 0:
            lines.append(f"{label}: No data found")
            continue
        lines.append(f"{label} ({stat.data_points} data points):")
        lines.append(f"  25th percentile: {to_fixed(stat.p25, 2)} seconds")
        lines.append(f"  50th percentile (median): {to_fixed(stat.p50, 2)} seconds")
        lines.append(f"  75th percentile: {to_fixed(stat.p75, 2)} seconds")
    return lines
