"""Pydantic models for FastMath session analytics.

SessionRecord mirrors the item shape the exercise runtime writes to the
session table. Report models are returned by the job and the API.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

# Stage durations in the order the report prints them
DURATION_FIELDS = (
    "total_duration",
    "learning_time",
    "accuracy_practice_time",
    "fluency6_practice_time",
    "fluency3_practice_time",
    "fluency2_practice_time",
    "fluency1_5_practice_time",
    "fluency1_practice_time",
    "assessment_time",
    "other_time",
)


def _fact_id(entry: Any) -> str | None:
    """Return the fact id of a bare id string or a {"factId": ...} object."""
    if isinstance(entry, str):
        return entry or None
    if isinstance(entry, dict):
        fact_id = entry.get("factId")
        if isinstance(fact_id, str) and fact_id:
            return fact_id
    return None


def normalize_fact_lists(value: Any, field_name: str) -> dict[str, list[str]]:
    """Coerce a category -> facts mapping into category -> list of fact ids.

    Values that are not lists and list entries without a usable fact id
    are dropped and logged at debug level.
    """
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.debug(f"Ignoring {field_name}: expected a mapping, got {type(value).__name__}")
        return {}

    facts: dict[str, list[str]] = {}
    for category, entries in value.items():
        if not isinstance(entries, list):
            logger.debug(f"Ignoring {field_name}[{category!r}]: not a list")
            continue
        ids = []
        for entry in entries:
            fact_id = _fact_id(entry)
            if fact_id is None:
                logger.debug(f"Ignoring {field_name}[{category!r}] entry without fact id: {entry!r}")
                continue
            ids.append(fact_id)
        facts[str(category)] = ids
    return facts


class PageTransition(BaseModel):
    """One page change inside a session."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    facts_by_stage: dict[str, list[str]] = Field(default_factory=dict, alias="factsByStage")

    @field_validator("facts_by_stage", mode="before")
    @classmethod
    def _normalize_facts_by_stage(cls, value: Any) -> dict[str, list[str]]:
        return normalize_fact_lists(value, "factsByStage")


class SessionRecord(BaseModel):
    """A single practice session item.

    Identity is (PK = "USER#<userId>", SK = record kind, startTime).
    Every duration is in seconds and defaults to 0 when absent or null.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    pk: str = Field(alias="PK")
    kind: str | None = Field(default=None, alias="SK")
    start_time: str = Field(alias="startTime", pattern=r"^\d{4}-\d{2}-\d{2}")

    total_duration: float = Field(default=0.0, ge=0, alias="totalDuration")
    learning_time: float = Field(default=0.0, ge=0, alias="learningTime")
    accuracy_practice_time: float = Field(default=0.0, ge=0, alias="accuracyPracticeTime")
    fluency6_practice_time: float = Field(default=0.0, ge=0, alias="fluency6PracticeTime")
    fluency3_practice_time: float = Field(default=0.0, ge=0, alias="fluency3PracticeTime")
    fluency2_practice_time: float = Field(default=0.0, ge=0, alias="fluency2PracticeTime")
    fluency1_5_practice_time: float = Field(default=0.0, ge=0, alias="fluency1_5PracticeTime")
    fluency1_practice_time: float = Field(default=0.0, ge=0, alias="fluency1PracticeTime")
    assessment_time: float = Field(default=0.0, ge=0, alias="assessmentTime")
    other_time: float = Field(default=0.0, ge=0, alias="otherTime")

    page_transitions: list[PageTransition] = Field(default_factory=list, alias="pageTransitions")
    facts_covered: dict[str, list[str]] = Field(default_factory=dict, alias="factsCovered")

    @field_validator("pk")
    @classmethod
    def _pk_names_a_user(cls, value: str) -> str:
        parts = value.split("#")
        if len(parts) < 2 or not parts[1]:
            raise ValueError(f"PK {value!r} does not identify a user")
        return value

    @field_validator(*DURATION_FIELDS, mode="before")
    @classmethod
    def _missing_duration_is_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("page_transitions", mode="before")
    @classmethod
    def _missing_transitions_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("facts_covered", mode="before")
    @classmethod
    def _normalize_facts_covered(cls, value: Any) -> dict[str, list[str]]:
        return normalize_fact_lists(value, "factsCovered")

    @property
    def user_id(self) -> str:
        return self.pk.split("#")[1]

    @property
    def date(self) -> str:
        """Calendar date (YYYY-MM-DD) of startTime, no timezone conversion."""
        return self.start_time[:10]


class MetricAverages(BaseModel):
    """Per user-day averages. Durations are in seconds."""

    total_time: float
    learning_time: float
    accuracy_practice_time: float
    fluency6_practice_time: float
    fluency3_practice_time: float
    fluency2_practice_time: float
    fluency1_5_practice_time: float
    fluency1_practice_time: float
    assessment_time: float
    other_time: float
    pages: float
    facts: float


class SummaryReport(BaseModel):
    """Result of one session metrics run.

    averages is None when no user-day was found.
    """

    window_start: str
    window_end: str
    sessions: int
    skipped_records: int
    user_days: int
    averages: MetricAverages | None


class StageTimeStats(BaseModel):
    """Distribution of seconds spent per fact in one learning stage."""

    stage: str
    data_points: int
    p25: float | None
    p50: float | None
    p75: float | None
