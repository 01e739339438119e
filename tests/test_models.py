"""Tests for session item validation."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from fastmath_analytics.models.types import SessionRecord


def _record(**attributes):
    item = {"PK": "USER#u-1", "SK": "SESSION", "startTime": "2025-03-10T14:00:00.000Z"}
    item.update(attributes)
    return SessionRecord.model_validate(item)


class TestSessionRecordIdentity:
    """Test user id and date derivation."""

    def test_user_id_from_pk(self):
        """userId is the segment after USER#."""
        assert _record().user_id == "u-1"

    def test_user_id_ignores_trailing_segments(self):
        """Only the second #-segment names the user."""
        assert _record(PK="USER#u-2#extra").user_id == "u-2"

    def test_date_is_first_ten_characters(self):
        """Date is taken verbatim from startTime, no timezone conversion."""
        assert _record(startTime="2025-03-10T23:59:59.999Z").date == "2025-03-10"

    def test_pk_without_user_rejected(self):
        """A PK with no user segment is invalid."""
        with pytest.raises(ValidationError):
            _record(PK="USER#")

    def test_missing_start_time_rejected(self):
        """startTime is required."""
        with pytest.raises(ValidationError):
            SessionRecord.model_validate({"PK": "USER#u-1", "SK": "SESSION"})

    def test_short_start_time_rejected(self):
        """startTime must begin with a full date."""
        with pytest.raises(ValidationError):
            _record(startTime="2025-03")


class TestSessionRecordDurations:
    """Test duration defaults and coercion."""

    def test_missing_durations_are_zero(self):
        """Absent duration fields default to 0."""
        record = _record()
        assert record.total_duration == 0.0
        assert record.fluency1_5_practice_time == 0.0

    def test_null_durations_are_zero(self):
        """Null duration fields default to 0."""
        record = _record(learningTime=None, otherTime=None)
        assert record.learning_time == 0.0
        assert record.other_time == 0.0

    def test_decimal_durations_accepted(self):
        """boto3 returns numbers as Decimal."""
        record = _record(totalDuration=Decimal("125.5"), fluency6PracticeTime=Decimal("30"))
        assert record.total_duration == 125.5
        assert record.fluency6_practice_time == 30.0

    def test_negative_duration_rejected(self):
        """Durations are never negative."""
        with pytest.raises(ValidationError):
            _record(assessmentTime=-5)


class TestSessionRecordFacts:
    """Test factsCovered and pageTransitions normalization."""

    def test_bare_ids_and_fact_objects_both_accepted(self):
        """String ids and {factId} objects produce the same ids."""
        record = _record(factsCovered={"learning": ["FACT1", {"factId": "FACT2", "attempts": 3}]})
        assert record.facts_covered == {"learning": ["FACT1", "FACT2"]}

    def test_non_list_category_dropped(self):
        """A category whose value is not a list is ignored."""
        record = _record(factsCovered={"learning": ["FACT1"], "summary": {"count": 4}})
        assert record.facts_covered == {"learning": ["FACT1"]}

    def test_entries_without_fact_id_dropped(self):
        """Objects without factId, empty ids and numbers are ignored."""
        record = _record(factsCovered={"learning": [{"other": 1}, "", 7, {"factId": ""}, "FACT3"]})
        assert record.facts_covered == {"learning": ["FACT3"]}

    def test_missing_page_transitions_is_empty(self):
        """Absent or null pageTransitions become an empty list."""
        assert _record().page_transitions == []
        assert _record(pageTransitions=None).page_transitions == []

    def test_transition_without_facts_by_stage(self):
        """Transitions without factsByStage carry no facts."""
        record = _record(pageTransitions=[{"page": "dashboard"}])
        assert record.page_transitions[0].facts_by_stage == {}

    def test_facts_by_stage_normalized(self):
        """factsByStage lists are kept, non-list stages dropped."""
        record = _record(
            pageTransitions=[{"factsByStage": {"intro": ["FACT2", "FACT3"], "bad": "FACT9"}}]
        )
        assert record.page_transitions[0].facts_by_stage == {"intro": ["FACT2", "FACT3"]}
