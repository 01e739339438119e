"""Session metrics API endpoints.

GET /api/session-metrics             - Per user-day averages
GET /api/session-metrics/stage-times - Seconds-per-fact percentiles by stage
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from fastmath_analytics.aggregation.session_metrics import compute_session_metrics, parse_session
from fastmath_analytics.aggregation.stage_times import stage_time_stats
from fastmath_analytics.api.app import get_session_store, get_settings
from fastmath_analytics.core.config import Settings
from fastmath_analytics.core.window import trailing_window
from fastmath_analytics.models.domain import TimeWindow
from fastmath_analytics.models.types import StageTimeStats, SummaryReport
from fastmath_analytics.store import SessionStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_WINDOW_DAYS = 3650


def _window(days: int | None, settings: Settings) -> TimeWindow:
    return trailing_window(days if days is not None else settings.window_days)


@router.get("/session-metrics", response_model=SummaryReport)
def get_session_metrics(
    days: int | None = Query(None, ge=1, le=MAX_WINDOW_DAYS),
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
) -> SummaryReport:
    """Average time, pages and facts per user per day.

    Args:
        days: Trailing window length. Defaults to the configured window.
        settings: Runtime settings (injected).
        store: Session store (injected).

    Returns:
        SummaryReport; averages is null when the window has no sessions.

    Raises:
        HTTPException: 502 if the store cannot be read.
    """
    window = _window(days, settings)
    try:
        return compute_session_metrics(store, window)
    except StoreError as e:
        logger.error(f"Session metrics scan failed: {e}")
        raise HTTPException(status_code=502, detail="Session store unavailable") from e


@router.get("/session-metrics/stage-times", response_model=list[StageTimeStats])
def get_stage_times(
    days: int | None = Query(None, ge=1, le=MAX_WINDOW_DAYS),
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
) -> list[StageTimeStats]:
    """Seconds-per-fact percentiles for each learning stage.

    Raises:
        HTTPException: 502 if the store cannot be read.
    """
    window = _window(days, settings)
    try:
        parsed = (parse_session(item) for item in store.scan(window))
        records = [record for record in parsed if record is not None]
    except StoreError as e:
        logger.error(f"Stage time scan failed: {e}")
        raise HTTPException(status_code=502, detail="Session store unavailable") from e

    return stage_time_stats(records)
