#!/usr/bin/env python3
"""Seed the local session store with demo sessions.

Usage:
    python scripts/seed_sessions.py [db_path]

Writes a small, deterministic set of SESSION items dated over the last
few days into the SQLite store (FASTMATH_DB_PATH, default
data/fastmath.db). Running it twice on the same day adds nothing new.

Afterwards:
    FASTMATH_STORE=sql python scripts/session_metrics.py --stage-times
"""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from fastmath_analytics.core.config import DEFAULT_DB_PATH, SESSION_KIND  # noqa: E402
from fastmath_analytics.core.window import to_iso_timestamp  # noqa: E402
from fastmath_analytics.db import repo  # noqa: E402
from fastmath_analytics.db.session import get_db_session, init_db  # noqa: E402

# Demo identifiers
DEMO_USERS = [
    "0cc40817-0c74-425a-938a-ea6d04c71d60",
    "7395e99d-a213-48b7-b1a1-067816083f3b",
    "d100d2f7-eb88-4f1d-9e63-baaba95654de",
]
DEMO_DAYS_BACK = [1, 2, 5]
DEMO_SESSION_HOURS = [9, 14]


def build_session_item(user_index: int, user_id: str, started_at: datetime) -> dict:
    """Build one DynamoDB-shaped session item.

    Durations vary with the user so averages differ between users.
    """
    scale = user_index + 1
    learning_facts = [f"FACT{n}" for n in range(scale * 2)]
    practice_facts = [{"factId": f"FACT{n}"} for n in range(scale, scale + 3)]

    return {
        "PK": f"USER#{user_id}",
        "SK": SESSION_KIND,
        "startTime": to_iso_timestamp(started_at),
        "totalDuration": 300 * scale,
        "learningTime": 60 * scale,
        "accuracyPracticeTime": 90 * scale,
        "fluency6PracticeTime": 30 * scale,
        "fluency3PracticeTime": 20 * scale,
        "fluency2PracticeTime": 15 * scale,
        "fluency1_5PracticeTime": 10 * scale,
        "fluency1PracticeTime": 5 * scale,
        "assessmentTime": 45 * scale,
        "otherTime": 25 * scale,
        "pageTransitions": [
            {"page": "learn", "factsByStage": {"learning": learning_facts}},
            {"page": "accuracy-practice", "factsByStage": {"accuracyPractice": ["FACT99"]}},
            {"page": "dashboard"},
        ],
        "factsCovered": {
            "learning": learning_facts,
            "accuracyPractice": practice_facts,
        },
    }


def build_demo_items(now: datetime) -> list[dict]:
    """All demo items, relative to now so they fall in the default window."""
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    items = []
    for user_index, user_id in enumerate(DEMO_USERS):
        for days_back in DEMO_DAYS_BACK:
            day = today - timedelta(days=days_back)
            for hour in DEMO_SESSION_HOURS:
                items.append(build_session_item(user_index, user_id, day + timedelta(hours=hour)))
    return items


def main() -> int:
    """Main entry point."""
    if len(sys.argv) > 1:
        db_path = Path(sys.argv[1])
    else:
        db_path = Path(os.environ.get("FASTMATH_DB_PATH", str(DEFAULT_DB_PATH)))

    print(f"Seeding demo sessions into {db_path}...")
    init_db(db_path)

    items = build_demo_items(datetime.now(timezone.utc))
    inserted = 0
    with get_db_session(db_path) as session:
        for item in items:
            if repo.put_session_item(session, item):
                inserted += 1
        total = repo.count_session_items(session, SESSION_KIND)

    print(f"Inserted {inserted} of {len(items)} demo sessions ({total} sessions stored)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
