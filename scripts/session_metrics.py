#!/usr/bin/env python3
"""Print average time per user per day over the last 180 days.

Usage:
    python scripts/session_metrics.py [--days N] [--stage-times] [-l]

Reads the DynamoDB table named by SESSION_TABLE (default FastMath2), or
the local SQLite store when FASTMATH_STORE=sql.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from fastmath_analytics.jobs.session_metrics import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
