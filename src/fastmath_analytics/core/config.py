"""Runtime configuration read from environment variables.

| Variable              | Default            |
| --------------------- | ------------------ |
| SESSION_TABLE         | FastMath2          |
| FASTMATH_STORE        | dynamodb           |
| FASTMATH_DB_PATH      | data/fastmath.db   |
| FASTMATH_WINDOW_DAYS  | 180                |
| FASTMATH_PAGE_SIZE    | (store default)    |
| FASTMATH_SESSION_KIND | SESSION            |
| FASTMATH_LOG_LEVEL    | WARNING            |

AWS credentials and region come from the standard boto3 chain.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from fastmath_analytics.core.window import DEFAULT_WINDOW_DAYS

DEFAULT_TABLE_NAME = "FastMath2"
DEFAULT_DB_PATH = Path("data/fastmath.db")
SESSION_KIND = "SESSION"

STORE_BACKENDS = ("dynamodb", "sql")


@dataclass(frozen=True)
class Settings:
    """Configuration shared by the job and the API."""

    table_name: str = DEFAULT_TABLE_NAME
    store_backend: str = "dynamodb"
    db_path: Path = DEFAULT_DB_PATH
    window_days: int = DEFAULT_WINDOW_DAYS
    page_size: int | None = None
    session_kind: str = SESSION_KIND
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from the environment.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings instance.

        Raises:
            ValueError: If a numeric variable is not an integer or the
                store backend is unknown.
        """
        if environ is None:
            environ = os.environ

        store_backend = environ.get("FASTMATH_STORE", "dynamodb").strip().lower()
        if store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"FASTMATH_STORE must be one of {', '.join(STORE_BACKENDS)}, got {store_backend!r}"
            )

        page_size_raw = environ.get("FASTMATH_PAGE_SIZE")

        return cls(
            table_name=environ.get("SESSION_TABLE", DEFAULT_TABLE_NAME),
            store_backend=store_backend,
            db_path=Path(environ.get("FASTMATH_DB_PATH", str(DEFAULT_DB_PATH))),
            window_days=int(environ.get("FASTMATH_WINDOW_DAYS", DEFAULT_WINDOW_DAYS)),
            page_size=int(page_size_raw) if page_size_raw else None,
            session_kind=environ.get("FASTMATH_SESSION_KIND", SESSION_KIND),
            log_level=environ.get("FASTMATH_LOG_LEVEL", "WARNING").upper(),
        )
