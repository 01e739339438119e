"""SQLite engine and sessions for the local session store."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from fastmath_analytics.core.config import DEFAULT_DB_PATH
from fastmath_analytics.db.schema import Base

# Resolved database path -> engine
_engines: dict[Path, Engine] = {}


def get_engine(db_path: Path | None = None) -> Engine:
    """Engine for a SQLite file, created once per resolved path.

    The file's parent directory is created on first use. Connections may
    be used from API worker threads.
    """
    path = Path(db_path or DEFAULT_DB_PATH).resolve()
    engine = _engines.get(path)
    if engine is None:
        path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        _engines[path] = engine
    return engine


def get_session(db_path: Path | None = None) -> Session:
    """New session on the database. The caller closes it."""
    return Session(get_engine(db_path))


@contextmanager
def get_db_session(db_path: Path | None = None) -> Generator[Session, None, None]:
    """Session that commits on success and rolls back on error."""
    session = get_session(db_path)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(db_path: Path | None = None) -> None:
    """Create the session table if it does not exist."""
    Base.metadata.create_all(get_engine(db_path))
