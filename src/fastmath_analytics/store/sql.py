"""SQL session store.

Reads DynamoDB-shaped session items from the local SQLite table. Used
for development, seeded demos and tests.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError

from fastmath_analytics.core.config import SESSION_KIND
from fastmath_analytics.db import repo
from fastmath_analytics.db.repo import DbSession
from fastmath_analytics.db.session import get_session, init_db
from fastmath_analytics.models.domain import SessionPage, TimeWindow
from fastmath_analytics.store.base import SessionStore, StoreError


class SqlSessionStore(SessionStore):
    """Session store backed by the session_items table."""

    def __init__(
        self,
        session_factory: Callable[[], DbSession],
        *,
        kind: str = SESSION_KIND,
        page_size: int | None = None,
    ):
        """Initialize store.

        Args:
            session_factory: Returns a new database session per page.
            kind: Record kind (SK) to match.
            page_size: Rows per page. None fetches everything in one page.
        """
        super().__init__(kind=kind, page_size=page_size)
        self._session_factory = session_factory

    @classmethod
    def from_path(cls, db_path: Path | None = None, **kwargs: Any) -> SqlSessionStore:
        """Create a store for a SQLite file, creating the table if needed.

        Raises:
            StoreError: If the database cannot be opened.
        """
        try:
            init_db(db_path)
        except SQLAlchemyError as e:
            raise StoreError(f"Cannot open session database {db_path}: {e}") from e
        return cls(partial(get_session, db_path), **kwargs)

    def fetch_page(self, window: TimeWindow, cursor: dict[str, Any] | None) -> SessionPage:
        """Run one keyset-paginated query."""
        session = self._session_factory()
        try:
            return repo.scan_session_page(
                session,
                window,
                kind=self.kind,
                cursor=cursor,
                limit=self.page_size,
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Session query failed: {e}") from e
        finally:
            session.close()
