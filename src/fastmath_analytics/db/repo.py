"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries against the local session table.
Returns raw session items (dicts shaped like DynamoDB items) wrapped in
domain models, so callers never see SQLAlchemy rows.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from fastmath_analytics.db.schema import SessionItem
from fastmath_analytics.models.domain import SessionPage, TimeWindow

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]


# ============================================================================
# Session Item Repository
# ============================================================================


def _cursor_for(row: SessionItem) -> dict[str, str]:
    """Keyset cursor pointing just after this row."""
    return {"PK": row.pk, "startTime": row.start_time}


def scan_session_page(
    session: DbSession,
    window: TimeWindow,
    *,
    kind: str,
    cursor: dict[str, Any] | None = None,
    limit: int | None = None,
) -> SessionPage:
    """Fetch one page of session items inside a time window.

    Rows are ordered by (PK, startTime) and paginated by keyset: the
    cursor names the last row of the previous page. A full page always
    carries a cursor, so the page after it may be empty.

    Args:
        session: Database session.
        window: Inclusive startTime bounds.
        kind: Record kind (SK) to match.
        cursor: Cursor returned with the previous page, or None.
        limit: Maximum rows per page. None returns everything at once.

    Returns:
        SessionPage of raw items plus the next cursor.
    """
    query = session.query(SessionItem).filter(
        SessionItem.sk == kind,
        SessionItem.start_time.between(window.start, window.end),
    )

    if cursor is not None:
        last_pk = cursor["PK"]
        last_start = cursor["startTime"]
        query = query.filter(
            or_(
                SessionItem.pk > last_pk,
                and_(SessionItem.pk == last_pk, SessionItem.start_time > last_start),
            )
        )

    query = query.order_by(SessionItem.pk, SessionItem.start_time)
    if limit is not None:
        query = query.limit(limit)

    rows = query.all()
    items = [json.loads(row.item_json) for row in rows]

    next_cursor = None
    if limit is not None and rows and len(rows) == limit:
        next_cursor = _cursor_for(rows[-1])

    return SessionPage(items=items, cursor=next_cursor)


def put_session_item(session: DbSession, item: dict[str, Any]) -> bool:
    """Insert a session item unless one with the same key exists.

    Args:
        session: Database session.
        item: Raw item with PK, SK and startTime attributes.

    Returns:
        True if the item was inserted, False if it already existed.

    Raises:
        KeyError: If the item lacks one of its key attributes.
    """
    pk, sk, start_time = item["PK"], item["SK"], item["startTime"]
    existing = session.get(SessionItem, (pk, sk, start_time))
    if existing is not None:
        return False

    session.add(
        SessionItem(
            pk=pk,
            sk=sk,
            start_time=start_time,
            item_json=json.dumps(item, sort_keys=True),
        )
    )
    session.flush()
    return True


def count_session_items(session: DbSession, kind: str | None = None) -> int:
    """Count stored items, optionally of a single kind."""
    query = session.query(func.count(SessionItem.pk))
    if kind is not None:
        query = query.filter(SessionItem.sk == kind)
    return query.scalar() or 0


# ============================================================================
# Batch Operations
# ============================================================================


def commit(session: DbSession) -> None:
    """Commit current transaction."""
    session.commit()
