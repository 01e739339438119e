"""Shared pytest fixtures for fastmath_analytics tests."""

from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fastmath_analytics.db.schema import Base
from fastmath_analytics.models.domain import SessionPage, TimeWindow
from fastmath_analytics.store.base import SessionStore, StoreError

WINDOW = TimeWindow(start="2025-01-01T00:00:00.000Z", end="2025-06-30T00:00:00.000Z")


class ListSessionStore(SessionStore):
    """In-memory store serving a fixed item list in pages.

    The cursor is the offset of the next page, like an opaque
    LastEvaluatedKey. Records every cursor it was asked for.
    """

    def __init__(self, items: list[dict[str, Any]], page_size: int | None = None):
        super().__init__(page_size=page_size)
        self.items = items
        self.requested_cursors: list[dict[str, Any] | None] = []

    def fetch_page(self, window, cursor):
        self.requested_cursors.append(cursor)
        start = cursor["offset"] if cursor else 0
        if self.page_size is None:
            return SessionPage(items=self.items[start:], cursor=None)
        end = start + self.page_size
        next_cursor = {"offset": end} if end < len(self.items) else None
        return SessionPage(items=self.items[start:end], cursor=next_cursor)


class FailingSessionStore(ListSessionStore):
    """Serves pages until fail_on_page, then raises StoreError."""

    def __init__(self, items, page_size, fail_on_page: int):
        super().__init__(items, page_size=page_size)
        self.fail_on_page = fail_on_page

    def fetch_page(self, window, cursor):
        if len(self.requested_cursors) + 1 == self.fail_on_page:
            self.requested_cursors.append(cursor)
            raise StoreError("ProvisionedThroughputExceededException")
        return super().fetch_page(window, cursor)


def session_item(
    user_id: str = "user-1",
    start_time: str = "2025-03-10T14:00:00.000Z",
    **attributes: Any,
) -> dict[str, Any]:
    """Build a raw session item shaped like the DynamoDB table rows."""
    item = {"PK": f"USER#{user_id}", "SK": "SESSION", "startTime": start_time}
    item.update(attributes)
    return item


@pytest.fixture
def window():
    """Fixed half-year window used by store-independent tests."""
    return WINDOW


@pytest.fixture
def make_item():
    """Factory for raw session items."""
    return session_item


@pytest.fixture
def list_store():
    """Factory for in-memory paged stores."""
    return ListSessionStore


@pytest.fixture
def failing_store():
    """Factory for stores that fail on a given page."""
    return FailingSessionStore


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the in-memory engine."""
    return sessionmaker(bind=engine)


@pytest.fixture
def session(session_factory):
    """Create a database session for testing."""
    session = session_factory()
    yield session
    session.close()
