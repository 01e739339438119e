"""Base session store interface.

A store answers one question: give me the next page of session items of
a given kind whose startTime falls inside a window. Kind and window
filtering happen in the store; callers trust what they receive.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterator

from fastmath_analytics.core.config import SESSION_KIND
from fastmath_analytics.models.domain import SessionPage, TimeWindow

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when a page of session items cannot be fetched."""

    pass


class SessionStore(ABC):
    """Abstract base class for paginated session stores.

    Subclasses implement fetch_page(); scan() drives the cursor loop.
    """

    def __init__(self, *, kind: str = SESSION_KIND, page_size: int | None = None):
        """Initialize store.

        Args:
            kind: Record kind (SK) to match.
            page_size: Page size hint. None uses the backend default.
        """
        if page_size is not None and page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.kind = kind
        self.page_size = page_size

    @abstractmethod
    def fetch_page(self, window: TimeWindow, cursor: dict[str, Any] | None) -> SessionPage:
        """Fetch one page of items.

        Args:
            window: Inclusive startTime bounds.
            cursor: Cursor from the previous page, None for the first page.

        Returns:
            SessionPage with raw items and the next cursor (None when done).

        Raises:
            StoreError: If the backend request fails.
        """
        pass

    def scan(self, window: TimeWindow) -> Iterator[dict[str, Any]]:
        """Yield every matching item, one page request at a time.

        Pages are requested sequentially; the next request is only made
        after the previous page has been consumed. A failed request raises
        StoreError and ends the iteration.

        Args:
            window: Inclusive startTime bounds.

        Yields:
            Raw session items.
        """
        cursor: dict[str, Any] | None = None
        pages = 0
        items = 0

        while True:
            page = self.fetch_page(window, cursor)
            pages += 1
            items += len(page.items)
            logger.debug(f"Fetched page {pages} with {len(page.items)} items")

            yield from page.items

            cursor = page.cursor
            if cursor is None:
                break

        logger.info(f"Scanned {items} items in {pages} pages")
