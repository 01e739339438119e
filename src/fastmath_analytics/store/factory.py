"""Build the configured session store."""

from __future__ import annotations

from fastmath_analytics.core.config import Settings
from fastmath_analytics.store.base import SessionStore


def build_store(settings: Settings) -> SessionStore:
    """Create the store named by settings.store_backend.

    Args:
        settings: Runtime configuration.

    Returns:
        DynamoDbSessionStore or SqlSessionStore.

    Raises:
        ValueError: If the backend name is unknown.
        StoreError: If the backend cannot be opened.
    """
    if settings.store_backend == "dynamodb":
        from fastmath_analytics.store.dynamodb import DynamoDbSessionStore

        return DynamoDbSessionStore.from_table_name(
            settings.table_name,
            kind=settings.session_kind,
            page_size=settings.page_size,
        )

    if settings.store_backend == "sql":
        from fastmath_analytics.store.sql import SqlSessionStore

        return SqlSessionStore.from_path(
            settings.db_path,
            kind=settings.session_kind,
            page_size=settings.page_size,
        )

    raise ValueError(f"Unknown store backend: {settings.store_backend!r}")
