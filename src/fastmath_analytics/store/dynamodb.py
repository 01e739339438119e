"""DynamoDB session store.

Scans the session table with a filter expression and follows
LastEvaluatedKey until the scan is exhausted.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from fastmath_analytics.core.config import DEFAULT_TABLE_NAME, SESSION_KIND
from fastmath_analytics.models.domain import SessionPage, TimeWindow
from fastmath_analytics.store.base import SessionStore, StoreError

logger = logging.getLogger(__name__)


class DynamoDbSessionStore(SessionStore):
    """Session store backed by a DynamoDB table resource."""

    def __init__(
        self,
        table: Any,
        *,
        kind: str = SESSION_KIND,
        page_size: int | None = None,
    ):
        """Initialize store.

        Args:
            table: boto3 DynamoDB Table resource (or anything with scan()).
            kind: Record kind (SK) to match.
            page_size: Items evaluated per scan request (DynamoDB Limit).
        """
        super().__init__(kind=kind, page_size=page_size)
        self._table = table

    @classmethod
    def from_table_name(
        cls,
        table_name: str = DEFAULT_TABLE_NAME,
        **kwargs: Any,
    ) -> DynamoDbSessionStore:
        """Create a store for a table using the default boto3 session.

        Raises:
            StoreError: If the boto3 resource cannot be created.
        """
        try:
            table = boto3.resource("dynamodb").Table(table_name)
        except BotoCoreError as e:
            raise StoreError(f"Cannot open DynamoDB table {table_name}: {e}") from e
        return cls(table, **kwargs)

    def fetch_page(self, window: TimeWindow, cursor: dict[str, Any] | None) -> SessionPage:
        """Run one Scan request."""
        params: dict[str, Any] = {
            "FilterExpression": Attr("SK").eq(self.kind)
            & Attr("startTime").between(window.start, window.end),
        }
        if cursor is not None:
            params["ExclusiveStartKey"] = cursor
        if self.page_size is not None:
            params["Limit"] = self.page_size

        try:
            response = self._table.scan(**params)
        except (BotoCoreError, ClientError) as e:
            raise StoreError(f"DynamoDB scan failed: {e}") from e

        return SessionPage(
            items=response.get("Items", []),
            cursor=response.get("LastEvaluatedKey"),
        )
