"""Session store module.

Per-backend adapters behind one paginated read interface:
- store/base.py     - SessionStore, StoreError, the cursor loop
- store/dynamodb.py - boto3 Table.scan with LastEvaluatedKey cursors
- store/sql.py      - local SQLite table with keyset cursors

Forbidden: aggregation logic, report formatting.
"""

from fastmath_analytics.store.base import SessionStore, StoreError
from fastmath_analytics.store.factory import build_store

__all__ = [
    "SessionStore",
    "StoreError",
    "build_store",
]
