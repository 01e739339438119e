"""Database schema for the local session store.

Holds session items in the same shape the DynamoDB table stores them.
The key columns are copied out of the item so the store can filter
and paginate in SQL; item_json keeps the full item.
"""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class SessionItem(Base):
    """One session item keyed like the DynamoDB table (PK, SK, startTime)."""

    __tablename__ = "session_items"

    pk: Mapped[str] = mapped_column(String(128), primary_key=True)
    sk: Mapped[str] = mapped_column(String(64), primary_key=True)
    start_time: Mapped[str] = mapped_column(String(32), primary_key=True)
    item_json: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (Index("ix_session_items_sk_start_time", "sk", "start_time"),)
