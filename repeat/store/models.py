"""
SQLAlchemy ORM Models for the Card Store

Defines the single `cards` table holding spaced-repetition state per card.
Scheduling columns are written by the external scheduler, never by the store.
"""

from sqlalchemy import Column, Date, Float, Integer, String
from sqlalchemy.orm import declarative_base

from repeat.store.constants import TABLE_NAME

Base = declarative_base()


class CardRecord(Base):
    """
    Review record for a single card, keyed by its content hash.

    A freshly registered card has every scheduling field empty and no
    due_date, which makes it due immediately.
    """
    __tablename__ = TABLE_NAME

    card_hash = Column(String, primary_key=True, nullable=False)
    added_at = Column(String, nullable=False)  # RFC3339, set once at registration

    # Scheduler state (opaque to the store)
    last_reviewed_at = Column(String, nullable=True)
    stability = Column(Float, nullable=True)
    difficulty = Column(Float, nullable=True)
    interval_raw = Column(Float, nullable=True)
    interval_days = Column(Integer, nullable=False, default=0, server_default="0")
    due_date = Column(Date, nullable=True)  # NULL = never scheduled, due now
    review_count = Column(Integer, nullable=False, default=0, server_default="0")

    def __repr__(self):
        return f"<CardRecord({self.card_hash}, due={self.due_date})>"
