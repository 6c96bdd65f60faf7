"""
Card Store Schemas

Typed views over the data the store exchanges with its callers:
- CardLike: what the store needs from an externally owned card
- CardReviewState: read-only snapshot of one persisted review record
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


@runtime_checkable
class CardLike(Protocol):
    """
    Any card object the store can register.

    The hash must be stable and unique per distinct card content. Cards are
    copied with copy.deepcopy before being handed back from queries.
    """
    card_hash: str


class CardReviewState(BaseModel):
    """Snapshot of a row in the cards table."""
    model_config = ConfigDict(frozen=True)

    card_hash: str
    added_at: str
    last_reviewed_at: Optional[str] = None
    stability: Optional[float] = None
    difficulty: Optional[float] = None
    interval_raw: Optional[float] = None
    interval_days: int = 0
    due_date: Optional[date] = None
    review_count: int = 0

    @property
    def is_new(self) -> bool:
        """True until the scheduler records a first review."""
        return self.last_reviewed_at is None
