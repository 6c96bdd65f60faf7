"""
Shared test fixtures for the card store.

Provides:
- make_card: factory for a minimal card satisfying the CardLike contract
- A fresh store per test, rooted in pytest's tmp_path
- set_due_date / stored_hashes: direct table access standing in for the
  external scheduler
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy import select, update

from repeat.store import CardRecord, CardStore, StoreConfig


@dataclass
class Card:
    card_hash: Optional[str]
    front: str = ""
    back: str = ""
    tags: list = field(default_factory=list)


@pytest.fixture
def make_card():
    def _make_card(card_hash: Optional[str]) -> Card:
        return Card(card_hash=card_hash, front=f"Q {card_hash}", back=f"A {card_hash}", tags=["deck"])
    return _make_card


@pytest.fixture
def store_config(tmp_path) -> StoreConfig:
    return StoreConfig(data_dir=tmp_path / "data")


@pytest_asyncio.fixture
async def store(store_config):
    card_store = await CardStore.open(store_config)
    yield card_store
    await card_store.close()


@pytest.fixture
def cards(make_card):
    return [make_card(h) for h in ("A", "B", "C")]


@pytest.fixture
def catalog(cards):
    return {card.card_hash: card for card in cards}


@pytest.fixture
def set_due_date():
    async def _set_due_date(card_store: CardStore, card_hash: str, due: Optional[date]) -> None:
        """Schedule a card directly, the way the external scheduler would."""
        async with card_store.engine.begin() as conn:
            await conn.execute(
                update(CardRecord).where(CardRecord.card_hash == card_hash).values(due_date=due)
            )
    return _set_due_date


@pytest.fixture
def stored_hashes():
    async def _stored_hashes(card_store: CardStore) -> list:
        async with card_store.engine.connect() as conn:
            result = await conn.execute(select(CardRecord.card_hash).order_by(CardRecord.card_hash))
            return list(result.scalars())
    return _stored_hashes
