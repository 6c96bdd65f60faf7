"""
Card Store - spaced-repetition persistence

Keeps one review record per card in an embedded SQLite file and answers
"which cards are due today" queries.

Quick start:
    from repeat import store

    # Open (creates cards.db and the schema on first use)
    card_store = await store.CardStore.open()

    # Register newly discovered cards
    await card_store.add_cards_batch(cards)

    # Get today's review set
    catalog = {card.card_hash: card for card in cards}
    due = await card_store.due_today(catalog, card_limit=20)
"""

# Store API
from repeat.store.database import CardStore

# Configuration
from repeat.store.config import StoreConfig, default_data_dir

# Errors
from repeat.store.errors import CardStoreError, InitializationError, StorageError

# Row shapes
from repeat.store.models import CardRecord
from repeat.store.schemas import CardLike, CardReviewState

# Constants
from repeat.store.constants import APP_NAME, DB_FILENAME, POOL_SIZE, TABLE_NAME


__all__ = [
    # Store
    "CardStore",

    # Configuration
    "StoreConfig",
    "default_data_dir",

    # Errors
    "CardStoreError",
    "InitializationError",
    "StorageError",

    # Row shapes
    "CardRecord",
    "CardLike",
    "CardReviewState",

    # Constants
    "APP_NAME",
    "DB_FILENAME",
    "POOL_SIZE",
    "TABLE_NAME",
]
