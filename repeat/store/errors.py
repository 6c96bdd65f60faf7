"""Exceptions raised by the card store."""


class CardStoreError(Exception):
    """Base class for card store failures."""


class InitializationError(CardStoreError):
    """The data directory, database file, or schema could not be prepared."""


class StorageError(CardStoreError):
    """A read or write against the database failed."""
