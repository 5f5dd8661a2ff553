"""
Ledger Storage Module.

Provides the key-value ledger the engine persists auctions into:
- KVStore contract (get / put / delete of byte values by string key)
- Optional KeyListing and Transactional capabilities
- In-memory and SQLite-backed ledgers
- Auction record adapter (one JSON document per asset)
"""

from sealbid.core.storage.kv_store import (
    KVStore,
    KeyListing,
    Transactional,
    InMemoryKVStore,
    SQLiteKVStore,
)
from sealbid.core.storage.auction_store import AuctionStore

__all__ = [
    "KVStore",
    "KeyListing",
    "Transactional",
    "InMemoryKVStore",
    "SQLiteKVStore",
    "AuctionStore",
]
