"""
Sealbid Auction Module.

This module provides the auction aggregate and its rules:
- Auction / Bid records and their ledger encoding
- Phase clock (bidding, reveal, closed)
- Deterministic winner selection
- Ask book
- Error taxonomy
"""

from sealbid.core.auction.errors import (
    AuctionError,
    NotFoundError,
    AlreadyExistsError,
    WrongPhaseError,
    NoBidFoundError,
    HashMismatchError,
    AlreadyAwardedError,
    InvalidArgumentError,
    CorruptRecordError,
)

from sealbid.core.auction.models import (
    Auction,
    Bid,
    new_auction,
)

from sealbid.core.auction.phase import (
    Phase,
    AuctionState,
    phase_at,
    current_phase,
    lifecycle_state,
    seconds_remaining,
)

from sealbid.core.auction.selection import (
    compare_bids,
    select_winner,
    rank_bids,
)

from sealbid.core.auction.asks import AskBook

__all__ = [
    # Errors
    "AuctionError",
    "NotFoundError",
    "AlreadyExistsError",
    "WrongPhaseError",
    "NoBidFoundError",
    "HashMismatchError",
    "AlreadyAwardedError",
    "InvalidArgumentError",
    "CorruptRecordError",
    # Aggregate
    "Auction",
    "Bid",
    "new_auction",
    # Phase clock
    "Phase",
    "AuctionState",
    "phase_at",
    "current_phase",
    "lifecycle_state",
    "seconds_remaining",
    # Selection
    "compare_bids",
    "select_winner",
    "rank_bids",
    # Ask book
    "AskBook",
]
