"""
Integration tests for the auction lifecycle.

Tests the complete flow from initialization to award, with synthetic
timestamps crossing every phase boundary.
"""

import pytest

from sealbid.crypto import commit, generate_nonce
from sealbid.core.engine import AuctionEngine
from sealbid.core.storage import InMemoryKVStore
from sealbid.core.auction import (
    AlreadyAwardedError,
    AuctionState,
    HashMismatchError,
    WrongPhaseError,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def engine():
    return AuctionEngine(InMemoryKVStore())


# =============================================================================
# Scenarios
# =============================================================================


def test_single_bidder_scenario(engine):
    """InitAuction(X, 5, 5) at t0, bid at t0+1, reveal at t0+6, award at t0+11."""
    t0 = 1_000
    engine.init_auction("X", 5, 5, t0)
    engine.place_bid("X", "c1", commit(100, "n1"), t0 + 1)
    engine.reveal_bid("X", "c1", 100, "n1", t0 + 6)
    assert engine.award_slot("X", t0 + 11) == "c1"


def test_slot_auction_with_ask(engine):
    """Bid at the opening instant, ask, reveal and award."""
    t0 = 5_000
    engine.init_auction("SLOT001", 5, 5, t0)
    engine.place_bid("SLOT001", "client1", commit(1000, "nonce"), t0)
    engine.place_ask("SLOT001", "client1", 500)
    engine.reveal_bid("SLOT001", "client1", 1000, "nonce", t0 + 6)
    assert engine.award_slot("SLOT001", t0 + 12) == "client1"

    auction = engine.get_auction("SLOT001")
    assert auction.asks == {"client1": 500}
    assert auction.bids["client1"].bid_value == 1000


def test_many_bidders_with_cheater_and_absentee(engine):
    t0 = 10_000
    engine.init_auction("LOT", 60, 30, t0)

    secrets_by_client = {}
    for i, value in enumerate([300, 750, 500, 750, 900]):
        client_id = f"bidder-{i}"
        nonce = generate_nonce()
        secrets_by_client[client_id] = (value, nonce)
        engine.place_bid("LOT", client_id, commit(value, nonce), t0 + i)

    # bidder-4 never reveals; bidder-2 tries to raise its bid
    with pytest.raises(HashMismatchError):
        engine.reveal_bid("LOT", "bidder-2", 1_000, secrets_by_client["bidder-2"][1], t0 + 61)

    for client_id in ("bidder-0", "bidder-1", "bidder-2", "bidder-3"):
        value, nonce = secrets_by_client[client_id]
        engine.reveal_bid("LOT", client_id, value, nonce, t0 + 70)

    assert engine.get_state("LOT", t0 + 90) == AuctionState.REVEAL
    assert engine.get_state("LOT", t0 + 91) == AuctionState.CLOSED

    # bidder-1 and bidder-3 tie at 750; bidder-4's 900 was never revealed
    assert engine.award_slot("LOT", t0 + 91) == "bidder-1"
    assert engine.get_state("LOT", t0 + 91) == AuctionState.AWARDED

    auction = engine.get_auction("LOT")
    assert auction.get_unrevealed_clients() == ["bidder-4"]


def test_phase_gates_every_operation(engine):
    t0 = 0
    engine.init_auction("G", 10, 10, t0)
    h = commit(1, "n")

    engine.place_bid("G", "c", h, 10)
    with pytest.raises(WrongPhaseError):
        engine.reveal_bid("G", "c", 1, "n", 10)
    with pytest.raises(WrongPhaseError):
        engine.award_slot("G", 10)

    with pytest.raises(WrongPhaseError):
        engine.place_bid("G", "c", h, 11)
    engine.reveal_bid("G", "c", 1, "n", 11)
    with pytest.raises(WrongPhaseError):
        engine.award_slot("G", 20)

    with pytest.raises(WrongPhaseError):
        engine.reveal_bid("G", "c", 1, "n", 21)
    assert engine.award_slot("G", 21) == "c"

    with pytest.raises(AlreadyAwardedError):
        engine.award_slot("G", 1_000)
    engine.place_ask("G", "seller", 3)
    assert engine.get_winner("G") == "c"


def test_assets_are_independent(engine):
    engine.init_auction("A", 5, 5, 0)
    engine.init_auction("B", 50, 50, 0)

    engine.place_bid("B", "c1", commit(9, "z"), 20)
    with pytest.raises(WrongPhaseError):
        engine.place_bid("A", "c1", commit(9, "z"), 20)

    assert engine.get_auction("A").bids == {}
    assert "c1" in engine.get_auction("B").bids
