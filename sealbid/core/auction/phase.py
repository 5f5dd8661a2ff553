"""
Phase Clock - which window an auction is in at a given instant.

Bidding = [start, bid_end]      bid_end itself is still bidding
Reveal  = (bid_end, reveal_end] reveal_end itself is still reveal
Closed  = (reveal_end, inf)

Instants before start_time count as Bidding: the clock only looks at
the two end boundaries.
"""

from enum import IntEnum

from sealbid.core.auction.models import Auction


class Phase(IntEnum):
    """Time-gated phase of an auction."""
    BIDDING = 0
    REVEAL = 1
    CLOSED = 2


class AuctionState(IntEnum):
    """Externally observable lifecycle state, including the terminal award."""
    BIDDING = 0
    REVEAL = 1
    CLOSED = 2
    AWARDED = 3


def phase_at(bid_end: int, reveal_end: int, now: int) -> Phase:
    """Phase for raw boundaries."""
    if now <= bid_end:
        return Phase.BIDDING
    if now <= reveal_end:
        return Phase.REVEAL
    return Phase.CLOSED


def current_phase(auction: Auction, now: int) -> Phase:
    """Phase of `auction` at unix time `now`."""
    return phase_at(auction.bid_end, auction.reveal_end, now)


def lifecycle_state(auction: Auction, now: int) -> AuctionState:
    """Phase, with AWARDED once the award has been made."""
    if auction.awarded:
        return AuctionState.AWARDED
    return AuctionState(current_phase(auction, now).value)


def seconds_remaining(auction: Auction, now: int) -> int:
    """Seconds until the next phase begins (0 once closed)."""
    phase = current_phase(auction, now)
    if phase == Phase.BIDDING:
        return auction.bid_end - now + 1
    if phase == Phase.REVEAL:
        return auction.reveal_end - now + 1
    return 0


__all__ = ["Phase", "AuctionState", "phase_at", "current_phase", "lifecycle_state", "seconds_remaining"]
