"""
Winner Selection - Deterministic argmax over revealed bids.

Ordering:
1. Higher bid value wins
2. On equal value, the lexicographically smallest client ID wins

The ledger's mapping order never influences the result: candidates are
sorted by client ID before the tournament runs, so replaying the same
auction always yields the same winner.
"""

from typing import Dict, List, Optional, Tuple

from sealbid.core.auction.models import Bid
from sealbid.utils.logger import get_logger

logger = get_logger("selection")


# =============================================================================
# Bid Comparison
# =============================================================================


def compare_bids(bid_a: Bid, bid_b: Bid) -> int:
    """
    Compare two revealed bids.
    
    Uses lexicographic ordering: (bid_value, -client_id)
    
    Returns:
        -1 if bid_a < bid_b (bid_b wins)
         0 if bid_a == bid_b (same client)
        +1 if bid_a > bid_b (bid_a wins)
    """
    if bid_a.bid_value > bid_b.bid_value:
        return 1
    if bid_a.bid_value < bid_b.bid_value:
        return -1
    
    # Tie-break: smaller client ID wins
    if bid_a.client_id < bid_b.client_id:
        return 1
    if bid_a.client_id > bid_b.client_id:
        return -1
    
    return 0


# =============================================================================
# Winner Selection
# =============================================================================


def select_winner(bids: Dict[str, Bid]) -> Optional[Bid]:
    """
    Select the winning bid.
    
    Only revealed bids are eligible; committed-but-unrevealed bids are
    ignored.
    
    Args:
        bids: All bids of an auction, keyed by client
        
    Returns:
        The winning Bid, or None if no bid was revealed
    """
    candidates = [bids[cid] for cid in sorted(bids) if bids[cid].revealed]
    if not candidates:
        logger.debug("No revealed bids to select winner from")
        return None
    
    winner = candidates[0]
    for candidate in candidates[1:]:
        if compare_bids(candidate, winner) > 0:
            winner = candidate
    
    logger.debug(f"Selected winner {winner.client_id} out of {len(candidates)} revealed bid(s)")
    return winner


def rank_bids(bids: Dict[str, Bid]) -> List[Tuple[int, Bid]]:
    """
    Rank revealed bids from best to worst.
    
    Returns list of (rank, bid) tuples, rank 0 being the winner.
    """
    revealed = [bid for bid in bids.values() if bid.revealed]
    revealed.sort(key=lambda b: (-b.bid_value, b.client_id))
    return list(enumerate(revealed))


__all__ = ["compare_bids", "select_winner", "rank_bids"]
