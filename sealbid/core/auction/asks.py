"""
Ask Book - asking prices recorded per client on an auction.

Asks are informational: they are never matched against bids and never
influence the award. They may be placed or updated in any phase,
including after the award.
"""

from typing import List, Optional, Tuple

from sealbid.core.auction.models import Auction


class AskBook:
    """View over Auction.asks. Mutations apply to the wrapped aggregate."""

    def __init__(self, auction: Auction):
        self.auction = auction

    def place(self, client_id: str, amount: int) -> Optional[int]:
        """Record an ask, last write wins. Returns the replaced amount, if any."""
        previous = self.auction.asks.get(client_id)
        self.auction.asks[client_id] = amount
        return previous

    def get(self, client_id: str) -> Optional[int]:
        return self.auction.asks.get(client_id)

    def entries(self) -> List[Tuple[str, int]]:
        """All asks as (client_id, amount), sorted by client."""
        return sorted(self.auction.asks.items())

    def lowest(self) -> Optional[Tuple[str, int]]:
        """Lowest ask, ties going to the smallest client ID."""
        if not self.auction.asks:
            return None
        return min(self.auction.asks.items(), key=lambda item: (item[1], item[0]))

    def __len__(self) -> int:
        return len(self.auction.asks)

    def __contains__(self, client_id: str) -> bool:
        return client_id in self.auction.asks


__all__ = ["AskBook"]
