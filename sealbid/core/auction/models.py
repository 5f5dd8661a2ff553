"""
Auction aggregate - the Auction record and its owned Bids and asks.

The aggregate is stored as one JSON document per asset. Field names on
the wire are camelCase:

    {
      "asset": "SLOT001",
      "bids": {"c1": {"clientID": "c1", "bidHash": "...", "revealed": false}},
      "asks": {"c1": 500},
      "startTime": 1700000000,
      "bidEnd": 1700000005,
      "revealEnd": 1700000010,
      "awarded": false,
      "winner": ""
    }

bidValue and nonce are omitted until a bid is revealed, so a revealed
value of 0 (or an empty nonce) stays distinct from "not revealed".
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from sealbid.core.auction.errors import CorruptRecordError
from sealbid.crypto import verify_commitment


class Bid(BaseModel):
    """
    A client's sealed bid.
    
    bid_hash is fixed at placement. bid_value and nonce stay None until
    a successful reveal, which also sets revealed.
    """
    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(alias="clientID")
    bid_hash: str = Field(alias="bidHash")
    bid_value: Optional[int] = Field(default=None, alias="bidValue")
    nonce: Optional[str] = None
    revealed: bool = False

    @model_validator(mode="after")
    def _check_reveal_fields(self) -> "Bid":
        if self.revealed and (self.bid_value is None or self.nonce is None):
            raise ValueError("revealed bid must carry bidValue and nonce")
        if not self.revealed and (self.bid_value is not None or self.nonce is not None):
            raise ValueError("unrevealed bid must not carry bidValue or nonce")
        if self.revealed and not verify_commitment(self.bid_value, self.nonce, self.bid_hash):
            raise ValueError("revealed bidValue and nonce do not match bidHash")
        return self


class Auction(BaseModel):
    """
    A sealed-bid auction for one asset.
    
    Phases are half-open intervals over unix seconds:
        Bidding = [start_time, bid_end]
        Reveal  = (bid_end, reveal_end]
        Closed  = (reveal_end, inf)
    """
    model_config = ConfigDict(populate_by_name=True)

    asset: str
    bids: Dict[str, Bid] = Field(default_factory=dict)
    asks: Dict[str, int] = Field(default_factory=dict)
    start_time: int = Field(alias="startTime")
    bid_end: int = Field(alias="bidEnd")
    reveal_end: int = Field(alias="revealEnd")
    awarded: bool = False
    winner: str = ""

    @model_validator(mode="after")
    def _check_invariants(self) -> "Auction":
        if not (self.start_time <= self.bid_end <= self.reveal_end):
            raise ValueError("expected startTime <= bidEnd <= revealEnd")
        if self.winner and not self.awarded:
            raise ValueError("winner set on an auction that is not awarded")
        for client_id, bid in self.bids.items():
            if bid.client_id != client_id:
                raise ValueError(f"bid keyed by {client_id!r} belongs to {bid.client_id!r}")
        if self.awarded:
            self._check_winner()
        return self

    def _check_winner(self) -> None:
        # Highest revealed value, smallest client ID among equals
        revealed = self.revealed_bids()
        if not revealed:
            if self.winner:
                raise ValueError(f"winner {self.winner!r} has no revealed bid")
            return
        top = max(bid.bid_value for bid in revealed.values())
        expected = min(cid for cid, bid in revealed.items() if bid.bid_value == top)
        if self.winner != expected:
            raise ValueError(f"winner {self.winner!r} is inconsistent with revealed bids (expected {expected!r})")

    # =========================================================================
    # Queries
    # =========================================================================

    def revealed_bids(self) -> Dict[str, Bid]:
        """Bids that passed reveal, keyed by client."""
        return {cid: bid for cid, bid in self.bids.items() if bid.revealed}

    def get_unrevealed_clients(self) -> List[str]:
        """Clients who committed but did not reveal, sorted."""
        return sorted(cid for cid, bid in self.bids.items() if not bid.revealed)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_bytes(self) -> bytes:
        """Serialize for the ledger."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Auction":
        """
        Deserialize from the ledger.
        
        Raises:
            CorruptRecordError: if the bytes are not a valid auction
        """
        try:
            return cls.model_validate_json(data.decode("utf-8"))
        except UnicodeDecodeError as err:
            raise CorruptRecordError("Corrupt auction record: not UTF-8") from err
        except ValidationError as err:
            raise CorruptRecordError(f"Corrupt auction record: {err.error_count()} error(s)") from err


def new_auction(asset: str, now: int, bid_duration: int, reveal_duration: int) -> Auction:
    """Build a fresh auction whose bidding starts at `now`."""
    bid_end = now + bid_duration
    return Auction(
        asset=asset,
        start_time=now,
        bid_end=bid_end,
        reveal_end=bid_end + reveal_duration,
    )


__all__ = ["Bid", "Auction", "new_auction"]
