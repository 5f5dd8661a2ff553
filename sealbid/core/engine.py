"""
Auction Engine - Sealed-bid commit-reveal auctions over a key-value ledger.

This module implements the auction state machine for a named asset:
1. Bidding: clients submit hash commitments to bids
2. Reveal: clients disclose (value, nonce); each is checked against
   the stored commitment
3. Closed: the auction can be awarded, exactly once

Every operation is one read-modify-write of a single Auction aggregate:
load from the ledger, check the phase for the caller-supplied `now`,
validate, mutate, persist. Nothing is written when a check fails.

The load and the save run inside the ledger's transaction() when the
ledger has one (both shipped ledgers do). A ledger offering only
get / put / delete gets no isolation: two concurrent updates of the same
asset can then lose one of the writes.

The engine owns no clock and no global state. Time is an argument to
each call and the ledger is handed in at construction.
"""

import functools
from typing import List, Optional, Tuple

from sealbid.crypto import verify_commitment
from sealbid.core.auction.asks import AskBook
from sealbid.core.auction.errors import (
    AlreadyAwardedError,
    AlreadyExistsError,
    HashMismatchError,
    InvalidArgumentError,
    NoBidFoundError,
    NotFoundError,
    WrongPhaseError,
)
from sealbid.core.auction.models import Auction, Bid, new_auction
from sealbid.core.auction.phase import AuctionState, Phase, current_phase, lifecycle_state
from sealbid.core.auction.selection import select_winner
from sealbid.core.storage.auction_store import AuctionStore
from sealbid.core.storage.kv_store import KVStore
from sealbid.utils.logger import get_logger
from sealbid.utils.validation import (
    validate_commitment,
    validate_duration,
    validate_identifier,
    validate_integer,
    validate_nonce,
    validate_timestamp,
)

logger = get_logger("engine")


def _require(result: Tuple[bool, str], asset: Optional[str] = None) -> None:
    valid, err = result
    if not valid:
        raise InvalidArgumentError(err, asset=asset)


def _atomic(method):
    """Run an engine operation inside the ledger's transaction."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.store.atomic():
            return method(self, *args, **kwargs)
    return wrapper


class AuctionEngine:
    """
    Commit-reveal auction engine.

    Attributes:
        store: Auction record adapter over the ledger
        allow_reinit: Let init_auction overwrite an existing asset
    """

    def __init__(self, kv: KVStore, allow_reinit: bool = False):
        """
        Initialize the engine.

        Args:
            kv: Ledger collaborator (get / put / delete)
            allow_reinit: If True, init_auction replaces an
                existing auction instead of raising AlreadyExistsError
        """
        self.store = AuctionStore(kv)
        self.allow_reinit = allow_reinit

    # =========================================================================
    # Internals
    # =========================================================================

    def _load(self, asset: str) -> Auction:
        _require(validate_identifier(asset, "asset"))
        auction = self.store.load(asset)
        if auction is None:
            raise NotFoundError(asset)
        return auction

    def _require_phase(self, auction: Auction, now: int, expected: Phase, operation: str) -> None:
        _require(validate_timestamp(now), auction.asset)
        actual = current_phase(auction, now)
        if actual != expected:
            raise WrongPhaseError(auction.asset, expected, actual, operation)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def init_ledger(self) -> None:
        """Bootstrap hook for the ledger. Nothing to seed."""
        logger.debug("Ledger initialization requested; no seed data")

    @_atomic
    def init_auction(
        self,
        asset: str,
        bid_duration: int,
        reveal_duration: int,
        now: int,
    ) -> Auction:
        """
        Create an auction whose bidding window opens at `now`.

        bid_end = now + bid_duration
        reveal_end = bid_end + reveal_duration

        Raises:
            InvalidArgumentError: bad asset, duration or timestamp
            AlreadyExistsError: asset already holds an auction
        """
        _require(validate_identifier(asset, "asset"))
        _require(validate_duration(bid_duration, "bid_duration"), asset)
        _require(validate_duration(reveal_duration, "reveal_duration"), asset)
        _require(validate_timestamp(now), asset)

        if self.store.exists(asset):
            if not self.allow_reinit:
                raise AlreadyExistsError(asset)
            logger.warning(f"Overwriting existing auction for asset {asset}")

        auction = new_auction(asset, now, bid_duration, reveal_duration)
        self.store.save(auction)

        logger.info(f"Auction created for asset {asset}: "
                    f"bidding until {auction.bid_end}, reveal until {auction.reveal_end}")
        return auction

    # =========================================================================
    # Bidding Phase
    # =========================================================================

    @_atomic
    def place_bid(self, asset: str, client_id: str, bid_hash: str, now: int) -> None:
        """
        Submit or replace a client's sealed bid during the bidding phase.

        A later call for the same client overwrites the earlier commitment
        and clears any reveal state.

        Raises:
            NotFoundError, WrongPhaseError, InvalidArgumentError,
            AlreadyAwardedError (even for a `now` back-dated into bidding)
        """
        auction = self._load(asset)
        if auction.awarded:
            raise AlreadyAwardedError(asset, auction.winner)
        self._require_phase(auction, now, Phase.BIDDING, "PlaceBid")
        _require(validate_identifier(client_id, "client_id"), asset)
        _require(validate_commitment(bid_hash), asset)

        replaced = client_id in auction.bids
        auction.bids[client_id] = Bid(client_id=client_id, bid_hash=bid_hash)
        self.store.save(auction)

        logger.debug(f"{'Replaced' if replaced else 'Received'} bid from {client_id} for asset {asset}")

    # =========================================================================
    # Ask Book
    # =========================================================================

    @_atomic
    def place_ask(self, asset: str, client_id: str, ask_amount: int) -> None:
        """
        Record a client's asking price. Allowed in every phase.

        Raises:
            NotFoundError, InvalidArgumentError
        """
        auction = self._load(asset)
        _require(validate_identifier(client_id, "client_id"), asset)
        _require(validate_integer(ask_amount, "ask_amount"), asset)

        AskBook(auction).place(client_id, ask_amount)
        self.store.save(auction)

        logger.debug(f"Ask from {client_id} for asset {asset}: {ask_amount}")

    # =========================================================================
    # Reveal Phase
    # =========================================================================

    @_atomic
    def reveal_bid(self, asset: str, client_id: str, bid_value: int, nonce: str, now: int) -> None:
        """
        Disclose a bid during the reveal phase.

        The (bid_value, nonce) pair must hash to the commitment stored by
        place_bid. Revealing again with the same pair is allowed and
        changes nothing.

        Raises:
            NotFoundError, WrongPhaseError, NoBidFoundError,
            HashMismatchError, InvalidArgumentError, AlreadyAwardedError
        """
        auction = self._load(asset)
        if auction.awarded:
            raise AlreadyAwardedError(asset, auction.winner)
        self._require_phase(auction, now, Phase.REVEAL, "RevealBid")
        _require(validate_identifier(client_id, "client_id"), asset)
        _require(validate_integer(bid_value, "bid_value"), asset)
        _require(validate_nonce(nonce), asset)

        bid = auction.bids.get(client_id)
        if bid is None:
            raise NoBidFoundError(asset, client_id)

        if not verify_commitment(bid_value, nonce, bid.bid_hash):
            logger.warning(f"Reveal mismatch for client {client_id} in auction {asset}")
            raise HashMismatchError(asset, client_id)

        bid.bid_value = bid_value
        bid.nonce = nonce
        bid.revealed = True
        self.store.save(auction)

        logger.debug(f"Valid reveal from {client_id} for asset {asset}")

    # =========================================================================
    # Award
    # =========================================================================

    @_atomic
    def award_slot(self, asset: str, now: int) -> str:
        """
        Select the winner once the reveal phase is over.

        Highest revealed value wins; ties go to the lexicographically
        smallest client ID. With no revealed bids the winner is "" and
        the auction is still marked awarded.

        Returns:
            The winning client ID, or "" if nobody revealed

        Raises:
            NotFoundError, WrongPhaseError, AlreadyAwardedError
        """
        auction = self._load(asset)
        self._require_phase(auction, now, Phase.CLOSED, "AwardSlot")
        if auction.awarded:
            raise AlreadyAwardedError(asset, auction.winner)

        winner = select_winner(auction.bids)
        auction.winner = winner.client_id if winner is not None else ""
        auction.awarded = True
        self.store.save(auction)

        if winner is None:
            logger.warning(f"Auction {asset} awarded with no revealed bids")
        else:
            logger.info(f"Auction {asset} awarded: winner={winner.client_id}, value={winner.bid_value}")
        return auction.winner

    # =========================================================================
    # Queries
    # =========================================================================

    def get_auction(self, asset: str) -> Auction:
        """The stored aggregate. Raises NotFoundError."""
        return self._load(asset)

    def get_phase(self, asset: str, now: int) -> Phase:
        auction = self._load(asset)
        _require(validate_timestamp(now), asset)
        return current_phase(auction, now)

    def get_state(self, asset: str, now: int) -> AuctionState:
        auction = self._load(asset)
        _require(validate_timestamp(now), asset)
        return lifecycle_state(auction, now)

    def get_winner(self, asset: str) -> Optional[str]:
        """Winner of an awarded auction ("" if nobody revealed), None before the award."""
        auction = self._load(asset)
        return auction.winner if auction.awarded else None

    def list_asks(self, asset: str) -> List[Tuple[str, int]]:
        return AskBook(self._load(asset)).entries()

    def list_auctions(self) -> List[str]:
        return self.store.list_assets()


__all__ = ["AuctionEngine"]
