"""
Auction errors.

Every precondition failure of an engine operation is raised as one of
these, before anything is written to the ledger.
"""

from typing import Optional


class AuctionError(Exception):
    """Base exception class for auction engine errors"""

    def __init__(self, message: str, asset: Optional[str] = None, client_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.asset = asset
        self.client_id = client_id


class NotFoundError(AuctionError):
    """No auction record exists for the asset"""

    def __init__(self, asset: str):
        super().__init__(f"Auction not found: {asset}", asset=asset)


class AlreadyExistsError(AuctionError):
    """An auction was already initialized for the asset"""

    def __init__(self, asset: str):
        super().__init__(f"Auction already exists: {asset}", asset=asset)


class WrongPhaseError(AuctionError):
    """Operation attempted outside its time window"""

    def __init__(self, asset: str, expected, actual, operation: str):
        super().__init__(
            f"{operation} requires phase {expected.name}, auction {asset} is in {actual.name}",
            asset=asset,
        )
        self.expected = expected
        self.actual = actual
        self.operation = operation


class NoBidFoundError(AuctionError):
    """Reveal attempted by a client with no commitment"""

    def __init__(self, asset: str, client_id: str):
        super().__init__(f"No bid found for client {client_id} in auction {asset}", asset, client_id)


class HashMismatchError(AuctionError):
    """Revealed (value, nonce) does not reproduce the stored commitment"""

    def __init__(self, asset: str, client_id: str):
        super().__init__(f"Hash mismatch for client {client_id} in auction {asset}", asset, client_id)


class AlreadyAwardedError(AuctionError):
    """Award attempted on an auction that is already awarded"""

    def __init__(self, asset: str, winner: str):
        super().__init__(f"Auction already awarded: {asset}", asset=asset)
        self.winner = winner


class InvalidArgumentError(AuctionError):
    """A call argument failed validation"""


class CorruptRecordError(AuctionError):
    """The ledger holds bytes that do not decode to an auction"""
