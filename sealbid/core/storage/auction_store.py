from contextlib import nullcontext
from typing import List, Optional

from sealbid.core.auction.models import Auction
from sealbid.core.storage.kv_store import KeyListing, KVStore, Transactional
from sealbid.utils.logger import get_logger

logger = get_logger("storage.auctions")


class AuctionStore:
    """
    Auction Record Store Adapter.
    
    Maps an Auction aggregate to and from the key-value ledger, keyed by
    asset identifier. Holds no state of its own between calls.
    """

    def __init__(self, kv: KVStore):
        self.kv = kv

    def load(self, asset: str) -> Optional[Auction]:
        """
        Load the auction for an asset.
        
        Returns:
            The Auction, or None if the key is absent

        Raises:
            CorruptRecordError: if the stored bytes do not decode
        """
        data = self.kv.get(asset)
        if data is None:
            return None
        return Auction.from_bytes(data)

    def save(self, auction: Auction) -> None:
        """Write the auction under its asset key."""
        self.kv.put(auction.asset, auction.to_bytes())

    def exists(self, asset: str) -> bool:
        return self.kv.get(asset) is not None

    def atomic(self):
        """
        Context for one load-then-save.

        Uses the ledger's transaction() when it offers one. A plain
        get/put/delete ledger gets no isolation here; serializing
        concurrent updates of one asset is then the ledger owner's job.
        """
        if isinstance(self.kv, Transactional):
            return self.kv.transaction()
        return nullcontext()

    def list_assets(self) -> List[str]:
        """
        Assets present in the ledger.

        Raises:
            TypeError: if the ledger cannot enumerate its keys
        """
        if not isinstance(self.kv, KeyListing):
            raise TypeError(f"{type(self.kv).__name__} cannot enumerate keys")
        return self.kv.keys()
