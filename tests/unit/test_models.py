"""
Tests for the auction aggregate and its ledger encoding.
"""

import json

import pytest
from pydantic import ValidationError

from sealbid.crypto import commit
from sealbid.core.auction import (
    AskBook,
    Auction,
    Bid,
    CorruptRecordError,
    new_auction,
)


@pytest.fixture
def auction():
    a = new_auction("SLOT001", now=1000, bid_duration=5, reveal_duration=5)
    a.bids["c1"] = Bid(client_id="c1", bid_hash=commit(0, ""), bid_value=0, nonce="", revealed=True)
    a.bids["c2"] = Bid(client_id="c2", bid_hash=commit(7, "x"))
    a.asks["c1"] = 500
    return a


class TestNewAuction:
    
    def test_schedule(self):
        a = new_auction("X", now=1000, bid_duration=5, reveal_duration=7)
        assert a.start_time == 1000
        assert a.bid_end == 1005
        assert a.reveal_end == 1012
        assert a.bids == {}
        assert a.asks == {}
        assert not a.awarded
        assert a.winner == ""


class TestInvariants:
    
    def test_schedule_order_enforced(self):
        with pytest.raises(ValidationError):
            Auction(asset="X", start_time=10, bid_end=5, reveal_end=20)
        with pytest.raises(ValidationError):
            Auction(asset="X", start_time=10, bid_end=15, reveal_end=12)
    
    def test_winner_requires_award(self):
        with pytest.raises(ValidationError):
            Auction(asset="X", start_time=0, bid_end=1, reveal_end=2, winner="c1")

    def test_awarded_winner_must_have_a_bid(self):
        doc = json.loads(new_auction("X", 0, 1, 1).to_bytes())
        doc.update(awarded=True, winner="ghost")
        with pytest.raises(CorruptRecordError):
            Auction.from_bytes(json.dumps(doc).encode())

    def test_awarded_winner_must_be_revealed(self, auction):
        doc = json.loads(auction.to_bytes())
        doc.update(awarded=True, winner="c2")
        with pytest.raises(CorruptRecordError):
            Auction.from_bytes(json.dumps(doc).encode())

    def test_awarded_winner_must_be_highest_revealed(self, auction):
        auction.bids["c3"] = Bid(client_id="c3", bid_hash=commit(9, "y"), bid_value=9, nonce="y", revealed=True)
        doc = json.loads(auction.to_bytes())
        doc.update(awarded=True, winner="c1")
        with pytest.raises(CorruptRecordError):
            Auction.from_bytes(json.dumps(doc).encode())

        doc["winner"] = "c3"
        assert Auction.from_bytes(json.dumps(doc).encode()).winner == "c3"

    def test_awarded_tie_resolves_to_smallest_client(self):
        bids = {
            cid: Bid(client_id=cid, bid_hash=commit(5, cid), bid_value=5, nonce=cid, revealed=True)
            for cid in ("b", "a")
        }
        with pytest.raises(ValidationError):
            Auction(asset="X", start_time=0, bid_end=1, reveal_end=2, bids=bids, awarded=True, winner="b")
        a = Auction(asset="X", start_time=0, bid_end=1, reveal_end=2, bids=bids, awarded=True, winner="a")
        assert a.winner == "a"

    def test_awarded_empty_winner_needs_no_reveals(self, auction):
        fields = auction.model_dump()
        fields["awarded"] = True
        with pytest.raises(ValidationError):
            Auction(**fields)

        unrevealed = {"c2": auction.bids["c2"]}
        a = Auction(asset="X", start_time=0, bid_end=1, reveal_end=2, bids=unrevealed, awarded=True)
        assert a.winner == ""

    def test_revealed_bid_needs_value_and_nonce(self):
        with pytest.raises(ValidationError):
            Bid(client_id="c1", bid_hash=commit(1, "n"), revealed=True)
    
    def test_unrevealed_bid_has_no_value(self):
        with pytest.raises(ValidationError):
            Bid(client_id="c1", bid_hash=commit(1, "n"), bid_value=1, nonce="n")
    
    def test_revealed_bid_must_match_hash(self):
        with pytest.raises(ValidationError):
            Bid(client_id="c1", bid_hash=commit(1, "n"), bid_value=2, nonce="n", revealed=True)
    
    def test_bid_key_matches_client(self):
        with pytest.raises(ValidationError):
            Auction(
                asset="X", start_time=0, bid_end=1, reveal_end=2,
                bids={"c1": Bid(client_id="c2", bid_hash=commit(1, "n"))},
            )


class TestSerialization:
    
    def test_wire_field_names(self, auction):
        doc = json.loads(auction.to_bytes())
        assert set(doc) == {
            "asset", "bids", "asks", "startTime", "bidEnd", "revealEnd", "awarded", "winner",
        }
        assert doc["bids"]["c1"]["clientID"] == "c1"
        assert doc["bids"]["c1"]["bidValue"] == 0
        assert doc["bids"]["c1"]["nonce"] == ""
    
    def test_unrevealed_omits_value_and_nonce(self, auction):
        doc = json.loads(auction.to_bytes())
        assert "bidValue" not in doc["bids"]["c2"]
        assert "nonce" not in doc["bids"]["c2"]
        assert doc["bids"]["c2"]["revealed"] is False
    
    def test_round_trip_preserves_absent_vs_zero(self, auction):
        restored = Auction.from_bytes(auction.to_bytes())
        assert restored.model_dump() == auction.model_dump()
        assert restored.bids["c1"].bid_value == 0
        assert restored.bids["c1"].nonce == ""
        assert restored.bids["c2"].bid_value is None
        assert restored.bids["c2"].nonce is None
    
    def test_reads_record_without_winner(self):
        """Records that omit winner load with an empty winner."""
        raw = json.dumps({
            "asset": "SLOT001",
            "bids": {"client1": {"clientID": "client1", "bidHash": commit(1000, "nonce"), "revealed": False}},
            "asks": {"client1": 500},
            "startTime": 1,
            "bidEnd": 6,
            "revealEnd": 11,
            "awarded": False,
        }).encode()
        a = Auction.from_bytes(raw)
        assert a.winner == ""
        assert a.asks == {"client1": 500}
        assert a.bids["client1"].bid_hash == commit(1000, "nonce")
    
    def test_garbage_is_corrupt_record(self):
        with pytest.raises(CorruptRecordError):
            Auction.from_bytes(b"not json")
    
    def test_missing_field_is_corrupt_record(self):
        with pytest.raises(CorruptRecordError):
            Auction.from_bytes(b'{"asset": "X"}')


class TestQueries:
    
    def test_revealed_bids(self, auction):
        assert list(auction.revealed_bids()) == ["c1"]
    
    def test_unrevealed_clients(self, auction):
        assert auction.get_unrevealed_clients() == ["c2"]


class TestAskBook:
    
    def test_place_last_write_wins(self, auction):
        book = AskBook(auction)
        assert book.place("c1", 400) == 500
        assert book.place("c3", 700) is None
        assert auction.asks == {"c1": 400, "c3": 700}
    
    def test_entries_sorted(self, auction):
        book = AskBook(auction)
        book.place("a0", 900)
        assert book.entries() == [("a0", 900), ("c1", 500)]
    
    def test_lowest(self, auction):
        book = AskBook(auction)
        book.place("b", 500)
        assert book.lowest() == ("b", 500)
    
    def test_lowest_empty(self):
        assert AskBook(new_auction("X", 0, 1, 1)).lowest() is None
    
    def test_len_and_contains(self, auction):
        book = AskBook(auction)
        assert len(book) == 1
        assert "c1" in book
        assert "c9" not in book
        assert book.get("c9") is None
