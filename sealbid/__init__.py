"""
Sealbid - Sealed-bid commit-reveal auction engine.

A small auction engine for named assets integrating:
- SHA-256 bid commitments (commit-reveal)
- Time-governed phases (bidding, reveal, closed)
- Deterministic winner selection
- A key-value ledger adapter for the auction aggregate
"""
