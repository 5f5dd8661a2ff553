"""
Cryptographic primitives for Sealbid.

This module provides:
- Hashing (SHA-256)
- Bid commitments for the commit-reveal scheme
- Nonce generation for bidders

Design Notes:
-------------
A commitment is SHA-256 over the decimal rendering of the bid value
followed by the bidder's nonce, hex-encoded in lowercase:

    C = hex(SHA256(str(value) || nonce))

There is no domain separator and no salt beyond the nonce, so the same
(value, nonce) pair always produces the same commitment. Bidders that
reuse a nonce across auctions leak equality of their bids.
"""

import hashlib
import hmac
import secrets


# =============================================================================
# Constants
# =============================================================================

# Length of a hex-encoded SHA-256 digest
COMMITMENT_HEX_LENGTH = 64

# Default nonce size in bytes (hex string is twice as long)
DEFAULT_NONCE_BYTES = 16


# =============================================================================
# Hashing
# =============================================================================


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash.
    
    Used for: bid commitments.
    """
    return hashlib.sha256(data).digest()


def commitment_preimage(value: int, nonce: str) -> bytes:
    """Bytes hashed for a (value, nonce) commitment."""
    return (str(value) + nonce).encode("utf-8")


# =============================================================================
# Commitments
# =============================================================================


def commit(value: int, nonce: str) -> str:
    """
    Create a commitment for a bid.
    
    Args:
        value: Bid value (integer, rendered in decimal)
        nonce: Bidder-chosen blinding string
        
    Returns:
        Lowercase hex SHA-256 digest of str(value) + nonce
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Bid value must be int, got {type(value).__name__}")
    if not isinstance(nonce, str):
        raise ValueError(f"Nonce must be str, got {type(nonce).__name__}")
    return sha256(commitment_preimage(value, nonce)).hex()


def verify_commitment(value: int, nonce: str, commitment: str) -> bool:
    """
    Check that (value, nonce) reproduces a commitment.
    
    Comparison is exact and case-sensitive: an uppercase hex commitment
    never verifies.
    """
    if not isinstance(commitment, str):
        return False
    try:
        expected = commit(value, nonce)
    except ValueError:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), commitment.encode("utf-8"))


def generate_nonce(nbytes: int = DEFAULT_NONCE_BYTES) -> str:
    """Generate a random hex nonce for a bidder."""
    return secrets.token_hex(nbytes)


__all__ = [
    "sha256",
    "commitment_preimage",
    "commit",
    "verify_commitment",
    "generate_nonce",
    "COMMITMENT_HEX_LENGTH",
    "DEFAULT_NONCE_BYTES",
]
