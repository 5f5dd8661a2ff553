"""
Input Validation - Sanitization of engine call arguments.

Every public engine operation takes plain scalars or strings from an
untrusted caller. These helpers reject malformed values before any
ledger read or write happens.
"""

import re
from typing import Any, Optional, Tuple

from sealbid.crypto import COMMITMENT_HEX_LENGTH

# =============================================================================
# Constants
# =============================================================================

# Maximum sizes
MAX_IDENTIFIER_LENGTH = 256
MAX_NONCE_LENGTH = 1024

# Duration bounds (seconds). Roughly one century.
MIN_DURATION = 0
MAX_DURATION = 100 * 365 * 24 * 3600

# Lowercase hex SHA-256 digest
COMMITMENT_PATTERN = re.compile(rf"[0-9a-f]{{{COMMITMENT_HEX_LENGTH}}}")


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate integer within optional bounds.
    
    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value (None = unbounded)
        max_val: Maximum allowed value (None = unbounded)
        
    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass but never a meaningful amount
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"
    
    if min_val is not None and value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"
    
    if max_val is not None and value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"
    
    return True, ""


def validate_string(
    value: Any,
    name: str,
    max_length: int = MAX_IDENTIFIER_LENGTH,
    allow_empty: bool = False,
) -> Tuple[bool, str]:
    """
    Validate string input.
    
    Args:
        value: Value to validate
        name: Field name for errors
        max_length: Maximum string length
        allow_empty: Whether "" is acceptable
        
    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"
    
    if not allow_empty and not value:
        return False, f"{name} must not be empty"
    
    if len(value) > max_length:
        return False, f"{name} exceeds max length {max_length}"
    
    return True, ""


def validate_identifier(value: Any, name: str) -> Tuple[bool, str]:
    """Validate an asset or client identifier."""
    return validate_string(value, name, MAX_IDENTIFIER_LENGTH)


def validate_nonce(value: Any) -> Tuple[bool, str]:
    """Validate a reveal nonce. Empty nonces are legal."""
    return validate_string(value, "nonce", MAX_NONCE_LENGTH, allow_empty=True)


def validate_commitment(value: Any) -> Tuple[bool, str]:
    """Validate a bid commitment (64 lowercase hex characters)."""
    if not isinstance(value, str):
        return False, f"bid_hash must be str, got {type(value).__name__}"
    
    if not COMMITMENT_PATTERN.fullmatch(value):
        return False, f"bid_hash must be {COMMITMENT_HEX_LENGTH} lowercase hex characters"
    
    return True, ""


def validate_duration(value: Any, name: str) -> Tuple[bool, str]:
    """Validate a phase duration in seconds."""
    return validate_integer(value, name, MIN_DURATION, MAX_DURATION)


def validate_timestamp(value: Any, name: str = "now") -> Tuple[bool, str]:
    """Validate a unix timestamp in seconds."""
    return validate_integer(value, name, min_val=0)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_integer",
    "validate_string",
    "validate_identifier",
    "validate_nonce",
    "validate_commitment",
    "validate_duration",
    "validate_timestamp",
    "MAX_IDENTIFIER_LENGTH",
    "MAX_NONCE_LENGTH",
    "MAX_DURATION",
]
