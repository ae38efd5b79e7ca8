"""
Key Exceptions

This module defines custom exceptions for key handling and hierarchical
deterministic derivation.
"""


class CryptoError(Exception):
    """Base exception for all key-related errors."""
    pass


class InvalidKeyError(CryptoError):
    """Raised when a key is invalid or malformed."""
    pass


class DerivationError(CryptoError):
    """Raised when key derivation fails."""
    pass


class IndexOutOfRangeError(DerivationError, ValueError):
    """Raised when a derivation index is outside its allowed range."""

    def __init__(self, value, low: int, high: int):
        self.value = value
        self.low = low
        self.high = high
        super().__init__(f"Derivation index {value!r} is outside of range {low}..{high}")
