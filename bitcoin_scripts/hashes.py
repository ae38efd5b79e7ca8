"""
Bitcoin Scripts - Hash Functions

Hashes used for script and key commitments. P2SH and P2PKH commit to
HASH160 values, while segwit v0 script programs commit to single SHA256.
"""

import hashlib

from Crypto.Hash import RIPEMD160


def sha256(data: bytes) -> bytes:
    """Single SHA256 digest."""
    return hashlib.sha256(data).digest()


def ripemd160(data: bytes) -> bytes:
    """RIPEMD160 digest (pycryptodome)."""
    return RIPEMD160.new(data).digest()


def hash160(data: bytes) -> bytes:
    """
    Compute HASH160 (RIPEMD160(SHA256(data))).

    Args:
        data: Input data to hash

    Returns:
        20-byte HASH160 digest
    """
    return ripemd160(sha256(data))
