"""
PSBT Utilities

Key-value pair and BIP32 path encodings used by PSBT maps (BIP-174).
"""

import struct
from typing import List, Tuple

from bitcoin_scripts.serialize import (
    parse_compact_size,
    serialize_compact_size,
    varstr,
    varstr_parse,
)

from .exceptions import PSBTParsingError

__all__ = [
    'serialize_compact_size',
    'parse_compact_size',
    'serialize_key_value',
    'parse_key_value',
    'encode_bip32_path',
    'decode_bip32_path',
]


def serialize_key_value(key: bytes, value: bytes) -> bytes:
    """
    Serialize key-value pair in PSBT format.

    Args:
        key: Key bytes, including the key type
        value: Value bytes

    Returns:
        Serialized key-value pair
    """
    return varstr(key) + varstr(value)


def parse_key_value(data: bytes, offset: int = 0) -> Tuple[bytes, bytes, int]:
    """
    Parse key-value pair from PSBT format.

    Args:
        data: Bytes to parse
        offset: Starting offset

    Returns:
        Tuple of (key, value, new_offset); an empty key marks the end of a map
    """
    try:
        key, offset = varstr_parse(data, offset)
        if not key:
            return b'', b'', offset
        value, offset = varstr_parse(data, offset)
    except ValueError as e:
        raise PSBTParsingError(f"Truncated key-value pair: {e}") from e
    return key, value, offset


def encode_bip32_path(path: List[int]) -> bytes:
    """Encode BIP32 derivation path as little-endian uint32 values."""
    return b''.join(struct.pack('<I', p) for p in path)


def decode_bip32_path(data: bytes) -> List[int]:
    """Decode BIP32 derivation path."""
    if len(data) % 4 != 0:
        raise PSBTParsingError("Invalid BIP32 path length")
    return [struct.unpack('<I', data[i:i + 4])[0] for i in range(0, len(data), 4)]
