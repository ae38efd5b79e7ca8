"""
Bitcoin Scripts - Serialization Helpers

Compact size integers and length-prefixed byte strings, as used by the
witness and PSBT encodings.
"""

import struct
from typing import Tuple

__all__ = ['serialize_compact_size', 'parse_compact_size', 'varstr', 'varstr_parse']


def serialize_compact_size(n: int) -> bytes:
    """
    Serialize integer as Bitcoin compact size.

    Args:
        n: Integer to serialize

    Returns:
        Compact size encoded bytes
    """
    if n < 0:
        raise ValueError("Compact size can't be negative")
    if n < 0xfd:
        return struct.pack('<B', n)
    elif n <= 0xffff:
        return b'\xfd' + struct.pack('<H', n)
    elif n <= 0xffffffff:
        return b'\xfe' + struct.pack('<I', n)
    else:
        return b'\xff' + struct.pack('<Q', n)


def parse_compact_size(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Parse Bitcoin compact size from bytes.

    Args:
        data: Bytes to parse
        offset: Starting offset in bytes

    Returns:
        Tuple of (value, new_offset)
    """
    if offset >= len(data):
        raise ValueError("Insufficient data for compact size")

    first_byte = data[offset]

    if first_byte < 0xfd:
        return first_byte, offset + 1
    elif first_byte == 0xfd:
        if offset + 3 > len(data):
            raise ValueError("Insufficient data for 2-byte compact size")
        return struct.unpack('<H', data[offset + 1:offset + 3])[0], offset + 3
    elif first_byte == 0xfe:
        if offset + 5 > len(data):
            raise ValueError("Insufficient data for 4-byte compact size")
        return struct.unpack('<I', data[offset + 1:offset + 5])[0], offset + 5
    else:
        if offset + 9 > len(data):
            raise ValueError("Insufficient data for 8-byte compact size")
        return struct.unpack('<Q', data[offset + 1:offset + 9])[0], offset + 9


def varstr(data: bytes) -> bytes:
    """Prefix data with its compact size length."""
    data = bytes(data)
    return serialize_compact_size(len(data)) + data


def varstr_parse(data: bytes, offset: int = 0) -> Tuple[bytes, int]:
    """
    Parse a length-prefixed byte string.

    Args:
        data: Bytes to parse
        offset: Starting offset

    Returns:
        Tuple of (parsed_data, new_offset)
    """
    length, new_offset = parse_compact_size(data, offset)
    if new_offset + length > len(data):
        raise ValueError("Insufficient data for varstr")

    return data[new_offset:new_offset + length], new_offset + length
