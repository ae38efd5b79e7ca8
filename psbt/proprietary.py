"""
PSBT Proprietary Keys

Proprietary keys (BIP-174 type 0xFC) are namespaced by an identifier prefix
and carry a subtype plus optional key data:

    0xFC || <compact size len> || prefix || <compact size subtype> || key
"""

from dataclasses import dataclass

from bitcoin_scripts.serialize import parse_compact_size, serialize_compact_size, varstr, varstr_parse

from .exceptions import ProprietaryFieldError

PSBT_PROPRIETARY_TYPE = 0xfc


@dataclass(frozen=True)
class ProprietaryKey:
    """Identifier prefix, subtype and key data of a proprietary field."""
    prefix: bytes
    subtype: int
    key: bytes = b''

    def __post_init__(self):
        if self.subtype < 0:
            raise ProprietaryFieldError("Proprietary subtype can't be negative")

    def serialize(self) -> bytes:
        """Serialize the full key, including the 0xFC key type."""
        return (bytes([PSBT_PROPRIETARY_TYPE]) + varstr(self.prefix) +
                serialize_compact_size(self.subtype) + self.key)

    @classmethod
    def parse(cls, data: bytes) -> 'ProprietaryKey':
        """
        Parse a full proprietary key.

        Raises:
            ProprietaryFieldError: if the key type or structure is invalid
        """
        if not data or data[0] != PSBT_PROPRIETARY_TYPE:
            raise ProprietaryFieldError("Not a proprietary key")
        try:
            prefix, offset = varstr_parse(data, 1)
            subtype, offset = parse_compact_size(data, offset)
        except ValueError as e:
            raise ProprietaryFieldError(f"Malformed proprietary key: {e}") from e
        return cls(prefix, subtype, bytes(data[offset:]))

    def __str__(self) -> str:
        prefix = self.prefix.decode('ascii', errors='replace')
        return f"{prefix}:{self.subtype}:{self.key.hex()}"
