"""
BIP32 Extended Keys

Hierarchical deterministic derivation plus the base58check extended key
serialization (xpub/xprv and tpub/tprv).

References:
- BIP32: https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki
"""

import hashlib
import hmac
import logging
import struct
from typing import Iterable, Optional, Union

import base58
from coincurve.context import GLOBAL_CONTEXT, Context

from bitcoin_scripts.hashes import hash160

from .exceptions import DerivationError, IndexOutOfRangeError, InvalidKeyError
from .index import BIP32_HARDENED_OFFSET, parse_derivation_path
from .keys import CURVE_ORDER, PrivateKey, PublicKey

logger = logging.getLogger(__name__)

# Serialization version bytes: (public, private)
KEY_VERSIONS = {
    'bitcoin': (bytes.fromhex('0488b21e'), bytes.fromhex('0488ade4')),
    'testnet': (bytes.fromhex('043587cf'), bytes.fromhex('04358394')),
}

SERIALIZED_LENGTH = 78


class ExtendedKey:
    """
    BIP32 Extended Key for hierarchical deterministic key derivation.
    """

    def __init__(self, key: Union[PrivateKey, PublicKey], chain_code: bytes,
                 depth: int = 0, parent_fingerprint: bytes = b'\x00\x00\x00\x00',
                 child_number: int = 0, network: str = 'bitcoin'):
        """
        Initialize extended key.

        Args:
            key: Private or public key
            chain_code: 32-byte chain code for derivation
            depth: Depth in derivation tree
            parent_fingerprint: Fingerprint of the parent key
            child_number: Child number
            network: 'bitcoin' or 'testnet', selecting the version bytes
        """
        if not isinstance(chain_code, bytes) or len(chain_code) != 32:
            raise DerivationError("Chain code must be 32 bytes")
        if not isinstance(parent_fingerprint, bytes) or len(parent_fingerprint) != 4:
            raise DerivationError("Fingerprint must be 4 bytes")
        if depth < 0 or depth > 255:
            raise DerivationError("Depth must be 0-255")
        if not 0 <= child_number <= 0xFFFFFFFF:
            raise IndexOutOfRangeError(child_number, 0, 0xFFFFFFFF)
        if network not in KEY_VERSIONS:
            raise DerivationError(f"Unknown network: {network}")

        self.key = key
        self.chain_code = chain_code
        self.depth = depth
        self.parent_fingerprint = parent_fingerprint
        self.child_number = child_number
        self.network = network

    @property
    def is_private(self) -> bool:
        """Check if this is a private extended key."""
        return isinstance(self.key, PrivateKey)

    @property
    def public_key(self) -> PublicKey:
        if self.is_private:
            return self.key.public_key()
        return self.key

    def identifier(self) -> bytes:
        """HASH160 of the compressed public key."""
        return hash160(self.public_key.compressed_bytes)

    def fingerprint(self) -> bytes:
        """First four bytes of the key identifier."""
        return self.identifier()[:4]

    def neuter(self) -> 'ExtendedKey':
        """Drop private material, keeping the position in the tree."""
        return ExtendedKey(
            key=self.public_key,
            chain_code=self.chain_code,
            depth=self.depth,
            parent_fingerprint=self.parent_fingerprint,
            child_number=self.child_number,
            network=self.network,
        )

    def derive_child(self, index: int, ctx: Context = GLOBAL_CONTEXT) -> 'ExtendedKey':
        """
        Derive child key at given index.

        Args:
            index: Child index (use index >= 2^31 for hardened derivation)
            ctx: secp256k1 context for the point arithmetic

        Returns:
            Extended child key
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= 0xFFFFFFFF:
            raise IndexOutOfRangeError(index, 0, 0xFFFFFFFF)

        hardened = index >= BIP32_HARDENED_OFFSET
        if hardened and not self.is_private:
            raise DerivationError("Cannot derive hardened child from public key")

        parent_public = self.public_key.compressed_bytes
        if hardened:
            # Hardened derivation: 0x00 || private_key || index
            data = b'\x00' + self.key.bytes + struct.pack('>I', index)
        else:
            # Non-hardened derivation: public_key || index
            data = parent_public + struct.pack('>I', index)

        I = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        I_L, I_R = I[:32], I[32:]
        I_L_int = int.from_bytes(I_L, 'big')

        if I_L_int >= CURVE_ORDER:
            logger.warning("Invalid child key at index %d, skipping to the next one", index)
            return self.derive_child(index + 1, ctx)

        if self.is_private:
            # child_private_key = (parent_private_key + I_L) mod n
            child_int = (int.from_bytes(self.key.bytes, 'big') + I_L_int) % CURVE_ORDER
            if child_int == 0:
                return self.derive_child(index + 1, ctx)
            child_key = PrivateKey(child_int.to_bytes(32, 'big'), context=ctx)
        else:
            # child_public_key = parent_public_key + I_L * G
            try:
                tweak_point = PrivateKey(I_L, context=ctx).public_key()
                child_key = PublicKey(parent_public, context=ctx).combine(tweak_point)
            except InvalidKeyError as e:
                raise DerivationError(f"Child derivation failed: {e}") from e

        return ExtendedKey(
            key=child_key,
            chain_code=I_R,
            depth=self.depth + 1,
            parent_fingerprint=hash160(parent_public)[:4],
            child_number=index,
            network=self.network,
        )

    def derive_indexes(self, indexes: Iterable[int], ctx: Context = GLOBAL_CONTEXT) -> 'ExtendedKey':
        current_key = self
        for index in indexes:
            current_key = current_key.derive_child(index, ctx)
        return current_key

    def derive_path(self, path: str, ctx: Context = GLOBAL_CONTEXT) -> 'ExtendedKey':
        """
        Derive key from derivation path.

        Args:
            path: Derivation path like "m/84'/0'/0'/0/0"
            ctx: secp256k1 context

        Returns:
            Extended key at path
        """
        return self.derive_indexes(parse_derivation_path(path), ctx)

    def serialize(self, private: Optional[bool] = None) -> bytes:
        """Serialize into the 78-byte BIP32 format."""
        if private is None:
            private = self.is_private
        if private and not self.is_private:
            raise InvalidKeyError("Public extended key has no private material")

        public_version, private_version = KEY_VERSIONS[self.network]
        if private:
            version, key_data = private_version, b'\x00' + self.key.bytes
        else:
            version, key_data = public_version, self.public_key.compressed_bytes

        return (version + struct.pack('B', self.depth) + self.parent_fingerprint +
                struct.pack('>I', self.child_number) + self.chain_code + key_data)

    def to_xpub(self) -> str:
        return base58.b58encode_check(self.serialize(private=False)).decode('ascii')

    def to_xprv(self) -> str:
        return base58.b58encode_check(self.serialize(private=True)).decode('ascii')

    @classmethod
    def from_string(cls, encoded: str, ctx: Context = GLOBAL_CONTEXT) -> 'ExtendedKey':
        """
        Parse a base58check xpub/xprv/tpub/tprv string.

        Raises:
            InvalidKeyError: on checksum, length, version or key data errors
        """
        try:
            data = base58.b58decode_check(encoded)
        except ValueError as e:
            raise InvalidKeyError(f"Invalid extended key encoding: {e}") from e

        if len(data) != SERIALIZED_LENGTH:
            raise InvalidKeyError(f"Extended key must be {SERIALIZED_LENGTH} bytes, got {len(data)}")

        version = data[:4]
        for network, (public_version, private_version) in KEY_VERSIONS.items():
            if version in (public_version, private_version):
                private = version == private_version
                break
        else:
            raise InvalidKeyError(f"Unknown extended key version: {version.hex()}")

        depth = data[4]
        parent_fingerprint = data[5:9]
        child_number = struct.unpack('>I', data[9:13])[0]
        chain_code = data[13:45]
        key_data = data[45:78]

        if private:
            if key_data[0] != 0:
                raise InvalidKeyError("Private key data must start with 0x00")
            key = PrivateKey(key_data[1:], context=ctx)
        else:
            if key_data[0] not in (2, 3):
                raise InvalidKeyError("Public key data must be compressed")
            key = PublicKey(key_data, context=ctx)

        if depth == 0 and (parent_fingerprint != b'\x00\x00\x00\x00' or child_number != 0):
            raise InvalidKeyError("Master key with non-zero parent fingerprint or index")

        return cls(key, chain_code, depth, parent_fingerprint, child_number, network)

    def _identity(self) -> tuple:
        return (self.network, self.depth, self.parent_fingerprint, self.child_number,
                self.chain_code, self.is_private, self.public_key.compressed_bytes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtendedKey):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __str__(self) -> str:
        return self.to_xpub()

    def __repr__(self) -> str:
        return f"ExtendedKey('{self.to_xpub()}', depth={self.depth})"


def seed_to_master_key(seed: bytes, network: str = 'bitcoin') -> ExtendedKey:
    """
    Generate master extended key from seed.

    Args:
        seed: BIP39 seed (typically 64 bytes)
        network: Network for the serialization version bytes

    Returns:
        Master extended private key
    """
    if len(seed) < 16 or len(seed) > 64:
        raise DerivationError("Seed must be 16-64 bytes")

    I = hmac.new(b"Bitcoin seed", seed, hashlib.sha512).digest()
    I_L, I_R = I[:32], I[32:]

    I_L_int = int.from_bytes(I_L, 'big')
    if I_L_int == 0 or I_L_int >= CURVE_ORDER:
        raise DerivationError("Invalid master key generated")

    return ExtendedKey(key=PrivateKey(I_L), chain_code=I_R, network=network)


__all__ = ['ExtendedKey', 'seed_to_master_key', 'KEY_VERSIONS']
