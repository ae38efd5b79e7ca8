"""
Key Management

This module wraps secp256k1 private and public keys (coincurve) and teaches
public keys to produce single-key scripts for every output category:

    Bare    -> P2PK
    Hashed  -> P2PKH
    SegWit  -> P2WPKH
    Nested  -> P2SH(P2WPKH)

SegWit and Nested outputs require compressed keys (BIP-143); an uncompressed
key raises `UncompressedKeyError` instead of producing a non-standard script.
"""

import secrets
from typing import Optional, Union

from coincurve import PrivateKey as CoinCurvePrivateKey, PublicKey as CoinCurvePublicKey
from coincurve.context import GLOBAL_CONTEXT, Context

from bitcoin_scripts.builder import ScriptBuilder
from bitcoin_scripts.category import Category
from bitcoin_scripts.exceptions import UncompressedKeyError, UnsupportedCategoryError
from bitcoin_scripts.hashes import hash160
from bitcoin_scripts.strategy import ToLockScript, ToScripts
from bitcoin_scripts.types import LockScript, PubkeyScript, SigScript, Witness

from .exceptions import InvalidKeyError

# secp256k1 group order
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


class PrivateKey:
    """
    Wrapper for private key operations.
    """

    def __init__(self, key_bytes: Optional[bytes] = None, context: Context = GLOBAL_CONTEXT):
        """
        Initialize private key.

        Args:
            key_bytes: 32-byte private key. If None, generates random key.
            context: secp256k1 context used for public key computation
        """
        if key_bytes is None:
            key_bytes = (secrets.randbelow(CURVE_ORDER - 1) + 1).to_bytes(32, 'big')

        if not isinstance(key_bytes, bytes) or len(key_bytes) != 32:
            raise InvalidKeyError("Private key must be 32 bytes")

        key_int = int.from_bytes(key_bytes, 'big')
        if key_int == 0 or key_int >= CURVE_ORDER:
            raise InvalidKeyError("Private key out of valid range")

        try:
            self._key = CoinCurvePrivateKey(key_bytes, context=context)
        except ValueError as e:
            raise InvalidKeyError(f"Failed to create private key: {e}") from e
        self.context = context

    @property
    def bytes(self) -> bytes:
        """Get private key as bytes."""
        return self._key.secret

    @property
    def hex(self) -> str:
        """Get private key as hex string."""
        return self._key.secret.hex()

    def public_key(self, compressed: bool = True) -> 'PublicKey':
        """Get corresponding public key."""
        return PublicKey(self._key.public_key, compressed=compressed, context=self.context)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.bytes == other.bytes

    def __hash__(self) -> int:
        return hash(('PrivateKey', self.bytes))

    def __repr__(self) -> str:
        # never leak secret material into logs
        return f"PrivateKey(<{self.public_key().hex}>)"


class PublicKey(ToLockScript, ToScripts):
    """
    Wrapper for public key operations.

    A key keeps its serialization form: keys parsed from 65 bytes stay
    uncompressed and are rejected in witness contexts.
    """

    def __init__(self, key_data: Union[bytes, CoinCurvePublicKey],
                 compressed: Optional[bool] = None, context: Context = GLOBAL_CONTEXT):
        """
        Initialize public key.

        Args:
            key_data: Public key bytes (33 or 65 bytes) or CoinCurvePublicKey
            compressed: Serialization form; derived from the byte length if None
            context: secp256k1 context used for point operations
        """
        if isinstance(key_data, CoinCurvePublicKey):
            self._key = key_data
            self.compressed = True if compressed is None else compressed
        else:
            if not isinstance(key_data, (bytes, bytearray)):
                raise InvalidKeyError("Public key data must be bytes")
            if len(key_data) not in (33, 65):
                raise InvalidKeyError("Public key must be 33 or 65 bytes")
            try:
                self._key = CoinCurvePublicKey(bytes(key_data), context=context)
            except ValueError as e:
                raise InvalidKeyError(f"Failed to create public key: {e}") from e
            self.compressed = (len(key_data) == 33) if compressed is None else compressed
        self.context = context

    @classmethod
    def from_hex(cls, hex_string: str, context: Context = GLOBAL_CONTEXT) -> 'PublicKey':
        try:
            data = bytes.fromhex(hex_string)
        except ValueError as e:
            raise InvalidKeyError(f"Public key is not valid hex: {hex_string!r}") from e
        return cls(data, context=context)

    @property
    def inner(self) -> CoinCurvePublicKey:
        return self._key

    @property
    def bytes(self) -> bytes:
        """Get public key in its own serialization form."""
        return self._key.format(compressed=self.compressed)

    @property
    def compressed_bytes(self) -> bytes:
        return self._key.format(compressed=True)

    @property
    def uncompressed_bytes(self) -> bytes:
        return self._key.format(compressed=False)

    @property
    def hex(self) -> str:
        return self.bytes.hex()

    def pubkey_hash(self) -> bytes:
        """HASH160 of the serialized key, as used by P2PKH."""
        return hash160(self.bytes)

    def wpubkey_hash(self) -> bytes:
        """
        HASH160 of the compressed key, as used by P2WPKH.

        Raises:
            UncompressedKeyError: for uncompressed keys
        """
        self._require_compressed()
        return hash160(self.bytes)

    def combine(self, other: 'PublicKey') -> 'PublicKey':
        """Point addition with another key."""
        try:
            point = CoinCurvePublicKey.combine_keys([self._key, other.inner], context=self.context)
        except ValueError as e:
            raise InvalidKeyError(f"Failed to combine public keys: {e}") from e
        return PublicKey(point, compressed=self.compressed, context=self.context)

    def _require_compressed(self) -> None:
        if not self.compressed:
            raise UncompressedKeyError(
                "Witness outputs require a compressed public key"
            )

    def _p2wpkh(self) -> PubkeyScript:
        return PubkeyScript.p2wpkh(self.wpubkey_hash())

    def to_lock_script(self, category: Category) -> LockScript:
        if category is Category.BARE:
            script = PubkeyScript.p2pk(self.bytes)
        elif category is Category.HASHED:
            script = PubkeyScript.p2pkh(self.pubkey_hash())
        elif category is Category.SEGWIT:
            script = self._p2wpkh()
        elif category is Category.NESTED:
            script = PubkeyScript.p2sh(hash160(bytes(self._p2wpkh())))
        else:
            raise UnsupportedCategoryError(category, "lock script derivation")
        return LockScript(bytes(script))

    def to_pubkey_script(self, category: Category) -> PubkeyScript:
        return PubkeyScript(bytes(self.to_lock_script(category)))

    def to_sig_script(self, category: Category) -> SigScript:
        if category is Category.BARE:
            return SigScript()
        if category is Category.SEGWIT:
            self._require_compressed()
            return SigScript()
        if category is Category.HASHED:
            return ScriptBuilder().push_slice(self.bytes).into_script(SigScript)
        if category is Category.NESTED:
            return ScriptBuilder().push_slice(bytes(self._p2wpkh())).into_script(SigScript)
        raise UnsupportedCategoryError(category, "sig script derivation")

    def to_witness(self, category: Category) -> Optional[Witness]:
        if category in (Category.BARE, Category.HASHED):
            return None
        if category in (Category.SEGWIT, Category.NESTED):
            self._require_compressed()
            return Witness([self.bytes])
        raise UnsupportedCategoryError(category, "witness derivation")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.bytes == other.bytes

    def __hash__(self) -> int:
        return hash(('PublicKey', self.bytes))

    def __str__(self) -> str:
        return self.hex

    def __repr__(self) -> str:
        return f"PublicKey('{self.hex}')"
