"""
Hierarchical Deterministic Keys Package

secp256k1 keys, BIP32 extended keys with derivation indexes, and BIP39
mnemonic helpers.
"""

from .exceptions import CryptoError, InvalidKeyError, DerivationError, IndexOutOfRangeError
from .index import (
    BIP32_HARDENED_OFFSET,
    UnhardenedIndex,
    HardenedIndex,
    parse_derivation_path,
    format_derivation_path,
)
from .keys import PrivateKey, PublicKey, CURVE_ORDER
from .xkey import ExtendedKey, seed_to_master_key
from .seed import generate_mnemonic, mnemonic_to_seed, derive_key_from_path, get_standard_derivation_path

__all__ = [
    'CryptoError',
    'InvalidKeyError',
    'DerivationError',
    'IndexOutOfRangeError',
    'BIP32_HARDENED_OFFSET',
    'UnhardenedIndex',
    'HardenedIndex',
    'parse_derivation_path',
    'format_derivation_path',
    'PrivateKey',
    'PublicKey',
    'CURVE_ORDER',
    'ExtendedKey',
    'seed_to_master_key',
    'generate_mnemonic',
    'mnemonic_to_seed',
    'derive_key_from_path',
    'get_standard_derivation_path',
]
