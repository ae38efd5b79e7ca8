"""
BIP39 Mnemonic Helpers

References:
- BIP39: https://github.com/bitcoin/bips/blob/master/bip-0039.mediawiki
"""

from mnemonic import Mnemonic

from .exceptions import DerivationError
from .xkey import ExtendedKey, seed_to_master_key

VALID_STRENGTHS = (128, 160, 192, 224, 256)

# Standard account paths per output category
DERIVATION_PATHS = {
    'legacy': "m/44'/0'/0'",         # P2PKH
    'nested_segwit': "m/49'/0'/0'",  # P2SH-P2WPKH
    'native_segwit': "m/84'/0'/0'",  # P2WPKH
}


def generate_mnemonic(strength: int = 128) -> str:
    """
    Generate BIP39 mnemonic phrase.

    Args:
        strength: Entropy strength in bits (128, 160, 192, 224, 256)

    Returns:
        Mnemonic phrase
    """
    if strength not in VALID_STRENGTHS:
        raise DerivationError("Strength must be 128, 160, 192, 224, or 256 bits")

    return Mnemonic("english").generate(strength=strength)


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """
    Convert mnemonic to seed using BIP39.

    Args:
        mnemonic: BIP39 mnemonic phrase
        passphrase: Optional passphrase

    Returns:
        64-byte seed
    """
    mnemo = Mnemonic("english")
    if not mnemo.check(mnemonic):
        raise DerivationError("Invalid mnemonic phrase")

    return mnemo.to_seed(mnemonic, passphrase)


def derive_key_from_path(mnemonic: str, path: str, passphrase: str = "",
                         network: str = 'bitcoin') -> ExtendedKey:
    """Derive key from mnemonic and derivation path."""
    master_key = seed_to_master_key(mnemonic_to_seed(mnemonic, passphrase), network)
    return master_key.derive_path(path)


def get_standard_derivation_path(key_type: str) -> str:
    if key_type not in DERIVATION_PATHS:
        raise DerivationError(f"Unknown key type: {key_type}")
    return DERIVATION_PATHS[key_type]
