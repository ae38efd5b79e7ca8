"""
PSBT Commitment Keys

Proprietary keys used by pay-to-contract (P2C) and tapret commitments, plus
read-only views which look them up in PSBT maps. Embedding the commitments
is left to the commitment engines.
"""

import logging
from typing import Dict, Optional, Union

from bitcoin_hd.keys import PublicKey

from .exceptions import ProprietaryFieldError
from .maps import PSBTMap
from .proprietary import ProprietaryKey

logger = logging.getLogger(__name__)

# P2C tweak applied to an input public key
PSBT_P2C_PREFIX = b"P2C"
PSBT_IN_P2C_TWEAK = 0x00

# Tapret commitments hosted by taproot outputs
PSBT_TAPRET_PREFIX = b"TAPRET"
PSBT_OUT_TAPRET_HOST = 0x00
PSBT_OUT_TAPRET_COMMITMENT = 0x01
PSBT_OUT_TAPRET_PROOF = 0x02

TWEAK_LENGTH = 32
COMMITMENT_LENGTH = 32


class P2cOutput:
    """View over the P2C tweaks stored in a PSBT map."""

    def __init__(self, psbt_map: PSBTMap):
        self.psbt_map = psbt_map

    @staticmethod
    def tweak_key(pubkey: Union[PublicKey, bytes]) -> ProprietaryKey:
        key_data = pubkey.bytes if isinstance(pubkey, PublicKey) else bytes(pubkey)
        return ProprietaryKey(PSBT_P2C_PREFIX, PSBT_IN_P2C_TWEAK, key_data)

    def p2c_tweak(self, pubkey: Union[PublicKey, bytes]) -> Optional[bytes]:
        """
        Get the tweak applied to a public key.

        Returns:
            32-byte tweak, or None if the key has no tweak

        Raises:
            ProprietaryFieldError: if the stored tweak has a wrong length
        """
        value = self.psbt_map.get_proprietary(self.tweak_key(pubkey))
        if value is not None and len(value) != TWEAK_LENGTH:
            raise ProprietaryFieldError(
                f"P2C tweak must be {TWEAK_LENGTH} bytes, got {len(value)}"
            )
        return value

    def p2c_tweaks(self) -> Dict[bytes, bytes]:
        """All tweaks keyed by the serialized public key."""
        return {
            key.key: value
            for key, value in self.psbt_map.proprietary_with_prefix(PSBT_P2C_PREFIX, PSBT_IN_P2C_TWEAK).items()
        }


class TapretOutput:
    """View over the tapret fields stored in a PSBT output map."""

    HOST_KEY = ProprietaryKey(PSBT_TAPRET_PREFIX, PSBT_OUT_TAPRET_HOST)
    COMMITMENT_KEY = ProprietaryKey(PSBT_TAPRET_PREFIX, PSBT_OUT_TAPRET_COMMITMENT)
    PROOF_KEY = ProprietaryKey(PSBT_TAPRET_PREFIX, PSBT_OUT_TAPRET_PROOF)

    def __init__(self, psbt_map: PSBTMap):
        self.psbt_map = psbt_map

    def is_tapret_host(self) -> bool:
        """Whether the output is marked as able to host a tapret commitment."""
        return self.HOST_KEY in self.psbt_map.proprietary

    def has_tapret_commitment(self) -> bool:
        return self.COMMITMENT_KEY in self.psbt_map.proprietary

    def tapret_commitment(self) -> Optional[bytes]:
        value = self.psbt_map.get_proprietary(self.COMMITMENT_KEY)
        if value is None:
            return None
        if len(value) != COMMITMENT_LENGTH:
            raise ProprietaryFieldError(
                f"Tapret commitment must be {COMMITMENT_LENGTH} bytes, got {len(value)}"
            )
        if not self.is_tapret_host():
            logger.warning("Tapret commitment found on an output not marked as tapret host")
        return value

    def tapret_proof(self) -> Optional[bytes]:
        return self.psbt_map.get_proprietary(self.PROOF_KEY)
