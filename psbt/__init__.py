"""
PSBT Package

BIP-174 input/output maps, proprietary keys and the P2C/tapret commitment
key constants.
"""

from .exceptions import PSBTError, PSBTParsingError, ProprietaryFieldError
from .proprietary import ProprietaryKey, PSBT_PROPRIETARY_TYPE
from .maps import PSBTKeyType, PSBTKeyValue, PSBTMap, PSBTInput, PSBTOutput
from .commit import (
    PSBT_P2C_PREFIX,
    PSBT_IN_P2C_TWEAK,
    PSBT_TAPRET_PREFIX,
    PSBT_OUT_TAPRET_HOST,
    PSBT_OUT_TAPRET_COMMITMENT,
    PSBT_OUT_TAPRET_PROOF,
    P2cOutput,
    TapretOutput,
)
from .utils import serialize_compact_size, parse_compact_size

__all__ = [
    'PSBTError',
    'PSBTParsingError',
    'ProprietaryFieldError',
    'ProprietaryKey',
    'PSBT_PROPRIETARY_TYPE',
    'PSBTKeyType',
    'PSBTKeyValue',
    'PSBTMap',
    'PSBTInput',
    'PSBTOutput',
    'PSBT_P2C_PREFIX',
    'PSBT_IN_P2C_TWEAK',
    'PSBT_TAPRET_PREFIX',
    'PSBT_OUT_TAPRET_HOST',
    'PSBT_OUT_TAPRET_COMMITMENT',
    'PSBT_OUT_TAPRET_PROOF',
    'P2cOutput',
    'TapretOutput',
    'serialize_compact_size',
    'parse_compact_size',
]
