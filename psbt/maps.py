"""
PSBT Input and Output Maps

Per-input and per-output key-value maps of BIP-174, limited to the script
fields produced by descriptors, BIP32 derivations and proprietary fields.
Other fields are preserved as unknown entries.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from typing import Dict, List, Optional, Tuple

from bitcoin_scripts.exceptions import ScriptParseError
from bitcoin_scripts.script_set import ScriptSet
from bitcoin_scripts.types import RedeemScript, SigScript, Witness, WitnessScript

from .exceptions import PSBTParsingError
from .proprietary import PSBT_PROPRIETARY_TYPE, ProprietaryKey
from .utils import decode_bip32_path, encode_bip32_path, parse_key_value, serialize_key_value

logger = logging.getLogger(__name__)

MAP_SEPARATOR = b'\x00'


class PSBTKeyType(Enum):
    """PSBT key types as defined in BIP-174."""

    # Input types
    PSBT_IN_REDEEM_SCRIPT = 0x04
    PSBT_IN_WITNESS_SCRIPT = 0x05
    PSBT_IN_BIP32_DERIVATION = 0x06
    PSBT_IN_FINAL_SCRIPTSIG = 0x07
    PSBT_IN_FINAL_SCRIPTWITNESS = 0x08
    PSBT_IN_PROPRIETARY = 0xfc

    # Output types
    PSBT_OUT_REDEEM_SCRIPT = 0x00
    PSBT_OUT_WITNESS_SCRIPT = 0x01
    PSBT_OUT_BIP32_DERIVATION = 0x02
    PSBT_OUT_PROPRIETARY = 0xfc


@dataclass
class PSBTKeyValue:
    """Represents a key-value pair in PSBT format."""
    key_type: int
    key_data: bytes = field(default_factory=bytes)
    value: bytes = field(default_factory=bytes)

    def serialize(self) -> bytes:
        return serialize_key_value(bytes([self.key_type]) + self.key_data, self.value)


def _read_map(data: bytes, offset: int) -> Tuple[List[Tuple[bytes, bytes]], int]:
    """Read key-value pairs up to the map separator."""
    pairs = []
    while True:
        if offset >= len(data):
            raise PSBTParsingError("Map is missing the separator")
        key, value, offset = parse_key_value(data, offset)
        if not key:
            return pairs, offset
        pairs.append((key, value))


@dataclass
class PSBTMap:
    """Fields shared by input and output maps."""
    bip32_derivations: Dict[bytes, Tuple[bytes, List[int]]] = field(default_factory=dict)
    proprietary: Dict[ProprietaryKey, bytes] = field(default_factory=dict)
    unknown: Dict[bytes, bytes] = field(default_factory=dict)

    def get_proprietary(self, key: ProprietaryKey) -> Optional[bytes]:
        return self.proprietary.get(key)

    def proprietary_with_prefix(self, prefix: bytes, subtype: int) -> Dict[ProprietaryKey, bytes]:
        return {
            key: value for key, value in self.proprietary.items()
            if key.prefix == prefix and key.subtype == subtype
        }

    def _serialize_common(self, result: BytesIO, derivation_type: int) -> None:
        for pubkey, (fingerprint, path) in self.bip32_derivations.items():
            kv = PSBTKeyValue(derivation_type, pubkey, fingerprint + encode_bip32_path(path))
            result.write(kv.serialize())

        for prop_key, prop_value in self.proprietary.items():
            result.write(serialize_key_value(prop_key.serialize(), prop_value))

        for key, value in self.unknown.items():
            result.write(serialize_key_value(key, value))

    def _parse_common(self, key: bytes, value: bytes, derivation_type: int) -> None:
        key_type = key[0]
        if key_type == derivation_type:
            if len(value) < 4:
                raise PSBTParsingError("BIP32 derivation value is too short")
            self.bip32_derivations[key[1:]] = (value[:4], decode_bip32_path(value[4:]))
        elif key_type == PSBT_PROPRIETARY_TYPE:
            self.proprietary[ProprietaryKey.parse(key)] = value
        else:
            logger.debug("Keeping unknown PSBT key type 0x%02x", key_type)
            self.unknown[key] = value


@dataclass
class PSBTInput(PSBTMap):
    """Represents input fields in a PSBT."""
    redeem_script: Optional[RedeemScript] = None
    witness_script: Optional[WitnessScript] = None
    final_scriptsig: Optional[SigScript] = None
    final_scriptwitness: Optional[Witness] = None

    def set_final_scripts(self, script_set: ScriptSet) -> None:
        """Fill final script fields from the input side of a script set."""
        self.final_scriptsig = script_set.sig_script if not script_set.sig_script.is_empty() else None
        self.final_scriptwitness = script_set.witness

    def serialize(self) -> bytes:
        result = BytesIO()

        if self.redeem_script is not None:
            kv = PSBTKeyValue(PSBTKeyType.PSBT_IN_REDEEM_SCRIPT.value, b'', bytes(self.redeem_script))
            result.write(kv.serialize())

        if self.witness_script is not None:
            kv = PSBTKeyValue(PSBTKeyType.PSBT_IN_WITNESS_SCRIPT.value, b'', bytes(self.witness_script))
            result.write(kv.serialize())

        if self.final_scriptsig is not None:
            kv = PSBTKeyValue(PSBTKeyType.PSBT_IN_FINAL_SCRIPTSIG.value, b'', bytes(self.final_scriptsig))
            result.write(kv.serialize())

        if self.final_scriptwitness is not None:
            kv = PSBTKeyValue(PSBTKeyType.PSBT_IN_FINAL_SCRIPTWITNESS.value, b'',
                              self.final_scriptwitness.serialize())
            result.write(kv.serialize())

        self._serialize_common(result, PSBTKeyType.PSBT_IN_BIP32_DERIVATION.value)
        result.write(MAP_SEPARATOR)
        return result.getvalue()

    @classmethod
    def parse(cls, data: bytes, offset: int = 0) -> Tuple['PSBTInput', int]:
        psbt_input = cls()
        pairs, offset = _read_map(data, offset)
        for key, value in pairs:
            key_type = key[0]
            if key_type == PSBTKeyType.PSBT_IN_REDEEM_SCRIPT.value:
                psbt_input.redeem_script = RedeemScript(value)
            elif key_type == PSBTKeyType.PSBT_IN_WITNESS_SCRIPT.value:
                psbt_input.witness_script = WitnessScript(value)
            elif key_type == PSBTKeyType.PSBT_IN_FINAL_SCRIPTSIG.value:
                psbt_input.final_scriptsig = SigScript(value)
            elif key_type == PSBTKeyType.PSBT_IN_FINAL_SCRIPTWITNESS.value:
                try:
                    psbt_input.final_scriptwitness = Witness.deserialize(value)
                except (ValueError, ScriptParseError) as e:
                    raise PSBTParsingError(f"Invalid final script witness: {e}") from e
            else:
                psbt_input._parse_common(key, value, PSBTKeyType.PSBT_IN_BIP32_DERIVATION.value)
        return psbt_input, offset


@dataclass
class PSBTOutput(PSBTMap):
    """Represents output fields in a PSBT."""
    redeem_script: Optional[RedeemScript] = None
    witness_script: Optional[WitnessScript] = None

    def serialize(self) -> bytes:
        result = BytesIO()

        if self.redeem_script is not None:
            kv = PSBTKeyValue(PSBTKeyType.PSBT_OUT_REDEEM_SCRIPT.value, b'', bytes(self.redeem_script))
            result.write(kv.serialize())

        if self.witness_script is not None:
            kv = PSBTKeyValue(PSBTKeyType.PSBT_OUT_WITNESS_SCRIPT.value, b'', bytes(self.witness_script))
            result.write(kv.serialize())

        self._serialize_common(result, PSBTKeyType.PSBT_OUT_BIP32_DERIVATION.value)
        result.write(MAP_SEPARATOR)
        return result.getvalue()

    @classmethod
    def parse(cls, data: bytes, offset: int = 0) -> Tuple['PSBTOutput', int]:
        psbt_output = cls()
        pairs, offset = _read_map(data, offset)
        for key, value in pairs:
            key_type = key[0]
            if key_type == PSBTKeyType.PSBT_OUT_REDEEM_SCRIPT.value:
                psbt_output.redeem_script = RedeemScript(value)
            elif key_type == PSBTKeyType.PSBT_OUT_WITNESS_SCRIPT.value:
                psbt_output.witness_script = WitnessScript(value)
            else:
                psbt_output._parse_common(key, value, PSBTKeyType.PSBT_OUT_BIP32_DERIVATION.value)
        return psbt_output, offset
