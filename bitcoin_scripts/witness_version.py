"""
Bitcoin Scripts - Witness Version

Version of the witness program: the first opcode of a segwit `scriptPubkey`,
ranging from OP_0 to OP_16 (inclusive). Using a closed enumeration instead of
a plain integer rules out versions above 16.
"""

from enum import IntEnum

from .builder import Instruction
from .exceptions import IncorrectOpcodeError
from .opcodes import ScriptOpcode, decode_small_int, small_int_opcode


class WitnessVersion(IntEnum):
    """Witness program versions 0 to 16."""

    V0 = 0    # P2WPKH and P2WSH
    V1 = 1    # Taproot
    V2 = 2
    V3 = 3
    V4 = 4
    V5 = 5
    V6 = 6
    V7 = 7
    V8 = 8
    V9 = 9
    V10 = 10
    V11 = 11
    V12 = 12
    V13 = 13
    V14 = 14
    V15 = 15
    V16 = 16

    @classmethod
    def _missing_(cls, value):
        raise IncorrectOpcodeError(value)

    @classmethod
    def from_version(cls, value: int) -> 'WitnessVersion':
        """
        Construct from a numeric version.

        Raises:
            IncorrectOpcodeError: for anything outside 0..16
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise IncorrectOpcodeError(value)
        if not 0 <= value <= 16:
            raise IncorrectOpcodeError(value)
        return cls(value)

    @classmethod
    def from_opcode(cls, opcode: int) -> 'WitnessVersion':
        """
        Construct from a script opcode in the OP_0..OP_16 range.

        Raises:
            IncorrectOpcodeError: for any other opcode
        """
        if isinstance(opcode, bool) or not isinstance(opcode, int):
            raise IncorrectOpcodeError(opcode)
        version = decode_small_int(opcode)
        if version is None:
            raise IncorrectOpcodeError(opcode)
        return cls(version)

    @classmethod
    def from_instruction(cls, instruction: Instruction) -> 'WitnessVersion':
        """
        Construct from a parsed instruction.

        OP_0 is parsed as an empty data push, so it is accepted here; any other
        data push is rejected.
        """
        if instruction.is_push:
            if instruction.opcode == ScriptOpcode.OP_0:
                return cls.V0
            raise IncorrectOpcodeError(instruction.opcode)
        return cls.from_opcode(instruction.opcode)

    def to_opcode(self) -> int:
        """Convert into the corresponding OP_0..OP_16 opcode."""
        return small_int_opcode(int(self))

    def __str__(self) -> str:
        return f"v{int(self)}"
