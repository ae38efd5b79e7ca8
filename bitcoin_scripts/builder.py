"""
Bitcoin Scripts - Script Builder and Instruction Parser

This module provides a chaining builder for assembling script programs and
an instruction iterator which splits a serialized program back into data
pushes and opcodes.
"""

import struct
from dataclasses import dataclass
from typing import Iterator, List, Optional, Type, TypeVar

from .exceptions import ScriptParseError
from .opcodes import ScriptOpcode, MAX_DIRECT_PUSH, opcode_name, small_int_opcode

T = TypeVar('T')


@dataclass(frozen=True)
class Instruction:
    """A single parsed script instruction."""
    opcode: int
    data: Optional[bytes] = None

    @property
    def is_push(self) -> bool:
        """Whether the instruction pushes data (OP_0 counts as an empty push)."""
        return self.data is not None

    def to_asm(self) -> str:
        if self.data is not None and self.data:
            return self.data.hex()
        return opcode_name(self.opcode)


class ScriptBuilder:
    """
    Builder for script programs.

    Unlike a minimal-push encoder, `push_slice` always encodes the data as a
    data push, so pushing b'\\x01' produces `OP_PUSHBYTES_1 01` and never
    `OP_1`. Use `push_int` for numbers.
    """

    def __init__(self):
        self.script_stack: List[bytes] = []

    def reset(self) -> None:
        """Reset the builder to start a new script."""
        self.script_stack.clear()

    def push_slice(self, data: bytes) -> 'ScriptBuilder':
        """
        Push raw data with the shortest length-based push opcode.

        Args:
            data: Data to push

        Returns:
            Self for method chaining
        """
        data = bytes(data)
        if len(data) == 0:
            self.script_stack.append(bytes([ScriptOpcode.OP_0]))
        elif len(data) <= MAX_DIRECT_PUSH:
            self.script_stack.append(bytes([len(data)]) + data)
        elif len(data) <= 0xff:
            self.script_stack.append(bytes([ScriptOpcode.OP_PUSHDATA1, len(data)]) + data)
        elif len(data) <= 0xffff:
            self.script_stack.append(bytes([ScriptOpcode.OP_PUSHDATA2]) + struct.pack('<H', len(data)) + data)
        else:
            self.script_stack.append(bytes([ScriptOpcode.OP_PUSHDATA4]) + struct.pack('<I', len(data)) + data)
        return self

    def push_opcode(self, opcode: int) -> 'ScriptBuilder':
        """Push a single opcode."""
        if not 0 <= opcode <= 0xff:
            raise ValueError(f"Opcode out of range: {opcode}")
        self.script_stack.append(bytes([opcode]))
        return self

    def push_int(self, number: int) -> 'ScriptBuilder':
        """
        Push a number using minimal encoding.

        Args:
            number: Number to push

        Returns:
            Self for method chaining
        """
        if number == -1:
            return self.push_opcode(ScriptOpcode.OP_1NEGATE)
        opcode = small_int_opcode(number)
        if opcode is not None:
            return self.push_opcode(opcode)
        return self.push_slice(encode_script_number(number))

    def build(self) -> bytes:
        """Get the serialized program."""
        return b''.join(self.script_stack)

    def into_script(self, script_type: Type[T]) -> T:
        """Wrap the serialized program into one of the script value types."""
        return script_type(self.build())


def encode_script_number(number: int) -> bytes:
    """Encode number in Bitcoin script format (little-endian, sign bit)."""
    if number == 0:
        return b''

    negative = number < 0
    if negative:
        number = -number

    result = []
    while number > 0:
        result.append(number & 0xff)
        number >>= 8

    if result[-1] & 0x80:
        result.append(0x80 if negative else 0x00)
    elif negative:
        result[-1] |= 0x80

    return bytes(result)


def iter_instructions(program: bytes) -> Iterator[Instruction]:
    """
    Iterate over instructions of a serialized script program.

    Args:
        program: Raw script bytes

    Yields:
        Instruction records; `data` is set for data pushes only

    Raises:
        ScriptParseError: if a push runs past the end of the program
    """
    program = bytes(program)
    pc = 0
    end = len(program)

    while pc < end:
        opcode = program[pc]
        pc += 1

        if opcode == ScriptOpcode.OP_0:
            yield Instruction(opcode, b'')
            continue

        if opcode <= MAX_DIRECT_PUSH:
            data_len = opcode
        elif opcode == ScriptOpcode.OP_PUSHDATA1:
            if pc + 1 > end:
                raise ScriptParseError("Missing length byte for OP_PUSHDATA1")
            data_len = program[pc]
            pc += 1
        elif opcode == ScriptOpcode.OP_PUSHDATA2:
            if pc + 2 > end:
                raise ScriptParseError("Missing length bytes for OP_PUSHDATA2")
            data_len = struct.unpack('<H', program[pc:pc + 2])[0]
            pc += 2
        elif opcode == ScriptOpcode.OP_PUSHDATA4:
            if pc + 4 > end:
                raise ScriptParseError("Missing length bytes for OP_PUSHDATA4")
            data_len = struct.unpack('<I', program[pc:pc + 4])[0]
            pc += 4
        else:
            yield Instruction(opcode)
            continue

        if pc + data_len > end:
            raise ScriptParseError(
                f"Insufficient data for {opcode_name(opcode)} at position {pc}"
            )
        yield Instruction(opcode, program[pc:pc + data_len])
        pc += data_len


def script_to_asm(program: bytes) -> str:
    """
    Render a program as a space-separated assembly string.

    Malformed tails are rendered as `[error]` rather than raising, since this
    is used for display only.
    """
    parts = []
    try:
        for instruction in iter_instructions(program):
            parts.append(instruction.to_asm())
    except ScriptParseError:
        parts.append('[error]')
    return ' '.join(parts)
