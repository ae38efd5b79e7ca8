"""
Bitcoin Scripts - Script Value Types

Bitcoin doesn't distinguish between scripts coming from different sources:
`scriptPubkey` of a transaction output, `sigScript` of an input, redeem
scripts, witness scripts and tapscripts are all the same byte programs. There
is, however, a clear distinction at the logical level: a script may be
committed into another script (by its hash) in several nested layers, like a
redeemScript inside of a sigScript for P2SH.

This module gives every logical layer its own immutable wrapper type:

* `LockScript` - the bottom layer, containing no commitments to other scripts;
* `PubkeyScript` - whatever goes into `scriptPubkey` of a transaction output;
* `SigScript` - whatever goes into `sigScript` of a transaction input;
* `RedeemScript` - the script committed to by a P2SH output (HASH160);
* `WitnessScript` - the script committed to by a P2WSH output (SHA256);
* `TapScript` - a Taproot leaf script (not derivable yet);
* `WitnessProgram` - the data following the version of a segwit output;
* `Witness` - the witness stack of a transaction input.

Conversions between the layers:

    LockScript -+-> (PubkeyScript + RedeemScript) -+-> SigScript
                |                                  +-> WitnessScript
                +-> PubkeyScript
                |
                +-> TapScript (unsupported)

    PubkeyScript --?--> LockScript
"""

from functools import total_ordering
from typing import Any, Iterable, Iterator, List, Optional, Type, TypeVar

from .builder import ScriptBuilder, iter_instructions, script_to_asm, Instruction
from .category import Category
from .exceptions import (
    ScriptError,
    ScriptParseError,
    UnsupportedCategoryError,
)
from .hashes import hash160, sha256
from .opcodes import ScriptOpcode
from .serialize import parse_compact_size, serialize_compact_size, varstr, varstr_parse
from .strategy import ToScripts
from .witness_version import WitnessVersion

T = TypeVar('T', bound='ByteWrapper')

# P2SH redeem scripts are pushed as a single stack element
MAX_SCRIPT_ELEMENT_SIZE = 520


@total_ordering
class Wrapper:
    """
    Shared implementation for all wrapper value types.

    Equality, ordering and hashing are structural over the wrapped value and
    never cross type boundaries: a `PubkeyScript` is not equal to a
    `RedeemScript` holding the same bytes.
    """

    __slots__ = ('_inner',)

    def __init__(self, inner):
        object.__setattr__(self, '_inner', inner)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def as_inner(self):
        return self._inner

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._inner == other._inner

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._inner < other._inner

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._inner))

    def __len__(self) -> int:
        return len(self._inner)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._inner!r})"


class ByteWrapper(Wrapper):
    """Wrapper over an opaque byte sequence with pass-through encoding."""

    __slots__ = ()

    def __init__(self, data: bytes = b''):
        if isinstance(data, Wrapper):
            # converting between layers must go through explicit conversions
            raise TypeError(
                f"Can't construct {type(self).__name__} from {type(data).__name__}"
            )
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"{type(self).__name__} requires bytes, got {type(data).__name__}")
        super().__init__(bytes(data))

    @classmethod
    def from_hex(cls: Type[T], hex_string: str) -> T:
        return cls(bytes.fromhex(hex_string))

    def __bytes__(self) -> bytes:
        return self._inner

    def to_bytes(self) -> bytes:
        return self._inner

    def hex(self) -> str:
        return self._inner.hex()

    def is_empty(self) -> bool:
        return len(self._inner) == 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self._inner.hex()}')"


class ScriptWrapper(ByteWrapper):
    """Wrapper over a script program."""

    __slots__ = ()

    def instructions(self) -> Iterator[Instruction]:
        """Iterate over parsed instructions of the program."""
        return iter_instructions(self._inner)

    def to_asm(self) -> str:
        return script_to_asm(self._inner)

    def __str__(self) -> str:
        return self.to_asm()


class WitnessProgram(ByteWrapper):
    """
    Data pushed after the version opcode of a segwit output.

    The program length determines its meaning for a given version: 20 bytes
    for a v0 public key hash, 32 bytes for a v0 script hash or a v1 key.
    """

    __slots__ = ()

    @classmethod
    def from_wpubkey_hash(cls, wpubkey_hash: bytes) -> 'WitnessProgram':
        if len(wpubkey_hash) != 20:
            raise ScriptError("Witness public key hash must be 20 bytes")
        return cls(wpubkey_hash)

    @classmethod
    def from_wscript_hash(cls, wscript_hash: bytes) -> 'WitnessProgram':
        if len(wscript_hash) != 32:
            raise ScriptError("Witness script hash must be 32 bytes")
        return cls(wscript_hash)

    def __str__(self) -> str:
        return self._inner.hex()


class Witness(Wrapper):
    """A content of the `witness` field of a transaction input (BIP-141)."""

    __slots__ = ()

    def __init__(self, stack: Iterable[bytes] = ()):
        if isinstance(stack, (bytes, bytearray)):
            raise TypeError("Witness requires a sequence of byte strings")
        super().__init__(tuple(bytes(item) for item in stack))

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._inner)

    def __getitem__(self, index):
        return self._inner[index]

    def to_list(self) -> List[bytes]:
        return list(self._inner)

    def serialize(self) -> bytes:
        """Serialize in the per-input witness format of BIP-144."""
        return serialize_compact_size(len(self._inner)) + b''.join(
            varstr(item) for item in self._inner
        )

    @classmethod
    def deserialize(cls, data: bytes) -> 'Witness':
        count, offset = parse_compact_size(data)
        items = []
        for _ in range(count):
            item, offset = varstr_parse(data, offset)
            items.append(item)
        if offset != len(data):
            raise ScriptParseError("Trailing data after witness stack")
        return cls(items)

    def __str__(self) -> str:
        return "[\n" + "".join(f"{item.hex()}\n" for item in self._inner) + "]\n"

    def __repr__(self) -> str:
        return f"Witness([{', '.join(repr(item.hex()) for item in self._inner)}])"


class SigScript(ScriptWrapper):
    """A content of `sigScript` from a transaction input."""

    __slots__ = ()


class TapScript(ScriptWrapper):
    """Any valid branch of Tapscript (BIP-342)."""

    __slots__ = ()


class RedeemScript(ScriptWrapper):
    """`redeemScript` as a part of `sigScript`; it is hashed for P2SH outputs."""

    __slots__ = ()

    @classmethod
    def from_lock_script(cls, lock_script: 'LockScript') -> 'RedeemScript':
        return cls(bytes(lock_script))

    def script_hash(self) -> bytes:
        """HASH160 of the script, as committed to by P2SH."""
        return hash160(self._inner)

    def to_p2sh(self) -> 'PubkeyScript':
        return PubkeyScript.p2sh(self.script_hash())


class WitnessScript(ScriptWrapper):
    """
    A script from the `witness` structure; an equivalent of `RedeemScript`
    for witness inputs. Unlike `RedeemScript`, it is committed to with a
    SHA256 hash.
    """

    __slots__ = ()

    @classmethod
    def from_lock_script(cls, lock_script: 'LockScript') -> 'WitnessScript':
        return cls(bytes(lock_script))

    def script_hash(self) -> bytes:
        """SHA256 of the script, as committed to by P2WSH."""
        return sha256(self._inner)

    def to_p2wsh(self) -> 'PubkeyScript':
        return PubkeyScript.p2wsh(self.script_hash())


class PubkeyScript(ScriptWrapper):
    """A content of `scriptPubkey` from a transaction output."""

    __slots__ = ()

    @classmethod
    def p2pk(cls, pubkey: bytes) -> 'PubkeyScript':
        return ScriptBuilder().push_slice(pubkey).push_opcode(ScriptOpcode.OP_CHECKSIG).into_script(cls)

    @classmethod
    def p2pkh(cls, pubkey_hash: bytes) -> 'PubkeyScript':
        if len(pubkey_hash) != 20:
            raise ScriptError("Public key hash must be 20 bytes")
        return (ScriptBuilder()
                .push_opcode(ScriptOpcode.OP_DUP)
                .push_opcode(ScriptOpcode.OP_HASH160)
                .push_slice(pubkey_hash)
                .push_opcode(ScriptOpcode.OP_EQUALVERIFY)
                .push_opcode(ScriptOpcode.OP_CHECKSIG)
                .into_script(cls))

    @classmethod
    def p2sh(cls, script_hash: bytes) -> 'PubkeyScript':
        if len(script_hash) != 20:
            raise ScriptError("Script hash must be 20 bytes")
        return (ScriptBuilder()
                .push_opcode(ScriptOpcode.OP_HASH160)
                .push_slice(script_hash)
                .push_opcode(ScriptOpcode.OP_EQUAL)
                .into_script(cls))

    @classmethod
    def from_witness_program(cls, version: WitnessVersion,
                             program: WitnessProgram) -> 'PubkeyScript':
        version = WitnessVersion.from_version(int(version))
        if not 2 <= len(program) <= 40:
            raise ScriptError(f"Witness program must be 2 to 40 bytes, got {len(program)}")
        return (ScriptBuilder()
                .push_opcode(version.to_opcode())
                .push_slice(bytes(program))
                .into_script(cls))

    @classmethod
    def p2wpkh(cls, wpubkey_hash: bytes) -> 'PubkeyScript':
        return cls.from_witness_program(WitnessVersion.V0, WitnessProgram.from_wpubkey_hash(wpubkey_hash))

    from_wpubkey_hash = p2wpkh

    @classmethod
    def p2wsh(cls, wscript_hash: bytes) -> 'PubkeyScript':
        return cls.from_witness_program(WitnessVersion.V0, WitnessProgram.from_wscript_hash(wscript_hash))

    def _parsed(self) -> Optional[List[Instruction]]:
        try:
            return list(self.instructions())
        except ScriptParseError:
            return None

    def is_p2pk(self) -> bool:
        instructions = self._parsed()
        return (instructions is not None and len(instructions) == 2 and
                instructions[0].is_push and len(instructions[0].data) in (33, 65) and
                instructions[1].opcode == ScriptOpcode.OP_CHECKSIG)

    def is_p2pkh(self) -> bool:
        s = self._inner
        return (len(s) == 25 and s[0] == ScriptOpcode.OP_DUP and s[1] == ScriptOpcode.OP_HASH160 and
                s[2] == 20 and s[23] == ScriptOpcode.OP_EQUALVERIFY and
                s[24] == ScriptOpcode.OP_CHECKSIG)

    def is_p2sh(self) -> bool:
        s = self._inner
        return (len(s) == 23 and s[0] == ScriptOpcode.OP_HASH160 and s[1] == 20 and
                s[22] == ScriptOpcode.OP_EQUAL)

    def is_witness_program(self) -> bool:
        """A version opcode followed by a single 2 to 40 byte push (BIP-141)."""
        s = self._inner
        if not 4 <= len(s) <= 42:
            return False
        if s[0] != ScriptOpcode.OP_0 and not ScriptOpcode.OP_1 <= s[0] <= ScriptOpcode.OP_16:
            return False
        return s[1] + 2 == len(s)

    def witness_version(self) -> Optional[WitnessVersion]:
        if not self.is_witness_program():
            return None
        return WitnessVersion.from_opcode(self._inner[0])

    def witness_program(self) -> Optional[WitnessProgram]:
        if not self.is_witness_program():
            return None
        return WitnessProgram(self._inner[2:])

    def address(self, network: str = 'bitcoin') -> Optional[str]:
        """
        Get the address for this output script.

        Args:
            network: bitcoinlib network name

        Returns:
            Address string, or None if the script matches no standard template
        """
        from .address import encode_address

        if self.is_p2pkh():
            return encode_address(self._inner[3:23], 'p2pkh', network)
        if self.is_p2sh():
            return encode_address(self._inner[2:22], 'p2sh', network)

        version = self.witness_version()
        if version is None:
            return None
        program = bytes(self.witness_program())
        if version == WitnessVersion.V0:
            if len(program) == 20:
                return encode_address(program, 'p2wpkh', network)
            if len(program) == 32:
                return encode_address(program, 'p2wsh', network)
            return None
        if version == WitnessVersion.V1 and len(program) == 32:
            return encode_address(program, 'p2tr', network, witver=1)
        return None

    def to_lock_script(self) -> 'LockScript':
        """
        Extract the bottom-layer script from P2PK and custom output scripts.

        Raises:
            ScriptError: if the output commits to a hash of a key or a script
        """
        if self.is_p2pkh() or self.is_p2sh() or self.is_witness_program():
            raise ScriptError("Output script contains a hash commitment and has no lock script")
        return LockScript(self._inner)


class LockScript(ScriptWrapper, ToScripts):
    """
    Script whose knowledge is required for spending some specific output.
    This is the deepest nested version of a script, containing no hashes of
    other scripts or public keys.
    """

    __slots__ = ()

    @classmethod
    def from_witness_script(cls, witness_script: WitnessScript) -> 'LockScript':
        return cls(bytes(witness_script))

    def script_hash(self) -> bytes:
        return hash160(self._inner)

    def wscript_hash(self) -> bytes:
        return sha256(self._inner)

    def _nested_redeem_script(self) -> RedeemScript:
        # only v0 programs can be nested; v1 requires a TapScript source
        return RedeemScript(bytes(self.to_pubkey_script(Category.SEGWIT)))

    def to_pubkey_script(self, category: Category) -> PubkeyScript:
        if category is Category.BARE:
            return PubkeyScript(self._inner)
        if category is Category.HASHED:
            return PubkeyScript.p2sh(self.script_hash())
        if category is Category.SEGWIT:
            return WitnessScript.from_lock_script(self).to_p2wsh()
        if category is Category.NESTED:
            return self._nested_redeem_script().to_p2sh()
        raise UnsupportedCategoryError(category, "pubkey script derivation")

    def to_sig_script(self, category: Category) -> SigScript:
        if category is Category.BARE:
            # signatures are added later by the signer
            return SigScript()
        if category is Category.HASHED:
            return (ScriptBuilder()
                    .push_slice(bytes(RedeemScript.from_lock_script(self)))
                    .into_script(SigScript))
        if category is Category.NESTED:
            return (ScriptBuilder()
                    .push_slice(bytes(self._nested_redeem_script()))
                    .into_script(SigScript))
        if category is Category.SEGWIT:
            return SigScript()
        raise UnsupportedCategoryError(category, "sig script derivation")

    def to_witness(self, category: Category) -> Optional[Witness]:
        if category in (Category.BARE, Category.HASHED):
            return None
        if category in (Category.SEGWIT, Category.NESTED):
            return Witness([bytes(WitnessScript.from_lock_script(self))])
        raise UnsupportedCategoryError(category, "witness derivation")

    def to_tap_script(self) -> TapScript:
        raise UnsupportedCategoryError(Category.TAPROOT, "tapscript derivation")


__all__ = [
    'Wrapper',
    'ByteWrapper',
    'ScriptWrapper',
    'LockScript',
    'PubkeyScript',
    'SigScript',
    'RedeemScript',
    'WitnessScript',
    'TapScript',
    'WitnessProgram',
    'Witness',
    'MAX_SCRIPT_ELEMENT_SIZE',
]
