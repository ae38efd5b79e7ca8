"""
Bitcoin Scripts Package

Typed script values (lock, pubkey, sig, redeem, witness and tap scripts),
witness versions, output categories and the conversions between them.
"""

from .category import Category
from .exceptions import (
    ScriptError,
    ScriptParseError,
    WitnessVersionError,
    IncorrectOpcodeError,
    UnsupportedCategoryError,
    UncompressedKeyError,
)
from .builder import Instruction, ScriptBuilder, iter_instructions, script_to_asm
from .opcodes import ScriptOpcode, opcode_name
from .hashes import sha256, hash160, ripemd160
from .witness_version import WitnessVersion
from .types import (
    LockScript,
    PubkeyScript,
    SigScript,
    RedeemScript,
    WitnessScript,
    TapScript,
    WitnessProgram,
    Witness,
    MAX_SCRIPT_ELEMENT_SIZE,
)
from .script_set import ScriptSet
from .strategy import ToLockScript, ToPubkeyScript, ToScripts

__all__ = [
    'Category',
    'ScriptError',
    'ScriptParseError',
    'WitnessVersionError',
    'IncorrectOpcodeError',
    'UnsupportedCategoryError',
    'UncompressedKeyError',
    'Instruction',
    'ScriptBuilder',
    'iter_instructions',
    'script_to_asm',
    'ScriptOpcode',
    'opcode_name',
    'sha256',
    'hash160',
    'ripemd160',
    'WitnessVersion',
    'LockScript',
    'PubkeyScript',
    'SigScript',
    'RedeemScript',
    'WitnessScript',
    'TapScript',
    'WitnessProgram',
    'Witness',
    'MAX_SCRIPT_ELEMENT_SIZE',
    'ScriptSet',
    'ToLockScript',
    'ToPubkeyScript',
    'ToScripts',
]
