"""
Descriptor Templates

A template derives keys or lock scripts for a given derivation index. Two
templates are provided:

* `SingleSig` - a single extended public key with an unhardened branch,
  written as `[d34db33f/84h/0h/0h]xpub.../0/*`;
* `MultiSig` - a bare multisig script over several key templates, written
  as `multi(2,KEY,KEY,...)` or `sortedmulti(2,KEY,KEY,...)`.

Template notation never contains the `<` and `>` characters, so it can be
embedded into the compact generator notation.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from coincurve.context import GLOBAL_CONTEXT, Context

from bitcoin_hd.exceptions import CryptoError, IndexOutOfRangeError
from bitcoin_hd.index import (
    UnhardenedIndex,
    format_derivation_path,
    parse_derivation_path,
    parse_index,
)
from bitcoin_hd.keys import PublicKey
from bitcoin_hd.xkey import ExtendedKey
from bitcoin_scripts.builder import ScriptBuilder
from bitcoin_scripts.category import Category
from bitcoin_scripts.exceptions import UnsupportedCategoryError
from bitcoin_scripts.opcodes import ScriptOpcode
from bitcoin_scripts.types import LockScript, MAX_SCRIPT_ELEMENT_SIZE

from .exceptions import DescriptorError, TemplateDerivationError, TemplateParseError

logger = logging.getLogger(__name__)

MAX_MULTISIG_KEYS = 20
MAX_BARE_MULTISIG_KEYS = 3
WILDCARD = '*'


class Template(ABC):
    """Derivation capability consumed by the generator."""

    @property
    @abstractmethod
    def is_single_sig(self) -> bool:
        pass

    @abstractmethod
    def try_derive_public_key(self, ctx: Context, index: UnhardenedIndex) -> Optional[PublicKey]:
        """Derive the only key of a single-sig template, None for other templates."""
        pass

    @abstractmethod
    def derive_lock_script(self, ctx: Context, index: UnhardenedIndex,
                           category: Category) -> LockScript:
        pass

    @classmethod
    def parse(cls, text: str) -> 'Template':
        """
        Parse template notation.

        Raises:
            TemplateParseError: if the text is not a valid template
        """
        if any(char.isspace() for char in text):
            raise TemplateParseError(f"Template notation must not contain whitespace: {text!r}")
        if text.startswith(('multi(', 'sortedmulti(')):
            return MultiSig.parse(text)
        return SingleSig.parse(text)


@dataclass(frozen=True)
class KeyTemplate:
    """
    Extended public key with an optional key origin and an unhardened
    branch, followed by the derivation index wildcard.
    """
    xpub: ExtendedKey
    branch: Tuple[UnhardenedIndex, ...] = ()
    origin_fingerprint: Optional[bytes] = None
    origin_path: Tuple[int, ...] = ()

    def __post_init__(self):
        if self.xpub.is_private:
            raise TemplateDerivationError("Key templates must contain public keys only")
        try:
            branch = tuple(UnhardenedIndex(step) for step in self.branch)
        except IndexOutOfRangeError as e:
            raise TemplateDerivationError(f"Branch steps must be unhardened: {e}") from e
        object.__setattr__(self, 'branch', branch)
        object.__setattr__(self, 'origin_path', tuple(self.origin_path))
        if self.origin_fingerprint is not None and len(self.origin_fingerprint) != 4:
            raise TemplateDerivationError("Origin fingerprint must be 4 bytes")

    @classmethod
    def parse_key(cls, text: str) -> dict:
        origin_fingerprint = None
        origin_path: Tuple[int, ...] = ()

        if text.startswith('['):
            origin, sep, text = text[1:].partition(']')
            if not sep:
                raise TemplateParseError("Key origin is missing the closing ']'")
            fingerprint_hex, _, path = origin.partition('/')
            if len(fingerprint_hex) != 8:
                raise TemplateParseError(f"Invalid origin fingerprint: {fingerprint_hex!r}")
            try:
                origin_fingerprint = bytes.fromhex(fingerprint_hex)
                origin_path = tuple(parse_derivation_path(path))
            except (ValueError, CryptoError) as e:
                raise TemplateParseError(f"Invalid key origin: {origin!r}") from e

        parts = text.split('/')
        if len(parts) < 2 or parts[-1] != WILDCARD:
            raise TemplateParseError(f"Key template must end with '/{WILDCARD}': {text!r}")

        try:
            xpub = ExtendedKey.from_string(parts[0])
        except CryptoError as e:
            raise TemplateParseError(f"Invalid extended public key: {parts[0]!r}") from e
        if xpub.is_private:
            raise TemplateParseError("Key templates must contain public keys only")

        branch = []
        for step in parts[1:-1]:
            try:
                index = parse_index(step)
            except CryptoError as e:
                raise TemplateParseError(f"Invalid branch step: {step!r}") from e
            if not isinstance(index, UnhardenedIndex):
                raise TemplateParseError(f"Hardened branch step {step!r} can't be derived from xpub")
            branch.append(index)

        return dict(xpub=xpub, branch=tuple(branch), origin_fingerprint=origin_fingerprint,
                    origin_path=origin_path)

    @classmethod
    def parse(cls, text: str) -> 'KeyTemplate':
        return cls(**cls.parse_key(text))

    def derive_public_key(self, ctx: Context = GLOBAL_CONTEXT,
                          index: UnhardenedIndex = UnhardenedIndex(0)) -> PublicKey:
        """Derive the key at `branch/index` below the extended key."""
        child = self.xpub.derive_indexes(self.branch + (UnhardenedIndex(index),), ctx)
        return child.public_key

    def key_notation(self) -> str:
        origin = ''
        if self.origin_fingerprint is not None:
            origin = '[' + format_derivation_path(self.origin_path, self.origin_fingerprint.hex()) + ']'
        branch = ''.join(f"/{step}" for step in self.branch)
        return f"{origin}{self.xpub.to_xpub()}{branch}/{WILDCARD}"

    def __str__(self) -> str:
        return self.key_notation()


@dataclass(frozen=True)
class SingleSig(KeyTemplate, Template):
    """Template over exactly one key; public derivation can't fail for it."""

    @property
    def is_single_sig(self) -> bool:
        return True

    def try_derive_public_key(self, ctx: Context, index: UnhardenedIndex) -> Optional[PublicKey]:
        return self.derive_public_key(ctx, index)

    def derive_lock_script(self, ctx: Context, index: UnhardenedIndex,
                           category: Category) -> LockScript:
        return self.derive_public_key(ctx, index).to_lock_script(category)


@dataclass(frozen=True)
class MultiSig(Template):
    """k-of-n CHECKMULTISIG template."""
    threshold: int
    keys: Tuple[KeyTemplate, ...]
    sorted: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'keys', tuple(self.keys))
        count = len(self.keys)
        if not 1 <= count <= MAX_MULTISIG_KEYS:
            raise TemplateDerivationError(
                f"Multisig requires 1 to {MAX_MULTISIG_KEYS} keys, got {count}"
            )
        if not 1 <= self.threshold <= count:
            raise TemplateDerivationError(
                f"Multisig threshold {self.threshold} is outside of range 1..{count}"
            )

    @property
    def is_single_sig(self) -> bool:
        return False

    @property
    def name(self) -> str:
        return 'sortedmulti' if self.sorted else 'multi'

    @classmethod
    def parse(cls, text: str) -> 'MultiSig':
        name, sep, rest = text.partition('(')
        if not sep or name not in ('multi', 'sortedmulti') or not rest.endswith(')'):
            raise TemplateParseError(f"Invalid multisig template: {text!r}")

        args = rest[:-1].split(',')
        if len(args) < 2:
            raise TemplateParseError("Multisig template requires a threshold and keys")
        try:
            threshold = int(args[0])
        except ValueError as e:
            raise TemplateParseError(f"Invalid multisig threshold: {args[0]!r}") from e

        keys = tuple(KeyTemplate.parse(arg) for arg in args[1:])
        try:
            return cls(threshold, keys, sorted=(name == 'sortedmulti'))
        except DescriptorError as e:
            raise TemplateParseError(str(e)) from e

    def try_derive_public_key(self, ctx: Context, index: UnhardenedIndex) -> Optional[PublicKey]:
        return None

    def derive_public_keys(self, ctx: Context, index: UnhardenedIndex) -> Tuple[PublicKey, ...]:
        keys = [key.derive_public_key(ctx, index) for key in self.keys]
        if self.sorted:
            keys.sort(key=lambda key: key.bytes)
        return tuple(keys)

    def derive_lock_script(self, ctx: Context, index: UnhardenedIndex,
                           category: Category) -> LockScript:
        """
        Build `OP_k <keys> OP_n OP_CHECKMULTISIG` for the given index.

        Raises:
            UnsupportedCategoryError: for the taproot category
            TemplateDerivationError: if the script is non-standard for the category
        """
        if category is Category.TAPROOT:
            raise UnsupportedCategoryError(category, "multisig lock script derivation")

        if category is Category.BARE and len(self.keys) > MAX_BARE_MULTISIG_KEYS:
            raise TemplateDerivationError(
                f"Bare multisig is limited to {MAX_BARE_MULTISIG_KEYS} keys, got {len(self.keys)}"
            )

        builder = ScriptBuilder().push_int(self.threshold)
        for key in self.derive_public_keys(ctx, index):
            builder.push_slice(key.bytes)
        builder.push_int(len(self.keys)).push_opcode(ScriptOpcode.OP_CHECKMULTISIG)
        script = builder.into_script(LockScript)

        if category is Category.HASHED and len(script) > MAX_SCRIPT_ELEMENT_SIZE:
            raise TemplateDerivationError(
                f"Redeem script of {len(script)} bytes exceeds the P2SH limit of "
                f"{MAX_SCRIPT_ELEMENT_SIZE} bytes"
            )
        return script

    def __str__(self) -> str:
        keys = ','.join(key.key_notation() for key in self.keys)
        return f"{self.name}({self.threshold},{keys})"


__all__ = ['Template', 'KeyTemplate', 'SingleSig', 'MultiSig']
