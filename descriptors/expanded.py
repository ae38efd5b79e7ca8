"""
Expanded Descriptors

Concrete descriptor shapes produced by the generator: four single-key forms
and four script forms, one per output category. Every shape converts into
its output script without failing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Dict, Type

from bitcoin_hd.keys import PublicKey
from bitcoin_scripts.category import Category
from bitcoin_scripts.exceptions import UncompressedKeyError
from bitcoin_scripts.script_set import ScriptSet
from bitcoin_scripts.types import LockScript, PubkeyScript


class Expanded(ABC):
    """Common interface of all descriptor shapes."""

    category: ClassVar[Category]

    @abstractmethod
    def to_pubkey_script(self) -> PubkeyScript:
        pass

    @abstractmethod
    def to_scripts(self) -> ScriptSet:
        pass

    def address(self, network: str = 'bitcoin'):
        return self.to_pubkey_script().address(network)


@dataclass(frozen=True)
class _SingleKey(Expanded):
    key: PublicKey

    def to_pubkey_script(self) -> PubkeyScript:
        return self.key.to_pubkey_script(self.category)

    def to_scripts(self) -> ScriptSet:
        return self.key.to_scripts(self.category)


@dataclass(frozen=True)
class _WitnessKey(_SingleKey):

    def __post_init__(self):
        if not self.key.compressed:
            raise UncompressedKeyError(
                f"{type(self).__name__} descriptor requires a compressed public key"
            )


@dataclass(frozen=True)
class Pk(_SingleKey):
    category: ClassVar[Category] = Category.BARE

    def __str__(self) -> str:
        return f"pk({self.key})"


@dataclass(frozen=True)
class Pkh(_SingleKey):
    category: ClassVar[Category] = Category.HASHED

    def __str__(self) -> str:
        return f"pkh({self.key})"


@dataclass(frozen=True)
class ShWpkh(_WitnessKey):
    category: ClassVar[Category] = Category.NESTED

    def __str__(self) -> str:
        return f"sh(wpkh({self.key}))"


@dataclass(frozen=True)
class Wpkh(_WitnessKey):
    category: ClassVar[Category] = Category.SEGWIT

    def __str__(self) -> str:
        return f"wpkh({self.key})"


@dataclass(frozen=True)
class Bare(Expanded):
    """Arbitrary output script used as is."""
    script: PubkeyScript
    category: ClassVar[Category] = Category.BARE

    def to_pubkey_script(self) -> PubkeyScript:
        return self.script

    def to_scripts(self) -> ScriptSet:
        return ScriptSet(pubkey_script=self.script)

    def __str__(self) -> str:
        return f"raw({self.script.hex()})"


@dataclass(frozen=True)
class _LockScriptShape(Expanded):
    script: LockScript

    def to_pubkey_script(self) -> PubkeyScript:
        return self.script.to_pubkey_script(self.category)

    def to_scripts(self) -> ScriptSet:
        return self.script.to_scripts(self.category)


@dataclass(frozen=True)
class Sh(_LockScriptShape):
    category: ClassVar[Category] = Category.HASHED

    def __str__(self) -> str:
        return f"sh({self.script.hex()})"


@dataclass(frozen=True)
class ShWsh(_LockScriptShape):
    category: ClassVar[Category] = Category.NESTED

    def __str__(self) -> str:
        return f"sh(wsh({self.script.hex()}))"


@dataclass(frozen=True)
class Wsh(_LockScriptShape):
    category: ClassVar[Category] = Category.SEGWIT

    def __str__(self) -> str:
        return f"wsh({self.script.hex()})"


SINGLE_KEY_SHAPES: Dict[Category, Type[_SingleKey]] = {
    Category.BARE: Pk,
    Category.HASHED: Pkh,
    Category.NESTED: ShWpkh,
    Category.SEGWIT: Wpkh,
}


def script_shape(category: Category, lock_script: LockScript) -> Expanded:
    """Wrap a derived lock script into the shape matching its category."""
    if category is Category.BARE:
        return Bare(lock_script.to_pubkey_script(Category.BARE))
    if category is Category.HASHED:
        return Sh(lock_script)
    if category is Category.NESTED:
        return ShWsh(lock_script)
    if category is Category.SEGWIT:
        return Wsh(lock_script)
    raise ValueError(f"No descriptor shape for {category} category")


__all__ = [
    'Expanded',
    'Pk',
    'Pkh',
    'ShWpkh',
    'Wpkh',
    'Bare',
    'Sh',
    'ShWsh',
    'Wsh',
    'SINGLE_KEY_SHAPES',
    'script_shape',
]
