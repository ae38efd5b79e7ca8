"""
Derivation Indexes

BIP32 child numbers split into the unhardened range (0..2^31-1), usable for
public derivation, and the hardened range (2^31..2^32-1), which requires the
private key.
"""

from typing import Iterable, List

from .exceptions import DerivationError, IndexOutOfRangeError

BIP32_HARDENED_OFFSET = 0x80000000
HARDENED_MARKERS = ("'", "h", "H")


class UnhardenedIndex(int):
    """Child number in the unhardened range."""

    MAX = BIP32_HARDENED_OFFSET - 1

    def __new__(cls, value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise IndexOutOfRangeError(value, 0, cls.MAX)
        if not 0 <= value <= cls.MAX:
            raise IndexOutOfRangeError(value, 0, cls.MAX)
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"UnhardenedIndex({int(self)})"

    def __str__(self) -> str:
        return str(int(self))


class HardenedIndex(int):
    """
    Child number in the hardened range.

    The integer value is the full child number including the hardened offset;
    use `from_ordinal` to construct from the number shown in paths.
    """

    def __new__(cls, value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise IndexOutOfRangeError(value, BIP32_HARDENED_OFFSET, 0xFFFFFFFF)
        if not BIP32_HARDENED_OFFSET <= value <= 0xFFFFFFFF:
            raise IndexOutOfRangeError(value, BIP32_HARDENED_OFFSET, 0xFFFFFFFF)
        return super().__new__(cls, value)

    @classmethod
    def from_ordinal(cls, ordinal: int) -> 'HardenedIndex':
        UnhardenedIndex(ordinal)
        return cls(ordinal + BIP32_HARDENED_OFFSET)

    @property
    def ordinal(self) -> int:
        return int(self) - BIP32_HARDENED_OFFSET

    def __repr__(self) -> str:
        return f"HardenedIndex({self.ordinal})"

    def __str__(self) -> str:
        return f"{self.ordinal}h"


def is_hardened(index: int) -> bool:
    return index >= BIP32_HARDENED_OFFSET


def parse_index(part: str) -> int:
    """
    Parse a single path step like "84'", "0h" or "7".

    Returns:
        HardenedIndex or UnhardenedIndex
    """
    hardened = part.endswith(HARDENED_MARKERS)
    digits = part[:-1] if hardened else part
    if not digits.isdigit():
        raise DerivationError(f"Invalid derivation path step: {part!r}")
    if hardened:
        return HardenedIndex.from_ordinal(int(digits))
    return UnhardenedIndex(int(digits))


def parse_derivation_path(path: str) -> List[int]:
    """
    Parse derivation path into list of indexes.

    Args:
        path: Derivation path like "m/84'/0'/0'/0/0"; the "m/" prefix is optional

    Returns:
        List of HardenedIndex/UnhardenedIndex values
    """
    if path in ('', 'm'):
        return []
    if path.startswith('m/'):
        path = path[2:]

    return [parse_index(part) for part in path.split('/')]


def format_derivation_path(indexes: Iterable[int], prefix: str = 'm') -> str:
    """Render indexes back into path notation using the "h" marker."""
    parts = [prefix] if prefix else []
    for index in indexes:
        if is_hardened(index):
            parts.append(f"{index - BIP32_HARDENED_OFFSET}h")
        else:
            parts.append(str(int(index)))
    return '/'.join(parts)
