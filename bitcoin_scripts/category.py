"""
Bitcoin Scripts - Output Categories

A category is the commitment strategy used to turn a lock script or a public
key into an output script.
"""

from enum import Enum


class Category(Enum):
    """Commitment strategies for output scripts."""
    BARE = "bare"
    HASHED = "hashed"
    NESTED = "nested"
    SEGWIT = "segwit"
    TAPROOT = "taproot"

    @property
    def code(self) -> str:
        """One-letter code used in compact generator notation."""
        return _CODES[self]

    @property
    def is_witness(self) -> bool:
        return self in (Category.NESTED, Category.SEGWIT, Category.TAPROOT)

    @classmethod
    def from_code(cls, code: str) -> 'Category':
        for category, category_code in _CODES.items():
            if category_code == code:
                return category
        raise ValueError(f"Unknown category code: {code!r}")

    def __str__(self) -> str:
        return self.value


_CODES = {
    Category.BARE: "B",
    Category.HASHED: "H",
    Category.NESTED: "N",
    Category.SEGWIT: "S",
    Category.TAPROOT: "T",
}
