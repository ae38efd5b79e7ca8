"""
Descriptor Variants

Set of output categories requested from a generator, rendered as a compact
fixed-order code string such as "BHS".
"""

from dataclasses import dataclass
from typing import Iterator

from bitcoin_scripts.category import Category

from .exceptions import VariantsParseError

# Categories in display order
VARIANT_ORDER = (
    Category.BARE,
    Category.HASHED,
    Category.NESTED,
    Category.SEGWIT,
    Category.TAPROOT,
)


@dataclass(frozen=True)
class Variants:
    """Flags for every category; taproot is accepted but currently inert."""
    bare: bool = False
    hashed: bool = False
    nested: bool = False
    segwit: bool = False
    taproot: bool = False

    @classmethod
    def from_categories(cls, categories) -> 'Variants':
        flags = {category.value: True for category in categories}
        return cls(**flags)

    @classmethod
    def parse(cls, text: str) -> 'Variants':
        """
        Parse a code string like "BHNS".

        Codes may come in any order, but each may appear only once.

        Raises:
            VariantsParseError: for empty strings, unknown or repeated codes
        """
        if not text:
            raise VariantsParseError("Variants can't be empty")

        seen = set()
        for code in text:
            try:
                category = Category.from_code(code)
            except ValueError as e:
                raise VariantsParseError(f"Unknown variant code {code!r} in {text!r}") from e
            if category in seen:
                raise VariantsParseError(f"Repeated variant code {code!r} in {text!r}")
            seen.add(category)

        return cls.from_categories(seen)

    def has(self, category: Category) -> bool:
        return getattr(self, category.value)

    def categories(self) -> Iterator[Category]:
        """Enabled categories in display order."""
        return (category for category in VARIANT_ORDER if self.has(category))

    def is_empty(self) -> bool:
        return not any(self.has(category) for category in VARIANT_ORDER)

    def __str__(self) -> str:
        return ''.join(category.code for category in self.categories())
