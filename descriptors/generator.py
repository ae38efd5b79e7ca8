"""
Descriptor Generator

A generator pairs a template with a set of requested variants and expands
them into one concrete descriptor per category for a derivation index.

Compact notation is `VARIANTS<TEMPLATE>`, for example:

    HS<[d34db33f/84h/0h/0h]xpub6C.../0/*>
"""

import logging
from dataclasses import dataclass
from typing import Dict

from coincurve.context import GLOBAL_CONTEXT, Context

from bitcoin_hd.exceptions import CryptoError
from bitcoin_hd.index import UnhardenedIndex
from bitcoin_scripts.category import Category
from bitcoin_scripts.exceptions import ScriptError
from bitcoin_scripts.types import PubkeyScript

from .exceptions import DescriptorError, GeneratorParseError, ParseError
from .expanded import Expanded, SINGLE_KEY_SHAPES, script_shape
from .template import Template
from .variants import Variants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Generator:
    """Template plus the categories to expand it into."""
    template: Template
    variants: Variants

    @classmethod
    def parse(cls, text: str) -> 'Generator':
        """
        Parse compact generator notation.

        Raises:
            GeneratorParseError: if the delimiters are unbalanced, characters
                follow the closing '>' or either segment fails to parse
        """
        variants_text, sep, rest = text.partition('<')
        if not sep:
            raise GeneratorParseError(f"Generator notation is missing '<': {text!r}")
        if not rest.endswith('>'):
            raise GeneratorParseError(f"Generator notation must end with '>': {text!r}")
        body = rest[:-1]
        if '<' in body or '>' in body:
            raise GeneratorParseError(f"Unbalanced or trailing delimiters in {text!r}")

        try:
            variants = Variants.parse(variants_text)
            template = Template.parse(body)
        except ParseError as e:
            raise GeneratorParseError(f"Invalid generator {text!r}: {e}") from e

        return cls(template=template, variants=variants)

    def descriptors(self, ctx: Context = GLOBAL_CONTEXT, index: int = 0) -> Dict[Category, Expanded]:
        """
        Expand the template into one descriptor per requested category.

        Args:
            ctx: secp256k1 context used for key derivation
            index: Unhardened derivation index

        Returns:
            Mapping with exactly the requested, supported categories

        Raises:
            IndexOutOfRangeError: if index is not an unhardened index
            TemplateDerivationError, ScriptError: if the template can't
                produce a script for one of the categories
        """
        index = UnhardenedIndex(index)
        logger.debug("Expanding %s at index %d", self, index)

        single_key = None
        if self.template.is_single_sig:
            try:
                single_key = self.template.try_derive_public_key(ctx, index)
            except (CryptoError, DescriptorError) as e:
                raise RuntimeError(
                    f"Single-sig template failed to derive key at index {index}"
                ) from e
            if single_key is None:
                raise RuntimeError("Single-sig template returned no public key")

        result: Dict[Category, Expanded] = {}
        for category in self.variants.categories():
            if category is Category.TAPROOT:
                logger.debug("Skipping taproot variant: not supported yet")
                continue

            if single_key is not None:
                descriptor = SINGLE_KEY_SHAPES[category](single_key)
            else:
                try:
                    lock_script = self.template.derive_lock_script(ctx, index, category)
                except (DescriptorError, ScriptError, CryptoError) as e:
                    logger.warning("Template derivation failed for %s at index %d: %s",
                                   category, index, e)
                    raise
                descriptor = script_shape(category, lock_script)

            logger.debug("Derived %s descriptor: %s", category, descriptor)
            result[category] = descriptor

        return result

    def pubkey_scripts(self, ctx: Context = GLOBAL_CONTEXT, index: int = 0) -> Dict[Category, PubkeyScript]:
        """Output scripts for every descriptor of `descriptors()`."""
        return {
            category: descriptor.to_pubkey_script()
            for category, descriptor in self.descriptors(ctx, index).items()
        }

    def __str__(self) -> str:
        return f"{self.variants}<{self.template}>"
