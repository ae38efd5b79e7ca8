"""
Descriptors Package

Expansion of key templates into per-category output descriptors.
"""

from .exceptions import (
    DescriptorError,
    ParseError,
    VariantsParseError,
    TemplateParseError,
    GeneratorParseError,
    TemplateDerivationError,
)
from .variants import Variants
from .expanded import Expanded, Pk, Pkh, ShWpkh, Wpkh, Bare, Sh, ShWsh, Wsh
from .template import Template, KeyTemplate, SingleSig, MultiSig
from .generator import Generator

__all__ = [
    'DescriptorError',
    'ParseError',
    'VariantsParseError',
    'TemplateParseError',
    'GeneratorParseError',
    'TemplateDerivationError',
    'Variants',
    'Expanded',
    'Pk',
    'Pkh',
    'ShWpkh',
    'Wpkh',
    'Bare',
    'Sh',
    'ShWsh',
    'Wsh',
    'Template',
    'KeyTemplate',
    'SingleSig',
    'MultiSig',
    'Generator',
]
