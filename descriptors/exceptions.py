"""
Descriptor Exceptions

This module defines the exceptions raised while parsing generator notation
and deriving descriptors from templates.
"""


class DescriptorError(Exception):
    """Base exception for descriptor errors."""
    pass


class ParseError(DescriptorError, ValueError):
    """Base exception for malformed textual notation."""
    pass


class VariantsParseError(ParseError):
    """Raised when a variants code string is malformed."""
    pass


class TemplateParseError(ParseError):
    """Raised when a key or multisig template can't be parsed."""
    pass


class GeneratorParseError(ParseError):
    """Raised when the compact generator notation is malformed."""
    pass


class TemplateDerivationError(DescriptorError):
    """Raised when a template can't produce a script for an index and category."""
    pass
