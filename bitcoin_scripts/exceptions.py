"""
Bitcoin Scripts - Exceptions

This module defines the exceptions raised while building, parsing and
converting between the different logical script types.
"""


class ScriptError(Exception):
    """Base exception for all script-related errors."""
    pass


class ScriptParseError(ScriptError):
    """Raised when a script program can't be split into instructions."""
    pass


class WitnessVersionError(ScriptError, ValueError):
    """Base exception for witness version construction failures."""
    pass


class IncorrectOpcodeError(WitnessVersionError):
    """The opcode provided for the version construction is incorrect."""

    def __init__(self, value=None):
        self.value = value
        if value is None:
            message = "Incorrect opcode for witness version"
        else:
            message = f"Incorrect opcode for witness version: {value!r}"
        super().__init__(message)


class UnsupportedCategoryError(ScriptError, NotImplementedError):
    """Raised for script categories which can't be derived yet (Taproot)."""

    def __init__(self, category, operation: str = "derivation"):
        self.category = category
        self.operation = operation
        super().__init__(f"{operation} is not supported for {category} category")


class UncompressedKeyError(ScriptError):
    """Raised when an uncompressed public key is used in a witness context."""
    pass
