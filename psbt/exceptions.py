"""
PSBT Exceptions

This module defines custom exceptions for PSBT map parsing and proprietary
field handling.
"""


class PSBTError(Exception):
    """Base exception for PSBT-related errors."""
    pass


class PSBTParsingError(PSBTError):
    """Exception raised during PSBT parsing."""
    pass


class ProprietaryFieldError(PSBTError):
    """Exception raised for proprietary field handling errors."""
    pass
