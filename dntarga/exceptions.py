# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for DNTarga

This module defines the error taxonomy raised by the TGA codec.
Every failure carries a specific reason; nothing is reported as a
bare boolean.

Copyright 2025 DNAi inc.
"""

from typing import Optional


class TargaError(Exception):
    """
    Base exception for all DNTarga errors.
    
    All DNTarga exceptions inherit from this class, allowing
    catch-all error handling for any codec-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.
        
        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MalformedLengthError(TargaError):
    """
    Raised when a section's byte count disagrees with its declared or
    derived size.
    
    This exception is raised when:
    - Color-map data length differs from length x entry bytes
    - Image data length differs from width x height x bytes per pixel
    - A fixed-size record is decoded from the wrong number of bytes
    - Scan-line, postage-stamp or color-correction tables have the wrong shape
    """
    pass


class InvalidLengthError(MalformedLengthError):
    """
    Raised when an RLE encode input is not an exact multiple of
    width x height.
    """
    pass


class DuplicateDeveloperTagError(TargaError):
    """Raised when two developer entries share the same tag."""

    def __init__(self, message: str = "", tag: Optional[int] = None):
        self.tag = tag
        super().__init__(message)


class MissingRequiredFieldError(TargaError):
    """
    Raised when a section the header announces is absent.
    
    For example, a color-map type is set but no palette bytes exist.
    """

    def __init__(self, message: str = "", field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class TruncatedStreamError(TargaError):
    """Raised when decoding runs out of input."""

    def __init__(self, message: str = "", expected: Optional[int] = None,
                 actual: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        if expected is not None and actual is not None:
            message = f"{message} [Expected: {expected}, Actual: {actual}]"
        super().__init__(message)


class InvalidSignatureError(TargaError):
    """
    Raised when the footer signature is not "TRUEVISION-XFILE".
    
    The parser treats this as a signal to fall back to the legacy
    (v1.0) layout unless strict reading is configured.
    """
    pass


class UnsupportedPixelFormatError(TargaError):
    """
    Raised when a pixel depth, color-map entry size or image type has
    no defined packing rule.
    """
    pass
