"""Exception hierarchy for valuepack.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from ValuepackError for easy catching of any valuepack-specific error.
"""

from __future__ import annotations

from typing import Any


class ValuepackError(Exception):
    """Base exception for all valuepack errors."""

    pass


class EncodeError(ValuepackError):
    """Raised when a value cannot be written to the MessagePack wire format.

    Examples:
        - Integer outside the 64-bit wire range
        - String or container too long for a 32-bit length prefix
        - Float not representable as float32
    """

    pass


class DecodeError(ValuepackError):
    """Raised when MessagePack bytes cannot be decoded.

    Examples:
        - Truncated input
        - Tag byte that has no meaning in the current context
        - Malformed extension payload
    """

    pass


class IntegerRangeError(EncodeError):
    """Raised when an integer does not fit any MessagePack integer format."""

    pass


class LengthRangeError(EncodeError):
    """Raised when a length does not fit a 32-bit length prefix."""

    pass


class TimestampRangeError(EncodeError):
    """Raised when a timestamp cannot be packed (e.g. before 1970-01-01)."""

    pass


class EndOfInputError(DecodeError):
    """Raised when the byte cursor is exhausted before a read."""

    def __init__(self, message: str = "end of input") -> None:
        super().__init__(message)


class ReadCountMismatchError(DecodeError):
    """Raised when fewer bytes were available than a fixed-width field needs."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"read count mismatch: expected {expected} bytes, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidTagError(DecodeError):
    """Raised when a tag byte is not valid where it was encountered."""

    def __init__(self, tag: int, context: str = "") -> None:
        from .codec.codes import tag_name

        message = f"invalid tag 0x{tag:02x} ({tag_name(tag)})"
        if context:
            message = f"{message} while decoding {context}"
        super().__init__(message)
        self.tag = tag
        self.context = context


class InvalidExtensionLengthError(DecodeError):
    """Raised when a timestamp extension payload is not 4, 8 or 12 bytes."""

    def __init__(self, length: int) -> None:
        super().__init__(f"invalid timestamp extension length: {length}")
        self.length = length


class InvalidExtensionTypeError(DecodeError):
    """Raised when an extension carries an unexpected type identifier."""

    def __init__(self, ext_type: int, expected: int) -> None:
        super().__init__(f"invalid extension type {ext_type}, expected {expected}")
        self.ext_type = ext_type
        self.expected = expected


class TextEncodingError(EncodeError, DecodeError):
    """Raised when text is not valid UTF-8 (decode) or not encodable as UTF-8 (encode)."""

    pass


class RecursionLimitExceededError(ValuepackError):
    """Raised when container nesting exceeds the configured maximum depth."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"maximum nesting depth of {max_depth} exceeded")
        self.max_depth = max_depth


class InternalError(ValuepackError):
    """Raised when an internal invariant is violated."""

    pass


class SchemaError(ValuepackError):
    """Raised when a record model uses a field type the record layer cannot map.

    Examples:
        - Union of several non-None types
        - dict with non-string keys
        - Arbitrary classes that are neither models nor enums
    """

    pass


class ProjectionError(ValuepackError):
    """Raised when a Value cannot be projected into a record."""

    pass


class FieldConversionError(ProjectionError):
    """Raised when a field's Value has the wrong kind for the field's type.

    Attributes:
        field: Dotted path of the offending field (e.g. ``sub.items[2]``)
        expected: Expected kind or type name
        actual: Kind that was found
    """

    def __init__(self, field: str, expected: str, actual: Any) -> None:
        super().__init__(f"Field {field}: expected {expected}, got {actual}")
        self.field = field
        self.expected = expected
        self.actual = actual
