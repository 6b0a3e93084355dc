"""valuepack: MessagePack Value Codec

A Python library for encoding and decoding MessagePack, built around a
dynamic Value tree and pydantic records.

Key Features:
- Minimal-width MessagePack encoding of every integer, length and header
- Typed Encoder/Decoder for hand-written wire code
- Value tree transcoding with int/float kind preserved
- Timestamp extension (type -1) support
- Pydantic-based record projection and materialization

Quick Start:
    >>> from valuepack import Record, encode, decode
    >>>
    >>> class Sub(Record):
    ...     a: int = 0
    ...     b: bool = False
    ...     c: dict[str, str] = {}
    >>>
    >>> class Student(Record):
    ...     name: str = ""
    ...     age: int = 0
    ...     sub: Sub = Sub()
    >>>
    >>> data = encode(Student(name="huangjian", age=10000, sub=Sub(a=100)))
    >>> decode(Student, data).sub.a
    100
"""

from __future__ import annotations

__version__ = "0.1.0"

from .codec import (
    ByteReader,
    Decoder,
    Encoder,
    Timestamp,
    bytes_to_value,
    bytes_to_values,
    decode,
    encode,
    packb,
    value_to_bytes,
)
from .config import DEFAULT_CONFIG, CodecConfig
from .exceptions import (
    DecodeError,
    EncodeError,
    EndOfInputError,
    FieldConversionError,
    InternalError,
    IntegerRangeError,
    InvalidExtensionLengthError,
    InvalidExtensionTypeError,
    InvalidTagError,
    LengthRangeError,
    ProjectionError,
    ReadCountMismatchError,
    RecursionLimitExceededError,
    SchemaError,
    TextEncodingError,
    TimestampRangeError,
    ValuepackError,
)
from .models import Record, Value, ValueKind, materialize, project
from .utils import encoded_size, field_sizes

__all__ = [
    # Core API
    "Value",
    "ValueKind",
    "value_to_bytes",
    "bytes_to_value",
    "bytes_to_values",
    "packb",
    # Records
    "Record",
    "encode",
    "decode",
    "materialize",
    "project",
    # Low-level codec
    "Encoder",
    "Decoder",
    "ByteReader",
    "Timestamp",
    # Configuration
    "CodecConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "ValuepackError",
    "EncodeError",
    "DecodeError",
    "IntegerRangeError",
    "LengthRangeError",
    "TimestampRangeError",
    "TextEncodingError",
    "EndOfInputError",
    "ReadCountMismatchError",
    "InvalidTagError",
    "InvalidExtensionLengthError",
    "InvalidExtensionTypeError",
    "RecursionLimitExceededError",
    "SchemaError",
    "ProjectionError",
    "FieldConversionError",
    "InternalError",
    # Sizing
    "encoded_size",
    "field_sizes",
]
