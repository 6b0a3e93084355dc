"""MessagePack codec for valuepack.

This module provides the low-level Encoder and Decoder, the byte cursor they
read through, the timestamp extension and the Value/record transcoding
functions built on top of them.
"""

from __future__ import annotations

from . import codes
from .decoder import Decoder
from .encoder import Encoder
from .reader import ByteReader
from .timestamp import Timestamp, decode_time, encode_time
from .transvalue import bytes_to_value, bytes_to_values, decode, encode, packb, value_to_bytes

__all__ = [
    "codes",
    "Encoder",
    "Decoder",
    "ByteReader",
    "Timestamp",
    "encode_time",
    "decode_time",
    "value_to_bytes",
    "bytes_to_value",
    "bytes_to_values",
    "encode",
    "decode",
    "packb",
]
