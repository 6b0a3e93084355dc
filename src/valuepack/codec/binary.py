"""Byte-order conversion utilities.

This module converts between fixed-width unsigned integers and their 2, 4 or
8 byte representations. MessagePack always uses big-endian (network) byte
order; LittleEndian exists for completeness and is never used by the codec.

All ``put_*`` functions write in place into a caller-supplied buffer.
"""

from __future__ import annotations

import struct
from typing import Union

WritableBuffer = Union[bytearray, memoryview]
ReadableBuffer = Union[bytes, bytearray, memoryview]

_BE_U16 = struct.Struct(">H")
_BE_U32 = struct.Struct(">I")
_BE_U64 = struct.Struct(">Q")
_LE_U16 = struct.Struct("<H")
_LE_U32 = struct.Struct("<I")
_LE_U64 = struct.Struct("<Q")


class BigEndian:
    """Big-endian (network order) conversions.

    Example:
        >>> buf = bytearray(2)
        >>> BigEndian.put_uint16(buf, 300)
        >>> bytes(buf)
        b'\\x01,'
        >>> BigEndian.uint16(buf)
        300
    """

    @staticmethod
    def uint16(b: ReadableBuffer) -> int:
        return _BE_U16.unpack_from(b)[0]

    @staticmethod
    def uint32(b: ReadableBuffer) -> int:
        return _BE_U32.unpack_from(b)[0]

    @staticmethod
    def uint64(b: ReadableBuffer) -> int:
        return _BE_U64.unpack_from(b)[0]

    @staticmethod
    def put_uint16(b: WritableBuffer, v: int) -> None:
        _BE_U16.pack_into(b, 0, v)

    @staticmethod
    def put_uint32(b: WritableBuffer, v: int) -> None:
        _BE_U32.pack_into(b, 0, v)

    @staticmethod
    def put_uint64(b: WritableBuffer, v: int) -> None:
        _BE_U64.pack_into(b, 0, v)

    @staticmethod
    def string() -> str:
        return "BigEndian"


class LittleEndian:
    """Little-endian conversions (not used on the wire)."""

    @staticmethod
    def uint16(b: ReadableBuffer) -> int:
        return _LE_U16.unpack_from(b)[0]

    @staticmethod
    def uint32(b: ReadableBuffer) -> int:
        return _LE_U32.unpack_from(b)[0]

    @staticmethod
    def uint64(b: ReadableBuffer) -> int:
        return _LE_U64.unpack_from(b)[0]

    @staticmethod
    def put_uint16(b: WritableBuffer, v: int) -> None:
        _LE_U16.pack_into(b, 0, v)

    @staticmethod
    def put_uint32(b: WritableBuffer, v: int) -> None:
        _LE_U32.pack_into(b, 0, v)

    @staticmethod
    def put_uint64(b: WritableBuffer, v: int) -> None:
        _LE_U64.pack_into(b, 0, v)

    @staticmethod
    def string() -> str:
        return "LittleEndian"


def float32_bits(f: float) -> int:
    """Return the IEEE-754 single precision bit pattern of ``f``.

    Args:
        f: Float value, rounded to the nearest float32

    Returns:
        32-bit unsigned integer

    Raises:
        OverflowError: If ``f`` is finite but too large for float32
    """
    return struct.unpack(">I", struct.pack(">f", f))[0]


def float32_from_bits(b: int) -> float:
    """Reinterpret a 32-bit pattern as an IEEE-754 single precision float."""
    return struct.unpack(">f", struct.pack(">I", b))[0]


def float64_bits(f: float) -> int:
    """Return the IEEE-754 double precision bit pattern of ``f``."""
    return struct.unpack(">Q", struct.pack(">d", f))[0]


def float64_from_bits(b: int) -> float:
    """Reinterpret a 64-bit pattern as an IEEE-754 double precision float."""
    return struct.unpack(">d", struct.pack(">Q", b))[0]
