"""MessagePack encoder.

This module provides the Encoder class that appends minimally sized MessagePack
values to a growable byte buffer. Every integer, length and extension header is
written in the smallest format that can hold it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import (
    EncodeError,
    IntegerRangeError,
    InternalError,
    LengthRangeError,
    RecursionLimitExceededError,
    TextEncodingError,
)
from ..models.value import Value, ValueKind
from . import codes
from .binary import BigEndian, float32_bits, float64_bits
from .timestamp import Timestamp, encode_time

MAX_UINT64 = 0xFFFFFFFFFFFFFFFF
MIN_INT64 = -(1 << 63)
MAX_LENGTH = 0xFFFFFFFF


class Encoder:
    """Builds a MessagePack byte buffer one value at a time.

    Containers are written as a length header followed by their elements:
    ``encode_array_len(n)`` must be followed by exactly ``n`` encoded values,
    and ``encode_map_len(n)`` by ``n`` key/value pairs.

    Example:
        >>> enc = Encoder()
        >>> enc.encode_array_len(4)
        >>> for i in (1, 2, 3, 4):
        ...     enc.encode_int(i)
        >>> enc.to_bytes()
        b'\\x94\\x01\\x02\\x03\\x04'
    """

    def __init__(self, config: CodecConfig | None = None) -> None:
        """Initialize an empty encoder.

        Args:
            config: Codec configuration (max_depth applies to encode_value/encode)
        """
        self.config = config if config is not None else DEFAULT_CONFIG
        self._buf = bytearray()

    def to_bytes(self) -> bytes:
        """Return a copy of everything written so far."""
        return bytes(self._buf)

    def reset(self) -> None:
        """Discard the buffer contents."""
        self._buf.clear()

    def __len__(self) -> int:
        return len(self._buf)

    def write_raw(self, b: bytes) -> None:
        """Append already-encoded MessagePack bytes verbatim."""
        self._buf += b

    def _write_code(self, c: int) -> None:
        self._buf.append(c)

    def _write1(self, c: int, n: int) -> None:
        self._buf.append(c)
        self._buf.append(n & 0xFF)

    def _write2(self, c: int, n: int) -> None:
        b = bytearray(3)
        b[0] = c
        BigEndian.put_uint16(memoryview(b)[1:], n & 0xFFFF)
        self._buf += b

    def _write4(self, c: int, n: int) -> None:
        b = bytearray(5)
        b[0] = c
        BigEndian.put_uint32(memoryview(b)[1:], n & 0xFFFFFFFF)
        self._buf += b

    def _write8(self, c: int, n: int) -> None:
        b = bytearray(9)
        b[0] = c
        BigEndian.put_uint64(memoryview(b)[1:], n & MAX_UINT64)
        self._buf += b

    @staticmethod
    def _check_length(length: int, what: str) -> None:
        if length > MAX_LENGTH:
            raise LengthRangeError(f"{what} length {length} exceeds {MAX_LENGTH}")
        if length < 0:
            raise LengthRangeError(f"{what} length must be non-negative, got {length}")

    def encode_nil(self) -> None:
        self._write_code(codes.NIL)

    def encode_bool(self, value: bool) -> None:
        self._write_code(codes.TRUE if value else codes.FALSE)

    def encode_string(self, s: str) -> None:
        """Write a str header (fixstr/str 8/16/32) followed by the UTF-8 bytes.

        Raises:
            TextEncodingError: If ``s`` contains lone surrogates
            LengthRangeError: If the UTF-8 form is 4 GiB or larger
        """
        try:
            data = s.encode("utf-8")
        except UnicodeEncodeError as e:
            raise TextEncodingError(f"string is not encodable as UTF-8: {e}") from e

        self._encode_str_len(len(data))
        self._buf += data

    def _encode_str_len(self, length: int) -> None:
        self._check_length(length, "string")
        if length < 32:
            self._write_code(codes.FIXED_STR_LOW | length)
        elif length < 256:
            self._write1(codes.STR_8, length)
        elif length < 65536:
            self._write2(codes.STR_16, length)
        else:
            self._write4(codes.STR_32, length)

    def encode_bytes(self, b: bytes | bytearray | memoryview) -> None:
        """Write a bin header (bin 8/16/32) followed by the raw bytes.

        There is no fixed "fixbin" form, so even empty input takes two bytes.
        """
        data = bytes(b)
        self._encode_bytes_len(len(data))
        self._buf += data

    def _encode_bytes_len(self, length: int) -> None:
        self._check_length(length, "bin")
        if length < 256:
            self._write1(codes.BIN_8, length)
        elif length < 65536:
            self._write2(codes.BIN_16, length)
        else:
            self._write4(codes.BIN_32, length)

    def encode_int(self, v: int) -> None:
        """Write a signed integer in the smallest format that holds it.

        Non-negative values are delegated to ``encode_uint``.

        Args:
            v: Integer in [-2**63, 2**64 - 1]

        Raises:
            IntegerRangeError: If ``v`` is outside the 64-bit wire range
        """
        if v >= 0:
            self.encode_uint(v)
            return

        if v >= codes.fixed_num_value(codes.NEG_FIXED_NUM_LOW):
            # negative fixint: the tag byte is the value itself
            self._write_code(v & 0xFF)
        elif v >= -(1 << 7):
            self._write1(codes.INT_8, v)
        elif v >= -(1 << 15):
            self._write2(codes.INT_16, v)
        elif v >= -(1 << 31):
            self._write4(codes.INT_32, v)
        elif v >= MIN_INT64:
            self._write8(codes.INT_64, v)
        else:
            raise IntegerRangeError(f"integer {v} is below the int64 minimum {MIN_INT64}")

    def encode_uint(self, v: int) -> None:
        """Write an unsigned integer in the smallest format that holds it.

        Args:
            v: Integer in [0, 2**64 - 1]

        Raises:
            IntegerRangeError: If ``v`` is negative or above the uint64 maximum
        """
        if v < 0:
            raise IntegerRangeError(f"encode_uint requires non-negative value, got {v}")

        if v <= codes.POS_FIXED_NUM_HIGH:
            self._write_code(v)
        elif v <= 0xFF:
            self._write1(codes.UINT_8, v)
        elif v <= 0xFFFF:
            self._write2(codes.UINT_16, v)
        elif v <= 0xFFFFFFFF:
            self._write4(codes.UINT_32, v)
        elif v <= MAX_UINT64:
            self._write8(codes.UINT_64, v)
        else:
            raise IntegerRangeError(f"integer {v} is above the uint64 maximum {MAX_UINT64}")

    def encode_float32(self, f: float) -> None:
        """Write ``f`` rounded to IEEE-754 single precision.

        Raises:
            EncodeError: If ``f`` is finite but out of float32 range
        """
        try:
            bits = float32_bits(f)
        except OverflowError as e:
            raise EncodeError(f"float {f!r} is out of float32 range") from e
        self._write4(codes.FLOAT_32, bits)

    def encode_float64(self, f: float) -> None:
        self._write8(codes.FLOAT_64, float64_bits(f))

    def encode_array_len(self, n: int) -> None:
        self._check_length(n, "array")
        if n < 16:
            self._write_code(codes.FIXED_ARRAY_LOW | n)
        elif n < 65536:
            self._write2(codes.ARRAY_16, n)
        else:
            self._write4(codes.ARRAY_32, n)

    def encode_map_len(self, n: int) -> None:
        self._check_length(n, "map")
        if n < 16:
            self._write_code(codes.FIXED_MAP_LOW | n)
        elif n < 65536:
            self._write2(codes.MAP_16, n)
        else:
            self._write4(codes.MAP_32, n)

    def _encode_ext_len(self, length: int) -> None:
        self._check_length(length, "ext")
        if length == 1:
            self._write_code(codes.FIX_EXT_1)
        elif length == 2:
            self._write_code(codes.FIX_EXT_2)
        elif length == 4:
            self._write_code(codes.FIX_EXT_4)
        elif length == 8:
            self._write_code(codes.FIX_EXT_8)
        elif length == 16:
            self._write_code(codes.FIX_EXT_16)
        elif length < 256:
            self._write1(codes.EXT_8, length)
        elif length < 65536:
            self._write2(codes.EXT_16, length)
        else:
            self._write4(codes.EXT_32, length)

    def encode_time(self, t: Timestamp | datetime) -> None:
        """Write a timestamp extension (type -1) with a 4, 8 or 12 byte payload.

        Args:
            t: Timestamp, or datetime (naive datetimes are taken as UTC)

        Raises:
            TimestampRangeError: If ``t`` is before 1970-01-01T00:00:00Z
        """
        if isinstance(t, datetime):
            t = Timestamp.from_datetime(t)

        payload = encode_time(t.seconds, t.nanoseconds)
        self._encode_ext_len(len(payload))
        self._write_code(codes.TIME_EXT_ID & 0xFF)
        self._buf += payload

    def encode_value(self, v: Value) -> None:
        """Write a Value tree.

        Null, bool and string map to their formats directly. Integer numbers
        use the minimal integer format and float numbers use float 64. Arrays
        and objects are written as a length header plus their members; object
        keys are written as strings in the mapping's iteration order.

        Raises:
            RecursionLimitExceededError: If nesting exceeds ``config.max_depth``
        """
        self._encode_value(v, 0)

    def _encode_value(self, v: Value, depth: int) -> None:
        kind = v.kind
        if kind is ValueKind.NULL:
            self.encode_nil()
        elif kind is ValueKind.BOOL:
            self.encode_bool(v.data)
        elif kind is ValueKind.NUMBER:
            if isinstance(v.data, int):
                self.encode_int(v.data)
            else:
                self.encode_float64(v.data)
        elif kind is ValueKind.STRING:
            self.encode_string(v.data)
        elif kind is ValueKind.ARRAY:
            self._enter(depth)
            self.encode_array_len(len(v.data))
            for item in v.data:
                self._encode_value(item, depth + 1)
        elif kind is ValueKind.OBJECT:
            self._enter(depth)
            self.encode_map_len(len(v.data))
            for key, item in v.data.items():
                self.encode_string(key)
                self._encode_value(item, depth + 1)
        else:
            raise InternalError(f"unsupported value kind {kind!r}")

    def _enter(self, depth: int) -> None:
        if depth >= self.config.max_depth:
            raise RecursionLimitExceededError(self.config.max_depth)

    def encode(self, obj: Any) -> None:
        """Write a plain Python object, choosing the format from its type.

        Supported: None, bool, int, float (as float 64), str, bytes-like
        (as bin), list/tuple, dict, datetime and Timestamp (as timestamp
        extension) and Value.

        Raises:
            EncodeError: If the object (or a nested one) has an unsupported type
        """
        self._encode(obj, 0)

    def _encode(self, obj: Any, depth: int) -> None:
        if obj is None:
            self.encode_nil()
        elif isinstance(obj, bool):
            self.encode_bool(obj)
        elif isinstance(obj, int):
            self.encode_int(obj)
        elif isinstance(obj, float):
            self.encode_float64(obj)
        elif isinstance(obj, str):
            self.encode_string(obj)
        elif isinstance(obj, (bytes, bytearray, memoryview)):
            self.encode_bytes(obj)
        elif isinstance(obj, (Timestamp, datetime)):
            self.encode_time(obj)
        elif isinstance(obj, Value):
            self._encode_value(obj, depth)
        elif isinstance(obj, (list, tuple)):
            self._enter(depth)
            self.encode_array_len(len(obj))
            for item in obj:
                self._encode(item, depth + 1)
        elif isinstance(obj, dict):
            self._enter(depth)
            self.encode_map_len(len(obj))
            for key, item in obj.items():
                self._encode(key, depth + 1)
                self._encode(item, depth + 1)
        else:
            raise EncodeError(f"cannot encode object of type {type(obj).__name__}")
