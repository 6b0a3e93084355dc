"""MessagePack decoder.

This module provides the Decoder class that consumes a byte buffer through a
ByteReader and produces typed Python values or a generic Value tree.

Every decode operation starts by reading one tag byte. Fixed-width fields are
read strictly: if the buffer holds fewer bytes than the field needs the decoder
raises ReadCountMismatchError (or EndOfInputError when nothing is left at all).
"""

from __future__ import annotations

import logging
from typing import Iterator

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import (
    DecodeError,
    InvalidExtensionTypeError,
    InvalidTagError,
    ReadCountMismatchError,
    RecursionLimitExceededError,
    TextEncodingError,
)
from ..models.value import Value
from . import codes
from .binary import BigEndian, ReadableBuffer, float32_bits, float32_from_bits, float64_from_bits
from .reader import ByteReader
from .timestamp import Timestamp, decode_time

logger = logging.getLogger(__name__)

_UINT64_MASK = 0xFFFFFFFFFFFFFFFF


class Decoder:
    """Reads MessagePack values from a byte buffer.

    Example:
        >>> dec = Decoder(b"\\xa5hello\\xcd\\x01\\x2c")
        >>> dec.decode_string()
        'hello'
        >>> dec.decode_int()
        300
    """

    def __init__(self, data: ReadableBuffer, config: CodecConfig | None = None) -> None:
        """Initialize a decoder over ``data``.

        Args:
            data: Complete MessagePack input
            config: Codec configuration (depth limit, ext type and bin text policy)
        """
        self.config = config if config is not None else DEFAULT_CONFIG
        self._reader = ByteReader(data)

    @property
    def position(self) -> int:
        return self._reader.position

    def remaining_length(self) -> int:
        return self._reader.remaining_length()

    # Raw reads

    def read_code(self) -> int:
        """Read one tag byte.

        Raises:
            EndOfInputError: If the input is exhausted
        """
        return self._reader.read_byte()

    def read_raw(self, n: int) -> bytes:
        """Read exactly ``n`` bytes.

        Raises:
            EndOfInputError: If the input is already exhausted
            ReadCountMismatchError: If fewer than ``n`` bytes remain
        """
        # Size the buffer by what is left, not by the untrusted length prefix
        buf = bytearray(min(n, self._reader.remaining_length()))
        count = self._reader.read(buf)
        if count != n:
            raise ReadCountMismatchError(n, count)
        return bytes(buf)

    def _read_uint8(self) -> int:
        return self._reader.read_byte()

    def _read_uint16(self) -> int:
        return BigEndian.uint16(self.read_raw(2))

    def _read_uint32(self) -> int:
        return BigEndian.uint32(self.read_raw(4))

    def _read_uint64(self) -> int:
        return BigEndian.uint64(self.read_raw(8))

    def read_int(self, c: int) -> int:
        """Decode the integer introduced by tag ``c``.

        nil decodes to 0 and fixints decode from the tag itself. uint formats
        widen without sign, int formats sign-extend. The result is the exact
        numeric value, so uint 64 values above 2**63 - 1 stay positive.

        Args:
            c: Tag byte already read from the input

        Returns:
            Decoded integer

        Raises:
            InvalidTagError: If ``c`` is not nil or an integer format
        """
        if c == codes.NIL:
            return 0
        if codes.is_fixed_num(c):
            return codes.fixed_num_value(c)
        if c == codes.UINT_8:
            return self._read_uint8()
        if c == codes.INT_8:
            return _sign_extend(self._read_uint8(), 8)
        if c == codes.UINT_16:
            return self._read_uint16()
        if c == codes.INT_16:
            return _sign_extend(self._read_uint16(), 16)
        if c == codes.UINT_32:
            return self._read_uint32()
        if c == codes.INT_32:
            return _sign_extend(self._read_uint32(), 32)
        if c == codes.UINT_64:
            return self._read_uint64()
        if c == codes.INT_64:
            return _sign_extend(self._read_uint64(), 64)
        raise InvalidTagError(c, "integer")

    def read_uint(self, c: int) -> int:
        """Decode the integer introduced by ``c`` as an unsigned 64-bit value.

        Negative inputs come back as their two's-complement bit pattern.
        """
        return self.read_int(c) & _UINT64_MASK

    def bytes_len(self, c: int) -> int:
        """Resolve the payload length of a str or bin header.

        Returns:
            Payload length, or -1 for nil (absent)

        Raises:
            InvalidTagError: If ``c`` is not nil, str or bin
        """
        if c == codes.NIL:
            return -1
        if codes.is_fixed_string(c):
            return c & codes.FIXED_STR_MASK
        if c == codes.STR_8 or c == codes.BIN_8:
            return self._read_uint8()
        if c == codes.STR_16 or c == codes.BIN_16:
            return self._read_uint16()
        if c == codes.STR_32 or c == codes.BIN_32:
            return self._read_uint32()
        raise InvalidTagError(c, "string or bytes")

    def _container_len(
        self,
        c: int,
        fixed_low: int,
        fixed_high: int,
        mask: int,
        code_16: int,
        code_32: int,
        what: str,
    ) -> int:
        if c == codes.NIL:
            return -1
        if fixed_low <= c <= fixed_high:
            return c & mask
        if c == code_16:
            return self._read_uint16()
        if c == code_32:
            return self._read_uint32()
        raise InvalidTagError(c, what)

    def array_len(self, c: int) -> int:
        return self._container_len(
            c,
            codes.FIXED_ARRAY_LOW,
            codes.FIXED_ARRAY_HIGH,
            codes.FIXED_ARRAY_MASK,
            codes.ARRAY_16,
            codes.ARRAY_32,
            "array",
        )

    def map_len(self, c: int) -> int:
        return self._container_len(
            c,
            codes.FIXED_MAP_LOW,
            codes.FIXED_MAP_HIGH,
            codes.FIXED_MAP_MASK,
            codes.MAP_16,
            codes.MAP_32,
            "map",
        )

    def ext_len(self, c: int) -> int:
        """Resolve the payload length of an ext or fixext header."""
        if c in codes.FIX_EXT_LENGTHS:
            return codes.FIX_EXT_LENGTHS[c]
        if c == codes.EXT_8:
            return self._read_uint8()
        if c == codes.EXT_16:
            return self._read_uint16()
        if c == codes.EXT_32:
            return self._read_uint32()
        raise InvalidTagError(c, "extension")

    def read_ext_header(self, c: int) -> tuple[int, int]:
        """Read the rest of an ext header introduced by tag ``c``.

        Returns:
            ``(ext_type, payload_length)`` with ext_type as a signed byte
        """
        n = self.ext_len(c)
        return _sign_extend(self._read_uint8(), 8), n

    def _string_content(self, c: int) -> str:
        n = self.bytes_len(c)
        if n <= 0:
            return ""
        b = self.read_raw(n)
        try:
            return b.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TextEncodingError(f"invalid UTF-8 in string: {e}") from e

    def _bytes_content(self, c: int) -> bytes:
        n = self.bytes_len(c)
        if n <= 0:
            return b""
        return self.read_raw(n)

    def read_float(self, c: int, single: bool = False) -> float:
        """Decode the float or integer introduced by tag ``c`` as a float."""
        if c == codes.FLOAT_32:
            return float32_from_bits(self._read_uint32())
        if c == codes.FLOAT_64:
            return float64_from_bits(self._read_uint64())

        # Any integer format converts numerically, never by bit pattern
        f = float(self.read_int(c))
        if single:
            return float32_from_bits(float32_bits(f))
        return f

    # Typed decode operations

    def decode_nil(self) -> None:
        c = self.read_code()
        if c != codes.NIL:
            raise InvalidTagError(c, "nil")

    def decode_bool(self) -> bool:
        c = self.read_code()
        if c == codes.TRUE:
            return True
        if c == codes.FALSE:
            return False
        raise InvalidTagError(c, "bool")

    def decode_int(self) -> int:
        return self.read_int(self.read_code())

    def decode_uint(self) -> int:
        return self.read_uint(self.read_code())

    def decode_float32(self) -> float:
        """Decode a float rounded to single precision.

        float 32 input is reinterpreted bit for bit; float 64 input is returned
        as stored; integer input is converted to the nearest float32.
        """
        return self.read_float(self.read_code(), single=True)

    def decode_float64(self) -> float:
        return self.read_float(self.read_code(), single=False)

    def decode_string(self) -> str:
        """Decode a str (or bin) payload as UTF-8 text.

        nil and zero-length payloads decode to ``""``.

        Raises:
            TextEncodingError: If the payload is not valid UTF-8
        """
        return self._string_content(self.read_code())

    def decode_bytes(self) -> bytes:
        """Decode a bin (or str) payload as raw bytes, without text validation."""
        return self._bytes_content(self.read_code())

    def decode_array_len(self) -> int:
        """Decode an array header; returns -1 for nil."""
        return self.array_len(self.read_code())

    def decode_map_len(self) -> int:
        """Decode a map header; returns -1 for nil."""
        return self.map_len(self.read_code())

    def decode_time(self) -> Timestamp:
        """Decode a timestamp extension.

        Raises:
            InvalidTagError: If the tag is not an ext format
            InvalidExtensionTypeError: If the ext type is not -1 and
                ``config.strict_ext_type`` is set
            InvalidExtensionLengthError: If the payload is not 4, 8 or 12 bytes
        """
        ext_type, n = self.read_ext_header(self.read_code())
        if self.config.strict_ext_type and ext_type != codes.TIME_EXT_ID:
            raise InvalidExtensionTypeError(ext_type, codes.TIME_EXT_ID)
        payload = self.read_raw(n) if n > 0 else b""
        return decode_time(payload)

    # Generic tree decode

    def decode_value(self) -> Value:
        """Decode the next value into a Value tree.

        Integer formats become int numbers and float formats float numbers.
        bin payloads become strings using ``config.bin_text_errors``. Map keys
        are converted to text; a later duplicate key replaces an earlier one.

        Raises:
            InvalidTagError: For tags with no Value form (ext, 0xc1)
            RecursionLimitExceededError: If nesting exceeds ``config.max_depth``
            DecodeError: For truncated or otherwise malformed input
        """
        return self._decode_value(0)

    def iter_values(self) -> Iterator[Value]:
        """Yield consecutive top-level values until the input is exhausted."""
        while self.remaining_length() > 0:
            yield self.decode_value()

    def _decode_value(self, depth: int) -> Value:
        c = self.read_code()

        if c == codes.NIL:
            return Value.null()
        if codes.is_bool(c):
            return Value.boolean(c == codes.TRUE)
        if codes.is_float(c):
            return Value.number(self.read_float(c, single=c == codes.FLOAT_32))
        if codes.is_integer(c):
            return Value.number(self.read_int(c))
        if codes.is_string(c):
            return Value.string(self._string_content(c))
        if codes.is_bin(c):
            raw = self._bytes_content(c)
            try:
                return Value.string(raw.decode("utf-8", self.config.bin_text_errors))
            except UnicodeDecodeError as e:
                raise TextEncodingError(f"bin payload is not valid UTF-8: {e}") from e

        if codes.is_array(c):
            self._enter(depth)
            n = self.array_len(c)
            logger.debug("decoding array of %d items at depth %d", n, depth + 1)
            return Value.array([self._decode_value(depth + 1) for _ in range(n)])

        if codes.is_hashmap(c):
            self._enter(depth)
            n = self.map_len(c)
            logger.debug("decoding map of %d entries at depth %d", n, depth + 1)
            entries: dict[str, Value] = {}
            for _ in range(n):
                key = self._decode_value(depth + 1)
                if key.is_array or key.is_object:
                    raise DecodeError(f"map key must be a scalar, got {key.kind.value}")
                entries[key.text] = self._decode_value(depth + 1)
            return Value.object(entries)

        logger.debug("no Value form for tag 0x%02x at offset %d", c, self.position - 1)
        raise InvalidTagError(c, "value")

    def _enter(self, depth: int) -> None:
        if depth >= self.config.max_depth:
            raise RecursionLimitExceededError(self.config.max_depth)


def _sign_extend(n: int, bits: int) -> int:
    if n & (1 << (bits - 1)):
        return n - (1 << bits)
    return n
