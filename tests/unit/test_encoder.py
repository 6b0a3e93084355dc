"""Unit tests for the encoder."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from valuepack import (
    CodecConfig,
    EncodeError,
    Encoder,
    IntegerRangeError,
    RecursionLimitExceededError,
    TextEncodingError,
    Timestamp,
    Value,
    packb,
)


def encoded(method: str, *args: object) -> bytes:
    enc = Encoder()
    getattr(enc, method)(*args)
    return enc.to_bytes()


class TestScalars:
    """Test scalar formats against known byte sequences."""

    def test_nil_and_bool(self) -> None:
        """Test nil, true and false."""
        assert encoded("encode_nil") == b"\xc0"
        assert encoded("encode_bool", True) == b"\xc3"
        assert encoded("encode_bool", False) == b"\xc2"

    def test_string(self) -> None:
        """Test a short string uses fixstr."""
        assert encoded("encode_string", "hello") == bytes.fromhex("a568656c6c6f")

    def test_empty_string(self) -> None:
        """Test the empty string."""
        assert encoded("encode_string", "") == b"\xa0"

    def test_utf8_string(self) -> None:
        """Test length is counted in UTF-8 bytes."""
        assert encoded("encode_string", "é") == b"\xa2\xc3\xa9"

    def test_lone_surrogate(self) -> None:
        """Test strings that are not encodable as UTF-8."""
        with pytest.raises(TextEncodingError):
            encoded("encode_string", "\udc80")

    def test_bytes(self) -> None:
        """Test bin 8 for short payloads."""
        assert encoded("encode_bytes", b"ab") == b"\xc4\x02ab"
        assert encoded("encode_bytes", b"") == b"\xc4\x00"

    def test_float32(self) -> None:
        """Test single precision bit exactness."""
        assert encoded("encode_float32", 1.23456) == bytes.fromhex("ca3f9e0610")

    def test_float64(self) -> None:
        """Test double precision bit exactness."""
        assert encoded("encode_float64", 1.23456) == bytes.fromhex("cb3ff3c0c1fc8f3238")

    def test_float32_out_of_range(self) -> None:
        """Test finite values too large for float32."""
        with pytest.raises(EncodeError):
            encoded("encode_float32", 1e300)


class TestIntegers:
    """Test minimal-width integer encoding."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "00"),
            (127, "7f"),
            (128, "cc80"),
            (255, "ccff"),
            (256, "cd0100"),
            (300, "cd012c"),
            (65535, "cdffff"),
            (65536, "ce00010000"),
            (70000, "ce00011170"),
            (4294967295, "ceffffffff"),
            (4294967296, "cf0000000100000000"),
            (214748364700, "cf00000031ffffff9c"),
            (2**64 - 1, "cfffffffffffffffff"),
            (-1, "ff"),
            (-32, "e0"),
            (-33, "d0df"),
            (-100, "d09c"),
            (-128, "d080"),
            (-129, "d1ff7f"),
            (-300, "d1fed4"),
            (-32768, "d18000"),
            (-32769, "d2ffff7fff"),
            (-70000, "d2fffeee90"),
            (-(2**31), "d280000000"),
            (-(2**31) - 1, "d3ffffffff7fffffff"),
            (-214748364700, "d3ffffffce00000064"),
            (-(2**63), "d38000000000000000"),
        ],
    )
    def test_encode_int(self, value: int, expected: str) -> None:
        """Test the smallest format is chosen."""
        assert encoded("encode_int", value) == bytes.fromhex(expected)

    def test_encode_uint(self) -> None:
        """Test unsigned encoding matches encode_int for non-negative values."""
        for value in (0, 127, 128, 65536, 2**63):
            assert encoded("encode_uint", value) == encoded("encode_int", value)

    def test_encode_uint_negative(self) -> None:
        """Test unsigned encoding rejects negative values."""
        with pytest.raises(IntegerRangeError):
            encoded("encode_uint", -1)

    @pytest.mark.parametrize("value", [2**64, -(2**63) - 1])
    def test_out_of_range(self, value: int) -> None:
        """Test integers outside the 64-bit wire range."""
        with pytest.raises(IntegerRangeError):
            encoded("encode_int", value)


class TestLengths:
    """Test minimal-width length headers."""

    @pytest.mark.parametrize(
        ("length", "header"),
        [(31, "bf"), (32, "d920"), (255, "d9ff"), (256, "da0100"), (65536, "db00010000")],
    )
    def test_string_lengths(self, length: int, header: str) -> None:
        """Test str header boundaries."""
        data = encoded("encode_string", "x" * length)
        assert data.startswith(bytes.fromhex(header))
        assert len(data) == len(bytes.fromhex(header)) + length

    @pytest.mark.parametrize(
        ("length", "header"),
        [(255, "c4ff"), (256, "c50100"), (65535, "c5ffff"), (65536, "c600010000")],
    )
    def test_bytes_lengths(self, length: int, header: str) -> None:
        """Test bin header boundaries."""
        assert encoded("encode_bytes", b"\x00" * length).startswith(bytes.fromhex(header))

    @pytest.mark.parametrize(
        ("n", "header"),
        [(0, "90"), (15, "9f"), (16, "dc0010"), (65535, "dcffff"), (65536, "dd00010000")],
    )
    def test_array_len(self, n: int, header: str) -> None:
        """Test array header boundaries."""
        assert encoded("encode_array_len", n) == bytes.fromhex(header)

    @pytest.mark.parametrize(
        ("n", "header"),
        [(0, "80"), (15, "8f"), (16, "de0010"), (65536, "df00010000")],
    )
    def test_map_len(self, n: int, header: str) -> None:
        """Test map header boundaries."""
        assert encoded("encode_map_len", n) == bytes.fromhex(header)

    def test_negative_length(self) -> None:
        """Test negative container lengths."""
        with pytest.raises(EncodeError):
            encoded("encode_array_len", -1)


class TestContainers:
    """Test containers built from headers and elements."""

    def test_array_of_ints(self) -> None:
        """Test [1, 2, 3, 4]."""
        enc = Encoder()
        enc.encode_array_len(4)
        for i in (1, 2, 3, 4):
            enc.encode_int(i)
        assert enc.to_bytes() == bytes.fromhex("9401020304")

    def test_map(self) -> None:
        """Test {"name": "huangjian"}."""
        enc = Encoder()
        enc.encode_map_len(1)
        enc.encode_string("name")
        enc.encode_string("huangjian")
        assert enc.to_bytes() == bytes.fromhex("81a46e616d65a96875616e676a69616e")

    def test_reset(self) -> None:
        """Test the buffer can be reused."""
        enc = Encoder()
        enc.encode_nil()
        assert len(enc) == 1
        enc.reset()
        assert enc.to_bytes() == b""


class TestTimestamp:
    """Test timestamp extension headers."""

    def test_fixext4(self) -> None:
        """Test 32-bit seconds use fixext 4."""
        assert encoded("encode_time", Timestamp(1)) == bytes.fromhex("d6ff00000001")

    def test_fixext8(self) -> None:
        """Test nanoseconds use fixext 8."""
        data = encoded("encode_time", Timestamp(1, 1))
        assert data[:2] == b"\xd7\xff"
        assert len(data) == 10

    def test_ext8_12_bytes(self) -> None:
        """Test seconds beyond 34 bits use ext 8 with a 12 byte payload."""
        data = encoded("encode_time", Timestamp(2**34, 5))
        assert data[:3] == b"\xc7\x0c\xff"
        assert len(data) == 15

    def test_datetime(self) -> None:
        """Test datetimes are converted."""
        dt = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert encoded("encode_time", dt) == encoded("encode_time", Timestamp(1))


class TestEncodeValue:
    """Test writing Value trees."""

    def test_int_and_float_numbers(self) -> None:
        """Test numbers keep their kind on the wire."""
        assert encoded("encode_value", Value.number(1)) == b"\x01"
        assert encoded("encode_value", Value.number(1.0)) == bytes.fromhex("cb3ff0000000000000")

    def test_nested(self, sample_value: Value) -> None:
        """Test a nested tree starts with its map header."""
        data = encoded("encode_value", sample_value)
        assert data[0] == 0x86

    def test_depth_limit(self) -> None:
        """Test nesting beyond max_depth."""
        v = Value.array()
        for _ in range(5):
            v = Value.array([v])

        Encoder(CodecConfig(max_depth=6)).encode_value(v)
        with pytest.raises(RecursionLimitExceededError):
            Encoder(CodecConfig(max_depth=5)).encode_value(v)


class TestPackb:
    """Test encoding plain Python objects."""

    def test_mixed(self) -> None:
        """Test a mixed structure."""
        assert packb({"a": [1, None, True]}) == b"\x81\xa1a\x93\x01\xc0\xc3"

    def test_bytes_as_bin(self) -> None:
        """Test bytes use bin formats."""
        assert packb(b"ab") == b"\xc4\x02ab"

    def test_unsupported(self) -> None:
        """Test unsupported objects."""
        with pytest.raises(EncodeError):
            packb(object())
