"""Unit tests for the decoder."""

from __future__ import annotations

import math

import pytest

from valuepack import (
    CodecConfig,
    DecodeError,
    Decoder,
    EndOfInputError,
    Encoder,
    InvalidExtensionLengthError,
    InvalidExtensionTypeError,
    InvalidTagError,
    ReadCountMismatchError,
    RecursionLimitExceededError,
    TextEncodingError,
    Timestamp,
    Value,
    bytes_to_value,
)


class TestTypedDecode:
    """Test typed decode operations against known byte sequences."""

    def test_nil_and_bool(self) -> None:
        """Test nil, true and false."""
        dec = Decoder(b"\xc0\xc3\xc2")
        assert dec.decode_nil() is None
        assert dec.decode_bool() is True
        assert dec.decode_bool() is False

    def test_string(self) -> None:
        """Test a fixstr."""
        assert Decoder(bytes.fromhex("a568656c6c6f")).decode_string() == "hello"

    def test_string_from_bin(self) -> None:
        """Test str and bin are interchangeable for typed reads."""
        assert Decoder(b"\xc4\x02ab").decode_string() == "ab"
        assert Decoder(b"\xa2ab").decode_bytes() == b"ab"

    def test_nil_string_and_bytes(self) -> None:
        """Test nil decodes to empty text and bytes."""
        assert Decoder(b"\xc0").decode_string() == ""
        assert Decoder(b"\xc0").decode_bytes() == b""

    def test_bytes_without_validation(self) -> None:
        """Test raw bytes are returned even when not UTF-8."""
        assert Decoder(b"\xc4\x02\xff\xfe").decode_bytes() == b"\xff\xfe"

    def test_invalid_utf8(self) -> None:
        """Test invalid text in a str payload."""
        with pytest.raises(TextEncodingError):
            Decoder(b"\xa2\xff\xfe").decode_string()

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("00", 0),
            ("7f", 127),
            ("ff", -1),
            ("e0", -32),
            ("cc80", 128),
            ("cd012c", 300),
            ("ce00011170", 70000),
            ("cf00000031ffffff9c", 214748364700),
            ("d09c", -100),
            ("d1fed4", -300),
            ("d2fffeee90", -70000),
            ("d3ffffffce00000064", -214748364700),
            ("c0", 0),
        ],
    )
    def test_decode_int(self, data: str, expected: int) -> None:
        """Test integer formats."""
        assert Decoder(bytes.fromhex(data)).decode_int() == expected

    def test_uint64_stays_positive(self) -> None:
        """Test the full unsigned range."""
        assert Decoder(bytes.fromhex("cfffffffffffffffff")).decode_int() == 2**64 - 1

    def test_decode_uint_of_negative(self) -> None:
        """Test negative values come back as their bit pattern."""
        assert Decoder(b"\xff").decode_uint() == 2**64 - 1

    def test_floats(self) -> None:
        """Test float 32 and float 64."""
        assert Decoder(bytes.fromhex("ca3f9e0610")).decode_float32() == pytest.approx(1.23456, rel=1e-7)
        assert Decoder(bytes.fromhex("cb3ff3c0c1fc8f3238")).decode_float64() == 1.23456

    def test_float_from_int(self) -> None:
        """Test integer tags convert numerically."""
        assert Decoder(b"\x05").decode_float64() == 5.0
        assert Decoder(b"\xff").decode_float32() == -1.0
        assert Decoder(b"\xcd\x01\x2c").decode_float64() == 300.0

    def test_float64_as_float32(self) -> None:
        """Test a float 64 is returned as stored."""
        assert Decoder(bytes.fromhex("cb3ff3c0c1fc8f3238")).decode_float32() == 1.23456

    def test_container_lengths(self) -> None:
        """Test array and map headers."""
        assert Decoder(b"\x94").decode_array_len() == 4
        assert Decoder(b"\xdc\x00\x10").decode_array_len() == 16
        assert Decoder(b"\x81").decode_map_len() == 1
        assert Decoder(b"\xde\x01\x00").decode_map_len() == 256

    def test_nil_lengths(self) -> None:
        """Test nil headers decode to -1."""
        assert Decoder(b"\xc0").decode_array_len() == -1
        assert Decoder(b"\xc0").decode_map_len() == -1

    def test_sequential_values(self) -> None:
        """Test several values from one buffer."""
        dec = Decoder(b"\xa5hello\xcd\x01\x2c")
        assert dec.decode_string() == "hello"
        assert dec.decode_int() == 300
        assert dec.remaining_length() == 0


class TestMalformedInput:
    """Test error handling for malformed input."""

    @pytest.mark.parametrize(
        "method",
        [
            "decode_nil",
            "decode_bool",
            "decode_int",
            "decode_uint",
            "decode_float32",
            "decode_float64",
            "decode_string",
            "decode_bytes",
            "decode_array_len",
            "decode_map_len",
            "decode_time",
            "decode_value",
        ],
    )
    def test_empty_buffer(self, method: str) -> None:
        """Test every operation fails on empty input."""
        with pytest.raises(EndOfInputError):
            getattr(Decoder(b""), method)()

    def test_truncated_int(self) -> None:
        """Test a uint 32 with two payload bytes."""
        with pytest.raises(ReadCountMismatchError) as exc_info:
            Decoder(b"\xce\x00\x01").decode_int()
        assert exc_info.value.expected == 4
        assert exc_info.value.actual == 2

    def test_missing_payload(self) -> None:
        """Test a header with no payload at all."""
        with pytest.raises(EndOfInputError):
            Decoder(b"\xcd").decode_int()

    def test_truncated_string(self) -> None:
        """Test a fixstr shorter than its header says."""
        with pytest.raises(ReadCountMismatchError):
            Decoder(b"\xa5hel").decode_string()

    def test_huge_length_prefix_with_no_payload(self) -> None:
        """Test a str 32 header claiming 4 GiB with nothing after it."""
        with pytest.raises(EndOfInputError):
            Decoder(b"\xdb\xff\xff\xff\xff").decode_string()
        with pytest.raises(DecodeError):
            bytes_to_value(b"\xdb\xff\xff\xff\xff")

    def test_huge_length_prefix_with_short_payload(self) -> None:
        """Test a bin 32 header claiming 2 GiB with one payload byte."""
        with pytest.raises(ReadCountMismatchError) as exc_info:
            Decoder(b"\xc6\x7f\xff\xff\xff\x00").decode_bytes()
        assert exc_info.value.expected == 0x7FFFFFFF
        assert exc_info.value.actual == 1

    def test_huge_ext_length(self) -> None:
        """Test an ext 32 timestamp header claiming 4 GiB."""
        with pytest.raises(ReadCountMismatchError):
            Decoder(b"\xc9\xff\xff\xff\xff\xff\x00\x00").decode_time()

    def test_invalid_bool_tag(self) -> None:
        """Test a non-bool tag."""
        with pytest.raises(InvalidTagError) as exc_info:
            Decoder(b"\x01").decode_bool()
        assert exc_info.value.tag == 0x01

    def test_string_as_int(self) -> None:
        """Test a string tag where an integer is expected."""
        with pytest.raises(InvalidTagError):
            Decoder(b"\xa1a").decode_int()

    def test_never_used_tag(self) -> None:
        """Test 0xc1 has no Value form."""
        with pytest.raises(InvalidTagError):
            Decoder(b"\xc1").decode_value()

    def test_errors_share_a_base(self) -> None:
        """Test decode errors can be caught together."""
        with pytest.raises(DecodeError):
            Decoder(b"\xc1").decode_value()


class TestDecodeTime:
    """Test timestamp extension decoding."""

    def test_round_trip(self) -> None:
        """Test each payload width."""
        for ts in (Timestamp(1), Timestamp(1, 1), Timestamp(2**34, 5)):
            enc = Encoder()
            enc.encode_time(ts)
            assert Decoder(enc.to_bytes()).decode_time() == ts

    def test_wrong_ext_type(self) -> None:
        """Test another ext type is rejected by default."""
        data = b"\xd6\x05\x00\x00\x00\x01"
        with pytest.raises(InvalidExtensionTypeError):
            Decoder(data).decode_time()

    def test_lenient_ext_type(self) -> None:
        """Test the type check can be disabled."""
        data = b"\xd6\x05\x00\x00\x00\x01"
        assert Decoder(data, CodecConfig(strict_ext_type=False)).decode_time() == Timestamp(1)

    def test_bad_length(self) -> None:
        """Test payloads that are not 4, 8 or 12 bytes."""
        with pytest.raises(InvalidExtensionLengthError):
            Decoder(b"\xd5\xff\x00\x00").decode_time()

    def test_not_ext(self) -> None:
        """Test a non-ext tag."""
        with pytest.raises(InvalidTagError):
            Decoder(b"\x01").decode_time()


class TestDecodeValue:
    """Test generic tree decoding."""

    def test_scalars(self) -> None:
        """Test every scalar variant."""
        assert Decoder(b"\xc0").decode_value() == Value.null()
        assert Decoder(b"\xc3").decode_value() == Value.boolean(True)
        assert Decoder(b"\xd0\x9c").decode_value() == Value.number(-100)
        assert Decoder(b"\xa1a").decode_value() == Value.string("a")

    def test_number_kinds(self) -> None:
        """Test integer tags give ints and float tags give floats."""
        assert isinstance(Decoder(b"\x01").decode_value().as_number(), int)
        as_float = Decoder(bytes.fromhex("cb3ff0000000000000")).decode_value().as_number()
        assert isinstance(as_float, float)
        assert as_float == 1.0

    def test_float32_value(self) -> None:
        """Test float 32 values widen exactly."""
        v = Decoder(bytes.fromhex("ca3f9e0610")).decode_value()
        assert v.as_float() == pytest.approx(1.23456, rel=1e-7)

    def test_nan(self) -> None:
        """Test NaN decodes as a float number."""
        v = Decoder(bytes.fromhex("cb7ff8000000000000")).decode_value()
        assert math.isnan(v.as_float())

    def test_bin_as_string(self) -> None:
        """Test bin payloads become strings."""
        assert Decoder(b"\xc4\x02ab").decode_value() == Value.string("ab")

    def test_bin_invalid_utf8(self) -> None:
        """Test bin payloads follow the configured error handler."""
        with pytest.raises(TextEncodingError):
            Decoder(b"\xc4\x01\xff").decode_value()

        config = CodecConfig(bin_text_errors="replace")
        assert Decoder(b"\xc4\x01\xff", config).decode_value() == Value.string("\ufffd")

    def test_map(self) -> None:
        """Test {"name": "huangjian"}."""
        v = Decoder(bytes.fromhex("81a46e616d65a96875616e676a69616e")).decode_value()
        assert v == Value.object({"name": Value.string("huangjian")})

    def test_non_string_keys(self) -> None:
        """Test scalar keys are converted to text."""
        v = Decoder(b"\x82\x01\xa1a\xc3\xa1b").decode_value()
        assert v.as_object() == {"1": Value.string("a"), "true": Value.string("b")}

    def test_container_key(self) -> None:
        """Test arrays cannot be map keys."""
        with pytest.raises(DecodeError):
            Decoder(b"\x81\x90\x01").decode_value()

    def test_nil_containers(self) -> None:
        """Test nil decodes as null, not an empty container."""
        assert Decoder(b"\xc0").decode_value().is_null

    def test_ext_has_no_value(self) -> None:
        """Test ext tags are rejected."""
        with pytest.raises(InvalidTagError):
            Decoder(b"\xd6\xff\x00\x00\x00\x01").decode_value()

    def test_depth_limit(self) -> None:
        """Test nesting beyond max_depth."""
        data = b"\x91" * 10 + b"\x90"
        Decoder(data, CodecConfig(max_depth=11)).decode_value()
        with pytest.raises(RecursionLimitExceededError):
            Decoder(data, CodecConfig(max_depth=10)).decode_value()

    def test_deep_input_with_default_config(self) -> None:
        """Test hostile nesting fails cleanly instead of overflowing the stack."""
        with pytest.raises(RecursionLimitExceededError):
            Decoder(b"\x91" * 100_000).decode_value()

    def test_iter_values(self) -> None:
        """Test reading a concatenated stream."""
        values = list(Decoder(b"\x01\xa1a\xc0").iter_values())
        assert values == [Value.number(1), Value.string("a"), Value.null()]
