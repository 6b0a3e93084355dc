"""MessagePack timestamp extension (type -1).

A timestamp is packed into the smallest of three payload layouts:

- 4 bytes: uint32 seconds (nanoseconds are zero)
- 8 bytes: uint64 with nanoseconds in the high 30 bits and seconds in the low 34 bits
- 12 bytes: uint32 nanoseconds followed by uint64 seconds

Only timestamps at or after the Unix epoch are supported.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone

from ..exceptions import DecodeError, InvalidExtensionLengthError, TimestampRangeError
from .binary import BigEndian

NANOS_PER_SECOND = 1_000_000_000
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Timestamp:
    """A point in time as seconds since the Unix epoch plus nanoseconds.

    Attributes:
        seconds: Whole seconds since 1970-01-01T00:00:00Z
        nanoseconds: Sub-second remainder (0-999999999)
    """

    seconds: int
    nanoseconds: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.nanoseconds < NANOS_PER_SECOND:
            raise ValueError(f"nanoseconds must be 0-999999999, got {self.nanoseconds}")

    @classmethod
    def from_datetime(cls, dt: datetime) -> Timestamp:
        """Build a timestamp from a datetime.

        Naive datetimes are taken to be UTC.
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        delta = dt - _EPOCH
        seconds = delta.days * 86400 + delta.seconds
        return cls(seconds, delta.microseconds * 1000)

    @classmethod
    def now(cls) -> Timestamp:
        ns = time.time_ns()
        return cls(ns // NANOS_PER_SECOND, ns % NANOS_PER_SECOND)

    def to_datetime(self) -> datetime:
        """Return an aware UTC datetime (nanoseconds truncated to microseconds)."""
        return datetime.fromtimestamp(self.seconds, tz=timezone.utc).replace(
            microsecond=self.nanoseconds // 1000
        )


def encode_time(seconds: int, nanoseconds: int = 0) -> bytes:
    """Pack a timestamp into its minimal extension payload.

    Args:
        seconds: Seconds since the epoch (must be >= 0)
        nanoseconds: Sub-second remainder (0-999999999)

    Returns:
        4, 8 or 12 byte payload

    Raises:
        TimestampRangeError: If the timestamp predates the epoch or does not fit 64 bits
    """
    if seconds < 0:
        raise TimestampRangeError(f"timestamps before 1970 are not supported (seconds={seconds})")
    if seconds > 0xFFFFFFFFFFFFFFFF:
        raise TimestampRangeError(f"seconds {seconds} do not fit in 64 bits")
    if not 0 <= nanoseconds < NANOS_PER_SECOND:
        raise TimestampRangeError(f"nanoseconds must be 0-999999999, got {nanoseconds}")

    if seconds >> 34 == 0:
        data = (nanoseconds << 34) | seconds
        if data & 0xFFFFFFFF00000000 == 0:
            b = bytearray(4)
            BigEndian.put_uint32(b, data)
            return bytes(b)
        b = bytearray(8)
        BigEndian.put_uint64(b, data)
        return bytes(b)

    b = bytearray(12)
    BigEndian.put_uint32(b, nanoseconds)
    BigEndian.put_uint64(memoryview(b)[4:], seconds)
    return bytes(b)


def decode_time(payload: bytes) -> Timestamp:
    """Unpack a timestamp extension payload.

    Args:
        payload: 4, 8 or 12 byte payload (without the ext header)

    Returns:
        Decoded Timestamp

    Raises:
        InvalidExtensionLengthError: If the payload has any other length
        DecodeError: If the nanosecond field is out of range
    """
    if len(payload) == 4:
        return Timestamp(BigEndian.uint32(payload), 0)

    if len(payload) == 8:
        data = BigEndian.uint64(payload)
        seconds = data & 0x00000003FFFFFFFF
        nanoseconds = data >> 34
    elif len(payload) == 12:
        nanoseconds = BigEndian.uint32(payload)
        seconds = BigEndian.uint64(memoryview(payload)[4:])
    else:
        raise InvalidExtensionLengthError(len(payload))

    if nanoseconds >= NANOS_PER_SECOND:
        raise DecodeError(f"timestamp nanoseconds out of range: {nanoseconds}")
    return Timestamp(seconds, nanoseconds)
