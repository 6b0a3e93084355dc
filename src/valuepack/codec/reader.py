"""Bounds-checked byte cursor.

This module provides ByteReader, a sequential and random-access reader over an
immutable byte buffer. The reader is lenient: a read that asks for more bytes
than remain copies what is available and reports the count. Callers that need
an exact width (the Decoder) must check that count themselves.
"""

from __future__ import annotations

from ..exceptions import EndOfInputError
from .binary import ReadableBuffer, WritableBuffer


class ByteReader:
    """Reads bytes from a buffer while keeping ``0 <= position <= total_size()``.

    Example:
        >>> reader = ByteReader(b"hello")
        >>> reader.read_byte()
        104
        >>> dst = bytearray(7)
        >>> reader.read(dst)
        4
        >>> reader.remaining_length()
        0
    """

    def __init__(self, data: ReadableBuffer) -> None:
        """Initialize a reader over the given data.

        Args:
            data: Byte buffer to read. It is copied, so later changes to a
                mutable source do not affect the reader.
        """
        self._data = bytes(data)
        self._position = 0

    @property
    def position(self) -> int:
        """Current read offset from the start of the buffer."""
        return self._position

    def remaining_length(self) -> int:
        """Return the number of unread bytes (0 at or past the end)."""
        if self._position >= len(self._data):
            return 0
        return len(self._data) - self._position

    def total_size(self) -> int:
        """Return the size of the whole buffer."""
        return len(self._data)

    def read(self, dst: WritableBuffer) -> int:
        """Copy up to ``len(dst)`` bytes into ``dst`` and advance.

        Args:
            dst: Writable destination buffer

        Returns:
            Number of bytes copied, ``min(len(dst), remaining_length())``

        Raises:
            EndOfInputError: If the cursor is already at the end
        """
        if self._position >= len(self._data):
            raise EndOfInputError()

        n = self._copy(dst, self._position)
        self._position += n
        return n

    def read_at(self, dst: WritableBuffer, offset: int) -> int:
        """Copy up to ``len(dst)`` bytes starting at ``offset`` without advancing.

        Args:
            dst: Writable destination buffer
            offset: Absolute offset from the start of the buffer

        Returns:
            Number of bytes copied

        Raises:
            EndOfInputError: If ``offset`` is negative or not inside the buffer
        """
        if offset < 0 or offset >= len(self._data):
            raise EndOfInputError(f"offset {offset} outside buffer of {len(self._data)} bytes")

        return self._copy(dst, offset)

    def read_byte(self) -> int:
        """Read a single byte and advance by one.

        Raises:
            EndOfInputError: If no bytes remain
        """
        if self._position >= len(self._data):
            raise EndOfInputError()

        b = self._data[self._position]
        self._position += 1
        return b

    def reset(self) -> None:
        """Rewind to the start of the buffer."""
        self._position = 0

    def _copy(self, dst: WritableBuffer, start: int) -> int:
        n = min(len(dst), len(self._data) - start)
        dst[:n] = self._data[start : start + n]
        return n
