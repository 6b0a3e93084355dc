"""Transcoding between Value trees and MessagePack bytes.

This module provides the functions that turn a Value into bytes and back, and
the record-level encode()/decode() pair that combines them with the record
layer.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel

from ..config import CodecConfig
from ..models.reflect import materialize, project
from ..models.value import Value
from .binary import ReadableBuffer
from .decoder import Decoder
from .encoder import Encoder

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def value_to_bytes(v: Value, config: CodecConfig | None = None) -> bytes:
    """Serialize a Value tree to MessagePack.

    Integer numbers use the smallest integer format, float numbers use
    float 64. Object keys are written in the mapping's iteration order, which
    callers must not rely on.

    Args:
        v: Value tree to serialize
        config: Codec configuration (max_depth)

    Returns:
        MessagePack bytes

    Raises:
        EncodeError: If a number or length is out of wire range
        RecursionLimitExceededError: If nesting exceeds the configured depth

    Example:
        >>> value_to_bytes(Value.array([Value.number(1), Value.string("a")]))
        b'\\x92\\x01\\xa1a'
    """
    enc = Encoder(config)
    enc.encode_value(v)
    data = enc.to_bytes()
    logger.debug("encoded %s value into %d bytes", v.kind.value, len(data))
    return data


def bytes_to_value(data: ReadableBuffer, config: CodecConfig | None = None) -> Value:
    """Decode the first MessagePack value in ``data`` into a Value tree.

    Bytes after the first value are ignored; use bytes_to_values() to read a
    concatenated stream.

    Args:
        data: MessagePack bytes
        config: Codec configuration

    Returns:
        Decoded Value

    Raises:
        DecodeError: If the input is truncated or malformed
        RecursionLimitExceededError: If nesting exceeds the configured depth
    """
    dec = Decoder(data, config)
    value = dec.decode_value()
    if dec.remaining_length():
        logger.debug("ignoring %d trailing bytes after value", dec.remaining_length())
    return value


def bytes_to_values(data: ReadableBuffer, config: CodecConfig | None = None) -> list[Value]:
    """Decode every value of a concatenated MessagePack stream."""
    return list(Decoder(data, config).iter_values())


def encode(record: BaseModel, config: CodecConfig | None = None) -> bytes:
    """Encode a record (pydantic model) as a MessagePack map.

    Examples:
        ```python
        from valuepack import Record, encode, decode

        class Sub(Record):
            a: int = 0
            b: bool = False
            c: dict[str, str] = {}

        class Student(Record):
            name: str = ""
            age: int = 0
            sub: Sub = Sub()

        data = encode(Student(name="huangjian", age=10000, sub=Sub(a=100)))
        student = decode(Student, data)
        ```
    """
    return value_to_bytes(materialize(record), config)


def decode(model_class: type[T], data: ReadableBuffer, config: CodecConfig | None = None) -> T:
    """Decode MessagePack bytes into a record of ``model_class``.

    Raises:
        DecodeError: If the bytes are malformed
        ProjectionError: If the decoded tree does not fit the model
    """
    return project(model_class, bytes_to_value(data, config))


def packb(obj: Any, config: CodecConfig | None = None) -> bytes:
    """Encode a plain Python object (see Encoder.encode)."""
    enc = Encoder(config)
    enc.encode(obj)
    return enc.to_bytes()
