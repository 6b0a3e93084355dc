"""Encoded size calculation utilities.

This module provides functions to measure how many bytes a record, Value or
plain object occupies on the wire. Sizes depend on the field values because
MessagePack picks the smallest format for every integer, string and container.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from ..codec.transvalue import packb, value_to_bytes
from ..models.reflect import materialize
from ..models.value import Value


def encoded_size(obj: Any) -> int:
    """Calculate the encoded size of an object in bytes.

    Records are measured as the map encode() produces, Value trees as
    value_to_bytes() produces them and anything else as packb() does.

    Args:
        obj: Record instance, Value or plain Python object

    Returns:
        Size in bytes

    Raises:
        EncodeError: If the object cannot be encoded
        SchemaError: If a record contains an unsupported field value

    Example:
        >>> encoded_size(Sub(a=100))
        10
        >>> encoded_size([1, 2, 3, 4])
        5
    """
    if isinstance(obj, BaseModel):
        return len(value_to_bytes(materialize(obj)))
    if isinstance(obj, Value):
        return len(value_to_bytes(obj))
    return len(packb(obj))


def field_sizes(record: BaseModel) -> dict[str, int]:
    """Get the encoded size in bytes of each field value of a record.

    The key string and the map header are not included, so the sum of the
    returned sizes is smaller than encoded_size(record).

    Args:
        record: Record instance to analyze

    Returns:
        Dictionary mapping field names to the size of their encoded value

    Example:
        >>> field_sizes(Student(name="huangjian", age=10000))
        {'name': 10, 'age': 3, 'sub': 10}
    """
    members = materialize(record).as_object()
    return {name: len(value_to_bytes(member)) for name, member in members.items()}
