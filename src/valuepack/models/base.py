"""Base record class and valuepack-specific Pydantic configuration.

This module provides the Record class that typed records projected from and
materialized into Value trees should inherit from. Plain pydantic models work
with the record layer too; Record only fixes a sensible configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    """Base class for valuepack records.

    Fields are mapped to object keys by name. Any field type supported by the
    record layer can be used: bool, int, float, str, bytes, list, tuple, dict
    with str keys, Optional, enums, nested records, Value and Any.

    Example:
        >>> class Sub(Record):
        ...     a: int = 0
        ...     b: bool = False
        ...     c: dict[str, str] = {}
        >>> class Student(Record):
        ...     name: str = ""
        ...     age: int = 0
        ...     sub: Sub = Sub()
        >>> Student(name="huangjian", age=10000, sub=Sub(a=100)).sub.a
        100
    """

    model_config = ConfigDict(
        # Allow arbitrary types in user records
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )
