"""Dynamic Value tree.

A Value is the canonical intermediate form between MessagePack bytes and typed
records. It is a closed set of variants: null, bool, number, string, array and
object. Numbers keep their kind: an exact ``int`` stays an ``int`` and a
``float`` stays a ``float``, so int/float survives a round trip through bytes.

Object key order is not significant. Two objects with the same keys and values
compare equal whatever their insertion order.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Sequence, Union

from pydantic_core import core_schema

Number = Union[int, float]


class ValueKind(enum.Enum):
    """Variant tag of a Value."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True, repr=False)
class Value:
    """Immutable-by-convention dynamic tree node.

    Build values with the named constructors rather than the raw dataclass
    fields; the constructors validate the payload. Values compare by content
    and are unhashable, whatever the variant.

    Example:
        >>> v = Value.object({
        ...     "name": Value.string("sensor"),
        ...     "readings": Value.array([Value.number(1), Value.number(2.5)]),
        ...     "active": Value.boolean(True),
        ... })
        >>> v["readings"][1].as_float()
        2.5
        >>> Value.from_python({"a": [1, None]}) == Value.object(
        ...     {"a": Value.array([Value.number(1), Value.null()])})
        True
    """

    kind: ValueKind = ValueKind.NULL
    data: Any = None

    __hash__ = None  # type: ignore[assignment]

    # Constructors

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL, None)

    @classmethod
    def boolean(cls, b: bool) -> Value:
        if not isinstance(b, bool):
            raise TypeError(f"Value.boolean expects bool, got {type(b).__name__}")
        return cls(ValueKind.BOOL, b)

    @classmethod
    def number(cls, n: Number) -> Value:
        # bool is an int subclass but is not a number here
        if isinstance(n, bool) or not isinstance(n, (int, float)):
            raise TypeError(f"Value.number expects int or float, got {type(n).__name__}")
        return cls(ValueKind.NUMBER, n)

    @classmethod
    def string(cls, s: str) -> Value:
        if not isinstance(s, str):
            raise TypeError(f"Value.string expects str, got {type(s).__name__}")
        return cls(ValueKind.STRING, s)

    @classmethod
    def array(cls, items: Sequence[Value] = ()) -> Value:
        items = list(items)
        for item in items:
            if not isinstance(item, Value):
                raise TypeError(f"Value.array items must be Value, got {type(item).__name__}")
        return cls(ValueKind.ARRAY, items)

    @classmethod
    def object(cls, entries: Mapping[str, Value] | None = None) -> Value:
        entries = dict(entries or {})
        for key, item in entries.items():
            if not isinstance(key, str):
                raise TypeError(f"Value.object keys must be str, got {type(key).__name__}")
            if not isinstance(item, Value):
                raise TypeError(f"Value.object values must be Value, got {type(item).__name__}")
        return cls(ValueKind.OBJECT, entries)

    @classmethod
    def from_python(cls, obj: Any) -> Value:
        """Build a Value tree from plain Python data.

        Args:
            obj: None, bool, int, float, str, bytes (as an array of byte
                numbers), list/tuple, dict with str keys, or a Value

        Returns:
            Equivalent Value tree

        Raises:
            TypeError: If an object of another type is found
        """
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, (int, float)):
            return cls.number(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.array([cls.number(b) for b in bytes(obj)])
        if isinstance(obj, (list, tuple)):
            return cls.array([cls.from_python(item) for item in obj])
        if isinstance(obj, dict):
            return cls.object({key: cls.from_python(item) for key, item in obj.items()})
        raise TypeError(f"Cannot convert {type(obj).__name__} to Value")

    # Kind checks

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    @property
    def is_bool(self) -> bool:
        return self.kind is ValueKind.BOOL

    @property
    def is_number(self) -> bool:
        return self.kind is ValueKind.NUMBER

    @property
    def is_string(self) -> bool:
        return self.kind is ValueKind.STRING

    @property
    def is_array(self) -> bool:
        return self.kind is ValueKind.ARRAY

    @property
    def is_object(self) -> bool:
        return self.kind is ValueKind.OBJECT

    # Accessors

    def _expect(self, kind: ValueKind) -> Any:
        if self.kind is not kind:
            raise TypeError(f"expected {kind.value} value, got {self.kind.value}")
        return self.data

    def as_bool(self) -> bool:
        return self._expect(ValueKind.BOOL)

    def as_number(self) -> Number:
        return self._expect(ValueKind.NUMBER)

    def as_int(self) -> int:
        """Return the number as an int.

        Integral floats (``2.0``) are accepted; fractional floats are not.
        """
        n = self._expect(ValueKind.NUMBER)
        if isinstance(n, float):
            if not n.is_integer():
                raise TypeError(f"number {n!r} is not integral")
            return int(n)
        return n

    def as_float(self) -> float:
        return float(self._expect(ValueKind.NUMBER))

    def as_string(self) -> str:
        return self._expect(ValueKind.STRING)

    def as_array(self) -> list[Value]:
        return self._expect(ValueKind.ARRAY)

    def as_object(self) -> dict[str, Value]:
        return self._expect(ValueKind.OBJECT)

    @property
    def text(self) -> str:
        """Canonical text of a scalar value.

        Numbers use their decimal form (``"1"``, ``"2.5"``, ``"1e+100"``),
        strings are returned unchanged, booleans are ``"true"``/``"false"``
        and null is ``"null"``. Map keys are converted with this accessor.

        Raises:
            TypeError: For arrays and objects
        """
        if self.kind is ValueKind.STRING:
            return self.data
        if self.kind is ValueKind.NUMBER:
            return repr(self.data) if isinstance(self.data, float) else str(self.data)
        if self.kind is ValueKind.BOOL:
            return "true" if self.data else "false"
        if self.kind is ValueKind.NULL:
            return "null"
        raise TypeError(f"{self.kind.value} value has no text form")

    def to_python(self) -> Any:
        """Convert the tree back to plain Python data (dict/list/str/...)."""
        if self.kind is ValueKind.ARRAY:
            return [item.to_python() for item in self.data]
        if self.kind is ValueKind.OBJECT:
            return {key: item.to_python() for key, item in self.data.items()}
        return self.data

    # Container protocol

    def __bool__(self) -> bool:
        # Every value is truthy; ``len()`` is only defined for containers
        return True

    def __len__(self) -> int:
        if self.kind in (ValueKind.ARRAY, ValueKind.OBJECT):
            return len(self.data)
        raise TypeError(f"{self.kind.value} value has no length")

    def __getitem__(self, key: int | str) -> Value:
        if self.kind is ValueKind.ARRAY and isinstance(key, int):
            return self.data[key]
        if self.kind is ValueKind.OBJECT and isinstance(key, str):
            return self.data[key]
        raise TypeError(f"cannot index {self.kind.value} value with {type(key).__name__}")

    def __iter__(self) -> Iterator[Any]:
        if self.kind in (ValueKind.ARRAY, ValueKind.OBJECT):
            return iter(self.data)
        raise TypeError(f"{self.kind.value} value is not iterable")

    def __contains__(self, key: object) -> bool:
        if self.kind is ValueKind.OBJECT:
            return key in self.data
        if self.kind is ValueKind.ARRAY:
            return key in self.data
        return False

    def get(self, key: str, default: Value | None = None) -> Value | None:
        """Return an object member or ``default`` when absent."""
        return self.as_object().get(key, default)

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> core_schema.CoreSchema:
        # Record fields annotated with Value accept Value instances as-is
        return core_schema.is_instance_schema(cls)

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "Value.null()"
        if self.kind is ValueKind.BOOL:
            return f"Value.boolean({self.data!r})"
        return f"Value.{self.kind.value}({self.data!r})"

    def __str__(self) -> str:
        return json.dumps(self.to_python(), ensure_ascii=False)

