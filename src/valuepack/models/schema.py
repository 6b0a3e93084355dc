"""Schema introspection for Pydantic records.

This module analyzes Pydantic models and extracts what the record layer needs
to project a Value tree into a record: each field's name, its type shape and
whether it has a default.
"""

from __future__ import annotations

import enum
import types
from dataclasses import dataclass
from typing import Annotated, Any, List, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from .value import Value


class FieldKind(enum.Enum):
    """Shape of a field type as seen by the record layer."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    BYTES = "bytes"
    LIST = "list"
    TUPLE = "tuple"
    DICT = "dict"
    RECORD = "record"
    ENUM = "enum"
    VALUE = "value"
    ANY = "any"


@dataclass(frozen=True)
class TypeSchema:
    """Analyzed field type.

    Attributes:
        kind: Shape of the type
        python_type: The concrete class (record or enum class, element type...)
        optional: Whether ``None`` is accepted
        item: Element type for lists and tuples, value type for dicts
    """

    kind: FieldKind
    python_type: Any
    optional: bool = False
    item: Optional[TypeSchema] = None

    @classmethod
    def from_annotation(cls, annotation: Any, where: str = "") -> TypeSchema:
        """Analyze a type annotation.

        Args:
            annotation: Type annotation (``int``, ``list[str]``, ``Sub | None``...)
            where: Field name used in error messages

        Returns:
            TypeSchema describing the annotation

        Raises:
            SchemaError: If the annotation is not supported
        """
        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is Annotated:
            return cls.from_annotation(args[0], where)

        # Optional[T] / T | None
        if origin is Union or origin is types.UnionType:
            non_none_args = [arg for arg in args if arg is not type(None)]
            if len(non_none_args) != 1:
                raise SchemaError(f"Field {where}: Union types other than Optional[T] not supported")
            inner = cls.from_annotation(non_none_args[0], where)
            return cls(inner.kind, inner.python_type, True, inner.item)

        if annotation is Any:
            return cls(FieldKind.ANY, Any)
        if annotation is Value:
            return cls(FieldKind.VALUE, Value)

        if origin is list:
            item = cls.from_annotation(args[0], f"{where}[]") if args else cls(FieldKind.ANY, Any)
            return cls(FieldKind.LIST, list, item=item)

        if origin is tuple:
            if not args:
                return cls(FieldKind.TUPLE, tuple, item=cls(FieldKind.ANY, Any))
            if len(args) == 2 and args[1] is Ellipsis:
                return cls(FieldKind.TUPLE, tuple, item=cls.from_annotation(args[0], f"{where}[]"))
            raise SchemaError(f"Field {where}: only homogeneous tuple[T, ...] is supported")

        if origin is dict:
            if args:
                key_type, value_type = args
                if key_type not in (str, Any):
                    raise SchemaError(f"Field {where}: dict keys must be str, got {key_type}")
                item = cls.from_annotation(value_type, f"{where}{{}}")
            else:
                item = cls(FieldKind.ANY, Any)
            return cls(FieldKind.DICT, dict, item=item)

        if annotation is list:
            return cls(FieldKind.LIST, list, item=cls(FieldKind.ANY, Any))
        if annotation is tuple:
            return cls(FieldKind.TUPLE, tuple, item=cls(FieldKind.ANY, Any))
        if annotation is dict:
            return cls(FieldKind.DICT, dict, item=cls(FieldKind.ANY, Any))

        if isinstance(annotation, type):
            # Enum before int: IntEnum is an int subclass
            if issubclass(annotation, enum.Enum):
                return cls(FieldKind.ENUM, annotation)
            if issubclass(annotation, BaseModel):
                return cls(FieldKind.RECORD, annotation)
            if annotation is bool:
                return cls(FieldKind.BOOL, bool)
            if annotation is int:
                return cls(FieldKind.INT, int)
            if annotation is float:
                return cls(FieldKind.FLOAT, float)
            if annotation is str:
                return cls(FieldKind.STR, str)
            if annotation is bytes:
                return cls(FieldKind.BYTES, bytes)

        raise SchemaError(
            f"Field {where}: unsupported type {annotation!r}. "
            f"Supported: bool, int, float, str, bytes, list, tuple, dict, Optional, "
            f"enums, records, Value, Any."
        )


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single record field.

    Attributes:
        name: Field name (the object key)
        type: Analyzed field type
        required: Whether pydantic requires a value (no default)
    """

    name: str
    type: TypeSchema
    required: bool


class RecordSchema:
    """Schema information for an entire record.

    Example:
        >>> schema = RecordSchema.from_model(Student)
        >>> [field.name for field in schema.fields]
        ['name', 'age', 'sub']
    """

    def __init__(self, model_class: Type[BaseModel]) -> None:
        """Initialize schema from a Pydantic model.

        Args:
            model_class: Pydantic model class to introspect
        """
        self.model_class = model_class
        self.fields: List[FieldSchema] = []
        self._introspect()

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> RecordSchema:
        return cls(model_class)

    def _introspect(self) -> None:
        for field_name, field_info in self.model_class.model_fields.items():
            self.fields.append(self._extract_field_schema(field_name, field_info))

    def _extract_field_schema(self, name: str, field_info: FieldInfo) -> FieldSchema:
        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")

        return FieldSchema(
            name=name,
            type=TypeSchema.from_annotation(annotation, name),
            required=field_info.is_required(),
        )
