"""Record layer: mapping between pydantic records and Value trees.

materialize() turns a record instance into an object Value whose keys are the
field names. project() goes the other way and fills a record of a given class
from an object Value, converting each member to the field's declared type.

Projection is lenient about missing data and strict about wrong data:

- absent keys fall back to the field default, or to the type's zero value
  (``0``, ``""``, ``False``, empty containers, a default-constructed record)
- keys with no matching field are ignored
- a member whose kind does not fit the field raises FieldConversionError
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import FieldConversionError, ProjectionError, SchemaError
from .schema import FieldKind, RecordSchema, TypeSchema
from .value import Value

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def materialize(obj: Any) -> Value:
    """Build a Value tree from a record or plain Python data.

    Records become objects keyed by field name, enums become their value,
    bytes become arrays of byte numbers and tuples/sets become arrays.

    Args:
        obj: Record instance or supported Python object

    Returns:
        Equivalent Value tree

    Raises:
        SchemaError: If an unsupported object is found

    Example:
        >>> materialize(Sub(a=100)).to_python()
        {'a': 100, 'b': False, 'c': {}}
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return Value.null()
    # Enum before bool/int: IntEnum members are ints
    if isinstance(obj, enum.Enum):
        return materialize(obj.value)
    if isinstance(obj, bool):
        return Value.boolean(obj)
    if isinstance(obj, (int, float)):
        return Value.number(obj)
    if isinstance(obj, str):
        return Value.string(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return Value.array([Value.number(b) for b in bytes(obj)])
    if isinstance(obj, BaseModel):
        return Value.object(
            {name: materialize(getattr(obj, name)) for name in type(obj).model_fields}
        )
    if isinstance(obj, (list, tuple, set, frozenset)):
        return Value.array([materialize(item) for item in obj])
    if isinstance(obj, dict):
        entries = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise SchemaError(f"Object keys must be str, got {type(key).__name__}")
            entries[key] = materialize(item)
        return Value.object(entries)
    raise SchemaError(f"Cannot materialize {type(obj).__name__} into a Value")


def project(model_class: Type[T], value: Value) -> T:
    """Fill a record of ``model_class`` from an object Value.

    Args:
        model_class: Pydantic model class to build
        value: Object Value (typically from bytes_to_value())

    Returns:
        Validated record instance

    Raises:
        FieldConversionError: If a member does not fit its field type
        ProjectionError: If ``value`` is not an object or pydantic rejects
            the converted fields
        SchemaError: If the model uses an unsupported field type
    """
    return _project_record(model_class, value, "")


def _project_record(model_class: Type[T], value: Value, path: str) -> T:
    if not value.is_object:
        if path:
            raise FieldConversionError(path, "object", value.kind.value)
        raise ProjectionError(
            f"Cannot project {value.kind.value} value into {model_class.__name__}: expected object"
        )

    schema = RecordSchema.from_model(model_class)
    members = value.as_object()
    kwargs: dict[str, Any] = {}

    for field in schema.fields:
        field_path = f"{path}.{field.name}" if path else field.name
        member = members.get(field.name)
        if member is None:
            if field.required:
                kwargs[field.name] = _zero(field.type)
            # Otherwise pydantic applies the declared default
            continue
        kwargs[field.name] = _convert(field.type, member, field_path)

    unknown = set(members) - {field.name for field in schema.fields}
    if unknown:
        logger.debug("ignoring keys %s for %s", sorted(unknown), model_class.__name__)

    try:
        return model_class(**kwargs)
    except ValidationError as e:
        raise ProjectionError(f"{model_class.__name__} rejected projected fields: {e}") from e


def _convert(ts: TypeSchema, v: Value, path: str) -> Any:
    """Convert one member Value to the Python value for type ``ts``."""
    if v.is_null and ts.optional:
        return None

    kind = ts.kind

    if kind is FieldKind.VALUE:
        return v
    if kind is FieldKind.ANY:
        return v.to_python()

    if kind is FieldKind.BOOL:
        if not v.is_bool:
            raise FieldConversionError(path, "bool", v.kind.value)
        return v.as_bool()

    if kind is FieldKind.INT:
        if not v.is_number:
            raise FieldConversionError(path, "int", v.kind.value)
        try:
            return v.as_int()
        except TypeError:
            raise FieldConversionError(path, "int", f"fractional number {v.as_number()!r}") from None

    if kind is FieldKind.FLOAT:
        if not v.is_number:
            raise FieldConversionError(path, "float", v.kind.value)
        return v.as_float()

    if kind is FieldKind.STR:
        if not v.is_string:
            raise FieldConversionError(path, "string", v.kind.value)
        return v.as_string()

    if kind is FieldKind.BYTES:
        return _convert_bytes(v, path)

    if kind is FieldKind.ENUM:
        try:
            return ts.python_type(_convert_enum_member(v, path))
        except ValueError:
            raise FieldConversionError(
                path, ts.python_type.__name__, f"unknown member {v.to_python()!r}"
            ) from None

    if kind is FieldKind.RECORD:
        return _project_record(ts.python_type, v, path)

    if kind in (FieldKind.LIST, FieldKind.TUPLE):
        if not v.is_array:
            raise FieldConversionError(path, "array", v.kind.value)
        if ts.item is None:
            raise SchemaError(f"Field {path}: missing element type")
        items = [_convert(ts.item, item, f"{path}[{i}]") for i, item in enumerate(v.as_array())]
        return tuple(items) if kind is FieldKind.TUPLE else items

    if kind is FieldKind.DICT:
        if not v.is_object:
            raise FieldConversionError(path, "object", v.kind.value)
        if ts.item is None:
            raise SchemaError(f"Field {path}: missing value type")
        return {
            key: _convert(ts.item, item, f"{path}.{key}") for key, item in v.as_object().items()
        }

    raise SchemaError(f"Field {path}: unsupported field kind {kind.value}")


def _convert_bytes(v: Value, path: str) -> bytes:
    if v.is_string:
        return v.as_string().encode("utf-8", "surrogateescape")
    if not v.is_array:
        raise FieldConversionError(path, "bytes", v.kind.value)
    out = bytearray()
    for i, item in enumerate(v.as_array()):
        try:
            b = item.as_int()
        except TypeError:
            raise FieldConversionError(f"{path}[{i}]", "byte", item.kind.value) from None
        if not 0 <= b <= 255:
            raise FieldConversionError(f"{path}[{i}]", "byte", f"out of range number {b}")
        out.append(b)
    return bytes(out)


def _convert_enum_member(v: Value, path: str) -> Any:
    if v.is_number:
        n = v.as_number()
        return int(n) if isinstance(n, float) and n.is_integer() else n
    if v.is_string or v.is_bool:
        return v.data
    raise FieldConversionError(path, "enum value", v.kind.value)


def _zero(ts: TypeSchema) -> Any:
    """Zero value used for required fields absent from the object."""
    if ts.optional:
        return None
    kind = ts.kind
    if kind is FieldKind.BOOL:
        return False
    if kind is FieldKind.INT:
        return 0
    if kind is FieldKind.FLOAT:
        return 0.0
    if kind is FieldKind.STR:
        return ""
    if kind is FieldKind.BYTES:
        return b""
    if kind is FieldKind.LIST:
        return []
    if kind is FieldKind.TUPLE:
        return ()
    if kind is FieldKind.DICT:
        return {}
    if kind is FieldKind.RECORD:
        return _project_record(ts.python_type, Value.object(), "")
    if kind is FieldKind.ENUM:
        return next(iter(ts.python_type))
    if kind is FieldKind.VALUE:
        return Value.null()
    return None
