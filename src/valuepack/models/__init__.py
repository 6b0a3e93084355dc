"""Value model and record layer for valuepack.

This module provides the dynamic Value tree, the Record base class and the
functions that map records to and from Value trees.
"""

from __future__ import annotations

from .base import Record
from .reflect import materialize, project
from .schema import FieldKind, FieldSchema, RecordSchema, TypeSchema
from .value import Value, ValueKind

__all__ = [
    "Value",
    "ValueKind",
    "Record",
    "RecordSchema",
    "FieldSchema",
    "TypeSchema",
    "FieldKind",
    "materialize",
    "project",
]
