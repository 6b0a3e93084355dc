"""Utility functions for valuepack.

This module provides encoded size calculation for records, Value trees and
plain objects.
"""

from __future__ import annotations

from .sizing import encoded_size, field_sizes

__all__ = [
    "encoded_size",
    "field_sizes",
]
