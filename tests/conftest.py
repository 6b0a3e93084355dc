"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from valuepack import Value


@pytest.fixture
def sample_value() -> Value:
    """Sample Value tree with every variant."""
    return Value.object(
        {
            "nil": Value.null(),
            "flag": Value.boolean(True),
            "count": Value.number(42),
            "ratio": Value.number(0.5),
            "name": Value.string("sensor"),
            "items": Value.array([Value.number(-1), Value.string("x")]),
        }
    )
