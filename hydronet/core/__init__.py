"""Core utilities: types, errors, validation."""

from __future__ import annotations

__all__ = [
    "types",
    "errors",
    "validation",
]
