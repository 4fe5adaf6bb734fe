"""Core utilities: units, types, errors, validation."""

from __future__ import annotations

__all__ = [
    "units",
    "types",
    "errors",
    "validation",
]
