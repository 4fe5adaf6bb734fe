"""presssim.core.validation

Базовые проверки, чтобы ловить физически невозможные значения как можно раньше.
"""

from __future__ import annotations

import math

from .errors import ParameterValidationError


def ensure_finite(value: float, name: str) -> None:
    if not math.isfinite(float(value)):
        raise ParameterValidationError(f"{name} must be a finite number, got {value}")


def ensure_non_negative(value: float, name: str) -> None:
    if value < 0:
        raise ParameterValidationError(f"{name} must be >= 0, got {value}")


def ensure_positive(value: float, name: str) -> None:
    if value <= 0:
        raise ParameterValidationError(f"{name} must be > 0, got {value}")


def ensure_fraction(value: float, name: str) -> None:
    """0 < value <= 1 (КПД и т.п.)."""

    if not (0.0 < value <= 1.0):
        raise ParameterValidationError(f"{name} must be in (0, 1], got {value}")
