"""Пакет физики (гидравлические примитивы и модель фаз)."""

from __future__ import annotations

from .phases import CylinderAreas, PhaseComputed, PhaseModel, compute_phases

__all__ = [
    "CylinderAreas",
    "PhaseComputed",
    "PhaseModel",
    "compute_phases",
]
