"""Конфиги симулятора пресса.

- `presssim.config.models`: параметры машины и настройки расчёта;
- `presssim.config.loader`: загрузка/сохранение параметров в CSV.
"""

from __future__ import annotations

from .models import (  # noqa: F401
    DEFAULT_SYSTEM_LOSSES_BAR,
    MachineParameters,
    PhaseSpec,
    ReconstructionConfig,
    SimulationConfig,
)

__all__ = [
    "DEFAULT_SYSTEM_LOSSES_BAR",
    "MachineParameters",
    "PhaseSpec",
    "ReconstructionConfig",
    "SimulationConfig",
]
