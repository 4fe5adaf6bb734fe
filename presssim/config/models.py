from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Dict, Optional, Tuple

from presssim.core.types import PHASE_ORDER
from presssim.core.validation import (
    ensure_finite,
    ensure_fraction,
    ensure_non_negative,
    ensure_positive,
)


DEFAULT_SYSTEM_LOSSES_BAR = 10.0


@dataclass(frozen=True)
class PhaseSpec:
    speed_mm_s: float = 0.0
    stroke_mm: float = 0.0
    time_s: float = 0.0

    @property
    def velocity_m_s(self) -> float:
        return float(self.speed_mm_s) / 1000.0


@dataclass(frozen=True)
class MachineParameters:
    """Статические параметры пресса и его цикла.

    Значения по умолчанию соответствуют эталонному прессу (цилиндр 75/45 мм,
    2.5 т собственного веса, 8 т рабочего усилия, 1800 об/мин).
    """

    bore_diameter_mm: float = 75.0
    rod_diameter_mm: float = 45.0
    dead_load_t: float = 2.5
    holding_load_t: float = 8.0
    motor_speed_rpm: float = 1800.0
    pump_efficiency: float = 0.9
    system_losses_bar: Optional[float] = DEFAULT_SYSTEM_LOSSES_BAR

    extend_fast: PhaseSpec = PhaseSpec(speed_mm_s=200.0, stroke_mm=200.0, time_s=1.0)
    work: PhaseSpec = PhaseSpec(speed_mm_s=10.0, stroke_mm=50.0, time_s=5.0)
    hold: PhaseSpec = PhaseSpec(speed_mm_s=0.0, stroke_mm=0.0, time_s=2.0)
    retract_fast: PhaseSpec = PhaseSpec(speed_mm_s=200.0, stroke_mm=250.0, time_s=1.25)

    @property
    def effective_system_losses_bar(self) -> float:
        # None или 0 означает "не задано"
        losses = float(self.system_losses_bar or 0.0)
        return losses if losses else DEFAULT_SYSTEM_LOSSES_BAR

    def phase(self, name: str) -> PhaseSpec:
        if name not in PHASE_ORDER:
            raise KeyError(f"Unknown phase: {name}")
        return getattr(self, name)

    def phases(self) -> Tuple[Tuple[str, PhaseSpec], ...]:
        return tuple((name, self.phase(name)) for name in PHASE_ORDER)

    def with_phase(self, name: str, **changes: float) -> "MachineParameters":
        return replace(self, **{name: replace(self.phase(name), **changes)})

    def validate(self) -> None:
        """Проверка предусловий до любого расчёта.

        Raises:
            ParameterValidationError: первое нарушенное предусловие.
        """

        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, PhaseSpec):
                for pf in fields(value):
                    ensure_finite(getattr(value, pf.name), f"{f.name}.{pf.name}")
            elif value is not None:
                ensure_finite(value, f.name)

        ensure_positive(self.motor_speed_rpm, "motor_speed_rpm")
        ensure_fraction(self.pump_efficiency, "pump_efficiency")

        ensure_positive(self.bore_diameter_mm, "bore_diameter_mm")
        ensure_non_negative(self.rod_diameter_mm, "rod_diameter_mm")
        ensure_non_negative(self.dead_load_t, "dead_load_t")
        ensure_non_negative(self.holding_load_t, "holding_load_t")
        for name, spec in self.phases():
            ensure_non_negative(spec.speed_mm_s, f"{name}.speed_mm_s")
            ensure_non_negative(spec.stroke_mm, f"{name}.stroke_mm")
            ensure_non_negative(spec.time_s, f"{name}.time_s")

    def to_dict(self) -> Dict[str, float]:
        """Плоский словарь с dotted-путями для фаз (`work.speed_mm_s`)."""

        out: Dict[str, float] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, PhaseSpec):
                for pf in fields(value):
                    out[f"{f.name}.{pf.name}"] = float(getattr(value, pf.name))
            else:
                out[f.name] = float(value)
        return out


@dataclass(frozen=True)
class SimulationConfig:
    """Настройки дискретизации цикла.

    time_step_s:
        Шаг подразбиения каждой фазы (с).

    variation_fraction:
        Амплитуда косметической "параболы" на расходе и давлении (доля от
        значения фазы). 0 отключает вариацию.
    """

    time_step_s: float = 0.25
    variation_fraction: float = 0.02

    def __post_init__(self) -> None:
        ensure_positive(self.time_step_s, "time_step_s")
        ensure_non_negative(self.variation_fraction, "variation_fraction")


@dataclass(frozen=True)
class ReconstructionConfig:
    """Настройки реконструкции по логу.

    assumed_pump_efficiency:
        КПД насоса для оценки мощности мотора. Реальный КПД машины из файла
        неизвестен, это приближение, а не измерение.
    """

    assumed_pump_efficiency: float = 0.9
    phase_label: str = "external data"

    def __post_init__(self) -> None:
        ensure_fraction(self.assumed_pump_efficiency, "assumed_pump_efficiency")
