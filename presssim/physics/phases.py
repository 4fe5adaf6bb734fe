"""Модель фаз рабочего цикла пресса.

Четыре фазы в фиксированном порядке:
- extend_fast: быстрый ход вниз, поршневая полость, собственный вес;
- work: рабочий ход, поршневая полость, рабочее усилие;
- hold: выдержка, давление рабочего хода, расход 0;
- retract_fast: быстрый подъём, штоковая (кольцевая) полость, собственный вес.

Ко всем давлениям добавляются потери системы.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from presssim.config.models import MachineParameters
from presssim.core.types import PHASE_ORDER
from presssim.core.units import CM2_PER_M2

from .hydraulics import (
    actuator_power_kw,
    area_m2,
    flow_lpm,
    force_from_tonnes,
    motor_power_kw,
    pressure_bar,
    pump_power_kw,
)


# Настройка предохранительного клапана: +20% к максимальному рабочему давлению.
RELIEF_MARGIN = 1.2

# Фазы с движением штока; выдержка (hold) в подбор насоса не входит.
MOVING_PHASES = ("extend_fast", "work", "retract_fast")


@dataclass(frozen=True)
class CylinderAreas:
    """Площади цилиндра (м²).

    annular_m2 не ограничивается снизу: при rod >= bore она <= 0, и давление
    обратного хода получается отрицательным или неопределённым.
    """

    bore_m2: float
    rod_m2: float
    annular_m2: float

    @classmethod
    def from_diameters(cls, bore_mm: float, rod_mm: float) -> "CylinderAreas":
        bore = area_m2(bore_mm)
        rod = area_m2(rod_mm)
        return cls(bore_m2=bore, rod_m2=rod, annular_m2=bore - rod)

    def to_cm2(self) -> Dict[str, float]:
        return {
            "bore": self.bore_m2 * CM2_PER_M2,
            "rod": self.rod_m2 * CM2_PER_M2,
            "annular": self.annular_m2 * CM2_PER_M2,
        }


@dataclass(frozen=True)
class PhaseComputed:
    required_pressure_bar: float
    flow_lpm: float
    motor_power_kw: float
    actuator_power_kw: float
    ideal_pump_power_kw: float


@dataclass(frozen=True)
class PhaseModel:
    areas: CylinderAreas
    phases: Dict[str, PhaseComputed]

    def __getitem__(self, name: str) -> PhaseComputed:
        return self.phases[name]

    @property
    def max_working_pressure_bar(self) -> float:
        return max(self.phases[name].required_pressure_bar for name in PHASE_ORDER)

    @property
    def relief_valve_setting_bar(self) -> float:
        return self.max_working_pressure_bar * RELIEF_MARGIN

    @property
    def pump_flow_rate_lpm(self) -> float:
        return max(self.phases[name].flow_lpm for name in MOVING_PHASES)

    @property
    def max_motor_power_kw(self) -> float:
        return max(self.phases[name].motor_power_kw for name in MOVING_PHASES)


def _moving_phase(
    *,
    area: float,
    force_n: float,
    velocity_m_s: float,
    losses_bar: float,
    efficiency: float,
) -> PhaseComputed:
    p = pressure_bar(force_n, area) + losses_bar
    q = flow_lpm(area, velocity_m_s)
    pump_kw = pump_power_kw(p, q)
    return PhaseComputed(
        required_pressure_bar=p,
        flow_lpm=q,
        motor_power_kw=motor_power_kw(pump_kw, efficiency),
        actuator_power_kw=actuator_power_kw(force_n, velocity_m_s),
        ideal_pump_power_kw=pump_kw,
    )


def compute_phases(params: MachineParameters) -> PhaseModel:
    """Давление, расход и мощности по фазам.

    Предусловия (КПД в (0, 1]) проверяет вызывающий код.
    """

    areas = CylinderAreas.from_diameters(params.bore_diameter_mm, params.rod_diameter_mm)
    dead_n = force_from_tonnes(params.dead_load_t)
    holding_n = force_from_tonnes(params.holding_load_t)
    losses = params.effective_system_losses_bar
    eff = params.pump_efficiency

    extend_fast = _moving_phase(
        area=areas.bore_m2,
        force_n=dead_n,
        velocity_m_s=params.extend_fast.velocity_m_s,
        losses_bar=losses,
        efficiency=eff,
    )
    work = _moving_phase(
        area=areas.bore_m2,
        force_n=holding_n,
        velocity_m_s=params.work.velocity_m_s,
        losses_bar=losses,
        efficiency=eff,
    )
    # выдержка: давление рабочего хода удерживается, расхода нет
    hold = PhaseComputed(
        required_pressure_bar=work.required_pressure_bar,
        flow_lpm=0.0,
        motor_power_kw=0.0,
        actuator_power_kw=0.0,
        ideal_pump_power_kw=0.0,
    )
    retract_fast = _moving_phase(
        area=areas.annular_m2,
        force_n=dead_n,
        velocity_m_s=params.retract_fast.velocity_m_s,
        losses_bar=losses,
        efficiency=eff,
    )

    return PhaseModel(
        areas=areas,
        phases={
            "extend_fast": extend_fast,
            "work": work,
            "hold": hold,
            "retract_fast": retract_fast,
        },
    )
