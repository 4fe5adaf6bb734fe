"""Симулятор рабочего цикла пресса.

Проходит четыре фазы в фиксированном порядке, дробит каждую на шаги
`SimulationConfig.time_step_s` и выдаёт по точке на шаг. Переход между фазами
оформлен как свёртка по списку фаз с неизменяемым курсором `CycleCursor`
(время и позиция в начале фазы), без общего изменяемого состояния.

Расход и давление внутри фазы получают косметическую "параболу"
4·p·(1−p), чтобы графики не были идеально плоскими. Это не физический эффект.

Известное расхождение: внутри фазы позиция интегрируется как speed·t,
а на границе фазы курсор сдвигается на объявленный ход `stroke_mm`.
При speed·time != stroke эти величины не совпадают; сохраняются оба поведения.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import math

import pandas as pd

from presssim.config.models import MachineParameters, PhaseSpec, SimulationConfig
from presssim.core.types import PHASE_LABELS, PHASE_ORDER, SimulationSample
from presssim.core.units import SECONDS_PER_HOUR
from presssim.physics.hydraulics import pump_power_kw
from presssim.physics.phases import PhaseComputed, PhaseModel, compute_phases
from presssim.timeline import samples_to_frame


RETRACTING_PHASE = "retract_fast"

# шум округления i*dt (3*0.1 > 0.3)
_TIME_EPS = 1e-9


@dataclass(frozen=True)
class EnergyConsumption:
    total_kwh: float
    per_phase_kwh: Dict[str, float]


@dataclass(frozen=True)
class ResultsSummary:
    pump_flow_rate_lpm: float
    pump_displacement_cc_rev: float
    cylinder_areas_cm2: Dict[str, float]
    required_pressures_bar: Dict[str, float]
    max_motor_power_kw: float
    relief_valve_setting_bar: float
    energy_consumption: EnergyConsumption

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pump_flow_rate_lpm": self.pump_flow_rate_lpm,
            "pump_displacement_cc_rev": self.pump_displacement_cc_rev,
            "cylinder_areas_cm2": dict(self.cylinder_areas_cm2),
            "required_pressures_bar": dict(self.required_pressures_bar),
            "max_motor_power_kw": self.max_motor_power_kw,
            "relief_valve_setting_bar": self.relief_valve_setting_bar,
            "energy_consumption": {
                "total_kwh": self.energy_consumption.total_kwh,
                "per_phase_kwh": dict(self.energy_consumption.per_phase_kwh),
            },
        }


@dataclass(frozen=True)
class CycleCursor:
    """Состояние на границе фаз: накопленное время (с) и позиция (мм)."""

    time_s: float = 0.0
    position_mm: float = 0.0


@dataclass(frozen=True)
class CycleRun:
    samples: Tuple[SimulationSample, ...]
    results: ResultsSummary
    parameters: MachineParameters = field(repr=False)

    def __len__(self) -> int:
        return len(self.samples)

    def to_frame(self) -> pd.DataFrame:
        return samples_to_frame(self.samples)


def curve_factor(progress: float) -> float:
    """Парабола 0 -> 1 -> 0 с максимумом при progress = 0.5."""

    return 4.0 * progress * (1.0 - progress)


def local_times(duration_s: float, time_step_s: float) -> List[float]:
    """Моменты времени внутри фазы (от начала фазы).

    Нулевая фаза даёт ровно одну точку в 0. Иначе i*dt для i = 0..ceil(T/dt),
    точки за границей T отбрасываются. Если T не кратно dt, последняя точка
    лежит раньше границы, а следующая фаза всё равно начинается в T.
    """

    T = float(duration_s)
    if T <= 0.0:
        return [0.0]
    n = math.ceil(T / time_step_s)
    limit = T + _TIME_EPS * max(1.0, T)
    return [i * time_step_s for i in range(n + 1) if i * time_step_s <= limit]


def phase_samples(
    cursor: CycleCursor,
    name: str,
    spec: PhaseSpec,
    computed: PhaseComputed,
    cfg: SimulationConfig,
) -> List[SimulationSample]:
    T = float(spec.time_s)
    sign = -1.0 if name == RETRACTING_PHASE else 1.0
    label = PHASE_LABELS[name]

    out: List[SimulationSample] = []
    for t_local in local_times(T, cfg.time_step_s):
        progress = 0.0 if T <= 0.0 else max(0.0, min(1.0, t_local / T))
        dip = cfg.variation_fraction * curve_factor(progress)

        flow = computed.flow_lpm * (1.0 - dip)
        pressure = computed.required_pressure_bar * (1.0 - dip)
        position = max(0.0, cursor.position_mm + sign * spec.speed_mm_s * t_local)

        out.append(
            SimulationSample(
                time_s=cursor.time_s + t_local,
                flow_lpm=flow,
                pressure_bar=pressure,
                position_mm=position,
                motor_power_kw=computed.motor_power_kw,
                actuator_power_kw=computed.actuator_power_kw,
                phase=label,
                pump_input_power_kw=pump_power_kw(pressure, flow),
                actual_motor_input_power_kw=computed.motor_power_kw,
                actuator_output_power_kw=computed.actuator_power_kw,
                ideal_motor_input_power_kw=computed.ideal_pump_power_kw,
            )
        )
    return out


def advance(cursor: CycleCursor, name: str, spec: PhaseSpec) -> CycleCursor:
    """Переход через границу фазы: объявленный ход и длительность."""

    sign = -1.0 if name == RETRACTING_PHASE else 1.0
    return CycleCursor(
        time_s=cursor.time_s + float(spec.time_s),
        position_mm=max(0.0, cursor.position_mm + sign * float(spec.stroke_mm)),
    )


def summarize(params: MachineParameters, model: PhaseModel) -> ResultsSummary:
    per_phase = {
        name: model[name].motor_power_kw * float(params.phase(name).time_s) / SECONDS_PER_HOUR
        for name in PHASE_ORDER
    }
    flow = model.pump_flow_rate_lpm
    return ResultsSummary(
        pump_flow_rate_lpm=flow,
        pump_displacement_cc_rev=flow * 1000.0 / float(params.motor_speed_rpm),
        cylinder_areas_cm2=model.areas.to_cm2(),
        required_pressures_bar={name: model[name].required_pressure_bar for name in PHASE_ORDER},
        max_motor_power_kw=model.max_motor_power_kw,
        relief_valve_setting_bar=model.relief_valve_setting_bar,
        energy_consumption=EnergyConsumption(total_kwh=sum(per_phase.values()), per_phase_kwh=per_phase),
    )


class DutyCycleSimulator:
    def __init__(self, cfg: SimulationConfig | None = None) -> None:
        self.cfg = cfg or SimulationConfig()

    def run(self, params: MachineParameters) -> CycleRun:
        """Полный прогон цикла.

        Raises:
            ParameterValidationError: до расчёта, частичного результата нет.
        """

        params.validate()
        model = compute_phases(params)

        cursor = CycleCursor()
        samples: List[SimulationSample] = []
        for name, spec in params.phases():
            samples.extend(phase_samples(cursor, name, spec, model[name], self.cfg))
            cursor = advance(cursor, name, spec)

        return CycleRun(samples=tuple(samples), results=summarize(params, model), parameters=params)


def run_simulation(params: MachineParameters, cfg: Optional[SimulationConfig] = None) -> CycleRun:
    return DutyCycleSimulator(cfg).run(params)
