"""presssim.core.types

Общие типы выходного временного ряда.

Одна и та же форма `SimulationSample` выдаётся симулятором цикла и
реконструкцией по логу, чтобы потребители (графики, экспорт, сравнение)
были взаимозаменяемы. Поля, которые есть только в логах (скорость, давления
по камерам), у симулированных точек равны None.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Optional, Tuple


PhaseName = Literal["extend_fast", "work", "hold", "retract_fast"]

PHASE_ORDER: Tuple[PhaseName, ...] = ("extend_fast", "work", "hold", "retract_fast")

PHASE_LABELS: Dict[str, str] = {
    "extend_fast": "Extend fast",
    "work": "Work",
    "hold": "Hold",
    "retract_fast": "Retract fast",
}


@dataclass(frozen=True, slots=True)
class SimulationSample:
    """Одна точка временного ряда.

    Единицы: время с, расход л/мин, давление бар, позиция мм, скорость м/с,
    мощности кВт.
    """

    time_s: float
    flow_lpm: float
    pressure_bar: float
    position_mm: float
    motor_power_kw: float
    actuator_power_kw: float
    phase: str
    pump_input_power_kw: float
    actual_motor_input_power_kw: float
    actuator_output_power_kw: float
    ideal_motor_input_power_kw: float

    # только у реконструированных из лога точек
    velocity_m_s: Optional[float] = None
    pressure_cap_bar: Optional[float] = None
    pressure_rod_bar: Optional[float] = None

    @property
    def cap_pressure_bar(self) -> float:
        if self.pressure_cap_bar is not None:
            return self.pressure_cap_bar
        return self.pressure_bar

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
