from __future__ import annotations

from dataclasses import fields
from typing import Dict, Iterable

import pandas as pd

from presssim.core.types import SimulationSample


# Единицы колонок временного ряда (потребители форматируют по имени и единице)
SERIES_UNITS: Dict[str, str] = {
    "time_s": "s",
    "flow_lpm": "L/min",
    "pressure_bar": "bar",
    "position_mm": "mm",
    "motor_power_kw": "kW",
    "actuator_power_kw": "kW",
    "phase": "",
    "pump_input_power_kw": "kW",
    "actual_motor_input_power_kw": "kW",
    "actuator_output_power_kw": "kW",
    "ideal_motor_input_power_kw": "kW",
    "velocity_m_s": "m/s",
    "pressure_cap_bar": "bar",
    "pressure_rod_bar": "bar",
}

COLUMNS = tuple(f.name for f in fields(SimulationSample))


def samples_to_frame(samples: Iterable[SimulationSample]) -> pd.DataFrame:
    """Временной ряд -> DataFrame, одна колонка на поле точки.

    Отсутствующие у симулированных точек поля (скорость, давления камер) -> NaN.
    """

    rows = [s.to_dict() for s in samples]
    df = pd.DataFrame(rows, columns=list(COLUMNS))
    numeric = [c for c in COLUMNS if c != "phase"]
    df[numeric] = df[numeric].astype("float64")
    return df
