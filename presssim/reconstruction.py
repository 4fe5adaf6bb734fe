"""Реконструкция временного ряда по внешнему логу датчиков.

Вход: таблица строк (списки ячеек-строк). Колонки позиционные:
0 время (с), 1 перемещение (мм), 2 скорость (м/с), 3 давление штоковой
полости (бар), 4 давление поршневой полости (бар). Остальные колонки
игнорируются, пустые и нечисловые ячейки -> 0.

Начало данных ищется эвристикой: первая строка, у которой первая ячейка
парсится как конечное число. Всё выше считается метаданными. Если строки
метаданных начинаются с числа, разбиение будет неверным.

Направление движения: скорость >= 0 -> выдвижение (поршневая полость),
иначе втягивание (кольцевая полость).
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence
import csv
import logging

import numpy as np
import pandas as pd

from presssim.config.models import MachineParameters, ReconstructionConfig
from presssim.core.errors import EmptyLogError, UnrecognizedLogFormatError
from presssim.core.types import SimulationSample
from presssim.core.units import BAR, BAR_LPM_PER_KW, LPM_PER_M3_S, W_PER_KW
from presssim.physics.phases import CylinderAreas

logger = logging.getLogger(__name__)


RowTable = Sequence[Sequence[str]]

LOG_COLUMNS = ("time_s", "displacement_mm", "velocity_m_s", "pressure_rod_bar", "pressure_cap_bar")

_DELIMITERS = ";\t,"


def _is_finite_number(cell: object) -> bool:
    # тот же разбор, что и в rows_to_frame
    value = pd.to_numeric(str(cell).strip(), errors="coerce")
    return bool(np.isfinite(value))


def find_data_start(rows: RowTable) -> int:
    """Индекс первой строки с числом в первой ячейке.

    Raises:
        EmptyLogError: таблица пуста.
        UnrecognizedLogFormatError: ни одна строка не начинается с числа.
    """

    if not rows:
        raise EmptyLogError("No data: the log contains no rows")
    for i, row in enumerate(rows):
        if len(row) > 0 and _is_finite_number(row[0]):
            return i
    raise UnrecognizedLogFormatError(
        f"Unrecognized format: none of {len(rows)} rows starts with a numeric value"
    )


def rows_to_frame(rows: RowTable) -> pd.DataFrame:
    """Строки данных -> DataFrame с пятью числовыми колонками LOG_COLUMNS."""

    width = len(LOG_COLUMNS)
    padded = [list(row[:width]) + [None] * (width - len(row[:width])) for row in rows]
    df = pd.DataFrame(padded, columns=list(LOG_COLUMNS), dtype=object)
    df = df.apply(lambda col: pd.to_numeric(col.astype(str).str.strip(), errors="coerce"))
    df = df.replace([np.inf, -np.inf], np.nan).fillna(0.0)
    return df.astype("float64")


class LogReconstructor:
    """Расход, сила и мощности по записанному логу.

    Геометрия берётся из MachineParameters (диаметры поршня и штока).
    КПД насоса в файле не записан, поэтому мощность мотора оценивается через
    ReconstructionConfig.assumed_pump_efficiency.
    """

    def __init__(self, params: MachineParameters | None = None, cfg: ReconstructionConfig | None = None) -> None:
        self.params = params or MachineParameters()
        self.cfg = cfg or ReconstructionConfig()
        self.areas = CylinderAreas.from_diameters(self.params.bore_diameter_mm, self.params.rod_diameter_mm)

    def reconstruct_frame(self, df: pd.DataFrame) -> pd.DataFrame:
        v = df["velocity_m_s"].to_numpy(dtype=np.float64)
        p_rod = df["pressure_rod_bar"].to_numpy(dtype=np.float64)
        p_cap = df["pressure_cap_bar"].to_numpy(dtype=np.float64)

        extending = v >= 0.0
        area = np.where(extending, self.areas.bore_m2, self.areas.annular_m2)
        pressure = np.where(extending, p_cap, p_rod)
        speed = np.abs(v)

        flow = area * speed * LPM_PER_M3_S
        force = pressure * BAR * area
        actuator_kw = force * speed / W_PER_KW
        pump_kw = pressure * flow / BAR_LPM_PER_KW
        motor_kw = pump_kw / self.cfg.assumed_pump_efficiency

        return pd.DataFrame(
            {
                "time_s": df["time_s"].to_numpy(dtype=np.float64),
                "flow_lpm": flow,
                "pressure_bar": pressure,
                "position_mm": df["displacement_mm"].to_numpy(dtype=np.float64),
                "motor_power_kw": motor_kw,
                "actuator_power_kw": actuator_kw,
                "pump_input_power_kw": pump_kw,
                "velocity_m_s": v,
                "pressure_cap_bar": p_cap,
                "pressure_rod_bar": p_rod,
            }
        )

    def reconstruct(self, rows: RowTable) -> List[SimulationSample]:
        """Таблица строк -> временной ряд той же формы, что у симулятора.

        Raises:
            LogFormatError: пустая таблица или не найдено начало данных.
        """

        start = find_data_start(rows)
        out = self.reconstruct_frame(rows_to_frame(rows[start:]))
        label = self.cfg.phase_label

        return [
            SimulationSample(
                time_s=float(r.time_s),
                flow_lpm=float(r.flow_lpm),
                pressure_bar=float(r.pressure_bar),
                position_mm=float(r.position_mm),
                motor_power_kw=float(r.motor_power_kw),
                actuator_power_kw=float(r.actuator_power_kw),
                phase=label,
                pump_input_power_kw=float(r.pump_input_power_kw),
                actual_motor_input_power_kw=float(r.motor_power_kw),
                actuator_output_power_kw=float(r.actuator_power_kw),
                ideal_motor_input_power_kw=float(r.pump_input_power_kw),
                velocity_m_s=float(r.velocity_m_s),
                pressure_cap_bar=float(r.pressure_cap_bar),
                pressure_rod_bar=float(r.pressure_rod_bar),
            )
            for r in out.itertuples(index=False)
        ]


def reconstruct_from_rows(
    rows: RowTable,
    params: Optional[MachineParameters] = None,
    cfg: Optional[ReconstructionConfig] = None,
) -> List[SimulationSample]:
    return LogReconstructor(params, cfg).reconstruct(rows)


def detect_delimiter(lines: Sequence[str], tail: int = 20) -> str:
    """Самый частый разделитель в последних строках (там данные, а не шапка)."""

    sample = lines[-tail:]
    counts = {d: sum(ln.count(d) for ln in sample) for d in _DELIMITERS}
    best = max(_DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] else ","


def read_log_rows(path: str | Path) -> List[List[str]]:
    """Прочитать текстовый лог в таблицу ячеек.

    Пустые строки отбрасываются, разделитель (`,` `;` TAB) определяется по
    содержимому, по умолчанию запятая.
    """

    path = Path(path)
    text = path.read_text(encoding="utf-8-sig", errors="replace")
    lines = [ln for ln in text.splitlines() if ln.strip()]
    if not lines:
        return []

    delimiter = detect_delimiter(lines)
    logger.debug("%s: %d non-blank lines, delimiter %r", path, len(lines), delimiter)

    return [[cell.strip() for cell in row] for row in csv.reader(lines, delimiter=delimiter)]


def reconstruct_from_file(
    path: str | Path,
    params: Optional[MachineParameters] = None,
    cfg: Optional[ReconstructionConfig] = None,
) -> List[SimulationSample]:
    rows = read_log_rows(path)
    samples = reconstruct_from_rows(rows, params, cfg)
    logger.info("%s: reconstructed %d samples", path, len(samples))
    return samples
