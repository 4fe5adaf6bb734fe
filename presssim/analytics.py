"""Сравнительная аналитика двух временных рядов (симуляция или лог).

Чистая агрегация без побочных эффектов. Для рядов из <= 1 точки все
показатели равны 0 по соглашению, это не ошибка.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Sequence

import numpy as np

from presssim.core.types import SimulationSample
from presssim.core.units import SECONDS_PER_HOUR


Severity = Literal["low", "medium", "high"]

# пороги диагностики (бар)
PRESSURE_SPIKE_LIMIT_BAR = 200.0
PRESSURE_STABILITY_LIMIT_BAR = 20.0


@dataclass(frozen=True)
class Scorecard:
    total_displacement_mm: float = 0.0
    total_time_s: float = 0.0
    average_speed_mm_s: float = 0.0
    total_energy_kwh: float = 0.0
    pressure_std_dev_bar: float = 0.0
    energy_per_100mm_kwh: float = 0.0


@dataclass(frozen=True)
class Comparison:
    first: Scorecard
    second: Scorecard
    more_efficient: Literal["first", "second"]
    more_productive: Literal["first", "second"]

    @property
    def unstable(self) -> bool:
        return max(self.first.pressure_std_dev_bar, self.second.pressure_std_dev_bar) > PRESSURE_STABILITY_LIMIT_BAR


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    title: str
    remedies: tuple[str, ...]


def scorecard(samples: Sequence[SimulationSample]) -> Scorecard:
    if len(samples) < 2:
        return Scorecard()

    t = np.array([s.time_s for s in samples], dtype=np.float64)
    x = np.array([s.position_mm for s in samples], dtype=np.float64)
    p_motor = np.array([s.motor_power_kw for s in samples], dtype=np.float64)
    p_cap = np.array([s.cap_pressure_bar for s in samples], dtype=np.float64)

    total_disp = float(np.sum(np.abs(np.diff(x))))
    total_time = float(t[-1] - t[0])
    # мощность точки i действует на интервале (t[i-1], t[i]]
    energy = float(np.sum(p_motor[1:] * np.diff(t)) / SECONDS_PER_HOUR)

    return Scorecard(
        total_displacement_mm=total_disp,
        total_time_s=total_time,
        average_speed_mm_s=total_disp / total_time if total_time > 0 else 0.0,
        total_energy_kwh=energy,
        pressure_std_dev_bar=float(np.std(p_cap)),
        energy_per_100mm_kwh=energy / total_disp * 100.0 if total_disp > 0 else 0.0,
    )


def compare(first: Sequence[SimulationSample], second: Sequence[SimulationSample]) -> Comparison:
    a = scorecard(first)
    b = scorecard(second)
    return Comparison(
        first=a,
        second=b,
        more_efficient="first" if a.energy_per_100mm_kwh < b.energy_per_100mm_kwh else "second",
        more_productive="first" if a.average_speed_mm_s > b.average_speed_mm_s else "second",
    )


def diagnose(samples: Sequence[SimulationSample]) -> List[Diagnostic]:
    """Простые пороговые проверки ряда."""

    if not samples:
        return []

    issues: List[Diagnostic] = []
    max_pressure = max(s.cap_pressure_bar for s in samples)
    if max_pressure > PRESSURE_SPIKE_LIMIT_BAR:
        issues.append(
            Diagnostic(
                severity="high",
                title="Excessive pressure spikes",
                remedies=("Check relief valve settings.", "Inspect for hydraulic line blockages."),
            )
        )

    if scorecard(samples).pressure_std_dev_bar > PRESSURE_STABILITY_LIMIT_BAR:
        issues.append(
            Diagnostic(
                severity="medium",
                title="High pressure fluctuation",
                remedies=(
                    "Check for air in the system (bleed hydraulics).",
                    "Inspect pump for inconsistent output.",
                ),
            )
        )

    if not issues:
        issues.append(
            Diagnostic(
                severity="low",
                title="Nominal performance",
                remedies=("All key metrics are within standard operating parameters.",),
            )
        )
    return issues
