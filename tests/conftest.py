"""Pytest configuration.

Goal: make `import presssim` work reliably when running tests without installing
package (editable install).

This repo uses a flat layout (presssim/ at repo root). Some environments run
pytest with a working directory where repo root isn't on sys.path, leading to
`ModuleNotFoundError: presssim`.

This conftest ensures repo root is on sys.path and provides shared fixtures.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from presssim.config.models import MachineParameters  # noqa: E402
from presssim.core.types import SimulationSample  # noqa: E402


@pytest.fixture()
def reference_params() -> MachineParameters:
    # Эталонный пресс: 75/45 мм, 2.5 т / 8 т, 1800 об/мин, КПД 0.9, потери 10 бар.
    return MachineParameters()


@pytest.fixture()
def log_rows() -> List[List[str]]:
    return [
        ["Machine", "Press A"],
        ["Recorded", "2024-05-01"],
        ["time", "displacement", "velocity", "p_rod", "p_cap"],
        ["0.0", "0.0", "0.1", "20", "100"],
        ["0.1", "10.0", "0.1", "20", "110"],
        ["0.2", "20.0", "0.0", "25", "120"],
        ["0.3", "15.0", "-0.05", "50", "30"],
        ["0.4", "10.0", "-0.05", "55", "30"],
    ]


def make_sample(
    time_s: float,
    position_mm: float = 0.0,
    motor_power_kw: float = 0.0,
    pressure_bar: float = 0.0,
    pressure_cap_bar: float | None = None,
) -> SimulationSample:
    return SimulationSample(
        time_s=time_s,
        flow_lpm=0.0,
        pressure_bar=pressure_bar,
        position_mm=position_mm,
        motor_power_kw=motor_power_kw,
        actuator_power_kw=0.0,
        phase="test",
        pump_input_power_kw=0.0,
        actual_motor_input_power_kw=motor_power_kw,
        actuator_output_power_kw=0.0,
        ideal_motor_input_power_kw=0.0,
        pressure_cap_bar=pressure_cap_bar,
    )
