"""Загрузка MachineParameters из однострочного CSV.

Колонки называются по полям (`bore_diameter_mm`) и dotted-путям фаз
(`work.speed_mm_s`). Короткие имена (`work.speed`) и имена старой формы
(`cylinderBore`, `fastDown.speed`, ...) тоже принимаются.
Отсутствующие колонки оставляют значения по умолчанию.
"""

from __future__ import annotations

from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping
import logging
import math

import pandas as pd

from presssim.core.errors import ParameterValidationError
from presssim.core.types import PHASE_ORDER
from .models import MachineParameters, PhaseSpec

logger = logging.getLogger(__name__)


_PHASE_FIELD_ALIASES: Dict[str, str] = {
    "speed": "speed_mm_s",
    "stroke": "stroke_mm",
    "time": "time_s",
}

_LEGACY_PHASES: Dict[str, str] = {
    "fastDown": "extend_fast",
    "workingCycle": "work",
    "holding": "hold",
    "fastUp": "retract_fast",
    "extendFast": "extend_fast",
    "retractFast": "retract_fast",
}

_LEGACY_FIELDS: Dict[str, str] = {
    "cylinderBore": "bore_diameter_mm",
    "cylinderBoreDiameter": "bore_diameter_mm",
    "rodDiameter": "rod_diameter_mm",
    "deadLoad": "dead_load_t",
    "deadLoadMass": "dead_load_t",
    "holdingLoad": "holding_load_t",
    "holdingLoadMass": "holding_load_t",
    "motorRpm": "motor_speed_rpm",
    "motorSpeed": "motor_speed_rpm",
    "pumpEfficiency": "pump_efficiency",
    "systemLosses": "system_losses_bar",
}


def _canonical_key(column: str) -> str:
    key = str(column).strip()
    if "." in key:
        phase, _, field_name = key.partition(".")
        phase = _LEGACY_PHASES.get(phase, phase)
        field_name = _PHASE_FIELD_ALIASES.get(field_name, field_name)
        return f"{phase}.{field_name}"
    return _LEGACY_FIELDS.get(key, key)


def _to_float(key: str, value: Any) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise ParameterValidationError(f"{key} must be numeric, got {value!r}") from None
    if not math.isfinite(out):
        raise ParameterValidationError(f"{key} must be a finite number, got {value!r}")
    return out


def parameters_from_mapping(row: Mapping[str, Any], base: MachineParameters | None = None) -> MachineParameters:
    """Собрать MachineParameters из плоского словаря с dotted-ключами."""

    base = base or MachineParameters()
    scalar_names = {f.name for f in fields(MachineParameters)} - set(PHASE_ORDER)
    phase_field_names = {f.name for f in fields(PhaseSpec)}

    scalars: Dict[str, float] = {}
    phase_changes: Dict[str, Dict[str, float]] = {}

    for column, value in row.items():
        if value is None or (isinstance(value, float) and math.isnan(value)):
            continue
        key = _canonical_key(column)
        if "." in key:
            phase, _, field_name = key.partition(".")
            if phase in PHASE_ORDER and field_name in phase_field_names:
                phase_changes.setdefault(phase, {})[field_name] = _to_float(key, value)
                continue
        elif key in scalar_names:
            scalars[key] = _to_float(key, value)
            continue
        logger.debug("Ignoring unknown parameter column %r", column)

    params = replace(base, **scalars)
    for phase, changes in phase_changes.items():
        params = params.with_phase(phase, **changes)
    return params


def load_parameters_csv(path: str | Path, base: MachineParameters | None = None) -> MachineParameters:
    path = Path(path)
    try:
        df = pd.read_csv(path, sep=None, engine="python", skip_blank_lines=True)
    except pd.errors.EmptyDataError as e:
        raise ParameterValidationError(f"{path}: parameter file is empty") from e
    if df.empty:
        raise ParameterValidationError(f"{path}: parameter file is empty")
    if len(df) > 1:
        logger.warning("%s: %d parameter rows found, using the first one", path, len(df))
    row = df.iloc[0].to_dict()
    return parameters_from_mapping(row, base=base)


def save_parameters_csv(params: MachineParameters, path: str | Path) -> Path:
    path = Path(path)
    pd.DataFrame([params.to_dict()]).to_csv(path, index=False)
    return path
