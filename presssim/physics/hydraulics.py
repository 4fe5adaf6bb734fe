"""Гидравлические примитивы первого порядка (установившийся режим).

Чистые функции без состояния. Ошибок не бросают: площадь >= 0 и КПД > 0
гарантирует вызывающий код (см. MachineParameters.validate()).

Единицы:
- Диаметр: мм, площадь: м²
- Сила: Н, давление: бар
- Скорость: м/с, расход: л/мин
- Мощность: кВт
"""

from __future__ import annotations

import math

from presssim.core.units import BAR, BAR_LPM_PER_KW, G, LPM_PER_M3_S, MM, TONNE, W_PER_KW


def area_m2(diameter_mm: float) -> float:
    d = float(diameter_mm) * MM
    return math.pi * d * d / 4.0


def force_from_tonnes(mass_t: float) -> float:
    return float(mass_t) * TONNE * G


def pressure_bar(force_n: float, area_m2: float) -> float:
    """Давление (бар), необходимое для силы `force_n` на площади `area_m2`.

    При нулевой площади деление не выполняется: возвращается inf (или nan для
    нулевой силы). Вырожденная геометрия проходит дальше как есть.
    """

    a = float(area_m2)
    f = float(force_n)
    if a == 0.0:
        if f == 0.0:
            return math.nan
        return math.copysign(math.inf, f)
    return f / (a * BAR)


def flow_lpm(area_m2: float, velocity_m_s: float) -> float:
    return float(area_m2) * float(velocity_m_s) * LPM_PER_M3_S


def pump_power_kw(pressure_bar: float, flow_lpm: float) -> float:
    return float(pressure_bar) * float(flow_lpm) / BAR_LPM_PER_KW


def motor_power_kw(pump_power_kw: float, efficiency: float) -> float:
    return float(pump_power_kw) / float(efficiency)


def actuator_power_kw(force_n: float, velocity_m_s: float) -> float:
    return float(force_n) * float(velocity_m_s) / W_PER_KW
