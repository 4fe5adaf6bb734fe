"""presssim.core.units

Единицы измерения и множители для расчёта пресса.

Принцип: внутри расчёта SI (м, м², Н, м/с), на выходе "инженерные" единицы
(бар, л/мин, кВт, мм), которые потребители форматируют по имени поля.
"""

from __future__ import annotations

# Base units (conceptual SI multipliers)
METER: float = 1.0
KILOGRAM: float = 1.0
SECOND: float = 1.0

# Derived units
NEWTON: float = KILOGRAM * METER / (SECOND**2)
PASCAL: float = NEWTON / (METER**2)

# Convenience multipliers
BAR: float = 1e5 * PASCAL
MM: float = 1e-3 * METER
TONNE: float = 1000.0 * KILOGRAM

CM2_PER_M2: float = 1e4

# m³/s -> L/min
LPM_PER_M3_S: float = 60.0 * 1000.0

# bar * L/min -> kW
BAR_LPM_PER_KW: float = 600.0

W_PER_KW: float = 1000.0
SECONDS_PER_HOUR: float = 3600.0

# Useful constants
G: float = 9.81 * METER / (SECOND**2)
