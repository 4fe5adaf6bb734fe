"""presssim package.

Важно: пакет не должен иметь побочных эффектов при импорте.
Поэтому здесь нет eager-import'ов (симулятор, реконструкция, HDF5).

Импортируй нужное напрямую:
- from presssim.simulator import run_simulation
- from presssim.reconstruction import reconstruct_from_rows
- from presssim.config import MachineParameters
"""

from __future__ import annotations

__all__: list[str] = []
