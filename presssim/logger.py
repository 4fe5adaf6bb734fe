from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence
import json
import logging

import h5py
import numpy as np

from presssim.core.types import SimulationSample
from presssim.simulator import ResultsSummary
from presssim.timeline import SERIES_UNITS, samples_to_frame

logger = logging.getLogger(__name__)


class H5Logger:
    """Запись временных рядов в HDF5.

    Формат: /runs/<name>/<column> — один gzip-датасет на числовую колонку,
    `phase` как строки переменной длины; единицы в attrs датасетов,
    сводка результатов (если есть) в attrs группы как JSON.
    """

    def __init__(self, out_path: str | Path, mode: str = "w"):
        self.h5_path = Path(out_path)
        self.h5_path.parent.mkdir(parents=True, exist_ok=True)

        self.h5 = h5py.File(self.h5_path, mode)
        self.grp = self.h5.require_group("runs")

    def __enter__(self) -> "H5Logger":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def log_run(
        self,
        name: str,
        samples: Sequence[SimulationSample],
        results: Optional[ResultsSummary] = None,
        source: str = "simulation",
    ) -> h5py.Group:
        g = self.grp.create_group(name)
        df = samples_to_frame(samples)

        for col in df.columns:
            if col == "phase":
                g.create_dataset(col, data=df[col].astype(str).to_numpy(dtype=object), dtype=h5py.string_dtype())
                continue
            arr = df[col].to_numpy(dtype=np.float64)
            if arr.size and np.isnan(arr).all():
                # у симулированных рядов нет скорости и давлений камер
                continue
            ds = g.create_dataset(col, data=arr, compression="gzip", compression_opts=5)
            ds.attrs["unit"] = SERIES_UNITS.get(col, "")

        g.attrs["source"] = source
        g.attrs["n_samples"] = len(df)
        if results is not None:
            g.attrs["results_json"] = json.dumps(results.to_dict(), ensure_ascii=False)

        self.h5.flush()
        logger.info("%s: wrote run %r (%d samples)", self.h5_path, name, len(df))
        return g

    def close(self):
        self.h5.close()
