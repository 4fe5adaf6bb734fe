#!/usr/bin/env python
"""
Run Hydraulic Press Calculator: duty-cycle simulation, log reconstruction, comparison

Usage:
    python scripts/run_simulator.py simulate [--params params.csv] [--h5 out/cycle.h5]
    python scripts/run_simulator.py reconstruct data/log.csv [--bore 75 --rod 45]
    python scripts/run_simulator.py compare data/log1.csv data/log2.csv
    python -m presssim.run_cycle ...  # Alternative (if installed as package)
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from presssim.run_cycle import main


if __name__ == "__main__":
    sys.exit(main())
