"""Командная строка: расчёт цикла, реконструкция лога, сравнение двух логов.

Usage:
    python -m presssim.run_cycle simulate [--params params.csv] [--dt 0.25] [--h5 out.h5]
    python -m presssim.run_cycle reconstruct log.csv [--bore 75 --rod 45] [--h5 out.h5]
    python -m presssim.run_cycle compare log1.csv log2.csv
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence
import argparse
import logging
import sys

from presssim.analytics import Scorecard, compare, diagnose
from presssim.config.loader import load_parameters_csv
from presssim.config.models import MachineParameters, ReconstructionConfig, SimulationConfig
from presssim.core.errors import PressSimError
from presssim.core.types import PHASE_LABELS, PHASE_ORDER, SimulationSample
from presssim.logger import H5Logger
from presssim.reconstruction import reconstruct_from_file
from presssim.simulator import ResultsSummary, run_simulation

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="presssim", description="Hydraulic press duty-cycle calculator")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Run the four-phase duty-cycle simulation")
    sim.add_argument("--params", type=str, default=None, help="Single-row CSV with machine parameters")
    sim.add_argument("--dt", type=float, default=0.25, help="Sub-step inside each phase, s (default: 0.25)")
    sim.add_argument("--variation", type=float, default=0.02, help="Cosmetic flow/pressure curve amplitude")
    sim.add_argument("--h5", type=str, default=None, help="Write the time series to this HDF5 file")

    rec = sub.add_parser("reconstruct", help="Rebuild flow/power series from a sensor log")
    rec.add_argument("log", type=str)
    _add_geometry_args(rec)
    rec.add_argument("--h5", type=str, default=None, help="Write the time series to this HDF5 file")

    cmp_ = sub.add_parser("compare", help="Compare two sensor logs")
    cmp_.add_argument("log1", type=str)
    cmp_.add_argument("log2", type=str)
    _add_geometry_args(cmp_)

    return ap


def _add_geometry_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--bore", type=float, default=None, help="Bore diameter, mm")
    p.add_argument("--rod", type=float, default=None, help="Rod diameter, mm")
    p.add_argument("--efficiency", type=float, default=0.9, help="Assumed pump efficiency (default: 0.9)")


def _geometry(args: argparse.Namespace) -> MachineParameters:
    params = MachineParameters()
    if args.bore is not None:
        params = replace(params, bore_diameter_mm=args.bore)
    if args.rod is not None:
        params = replace(params, rod_diameter_mm=args.rod)
    return params


def _print_results(results: ResultsSummary, n_samples: int) -> None:
    print(f"\n{'='*60}")
    print("Hydraulic press duty cycle")
    print(f"{'='*60}")
    print(f"Samples:              {n_samples}")
    print(f"Pump flow rate:       {results.pump_flow_rate_lpm:.2f} L/min")
    print(f"Pump displacement:    {results.pump_displacement_cc_rev:.2f} cc/rev")
    areas = results.cylinder_areas_cm2
    print(f"Areas bore/rod/ann.:  {areas['bore']:.2f} / {areas['rod']:.2f} / {areas['annular']:.2f} cm²")
    for name in PHASE_ORDER:
        print(f"  {PHASE_LABELS[name]:<14} {results.required_pressures_bar[name]:8.1f} bar"
              f"  {results.energy_consumption.per_phase_kwh[name]:.5f} kWh")
    print(f"Max motor power:      {results.max_motor_power_kw:.2f} kW")
    print(f"Relief valve setting: {results.relief_valve_setting_bar:.1f} bar")
    print(f"Energy per cycle:     {results.energy_consumption.total_kwh:.5f} kWh")


def _print_scorecard(title: str, sc: Scorecard) -> None:
    print(f"{title}: speed {sc.average_speed_mm_s:.2f} mm/s, "
          f"pressure std {sc.pressure_std_dev_bar:.2f} bar, "
          f"energy {sc.total_energy_kwh:.5f} kWh")


def _write_h5(path: str, name: str, samples: Sequence[SimulationSample], **kw) -> None:
    with H5Logger(path) as h5:
        h5.log_run(name, samples, **kw)
    print("Output:", path)


def cmd_simulate(args: argparse.Namespace) -> int:
    params = load_parameters_csv(args.params) if args.params else MachineParameters()
    cfg = SimulationConfig(time_step_s=args.dt, variation_fraction=args.variation)
    run = run_simulation(params, cfg)
    _print_results(run.results, len(run))
    if args.h5:
        _write_h5(args.h5, "simulation", run.samples, results=run.results)
    return 0


def cmd_reconstruct(args: argparse.Namespace) -> int:
    cfg = ReconstructionConfig(assumed_pump_efficiency=args.efficiency)
    samples = reconstruct_from_file(args.log, _geometry(args), cfg)
    print(f"{args.log}: {len(samples)} samples")
    for d in diagnose(samples):
        print(f"  [{d.severity}] {d.title}")
    if args.h5:
        _write_h5(args.h5, "log", samples, source=str(args.log))
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    params = _geometry(args)
    cfg = ReconstructionConfig(assumed_pump_efficiency=args.efficiency)
    first = reconstruct_from_file(args.log1, params, cfg)
    second = reconstruct_from_file(args.log2, params, cfg)
    res = compare(first, second)
    _print_scorecard(args.log1, res.first)
    _print_scorecard(args.log2, res.second)
    print(f"More energy-efficient: {res.more_efficient}")
    print(f"More productive:       {res.more_productive}")
    if res.unstable:
        print("Warning: significant pressure instability in at least one series")
    return 0


COMMANDS = {
    "simulate": cmd_simulate,
    "reconstruct": cmd_reconstruct,
    "compare": cmd_compare,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        return COMMANDS[args.command](args)
    except PressSimError as e:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
