import math
from dataclasses import replace

import pytest

from presssim.config.models import MachineParameters, PhaseSpec, SimulationConfig
from presssim.core.errors import ParameterValidationError
from presssim.simulator import (
    CycleCursor,
    DutyCycleSimulator,
    advance,
    curve_factor,
    local_times,
    run_simulation,
)


def _phase_times(run, label: str):
    return [s.time_s for s in run.samples if s.phase == label]


class TestLocalTimes:
    def test_exact_multiple(self) -> None:
        assert local_times(1.0, 0.25) == [0.0, 0.25, 0.5, 0.75, 1.0]

    def test_points_past_duration_dropped(self) -> None:
        assert local_times(1.1, 0.25) == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])

    def test_rounding_noise_keeps_boundary(self) -> None:
        ts = local_times(0.3, 0.1)
        assert len(ts) == 4
        assert ts[-1] == pytest.approx(0.3)

    def test_next_phase_starts_at_declared_end(self, reference_params: MachineParameters) -> None:
        params = reference_params.with_phase("extend_fast", time_s=1.1)
        run = run_simulation(params)
        assert _phase_times(run, "Extend fast") == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])
        assert _phase_times(run, "Work")[0] == pytest.approx(1.1)

    def test_zero_duration(self) -> None:
        assert local_times(0.0, 0.25) == [0.0]


class TestCurveFactor:
    @pytest.mark.parametrize("p,expected", [(0.0, 0.0), (0.5, 1.0), (1.0, 0.0), (0.25, 0.75)])
    def test_parabola(self, p: float, expected: float) -> None:
        assert curve_factor(p) == pytest.approx(expected)


class TestAdvance:
    def test_extending_phase_adds_declared_stroke(self) -> None:
        c = advance(CycleCursor(1.0, 100.0), "work", PhaseSpec(10.0, 50.0, 5.0))
        assert c == CycleCursor(time_s=6.0, position_mm=150.0)

    def test_retract_clamps_at_zero(self) -> None:
        c = advance(CycleCursor(0.0, 100.0), "retract_fast", PhaseSpec(200.0, 250.0, 1.25))
        assert c.position_mm == 0.0
        assert c.time_s == pytest.approx(1.25)


class TestReferenceRun:
    def test_sample_count_and_time_axis(self, reference_params: MachineParameters) -> None:
        run = run_simulation(reference_params)
        # 5 + 21 + 9 + 6 точек при шаге 0.25 с
        assert len(run) == 41
        times = [s.time_s for s in run.samples]
        assert times[0] == 0.0
        assert all(b >= a for a, b in zip(times, times[1:]))
        assert times[-1] == pytest.approx(9.25)

    def test_phase_labels_in_order(self, reference_params: MachineParameters) -> None:
        run = run_simulation(reference_params)
        labels = []
        for s in run.samples:
            if not labels or labels[-1] != s.phase:
                labels.append(s.phase)
        assert labels == ["Extend fast", "Work", "Hold", "Retract fast"]

    def test_positions_follow_phases(self, reference_params: MachineParameters) -> None:
        run = run_simulation(reference_params)
        ef = [s.position_mm for s in run.samples if s.phase == "Extend fast"]
        assert ef == pytest.approx([0.0, 50.0, 100.0, 150.0, 200.0])
        rf = [s.position_mm for s in run.samples if s.phase == "Retract fast"]
        assert rf[0] == pytest.approx(250.0)
        assert rf[-1] == pytest.approx(0.0)
        assert all(s.position_mm >= 0.0 for s in run.samples)

    def test_results_summary(self, reference_params: MachineParameters) -> None:
        res = run_simulation(reference_params).results
        assert res.cylinder_areas_cm2["bore"] == pytest.approx(44.18, abs=0.01)
        assert res.cylinder_areas_cm2["rod"] == pytest.approx(15.90, abs=0.01)
        assert res.cylinder_areas_cm2["annular"] == pytest.approx(28.27, abs=0.01)

        p = res.required_pressures_bar
        assert res.relief_valve_setting_bar == pytest.approx(1.2 * max(p.values()))
        assert res.pump_displacement_cc_rev == pytest.approx(res.pump_flow_rate_lpm * 1000.0 / 1800.0)

        values = [
            res.pump_flow_rate_lpm,
            res.pump_displacement_cc_rev,
            res.max_motor_power_kw,
            res.relief_valve_setting_bar,
            res.energy_consumption.total_kwh,
        ]
        assert all(math.isfinite(v) and v > 0.0 for v in values)

    def test_pump_flow_is_max_of_moving_phases(self, reference_params: MachineParameters) -> None:
        from presssim.physics.phases import compute_phases

        m = compute_phases(reference_params)
        res = run_simulation(reference_params).results
        assert res.pump_flow_rate_lpm == max(m["extend_fast"].flow_lpm, m["work"].flow_lpm, m["retract_fast"].flow_lpm)

    def test_energy_per_phase(self, reference_params: MachineParameters) -> None:
        from presssim.physics.phases import compute_phases

        m = compute_phases(reference_params)
        energy = run_simulation(reference_params).results.energy_consumption
        assert energy.per_phase_kwh["work"] == pytest.approx(m["work"].motor_power_kw * 5.0 / 3600.0)
        assert energy.per_phase_kwh["hold"] == 0.0
        assert energy.total_kwh == pytest.approx(sum(energy.per_phase_kwh.values()))

    def test_idempotent(self, reference_params: MachineParameters) -> None:
        a = run_simulation(reference_params)
        b = run_simulation(reference_params)
        assert a.samples == b.samples
        assert a.results == b.results


class TestMicroVariation:
    def test_flow_and_pressure_dip_mid_phase(self, reference_params: MachineParameters) -> None:
        from presssim.physics.phases import compute_phases

        ef = compute_phases(reference_params)["extend_fast"]
        samples = [s for s in run_simulation(reference_params).samples if s.phase == "Extend fast"]
        # progress 0 и 1 — без вариации, 0.5 — минус 2%
        assert samples[0].flow_lpm == pytest.approx(ef.flow_lpm)
        assert samples[-1].pressure_bar == pytest.approx(ef.required_pressure_bar)
        assert samples[2].flow_lpm == pytest.approx(ef.flow_lpm * 0.98)
        assert samples[2].pressure_bar == pytest.approx(ef.required_pressure_bar * 0.98)

    def test_powers_constant_inside_phase(self, reference_params: MachineParameters) -> None:
        samples = [s for s in run_simulation(reference_params).samples if s.phase == "Work"]
        assert len({s.motor_power_kw for s in samples}) == 1
        assert len({s.actuator_power_kw for s in samples}) == 1

    def test_pump_input_power_recomputed_per_sample(self, reference_params: MachineParameters) -> None:
        for s in run_simulation(reference_params).samples:
            assert s.pump_input_power_kw == pytest.approx(s.pressure_bar * s.flow_lpm / 600.0)

    def test_variation_can_be_disabled(self, reference_params: MachineParameters) -> None:
        run = DutyCycleSimulator(SimulationConfig(variation_fraction=0.0)).run(reference_params)
        work = [s.flow_lpm for s in run.samples if s.phase == "Work"]
        assert len(set(work)) == 1

    def test_simulated_samples_have_no_log_fields(self, reference_params: MachineParameters) -> None:
        s = run_simulation(reference_params).samples[0]
        assert s.velocity_m_s is None
        assert s.pressure_cap_bar is None
        assert s.cap_pressure_bar == s.pressure_bar


class TestBoundaries:
    def test_zero_duration_phase_emits_single_sample(self, reference_params: MachineParameters) -> None:
        params = reference_params.with_phase("hold", time_s=0.0)
        run = run_simulation(params)
        hold = _phase_times(run, "Hold")
        assert hold == [pytest.approx(6.0)]
        # время не сдвигается: обратный ход начинается там же
        assert _phase_times(run, "Retract fast")[0] == pytest.approx(6.0)

    def test_stroke_and_integrated_position_diverge(self, reference_params: MachineParameters) -> None:
        # 10 мм/с * 5 с = 50 мм внутри фазы, но объявлено 80 мм
        params = reference_params.with_phase("work", stroke_mm=80.0)
        run = run_simulation(params)
        work = [s.position_mm for s in run.samples if s.phase == "Work"]
        hold = [s.position_mm for s in run.samples if s.phase == "Hold"]
        assert work[-1] == pytest.approx(250.0)
        assert hold[0] == pytest.approx(280.0)

    def test_custom_time_step(self, reference_params: MachineParameters) -> None:
        run = DutyCycleSimulator(SimulationConfig(time_step_s=0.5)).run(reference_params)
        assert len(_phase_times(run, "Extend fast")) == 3

    def test_run_to_frame(self, reference_params: MachineParameters) -> None:
        df = run_simulation(reference_params).to_frame()
        assert len(df) == 41
        assert df["velocity_m_s"].isna().all()
        assert df["time_s"].iloc[-1] == pytest.approx(9.25)


class TestValidation:
    def test_unset_losses_run_with_ten_bar(self, reference_params: MachineParameters) -> None:
        run = run_simulation(replace(reference_params, system_losses_bar=None))
        ref = run_simulation(replace(reference_params, system_losses_bar=10.0))
        assert run.results.required_pressures_bar == pytest.approx(ref.results.required_pressures_bar)
        assert len(run) == len(ref)

    @pytest.mark.parametrize(
        "changes",
        [
            {"motor_speed_rpm": 0.0},
            {"motor_speed_rpm": -100.0},
            {"pump_efficiency": 1.5},
            {"pump_efficiency": 0.0},
            {"bore_diameter_mm": 0.0},
            {"dead_load_t": math.nan},
        ],
    )
    def test_invalid_parameters_rejected(self, reference_params: MachineParameters, changes) -> None:
        params = replace(reference_params, **changes)
        sim = DutyCycleSimulator()
        with pytest.raises(ParameterValidationError):
            sim.run(params)

    def test_negative_phase_time_rejected(self, reference_params: MachineParameters) -> None:
        with pytest.raises(ParameterValidationError):
            run_simulation(reference_params.with_phase("work", time_s=-1.0))

    def test_invalid_time_step(self) -> None:
        with pytest.raises(ParameterValidationError):
            SimulationConfig(time_step_s=0.0)
