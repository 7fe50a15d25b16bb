#!/usr/bin/env python3
"""
Tests for the Simulation

These tests verify:
1. Lifecycle: initialize, step, run, reset
2. Configuration errors are raised before the first tick
3. Orbital behaviour of the semi-implicit default
4. Conservation of momentum over long runs
5. Runtime degeneracy aborts the run
"""

import logging
import math

import numpy as np
import pytest

from orrery import (
    DEFAULT_DT,
    ConfigurationError,
    DegenerateStateError,
    IntegratorType,
    Simulation,
    SimulationConfig,
    create_simulation,
)


class TestSimulationLifecycle:
    """Basic API behaviour."""

    def test_step_before_initialize(self):
        sim = Simulation()
        with pytest.raises(RuntimeError):
            sim.step()

    @pytest.mark.parametrize("getter", [
        "get_momentum_drift",
        "get_energy_drift",
        "get_angular_momentum_drift",
    ])
    def test_drift_before_initialize(self, getter):
        sim = Simulation()
        with pytest.raises(RuntimeError, match="not initialized"):
            getattr(sim, getter)()

    def test_initial_state(self):
        sim = create_simulation("earth_moon")
        sim.initialize()

        state = sim.state
        assert state.names == ["Sun", "Earth", "Moon"]
        assert state.step_count == 0
        assert state.time == 0.0
        np.testing.assert_allclose(state.position_of("Earth"), [1.0, 0.0])
        np.testing.assert_allclose(state.position_of("Moon"), [1.00257, 0.0])
        np.testing.assert_allclose(state.velocity_of("Earth"), [0.0, -2 * math.pi])

    def test_time_advances_by_dt(self):
        sim = create_simulation("inner_planets", dt=1e-4)
        sim.initialize()
        for _ in range(3):
            state = sim.step()
        assert state.step_count == 3
        assert state.time == pytest.approx(3e-4)
        assert sim.simulation_time == pytest.approx(3e-4)

    def test_run_returns_independent_states(self):
        sim = create_simulation("earth_moon")
        states = sim.run(5)

        assert len(states) == 5
        assert [s.step_count for s in states] == [1, 2, 3, 4, 5]
        assert not np.array_equal(states[0].positions, states[-1].positions)

    def test_run_rejects_negative_ticks(self):
        sim = create_simulation("earth_moon")
        with pytest.raises(ValueError):
            sim.run(-1)

    def test_advance_auto_initializes(self):
        sim = create_simulation("earth_moon")
        state = sim.advance(4)
        assert state.step_count == 4

    def test_reset(self, solar_simulation):
        initial = solar_simulation.state.positions.copy()
        solar_simulation.advance(10)
        solar_simulation.reset()

        assert solar_simulation.state.step_count == 0
        assert solar_simulation.state.time == 0.0
        np.testing.assert_array_equal(solar_simulation.state.positions, initial)

    def test_set_custom_system(self, solar_simulation, two_body_specs):
        solar_simulation.set_custom_system(two_body_specs)

        assert solar_simulation.num_bodies == 2
        assert solar_simulation.get_summary()["system"] == "custom"
        assert solar_simulation.get_body("Probe") is not None

    def test_get_body(self, solar_simulation):
        earth = solar_simulation.get_body("Earth")
        assert earth.name == "Earth"
        assert solar_simulation.get_body("Pluto") is None

    def test_summary(self):
        sim = create_simulation("earth_moon", integrator="velocity_verlet")
        assert sim.get_summary()["initialized"] is False

        sim.advance(3)
        summary = sim.get_summary()
        assert summary["system"] == "earth_moon"
        assert summary["num_bodies"] == 3
        assert summary["integrator"] == "velocity_verlet"
        assert summary["step_count"] == 3
        assert summary["force_evaluations"] == 4
        assert "energy_drift" in summary
        assert "momentum_drift" in summary

    def test_drift_logged_at_check_interval(self, caplog):
        caplog.set_level(logging.INFO, logger="orrery")
        sim = create_simulation("earth_moon", check_interval=5)
        sim.advance(10)

        drift_lines = [r for r in caplog.records if "energy drift" in r.getMessage()]
        assert len(drift_lines) == 2


class TestSimulationConfiguration:
    """Setup errors are reported before stepping."""

    @pytest.mark.parametrize("dt", [0.0, -1e-5])
    def test_non_positive_dt(self, dt):
        sim = Simulation(SimulationConfig(system="earth_moon", dt=dt))
        with pytest.raises(ConfigurationError):
            sim.initialize()

    def test_unknown_precision(self):
        sim = Simulation(SimulationConfig(system="earth_moon", precision="float16"))
        with pytest.raises(ConfigurationError):
            sim.initialize()

    def test_negative_min_separation(self):
        sim = Simulation(SimulationConfig(system="earth_moon", min_separation=-1.0))
        with pytest.raises(ConfigurationError):
            sim.initialize()

    def test_unknown_system(self):
        sim = Simulation(SimulationConfig(system="andromeda"))
        with pytest.raises(ConfigurationError):
            sim.initialize()

    def test_create_simulation_errors(self):
        with pytest.raises(ValueError):
            create_simulation("andromeda")
        with pytest.raises(ValueError):
            create_simulation("earth_moon", timestep=1e-4)

    def test_create_simulation_integrator_name(self):
        sim = create_simulation("earth_moon", integrator="velocity_verlet")
        assert sim.config.integrator is IntegratorType.VELOCITY_VERLET

    def test_config_accepts_integrator_name(self):
        config = SimulationConfig(system="earth_moon", integrator="velocity_verlet")
        assert config.integrator is IntegratorType.VELOCITY_VERLET

        sim = Simulation(config)
        sim.advance(2)
        assert sim.get_summary()["integrator"] == "velocity_verlet"
        assert "velocity_verlet" in repr(sim)

    def test_integrator_name_set_after_construction(self):
        sim = Simulation(SimulationConfig(system="earth_moon"))
        sim.config.integrator = "velocity_verlet"
        assert sim.get_summary()["integrator"] == "velocity_verlet"

        sim.initialize()
        assert sim.config.integrator is IntegratorType.VELOCITY_VERLET
        assert sim.integrator.name == "velocity_verlet"

    def test_unknown_integrator_name(self):
        with pytest.raises(ConfigurationError):
            SimulationConfig(integrator="leapfrog")
        with pytest.raises(ValueError):
            create_simulation("earth_moon", integrator="leapfrog")

    def test_float32_precision(self):
        sim = create_simulation("earth_moon", precision="float32")
        state = sim.advance(2)
        assert state.positions.dtype == np.float32
        assert state.velocities.dtype == np.float32


class TestOrbitalBehaviour:

    @pytest.mark.slow
    def test_two_body_orbit_closes_after_one_year(self, two_body_specs):
        sim = Simulation(SimulationConfig(bodies=two_body_specs, dt=DEFAULT_DT))
        sim.initialize()

        for _ in range(100000):
            state = sim.step()
            radius = np.linalg.norm(state.position_of("Probe"))
            assert radius == pytest.approx(1.0, rel=1e-2)

        assert state.time == pytest.approx(1.0)
        np.testing.assert_allclose(state.position_of("Probe"), [1.0, 0.0], atol=1e-2)

    def test_quarter_orbit_is_clockwise(self, two_body_specs):
        sim = Simulation(SimulationConfig(bodies=two_body_specs, dt=DEFAULT_DT))
        state = sim.advance(25000)
        x, y = state.position_of("Probe")
        assert abs(x) < 1e-2
        assert y == pytest.approx(-1.0, abs=1e-2)

    def test_deterministic(self):
        first = create_simulation("solar_system").advance(100).positions.copy()
        second = create_simulation("solar_system").advance(100).positions.copy()
        np.testing.assert_array_equal(first, second)

    @pytest.mark.slow
    def test_moon_stays_bound(self):
        sim = create_simulation("earth_moon")
        sim.initialize()
        for _ in range(10000):
            state = sim.step()
            offset = state.position_of("Moon") - state.position_of("Earth")
            assert np.linalg.norm(offset) == pytest.approx(0.00257, rel=0.1)

    @pytest.mark.slow
    def test_momentum_conserved(self, solar_simulation):
        solar_simulation.advance(5000)
        halfway = solar_simulation.get_momentum_drift()
        solar_simulation.advance(5000)
        final = solar_simulation.get_momentum_drift()

        assert final < 1e-8
        assert final <= 3 * halfway + 1e-12

    def test_verlet_energy_drift_smaller(self, two_body_specs):
        drifts = {}
        for integrator in IntegratorType:
            sim = Simulation(SimulationConfig(bodies=two_body_specs, dt=1e-3, integrator=integrator))
            sim.advance(1000)
            drifts[integrator] = sim.get_energy_drift()

        assert drifts[IntegratorType.VELOCITY_VERLET] < drifts[IntegratorType.SEMI_IMPLICIT]


class TestDegenerateRuns:

    def test_min_separation_aborts_first_tick(self):
        sim = create_simulation("earth_moon", min_separation=0.003)
        sim.initialize()

        with pytest.raises(DegenerateStateError) as exc:
            sim.step()

        assert exc.value.step_count == 0
        assert "Earth" in str(exc.value) and "Moon" in str(exc.value)
        assert sim.state.step_count == 0

    def test_failed_verlet_tick_keeps_state_consistent(self):
        sim = create_simulation("earth_moon", integrator="velocity_verlet", min_separation=0.00256)
        sim.initialize()
        earth = sim.registry["Earth"]
        sim.registry["Moon"].velocity = earth.velocity + np.array([-2.0, 0.0])
        before = sim.registry.positions.copy()

        with pytest.raises(DegenerateStateError):
            sim.step()

        np.testing.assert_array_equal(sim.registry.positions, before)
        np.testing.assert_array_equal(sim.state.positions, sim.registry.positions)
        assert sim.state.step_count == 0

    def test_abort_is_logged(self, caplog):
        caplog.set_level(logging.ERROR, logger="orrery")
        sim = create_simulation("earth_moon", min_separation=0.003)
        sim.initialize()

        with pytest.raises(DegenerateStateError):
            sim.step()

        assert any("aborted" in r.getMessage() for r in caplog.records)
