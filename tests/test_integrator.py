#!/usr/bin/env python3
"""
Tests for the Integrator

These tests verify:
1. The semi-implicit update uses pre-step accelerations for both halves
2. The velocity-Verlet option recomputes accelerations after the drift
3. Force evaluation counts per scheme
4. Non-finite state is fatal
"""

import math

import numpy as np
import pytest

from orrery import (
    BodyRegistry,
    DegenerateStateError,
    IntegratorType,
    SemiImplicitIntegrator,
    VelocityVerletIntegrator,
    compute_accelerations,
    get_integrator,
    total_energy,
)


def make_two_body(dtype=np.float64):
    return BodyRegistry(
        ["Sun", "Probe"],
        [1.0, 1e-10],
        [[0.0, 0.0], [1.0, 0.0]],
        [[0.0, 0.0], [0.0, -2 * math.pi]],
        dtype=dtype,
    )


class TestSemiImplicitIntegrator:
    """Single-evaluation position-corrected Euler."""

    def test_single_step_update(self):
        registry = make_two_body()
        dt = 1e-3
        p0, v0 = registry.snapshot()
        a0 = compute_accelerations(registry)

        SemiImplicitIntegrator().step(registry, dt)

        np.testing.assert_allclose(registry.positions, p0 + v0 * dt + 0.5 * a0 * dt * dt, rtol=1e-14)
        np.testing.assert_allclose(registry.velocities, v0 + a0 * dt, rtol=1e-14)

    def test_returns_pre_step_accelerations(self, solar_registry):
        expected = compute_accelerations(solar_registry)
        used = SemiImplicitIntegrator().step(solar_registry, 1e-5)
        np.testing.assert_array_equal(used, expected)

    def test_one_evaluation_per_tick(self):
        registry = make_two_body()
        integrator = SemiImplicitIntegrator()
        for _ in range(5):
            integrator.step(registry, 1e-4)
        assert integrator.evaluations == 5

    def test_float32_state_stays_float32(self):
        registry = make_two_body(np.float32)
        SemiImplicitIntegrator().step(registry, 1e-5)
        assert registry.positions.dtype == np.float32
        assert registry.velocities.dtype == np.float32


class TestVelocityVerletIntegrator:
    """Two-evaluation velocity-Verlet."""

    def test_single_step_update(self):
        registry = make_two_body()
        dt = 1e-3
        p0, v0 = registry.snapshot()
        a0 = compute_accelerations(registry)

        VelocityVerletIntegrator().step(registry, dt)

        p1 = p0 + v0 * dt + 0.5 * a0 * dt * dt
        np.testing.assert_allclose(registry.positions, p1, rtol=1e-14)
        a1 = compute_accelerations(registry)
        np.testing.assert_allclose(registry.velocities, v0 + 0.5 * (a0 + a1) * dt, rtol=1e-14)

    def test_reuses_end_of_step_accelerations(self):
        registry = make_two_body()
        integrator = VelocityVerletIntegrator()
        for _ in range(5):
            integrator.step(registry, 1e-4)
        assert integrator.evaluations == 6

    def test_recomputes_after_external_change(self):
        registry = make_two_body()
        integrator = VelocityVerletIntegrator()
        integrator.step(registry, 1e-4)
        registry.positions[1] = [2.0, 0.0]
        integrator.step(registry, 1e-4)
        assert integrator.evaluations == 4

    def test_conserves_energy_better_than_semi_implicit(self):
        """Over one coarse orbit velocity-Verlet drifts far less in energy."""
        drifts = {}
        for integrator in (SemiImplicitIntegrator(), VelocityVerletIntegrator()):
            registry = make_two_body()
            e0 = total_energy(registry)
            for _ in range(1000):
                integrator.step(registry, 1e-3)
            drifts[integrator.name] = abs(total_energy(registry) - e0) / abs(e0)

        assert drifts["velocity_verlet"] < drifts["semi_implicit"] / 10


class TestIntegratorFactory:

    def test_by_enum(self):
        assert isinstance(get_integrator(IntegratorType.SEMI_IMPLICIT), SemiImplicitIntegrator)
        assert isinstance(get_integrator(IntegratorType.VELOCITY_VERLET), VelocityVerletIntegrator)

    def test_by_name(self):
        integrator = get_integrator("velocity_verlet", gravitational_constant=1.0, min_separation=0.1)
        assert isinstance(integrator, VelocityVerletIntegrator)
        assert integrator.gravitational_constant == 1.0
        assert integrator.min_separation == 0.1

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            get_integrator("leapfrog")


def make_closing_pair():
    """Two light bodies 2 AU apart, approaching at 20 AU/yr."""
    return BodyRegistry(
        ["A", "B"],
        [1e-10, 1e-10],
        [[-1.0, 0.0], [1.0, 0.0]],
        [[10.0, 0.0], [-10.0, 0.0]],
    )


class TestDegenerateState:

    def test_non_finite_velocity_is_fatal(self):
        registry = make_two_body()
        registry.velocities[1, 0] = np.nan
        positions = registry.positions.copy()
        with pytest.raises(DegenerateStateError, match="Probe"):
            SemiImplicitIntegrator().step(registry, 1e-4)
        np.testing.assert_array_equal(registry.positions, positions)

    def test_verlet_collision_after_drift_leaves_state_untouched(self):
        """The second force pass fails; nothing of the tick is written back."""
        registry = make_closing_pair()
        positions, velocities = registry.snapshot()
        integrator = VelocityVerletIntegrator(min_separation=1.9)

        with pytest.raises(DegenerateStateError, match="collided"):
            integrator.step(registry, 0.01)

        assert integrator.evaluations == 2
        np.testing.assert_array_equal(registry.positions, positions)
        np.testing.assert_array_equal(registry.velocities, velocities)

    def test_verlet_recovers_after_failed_tick(self):
        registry = make_closing_pair()
        integrator = VelocityVerletIntegrator(min_separation=1.9)
        with pytest.raises(DegenerateStateError):
            integrator.step(registry, 0.01)

        integrator.min_separation = 0.0
        integrator.step(registry, 0.01)
        np.testing.assert_allclose(registry.positions[:, 0], [-0.9, 0.9], rtol=1e-6)

    def test_collision_is_fatal(self):
        registry = make_two_body()
        with pytest.raises(DegenerateStateError, match="collided"):
            SemiImplicitIntegrator(min_separation=2.0).step(registry, 1e-4)
