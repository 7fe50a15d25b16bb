#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides common fixtures, markers, and utilities for testing the
gravitational simulator.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# SYSTEM FIXTURES
# =============================================================================

@pytest.fixture
def two_body_specs():
    """A 1 SM star with a light planet at 1 AU."""
    from orrery import BodySpec

    return [
        BodySpec("Sun", 1.0, 0.0),
        BodySpec("Probe", 1e-10, 1.0),
    ]


@pytest.fixture
def earth_moon_registry():
    """Registry for the Sun-Earth-Moon preset."""
    from orrery import BodyRegistry, create_earth_moon

    return BodyRegistry.from_specs(create_earth_moon())


@pytest.fixture
def solar_registry():
    """Registry for the full solar system preset."""
    from orrery import BodyRegistry, create_solar_system

    return BodyRegistry.from_specs(create_solar_system())


@pytest.fixture
def solar_simulation():
    """Initialized solar system simulation with default settings."""
    from orrery import Simulation, SimulationConfig

    sim = Simulation(SimulationConfig(system="solar_system"))
    sim.initialize()
    return sim


@pytest.fixture
def random_system():
    """Seeded random positions and masses with no coincident bodies."""
    rng = np.random.default_rng(42)
    positions = rng.uniform(-5.0, 5.0, size=(8, 2))
    masses = rng.uniform(1e-6, 1e-3, size=8)
    masses[0] = 1.0
    return positions, masses
