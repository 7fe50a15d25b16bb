#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery - Gravitational Solar System Simulator

This package advances a star, its planets and their moons through time
under mutual Newtonian gravity, in normalised units (AU, solar masses,
years, G = 4π²). It provides the body registry, the orbital initializer,
the force accumulator and the integrator, and runs independently of any
visualization.

Example usage:

    from orrery import Simulation, SimulationConfig

    sim = Simulation(SimulationConfig(system="solar_system", dt=1e-5))
    sim.initialize()
    state = sim.step()
    earth = state.position_of("Earth")
"""

from .constants import (
    G,
    SOLAR_MASS,
    DEFAULT_DT,
    DEFAULT_PRECISION,
    PRECISIONS,
)

from .errors import (
    OrrerySimError,
    ConfigurationError,
    DegenerateStateError,
)

from .body import (
    Body,
    BodySpec,
)

from .registry import BodyRegistry

from .initializer import (
    circular_orbit_speed,
    orbital_period,
    planet_initial_state,
    moon_initial_state,
)

from .forces import (
    compute_accelerations,
    gravitational_accelerations,
    pair_acceleration,
    pairwise_separations,
)

from .integrator import (
    Integrator,
    IntegratorType,
    SemiImplicitIntegrator,
    VelocityVerletIntegrator,
    get_integrator,
)

from .diagnostics import (
    total_momentum,
    angular_momentum,
    kinetic_energy,
    potential_energy,
    total_energy,
    center_of_mass,
)

from .presets import (
    create_solar_system,
    create_inner_planets,
    create_earth_moon,
    get_system,
    list_systems,
    load_system,
)

from .simulation import (
    Simulation,
    SimulationConfig,
    SimulationState,
    create_simulation,
)


__all__ = [
    # Constants
    "G",
    "SOLAR_MASS",
    "DEFAULT_DT",
    "DEFAULT_PRECISION",
    "PRECISIONS",

    # Errors
    "OrrerySimError",
    "ConfigurationError",
    "DegenerateStateError",

    # Bodies
    "Body",
    "BodySpec",
    "BodyRegistry",

    # Orbital initializer
    "circular_orbit_speed",
    "orbital_period",
    "planet_initial_state",
    "moon_initial_state",

    # Forces
    "compute_accelerations",
    "gravitational_accelerations",
    "pair_acceleration",
    "pairwise_separations",

    # Integrators
    "Integrator",
    "IntegratorType",
    "SemiImplicitIntegrator",
    "VelocityVerletIntegrator",
    "get_integrator",

    # Diagnostics
    "total_momentum",
    "angular_momentum",
    "kinetic_energy",
    "potential_energy",
    "total_energy",
    "center_of_mass",

    # Presets
    "create_solar_system",
    "create_inner_planets",
    "create_earth_moon",
    "get_system",
    "list_systems",
    "load_system",

    # Simulation
    "Simulation",
    "SimulationConfig",
    "SimulationState",
    "create_simulation",
]

__version__ = "1.0.0"
