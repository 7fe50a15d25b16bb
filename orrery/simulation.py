#!/usr/bin/env python3
"""
Simulation Module

Main simulation class for the gravitational solar system simulator.
Owns the body registry and the integrator, and advances them one fixed
time step per tick. Each tick runs one full force pass followed by one full
integrator pass; the resulting state is what a renderer consumes.

The simulation runs independently of any visualization for batch
processing, testing, or analysis.
"""

import logging
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

import numpy as np

from .body import Body, BodySpec
from .constants import G, DEFAULT_DT, DEFAULT_PRECISION, resolve_dtype
from .diagnostics import angular_momentum, relative_drift, total_energy, total_momentum
from .errors import ConfigurationError, DegenerateStateError
from .integrator import Integrator, IntegratorType, get_integrator
from .presets import get_system, list_systems
from .registry import BodyRegistry

logger = logging.getLogger(__name__)


def _as_integrator_type(value) -> IntegratorType:
    """Accept an IntegratorType or its string value."""
    if isinstance(value, IntegratorType):
        return value
    try:
        return IntegratorType(value)
    except ValueError:
        raise ConfigurationError(f"Unknown integrator: {value}") from None


@dataclass
class SimulationConfig:
    """
    Configuration for a simulation.

    Attributes
    ----------
    system : str
        Name of a built-in system, used when ``bodies`` is None.
    bodies : list of BodySpec, optional
        Explicit body specifications (overrides ``system``).
    dt : float
        Time step per tick (years). Not adapted to wall-clock time.
    gravitational_constant : float
        G in AU³/(SM·yr²).
    precision : str
        "float64" or "float32" for the state arrays.
    integrator : IntegratorType
        Time-integration scheme.
    min_separation : float
        Pair separations at or below this (AU) abort the run.
    check_interval : int
        Ticks between diagnostics log lines (0 disables them).
    """

    system: str = "solar_system"
    bodies: Optional[List[BodySpec]] = None
    dt: float = DEFAULT_DT
    gravitational_constant: float = G
    precision: str = DEFAULT_PRECISION
    integrator: IntegratorType = IntegratorType.SEMI_IMPLICIT
    min_separation: float = 0.0
    check_interval: int = 0

    def __post_init__(self):
        self.integrator = _as_integrator_type(self.integrator)


@dataclass
class SimulationState:
    """
    State handed to the renderer after every tick.

    Attributes
    ----------
    time : float
        Current simulation time (years).
    step_count : int
        Number of ticks executed.
    names : list
        Body names, in registry order.
    positions : np.ndarray
        (n, 2) heliocentric positions (AU), indexed like ``names``.
    velocities : np.ndarray
        (n, 2) heliocentric velocities (AU/yr), indexed like ``names``.
    """

    time: float = 0.0
    step_count: int = 0
    names: List[str] = field(default_factory=list)
    positions: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    velocities: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))

    def position_of(self, name: str) -> np.ndarray:
        """Position of the named body in this state."""
        return self.positions[self.names.index(name)]

    def velocity_of(self, name: str) -> np.ndarray:
        """Velocity of the named body in this state."""
        return self.velocities[self.names.index(name)]

    def copy(self) -> "SimulationState":
        """Independent copy, safe to keep across ticks."""
        return SimulationState(
            time=self.time,
            step_count=self.step_count,
            names=list(self.names),
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
        )


class Simulation:
    """
    Gravitational n-body simulation of a star, planets and moons.

    Parameters
    ----------
    config : SimulationConfig, optional
        Simulation configuration.

    Attributes
    ----------
    config : SimulationConfig
        Current configuration.
    registry : BodyRegistry
        Bodies and their state arrays (None until initialized).
    integrator : Integrator
        Time-integration scheme (None until initialized).
    state : SimulationState
        State after the last tick.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.registry: Optional[BodyRegistry] = None
        self.integrator: Optional[Integrator] = None
        self.state = SimulationState()

        self._initial_momentum: Optional[np.ndarray] = None
        self._initial_energy: Optional[float] = None
        self._initial_angular_momentum: Optional[float] = None
        self._initialized = False

    def initialize(self) -> None:
        """
        Build the body registry and seed circular orbits.

        Must be called before stepping the simulation.

        Raises
        ------
        ConfigurationError
            If the configured system is invalid.
        """
        config = self.config
        if config.dt <= 0:
            raise ConfigurationError(f"Time step must be positive, got {config.dt}")
        if config.min_separation < 0:
            raise ConfigurationError("Minimum separation must not be negative")
        config.integrator = _as_integrator_type(config.integrator)

        try:
            dtype = resolve_dtype(config.precision)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        specs = config.bodies
        if specs is None:
            try:
                specs = get_system(config.system)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e

        self.registry = BodyRegistry.from_specs(
            specs, config.gravitational_constant, dtype=dtype
        )
        self.integrator = get_integrator(
            config.integrator, config.gravitational_constant, config.min_separation
        )
        self.state = SimulationState(names=self.registry.names)
        self._update_state()

        self._initial_momentum = total_momentum(self.registry)
        self._initial_energy = total_energy(self.registry, config.gravitational_constant)
        self._initial_angular_momentum = angular_momentum(self.registry)
        self._initialized = True

        logger.info(
            f"Initialized {len(self.registry)} bodies, dt={config.dt:g} yr, "
            f"integrator={self.integrator.name}, precision={config.precision}"
        )

    def _update_state(self) -> None:
        """Copy registry arrays into the renderer-facing state."""
        positions, velocities = self.registry.snapshot()
        self.state.positions = positions
        self.state.velocities = velocities

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Simulation not initialized. Call initialize() first.")

    def step(self) -> SimulationState:
        """
        Advance simulation by one tick of ``config.dt`` years.

        Returns
        -------
        SimulationState
            Updated simulation state.

        Raises
        ------
        RuntimeError
            If simulation not initialized.
        DegenerateStateError
            If two bodies coincide or the state becomes non-finite.
        """
        self._require_initialized()

        try:
            self.integrator.step(self.registry, self.config.dt)
        except DegenerateStateError as e:
            e.step_count = self.state.step_count
            logger.error(f"Simulation aborted at tick {self.state.step_count}: {e}")
            raise

        self.state.step_count += 1
        self.state.time = self.state.step_count * self.config.dt
        self._update_state()

        interval = self.config.check_interval
        if interval and self.state.step_count % interval == 0:
            logger.info(
                f"tick {self.state.step_count}: t={self.state.time:.5f} yr, "
                f"energy drift={self.get_energy_drift():.3e}, "
                f"momentum drift={self.get_momentum_drift():.3e}"
            )

        return self.state

    def run(self, ticks: int) -> List[SimulationState]:
        """
        Run simulation for a number of ticks.

        Parameters
        ----------
        ticks : int
            Number of ticks to execute.

        Returns
        -------
        list
            Copy of the state after each tick.
        """
        if ticks < 0:
            raise ValueError("Tick count must not be negative")
        if not self._initialized:
            self.initialize()

        states = []
        for _ in range(ticks):
            states.append(self.step().copy())
        return states

    def advance(self, ticks: int) -> SimulationState:
        """Run ``ticks`` ticks without keeping intermediate states."""
        if ticks < 0:
            raise ValueError("Tick count must not be negative")
        if not self._initialized:
            self.initialize()
        for _ in range(ticks):
            self.step()
        return self.state

    def reset(self) -> None:
        """Reset simulation to initial state."""
        self._initialized = False
        self.initialize()

    def set_custom_system(self, specs: List[BodySpec]) -> None:
        """
        Replace the configured system and reinitialize.

        Parameters
        ----------
        specs : list of BodySpec
            Ordered body specifications.
        """
        self.config.bodies = list(specs)
        self.reset()

    def get_body(self, name: str) -> Optional[Body]:
        """Get body by name."""
        if self.registry is None or name not in self.registry:
            return None
        return self.registry[name]

    def get_momentum_drift(self) -> float:
        """Change in total momentum since initialization, relative to its start value."""
        self._require_initialized()
        return relative_drift(self._initial_momentum, total_momentum(self.registry))

    def get_energy_drift(self) -> float:
        """Relative change in total energy since initialization."""
        self._require_initialized()
        return relative_drift(
            self._initial_energy,
            total_energy(self.registry, self.config.gravitational_constant),
        )

    def get_angular_momentum_drift(self) -> float:
        """Relative change in angular momentum since initialization."""
        self._require_initialized()
        return relative_drift(self._initial_angular_momentum, angular_momentum(self.registry))

    @property
    def num_bodies(self) -> int:
        """Number of bodies."""
        return 0 if self.registry is None else len(self.registry)

    @property
    def simulation_time(self) -> float:
        """Current simulation time (years)."""
        return self.state.time

    def get_summary(self) -> Dict[str, Any]:
        """Get simulation summary."""
        summary = {
            "system": self.config.system if self.config.bodies is None else "custom",
            "num_bodies": self.num_bodies,
            "dt": self.config.dt,
            "integrator": _as_integrator_type(self.config.integrator).value,
            "precision": self.config.precision,
            "simulation_time": self.state.time,
            "step_count": self.state.step_count,
            "initialized": self._initialized,
        }
        if self._initialized:
            summary["force_evaluations"] = self.integrator.evaluations
            summary["energy_drift"] = self.get_energy_drift()
            summary["momentum_drift"] = self.get_momentum_drift()
        return summary

    def __repr__(self) -> str:
        return (
            f"Simulation(\n"
            f"  bodies={self.num_bodies},\n"
            f"  dt={self.config.dt:g} yr,\n"
            f"  integrator={_as_integrator_type(self.config.integrator).value},\n"
            f"  precision={self.config.precision},\n"
            f"  time={self.state.time:.5f} yr,\n"
            f"  steps={self.state.step_count}\n"
            f")"
        )


def create_simulation(system: str = "solar_system", **kwargs) -> Simulation:
    """
    Create simulation for a built-in system.

    Parameters
    ----------
    system : str
        One of "solar_system", "inner_planets", "earth_moon".
    **kwargs
        Additional configuration parameters.

    Returns
    -------
    Simulation
        Configured simulation (not yet initialized).
    """
    if system not in list_systems():
        raise ValueError(f"Unknown system: {system}")

    if "integrator" in kwargs:
        kwargs["integrator"] = _as_integrator_type(kwargs["integrator"])

    config = SimulationConfig(system=system)

    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise ValueError(f"Unknown configuration parameter: {key}")
        setattr(config, key, value)

    return Simulation(config)
