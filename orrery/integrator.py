#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Integrator

Advances every body's position and velocity by a fixed time step.

Two schemes are available:

- SemiImplicitIntegrator (default): a single acceleration evaluation per
  tick. Positions advance with p += v*dt + 0.5*a*dt², then velocities with
  v += a*dt using the same accelerations, computed from the pre-update
  positions. It needs only one force pass per tick, but drifts more in
  energy than velocity-Verlet over long runs.
- VelocityVerletIntegrator (opt-in): same position update, then the
  accelerations are recomputed at the new positions and velocities advance
  with the average of the old and new accelerations.

Both compute the whole tick on temporary arrays before writing it back, so
the force pass never sees a half-updated state and a failed tick leaves the
registry as it was.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Type

import numpy as np

from .constants import G
from .errors import DegenerateStateError
from .forces import gravitational_accelerations
from .registry import BodyRegistry

logger = logging.getLogger(__name__)


class IntegratorType(Enum):
    """Supported time-integration schemes."""

    SEMI_IMPLICIT = "semi_implicit"
    VELOCITY_VERLET = "velocity_verlet"


class Integrator(ABC):
    """
    Base class for time-integration schemes.

    Parameters
    ----------
    gravitational_constant : float
        G in AU³/(SM·yr²)
    min_separation : float
        Separations at or below this value are treated as a collision

    Attributes
    ----------
    evaluations : int
        Number of force evaluations performed so far
    """

    name = "base"

    def __init__(self, gravitational_constant: float = G, min_separation: float = 0.0):
        self.gravitational_constant = gravitational_constant
        self.min_separation = min_separation
        self.evaluations = 0

    def accelerations(self, registry: BodyRegistry, positions: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Run the force accumulator on the registry's bodies.

        ``positions`` evaluates the forces at trial positions instead of the
        committed state; the registry itself is never modified.
        """
        self.evaluations += 1
        if positions is None:
            positions = registry.positions
        return gravitational_accelerations(
            positions,
            registry.masses,
            self.gravitational_constant,
            self.min_separation,
            registry.names,
        )

    def step(self, registry: BodyRegistry, dt: float) -> np.ndarray:
        """
        Advance the registry by one tick.

        The new state is computed aside and written back only once the whole
        tick has succeeded, so a raised error leaves the registry untouched.

        Parameters
        ----------
        registry : BodyRegistry
            State to advance (modified in place)
        dt : float
            Time step (years)

        Returns
        -------
        np.ndarray
            The accelerations used for the position update

        Raises
        ------
        DegenerateStateError
            If bodies collide or the state becomes non-finite
        """
        dt = registry.dtype.type(dt)
        positions, velocities, accelerations = self._advance(registry, dt)
        check_finite(positions, velocities, registry.names)

        registry.positions[...] = positions
        registry.velocities[...] = velocities
        return accelerations

    @abstractmethod
    def _advance(self, registry: BodyRegistry, dt) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Scheme-specific update.

        Returns the new positions, the new velocities and the first-stage
        accelerations, without touching the registry.
        """

    @staticmethod
    def _drift(registry: BodyRegistry, accelerations: np.ndarray, dt) -> np.ndarray:
        half = registry.dtype.type(0.5)
        return registry.positions + registry.velocities * dt + half * accelerations * dt * dt

    def __repr__(self) -> str:
        return f"{type(self).__name__}(G={self.gravitational_constant:.6f})"


class SemiImplicitIntegrator(Integrator):
    """Single-evaluation position-corrected Euler step."""

    name = IntegratorType.SEMI_IMPLICIT.value

    def _advance(self, registry: BodyRegistry, dt):
        accelerations = self.accelerations(registry)
        positions = self._drift(registry, accelerations, dt)
        velocities = registry.velocities + accelerations * dt
        return positions, velocities, accelerations


class VelocityVerletIntegrator(Integrator):
    """Two-evaluation velocity-Verlet step."""

    name = IntegratorType.VELOCITY_VERLET.value

    def __init__(self, gravitational_constant: float = G, min_separation: float = 0.0):
        super().__init__(gravitational_constant, min_separation)
        self._cached: Optional[np.ndarray] = None
        self._cached_positions: Optional[np.ndarray] = None

    def _advance(self, registry: BodyRegistry, dt):
        # Reuse last tick's end-of-step accelerations when positions are unchanged
        if self._cached is not None and np.array_equal(self._cached_positions, registry.positions):
            accelerations = self._cached
        else:
            accelerations = self.accelerations(registry)

        positions = self._drift(registry, accelerations, dt)
        new_accelerations = self.accelerations(registry, positions)
        half = registry.dtype.type(0.5)
        velocities = registry.velocities + half * (accelerations + new_accelerations) * dt

        self._cached = new_accelerations
        self._cached_positions = positions
        return positions, velocities, accelerations


_INTEGRATORS: Dict[IntegratorType, Type[Integrator]] = {
    IntegratorType.SEMI_IMPLICIT: SemiImplicitIntegrator,
    IntegratorType.VELOCITY_VERLET: VelocityVerletIntegrator,
}


def get_integrator(
    integrator_type,
    gravitational_constant: float = G,
    min_separation: float = 0.0
) -> Integrator:
    """
    Create an integrator by type or name.

    Parameters
    ----------
    integrator_type : IntegratorType or str
        Scheme to use ("semi_implicit" or "velocity_verlet")
    gravitational_constant : float
        G in AU³/(SM·yr²)
    min_separation : float
        Collision threshold (AU)

    Returns
    -------
    Integrator
        A fresh integrator instance
    """
    if isinstance(integrator_type, str):
        try:
            integrator_type = IntegratorType(integrator_type)
        except ValueError:
            raise ValueError(f"Unknown integrator: {integrator_type}") from None

    integrator = _INTEGRATORS[integrator_type](gravitational_constant, min_separation)
    logger.debug(f"Using {integrator!r}")
    return integrator


def check_finite(positions: np.ndarray, velocities: np.ndarray, names: Sequence[str]) -> None:
    """
    Raise if any position or velocity is NaN or infinite.

    Raises
    ------
    DegenerateStateError
        Naming the first offending body
    """
    finite = np.isfinite(positions).all(axis=1) & np.isfinite(velocities).all(axis=1)
    if finite.all():
        return
    index = int(np.argmin(finite))
    raise DegenerateStateError(f"State of {names[index]} is no longer finite")
