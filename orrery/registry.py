#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Body Registry

Authoritative mutable state of a simulation run: one row per body in
contiguous numpy arrays (positions, velocities, masses), plus the ordered
Body views that give each row a name and an explicit parent reference.

The registry is built once from an ordered list of BodySpec objects. Body
count and ordering never change afterwards; only the Integrator mutates
positions and velocities, once per tick.
"""

import logging
import math
import numbers
from typing import Dict, Iterator, List, Optional, Sequence, Union

import numpy as np

from .body import Body, BodySpec
from .constants import G
from .errors import ConfigurationError
from .forces import pairwise_separations
from .initializer import moon_initial_state, planet_initial_state

logger = logging.getLogger(__name__)


class BodyRegistry:
    """
    Ordered, array-backed collection of simulated bodies.

    Parameters
    ----------
    names : sequence of str
        Body names in registry order
    masses : array_like
        Masses (SM), shape (n,)
    positions : array_like
        Heliocentric positions (AU), shape (n, 2)
    velocities : array_like
        Heliocentric velocities (AU/yr), shape (n, 2)
    parents : sequence of int or None, optional
        Parent index per body (None for the star and planets)
    dtype : numpy dtype
        Floating point precision of the state arrays

    Attributes
    ----------
    positions : np.ndarray
        (n, 2) positions, mutated in place by the integrator
    velocities : np.ndarray
        (n, 2) velocities, mutated in place by the integrator
    masses : np.ndarray
        (n,) masses, constant for the run
    bodies : list of Body
        Body views in registry order
    """

    def __init__(
        self,
        names: Sequence[str],
        masses,
        positions,
        velocities,
        parents: Optional[Sequence[Optional[int]]] = None,
        dtype=np.float64
    ):
        self.dtype = np.dtype(dtype)
        self.masses = np.array(masses, dtype=self.dtype)
        self.positions = np.array(positions, dtype=self.dtype).reshape(-1, 2)
        self.velocities = np.array(velocities, dtype=self.dtype).reshape(-1, 2)

        n = len(names)
        if parents is None:
            parents = [None] * n
        if not (len(self.masses) == len(self.positions) == len(self.velocities) == len(parents) == n):
            raise ConfigurationError("Names, masses, positions and velocities must have equal length")

        self.bodies: List[Body] = [
            Body(self, index, name, parent_index)
            for index, (name, parent_index) in enumerate(zip(names, parents))
        ]
        self._index: Dict[str, int] = {}
        for body in self.bodies:
            if body.name in self._index:
                raise ConfigurationError(f"Duplicate body name: {body.name}")
            self._index[body.name] = body.index

        self._validate()

    @classmethod
    def from_specs(
        cls,
        specs: Sequence[BodySpec],
        gravitational_constant: float = G,
        dtype=np.float64
    ) -> "BodyRegistry":
        """
        Build a registry from body specifications, seeding circular orbits.

        Specs are processed in order: the anchor first, then the planets by
        increasing distance, each followed directly by its moons. A moon's
        initial state needs its parent's mass and distance, so a parent must
        appear before its moons.

        Parameters
        ----------
        specs : sequence of BodySpec
            Ordered body specifications
        gravitational_constant : float
            G in AU³/(SM·yr²)
        dtype : numpy dtype
            Precision of the state arrays

        Returns
        -------
        BodyRegistry
            Registry with initial positions and velocities

        Raises
        ------
        ConfigurationError
            If the specifications describe an invalid system
        """
        if not specs:
            raise ConfigurationError("A system needs at least one body")

        anchor = specs[0]
        if not anchor.is_anchor:
            raise ConfigurationError(
                f"First body must be the anchor at distance 0 with no parent, got {anchor.name}"
            )

        names: List[str] = []
        masses: List[float] = []
        positions: List[np.ndarray] = []
        velocities: List[np.ndarray] = []
        parents: List[Optional[int]] = []
        index_by_name: Dict[str, int] = {}
        helio_distance: Dict[str, float] = {}
        last_planet: Optional[str] = None

        for spec in specs:
            _check_spec(spec)
            if spec.name in index_by_name:
                raise ConfigurationError(f"Duplicate body name: {spec.name}")

            if spec is anchor:
                position, velocity = planet_initial_state(0.0, anchor.mass, gravitational_constant)
                parent_index = None
                distance = 0.0
            elif spec.is_moon:
                parent_index = index_by_name.get(spec.parent)
                if parent_index is None:
                    raise ConfigurationError(
                        f"Moon {spec.name} references parent {spec.parent}, "
                        f"which is not defined before it"
                    )
                if parents[parent_index] is not None:
                    raise ConfigurationError(
                        f"Parent {spec.parent} of {spec.name} is itself a moon"
                    )
                if parent_index == 0:
                    raise ConfigurationError(
                        f"Moon {spec.name} cannot orbit the anchor; configure it as a planet"
                    )
                if spec.parent != last_planet:
                    raise ConfigurationError(
                        f"Moon {spec.name} must follow its parent {spec.parent} "
                        f"(or the parent's other moons) directly"
                    )
                parent_distance = helio_distance[spec.parent]
                distance = parent_distance + spec.distance
                position, velocity = moon_initial_state(
                    distance,
                    parent_distance,
                    masses[parent_index],
                    anchor.mass,
                    gravitational_constant,
                )
            else:
                if spec.distance == 0:
                    raise ConfigurationError(
                        f"{spec.name} shares the anchor's position (distance 0)"
                    )
                if last_planet is not None and spec.distance < helio_distance[last_planet]:
                    raise ConfigurationError(
                        f"Planets must be ordered by increasing distance: {spec.name} "
                        f"at {spec.distance} AU follows {last_planet} at "
                        f"{helio_distance[last_planet]} AU"
                    )
                last_planet = spec.name
                parent_index = None
                distance = spec.distance
                position, velocity = planet_initial_state(distance, anchor.mass, gravitational_constant)

            logger.debug(
                f"Seeded {spec.name}: r={distance:.6f} AU, "
                f"v=({velocity[0]:.6f}, {velocity[1]:.6f}) AU/yr"
            )

            index_by_name[spec.name] = len(names)
            helio_distance[spec.name] = distance
            names.append(spec.name)
            masses.append(spec.mass)
            positions.append(position)
            velocities.append(velocity)
            parents.append(parent_index)

        registry = cls(names, masses, positions, velocities, parents, dtype=dtype)
        logger.info(f"Built registry with {len(registry)} bodies ({registry.dtype})")
        return registry

    def _validate(self) -> None:
        """Check mass and separation invariants."""
        if len(self.bodies) == 0:
            raise ConfigurationError("A system needs at least one body")

        for body in self.bodies:
            mass = float(self.masses[body.index])
            if not math.isfinite(mass) or mass <= 0:
                raise ConfigurationError(f"{body.name} must have positive mass, got {mass}")

        if not (np.all(np.isfinite(self.positions)) and np.all(np.isfinite(self.velocities))):
            raise ConfigurationError("Initial positions and velocities must be finite")

        separations = pairwise_separations(self.positions)
        np.fill_diagonal(separations, np.inf)
        if separations.size and np.min(separations) == 0:
            i, j = np.unravel_index(np.argmin(separations), separations.shape)
            raise ConfigurationError(
                f"{self.bodies[i].name} and {self.bodies[j].name} share the same initial position"
            )

    @property
    def anchor(self) -> Body:
        """The central star (always index 0)."""
        return self.bodies[0]

    @property
    def names(self) -> List[str]:
        """Body names in registry order."""
        return [body.name for body in self.bodies]

    def index_of(self, name: str) -> int:
        """Registry index of the named body."""
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"Unknown body: {name}") from None

    def moons_of(self, name: str) -> List[Body]:
        """Moons whose parent is the named body."""
        index = self.index_of(name)
        return [body for body in self.bodies if body.parent_index == index]

    def snapshot(self):
        """
        Copy the current state.

        Returns
        -------
        tuple
            (positions, velocities) as independent copies
        """
        return self.positions.copy(), self.velocities.copy()

    def __len__(self) -> int:
        return len(self.bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self.bodies)

    def __getitem__(self, key: Union[int, str]) -> Body:
        if isinstance(key, str):
            return self.bodies[self.index_of(key)]
        return self.bodies[key]

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"BodyRegistry(n={len(self)}, dtype={self.dtype}, bodies={self.names})"


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _check_spec(spec: BodySpec) -> None:
    """Reject specs with non-physical values."""
    if not isinstance(spec.name, str) or not spec.name:
        raise ConfigurationError(f"Body name must be a non-empty string, got {spec.name!r}")
    if not _is_number(spec.mass):
        raise ConfigurationError(f"{spec.name} mass must be a number, got {spec.mass!r}")
    if not _is_number(spec.distance):
        raise ConfigurationError(f"{spec.name} distance must be a number, got {spec.distance!r}")
    if not math.isfinite(spec.mass) or spec.mass <= 0:
        raise ConfigurationError(f"{spec.name} must have positive mass, got {spec.mass}")
    if not math.isfinite(spec.distance) or spec.distance < 0:
        raise ConfigurationError(f"{spec.name} must have a non-negative distance, got {spec.distance}")
    if spec.is_moon and spec.distance == 0:
        raise ConfigurationError(f"Moon {spec.name} must be offset from its parent")
