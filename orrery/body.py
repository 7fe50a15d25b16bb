#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Body Classes for the Solar System Simulator

A BodySpec is the configuration-side description of a body (what the setup
layer hands to the simulator). A Body is the live, registry-backed view of
one simulated mass: its position and velocity read from and write to the
registry's state arrays.
"""

import math
import numpy as np
from typing import Optional, TYPE_CHECKING
from dataclasses import dataclass

if TYPE_CHECKING:
    from .registry import BodyRegistry


@dataclass(frozen=True)
class BodySpec:
    """
    Configuration for one body.

    Attributes
    ----------
    name : str
        Identifier, unique within a system
    mass : float
        Mass in solar masses (SM)
    distance : float
        Initial distance in AU from the gravitational anchor: the star for
        planets, the parent planet for moons. 0 for the star itself.
    parent : str, optional
        Name of the parent planet. Only set for moons.
    """
    name: str
    mass: float
    distance: float
    parent: Optional[str] = None

    @property
    def is_moon(self) -> bool:
        """True if the body orbits a parent planet."""
        return self.parent is not None

    @property
    def is_anchor(self) -> bool:
        """True for the central star (no parent, zero distance)."""
        return self.parent is None and self.distance == 0


class Body:
    """
    One simulated mass inside a BodyRegistry.

    Parameters
    ----------
    registry : BodyRegistry
        Registry holding the state arrays
    index : int
        Stable index of this body in the registry
    name : str
        Unique identifier
    parent_index : int, optional
        Registry index of the parent planet (moons only)

    Attributes
    ----------
    name : str
        Unique identifier
    index : int
        Stable registry index
    parent_index : int or None
        Registry index of the parent, fixed at construction
    """

    def __init__(
        self,
        registry: "BodyRegistry",
        index: int,
        name: str,
        parent_index: Optional[int] = None
    ):
        self._registry = registry
        self.index = index
        self.name = name
        self.parent_index = parent_index

    @property
    def is_moon(self) -> bool:
        """True if this body orbits a parent planet."""
        return self.parent_index is not None

    @property
    def mass(self) -> float:
        """Mass in solar masses."""
        return float(self._registry.masses[self.index])

    @property
    def position(self) -> np.ndarray:
        """Heliocentric position (AU), a view into the registry."""
        return self._registry.positions[self.index]

    @position.setter
    def position(self, value) -> None:
        self._registry.positions[self.index] = value

    @property
    def velocity(self) -> np.ndarray:
        """Heliocentric velocity (AU/yr), a view into the registry."""
        return self._registry.velocities[self.index]

    @velocity.setter
    def velocity(self, value) -> None:
        self._registry.velocities[self.index] = value

    @property
    def parent(self) -> Optional["Body"]:
        """The parent planet, or None for the star and planets."""
        if self.parent_index is None:
            return None
        return self._registry[self.parent_index]

    def get_distance_from_anchor(self) -> float:
        """
        Distance from the system origin.

        Returns
        -------
        float
            Distance in AU
        """
        return float(np.linalg.norm(self.position))

    def get_speed(self) -> float:
        """
        Magnitude of the heliocentric velocity.

        Returns
        -------
        float
            Speed in AU/yr
        """
        return float(np.linalg.norm(self.velocity))

    def distance_to(self, other: "Body") -> float:
        """
        Distance to another body.

        Parameters
        ----------
        other : Body
            Another body in the same registry

        Returns
        -------
        float
            Distance in AU
        """
        return float(np.linalg.norm(self.position - other.position))

    def relative_position(self) -> Optional[np.ndarray]:
        """Position relative to the parent planet, or None if not a moon."""
        parent = self.parent
        if parent is None:
            return None
        return self.position - parent.position

    def __repr__(self) -> str:
        x, y = self.position
        angle = math.degrees(math.atan2(y, x))
        return (
            f"Body({self.name}, "
            f"mass={self.mass:.3e} SM, "
            f"r={self.get_distance_from_anchor():.5f} AU, "
            f"theta={angle:.1f}°, "
            f"v={self.get_speed():.4f} AU/yr)"
        )
