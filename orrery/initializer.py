#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orbital Initializer

Derives the initial state that places a body on an (approximately) circular
orbit around its gravitational anchor: the star for planets, the parent
planet for moons.

Every body starts on the positive x-axis, so the radius vector points along
+x and the circular velocity is purely vertical. All distances in AU, masses
in solar masses, time in years.
"""

import math
from typing import Tuple

import numpy as np

from .constants import G, SOLAR_MASS


def circular_orbit_speed(
    central_mass: float,
    distance: float,
    gravitational_constant: float = G
) -> float:
    """
    Speed of a circular orbit at a given distance from a central mass.

    For a circular orbit gravity supplies exactly the centripetal force,
    so G * M / r = v² / r and v = sqrt(G * M / r).

    Parameters
    ----------
    central_mass : float
        Mass of the body being orbited (SM)
    distance : float
        Orbital radius (AU)
    gravitational_constant : float
        G in AU³/(SM·yr²)

    Returns
    -------
    float
        Orbital speed (AU/yr), 0 when the distance is 0
    """
    if distance == 0:
        return 0.0
    return math.sqrt(gravitational_constant * central_mass / distance)


def orbital_period(
    distance: float,
    central_mass: float = SOLAR_MASS,
    gravitational_constant: float = G
) -> float:
    """
    Period of a circular orbit from Kepler's third law.

    T = 2π * sqrt(r³ / (G * M)). With G = 4π² this reduces to
    sqrt(r³ / M) years.

    Parameters
    ----------
    distance : float
        Orbital radius (AU)
    central_mass : float
        Mass of the body being orbited (SM)
    gravitational_constant : float
        G in AU³/(SM·yr²)

    Returns
    -------
    float
        Period (years)
    """
    if distance <= 0 or central_mass <= 0:
        raise ValueError("Distance and central mass must be positive")
    return 2 * math.pi * math.sqrt(distance ** 3 / (gravitational_constant * central_mass))


def planet_initial_state(
    distance: float,
    anchor_mass: float = SOLAR_MASS,
    gravitational_constant: float = G
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Initial state for a body orbiting the anchor directly.

    The body is placed at (distance, 0) and moves along -y, perpendicular
    to the radius vector. The anchor itself (distance 0) stays at rest.

    Parameters
    ----------
    distance : float
        Distance from the anchor (AU)
    anchor_mass : float
        Mass of the anchor (SM)
    gravitational_constant : float
        G in AU³/(SM·yr²)

    Returns
    -------
    tuple
        (position, velocity) as 2-element float64 arrays in AU and AU/yr
    """
    position = np.array([distance, 0.0])
    speed = circular_orbit_speed(anchor_mass, distance, gravitational_constant)
    velocity = np.array([0.0, -speed])
    return position, velocity


def moon_initial_state(
    distance: float,
    parent_distance: float,
    parent_mass: float,
    anchor_mass: float = SOLAR_MASS,
    gravitational_constant: float = G
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Initial state for a moon orbiting a planet that orbits the anchor.

    The moon sits on the same axis as its parent, further out. Its
    heliocentric velocity is the parent's circular velocity around the
    anchor plus its own circular velocity around the parent, both along -y.

    Parameters
    ----------
    distance : float
        Heliocentric distance of the moon (AU)
    parent_distance : float
        Heliocentric distance of the parent planet (AU)
    parent_mass : float
        Mass of the parent planet (SM)
    anchor_mass : float
        Mass of the anchor (SM)
    gravitational_constant : float
        G in AU³/(SM·yr²)

    Returns
    -------
    tuple
        (position, velocity) as 2-element float64 arrays in AU and AU/yr
    """
    moon_distance = distance - parent_distance
    if moon_distance <= 0:
        raise ValueError("Moon must lie beyond its parent on the x-axis")

    v_orbit = circular_orbit_speed(parent_mass, moon_distance, gravitational_constant)
    _, parent_velocity = planet_initial_state(
        parent_distance, anchor_mass, gravitational_constant
    )

    position = np.array([distance, 0.0])
    velocity = parent_velocity + np.array([0.0, -v_orbit])
    return position, velocity
