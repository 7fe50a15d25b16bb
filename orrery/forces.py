#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Force Accumulator

Computes, once per tick, the net gravitational acceleration on every body
from every other body (direct O(n²) summation over unordered pairs).

For each pair (i, j) with i < j the Newtonian force magnitude
F = G * m_i * m_j / r² is resolved along the angle atan2(dy, dx) from i
towards j. Body i receives F / m_i along that direction and body j
receives the opposite vector scaled by m_i / m_j, so each pair costs a
single distance evaluation and Newton's third law holds by construction.

The accumulator only reads state. Coincident bodies make the force
undefined; they raise DegenerateStateError instead of producing Inf/NaN.
"""

import numpy as np
from typing import Optional, Sequence, Tuple, TYPE_CHECKING

from .constants import G
from .errors import DegenerateStateError

if TYPE_CHECKING:
    from .registry import BodyRegistry


def pairwise_separations(positions: np.ndarray) -> np.ndarray:
    """
    Distance matrix between all bodies.

    Parameters
    ----------
    positions : np.ndarray
        (n, 2) positions

    Returns
    -------
    np.ndarray
        (n, n) symmetric matrix of distances, zeros on the diagonal
    """
    positions = np.asarray(positions)
    diff = positions[None, :, :] - positions[:, None, :]
    return np.hypot(diff[..., 0], diff[..., 1])


def pair_acceleration(
    position_i,
    position_j,
    mass_i: float,
    mass_j: float,
    gravitational_constant: float = G
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Accelerations exchanged by a single pair of bodies.

    Parameters
    ----------
    position_i, position_j : array_like
        Positions of the two bodies (AU)
    mass_i, mass_j : float
        Masses of the two bodies (SM)
    gravitational_constant : float
        G in AU³/(SM·yr²)

    Returns
    -------
    tuple
        (a_i, a_j): acceleration of i towards j and of j towards i (AU/yr²)
    """
    accelerations = gravitational_accelerations(
        np.array([position_i, position_j], dtype=float),
        np.array([mass_i, mass_j], dtype=float),
        gravitational_constant,
    )
    return accelerations[0], accelerations[1]


def gravitational_accelerations(
    positions: np.ndarray,
    masses: np.ndarray,
    gravitational_constant: float = G,
    min_separation: float = 0.0,
    names: Optional[Sequence[str]] = None
) -> np.ndarray:
    """
    Net gravitational acceleration on every body.

    Parameters
    ----------
    positions : np.ndarray
        (n, 2) heliocentric positions (AU)
    masses : np.ndarray
        (n,) masses (SM)
    gravitational_constant : float
        G in AU³/(SM·yr²)
    min_separation : float
        Separations at or below this value are treated as a collision
    names : sequence of str, optional
        Body names, used in error messages

    Returns
    -------
    np.ndarray
        (n, 2) accelerations (AU/yr²) in the dtype of ``positions``

    Raises
    ------
    DegenerateStateError
        If two bodies are closer than ``min_separation`` (or coincide) or a
        pair distance is not finite
    """
    accelerations = np.zeros_like(positions)
    n = len(masses)
    if n < 2:
        return accelerations

    g = positions.dtype.type(gravitational_constant)
    i, j = np.triu_indices(n, 1)

    dx = positions[j, 0] - positions[i, 0]
    dy = positions[j, 1] - positions[i, 1]
    radius = np.hypot(dx, dy)
    _check_separations(radius, i, j, min_separation, names)

    force = g * masses[i] * masses[j] / (radius * radius)
    angle = np.arctan2(dy, dx)

    pull = np.empty((len(i), 2), dtype=positions.dtype)
    pull[:, 0] = force * np.cos(angle) / masses[i]
    pull[:, 1] = force * np.sin(angle) / masses[i]
    reaction = pull * (masses[i] / masses[j])[:, None]

    # Reactions first: for any body k, pairs (m, k) with m < k come before (k, m')
    np.add.at(accelerations, j, -reaction)
    np.add.at(accelerations, i, pull)
    return accelerations


def compute_accelerations(
    registry: "BodyRegistry",
    gravitational_constant: float = G,
    min_separation: float = 0.0
) -> np.ndarray:
    """
    Net gravitational acceleration on every body of a registry.

    Parameters
    ----------
    registry : BodyRegistry
        Current state (read only)
    gravitational_constant : float
        G in AU³/(SM·yr²)
    min_separation : float
        Separations at or below this value are treated as a collision

    Returns
    -------
    np.ndarray
        (n, 2) accelerations indexed like the registry
    """
    return gravitational_accelerations(
        registry.positions,
        registry.masses,
        gravitational_constant,
        min_separation,
        registry.names,
    )


def _check_separations(
    radius: np.ndarray,
    i: np.ndarray,
    j: np.ndarray,
    min_separation: float,
    names: Optional[Sequence[str]]
) -> None:
    bad = ~np.isfinite(radius) | (radius <= min_separation)
    if not np.any(bad):
        return

    k = int(np.argmax(bad))
    a, b = int(i[k]), int(j[k])
    if names is not None:
        a, b = names[a], names[b]
    if np.isfinite(radius[k]):
        raise DegenerateStateError(
            f"Bodies {a} and {b} collided (separation {float(radius[k]):.3e} AU)"
        )
    raise DegenerateStateError(f"Separation between {a} and {b} is not finite")
