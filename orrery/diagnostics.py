#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Conserved quantities of a body registry: linear and angular momentum,
kinetic and potential energy, centre of mass. Used to monitor integration
drift; none of these functions mutate state.
"""

import numpy as np

from .constants import G
from .registry import BodyRegistry


def total_momentum(registry: BodyRegistry) -> np.ndarray:
    """Mass-weighted velocity sum (SM·AU/yr), computed in float64."""
    masses = registry.masses.astype(np.float64)
    return np.sum(masses[:, None] * registry.velocities.astype(np.float64), axis=0)


def angular_momentum(registry: BodyRegistry) -> float:
    """z-component of the total angular momentum about the origin."""
    m = registry.masses.astype(np.float64)
    p = registry.positions.astype(np.float64)
    v = registry.velocities.astype(np.float64)
    return float(np.sum(m * (p[:, 0] * v[:, 1] - p[:, 1] * v[:, 0])))


def kinetic_energy(registry: BodyRegistry) -> float:
    m = registry.masses.astype(np.float64)
    v = registry.velocities.astype(np.float64)
    return float(0.5 * np.sum(m * np.sum(v * v, axis=1)))


def potential_energy(registry: BodyRegistry, gravitational_constant: float = G) -> float:
    n = len(registry)
    if n < 2:
        return 0.0
    m = registry.masses.astype(np.float64)
    p = registry.positions.astype(np.float64)
    i, j = np.triu_indices(n, 1)
    r = np.hypot(p[j, 0] - p[i, 0], p[j, 1] - p[i, 1])
    return float(-gravitational_constant * np.sum(m[i] * m[j] / r))


def total_energy(registry: BodyRegistry, gravitational_constant: float = G) -> float:
    return kinetic_energy(registry) + potential_energy(registry, gravitational_constant)


def center_of_mass(registry: BodyRegistry) -> np.ndarray:
    m = registry.masses.astype(np.float64)
    return np.sum(m[:, None] * registry.positions.astype(np.float64), axis=0) / np.sum(m)


def relative_drift(initial, current) -> float:
    """
    Size of the change from ``initial`` to ``current`` relative to ``initial``.

    Works for scalars and vectors. Falls back to the absolute change when
    the initial value is zero.
    """
    initial = np.asarray(initial, dtype=np.float64)
    current = np.asarray(current, dtype=np.float64)
    change = float(np.linalg.norm(current - initial))
    scale = float(np.linalg.norm(initial))
    if scale == 0:
        return change
    return change / scale
