#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Physical and numerical constants for the solar system simulator.

Units are normalised so that one astronomical unit (AU), one solar mass (SM)
and one year give G = 4π². With these units a body at 1 AU around a 1 SM star
has an orbital period of exactly one year.
"""

import math

import numpy as np

# Gravitational constant in AU³/(SM·yr²)
G = 4 * math.pi ** 2

# Mass of the anchor star (SM)
SOLAR_MASS = 1.0

# Default integration step (years per tick)
DEFAULT_DT = 1e-5

# Supported floating point precisions for the state arrays
PRECISIONS = {
    "float32": np.float32,
    "float64": np.float64,
}
DEFAULT_PRECISION = "float64"


def resolve_dtype(precision: str) -> np.dtype:
    """
    Map a precision name to a numpy dtype.

    Parameters
    ----------
    precision : str
        One of the keys of ``PRECISIONS``.

    Returns
    -------
    np.dtype
        The matching dtype.

    Raises
    ------
    ValueError
        If the precision name is unknown.
    """
    try:
        return np.dtype(PRECISIONS[precision])
    except KeyError:
        raise ValueError(
            f"Unknown precision: {precision} "
            f"(expected one of {', '.join(sorted(PRECISIONS))})"
        ) from None
