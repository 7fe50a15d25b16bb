#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exceptions raised by the simulator.

Configuration problems are reported while the body registry is built, before
any tick runs. Degenerate states (coincident bodies, non-finite values) are
fatal once the simulation is running.
"""

from typing import Optional


class OrrerySimError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(OrrerySimError, ValueError):
    """Invalid system configuration detected at setup time."""


class DegenerateStateError(OrrerySimError, RuntimeError):
    """
    The simulated state is no longer physically meaningful.

    Raised when two bodies coincide (zero separation) or when a position
    or velocity becomes NaN/Inf.
    """

    def __init__(self, message: str, step_count: Optional[int] = None):
        super().__init__(message)
        self.step_count = step_count
