#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
System Presets Module

Provides ready-made body configurations and a JSON loader:
- The solar system (Sun, eight planets, four moons)
- The inner planets only
- A Sun-Earth-Moon system

Moon distances are offsets from the parent planet; planet distances are
measured from the Sun.

JSON schema for ``load_system``::

    {
      "name": "Optional display name",
      "bodies": [
        {"name": "Sun",   "mass": 1.0,    "distance": 0.0},
        {"name": "Earth", "mass": 3.0e-6, "distance": 1.0},
        {"name": "Moon",  "mass": 3.69e-8, "distance": 0.00257, "parent": "Earth"}
      ]
    }

Presentation-only keys (radius, color, ...) are ignored.
"""

import json
import logging
from pathlib import Path
from typing import Callable, Dict, List, Tuple, Union

from .body import BodySpec
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def _star() -> BodySpec:
    return BodySpec("Sun", 1.0, 0.0)


def create_inner_planets() -> List[BodySpec]:
    """
    Sun with Mercury, Venus, Earth and Mars.

    Returns
    -------
    list of BodySpec
        Anchor first, planets by increasing distance
    """
    return [
        _star(),
        BodySpec("Mercury", 1.66e-7, 0.4),
        BodySpec("Venus", 2.44e-6, 0.7),
        BodySpec("Earth", 3.0e-6, 1.0),
        BodySpec("Mars", 3.22e-7, 1.5),
    ]


def create_earth_moon() -> List[BodySpec]:
    """
    Sun, Earth and the Moon.

    Returns
    -------
    list of BodySpec
        Anchor, Earth, then the Moon
    """
    return [
        _star(),
        BodySpec("Earth", 3.0e-6, 1.0),
        BodySpec("Moon", 3.69e-8, 0.00257, parent="Earth"),
    ]


def create_solar_system() -> List[BodySpec]:
    """
    Sun, the eight planets and the Moon, Ganymede, Callisto and Titan.

    Returns
    -------
    list of BodySpec
        Anchor first, then each planet followed by its moons
    """
    return [
        _star(),
        BodySpec("Mercury", 1.66e-7, 0.4),
        BodySpec("Venus", 2.44e-6, 0.7),
        BodySpec("Earth", 3.0e-6, 1.0),
        BodySpec("Moon", 3.69e-8, 0.00257, parent="Earth"),
        BodySpec("Mars", 3.22e-7, 1.5),
        BodySpec("Jupiter", 9.5e-4, 5.2),
        BodySpec("Ganymede", 9.9e-5, 0.015, parent="Jupiter"),
        BodySpec("Callisto", 5.41e-6, 0.0055, parent="Jupiter"),
        BodySpec("Saturn", 2.86e-4, 9.6),
        BodySpec("Titan", 6.76e-8, 0.01816, parent="Saturn"),
        BodySpec("Uranus", 4.36e-5, 19.2),
        BodySpec("Neptune", 5.13e-5, 30.0),
    ]


_SYSTEMS: Dict[str, Callable[[], List[BodySpec]]] = {
    "solar_system": create_solar_system,
    "inner_planets": create_inner_planets,
    "earth_moon": create_earth_moon,
}


def list_systems() -> List[str]:
    """Names of the built-in systems."""
    return sorted(_SYSTEMS)


def get_system(name: str) -> List[BodySpec]:
    """
    Body specifications of a built-in system.

    Parameters
    ----------
    name : str
        One of ``list_systems()``

    Returns
    -------
    list of BodySpec
        A fresh list of specifications

    Raises
    ------
    ValueError
        If the system name is unknown
    """
    if name not in _SYSTEMS:
        raise ValueError(f"Unknown system: {name}")
    return _SYSTEMS[name]()


def parse_system(data: dict) -> Tuple[List[BodySpec], str]:
    """
    Convert a decoded JSON document into body specifications.

    Parameters
    ----------
    data : dict
        Document following the schema in the module docstring

    Returns
    -------
    tuple
        (specs, display_name)

    Raises
    ------
    ConfigurationError
        If the document or one of its bodies is malformed
    """
    if not isinstance(data, dict):
        raise ConfigurationError("System document must be a JSON object")

    entries = data.get("bodies")
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError("System document needs a non-empty 'bodies' list")

    specs: List[BodySpec] = []
    for position, entry in enumerate(entries):
        try:
            parent = entry.get("parent")
            specs.append(BodySpec(
                name=str(entry["name"]),
                mass=float(entry["mass"]),
                distance=float(entry.get("distance", 0.0)),
                parent=str(parent) if parent is not None else None,
            ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid body entry #{position}: {e}") from e

    return specs, str(data.get("name") or "custom")


def load_system(path: Union[str, Path]) -> Tuple[List[BodySpec], str]:
    """
    Load body specifications from a JSON file.

    Parameters
    ----------
    path : str or Path
        JSON file following the schema in the module docstring

    Returns
    -------
    tuple
        (specs, display_name); the display name defaults to the file stem

    Raises
    ------
    ConfigurationError
        If the file cannot be read or is malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read system file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"System file {path} is not valid JSON: {e}") from e

    if isinstance(data, dict) and not data.get("name"):
        data = dict(data, name=path.stem)
    specs, name = parse_system(data)
    logger.info(f"Loaded system '{name}' with {len(specs)} bodies from {path}")
    return specs, name
