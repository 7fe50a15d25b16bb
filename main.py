#!/usr/bin/env python3
"""
Orrery - Gravitational Solar System Simulator

Command-line entry point for running solar system simulations headless.
Rendering is left to an external front end; this runner advances the
simulation and reports body positions and conservation drift.

Usage:
    python main.py                                  # Solar system, 10000 ticks
    python main.py --system earth_moon              # Sun, Earth and Moon
    python main.py --system-file my_system.json     # Custom system from JSON
    python main.py --ticks 100000 --dt 1e-4         # One simulated decade
    python main.py --help                           # Show all options
"""

import argparse
import logging
import sys
from typing import Optional

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    from orrery import PRECISIONS, IntegratorType, list_systems

    parser = argparse.ArgumentParser(
        description="Gravitational Solar System Simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                    # Solar system, default settings
  %(prog)s --system inner_planets             # Sun and the four inner planets
  %(prog)s --integrator velocity_verlet       # Two-evaluation integrator
  %(prog)s --precision float32                # Single-precision state
  %(prog)s --ticks 50000 --report-every 5000  # Longer run, periodic reports
        """,
    )

    # -------------------------------------------------------------------------
    # System selection
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--system",
        "-s",
        type=str,
        choices=list_systems(),
        default="solar_system",
        help="Built-in system to simulate (default: solar_system)",
    )
    parser.add_argument(
        "--system-file",
        type=str,
        default=None,
        help="JSON file with body specifications (overrides --system)",
    )

    # -------------------------------------------------------------------------
    # Numerical parameters
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--dt",
        type=float,
        default=1e-5,
        help="Time step in years per tick (default: 1e-5)",
    )
    parser.add_argument(
        "--ticks",
        "-n",
        type=int,
        default=10000,
        help="Number of ticks to run (default: 10000)",
    )
    parser.add_argument(
        "--integrator",
        "-i",
        type=str,
        choices=[t.value for t in IntegratorType],
        default="semi_implicit",
        help="Integration scheme (default: semi_implicit)",
    )
    parser.add_argument(
        "--precision",
        type=str,
        choices=sorted(PRECISIONS),
        default="float64",
        help="Floating point precision of the state (default: float64)",
    )
    parser.add_argument(
        "--min-separation",
        type=float,
        default=0.0,
        help="Abort when two bodies come closer than this, in AU (default: 0)",
    )

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--report-every",
        type=int,
        default=0,
        help="Print body positions every N ticks (default: only at the end)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def print_positions(sim, limit: Optional[int] = None) -> None:
    """Print position, distance and speed of each body."""
    bodies = list(sim.registry)
    shown = bodies if limit is None else bodies[:limit]
    for body in shown:
        x, y = body.position
        print(
            f"  {body.name:<10} x={x:+.5f} AU, y={y:+.5f} AU, "
            f"r={body.get_distance_from_anchor():.5f} AU, "
            f"v={body.get_speed():.4f} AU/yr"
        )
    if len(shown) < len(bodies):
        print(f"  ... and {len(bodies) - len(shown)} more bodies")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    # -------------------------------------------------------------------------
    # Import simulation components
    # -------------------------------------------------------------------------
    from orrery import (
        IntegratorType,
        OrrerySimError,
        Simulation,
        SimulationConfig,
        load_system,
    )

    try:
        bodies = None
        system_name = args.system
        if args.system_file is not None:
            bodies, system_name = load_system(args.system_file)

        config = SimulationConfig(
            system=args.system,
            bodies=bodies,
            dt=args.dt,
            precision=args.precision,
            integrator=IntegratorType(args.integrator),
            min_separation=args.min_separation,
            check_interval=args.report_every,
        )

        sim = Simulation(config)
        sim.initialize()
    except OrrerySimError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    # -------------------------------------------------------------------------
    # Print configuration summary
    # -------------------------------------------------------------------------
    print("=" * 60)
    print("Orrery - Gravitational Solar System Simulator")
    print("=" * 60)
    print(f"\nSystem: {system_name}")
    print(f"Bodies: {sim.num_bodies}")
    print(f"Time step: {args.dt:g} years/tick")
    print(f"Integrator: {args.integrator}")
    print(f"Precision: {args.precision}")
    print(f"Simulated span: {args.ticks * args.dt:g} years ({args.ticks} ticks)")

    # -------------------------------------------------------------------------
    # Run simulation
    # -------------------------------------------------------------------------
    print(f"\n{'=' * 60}")
    print("Running simulation...")
    print(f"{'=' * 60}")

    try:
        for _ in range(args.ticks):
            sim.step()

            if args.report_every and sim.state.step_count % args.report_every == 0:
                print(f"\nTime: {sim.simulation_time:.5f} years")
                print_positions(sim, limit=5)
    except OrrerySimError as e:
        logger.error(f"Simulation failed: {e}")
        print(f"\nSimulation aborted after {sim.state.step_count} ticks: {e}")
        return 1

    # -------------------------------------------------------------------------
    # Final summary
    # -------------------------------------------------------------------------
    print(f"\n{'=' * 60}")
    print("Simulation Complete!")
    print(f"{'=' * 60}")
    print(f"Final simulation time: {sim.simulation_time:.5f} years")
    print(f"Steps executed: {sim.state.step_count}")
    print("\nBodies:")
    print_positions(sim)

    summary = sim.get_summary()
    print("\nConservation:")
    print(f"  Energy drift: {summary['energy_drift']:.3e}")
    print(f"  Momentum drift: {summary['momentum_drift']:.3e}")
    print(f"  Angular momentum drift: {sim.get_angular_momentum_drift():.3e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
