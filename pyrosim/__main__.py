"""Entry point for ``python -m pyrosim``.

Loads the YAML config, builds a simulation engine, lights a fire and
runs the world headless, logging how much living biomass survives.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from pyrosim.simulation.config import SimulationConfig
from pyrosim.simulation.engine import SimulationEngine

logger = logging.getLogger("pyrosim")

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="pyrosim",
        description="Pyrosim - heat-driven wildfire simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=600,
        help="Number of simulation steps to run (default: 600)",
    )
    parser.add_argument(
        "--dt",
        type=float,
        default=1.0 / 60.0,
        help="Requested seconds per step (default: 1/60)",
    )
    parser.add_argument(
        "--ignite",
        type=int,
        nargs=2,
        metavar=("I", "J"),
        help="Cell to ignite before running (default: world centre)",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=60,
        help="Log the score every N steps (default: 60)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create engine, run it."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    engine = SimulationEngine(config=config)

    if args.ignite is None:
        i, j = config.world_width // 2, config.world_height // 2
    else:
        i, j = args.ignite
    engine.ignite(i, j)

    initial = engine.score
    for tick in range(1, args.ticks + 1):
        engine.step(args.dt)
        if args.report_every > 0 and tick % args.report_every == 0:
            logger.info("t=%.1fs biomass %.1f kg", engine.elapsed, engine.score)

    burned = initial - engine.score
    logger.info(
        "Finished %d steps (%.1f s): %.1f of %.1f kg burned",
        engine.tick,
        engine.elapsed,
        burned,
        initial,
    )


if __name__ == "__main__":
    main()
