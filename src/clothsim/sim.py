"""Headless cloth simulation runner."""

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys
import time

from clothsim.cloth import Cloth
from clothsim.config import SimulationConfig
from clothsim.logging_config import setup_logging
from clothsim.snapshot import ClothState

logger = logging.getLogger("clothsim.sim")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mass-spring cloth simulation")
    parser.add_argument("--rows", type=int, default=31, help="Particle rows")
    parser.add_argument("--columns", type=int, default=41, help="Particle columns")
    parser.add_argument("--ticks", type=int, default=1000, help="Number of time steps to run")
    parser.add_argument("--time-step", type=float, default=None, help="Integration time step")
    parser.add_argument("--stiffness", type=float, default=None, help="Spring stiffness")
    parser.add_argument("--drag", type=float, default=None, help="Linear drag coefficient")
    parser.add_argument("--wind", action="store_true", help="Turn the wind on")
    parser.add_argument("--no-gravity", action="store_true", help="Turn gravity off")
    parser.add_argument(
        "--no-constraint",
        action="store_true",
        help="Skip the spring over-stretch correction",
    )
    parser.add_argument(
        "--flap-every",
        type=int,
        default=0,
        help="Request a flap every N ticks (0 disables)",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=100,
        help="Log simulation stats every N ticks",
    )
    parser.add_argument("--load-state", type=Path, default=None, help="Resume from a .npz snapshot")
    parser.add_argument("--save-state", type=Path, default=None, help="Write a .npz snapshot at the end")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> SimulationConfig:
    config = SimulationConfig.from_env()
    changes: dict[str, object] = {}
    if args.time_step is not None:
        changes["time_step"] = args.time_step
    if args.stiffness is not None:
        changes["stiffness"] = args.stiffness
    if args.drag is not None:
        changes["drag"] = args.drag
    if args.wind:
        changes["wind_on"] = True
    if args.no_gravity:
        changes["gravity_on"] = False
    if args.no_constraint:
        changes["constraint_on"] = False
    return config.replace(**changes) if changes else config


def run(args: argparse.Namespace) -> int:
    try:
        config = build_config(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    if args.load_state is not None:
        state = ClothState.load(args.load_state)
        cloth = Cloth.from_state(state, config)
        logger.info("Resumed %dx%d cloth at tick %d", cloth.rows, cloth.columns, cloth.tick)
    else:
        cloth = Cloth(args.rows, args.columns, config)
        logger.info(
            "Cloth initialized: %d particles, %d springs",
            len(cloth.particles),
            len(cloth.springs),
        )

    start = time.perf_counter()
    for step in range(1, args.ticks + 1):
        if args.flap_every and step % args.flap_every == 0:
            cloth.request_flap()
        cloth.update()

        if args.report_every and step % args.report_every == 0:
            stats = cloth.stats()
            if stats.is_exploded:
                logger.error("Simulation became unstable at tick %d", stats.tick)
                return 1
            logger.info("%s", stats.summary())

    stats = cloth.stats()
    if stats.is_exploded:
        logger.error("Simulation became unstable at tick %d", stats.tick)
        return 1

    elapsed = time.perf_counter() - start
    logger.info("Ran %d ticks in %.2fs (%s)", args.ticks, elapsed, stats.summary())

    if args.save_state is not None:
        cloth.snapshot().save(args.save_state)
        logger.info("Saved snapshot to %s", args.save_state)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
