"""CLI entry point."""

from __future__ import annotations

import argparse

from . import config
from .config import ConfigError, SimulationConfig
from .simulation import run_simulation


def main() -> None:
    parser = argparse.ArgumentParser(description="TerraSim evolution simulation")
    parser.add_argument("--world-size", type=int, default=config.WORLD_SIZE)
    parser.add_argument("--max-height", type=float, default=config.WORLD_MAX_HEIGHT)
    parser.add_argument("--seed", type=int, default=None, help="Defaults to the wall clock")
    parser.add_argument("--initial-pop", type=int, default=config.STARTING_ORGANISMS)
    parser.add_argument("--max-life-span", type=int, default=config.MAX_LIFE_SPAN)
    parser.add_argument("--mutation-prob", type=float, default=config.DELIBERATE_MUTATION_PROBABILITY)
    parser.add_argument("--regions", type=int, default=config.REGION_COUNT, help="Must be a perfect square")
    parser.add_argument(
        "--strategy",
        type=str,
        default=config.STRATEGY_DIRECT_OFFSET,
        help=f"One of {', '.join(config.STRATEGY_NAMES)} (or A-D)",
    )
    parser.add_argument("--rounds", type=int, default=None, help="Stop after N rounds")
    parser.add_argument("--log-every", type=int, default=1)
    parser.add_argument("--csv", type=str, default=None, help="Write per-round stats to CSV")
    parser.add_argument("--no-summary", action="store_true", help="Disable summary output")
    args = parser.parse_args()

    try:
        cfg = SimulationConfig(
            world_size=args.world_size,
            world_max_height=args.max_height,
            random_seed=args.seed,
            starting_organisms=args.initial_pop,
            max_life_span=args.max_life_span,
            deliberate_mutation_probability=args.mutation_prob,
            region_count=args.regions,
            strategy=args.strategy,
        )
    except ConfigError as exc:
        parser.error(str(exc))

    run_simulation(
        cfg,
        max_rounds=args.rounds,
        log_every=args.log_every,
        csv_path=args.csv,
        summary=not args.no_summary,
    )


if __name__ == "__main__":
    main()
