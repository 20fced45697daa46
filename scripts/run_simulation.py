"""Run the elevator simulation in the terminal, printing one frame per tick."""
from __future__ import annotations

import argparse
import logging
import time
from dataclasses import asdict
from typing import List, Optional

from simulation import ConfigurationError, Simulation, load_run_config, render


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    # Positionals stay strings; RunConfig does the parsing.
    parser.add_argument("floors", nargs="?", help="Number of floors (default 10)")
    parser.add_argument("elevators", nargs="?", help="Number of elevators (default 2)")
    parser.add_argument("steps", nargs="?", help="Number of ticks to simulate (default 2000)")
    parser.add_argument("--dispatcher", help="Dispatch policy: basic or fcfs (default basic)")
    parser.add_argument("--seed", dest="random_seed", help="Seed for the people generator")
    parser.add_argument("--spawn-interval", help="Ticks between new people (default 3)")
    parser.add_argument("--delay", dest="tick_delay", help="Seconds to pause between ticks (default 0.025)")
    parser.add_argument("--quiet", action="store_true", help="Only print the final metrics")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default WARNING)",
    )
    return parser


def run_simulation(simulation: Simulation, steps: int, delay: float, quiet: bool = False) -> None:
    if not quiet:
        simulation.on_event("tick", lambda snapshot: print(render(snapshot), end="\n\n"))
    for _ in range(steps):
        simulation.step()
        if delay:
            time.sleep(delay)


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_run_config(
            floors=args.floors,
            elevators=args.elevators,
            steps=args.steps,
            dispatcher=args.dispatcher,
            spawn_interval=args.spawn_interval,
            tick_delay=args.tick_delay,
            random_seed=args.random_seed,
        )
    except ConfigurationError as exc:
        parser.error(str(exc))

    simulation = Simulation.from_config(config)
    run_simulation(simulation, config.steps, config.tick_delay, quiet=args.quiet)

    final_metrics = asdict(simulation.metrics.snapshot())
    print(f"Dispatcher: {config.dispatcher}")
    print(f"Duration: {config.steps} ticks")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
