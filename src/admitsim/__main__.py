"""Command line entry point: ``python -m admitsim``."""
from __future__ import annotations

import argparse
import logging
import sys

from admitsim.config import SimulationConfig
from admitsim.log_cfg import LogConfig
from admitsim.report import collect_run_data, format_status, plot_occupancy
from admitsim.runner import run
from admitsim.simulation import Simulation
from admitsim.users import parse_priority


def parse_args(argv=None) -> argparse.Namespace:
    defaults = SimulationConfig()
    parser = argparse.ArgumentParser(
        prog="admitsim",
        description="Simulate users queueing for a server with a fixed number of connection slots.",
    )
    parser.add_argument("--max-connections", type=int, default=defaults.max_connections,
                        help="number of connection slots (default: %(default)s)")
    parser.add_argument("--ticks", type=int, default=50, help="ticks to simulate (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--arrival-chance", type=float, default=defaults.arrival_chance)
    parser.add_argument("--arrival-priorities", nargs=2, type=parse_priority, default=defaults.arrival_priorities,
                        metavar=("LOW", "HIGH"),
                        help="priority range of ordinary arrivals, as numbers or names (default: 2 3)")
    parser.add_argument("--vip-chance", type=float, default=defaults.vip_chance)
    parser.add_argument("--disconnect-chance", type=float, default=defaults.disconnect_chance)
    parser.add_argument("--status", action="store_true", help="print the status block after every tick")
    parser.add_argument("--quiet", action="store_true", help="do not log individual events")
    parser.add_argument("--verbose", action="store_true", help="also log run bookkeeping at DEBUG level")
    parser.add_argument("--log-file", default=None, help="also write the event log to this file")
    parser.add_argument("--plot", default=None, metavar="PNG", help="save an occupancy chart to this file")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        config = SimulationConfig(
            max_connections=args.max_connections,
            arrival_chance=args.arrival_chance,
            arrival_priorities=tuple(args.arrival_priorities),
            vip_chance=args.vip_chance,
            disconnect_chance=args.disconnect_chance,
            seed=args.seed,
        )
    except (TypeError, ValueError) as exc:
        print(f"admitsim: {exc}", file=sys.stderr)
        return 2

    LogConfig(
        enabled=not args.quiet,
        console_level=logging.DEBUG if args.verbose else logging.INFO,
        file_path=args.log_file,
    )

    print("--- Server User Priority Queue Simulator ---")
    print(f"Maximum number of concurrent connections: {config.max_connections}")
    print("Priority Levels: 1 (High), 2 (Normal), 3 (Low)")

    sim = Simulation(config, print_status=args.status)
    run(sim, ticks=args.ticks)

    print(format_status(sim.controller))
    summary = collect_run_data(sim).environment
    print(f"Ticks: {summary['ticks']}  Events: {summary['counts']}")
    print(f"Average utilization: {summary['average_utilization']:.1%}  "
          f"Average queue length: {summary['average_queue_length']:.2f}")

    if args.plot:
        ax = plot_occupancy(sim)
        ax.figure.savefig(args.plot)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
