#! /usr/bin/env python3.12
'''
Adaptive Traffic Signal Grid Simulation:
* R x C grid of intersections, each with four lanes (N, S, E, W)
* Each cycle every intersection splits its green time by queue length
* An ambulance crosses the grid in one cycle - intersections on its route
  give the ambulance's direction the whole cycle
* Reports arrivals, vehicles served and average queue length
'''


# Standard Library:
import argparse
from collections.abc import Callable
from datetime import datetime
import sys
from typing import Any

# Local:
import config
from config import SimConfig, is_int
from errors import GridSimError
from report import report_results
from simulation import run_simulation


def prompt(text: str, default: Any, cast: Callable[[str], Any]) -> Any:
    '''
    Ask for a value on the console, keeping the default on empty input
    '''
    while True:
        answer = input(f'{text} (default {default}): ').strip()
        if not answer:
            return default
        try:
            return cast(answer)
        except ValueError:
            print(f'Invalid value: {answer!r}')


def parse_args(argv: list[str] | None=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Adaptive traffic signal grid simulation')
    parser.add_argument('--size', choices=('small', 'medium', 'large'), default=config.GRID_SIZE,
                        help='Grid preset (default: %(default)s)')
    parser.add_argument('--rows', type=int, help='Grid rows (overrides preset)')
    parser.add_argument('--cols', type=int, help='Grid columns (overrides preset)')
    parser.add_argument('--cycles', type=int, help='Number of cycles (overrides preset)')
    parser.add_argument('--cycle-seconds', type=int, default=config.CYCLE_SECONDS,
                        help='Green time per intersection per cycle (default: %(default)s)')
    parser.add_argument('--service-rate', type=float, default=config.SERVICE_RATE,
                        help='Vehicles per second of green (default: %(default)s)')
    parser.add_argument('--max-arrival', type=int, default=config.MAX_ARRIVAL_PER_LANE,
                        help='Maximum arrivals per lane per cycle (default: %(default)s)')
    parser.add_argument('--seed', type=int, default=config.RANDOM_SEED,
                        help='Random seed (default: %(default)s)')
    parser.add_argument('--emergency-src', type=int, help='Ambulance start node (overrides preset)')
    parser.add_argument('--emergency-dest', type=int, help='Ambulance destination node (overrides preset)')
    parser.add_argument('--emergency-cycle', type=int, help='Cycle the ambulance crosses in (overrides preset)')
    parser.add_argument('--route-mode', choices=config.ROUTE_MODES, default=config.ROUTE_MODE,
                        help='Ambulance routing (default: %(default)s)')
    parser.add_argument('--no-emergency', action='store_true', help='Run without an ambulance')
    parser.add_argument('--interactive', action='store_true',
                        help='Prompt for grid size, cycle time and service rate')
    parser.add_argument('--quiet', action='store_true', help='Only print the summary')
    parser.add_argument('--debug', action='store_true', help='Print per-intersection details')
    parser.add_argument('--plot', action='store_true', help='Draw the final grid state')
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> SimConfig:
    overrides: dict[str, Any] = {
        'cycle_seconds': args.cycle_seconds,
        'service_rate': args.service_rate,
        'max_arrival_per_lane': args.max_arrival,
        'seed': args.seed,
        'route_mode': args.route_mode,
        'verbose': not args.quiet,
        'debug': args.debug,
    }
    for option, setting in (('rows', 'rows'), ('cols', 'cols'), ('cycles', 'num_cycles'),
                            ('emergency_src', 'emergency_src'),
                            ('emergency_dest', 'emergency_dest'),
                            ('emergency_cycle', 'emergency_cycle')):
        if (value := getattr(args, option)) is not None:
            overrides[setting] = value

    if args.interactive:
        env = config.get_environment(args.size)
        overrides['rows'] = prompt('Enter grid rows R', overrides.get('rows', env['rows']), int)
        overrides['cols'] = prompt('Enter grid cols C', overrides.get('cols', env['cols']), int)
        overrides['cycle_seconds'] = prompt('Enter cycle time per intersection in seconds',
                                            overrides['cycle_seconds'], int)
        overrides['service_rate'] = prompt('Enter service rate (vehicles per second when green)',
                                           overrides['service_rate'], float)

    sim_config = SimConfig.from_environment(args.size, **overrides)
    if args.no_emergency:
        sim_config.emergency_src = sim_config.emergency_dest = None
    else:
        # Preset endpoints that no longer fit a resized grid - use opposite corners
        nodes = sim_config.rows * sim_config.cols
        if not all(is_int(node) and 0 <= node < nodes
                   for node in (sim_config.emergency_src, sim_config.emergency_dest)):
            if args.emergency_src is None:
                sim_config.emergency_src = 0
            if args.emergency_dest is None:
                sim_config.emergency_dest = nodes - 1

        # Preset trigger cycle past a shortened run - dispatch in the last cycle
        if args.emergency_cycle is None and sim_config.emergency_cycle > sim_config.num_cycles:
            if sim_config.num_cycles >= 1:
                sim_config.emergency_cycle = sim_config.num_cycles
            else:
                sim_config.emergency_src = sim_config.emergency_dest = None

    return sim_config.validate()


def main(argv: list[str] | None=None) -> int:
    args = parse_args(argv)
    try:
        sim_config = build_config(args)
        print(f'Starting traffic grid simulation - {sim_config.rows}x{sim_config.cols} - at '
              f'{datetime.now():%Y-%m-%d %H:%M:%S} for {sim_config.num_cycles} cycles')
        run = run_simulation(sim_config)
    except GridSimError as exc:
        print(f'Error: {exc}', file=sys.stderr)
        return 2

    report_results(run.metrics, run.intersections)

    if args.plot:
        import matplotlib.pyplot as plt
        from visualize import draw_network

        draw_network(run.grid, run.intersections, run.emergency_route,
                     title=f'Traffic Grid after {run.metrics.cycles} cycles')
        plt.show()

    return 0


if __name__ == '__main__':
    # Change output encoding from Windows default of cp1252 to UTF-8:
    sys.stdout.reconfigure(encoding='utf-8')

    sys.exit(main())
