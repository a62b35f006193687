'''
Traffic Grid Cycle Simulation:
* Use time units in seconds - one SimPy timeout per signal cycle
* Every cycle, for every intersection (row-major):
    * Vehicles arrive on each lane (random 0 - max per lane)
    * Green time is split among the lanes in proportion to their queues,
      unless the emergency route preempts the intersection
    * Each lane discharges service_rate vehicles per green second
* The ambulance is routed across the grid in its trigger cycle using either
  the shortest or the congestion-aware path (both are always computed)
'''


# Standard Library:
from collections.abc import Generator, Sequence
from itertools import pairwise
import math
import random

# Third-Party:
import networkx  # type: ignore
import simpy  # type: ignore
import simpy.events  # type: ignore

# Local:
from config import SimConfig
from errors import InvalidConfiguration
from grid import Direction, build_grid, check_node, direction_between
from intersection import Intersection, create_intersections
from pathfinding import congestion_aware_path, shortest_path
from report import print_network_state, print_route_comparison
from signals import (allocate_green_times, apply_preemption, clear_preemption,
                     pick_green_direction, preempted_allocation)


# Tolerance so e.g. 0.1 * 30 still discharges 3 vehicles:
SERVICE_EPSILON = 1e-9


class CycleMetrics:
    '''
    Running totals across all simulated cycles
    '''
    def __init__(self) -> None:
        self.arrived = 0
        self.served = 0
        # Sum of every intersection's queue right after its service step:
        self.cumulative_queue_sum = 0
        self.cycles = 0

    def __repr__(self) -> str:
        return (f'CycleMetrics({self.arrived=}, {self.served=}, '
                f'{self.cumulative_queue_sum=}, {self.cycles=})')

    def average_queue(self, node_count: int) -> float:
        '''
        Mean post-service queue per intersection per cycle
        '''
        if not self.cycles or not node_count:
            return 0.0
        return self.cumulative_queue_sum / (node_count * self.cycles)


def service_capacity(service_rate: float, green_seconds: int) -> int:
    '''
    Whole vehicles a lane can discharge - fractions of a vehicle are dropped
    '''
    return math.floor(service_rate * green_seconds + SERVICE_EPSILON)


def check_cycle_settings(cycle_seconds: int, service_rate: float,
                         max_arrival_per_lane: int) -> None:
    if isinstance(cycle_seconds, bool) or not isinstance(cycle_seconds, int) or cycle_seconds < 1:
        raise InvalidConfiguration(f'Cycle duration must be at least 1 second, got: {cycle_seconds!r}')
    if isinstance(service_rate, bool) or not isinstance(service_rate, (int, float)) \
            or not service_rate >= 0 or not math.isfinite(service_rate):
        raise InvalidConfiguration('Service rate must be a finite non-negative number, '
                                   f'got: {service_rate!r}')
    if isinstance(max_arrival_per_lane, bool) or not isinstance(max_arrival_per_lane, int) \
            or max_arrival_per_lane < 0:
        raise InvalidConfiguration('Arrival bound must be a non-negative integer, '
                                   f'got: {max_arrival_per_lane!r}')


def run_cycle(grid: networkx.DiGraph, intersections: Sequence[Intersection],
              cycle_seconds: int, service_rate: float, max_arrival_per_lane: int,
              emergency_route: Sequence[int] | None, rng: random.Random,
              metrics: CycleMetrics, debug: bool=False) -> dict[int, dict[Direction, int]]:
    '''
    Simulate one signal cycle across the whole grid

    Args:
    * grid: Traffic grid from build_grid
    * intersections: One Intersection per node, indexed by node id
    * cycle_seconds: Green time shared by the four lanes (>= 1)
    * service_rate: Vehicles discharged per green second (>= 0)
    * max_arrival_per_lane: Arrivals per lane are drawn from 0 - this
    * emergency_route: Node ids the ambulance crosses this cycle, or None
    * rng: Random source - only randint() is used
    * metrics: Accumulator updated in place
    * debug: Print each intersection's green split

    Returns:
    * Green seconds per direction for every node id

    All arguments are checked before any queue is touched.
    '''
    check_cycle_settings(cycle_seconds, service_rate, max_arrival_per_lane)
    if len(intersections) != grid.number_of_nodes():
        raise InvalidConfiguration(f'Expected {grid.number_of_nodes()} intersections, '
                                   f'got: {len(intersections)}')
    for node in emergency_route or ():
        check_node(grid, node)
    for current_node, next_node in pairwise(emergency_route or ()):
        direction_between(grid, current_node, next_node)

    # Arrivals:
    for intersection in intersections:
        for direction in Direction:
            arrivals = rng.randint(0, max_arrival_per_lane)
            intersection.arrive(direction, arrivals)
            metrics.arrived += arrivals

    # Preemption:
    clear_preemption(intersections)
    if emergency_route:
        apply_preemption(grid, intersections, emergency_route)

    # Allocation and service:
    allocations = {}
    for intersection in intersections:
        times = preempted_allocation(intersection, cycle_seconds)
        if times is None:
            times = allocate_green_times(intersection, cycle_seconds)
            intersection.green = pick_green_direction(times)
        else:
            intersection.green = pick_green_direction(times)
            if debug:
                print(f'  Intersection {intersection.node} preempted - '
                      f'{intersection.green.name} gets {cycle_seconds}s')
        intersection.green_times = times
        allocations[intersection.node] = times

        for direction in Direction:
            served = intersection.discharge(direction, service_capacity(service_rate, times[direction]))
            metrics.served += served

        metrics.cumulative_queue_sum += intersection.total_queue
        if debug:
            split = ' '.join(f'{d.short}:{times[d]}s' for d in Direction)
            print(f'  Intersection {intersection.node} green split {split} -> {intersection!r}')

    metrics.cycles += 1
    return allocations


def plan_emergency_route(grid: networkx.DiGraph, intersections: Sequence[Intersection],
                         start_node: int, end_node: int,
                         debug: bool=False) -> dict[str, list[int]]:
    '''
    Compute both emergency routes from the current queue state

    Returns:
    * {'shortest': [...], 'congestion': [...]} - the caller picks one
    '''
    return {
        'shortest': shortest_path(grid, start_node, end_node, debug=debug),
        'congestion': congestion_aware_path(grid, start_node, end_node, intersections, debug=debug),
    }


class SimulationRun:
    '''
    Everything a finished simulation leaves behind for reporting
    '''
    def __init__(self, config: SimConfig, grid: networkx.DiGraph,
                 intersections: list[Intersection], metrics: CycleMetrics) -> None:
        self.config = config
        self.grid = grid
        self.intersections = intersections
        self.metrics = metrics
        self.emergency_route: list[int] = []
        # Total vehicles queued in the grid after each cycle:
        self.queue_history: list[int] = []

    def __repr__(self) -> str:
        return f'SimulationRun({self.config!r}, {self.metrics!r})'


def signal_controller(env: simpy.Environment, run: SimulationRun,
                      rng: random.Random) -> Generator[simpy.events.Event, None, None]:
    '''
    Drive the grid one signal cycle at a time while simulation running
    '''
    config = run.config
    for cycle in range(1, config.num_cycles + 1):
        route = None
        if config.emergency and cycle == config.emergency_cycle:
            routes = plan_emergency_route(run.grid, run.intersections, config.emergency_src,
                                          config.emergency_dest, debug=config.debug)
            route = routes[config.route_mode]
            run.emergency_route = route
            if config.verbose:
                print(f'{env.now:05.1f}s: Ambulance dispatched from {config.emergency_src} '
                      f'to {config.emergency_dest} using {config.route_mode} route')
                print_route_comparison(run.grid, run.intersections, routes, config.route_mode)

        if config.debug:
            print(f'{env.now:05.1f}s: Cycle {cycle} starting')
        run_cycle(run.grid, run.intersections, config.cycle_seconds, config.service_rate,
                  config.max_arrival_per_lane, route, rng, run.metrics, debug=config.debug)
        run.queue_history.append(sum(i.total_queue for i in run.intersections))

        yield env.timeout(config.cycle_seconds)

        if config.verbose:
            print(f'{env.now:05.1f}s: Cycle {cycle} complete')
            print_network_state(run.grid, run.intersections, cycle)


def run_simulation(config: SimConfig) -> SimulationRun:
    '''
    Build the grid, seed the starting queues and run every cycle

    The same seed and configuration always produce the same run.
    '''
    config.validate()
    rng = random.Random(config.seed)
    grid = build_grid(config.rows, config.cols)
    intersections = create_intersections(grid, rng, config.initial_queue_max)
    run = SimulationRun(config, grid, intersections, CycleMetrics())

    if config.verbose:
        print('\nInitial network state:')
        print_network_state(grid, intersections, 0)

    env = simpy.Environment()
    env.process(signal_controller(env, run, rng))
    env.run()

    return run
