'''
Console output for the traffic grid simulation
'''


# Standard Library:
from collections.abc import Sequence
from typing import TYPE_CHECKING

# Third-Party:
import networkx  # type: ignore

# Local:
from grid import Direction
from intersection import Intersection
from pathfinding import path_cost

if TYPE_CHECKING:
    from simulation import CycleMetrics


def format_intersection(intersection: Intersection) -> str:
    lanes = ' '.join(f'{d.short}:{intersection.queues[d]}' for d in Direction)
    text = f'[Node {intersection.node}] ({lanes})'
    if intersection.green is not None:
        text += f' G:{intersection.green.short}'
        if intersection.preempted:
            text += '*'
    return text


def print_network_state(grid: networkx.DiGraph, intersections: Sequence[Intersection],
                        cycle: int) -> None:
    '''
    Dump every intersection's queues and green lane, laid out as the grid

    A '*' after the green lane marks an intersection preempted for the
    emergency vehicle.
    '''
    rows, cols = grid.graph['rows'], grid.graph['cols']
    print(f'\n=== Cycle {cycle} Network State ===')
    for r in range(rows):
        print('  '.join(format_intersection(intersections[r * cols + c]) for c in range(cols)))
    print('==============================')


def print_route_comparison(grid: networkx.DiGraph, intersections: Sequence[Intersection],
                           routes: dict[str, list[int]], chosen: str) -> None:
    '''
    Show both emergency routes side by side and which one is used
    '''
    print('\nEmergency Route Comparison')
    for mode, route in routes.items():
        marker = '->' if mode == chosen else '  '
        if not route:
            print(f'{marker} {mode:<10}  no route')
            continue
        print(f'{marker} {mode:<10}  {" -> ".join(map(str, route))}  '
              f'(hops: {path_cost(grid, route)}, '
              f'congestion cost: {path_cost(grid, route, intersections)})')


def report_results(metrics: 'CycleMetrics', intersections: Sequence[Intersection]) -> None:
    '''
    Basic reporting at conclusion of simulation
    '''
    print('\nTraffic Grid Summary')
    print(f'Cycles simulated: {metrics.cycles}')
    print(f'Vehicles arrived: {metrics.arrived}')
    print(f'Vehicles served: {metrics.served}')
    print(f'Vehicles still queued: {sum(i.total_queue for i in intersections)}')
    if metrics.cycles:
        print('Average queue per intersection per cycle: '
              f'{metrics.average_queue(len(intersections)):.2f}')
    else:
        print('No cycles simulated.')
