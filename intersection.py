'''
Intersection queue model - one traffic light with four directional lanes
'''


# Standard Library:
import random

# Third-Party:
import networkx  # type: ignore

# Local:
from grid import Direction


class Intersection:
    '''
    Represent an intersection in the traffic grid

    Tracks the number of vehicles queued on each lane (N, S, E, W), which
    lane was given the most green time last cycle, the last green time split
    and the emergency preemption flags for the current cycle.
    '''
    def __init__(self, node: int, row: int, col: int,
                 queues: dict[Direction, int] | None=None) -> None:
        self.node = node
        self.row = row
        self.col = col
        self.queues = {direction: 0 for direction in Direction}
        if queues:
            for direction, count in queues.items():
                self.set_queue(direction, count)
        # Reporting only - set each cycle:
        self.green: Direction | None = None
        self.green_times: dict[Direction, int] = {}
        # Reset at the start of every cycle:
        self.preempt = {direction: False for direction in Direction}

    def __repr__(self) -> str:
        lanes = ' '.join(f'{d.short}:{self.queues[d]}' for d in Direction)
        return f'Intersection({self.node}, {lanes})'

    @property
    def total_queue(self) -> int:
        return sum(self.queues.values())

    @property
    def preempted(self) -> bool:
        return any(self.preempt.values())

    def set_queue(self, direction: Direction, count: int) -> None:
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f'Queue length must be a non-negative integer, got: {count!r}')
        self.queues[direction] = count

    def arrive(self, direction: Direction, count: int) -> None:
        self.set_queue(direction, self.queues[direction] + count)

    def discharge(self, direction: Direction, capacity: int) -> int:
        '''
        Release up to capacity vehicles from a lane, return how many left
        '''
        served = min(capacity, self.queues[direction])
        self.queues[direction] -= served
        return served


def create_intersections(grid: networkx.DiGraph, rng: random.Random | None=None,
                         max_initial: int=0) -> list[Intersection]:
    '''
    Create one Intersection per grid node, indexed by node id

    When rng is given each lane starts with a random queue in
    [0, max_initial], drawn row-major in N, S, E, W order.
    '''
    if max_initial < 0:
        raise ValueError(f'Initial queue bound must be non-negative, got: {max_initial}')

    intersections = []
    for node in sorted(grid.nodes):
        attrs = grid.nodes[node]
        intersection = Intersection(node, attrs['row'], attrs['col'])
        if rng is not None:
            for direction in Direction:
                intersection.set_queue(direction, rng.randint(0, max_initial))
        intersections.append(intersection)

    return intersections
