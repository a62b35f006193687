'''
Adaptive traffic signal timing:
* Green-time allocation - split the cycle among the four lanes in proportion
  to their queues, every lane with traffic gets at least one second
* Emergency preemption - an intersection on the emergency route gives the
  whole cycle to the direction the emergency vehicle leaves through
'''


# Standard Library:
from collections.abc import Sequence
from itertools import pairwise
import math

# Third-Party:
import networkx  # type: ignore

# Local:
from errors import InvalidConfiguration
from grid import Direction, check_node, direction_between
from intersection import Intersection


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding - 2.5 must become 3 here
    return math.floor(value + 0.5)


def allocate_green_times(intersection: Intersection, cycle_seconds: int) -> dict[Direction, int]:
    '''
    Split cycle_seconds among the four lanes of an intersection

    Args:
    * intersection: Intersection whose queues drive the split
    * cycle_seconds: Total cycle duration T in seconds (T >= 0)

    Returns:
    * Green seconds per Direction, non-negative and summing exactly to T

    Algorithm:
    1) No traffic - T // 4 each, remainder to North
    2) Otherwise max(1, round(queue share * T)) per lane
    3) Correct rounding drift one second at a time:
       * Over T - take from the lane with the smallest queue whose allocation
         is above 1 (ties go to the first lane in N, S, E, W order)
       * Under T - give to the lane with the largest queue (same tie rule)
    '''
    if isinstance(cycle_seconds, bool) or not isinstance(cycle_seconds, int) or cycle_seconds < 0:
        raise InvalidConfiguration(f'Cycle duration must be a non-negative integer, got: {cycle_seconds!r}')

    queues = intersection.queues
    total = intersection.total_queue

    if total == 0:
        times = {direction: cycle_seconds // 4 for direction in Direction}
        times[Direction.NORTH] += cycle_seconds % 4
        return times

    times = {
        direction: max(1, round_half_up(queues[direction] / total * cycle_seconds))
        for direction in Direction
    }
    assigned = sum(times.values())

    floor = 1
    while assigned > cycle_seconds:
        candidates = [d for d in Direction if times[d] > floor]
        if not candidates:
            # Only reachable for T < 4:  minimum of one second no longer fits
            floor = 0
            continue
        # min() keeps the first of equal queues - N, S, E, W order
        direction = min(candidates, key=lambda d: queues[d])
        times[direction] -= 1
        assigned -= 1

    while assigned < cycle_seconds:
        direction = max(Direction, key=lambda d: queues[d])
        times[direction] += 1
        assigned += 1

    return times


def pick_green_direction(times: dict[Direction, int]) -> Direction:
    '''
    Lane with the most green time, first in N, S, E, W order on ties
    '''
    return max(Direction, key=lambda d: times[d])


def clear_preemption(intersections: Sequence[Intersection]) -> None:
    for intersection in intersections:
        for direction in Direction:
            intersection.preempt[direction] = False


def apply_preemption(graph: networkx.DiGraph, intersections: Sequence[Intersection],
                     route: Sequence[int]) -> set[int]:
    '''
    Flag each route intersection for the direction the emergency vehicle
    leaves it through

    For every consecutive (u, v) on the route, u is flagged for the compass
    direction u -> v.  Returns the ids of the preempted intersections.
    '''
    for node in route:
        check_node(graph, node)

    preempted = set()
    for current_node, next_node in pairwise(route):
        direction = direction_between(graph, current_node, next_node)
        intersections[current_node].preempt[direction] = True
        preempted.add(current_node)

    return preempted


def preempted_allocation(intersection: Intersection,
                         cycle_seconds: int) -> dict[Direction, int] | None:
    '''
    Whole cycle to the first flagged direction, or None if not preempted

    Only one direction can be honored per cycle - a route that crosses the
    same intersection twice keeps the first flag in N, S, E, W order.
    '''
    for direction in Direction:
        if intersection.preempt[direction]:
            times = {d: 0 for d in Direction}
            times[direction] = cycle_seconds
            return times

    return None
