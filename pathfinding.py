'''
Emergency vehicle routing over the traffic grid

Two flavors of Dijkstra's shortest path:
* shortest_path - unit grid distance (the stored edge weight)
* congestion_aware_path - grid distance plus a penalty for the queue waiting
  at the intersection being entered
'''


# Standard Library:
from collections.abc import Callable, Sequence
import heapq  # For Dijkstra's priority queue
from itertools import pairwise
from math import inf

# Third-Party:
import networkx  # type: ignore

# Local:
from grid import check_node
from intersection import Intersection


# Vehicles queued per extra unit of congestion cost:
CONGESTION_DIVISOR = 5

WeightFunction = Callable[[int, int, dict], int]


def stored_weight(u: int, v: int, data: dict) -> int:
    return data.get('weight', 1)


def congestion_weight(total_queue: int) -> int:
    '''
    Cost of entering an intersection with total_queue vehicles waiting
    '''
    return 1 + total_queue // CONGESTION_DIVISOR


def dijkstra(graph: networkx.DiGraph, start_node: int, end_node: int,
             weight: WeightFunction=stored_weight, debug: bool=False) -> list[int]:
    '''
    Computes the shortest path from start_node to end_node using Dijkstra's
    algorithm.  Edge weights must be non-negative.
    Complexity is O((V + E) log V) where V is the number of vertices and E
    is the number of edges.

    Args:
    * graph: A NetworkX graph representing the traffic grid
    * start_node: The starting node id
    * end_node: The destination node id
    * weight: Function (u, v, edge_data) -> cost of traversing u -> v
    * debug: Print search progress

    Returns:
    * A list of node ids from start_node to end_node inclusive, or an empty
      list if end_node cannot be reached

    Equal-cost paths are resolved by heap order, so which one wins is not
    part of the contract.
    '''
    check_node(graph, start_node)
    check_node(graph, end_node)
    if debug:
        print(f'  [Dijkstra] Searching for path from {start_node} to {end_node}...')

    distances = {node: inf for node in graph.nodes}
    predecessors: dict[int, int | None] = {node: None for node in graph.nodes}
    distances[start_node] = 0

    pq = [(0, start_node)]  # (distance, node)
    while pq:
        dist, current_node = heapq.heappop(pq)

        if dist > distances[current_node]:
            continue  # Stale entry, a shorter path was already found

        if current_node == end_node:
            break

        for neighbor, data in graph[current_node].items():
            new_dist = dist + weight(current_node, neighbor, data)
            if new_dist < distances[neighbor]:
                distances[neighbor] = new_dist
                predecessors[neighbor] = current_node
                heapq.heappush(pq, (new_dist, neighbor))

    if distances[end_node] == inf:
        if debug:
            print(f'  [Dijkstra] No path from {start_node} to {end_node}')
        return []

    # Reconstruct the path
    path: list[int] = []
    current: int | None = end_node
    while current is not None:
        path.insert(0, current)
        current = predecessors[current]

    if debug:
        print(f'  [Dijkstra] Path found: {path}, cost: {distances[end_node]}')
    return path


def shortest_path(graph: networkx.DiGraph, start_node: int, end_node: int,
                  debug: bool=False) -> list[int]:
    '''
    Fewest-hops route using the stored unit edge weights
    '''
    return dijkstra(graph, start_node, end_node, debug=debug)


def congestion_snapshot(intersections: Sequence[Intersection]) -> dict[int, int]:
    '''
    Total queue per node at this instant
    '''
    return {i.node: i.total_queue for i in intersections}


def congestion_aware_path(graph: networkx.DiGraph, start_node: int, end_node: int,
                          intersections: Sequence[Intersection],
                          debug: bool=False) -> list[int]:
    '''
    Route that trades distance against the queues waiting at each
    intersection entered.  Entering node v costs 1 + total_queue(v) // 5,
    using queue totals captured once before the search begins.
    '''
    check_node(graph, start_node)
    check_node(graph, end_node)
    snapshot = congestion_snapshot(intersections)

    def weight(u: int, v: int, data: dict) -> int:
        return congestion_weight(snapshot.get(v, 0))

    return dijkstra(graph, start_node, end_node, weight=weight, debug=debug)


def path_cost(graph: networkx.DiGraph, path: Sequence[int],
              intersections: Sequence[Intersection] | None=None) -> int:
    '''
    Total cost of a path - unit distance, or congestion cost when
    intersections are given
    '''
    if intersections is None:
        return sum(stored_weight(u, v, graph.edges[u, v]) for u, v in pairwise(path))

    snapshot = congestion_snapshot(intersections)
    return sum(congestion_weight(snapshot[v]) for v in path[1:])
